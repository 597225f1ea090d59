"""Configuration management for the annotation export pipeline."""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class InputConfig(BaseModel):
    """Configuration for annotated input documents."""

    input_path: Path = Path("data/annotated")  # File or directory
    pattern: str = "*.txt"  # Glob used when input_path is a directory
    encoding: str = "utf-8"

    @field_validator("input_path", mode="before")
    @classmethod
    def convert_to_path(cls, v):
        """Convert string to Path."""
        return Path(v) if isinstance(v, str) else v


class VerbIndexConfig(BaseModel):
    """Configuration for the verb index used to polish verbs."""

    path: Optional[Path] = None
    polish: bool = Field(default=True, description="Resolve verbs with a single index entry")

    @field_validator("path", mode="before")
    @classmethod
    def convert_to_path(cls, v):
        """Convert string to Path."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v


class OutputConfig(BaseModel):
    """Configuration for export output."""

    output_path: Path = Path("output/words.csv")
    format: Literal["csv", "json"] = "csv"
    include_children: bool = True  # Export sub-words of compounds as rows
    encoding: str = "utf-8"

    @field_validator("output_path", mode="before")
    @classmethod
    def convert_to_path(cls, v):
        """Convert string to Path."""
        return Path(v) if isinstance(v, str) else v


class Config(BaseModel):
    """Main configuration for the annotation export pipeline."""

    input: InputConfig = Field(default_factory=InputConfig)
    verb_index: VerbIndexConfig = Field(default_factory=VerbIndexConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        data = self.model_dump(mode="json")
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True)
