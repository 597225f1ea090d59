"""Data models for annotated Tibetan documents."""

import re
from dataclasses import dataclass, field
from typing import Any, Optional

TEXT = "text"
WORD = "word"

# Separators inside a POS expression: disjunction, transform, modifiers
POS_SEPARATORS = re.compile(r"\|+|->|,")
TENSE_SEPARATORS = re.compile(r"[|,/]")


def _tag_set(value: str, separators: re.Pattern) -> frozenset[str]:
    return frozenset(
        tag.strip().lower() for tag in separators.split(value or "") if tag.strip()
    )


@dataclass
class Analysis:
    """Linguistic annotation attached to a word unit."""

    full_form: str = ""
    part_of_speech: str = ""
    tense: str = ""
    root: str = ""
    definition: str = ""
    verb_id: Optional[str] = None
    is_polished: bool = False

    @property
    def pos_tags(self) -> frozenset[str]:
        """Tags named by the POS expression ("n|adj" -> {"n", "adj"})."""
        return _tag_set(self.part_of_speech, POS_SEPARATORS)

    @property
    def tense_tags(self) -> frozenset[str]:
        """Tense and modifier tokens ("hon,past|future" -> {"hon", "past", "future"})."""
        return _tag_set(self.tense, TENSE_SEPARATORS)

    @property
    def is_honorific(self) -> bool:
        return "hon" in self.pos_tags or "hon" in self.tense_tags

    @property
    def is_verb(self) -> bool:
        return bool({"v", "vd", "vnd"} & self.pos_tags)

    def semantic_key(self) -> tuple:
        """Key under which two analyses are considered equivalent.

        Tag order inside the POS and tense fields is ignored, surrounding
        whitespace is ignored and an absent verb id equals an empty one.
        """
        return (
            self.pos_tags,
            self.tense_tags,
            self.full_form.strip(),
            self.root.strip(),
            " ".join(self.definition.split()),
            self.verb_id or "",
            self.is_polished,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for output."""
        return {
            "full_form": self.full_form,
            "part_of_speech": self.part_of_speech,
            "tense": self.tense,
            "root": self.root,
            "definition": self.definition,
            "verb_id": self.verb_id,
            "is_polished": self.is_polished,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Analysis":
        """Create an Analysis from a dictionary."""
        return cls(
            full_form=data.get("full_form", ""),
            part_of_speech=data.get("part_of_speech", ""),
            tense=data.get("tense", ""),
            root=data.get("root", ""),
            definition=data.get("definition", ""),
            verb_id=data.get("verb_id"),
            is_polished=bool(data.get("is_polished", False)),
        )


@dataclass
class Unit:
    """An atomic span of a line: plain text or an analyzed word.

    Word units may be decomposed into ``children`` (sub-words plus the
    connective text between them); their concatenated ``surface_text``
    equals the parent's.
    """

    kind: str
    surface_text: str
    analysis: Optional[Analysis] = None
    children: list["Unit"] = field(default_factory=list)

    @classmethod
    def text(cls, surface_text: str) -> "Unit":
        return cls(kind=TEXT, surface_text=surface_text)

    @classmethod
    def word(
        cls,
        surface_text: str,
        analysis: Analysis,
        children: Optional[list["Unit"]] = None,
    ) -> "Unit":
        return cls(
            kind=WORD,
            surface_text=surface_text,
            analysis=analysis,
            children=list(children or []),
        )

    @property
    def is_word(self) -> bool:
        return self.kind == WORD

    @property
    def word_children(self) -> list["Unit"]:
        return [child for child in self.children if child.is_word]

    def to_dict(self) -> dict:
        """Convert to dictionary for output."""
        result: dict[str, Any] = {"kind": self.kind, "surface_text": self.surface_text}
        if self.is_word:
            result["analysis"] = self.analysis.to_dict() if self.analysis else None
            result["children"] = [child.to_dict() for child in self.children]
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "Unit":
        """Create a Unit from a dictionary."""
        analysis = data.get("analysis")
        return cls(
            kind=data.get("kind", TEXT),
            surface_text=data.get("surface_text", ""),
            analysis=Analysis.from_dict(analysis) if analysis else None,
            children=[cls.from_dict(child) for child in data.get("children", [])],
        )


@dataclass
class AnnotationNode:
    """One parsed annotation line placed in the compound-word tree."""

    surface_text: str
    raw_annotation: str
    analysis: Analysis
    depth: int = 0
    children: list["AnnotationNode"] = field(default_factory=list)
    # Children with connective text filled in, set by the hierarchy post-pass
    segments: list[Unit] = field(default_factory=list)

    def to_unit(self) -> Unit:
        """Convert to a word unit carrying the gap-filled children."""
        return Unit.word(self.surface_text, self.analysis, self.segments)


@dataclass
class Line:
    """A rendered line of a block."""

    units: list[Unit] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(unit.surface_text for unit in self.units)

    def to_dict(self) -> dict:
        return {"units": [unit.to_dict() for unit in self.units]}

    @classmethod
    def from_dict(cls, data: dict) -> "Line":
        return cls(units=[Unit.from_dict(unit) for unit in data.get("units", [])])


@dataclass
class Block:
    """One stanza: raw text paired with its analyzed lines.

    ``kind`` is "tibetan" for annotation blocks and "richtext" for free-text
    blocks found in analysis responses, which carry ``content`` instead.
    """

    raw_text: str
    lines: list[Line] = field(default_factory=list)
    kind: str = "tibetan"
    content: str = ""

    @property
    def words(self) -> list[Unit]:
        return [unit for line in self.lines for unit in line.units if unit.is_word]

    def to_dict(self) -> dict:
        """Convert to dictionary for output."""
        if self.kind == "richtext":
            return {"kind": self.kind, "content": self.content}
        return {
            "kind": self.kind,
            "raw_text": self.raw_text,
            "lines": [line.to_dict() for line in self.lines],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Block":
        """Create a Block from a dictionary."""
        return cls(
            raw_text=data.get("raw_text", ""),
            lines=[Line.from_dict(line) for line in data.get("lines", [])],
            kind=data.get("kind", "tibetan"),
            content=data.get("content", ""),
        )


@dataclass
class VerbEntry:
    """One verb-index entry for a verb form."""

    tense: str
    volition: Optional[str] = None
    hon: bool = False
    definition: str = ""
    original_word: str = ""
    id: str = ""
    source: str = ""  # Dictionary the entry came from

    @classmethod
    def from_dict(cls, data: dict) -> "VerbEntry":
        """Create a VerbEntry from a verb-index JSON record."""
        return cls(
            tense=data.get("tense", ""),
            volition=data.get("volition"),
            hon=bool(data.get("hon", False)),
            definition=data.get("definition", ""),
            original_word=data.get("original_word", ""),
            id=str(data.get("id", "")),
            source=data.get("dict", ""),
        )

    def to_dict(self) -> dict:
        return {
            "tense": self.tense,
            "volition": self.volition,
            "hon": self.hon,
            "definition": self.definition,
            "original_word": self.original_word,
            "id": self.id,
            "dict": self.source,
        }


@dataclass
class ReconcileMiss:
    """An annotated word that could not be located in its raw text."""

    surface_text: str
    cursor: int  # Position the search started from
