"""Batch export of annotated documents to word tables."""

import logging
from pathlib import Path
from typing import Iterator, Optional

from tqdm import tqdm

from .config import Config
from .data import RowWriter
from .document import DocumentParser
from .models import Block, Unit
from .verbs import VerbIndex, polish_block

logger = logging.getLogger(__name__)

COLUMNS = [
    "File",
    "Block",
    "Line",
    "Position",
    "Depth",
    "Surface",
    "Full_Form",
    "Part_Of_Speech",
    "Tense",
    "Root",
    "Definition",
    "Verb_ID",
    "Polished",
]


def word_rows(
    blocks: list[Block], file_name: str = "", include_children: bool = True
) -> Iterator[dict]:
    """Flatten the word units of parsed blocks into export rows.

    Args:
        blocks: Parsed blocks
        file_name: Source document name written to every row
        include_children: Whether sub-words of compounds get their own rows

    Returns:
        Iterator of row dicts keyed by COLUMNS
    """

    def rows_for(unit: Unit, block_num: int, line_num: int, position: int, depth: int):
        analysis = unit.analysis
        yield {
            "File": file_name,
            "Block": block_num,
            "Line": line_num,
            "Position": position,
            "Depth": depth,
            "Surface": unit.surface_text,
            "Full_Form": analysis.full_form if analysis else "",
            "Part_Of_Speech": analysis.part_of_speech if analysis else "",
            "Tense": analysis.tense if analysis else "",
            "Root": analysis.root if analysis else "",
            "Definition": analysis.definition if analysis else "",
            "Verb_ID": (analysis.verb_id or "") if analysis else "",
            "Polished": analysis.is_polished if analysis else False,
        }
        if include_children:
            for sub_position, child in enumerate(unit.word_children, 1):
                yield from rows_for(child, block_num, line_num, sub_position, depth + 1)

    for block_num, block in enumerate(blocks, 1):
        for line_num, line in enumerate(block.lines, 1):
            words = [unit for unit in line.units if unit.is_word]
            for position, unit in enumerate(words, 1):
                yield from rows_for(unit, block_num, line_num, position, 0)


class ExportPipeline:
    """Pipeline exporting the analyzed words of annotated documents."""

    def __init__(self, config: Config, verb_index: Optional[VerbIndex] = None):
        """Initialize export pipeline.

        Args:
            config: Pipeline configuration
            verb_index: Verb index to polish verbs with; loaded from the
                configured path when not given
        """
        self.config = config
        self.parser = DocumentParser()
        self.miss_count = 0

        if verb_index is None and config.verb_index.path is not None:
            verb_index = VerbIndex.from_json(config.verb_index.path)
        self.verb_index = verb_index

    def input_files(self) -> list[Path]:
        """Resolve the configured input path to a sorted list of files."""
        input_path = self.config.input.input_path
        if not input_path.exists():
            raise FileNotFoundError(f"Input path not found: {input_path}")
        if input_path.is_file():
            return [input_path]
        return sorted(p for p in input_path.glob(self.config.input.pattern) if p.is_file())

    def process_text(self, text: str) -> list[Block]:
        """Parse one document and polish its verbs if an index is configured.

        Args:
            text: Document text

        Returns:
            Parsed (and polished) blocks
        """
        blocks = self.parser.parse(text)
        self.miss_count += len(self.parser.misses)
        if self.verb_index is not None and self.config.verb_index.polish:
            blocks = [polish_block(block, self.verb_index) for block in blocks]
        return blocks

    def run(self) -> int:
        """Run the export.

        Returns:
            Number of rows written
        """
        files = self.input_files()
        logger.info(f"Exporting {len(files)} documents to {self.config.output.output_path}")
        self.miss_count = 0

        with RowWriter(
            self.config.output.output_path,
            format=self.config.output.format,
            encoding=self.config.output.encoding,
            columns=COLUMNS,
        ) as writer:
            for path in tqdm(files, desc="Exporting"):
                text = path.read_text(encoding=self.config.input.encoding)
                blocks = self.process_text(text)
                writer.write_rows(
                    word_rows(blocks, path.name, self.config.output.include_children)
                )
            count = writer.count

        if self.miss_count:
            logger.warning(f"{self.miss_count} annotated words could not be aligned")
        logger.info(f"Wrote {count} rows")
        return count


def run_pipeline(config: Config) -> int:
    """Convenience wrapper running an ExportPipeline."""
    return ExportPipeline(config).run()
