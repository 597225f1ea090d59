"""Assemble blocks and lines from annotated document text."""

import logging
from typing import Optional

from .grammar import find_blocks, find_richtext
from .hierarchy import build_hierarchy
from .models import Block, Line, ReconcileMiss, Unit
from .reconciler import reconcile

logger = logging.getLogger(__name__)


def group_lines(units: list[Unit]) -> list[Line]:
    """Regroup a unit stream into lines at the newlines of its text units.

    Word units never contain a newline and are appended as they are.

    Args:
        units: Units of one block in source order

    Returns:
        Lines; blank source lines become lines without units
    """
    lines: list[Line] = []
    current: list[Unit] = []

    for unit in units:
        if unit.is_word:
            current.append(unit)
            continue
        for i, part in enumerate(unit.surface_text.split("\n")):
            if i > 0:
                lines.append(Line(units=current))
                current = []
            if part:
                current.append(Unit.text(part))

    if current:
        lines.append(Line(units=current))
    return lines


class DocumentParser:
    """Parses annotated documents, remembering words that failed to align."""

    def __init__(self):
        self.misses: list[ReconcileMiss] = []

    def process_block(self, raw_text: str, analysis_text: str) -> Block:
        """Build one block from its raw text and annotation section.

        Args:
            raw_text: Stanza text between ``>>>`` and ``>>>>``
            analysis_text: Annotation lines between ``>>>>`` and ``>>>>>``

        Returns:
            The assembled Block
        """
        nodes = build_hierarchy(analysis_text, self.misses)
        units = reconcile(raw_text, nodes, self.misses)
        return Block(raw_text=raw_text, lines=group_lines(units))

    def parse(self, full_text: str) -> list[Block]:
        """Parse a full document into blocks.

        A document without any complete block is kept as one plain-text
        block when it is not blank.

        Args:
            full_text: Document text

        Returns:
            Blocks in document order
        """
        self.misses = []
        blocks = [
            self.process_block(raw_text, analysis_text)
            for _, raw_text, analysis_text in find_blocks(full_text)
        ]

        if not blocks:
            if not full_text.strip():
                return []
            logger.debug("No annotation blocks found, keeping document as plain text")
            return [Block(raw_text=full_text, lines=[Line(units=[Unit.text(full_text)])])]

        if self.misses:
            logger.warning(f"{len(self.misses)} annotated words could not be aligned")
        return blocks

    def parse_response(self, response_text: str) -> list[Block]:
        """Parse an analysis response mixing annotation and rich-text blocks.

        Args:
            response_text: Text holding ``>>>`` blocks and ``<RICHTEXT>`` blocks

        Returns:
            Blocks of both kinds in source order
        """
        self.misses = []
        found: list[tuple[int, Block]] = []

        for start, raw_text, analysis_text in find_blocks(response_text):
            found.append((start, self.process_block(raw_text.strip(), analysis_text.strip())))
        for start, content in find_richtext(response_text):
            found.append((start, Block(raw_text="", kind="richtext", content=content.strip())))

        found.sort(key=lambda item: item[0])
        return [block for _, block in found]


def parse_document(full_text: str, misses: Optional[list[ReconcileMiss]] = None) -> list[Block]:
    """Parse annotated document text into blocks.

    Args:
        full_text: Document text
        misses: Optional list extended with the words that failed to align

    Returns:
        Blocks in document order
    """
    parser = DocumentParser()
    blocks = parser.parse(full_text)
    if misses is not None:
        misses.extend(parser.misses)
    return blocks


def process_block(raw_text: str, analysis_text: str) -> Block:
    """Build one block from its raw text and annotation section."""
    return DocumentParser().process_block(raw_text, analysis_text)


def parse_response(response_text: str) -> list[Block]:
    """Parse an analysis response into annotation and rich-text blocks."""
    return DocumentParser().parse_response(response_text)
