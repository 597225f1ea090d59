"""Build the compound-word tree from an annotation section."""

import logging
from typing import Iterator, Optional

from .codec import decode
from .grammar import closes_annotation, is_annotation_start, match_annotation_line
from .models import AnnotationNode, ReconcileMiss
from .reconciler import reconcile

logger = logging.getLogger(__name__)

IDLE = "idle"
BUFFERING = "buffering"


class HierarchyBuilder:
    """Turns tab-indented annotation lines into a tree of AnnotationNodes.

    The scanner has two states. While ``idle`` every non-blank physical line
    is a candidate annotation line; a line that opens an annotation
    (``<word>[``) but does not end with ``]`` switches to ``buffering``, and
    subsequent physical lines (blank ones included) are joined with ``\\n``
    until one ends with ``]``.
    """

    def __init__(self, misses: Optional[list[ReconcileMiss]] = None):
        self.misses = misses
        self.state = IDLE
        self._buffer: list[str] = []

    def logical_lines(self, analysis_text: str) -> Iterator[str]:
        """Yield complete logical annotation lines.

        Args:
            analysis_text: Annotation section of a block

        Returns:
            Iterator over logical lines (multi-line content joined by newlines)
        """
        self.state = IDLE
        self._buffer = []

        for line in analysis_text.split("\n"):
            if self.state == BUFFERING:
                self._buffer.append(line)
                if closes_annotation(line):
                    yield "\n".join(self._buffer)
                    self._buffer = []
                    self.state = IDLE
                continue

            if not line.strip():
                continue

            if is_annotation_start(line) and not closes_annotation(line):
                self._buffer = [line]
                self.state = BUFFERING
                continue

            yield line

        if self.state == BUFFERING:
            logger.warning(
                f"Unterminated annotation dropped: {self._buffer[0].strip()!r}"
            )
            self._buffer = []
            self.state = IDLE

    def build(self, analysis_text: str) -> list[AnnotationNode]:
        """Parse an annotation section into root nodes.

        Depth (leading tab count) decides placement: open nodes with a depth
        greater than or equal to the current line's are closed first, then the
        node is attached to the remaining top of the stack, or becomes a root.

        Args:
            analysis_text: Annotation section of a block

        Returns:
            Root AnnotationNodes with gap-filled ``segments``
        """
        roots: list[AnnotationNode] = []
        stack: list[AnnotationNode] = []

        for line in self.logical_lines(analysis_text):
            parsed = match_annotation_line(line)
            if parsed is None:
                logger.debug(f"Skipping non-annotation line: {line!r}")
                continue

            depth, word, content = parsed
            node = AnnotationNode(
                surface_text=word,
                raw_annotation=content,
                analysis=decode(content),
                depth=depth,
            )

            while stack and stack[-1].depth >= depth:
                stack.pop()

            if stack:
                stack[-1].children.append(node)
            else:
                roots.append(node)
            stack.append(node)

        fill_segments(roots, self.misses)
        return roots


def fill_segments(
    nodes: list[AnnotationNode], misses: Optional[list[ReconcileMiss]] = None
) -> None:
    """Reconcile every compound against its children, deepest first.

    This inserts the connective text (typically tshegs) between the
    analyzed sub-words of a compound.
    """
    for node in nodes:
        if node.children:
            fill_segments(node.children, misses)
            node.segments = reconcile(node.surface_text, node.children, misses)


def build_hierarchy(
    analysis_text: str, misses: Optional[list[ReconcileMiss]] = None
) -> list[AnnotationNode]:
    """Parse an annotation section into a tree of AnnotationNodes."""
    return HierarchyBuilder(misses).build(analysis_text)
