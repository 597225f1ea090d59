"""Overlay annotated words onto the raw text they were taken from."""

import logging
from typing import Optional, Sequence

from .models import AnnotationNode, ReconcileMiss, Unit

logger = logging.getLogger(__name__)


def reconcile(
    raw_text: str,
    nodes: Sequence[AnnotationNode],
    misses: Optional[list[ReconcileMiss]] = None,
) -> list[Unit]:
    """Merge annotation nodes with raw text into an ordered unit sequence.

    Each node is searched for at or after the cursor left by the previous
    match, never from the start of the text, so repeated words resolve to
    successive occurrences. Characters not covered by any node become text
    units. A node that cannot be found is skipped and the cursor stays put.

    Args:
        raw_text: Source text the nodes were annotated from
        nodes: Nodes in annotation order
        misses: Optional list that receives a ReconcileMiss per skipped node

    Returns:
        Text and word units whose surface texts concatenate to raw_text when
        every node was found
    """
    units: list[Unit] = []
    cursor = 0

    for node in nodes:
        found = raw_text.find(node.surface_text, cursor) if node.surface_text else -1
        if found == -1:
            logger.warning(
                f"Annotated word {node.surface_text!r} not found in remaining text "
                f"(from offset {cursor})"
            )
            if misses is not None:
                misses.append(ReconcileMiss(surface_text=node.surface_text, cursor=cursor))
            continue

        if found > cursor:
            units.append(Unit.text(raw_text[cursor:found]))
        units.append(node.to_unit())
        cursor = found + len(node.surface_text)

    if cursor < len(raw_text):
        units.append(Unit.text(raw_text[cursor:]))

    return units
