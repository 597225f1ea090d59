"""Copy-on-write edit operations on parsed blocks.

Every operation returns a new Block; only the line (and word) on the
edited path is copied, untouched lines are shared with the input block.
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence, Union

from .hierarchy import build_hierarchy
from .models import Analysis, Block, Line, Unit

logger = logging.getLogger(__name__)


def _replace_line(block: Block, line_index: int, units: list[Unit]) -> Block:
    lines = list(block.lines)
    lines[line_index] = Line(units=units)
    return replace(block, lines=lines)


def _split_around(unit: Unit, start_offset: int, selected_text: str, word: Unit) -> list[Unit]:
    """Split a text unit into [before, word, after], omitting empty parts."""
    text = unit.surface_text
    end = start_offset + len(selected_text)
    if start_offset < 0 or text[start_offset:end] != selected_text or not selected_text:
        raise ValueError(
            f"Selection {selected_text!r} at offset {start_offset} "
            f"does not match text {text!r}"
        )
    parts = []
    if text[:start_offset]:
        parts.append(Unit.text(text[:start_offset]))
    parts.append(word)
    if text[end:]:
        parts.append(Unit.text(text[end:]))
    return parts


def merge_text_units(units: list[Unit]) -> list[Unit]:
    """Merge runs of adjacent text units into single units."""
    merged: list[Unit] = []
    for unit in units:
        if merged and not merged[-1].is_word and not unit.is_word:
            merged[-1] = Unit.text(merged[-1].surface_text + unit.surface_text)
        else:
            merged.append(unit)
    return merged


def create_word(
    block: Block,
    line_index: int,
    unit_index: int,
    start_offset: int,
    selected_text: str,
    analysis: Analysis,
) -> Block:
    """Turn a selection inside a text unit into an analyzed word.

    Args:
        block: Block to edit
        line_index: Line holding the text unit
        unit_index: Position of the text unit in the line
        start_offset: Offset of the selection inside the text unit
        selected_text: Selected characters
        analysis: Analysis of the new word

    Returns:
        New block with the text unit split around the new word
    """
    units = list(block.lines[line_index].units)
    target = units[unit_index]
    if target.is_word:
        raise ValueError("Cannot create a word inside a word unit; use create_sub_word")

    word = Unit.word(selected_text, analysis)
    units[unit_index : unit_index + 1] = _split_around(target, start_offset, selected_text, word)
    return _replace_line(block, line_index, units)


def create_sub_word(
    block: Block,
    line_index: int,
    unit_index: int,
    start_offset: int,
    selected_text: str,
    analysis: Analysis,
) -> Block:
    """Add an analyzed sub-word inside a top-level word.

    The first sub-word splits the word's text; later ones split whichever
    text child contains ``start_offset`` (an offset into the parent word).
    Sub-words never receive children of their own.

    Returns:
        New block with the sub-word inserted
    """
    units = list(block.lines[line_index].units)
    parent = units[unit_index]
    if not parent.is_word:
        raise ValueError("Sub-words can only be added to word units")

    word = Unit.word(selected_text, analysis)
    children = list(parent.children) or [Unit.text(parent.surface_text)]

    position = 0
    for i, child in enumerate(children):
        end = position + len(child.surface_text)
        if position <= start_offset < end:
            if child.is_word:
                raise ValueError(
                    f"Offset {start_offset} falls inside sub-word {child.surface_text!r}"
                )
            children[i : i + 1] = _split_around(
                child, start_offset - position, selected_text, word
            )
            break
        position = end
    else:
        raise ValueError(f"Offset {start_offset} is outside word {parent.surface_text!r}")

    units[unit_index] = replace(parent, children=children)
    return _replace_line(block, line_index, units)


def _update_descendant(
    unit: Unit, path: Sequence[int], analysis: Analysis, text: Optional[str]
) -> Unit:
    if path:
        children = list(unit.children)
        children[path[0]] = _update_descendant(children[path[0]], path[1:], analysis, text)
        return replace(unit, children=children)

    if not unit.is_word:
        raise ValueError("Only word units carry an analysis")
    updated = replace(unit, analysis=analysis)
    if text is not None:
        updated.surface_text = text
    return updated


def update_analysis(
    block: Block,
    line_index: int,
    unit_index: int,
    analysis: Analysis,
    sub_index: Union[int, Sequence[int], None] = None,
    text: Optional[str] = None,
) -> Block:
    """Replace the analysis (and optionally the surface text) of a word.

    Args:
        block: Block to edit
        line_index: Line holding the word
        unit_index: Position of the word in the line
        analysis: New analysis
        sub_index: Position of a sub-word inside the word's children, or
            the path of child indices to a deeper sub-word
        text: New surface text, if changed

    Returns:
        New block with the updated word
    """
    if sub_index is None:
        path: Sequence[int] = ()
    elif isinstance(sub_index, int):
        path = (sub_index,)
    else:
        path = tuple(sub_index)

    units = list(block.lines[line_index].units)
    units[unit_index] = _update_descendant(units[unit_index], path, analysis, text)
    return _replace_line(block, line_index, units)


def delete_analysis(
    block: Block,
    line_index: int,
    unit_index: int,
    sub_index: Optional[int] = None,
) -> Block:
    """Turn a word (or sub-word) back into plain text.

    Adjacent text units created by the deletion are merged, both inside the
    parent word and across the line.

    Returns:
        New block without the analysis
    """
    units = list(block.lines[line_index].units)
    unit = units[unit_index]

    if sub_index is None:
        units[unit_index] = Unit.text(unit.surface_text)
    else:
        children = list(unit.children)
        children[sub_index] = Unit.text(children[sub_index].surface_text)
        if not any(child.is_word for child in children):
            children = []
        units[unit_index] = replace(unit, children=merge_text_units(children))

    return _replace_line(block, line_index, merge_text_units(units))


def parse_annotation_section(analysis_text: str) -> list[Unit]:
    """Parse a bare annotation section into word units, without raw text."""
    return [node.to_unit() for node in build_hierarchy(analysis_text)]


def rehydrate_lines(lines: list[Line], words: list[Unit]) -> list[Line]:
    """Swap the word units of existing lines for freshly parsed ones.

    Words are replaced in order; text units stay in place. Surplus old
    words are removed and leftover new words are appended to the last line.

    Args:
        lines: Current lines of a block
        words: Word units parsed from an edited annotation section

    Returns:
        New lines
    """
    queue = list(words)
    new_lines = []
    for line in lines:
        units = []
        for unit in line.units:
            if not unit.is_word:
                units.append(unit)
            elif queue:
                units.append(queue.pop(0))
        new_lines.append(Line(units=units))

    if queue:
        logger.debug(f"Appending {len(queue)} unplaced words to the last line")
        if new_lines:
            new_lines[-1] = Line(units=new_lines[-1].units + queue)
        else:
            new_lines.append(Line(units=queue))
    return new_lines
