"""Serialize blocks back into the annotation notation."""

from .codec import format_annotation_line
from .models import Block, Line, Unit


def _format_unit(unit: Unit, depth: int) -> list[str]:
    lines = [format_annotation_line(unit, depth)]
    for child in unit.word_children:
        lines.extend(_format_unit(child, depth + 1))
    return lines


def format_analysis(lines: list[Line]) -> str:
    """Render the annotation section of a block.

    Every word unit becomes one line, its sub-words follow with one more
    leading tab per nesting level. Text units are not written.

    Args:
        lines: Lines of a block

    Returns:
        Annotation lines, each terminated by a newline
    """
    output = []
    for line in lines:
        for unit in line.units:
            if unit.is_word:
                output.extend(_format_unit(unit, 0))
    return "".join(f"{line}\n" for line in output)


def block_raw_text(block: Block) -> str:
    """Reconstruct the raw stanza text from a block's lines."""
    return "\n".join(line.text for line in block.lines)


def serialize_block(block: Block) -> str:
    """Render one block in ``>>> raw >>>> analysis >>>>>`` notation."""
    if block.kind == "richtext":
        return f"<RICHTEXT>\n{block.content}\n</RICHTEXT>"
    return f">>>\n{block_raw_text(block)}\n>>>>\n{format_analysis(block.lines)}>>>>>"


def serialize_document(blocks: list[Block]) -> str:
    """Render a whole document, blocks separated by a blank line."""
    if not blocks:
        return ""
    return "\n\n".join(serialize_block(block) for block in blocks) + "\n"
