"""Decode and encode the bracketed per-word annotation content."""

import logging
import re
from typing import Optional

from .grammar import (
    ANNOTATION_CONTENT_PATTERN,
    INDEXED_ID_PATTERN,
    LEGACY_ID_PATTERN,
    POLISHED_PATTERN,
    VERB_ID_RESERVED,
)
from .models import Analysis, Unit
from .tibetan import collapse_whitespace, leading_tibetan_run

logger = logging.getLogger(__name__)

DEFAULT_POS = "other"
INDENT = "\t"

DANGLING_COMMAS = re.compile(r"\s*,(\s*,)+\s*")


def split_top_level(tags: str) -> tuple[str, str]:
    """Split tags on the first comma not enclosed in parentheses.

    Args:
        tags: Content of the ``{...}`` segment

    Returns:
        (part_of_speech, modifiers); modifiers is "" without a top-level comma
    """
    depth = 0
    for i, char in enumerate(tags):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == "," and depth == 0:
            return tags[:i].strip(), tags[i + 1 :].strip()
    return tags.strip(), ""


def normalize_verb_id(verb_id: Optional[str]) -> str:
    """Make a verb-index id safe to write inside ``indexed(id:...)``.

    Reserved characters become "-" and whitespace runs a single space, so
    the written id decodes back to the same value.
    """
    return collapse_whitespace(VERB_ID_RESERVED.sub("-", verb_id or ""))


def _remove_token(value: str, span: tuple[int, int]) -> str:
    """Cut a token out of a comma-separated field and tidy its commas."""
    value = value[: span[0]] + value[span[1] :]
    value = DANGLING_COMMAS.sub(",", value)
    return value.strip().strip(",").strip()


def _extract_verb_id(pos: str, modifiers: str) -> tuple[str, str, Optional[str]]:
    """Pull an ``indexed(id:X)`` or legacy ``id:X`` reference out of the tags."""
    for pattern in (INDEXED_ID_PATTERN, LEGACY_ID_PATTERN):
        for field_name in ("pos", "modifiers"):
            value = pos if field_name == "pos" else modifiers
            match = pattern.search(value)
            if not match:
                continue
            value = _remove_token(value, match.span())
            if field_name == "pos":
                return value, modifiers, match.group(1)
            return pos, value, match.group(1)
    return pos, modifiers, None


def _strip_polished(value: str) -> tuple[str, bool]:
    match = POLISHED_PATTERN.search(value)
    if not match:
        return value, False
    return _remove_token(value, match.span()), True


def decode(content: str) -> Analysis:
    """Parse the content of an annotation's square brackets.

    Everything from the first ``;`` on is ignored. Without a ``{...}``
    segment only ``definition`` is populated and ``part_of_speech`` stays
    empty.

    Args:
        content: Text that appeared inside ``[...]``

    Returns:
        The decoded Analysis
    """
    content = content or ""
    if content.startswith("[") and content.endswith("]"):
        content = content[1:-1]
    content = content.split(";", 1)[0].strip()

    match = ANNOTATION_CONTENT_PATTERN.match(content)
    if not match:
        logger.debug(f"No tag segment in annotation content: {content!r}")
        return Analysis(definition=content)

    full_form = match.group(1).strip()
    pos, modifiers = split_top_level(match.group(2))

    pos, modifiers, verb_id = _extract_verb_id(pos, modifiers)
    pos, polished_pos = _strip_polished(pos)
    modifiers, polished_mod = _strip_polished(modifiers)

    rest = match.group(3).strip()
    root = leading_tibetan_run(rest)
    definition = rest[len(root) :].strip() if root else rest

    return Analysis(
        full_form=full_form,
        part_of_speech=pos,
        tense=modifiers,
        root=root,
        definition=definition,
        verb_id=verb_id,
        is_polished=verb_id is not None or polished_pos or polished_mod,
    )


def encode(analysis: Analysis, surface_text: str = "") -> str:
    """Serialize an Analysis into canonical annotation content.

    The result re-decodes to an equivalent Analysis; it is not guaranteed
    to be textually identical to whatever was decoded originally (modifiers
    are appended in a fixed order and whitespace is collapsed).

    Args:
        analysis: Analysis to serialize
        surface_text: The annotated word (not part of the content)

    Returns:
        The string that goes inside ``[...]``
    """
    final_pos = analysis.part_of_speech or DEFAULT_POS

    tense = (analysis.tense or "").strip().lower()
    if tense:
        present = {
            token.strip().lower() for token in re.split(r"[,|]", final_pos) if token.strip()
        }
        if tense not in present:
            final_pos += f",{tense}"

    verb_id = normalize_verb_id(analysis.verb_id)
    if verb_id:
        final_pos += f",indexed(id:{verb_id})"
    elif analysis.is_polished:
        final_pos += ",polished"

    trailing = f"{analysis.root or ''} {analysis.definition or ''}".strip()

    if analysis.full_form:
        result = f"{analysis.full_form}{{{final_pos}}} {trailing}"
    else:
        result = f"{{{final_pos}}} {trailing}"
    return collapse_whitespace(result)


def format_annotation_line(unit: Unit, depth: int = 0) -> str:
    """Render a word unit as one annotation line (without trailing newline)."""
    analysis = unit.analysis or Analysis()
    return f"{INDENT * depth}<{unit.surface_text}>[{encode(analysis, unit.surface_text)}]"
