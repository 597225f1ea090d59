"""Lexical patterns of the annotation notation.

A document is a sequence of blocks::

    >>>
    <raw stanza text>
    >>>>
    <tab-indented annotation lines>
    >>>>>

and every annotation line has the form ``{tabs}<word>[content]`` where the
content is ``fullForm{pos,modifiers} root definition``.
"""

import re
from typing import Iterator, Optional

# Entire block: >>> raw text >>>> analysis >>>>>
BLOCK_PATTERN = re.compile(r">>>\s*([\s\S]*?)\s*>>>>\s*([\s\S]*?)\s*>>>>>")

# Free-text block in analysis responses
RICHTEXT_PATTERN = re.compile(r"<RICHTEXT>\s*([\s\S]*?)\s*</RICHTEXT>")

# Single logical annotation line: 1=tabs, 2=word, 3=content (may hold newlines)
ANNOTATION_LINE_PATTERN = re.compile(r"^(\t*)<([^>]+)>\[(.*)\]\s*$", re.DOTALL)

# Opening of an annotation line, used to start multi-line buffering
ANNOTATION_START_PATTERN = re.compile(r"^\t*<[^>]+>\[")

# Annotation content: 1=full form, 2=tags, 3=root and definition
ANNOTATION_CONTENT_PATTERN = re.compile(r"^(.*?)\{([^}]+)\}(.*)$", re.DOTALL)

# Verb-index references inside the tags; indexed ids may hold any
# character the notation does not reserve
INDEXED_ID_PATTERN = re.compile(r"indexed\(\s*id:([^(){}\[\];]+?)\s*\)")
VERB_ID_RESERVED = re.compile(r"[(){}\[\];]")
LEGACY_ID_PATTERN = re.compile(r"(?<![\w(])id:([A-Za-z0-9_-]+)")
POLISHED_PATTERN = re.compile(r"(?<![\w])polished(?![\w])")


def find_blocks(text: str) -> Iterator[tuple[int, str, str]]:
    """Find every annotation block in a document.

    Args:
        text: Full document text

    Returns:
        Iterator of (start_offset, raw_text, analysis_text) tuples
    """
    for match in BLOCK_PATTERN.finditer(text):
        yield match.start(), match.group(1), match.group(2)


def find_richtext(text: str) -> Iterator[tuple[int, str]]:
    """Find every ``<RICHTEXT>`` block as (start_offset, content)."""
    for match in RICHTEXT_PATTERN.finditer(text):
        yield match.start(), match.group(1)


def match_annotation_line(line: str) -> Optional[tuple[int, str, str]]:
    """Match a logical annotation line.

    Args:
        line: One logical line (may contain embedded newlines)

    Returns:
        (depth, word, content) or None if the line is not an annotation
    """
    match = ANNOTATION_LINE_PATTERN.match(line)
    if not match:
        return None
    return len(match.group(1)), match.group(2), match.group(3)


def is_annotation_start(line: str) -> bool:
    return ANNOTATION_START_PATTERN.match(line) is not None


def closes_annotation(line: str) -> bool:
    """Check whether a physical line ends a bracketed annotation."""
    return line.strip().endswith("]")
