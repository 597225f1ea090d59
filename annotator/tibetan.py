"""Tibetan script constants and small text helpers."""

import re


# Tibetan Unicode Constants
TIBETAN_RANGE = "\u0F00-\u0FFF"
TSHEG = "\u0F0B"  # ་
TIBETAN_SHAD = "\u0F0D"  # །
TIBETAN_DOUBLE_SHAD = "\u0F0E"  # ༎

# Nominalizing suffixes dropped when a verb form is not found verbatim
VERB_SUFFIXES = ("\u0F54", "\u0F56")  # པ, བ

LEADING_TIBETAN = re.compile(f"^([{TIBETAN_RANGE}]+)")
WHITESPACE_RUN = re.compile(r"\s+")


def leading_tibetan_run(text: str) -> str:
    """Return the maximal run of Tibetan-script characters at the start of text.

    Args:
        text: Input text (not stripped)

    Returns:
        The leading Tibetan run, or "" if text does not start with one
    """
    match = LEADING_TIBETAN.match(text)
    return match.group(1) if match else ""


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and strip the ends."""
    if not text:
        return ""
    return WHITESPACE_RUN.sub(" ", text).strip()


def verb_stems(text: str) -> list[str]:
    """Candidate stems for a verb form ending in a nominalizing suffix.

    For "ཀུམ་པ" this yields "ཀུམ་" then "ཀུམ" (the stem with its tsheg
    exposed and then removed).

    Args:
        text: Trimmed verb form

    Returns:
        Stems to try, in order; empty if text has no known suffix
    """
    stems = []
    for suffix in VERB_SUFFIXES:
        if not text.endswith(suffix):
            continue
        stem = text[: -len(suffix)]
        if stem:
            stems.append(stem)
        if stem.endswith(TSHEG) and len(stem) > 1:
            stems.append(stem[:-1])
    return stems
