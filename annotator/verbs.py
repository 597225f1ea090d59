"""Verb index lookup and merging of resolved verb entries into analyses."""

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Mapping, Optional, Union

from .codec import normalize_verb_id
from .models import Analysis, Block, Line, Unit, VerbEntry
from .tibetan import verb_stems

logger = logging.getLogger(__name__)

# Display order of tense options
TENSE_ORDER = {"present": 1, "past": 2, "future": 3, "imperative": 4}

# Index tense names -> annotation tense modifiers
TENSE_MODIFIERS = {
    "present": "",
    "past": "past",
    "future": "future",
    "imperative": "imp",
}

VOLITION_TAGS = {"vd", "vnd"}


def _score(entry: VerbEntry) -> int:
    """Rank entries: explicit volition first, then number of tenses."""
    score = 0
    if entry.volition and entry.volition != "None":
        score += 10
    score += len([t for t in entry.tense.replace("|", "/").split("/") if t.strip()])
    return score


class VerbIndex:
    """Read-only verb dictionary keyed by verb form.

    Instances are passed to the code that needs them; there is no
    process-wide index.
    """

    def __init__(self, entries: Mapping[str, list[VerbEntry]]):
        """Initialize the index.

        Args:
            entries: Verb form -> entries for that form
        """
        self._entries = {key: list(value) for key, value in entries.items()}

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "VerbIndex":
        """Load an index from a JSON file of ``{form: [entry, ...]}``.

        Raises:
            FileNotFoundError: If the index file does not exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Verb index not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        entries = {
            form: [VerbEntry.from_dict(record) for record in records]
            for form, records in data.items()
        }
        logger.info(f"Loaded verb index with {len(entries)} forms from {path}")
        return cls(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, form: str) -> bool:
        return form in self._entries

    def lookup(self, text: str) -> Optional[list[VerbEntry]]:
        """Find the entries for a verb form.

        Tries the exact form first, then the form without a trailing
        nominalizing suffix (with and without its tsheg).

        Args:
            text: Surface form or root

        Returns:
            Entries ranked by relevance, or None if nothing matched
        """
        if not text:
            return None
        trimmed = text.strip()

        for candidate in [trimmed, *verb_stems(trimmed)]:
            if candidate in self._entries:
                return sorted(self._entries[candidate], key=_score, reverse=True)
        return None


def verb_options(
    analysis: Analysis, surface_text: str, index: VerbIndex
) -> list[VerbEntry]:
    """Distinct index entries that could apply to a word.

    The root is looked up first, falling back to the surface text. Entries
    are deduplicated by (tense, definition, volition) and ordered present,
    past, future, imperative.

    Args:
        analysis: Analysis of the word
        surface_text: The word as it appears in the text
        index: Verb index to consult

    Returns:
        Candidate entries (empty when the word is not in the index)
    """
    matches = index.lookup(analysis.root or surface_text)
    if not matches:
        return []

    seen = set()
    options = []
    for entry in matches:
        key = (entry.tense, entry.definition, entry.volition)
        if key in seen:
            continue
        seen.add(key)
        options.append(entry)

    options.sort(key=lambda entry: TENSE_ORDER.get(entry.tense.lower(), 99))
    return options


def apply_verb_entry(analysis: Analysis, entry: VerbEntry) -> Analysis:
    """Merge a chosen verb entry into an analysis.

    Sets root, tense, honorific marker and volition, links the entry id and
    marks the analysis as polished. The definition is left untouched unless
    it is empty.

    Args:
        analysis: Analysis to update
        entry: Selected verb entry

    Returns:
        New Analysis
    """
    modifiers = []
    if entry.hon or analysis.is_honorific:
        modifiers.append("hon")
    tense = TENSE_MODIFIERS.get(entry.tense.lower(), entry.tense.lower())
    if tense:
        modifiers.append(tense)

    pos = analysis.part_of_speech or "v"
    volition = (entry.volition or "").lower()
    if pos in ("v", *VOLITION_TAGS) and volition in VOLITION_TAGS:
        pos = volition

    return replace(
        analysis,
        part_of_speech=pos,
        tense=",".join(modifiers),
        root=entry.original_word or analysis.root,
        definition=analysis.definition or entry.definition,
        verb_id=normalize_verb_id(entry.id) or None,
        is_polished=True,
    )


def _polish_unit(unit: Unit, index: VerbIndex) -> Unit:
    children = [_polish_unit(child, index) for child in unit.children]
    if children != unit.children:
        unit = replace(unit, children=children)

    analysis = unit.analysis
    if not unit.is_word or analysis is None or analysis.is_polished or not analysis.is_verb:
        return unit

    options = verb_options(analysis, unit.surface_text, index)
    if len(options) != 1:
        return unit
    logger.debug(f"Resolved {unit.surface_text!r} to verb entry {options[0].id!r}")
    return replace(unit, analysis=apply_verb_entry(analysis, options[0]))


def polish_block(block: Block, index: VerbIndex) -> Block:
    """Resolve every unpolished verb that has exactly one index entry.

    Args:
        block: Block to update
        index: Verb index to consult

    Returns:
        New block; verbs with zero or several options are left for
        disambiguation
    """
    lines = [
        Line(units=[_polish_unit(unit, index) for unit in line.units])
        for line in block.lines
    ]
    return replace(block, lines=lines)
