"""Request and merge payloads for verb disambiguation.

The disambiguation service itself lives outside this package. A request
lists every verb with several candidate index entries together with its
offset in the stanza text; the response names, per item id, the index of
the chosen option. Results are merged back by locating the word at its
recorded offset and nesting depth, so a response that arrives after the
block was edited either still finds its word or is dropped.
"""

import logging
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field

from .editing import update_analysis
from .models import Block, Unit, VerbEntry
from .serializer import block_raw_text
from .verbs import VerbIndex, apply_verb_entry, verb_options

logger = logging.getLogger(__name__)


class VerbOption(BaseModel):
    """One candidate verb entry as sent to the service."""

    tense: str
    volition: Optional[str] = None
    hon: bool = False
    definition: str = ""
    original_word: str = ""
    id: str = ""

    @classmethod
    def from_entry(cls, entry: VerbEntry) -> "VerbOption":
        return cls(
            tense=entry.tense,
            volition=entry.volition,
            hon=entry.hon,
            definition=entry.definition,
            original_word=entry.original_word,
            id=entry.id,
        )

    def to_entry(self) -> VerbEntry:
        return VerbEntry(
            tense=self.tense,
            volition=self.volition,
            hon=self.hon,
            definition=self.definition,
            original_word=self.original_word,
            id=self.id,
        )


class DisambiguationItem(BaseModel):
    """An ambiguous verb occurrence."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    index_in_text: int = Field(alias="indexInText", ge=0)
    depth: int = Field(default=0, ge=0)  # 0 for top-level words
    original: str
    verb_options: list[VerbOption] = Field(default_factory=list, alias="verbOptions")


class DisambiguationRequest(BaseModel):
    """Context text plus the verbs to resolve in it."""

    text: str
    items: list[DisambiguationItem] = Field(default_factory=list)


class DisambiguationResult(BaseModel):
    """The option chosen for one item."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    selected_index: int = Field(alias="selectedIndex")


class DisambiguationResponse(BaseModel):
    """Service response: ``{"results": [{"id": ..., "selectedIndex": ...}]}``."""

    results: list[DisambiguationResult] = Field(default_factory=list)


def item_id(offset: int, surface_text: str, depth: int = 0) -> str:
    """Stable identifier of a word occurrence.

    A sub-word can share offset and surface with its parent, so the
    nesting depth is part of the id.
    """
    return f"{offset}:{depth}:{surface_text}"


def _iter_descendants(
    unit: Unit, position: int, path: tuple[int, ...]
) -> Iterator[tuple[int, tuple[int, ...], Unit]]:
    for sub_index, child in enumerate(unit.children):
        if child.is_word:
            child_path = path + (sub_index,)
            yield position, child_path, child
            yield from _iter_descendants(child, position, child_path)
        position += len(child.surface_text)


def iter_words(block: Block) -> Iterator[tuple[int, int, int, tuple[int, ...], Unit]]:
    """Walk every word of a block, at any nesting depth, with its offset.

    Returns:
        Iterator of (offset, line_index, unit_index, path, unit); path holds
        the child indices leading from the top-level word to the unit (empty
        for the word itself) and the offset is relative to the block's raw
        text
    """
    line_start = 0
    for line_index, line in enumerate(block.lines):
        position = line_start
        for unit_index, unit in enumerate(line.units):
            if unit.is_word:
                yield position, line_index, unit_index, (), unit
                for offset, path, child in _iter_descendants(unit, position, ()):
                    yield offset, line_index, unit_index, path, child
            position += len(unit.surface_text)
        line_start += len(line.text) + 1


def build_request(block: Block, index: VerbIndex) -> DisambiguationRequest:
    """Collect the unpolished verbs of a block that have several options.

    Args:
        block: Block to inspect
        index: Verb index providing the options

    Returns:
        Request carrying the block's raw text as context
    """
    items = []
    for offset, _, _, path, unit in iter_words(block):
        analysis = unit.analysis
        if analysis is None or analysis.is_polished or not analysis.is_verb:
            continue
        options = verb_options(analysis, unit.surface_text, index)
        if len(options) < 2:
            continue
        items.append(
            DisambiguationItem(
                id=item_id(offset, unit.surface_text, len(path)),
                index_in_text=offset,
                depth=len(path),
                original=unit.surface_text,
                verb_options=[VerbOption.from_entry(entry) for entry in options],
            )
        )
    logger.debug(f"Built disambiguation request with {len(items)} items")
    return DisambiguationRequest(text=block_raw_text(block), items=items)


def apply_response(
    block: Block,
    request: DisambiguationRequest,
    response: DisambiguationResponse,
) -> Block:
    """Merge disambiguation results into a block.

    Each result is matched to its request item by id, and the item's word
    is located in the current block by offset, depth and surface text.
    Results whose item, word or option cannot be found are dropped.

    Args:
        block: Current block (possibly edited since the request was built)
        request: The request that was sent
        response: The service response

    Returns:
        New block with the selected entries merged
    """
    items = {item.id: item for item in request.items}

    for result in response.results:
        item = items.get(result.id)
        if item is None:
            logger.warning(f"Disambiguation result for unknown item {result.id!r} dropped")
            continue
        if not 0 <= result.selected_index < len(item.verb_options):
            logger.warning(
                f"Disambiguation result {result.id!r} selects option "
                f"{result.selected_index} of {len(item.verb_options)}, dropped"
            )
            continue

        target = None
        for offset, line_index, unit_index, path, unit in iter_words(block):
            if (
                offset == item.index_in_text
                and len(path) == item.depth
                and unit.surface_text == item.original
            ):
                target = (line_index, unit_index, path, unit)
                break
        if target is None:
            logger.warning(f"Word for disambiguation result {result.id!r} no longer present")
            continue

        line_index, unit_index, path, unit = target
        entry = item.verb_options[result.selected_index].to_entry()
        block = update_analysis(
            block,
            line_index,
            unit_index,
            apply_verb_entry(unit.analysis, entry),
            sub_index=path or None,
        )
    return block
