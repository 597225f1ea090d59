"""Shared fixtures for the annotator tests."""

import json

import pytest

from annotator.models import VerbEntry
from annotator.verbs import VerbIndex


SAMPLE_DOCUMENT = """>>>
ཆུ་དང་མེ།
རྒྱ་མཚོ།
>>>>
<ཆུ>[{n} ཆུ water]
<དང>[{part} and]
<མེ>[{n} མེ fire]
<རྒྱ་མཚོ>[{n} 海 ocean]
\t<རྒྱ>[{n} vast]
\t<མཚོ>[{n} མཚོ lake]
>>>>>

>>>
ཁོས་ལས་བྱེད།
>>>>
<ཁོས>[{pron} he]
<ལས>[{n} ལས work]
<བྱེད>[{v} བྱེད do]
>>>>>
"""


VERB_INDEX_DATA = {
    "བྱེད": [
        {
            "tense": "Present",
            "volition": "vd",
            "hon": False,
            "definition": "to do",
            "original_word": "བྱེད",
            "id": "v1",
        },
        {
            "tense": "Future",
            "volition": "vd",
            "hon": False,
            "definition": "to do",
            "original_word": "བྱ",
            "id": "v2",
        },
    ],
    "བསྐྱོད": [
        {
            "tense": "Past",
            "volition": "vd",
            "hon": True,
            "definition": "to move",
            "original_word": "བསྐྱོད",
            "id": "v3",
        },
    ],
}


@pytest.fixture
def sample_document() -> str:
    return SAMPLE_DOCUMENT


@pytest.fixture
def verb_index() -> VerbIndex:
    return VerbIndex(
        {
            form: [VerbEntry.from_dict(record) for record in records]
            for form, records in VERB_INDEX_DATA.items()
        }
    )


@pytest.fixture
def verb_index_path(tmp_path):
    path = tmp_path / "tibetan_verb_index.json"
    path.write_text(json.dumps(VERB_INDEX_DATA, ensure_ascii=False), encoding="utf-8")
    return path
