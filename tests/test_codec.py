"""Tests for decoding and encoding annotation content."""

import pytest

from annotator.codec import decode, encode, format_annotation_line, split_top_level
from annotator.models import Analysis, Unit


class TestDecode:
    """Tests for decode()."""

    def test_full_annotation(self):
        """Full form, tags, Tibetan root and gloss are separated."""
        analysis = decode("བསྐྱོད་པ{v,past} བསྐྱོད motion")

        assert analysis.full_form == "བསྐྱོད་པ"
        assert analysis.part_of_speech == "v"
        assert analysis.tense == "past"
        assert analysis.root == "བསྐྱོད"
        assert analysis.definition == "motion"
        assert analysis.verb_id is None
        assert analysis.is_polished is False

    def test_latin_gloss_has_no_root(self):
        """A gloss that does not start with Tibetan script is all definition."""
        analysis = decode("{n} agraḥ")

        assert analysis.part_of_speech == "n"
        assert analysis.root == ""
        assert analysis.definition == "agraḥ"
        assert analysis.full_form == ""

    def test_cjk_gloss_has_no_root(self):
        analysis = decode("{n} 海 ocean")

        assert analysis.root == ""
        assert analysis.definition == "海 ocean"

    def test_root_keeps_tsheg(self):
        analysis = decode("{n} རྒྱ་མཚོ ocean")

        assert analysis.root == "རྒྱ་མཚོ"
        assert analysis.definition == "ocean"

    def test_indexed_verb_id(self):
        """An indexed(id:...) token is stripped and links the verb entry."""
        analysis = decode("{v,indexed(id:42)} བྱེད do")

        assert analysis.part_of_speech == "v"
        assert analysis.tense == ""
        assert analysis.verb_id == "42"
        assert analysis.is_polished is True

    def test_indexed_verb_id_between_modifiers(self):
        analysis = decode("{v,hon,indexed(id:7),past} x")

        assert analysis.tense == "hon,past"
        assert analysis.verb_id == "7"

    def test_indexed_id_with_punctuation_and_spaces(self):
        analysis = decode("{v,past,indexed(id: Past-to do-vd.2 )} x")

        assert analysis.tense == "past"
        assert analysis.verb_id == "Past-to do-vd.2"

    def test_legacy_id_token(self):
        analysis = decode("{v,past,id:abc} x")

        assert analysis.tense == "past"
        assert analysis.verb_id == "abc"
        assert analysis.is_polished is True

    def test_legacy_polished_token_sets_no_id(self):
        analysis = decode("{v,past,polished} x")

        assert analysis.tense == "past"
        assert analysis.verb_id is None
        assert analysis.is_polished is True

    def test_no_tag_segment_degrades_to_definition(self):
        """Without {...} only the definition is filled and POS stays empty."""
        analysis = decode("  just a gloss  ")

        assert analysis.definition == "just a gloss"
        assert analysis.part_of_speech == ""
        assert analysis.root == ""
        assert analysis.tense == ""

    def test_semicolon_starts_comment(self):
        analysis = decode("{n} ཆུ water; reserved note {v}")

        assert analysis.part_of_speech == "n"
        assert analysis.root == "ཆུ"
        assert analysis.definition == "water"

    def test_double_brackets_are_stripped(self):
        analysis = decode("[{n} x]")

        assert analysis.part_of_speech == "n"
        assert analysis.definition == "x"

    def test_comma_inside_parentheses_does_not_split(self):
        analysis = decode("{v(a,b),past} x")

        assert analysis.part_of_speech == "v(a,b)"
        assert analysis.tense == "past"

    def test_disjunction_and_transform(self):
        assert decode("{n|adj} x").pos_tags == {"n", "adj"}
        assert decode("{vnd->n} x").pos_tags == {"vnd", "n"}

    def test_multiline_definition(self):
        analysis = decode("{n} ཆུ water\n\nsecond paragraph")

        assert analysis.root == "ཆུ"
        assert analysis.definition == "water\n\nsecond paragraph"


class TestSplitTopLevel:
    """Tests for the parenthesis-aware tag split."""

    def test_no_comma(self):
        assert split_top_level("n|adj") == ("n|adj", "")

    def test_first_comma_only(self):
        assert split_top_level("v, hon, past") == ("v", "hon, past")


class TestEncode:
    """Tests for encode()."""

    def test_full_annotation(self):
        analysis = Analysis(
            full_form="བསྐྱོད་པ",
            part_of_speech="v",
            tense="past",
            root="བསྐྱོད",
            definition="motion",
        )
        assert encode(analysis, "བསྐྱོད") == "བསྐྱོད་པ{v,past} བསྐྱོད motion"

    def test_missing_pos_defaults_to_other(self):
        assert encode(Analysis(definition="x")) == "{other} x"

    def test_tense_is_lowercased(self):
        assert encode(Analysis(part_of_speech="v", tense="Past")) == "{v,past}"

    def test_tense_already_in_pos_is_not_repeated(self):
        analysis = Analysis(part_of_speech="v|past", tense="past", definition="x")
        assert encode(analysis) == "{v|past} x"

    def test_verb_id(self):
        analysis = Analysis(part_of_speech="v", tense="past", verb_id="42", is_polished=True)
        assert encode(analysis) == "{v,past,indexed(id:42)}"

    def test_verb_id_reserved_characters_replaced(self):
        analysis = Analysis(part_of_speech="v", verb_id="a{b}", is_polished=True)
        assert encode(analysis) == "{v,indexed(id:a-b-)}"

    def test_polished_without_id(self):
        analysis = Analysis(part_of_speech="v", is_polished=True, definition="x")
        assert encode(analysis) == "{v,polished} x"

    def test_whitespace_collapsed(self):
        analysis = Analysis(part_of_speech="n", root="ཆུ", definition="cold\n  water")
        assert encode(analysis) == "{n} ཆུ cold water"

    @pytest.mark.parametrize(
        "analysis",
        [
            Analysis(full_form="བསྐྱོད་པ", part_of_speech="v", tense="past", root="བསྐྱོད", definition="motion"),
            Analysis(part_of_speech="n|adj", definition="great"),
            Analysis(part_of_speech="v", tense="hon|past", root="གསུང", verb_id="v-12", is_polished=True),
            Analysis(part_of_speech="vnd->n", is_polished=True, definition="seeing, sight"),
        ],
    )
    def test_decode_restores_encoded_analysis(self, analysis):
        """Re-decoding the encoded content yields an equivalent analysis."""
        decoded = decode(encode(analysis))
        assert decoded.semantic_key() == analysis.semantic_key()


def test_format_annotation_line():
    unit = Unit.word("རྒྱ", Analysis(part_of_speech="n", definition="vast"))

    assert format_annotation_line(unit) == "<རྒྱ>[{n} vast]"
    assert format_annotation_line(unit, depth=2) == "\t\t<རྒྱ>[{n} vast]"
