"""Tests for building the compound-word tree."""

import logging

from annotator.hierarchy import BUFFERING, IDLE, HierarchyBuilder, build_hierarchy
from annotator.models import ReconcileMiss


def _check_depths(nodes, parent_depth=None):
    for node in nodes:
        if parent_depth is not None:
            assert node.depth > parent_depth
        _check_depths(node.children, node.depth)


class TestLogicalLines:
    """Tests for the line-buffering scanner."""

    def test_single_lines(self):
        builder = HierarchyBuilder()
        lines = list(builder.logical_lines("<a>[{n} x]\n\t<b>[{n} y]"))

        assert lines == ["<a>[{n} x]", "\t<b>[{n} y]"]
        assert builder.state == IDLE

    def test_blank_lines_skipped_when_idle(self):
        lines = list(HierarchyBuilder().logical_lines("\n<a>[{n} x]\n\n   \n<b>[{n} y]\n"))
        assert lines == ["<a>[{n} x]", "<b>[{n} y]"]

    def test_multiline_content_is_joined(self):
        """Physical lines are buffered, blank ones included, until one ends in ']'."""
        text = "<a>[{n} first\n\nsecond]\n<b>[{n} y]"
        lines = list(HierarchyBuilder().logical_lines(text))

        assert lines == ["<a>[{n} first\n\nsecond]", "<b>[{n} y]"]

    def test_unterminated_buffer_dropped(self, caplog):
        builder = HierarchyBuilder()
        with caplog.at_level(logging.WARNING, logger="annotator.hierarchy"):
            lines = list(builder.logical_lines("<a>[{n} x]\n<b>[{n} never closed"))

        assert lines == ["<a>[{n} x]"]
        assert builder.state == IDLE
        assert "Unterminated annotation" in caplog.text

    def test_buffering_while_open(self):
        builder = HierarchyBuilder()
        lines = builder.logical_lines("<a>[{n} x\ny]")

        assert next(lines) == "<a>[{n} x\ny]"
        assert builder.state == BUFFERING
        assert list(lines) == []
        assert builder.state == IDLE


class TestBuildHierarchy:
    """Tests for depth-based node placement."""

    def test_compound_with_children(self):
        """Tabbed lines become children of the preceding shallower line."""
        text = "<རྒྱ་མཚོ>[{n} ocean]\n\t<རྒྱ>[{n} vast]\n\t<མཚོ>[{n} lake]"
        roots = build_hierarchy(text)

        assert len(roots) == 1
        root = roots[0]
        assert root.surface_text == "རྒྱ་མཚོ"
        assert root.depth == 0
        assert [child.surface_text for child in root.children] == ["རྒྱ", "མཚོ"]
        assert all(child.depth == 1 for child in root.children)

    def test_segments_fill_connective_text(self):
        text = "<རྒྱ་མཚོ>[{n} ocean]\n\t<རྒྱ>[{n} vast]\n\t<མཚོ>[{n} lake]"
        root = build_hierarchy(text)[0]

        segments = root.segments
        assert [(unit.kind, unit.surface_text) for unit in segments] == [
            ("word", "རྒྱ"),
            ("text", "་"),
            ("word", "མཚོ"),
        ]
        assert "".join(unit.surface_text for unit in segments) == root.surface_text

    def test_top_level_siblings(self):
        roots = build_hierarchy("<a>[{n} x]\n<b>[{n} y]\n<c>[{n} z]")

        assert [node.surface_text for node in roots] == ["a", "b", "c"]
        assert all(not node.children for node in roots)
        assert all(node.segments == [] for node in roots)

    def test_depth_jump_attaches_to_open_node(self):
        """A line two tabs deeper than its predecessor still becomes its child."""
        roots = build_hierarchy("<ab>[{n} x]\n\t\t<a>[{n} y]")

        assert len(roots) == 1
        assert roots[0].children[0].surface_text == "a"
        assert roots[0].children[0].depth == 2

    def test_return_to_top_level(self):
        roots = build_hierarchy("<ab>[{n} x]\n\t<a>[{n} y]\n<c>[{n} z]")

        assert [node.surface_text for node in roots] == ["ab", "c"]
        assert len(roots[0].children) == 1

    def test_deeper_nesting_is_kept(self):
        text = "<abc>[{n} x]\n\t<ab>[{n} y]\n\t\t<a>[{n} z]\n\t<c>[{n} w]"
        roots = build_hierarchy(text)

        root = roots[0]
        assert [child.surface_text for child in root.children] == ["ab", "c"]
        assert root.children[0].children[0].surface_text == "a"
        _check_depths(roots)

        inner = root.children[0].segments
        assert [unit.surface_text for unit in inner] == ["a", "b"]

    def test_analysis_is_decoded(self):
        node = build_hierarchy("<བྱེད>[{v,past} བྱས did]")[0]

        assert node.raw_annotation == "{v,past} བྱས did"
        assert node.analysis.part_of_speech == "v"
        assert node.analysis.tense == "past"
        assert node.analysis.root == "བྱས"

    def test_non_annotation_lines_skipped(self):
        roots = build_hierarchy("some stray note\n<a>[{n} x]\n# another")
        assert [node.surface_text for node in roots] == ["a"]

    def test_multiline_definition(self):
        roots = build_hierarchy("<a>[{n} line one\n\nline two]\n<b>[{n} y]")

        assert roots[0].analysis.definition == "line one\n\nline two"
        assert roots[1].surface_text == "b"

    def test_child_not_in_parent_is_reported(self):
        misses = []
        roots = build_hierarchy("<ab>[{n} x]\n\t<z>[{n} y]", misses)

        assert misses == [ReconcileMiss(surface_text="z", cursor=0)]
        assert [unit.surface_text for unit in roots[0].segments] == ["ab"]

    def test_empty_section(self):
        assert build_hierarchy("") == []
        assert build_hierarchy("\n\n") == []
