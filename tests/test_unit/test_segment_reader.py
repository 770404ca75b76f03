"""
Unit tests for segment file reading.
"""

import pytest

from segsim.exceptions import ParseError
from segsim.io.segments import load_segments, read_segment_records


class TestReadSegmentRecords:
    """Test raw record extraction."""

    def test_single_line_records(self):
        records = list(read_segment_records([
            "0 0.5 (A:1,B:1);",
            "0.5 1 (A:2,B:2);",
        ]))

        assert [(r.begin, r.end) for r in records] == [(0.0, 0.5), (0.5, 1.0)]
        assert records[0].tree_text == "(A:1,B:1);"
        assert records[1].line == 2

    def test_skips_blank_and_comment_lines(self):
        records = list(read_segment_records([
            "# header",
            "",
            "   ",
            "0 1 (A:1,B:1);",
            "# trailing comment",
        ]))

        assert len(records) == 1
        assert records[0].line == 4

    def test_multiline_tree(self):
        records = list(read_segment_records([
            "0 1 ((A:1,",
            "      B:1):1,",
            "      C:1);",
        ]))

        assert len(records) == 1
        assert records[0].tree_text.replace("\n", "").replace(" ", "") == "((A:1,B:1):1,C:1);"

    def test_positions_on_their_own_lines(self):
        records = list(read_segment_records(["0", "0.25", "(A:1,B:1);"]))
        assert (records[0].begin, records[0].end) == (0.0, 0.25)

    def test_text_after_semicolon_starts_next_record(self):
        records = list(read_segment_records([
            "0 0.5 (A:1,B:1); 0.5 1",
            "(A:2,B:2);",
        ]))

        assert [(r.begin, r.end) for r in records] == [(0.0, 0.5), (0.5, 1.0)]

    def test_semicolon_in_quoted_name(self):
        records = list(read_segment_records(["0 1 ('A;1':1,B:1);"]))

        assert len(records) == 1
        assert records[0].tree_text == "('A;1':1,B:1);"

    def test_semicolon_in_bracket_comment(self):
        records = list(read_segment_records([
            "0 1 ((A:1,B:1)[note; split",
            "here]:1,C:1);",
        ]))

        assert len(records) == 1
        assert records[0].tree_text.endswith("C:1);")

    def test_trailing_comment_after_tree(self):
        records = list(read_segment_records([
            "0 0.5 (A:1,B:1);  # first breakpoint",
            "0.5 1 (A:2,B:2);",
        ]))

        assert [(r.begin, r.end) for r in records] == [(0.0, 0.5), (0.5, 1.0)]

    def test_incomplete_tree(self):
        with pytest.raises(ParseError, match="incomplete tree") as info:
            list(read_segment_records(["0 0.5 (A:1,B:1);", "0.5 1 (A:2,", "B:2)"]))
        assert info.value.line == 2

    def test_missing_positions(self):
        with pytest.raises(ParseError, match="expected"):
            list(read_segment_records(["0.5 (A:1,B:1);"]))

    def test_non_numeric_position(self):
        with pytest.raises(ParseError, match="must be numbers") as info:
            list(read_segment_records(["", "zero 1 (A:1,B:1);"]))
        assert info.value.line == 2

    def test_empty_tree(self):
        with pytest.raises(ParseError):
            list(read_segment_records(["0 1 ;"]))


class TestLoadSegments:
    """Test parsing segment files into segments."""

    def test_load_file(self, segment_file):
        segments = load_segments(segment_file)

        assert len(segments) == 3
        assert [s.begin for s in segments] == [0.0, 0.333, 0.667]
        assert [s.end for s in segments] == [0.333, 0.667, 1.0]
        assert segments[1].tree.leaf_names == ["A", "C", "B", "D"]

    def test_load_lines(self):
        segments = load_segments(["0 1 (A:1,B:1);"])
        assert segments[0].tree.leaf_names == ["A", "B"]

    def test_invalid_tree_is_parse_error(self):
        with pytest.raises(ParseError, match="invalid tree") as info:
            load_segments(["0 0.5 (A:1,B:1);", "0.5 1 (A:x,B:1);"])
        assert info.value.line == 2

    def test_quoted_name_with_semicolon(self):
        segments = load_segments(["0 1 ('A;1':1,B:1);"])
        assert segments[0].tree.leaf_names == ["A;1", "B"]
