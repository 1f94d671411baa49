"""Tests for datacard.segmenter module."""
from pathlib import Path

import pytest

from datacard.document import LineRangeEdit, TextDocument
from datacard.segmenter import (
    Block,
    SectionIndex,
    compute_blocks,
    find_dividers,
    find_header,
    section_index,
    segment,
)

CARDS = Path(__file__).resolve().parent / "datacards"


def _card(name: str) -> TextDocument:
    return TextDocument.from_path(CARDS / name)


def _assert_partition(blocks: list[Block], line_count: int) -> None:
    assert blocks[0].start == 0
    assert blocks[-1].end == line_count - 1
    for prev, cur in zip(blocks, blocks[1:]):
        assert cur.start == prev.end + 1


class TestFindDividers:
    def test_shapes_card(self) -> None:
        assert find_dividers(_card("shapes_with_header.txt")) == [2, 6, 8, 11, 16]

    def test_surrounding_whitespace_ignored(self) -> None:
        lines = ["a", "   -----   ", "\t---", "--", "--- text", "b"]
        assert find_dividers(lines) == [1, 2]

    def test_no_dividers(self) -> None:
        assert find_dividers(["imax 1", "jmax 1", "kmax 1"]) == []


class TestFindHeader:
    def test_header_at_top(self) -> None:
        assert find_header(_card("no_shapes.txt")) == 0

    def test_header_after_comments(self) -> None:
        assert find_header(_card("shapes_with_header.txt")) == 3

    def test_absent(self) -> None:
        assert find_header(_card("invalid.txt")) is None

    def test_first_match_wins(self) -> None:
        lines = ["# c", "imax 1", "jmax 1", "kmax 1", "imax 2", "jmax 2", "kmax 2"]
        assert find_header(lines) == 1

    def test_indented_lines_are_trimmed(self) -> None:
        assert find_header(["  imax *", "\tjmax *", " kmax *"]) == 0

    def test_order_matters(self) -> None:
        assert find_header(["jmax 1", "imax 1", "kmax 1"]) is None

    def test_too_short(self) -> None:
        assert find_header(["imax 1", "jmax 1"]) is None
        assert find_header([]) is None


class TestComputeBlocks:
    def test_no_dividers_single_block(self) -> None:
        lines = ["a", "b", "c"]
        blocks = compute_blocks([], 3, lines)
        assert blocks == [Block(start=0, end=2, opens_with_divider=False, blank=False)]

    def test_divider_opens_its_block(self) -> None:
        lines = ["a", "---", "b", "---", "c"]
        blocks = compute_blocks([1, 3], 5, lines)
        assert [(b.start, b.end) for b in blocks] == [(0, 0), (1, 2), (3, 4)]
        assert all(not b.blank for b in blocks)

    def test_leading_divider_has_no_empty_block(self) -> None:
        lines = ["---", "a"]
        blocks = compute_blocks([0], 2, lines)
        assert [(b.start, b.end, b.opens_with_divider) for b in blocks] == [(0, 1, True)]

    def test_blank_blocks(self) -> None:
        lines = ["a", "---", "   ", "", "---", "---", "b"]
        blocks = compute_blocks([1, 4, 5], len(lines), lines)
        assert [b.blank for b in blocks] == [False, True, True, False]

    def test_empty_document(self) -> None:
        assert compute_blocks([], 0, []) == []

    @pytest.mark.parametrize("name", ["shapes_with_header.txt", "no_shapes.txt", "invalid.txt"])
    def test_partition_cards(self, name: str) -> None:
        doc = _card(name)
        blocks = compute_blocks(find_dividers(doc), doc.line_count, doc.lines)
        _assert_partition(blocks, doc.line_count)

    def test_partition_odd_layouts(self) -> None:
        layouts = [
            ["---"],
            ["---", "---", "---"],
            ["", "", "---", "", "x", "---"],
            ["x", "---", "---", "", "---", "y", ""],
        ]
        for lines in layouts:
            blocks = compute_blocks(find_dividers(lines), len(lines), lines)
            _assert_partition(blocks, len(lines))


class TestSectionIndex:
    def test_no_dividers_all_zero(self) -> None:
        lines = ["imax 2", "jmax 1", "kmax 1"]
        for i in range(len(lines)):
            idx = section_index(lines, i)
            assert idx == SectionIndex(raw_ordinal=0, header_block_ordinal=0, is_pre_header=False)

    def test_no_dividers_without_header(self) -> None:
        lines = ["hello", "", "world"]
        assert all(section_index(lines, i).raw_ordinal == 0 for i in range(3))

    def test_shapes_card_ordinals(self) -> None:
        doc = _card("shapes_with_header.txt")
        raw = [section_index(doc, i).raw_ordinal for i in range(doc.line_count)]
        assert raw[0] == 0
        assert raw[3] == 1      # imax
        assert raw[7] == 2      # shapes
        assert raw[10] == 3     # observation
        assert raw[13] == 4     # process
        assert raw[18] == 5     # CMS_eff_b
        assert raw == sorted(raw)

    def test_header_block_ordinal(self) -> None:
        doc = _card("shapes_with_header.txt")
        assert section_index(doc, 13).header_block_ordinal == 1
        assert section_index(_card("no_shapes.txt"), 9).header_block_ordinal == 0

    def test_pre_header_lines(self) -> None:
        doc = _card("shapes_with_header.txt")
        assert section_index(doc, 0).is_pre_header
        assert section_index(doc, 2).is_pre_header  # divider opening the header block
        assert not section_index(doc, 3).is_pre_header
        assert not section_index(doc, 13).is_pre_header

    def test_header_in_first_block_has_no_pre_header(self) -> None:
        lines = ["# comment", "imax 1", "jmax 1", "kmax 1", "---", "bin a"]
        assert not section_index(lines, 0).is_pre_header

    def test_blank_blocks_do_not_count(self) -> None:
        lines = ["imax 1", "jmax 1", "kmax 1", "---", "", "---", "---", "bin a"]
        assert section_index(lines, 7).raw_ordinal == 1

    def test_out_of_range(self) -> None:
        with pytest.raises(IndexError):
            section_index(["imax 1"], 5)


class TestSegmentCache:
    def test_memoized_per_version(self) -> None:
        doc = _card("no_shapes.txt")
        first = segment(doc)
        assert segment(doc) is first

    def test_invalidated_by_edit(self) -> None:
        doc = _card("no_shapes.txt")
        before = segment(doc)
        doc.apply_edit(LineRangeEdit(start=3, end=3, new_text="---\n\n---"))
        after = segment(doc)
        assert after is not before
        assert after.version == doc.version
        assert after.dividers == (3, 5, 8, 13)

    def test_cached_equals_fresh_scan(self) -> None:
        doc = _card("shapes_with_header.txt")
        cached = segment(doc)
        fresh = segment(TextDocument(doc.lines))
        assert cached.blocks == fresh.blocks
        assert cached.block_ordinals == fresh.block_ordinals
        assert cached.header_line == fresh.header_line
