import pytest

from stormpanel.errors import UncoveredDataLine
from stormpanel.headers import extract_headers, is_header
from stormpanel.intervals import Interval, build_intervals, covered_points, merge_join
from stormpanel.tagger import tag_blocks


def _tag(lines):
    return tag_blocks(lines, extract_headers(lines))


def test_merge_join_two_pointer():
    ivs = [Interval(2, 3, "A", "a"), Interval(5, 4, "B", "b"), Interval(6, 7, "C", "c")]
    assert merge_join([1, 2, 3, 4, 5, 6, 7, 8], ivs) == [None, 0, 0, None, None, 2, 2, None]


def test_build_intervals_requires_file_order(to_lines, header):
    hs = extract_headers(to_lines([header("AL011980", "A", 0), header("AL021980", "B", 0)]))
    with pytest.raises(ValueError):
        build_intervals(list(reversed(hs)))


def test_tags_every_data_line(to_lines, header, data_line):
    lines = to_lines([
        header("AL011980", "ALLEN", 2), data_line(), data_line(),
        header("AL021980", "BONNIE", 1), data_line(),
    ])
    tagged = _tag(lines)
    assert [(t.storm_id, t.storm_name, t.line.line_number) for t in tagged] == [
        ("AL011980", "ALLEN", 2), ("AL011980", "ALLEN", 3), ("AL021980", "BONNIE", 5)]


def test_ranges_cover_exactly_the_data_lines(to_lines, header, data_line):
    lines = to_lines([
        header("AL011980", "A", 3), data_line(), data_line(), data_line(),
        header("AL021980", "B", 0),
        header("AL031980", "C", 2), data_line(), data_line(),
    ])
    covered = covered_points(build_intervals(extract_headers(lines)))
    data = [ln.line_number for ln in lines if not is_header(ln)]
    assert covered == data
    assert len(set(covered)) == len(covered)


def test_short_block_is_fatal(to_lines, header, data_line):
    lines = to_lines([
        header("AL011980", "A", 2), data_line(),
        header("AL021980", "B", 1), data_line(),
    ])
    with pytest.raises(UncoveredDataLine) as exc:
        _tag(lines)
    assert exc.value.line_number == 3


def test_extra_data_line_is_fatal(to_lines, header, data_line):
    lines = to_lines([header("AL011980", "A", 1), data_line(), data_line()])
    with pytest.raises(UncoveredDataLine) as exc:
        _tag(lines)
    assert exc.value.line_number == 3


def test_block_past_end_of_file_is_fatal(to_lines, header, data_line):
    lines = to_lines([header("AL011980", "A", 3), data_line(), data_line()])
    with pytest.raises(UncoveredDataLine) as exc:
        _tag(lines)
    assert exc.value.line_number == 1


def test_blank_line_inside_block_is_fatal(to_lines, header, data_line):
    lines = to_lines([header("AL011980", "A", 2), data_line(), "", data_line()])
    with pytest.raises(UncoveredDataLine) as exc:
        _tag(lines)
    assert exc.value.line_number == 4
