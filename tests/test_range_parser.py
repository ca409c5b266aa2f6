"""
Tests for Range header parsing.

Run with: pytest tests/test_range_parser.py
"""

import pytest

from pydantic import ValidationError

from castbridge.errors import RangeNotSatisfiable
from castbridge.server.range_parser import parse_range


def test_closed_range():
    r = parse_range("bytes=0-1023", 4096)
    assert (r.start, r.end, r.total) == (0, 1023, 4096)
    assert r.length == 1024
    assert r.content_range == "bytes 0-1023/4096"


def test_open_ended_range_runs_to_last_byte():
    r = parse_range("bytes=500-", 1000)
    assert (r.start, r.end) == (500, 999)
    assert r.length == 500
    assert r.content_range == "bytes 500-999/1000"


@pytest.mark.parametrize("start", [0, 1, 250, 998, 999])
def test_open_ended_range_for_any_start(start):
    r = parse_range(f"bytes={start}-", 1000)
    assert r.start == start
    assert r.end == 999


def test_unparsable_start_defaults_to_zero():
    r = parse_range("bytes=abc-99", 1000)
    assert (r.start, r.end) == (0, 99)


def test_unparsable_end_defaults_to_last_byte():
    r = parse_range("bytes=10-xyz", 1000)
    assert (r.start, r.end) == (10, 999)


def test_missing_dash_defaults_to_last_byte():
    r = parse_range("bytes=10", 1000)
    assert (r.start, r.end) == (10, 999)


def test_end_past_resource_is_clamped():
    r = parse_range("bytes=900-5000", 1000)
    assert (r.start, r.end) == (900, 999)


def test_start_past_end_is_clamped_into_resource():
    r = parse_range("bytes=5000-", 1000)
    assert r.start == r.end == 999
    assert r.length == 1


def test_garbage_header_serves_whole_resource():
    r = parse_range("nonsense", 1000)
    assert (r.start, r.end) == (0, 999)


@pytest.mark.parametrize("size", [0, -1])
def test_unknown_or_empty_size_is_unsatisfiable(size):
    with pytest.raises(RangeNotSatisfiable):
        parse_range("bytes=0-10", size)


def test_parsed_range_is_immutable():
    r = parse_range("bytes=0-9", 100)
    with pytest.raises(ValidationError):
        r.start = 5
