"""Tests for _utils.py — timestamps, durations, field lookup."""

from datetime import datetime, timezone

import pytest

from tdcli._utils import _duration_seconds, _get_field, _parse_timestamp, _text, format_td_time


class TestParseTimestamp:
    @pytest.mark.parametrize(
        "value",
        [
            "2023-01-01 12:30:00 UTC",
            "2023-01-01T12:30:00Z",
            "2023-01-01T12:30:00.000Z",
            "2023-01-01T21:30:00+09:00",
            1672576200,
            "1672576200",
        ],
    )
    def test_formats(self, value):
        assert _parse_timestamp(value) == datetime(2023, 1, 1, 12, 30, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "value",
        [None, "", "yesterday", True, 1672576200000, "99999999999999999999", float("inf")],
    )
    def test_unparseable(self, value):
        assert _parse_timestamp(value) is None


class TestFormatTdTime:
    def test_utc_format(self):
        assert format_td_time("2023-01-01T00:00:00Z") == "2023-01-01 00:00:00"

    def test_empty_placeholder(self):
        assert format_td_time(None) == "-"
        assert format_td_time(None, "") == ""

    def test_out_of_range_epoch_renders_placeholder(self):
        assert format_td_time(1672576200000) == "-"


class TestHelpers:
    def test_duration(self):
        assert _duration_seconds("2023-01-01 00:00:00 UTC", "2023-01-01 00:01:30 UTC") == 90.0
        assert _duration_seconds("2023-01-01 00:00:00 UTC", None) is None

    def test_get_field_prefers_snake_case(self):
        assert _get_field({"created_at": "a", "createdAt": "b"}, "created_at", "createdAt") == "a"
        assert _get_field({"createdAt": "b"}, "created_at", "createdAt") == "b"

    def test_text(self):
        assert _text(None) == ""
        assert _text(False) == "false"
        assert _text(3) == "3"
