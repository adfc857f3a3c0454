"""Unit tests for nips.nip40 module."""

import pytest

from recentnotes.nips import get_expirations, is_expired, parse_timestamp


class TestParseTimestamp:
    """Leading-integer parsing of tag values."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1700000000", 1_700_000_000),
            ("  1700000000", 1_700_000_000),
            ("1700000000.9", 1_700_000_000),
            ("1700000000abc", 1_700_000_000),
            ("+5", 5),
            ("-5", -5),
            ("0", 0),
        ],
    )
    def test_parses_leading_integer(self, value, expected):
        assert parse_timestamp(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", "soon", " ", "-", "x123"])
    def test_unparseable(self, value):
        assert parse_timestamp(value) is None

    @pytest.mark.parametrize("value", ["\u0665", "\u0661\u0667\u0660\u0660", "\uff11\uff12", "\u09ea"])
    def test_non_ascii_digits_unparseable(self, value):
        assert parse_timestamp(value) is None


class TestGetExpirations:
    """Collecting expiration tags."""

    def test_collects_all_in_order(self):
        tags = (("expiration", "20"), ("t", "x"), ("expiration", "10"))
        assert get_expirations(tags) == [20, 10]

    def test_ignores_malformed(self):
        tags = (("expiration",), ("expiration", "never"), ("Expiration", "5"))
        assert get_expirations(tags) == []


class TestIsExpired:
    """Expiry relative to a reference time."""

    def test_no_tag(self, make_record):
        assert is_expired(make_record(1), now=10**12) is False

    def test_past(self, make_record):
        assert is_expired(make_record(1, tags=[["expiration", "100"]]), now=200) is True

    def test_boundary_is_expired(self, make_record):
        assert is_expired(make_record(1, tags=[["expiration", "200"]]), now=200) is True

    def test_future(self, make_record):
        assert is_expired(make_record(1, tags=[["expiration", "300"]]), now=200) is False

    def test_any_past_tag_expires(self, make_record):
        record = make_record(1, tags=[["expiration", "300"], ["expiration", "100"]])
        assert is_expired(record, now=200) is True

    def test_malformed_means_not_expired(self, make_record):
        assert is_expired(make_record(1, tags=[["expiration", "soon"]]), now=200) is False

    def test_non_ascii_digit_means_not_expired(self, make_record):
        record = make_record(1, tags=[["expiration", "\u0665"]])
        assert is_expired(record, now=200) is False

    def test_defaults_to_current_time(self, make_record):
        assert is_expired(make_record(1, tags=[["expiration", "1"]])) is True
        assert is_expired(make_record(2, tags=[["expiration", "99999999999"]])) is False
