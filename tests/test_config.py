"""
Tests for resolve_cache configuration utilities

Coverage includes:
- merge_config normalization and validation
- is_expired / has_expired_addresses boundaries
- extend_addresses from mappings and RawAddress
- get_entry_key and get_ip_version
"""

import math

import pytest

from resolve_cache.config import (
    extend_addresses,
    get_entry_key,
    get_ip_version,
    has_expired_addresses,
    is_expired,
    merge_config,
)
from resolve_cache.types import RawAddress, ResolveCacheConfig, ResolvedAddress


def make_address(expired_time: float) -> ResolvedAddress:
    return ResolvedAddress(address="10.0.0.1", ttl=60, expired_time=expired_time, family=4)


class TestMergeConfig:
    """Tests for merge_config function"""

    def test_defaults(self):
        """Should keep default values"""
        merged = merge_config(ResolveCacheConfig(id="test"))
        assert merged.families == (4,)
        assert merged.max_entries == 1000
        assert merged.resolve_timeout_seconds == 5.0

    def test_deduplicates_families(self):
        """Should drop repeated families and keep order"""
        merged = merge_config(ResolveCacheConfig(id="test", families=(6, 4, 6)))
        assert merged.families == (6, 4)

    def test_rejects_unknown_family(self):
        """Should reject families other than 4 and 6"""
        with pytest.raises(ValueError):
            merge_config(ResolveCacheConfig(id="test", families=(4, 5)))

    def test_rejects_empty_families(self):
        """Should require at least one family"""
        with pytest.raises(ValueError):
            merge_config(ResolveCacheConfig(id="test", families=()))


class TestIsExpired:
    """Tests for is_expired function"""

    def test_future(self):
        assert is_expired(1001.0, now=1000.0) is False

    def test_exact_boundary(self):
        """Should count expiry time equal to now as expired"""
        assert is_expired(1000.0, now=1000.0) is True

    def test_past(self):
        assert is_expired(999.0, now=1000.0) is True

    def test_default_now(self):
        """Should use the current time when now is omitted"""
        assert is_expired(0.0) is True
        assert is_expired(math.inf) is False


class TestHasExpiredAddresses:
    """Tests for has_expired_addresses function"""

    def test_empty_counts_as_expired(self):
        assert has_expired_addresses([], now=1000.0) is True

    def test_all_fresh(self):
        addresses = [make_address(2000.0), make_address(3000.0)]
        assert has_expired_addresses(addresses, now=1000.0) is False

    def test_one_expired(self):
        """Should flag the whole set when one address expired"""
        addresses = [make_address(2000.0), make_address(1000.0)]
        assert has_expired_addresses(addresses, now=1000.0) is True


class TestExtendAddresses:
    """Tests for extend_addresses function"""

    def test_from_mappings(self):
        extended = extend_addresses(
            [{"address": "1.1.1.1", "ttl": 60}], ip_version=4, now=1000.0
        )
        assert extended == [
            ResolvedAddress(address="1.1.1.1", ttl=60, expired_time=1060.0, family=4)
        ]

    def test_from_raw_addresses(self):
        extended = extend_addresses(
            [RawAddress(address="2001:db8::1", ttl=0)], ip_version=6, now=1000.0
        )
        assert extended[0].expired_time == 1000.0
        assert extended[0].family == 6

    def test_does_not_mutate_input(self):
        raw = [{"address": "1.1.1.1", "ttl": 60}]
        extend_addresses(raw, ip_version=4, now=1000.0)
        assert raw == [{"address": "1.1.1.1", "ttl": 60}]

    def test_missing_key(self):
        """Should fail loudly for mappings without a ttl"""
        with pytest.raises(KeyError):
            extend_addresses([{"address": "1.1.1.1"}], ip_version=4, now=1000.0)


class TestGetEntryKey:
    """Tests for get_entry_key function"""

    def test_key_format(self):
        assert get_entry_key("example.com", 4) == "example.com:4"

    def test_case_insensitive(self):
        assert get_entry_key("Example.COM", 6) == get_entry_key("example.com", 6)


class TestGetIpVersion:
    """Tests for get_ip_version function"""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("127.0.0.1", 4),
            ("::1", 6),
            ("2001:db8::1", 6),
            ("example.com", 0),
            ("", 0),
        ],
    )
    def test_versions(self, value, expected):
        assert get_ip_version(value) == expected
