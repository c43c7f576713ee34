"""
Configuration utilities for resolve_cache
"""
import ipaddress
import time
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from .types import RawAddress, ResolveCacheConfig, ResolvedAddress


SUPPORTED_IP_VERSIONS = (4, 6)


def merge_config(config: ResolveCacheConfig) -> ResolveCacheConfig:
    """Normalize and validate user config"""
    families = tuple(dict.fromkeys(int(f) for f in config.families))
    if not families:
        raise ValueError("families must name at least one ip version")
    for family in families:
        if family not in SUPPORTED_IP_VERSIONS:
            raise ValueError(f"Unsupported ip version: {family}")
    config.families = families
    return config


def is_expired(expired_time: float, now: Optional[float] = None) -> bool:
    """Calculate if an address is expired"""
    if now is None:
        now = time.time()
    return expired_time <= now


def has_expired_addresses(
    addresses: list[ResolvedAddress],
    now: Optional[float] = None,
) -> bool:
    """True if any address expired; an empty list counts as expired"""
    if not addresses:
        return True
    if now is None:
        now = time.time()
    return any(is_expired(a.expired_time, now) for a in addresses)


def _coerce_raw_address(raw: Union[RawAddress, Mapping[str, Any]]) -> RawAddress:
    if isinstance(raw, Mapping):
        return RawAddress(address=raw["address"], ttl=raw["ttl"])
    return raw


def extend_addresses(
    addresses: Iterable[Union[RawAddress, Mapping[str, Any]]],
    ip_version: int,
    now: Optional[float] = None,
) -> list[ResolvedAddress]:
    """Attach expiry time and family to raw resolver answers"""
    if now is None:
        now = time.time()

    extended: list[ResolvedAddress] = []
    for raw in addresses:
        raw = _coerce_raw_address(raw)
        extended.append(ResolvedAddress(
            address=raw.address,
            ttl=raw.ttl,
            expired_time=now + raw.ttl,
            family=ip_version,
        ))
    return extended


def get_entry_key(hostname: str, ip_version: int) -> str:
    """Get store key for a hostname and ip version"""
    return f"{hostname.lower()}:{ip_version}"


def get_ip_version(value: str) -> int:
    """Return 4 or 6 for an IP literal, 0 for anything else"""
    try:
        return ipaddress.ip_address(value).version
    except ValueError:
        return 0
