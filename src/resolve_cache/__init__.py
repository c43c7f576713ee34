"""
In-memory DNS resolution cache entries with TTL expiry and round-robin address selection.
"""
from .types import (
    ResolveStatus,
    IpVersion,
    RawAddress,
    ResolvedAddress,
    AfterResolvedCallback,
    ResolveFunction,
    ResolveCacheConfig,
    ResolveCacheStats,
    ResolveCacheEvent,
    ResolveCacheEventListener,
    ResolveCacheStore,
)
from .config import (
    SUPPORTED_IP_VERSIONS,
    merge_config,
    is_expired,
    has_expired_addresses,
    extend_addresses,
    get_entry_key,
    get_ip_version,
)
from .entry import ResolveCacheEntry
from .stores import MemoryStore, create_memory_store
from .resolver import ResolveCacheResolver, create_resolve_cache_resolver


__all__ = [
    # Types
    "ResolveStatus",
    "IpVersion",
    "RawAddress",
    "ResolvedAddress",
    "AfterResolvedCallback",
    "ResolveFunction",
    "ResolveCacheConfig",
    "ResolveCacheStats",
    "ResolveCacheEvent",
    "ResolveCacheEventListener",
    "ResolveCacheStore",
    # Config
    "SUPPORTED_IP_VERSIONS",
    "merge_config",
    "is_expired",
    "has_expired_addresses",
    "extend_addresses",
    "get_entry_key",
    "get_ip_version",
    # Entry
    "ResolveCacheEntry",
    # Stores
    "MemoryStore",
    "create_memory_store",
    # Resolver
    "ResolveCacheResolver",
    "create_resolve_cache_resolver",
]


__version__ = "1.0.0"
