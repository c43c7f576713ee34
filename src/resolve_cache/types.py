"""
Type definitions for resolve_cache
"""
import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Literal, Optional

if TYPE_CHECKING:
    from .entry import ResolveCacheEntry


class ResolveStatus(enum.IntEnum):
    """Resolution status of a cache entry"""

    UNRESOLVED = 0
    RESOLVING = 1
    RESOLVED = 2


# IP version of a cache entry
IpVersion = Literal[4, 6]


@dataclass
class RawAddress:
    """One answer as returned by the resolve function"""

    address: str
    """IPv4 or IPv6 address"""

    ttl: int
    """DNS TTL in seconds"""


@dataclass(frozen=True)
class ResolvedAddress:
    """A resolver answer extended with expiry metadata"""

    address: str
    """IPv4 or IPv6 address"""

    ttl: int
    """DNS TTL in seconds, as returned by the resolver"""

    expired_time: float
    """When this address expires (Unix timestamp)"""

    family: int
    """IP family, copied from the entry's ip version"""


# Zero-argument callback run after a resolution completes
AfterResolvedCallback = Callable[[], None]

# External resolution capability: (hostname, ip_version) -> answers
ResolveFunction = Callable[[str, int], Awaitable[list[RawAddress]]]


@dataclass
class ResolveCacheConfig:
    """Configuration for the resolve cache resolver"""

    id: str
    """Unique identifier for this resolver instance"""

    families: tuple[int, ...] = (4,)
    """IP versions resolved when no family is requested. Default: (4,)"""

    max_entries: int = 1000
    """Maximum number of cache entries. Default: 1000"""

    resolve_timeout_seconds: float = 5.0
    """Lifetime of a single DNS query (seconds). Default: 5.0"""


@dataclass
class ResolveCacheStats:
    """Statistics from the resolve cache"""

    total_entries: int
    """Total number of cache entries"""

    cache_hits: int
    """Total cache hits"""

    cache_misses: int
    """Total cache misses"""

    hit_ratio: float
    """Cache hit ratio (0-1)"""

    resolutions: int
    """Resolutions performed through the resolve function"""

    resolution_errors: int
    """Resolutions that raised"""

    avg_resolution_time_seconds: float
    """Average resolution time (seconds)"""


# Event types
EventType = Literal[
    "cache:hit",
    "cache:miss",
    "cache:expired",
    "cache:evicted",
    "resolve:start",
    "resolve:wait",
    "resolve:success",
    "resolve:error",
]


@dataclass
class ResolveCacheEvent:
    """Event emitted by the resolve cache resolver"""

    type: EventType
    """Event type"""

    data: dict[str, Any] = field(default_factory=dict)
    """Event-specific data"""


# Event listener type
ResolveCacheEventListener = Callable[[ResolveCacheEvent], None]


class ResolveCacheStore(ABC):
    """Registry of cache entries keyed by hostname and ip version"""

    @abstractmethod
    def get(self, key: str) -> Optional["ResolveCacheEntry"]:
        """Get an entry"""

    @abstractmethod
    def set(self, key: str, entry: "ResolveCacheEntry") -> None:
        """Store an entry"""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete an entry"""

    @abstractmethod
    def has(self, key: str) -> bool:
        """Check if an entry exists"""

    @abstractmethod
    def keys(self) -> list[str]:
        """Get all keys"""

    @abstractmethod
    def size(self) -> int:
        """Get the number of entries"""

    @abstractmethod
    def clear(self) -> None:
        """Remove all entries"""

    @abstractmethod
    def close(self) -> None:
        """Release the store"""
