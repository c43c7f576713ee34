"""
Resolve cache entry - state for one (hostname, ip version) pair
"""
import logging
import time
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from .config import SUPPORTED_IP_VERSIONS, extend_addresses, has_expired_addresses
from .types import (
    AfterResolvedCallback,
    RawAddress,
    ResolvedAddress,
    ResolveStatus,
)

logger = logging.getLogger(__name__)


class ResolveCacheEntry:
    """
    Cached resolution state for one hostname and ip version

    Holds the resolution status, the last set of resolved addresses with
    their expiry times, and the callbacks queued until the next resolution
    completes. The entry never resolves, schedules or invokes anything by
    itself; the owner drives status changes and runs the callbacks.

    The address set is fresh or stale as a whole: once any address has
    expired, every read behaves as if the set were empty.

    Not thread-safe. Callers sharing an entry across threads must lock.

    Example:
        entry = ResolveCacheEntry(4)
        entry.set_addresses([{"address": "1.1.1.1", "ttl": 60}])
        entry.set_status(ResolveStatus.RESOLVED)
        address = entry.get_next_address()
    """

    def __init__(self, ip_version: int) -> None:
        if ip_version not in SUPPORTED_IP_VERSIONS:
            raise ValueError(f"ip_version must be 4 or 6, got {ip_version!r}")

        self._status = ResolveStatus.UNRESOLVED
        self._ip_version = ip_version
        self._addresses: list[ResolvedAddress] = []
        self._resolved_callbacks: list[AfterResolvedCallback] = []
        self._cursor = 0

    @property
    def ip_version(self) -> int:
        """IP version this entry stores addresses for"""
        return self._ip_version

    def set_addresses(
        self,
        addresses: Iterable[Union[RawAddress, Mapping[str, Any]]],
    ) -> list[ResolvedAddress]:
        """
        Replace the cached addresses with a fresh resolution

        Args:
            addresses: Resolver answers with ``address`` and ``ttl`` (seconds)

        Returns:
            A copy of the stored addresses, even if a ttl of 0 already
            expired them for later reads
        """
        self._addresses = extend_addresses(addresses, self._ip_version, time.time())
        self._cursor = 0
        logger.debug(
            f"set_addresses: Stored {len(self._addresses)} address(es) "
            f"for ipv{self._ip_version}"
        )
        return list(self._addresses)

    def get_addresses(self) -> list[ResolvedAddress]:
        """
        Get a copy of the cached addresses

        Returns:
            A new list on every call, or an empty list if any address expired
        """
        if has_expired_addresses(self._addresses, time.time()):
            return []
        return list(self._addresses)

    def get_next_address(self) -> Optional[ResolvedAddress]:
        """
        Get the next address in round-robin order

        Returns:
            The selected address, or None if any address expired
        """
        if has_expired_addresses(self._addresses, time.time()):
            return None

        index = self._cursor % len(self._addresses)
        self._cursor = (index + 1) % len(self._addresses)
        return self._addresses[index]

    def add_after_resolved_callback(self, callback: AfterResolvedCallback) -> None:
        self._resolved_callbacks.append(callback)

    def get_after_resolved_callbacks(self) -> list[AfterResolvedCallback]:
        """Get the registered callbacks, in registration order"""
        return self._resolved_callbacks

    def clear_after_resolved_callbacks(self) -> None:
        # Rebind so a list already handed out stays intact for its reader
        self._resolved_callbacks = []

    def get_status(self) -> ResolveStatus:
        return self._status

    def set_status(self, status: ResolveStatus) -> None:
        """
        Set the status; any transition is allowed

        Plain ints are coerced to ResolveStatus, so values outside 0-2
        raise ValueError.
        """
        logger.debug(
            f"set_status: ipv{self._ip_version} {self._status.name} -> "
            f"{ResolveStatus(status).name}"
        )
        self._status = ResolveStatus(status)

    def __repr__(self) -> str:
        return (
            f"ResolveCacheEntry(ip_version={self._ip_version}, "
            f"status={self._status.name}, addresses={len(self._addresses)})"
        )
