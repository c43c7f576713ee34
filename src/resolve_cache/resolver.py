"""
Resolve Cache Resolver - owns one cache entry per hostname and ip version
"""
import asyncio
import logging
import math
import time
from typing import Callable, Optional

from .config import get_entry_key, get_ip_version, merge_config
from .entry import ResolveCacheEntry
from .stores.memory import MemoryStore
from .types import (
    ResolveCacheConfig,
    ResolveCacheEvent,
    ResolveCacheEventListener,
    ResolveCacheStats,
    ResolveCacheStore,
    ResolvedAddress,
    ResolveFunction,
    ResolveStatus,
)

logger = logging.getLogger(__name__)


class ResolveCacheResolver:
    """
    Resolve Cache Resolver

    Drives ResolveCacheEntry objects on behalf of callers:
    - Creates entries lazily per (hostname, ip version)
    - Re-resolves once an entry's addresses expire
    - Coalesces concurrent lookups onto a single in-flight resolution
    - Round-robin address selection from the cached set
    - Event emission for observability

    Example:
        resolver = ResolveCacheResolver(ResolveCacheConfig(
            id='api-resolver',
            families=(4, 6),
        ))

        addresses = await resolver.resolve('api.example.com')
        address = await resolver.resolve_one('api.example.com')
    """

    def __init__(
        self,
        config: ResolveCacheConfig,
        store: Optional[ResolveCacheStore] = None,
        resolve_function: Optional[ResolveFunction] = None,
    ) -> None:
        self._config = merge_config(config)
        self._store = store or MemoryStore(self._config.max_entries, self._on_store_evict)
        self._resolve_function = resolve_function
        self._listeners: set[ResolveCacheEventListener] = set()
        # Latest answer per key, shared with waiters of an in-flight resolution
        self._fresh_results: dict[str, list[ResolvedAddress]] = {}

        # Statistics
        self._cache_hits = 0
        self._cache_misses = 0
        self._resolution_errors = 0
        self._total_resolution_time = 0.0
        self._resolution_count = 0

    @property
    def id(self) -> str:
        return self._config.id

    async def resolve(
        self,
        hostname: str,
        *,
        family: Optional[int] = None,
    ) -> list[ResolvedAddress]:
        """
        Resolve a hostname, using cached addresses while they are fresh

        Args:
            hostname: The hostname to resolve
            family: 4 or 6; defaults to every family in the config

        Returns:
            Addresses of all requested families, in resolver order
        """
        families = self._families(family)
        literal_version = get_ip_version(hostname)
        if literal_version:
            if family is not None and literal_version != family:
                return []
            return [ResolvedAddress(
                address=hostname,
                ttl=0,
                expired_time=math.inf,
                family=literal_version,
            )]

        addresses: list[ResolvedAddress] = []
        for ip_version in families:
            addresses.extend(await self._resolve_family(hostname, ip_version))
        return addresses

    async def resolve_one(
        self,
        hostname: str,
        *,
        family: Optional[int] = None,
    ) -> Optional[ResolvedAddress]:
        """
        Resolve and select a single address in round-robin order

        A resolution whose ttl already ran out (ttl 0) is not cached, so the
        first address of that fresh answer is returned instead.
        """
        families = self._families(family)
        if get_ip_version(hostname):
            addresses = await self.resolve(hostname, family=family)
            return addresses[0] if addresses else None

        for ip_version in families:
            addresses = await self._resolve_family(hostname, ip_version)
            address = self.get_next_address(hostname, ip_version)
            if address is None and addresses:
                address = addresses[0]
            if address is not None:
                return address
        return None

    def get_next_address(self, hostname: str, family: int) -> Optional[ResolvedAddress]:
        """
        Select the next cached address without resolving

        Returns:
            The selected address, or None if nothing fresh is cached
        """
        entry = self._store.get(get_entry_key(hostname, family))
        if entry is None:
            return None
        return entry.get_next_address()

    def get_entry(self, hostname: str, family: int) -> Optional[ResolveCacheEntry]:
        """Get the cache entry for a hostname and ip version, if tracked"""
        return self._store.get(get_entry_key(hostname, family))

    async def _resolve_family(self, hostname: str, ip_version: int) -> list[ResolvedAddress]:
        key = get_entry_key(hostname, ip_version)
        entry = self._store.get(key)
        if entry is None:
            entry = ResolveCacheEntry(ip_version)
            self._store.set(key, entry)

        cached = entry.get_addresses()
        if cached:
            self._cache_hits += 1
            self._emit(ResolveCacheEvent(
                type="cache:hit",
                data={"hostname": hostname, "family": ip_version, "count": len(cached)},
            ))
            return cached

        if entry.get_status() == ResolveStatus.RESOLVING:
            return await self._wait_for_resolution(entry, hostname, ip_version)

        self._cache_misses += 1
        event_type = "cache:expired" if entry.get_status() == ResolveStatus.RESOLVED else "cache:miss"
        self._emit(ResolveCacheEvent(
            type=event_type,
            data={"hostname": hostname, "family": ip_version},
        ))
        return await self._fresh_resolve(entry, hostname, ip_version)

    async def _wait_for_resolution(
        self,
        entry: ResolveCacheEntry,
        hostname: str,
        ip_version: int,
    ) -> list[ResolvedAddress]:
        """Wait for the in-flight resolution of an entry and share its result"""
        key = get_entry_key(hostname, ip_version)
        loop = asyncio.get_running_loop()
        done: asyncio.Future = loop.create_future()

        def _release() -> None:
            if not done.done():
                done.set_result(list(self._fresh_results.get(key, [])))

        entry.add_after_resolved_callback(_release)
        self._emit(ResolveCacheEvent(
            type="resolve:wait",
            data={"hostname": hostname, "family": ip_version},
        ))
        return await done

    async def _fresh_resolve(
        self,
        entry: ResolveCacheEntry,
        hostname: str,
        ip_version: int,
    ) -> list[ResolvedAddress]:
        """
        Resolve through the resolve function and store the result

        Returns:
            The addresses just stored, including ones a ttl of 0 has
            already expired in the entry
        """
        key = get_entry_key(hostname, ip_version)
        start_time = time.time()
        entry.set_status(ResolveStatus.RESOLVING)
        self._emit(ResolveCacheEvent(
            type="resolve:start",
            data={"hostname": hostname, "family": ip_version},
        ))

        try:
            resolve = self._get_resolve_function()
            raw_addresses = await resolve(hostname, ip_version)
            fresh = entry.set_addresses(raw_addresses)
            self._fresh_results[key] = fresh
        except Exception as e:
            self._resolution_errors += 1
            entry.set_status(ResolveStatus.UNRESOLVED)
            logger.warning(f"_fresh_resolve: Resolving '{hostname}' (ipv{ip_version}) failed: {e!r}")
            self._emit(ResolveCacheEvent(
                type="resolve:error",
                data={"hostname": hostname, "family": ip_version, "error": str(e)},
            ))
            raise
        else:
            entry.set_status(ResolveStatus.RESOLVED)

            duration_seconds = time.time() - start_time
            self._total_resolution_time += duration_seconds
            self._resolution_count += 1

            self._emit(ResolveCacheEvent(
                type="resolve:success",
                data={
                    "hostname": hostname,
                    "family": ip_version,
                    "address_count": len(fresh),
                    "duration_seconds": duration_seconds,
                },
            ))
            return fresh
        finally:
            # Cancellation skips the handlers above
            if entry.get_status() == ResolveStatus.RESOLVING:
                entry.set_status(ResolveStatus.UNRESOLVED)
            self._run_after_resolved_callbacks(entry)
            self._fresh_results.pop(key, None)

    def _run_after_resolved_callbacks(self, entry: ResolveCacheEntry) -> None:
        callbacks = entry.get_after_resolved_callbacks()
        entry.clear_after_resolved_callbacks()
        for callback in callbacks:
            try:
                callback()
            except Exception:
                logger.exception("_run_after_resolved_callbacks: Callback failed")

    def _get_resolve_function(self) -> ResolveFunction:
        if self._resolve_function is None:
            from .dns_backend import create_dnspython_resolve_function

            self._resolve_function = create_dnspython_resolve_function(
                self._config.resolve_timeout_seconds,
            )
        return self._resolve_function

    def _families(self, family: Optional[int]) -> tuple[int, ...]:
        if family is None:
            return self._config.families
        if family not in (4, 6):
            raise ValueError(f"family must be 4 or 6, got {family!r}")
        return (family,)

    def forget(self, hostname: str) -> bool:
        """Stop tracking a hostname, dropping its entries for every family"""
        removed = False
        for ip_version in (4, 6):
            if self._store.delete(get_entry_key(hostname, ip_version)):
                removed = True
                self._emit(ResolveCacheEvent(
                    type="cache:evicted",
                    data={"hostname": hostname, "family": ip_version, "reason": "manual"},
                ))
        return removed

    def _on_store_evict(self, key: str, entry: ResolveCacheEntry) -> None:
        if entry.get_status() == ResolveStatus.RESOLVING:
            logger.warning(f"_on_store_evict: Evicted '{key}' while it was resolving")
        self._emit(ResolveCacheEvent(
            type="cache:evicted",
            data={"key": key, "reason": "capacity"},
        ))

    def clear(self) -> None:
        """Drop all entries"""
        keys = self._store.keys()
        self._store.clear()
        for key in keys:
            self._emit(ResolveCacheEvent(
                type="cache:evicted",
                data={"key": key, "reason": "manual"},
            ))

    def get_stats(self) -> ResolveCacheStats:
        """Get cache statistics"""
        total_requests = self._cache_hits + self._cache_misses

        return ResolveCacheStats(
            total_entries=self._store.size(),
            cache_hits=self._cache_hits,
            cache_misses=self._cache_misses,
            hit_ratio=self._cache_hits / total_requests if total_requests > 0 else 0,
            resolutions=self._resolution_count,
            resolution_errors=self._resolution_errors,
            avg_resolution_time_seconds=(
                self._total_resolution_time / self._resolution_count
                if self._resolution_count > 0 else 0
            ),
        )

    def on(self, listener: ResolveCacheEventListener) -> Callable[[], None]:
        """Subscribe to events"""
        self._listeners.add(listener)
        return lambda: self._listeners.discard(listener)

    def off(self, listener: ResolveCacheEventListener) -> None:
        """Unsubscribe from events"""
        self._listeners.discard(listener)

    def _emit(self, event: ResolveCacheEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"_emit: Listener failed for '{event.type}'")

    def destroy(self) -> None:
        """Destroy the resolver, releasing resources"""
        self._listeners.clear()
        self._fresh_results.clear()
        self._store.close()


def create_resolve_cache_resolver(
    config: ResolveCacheConfig,
    store: Optional[ResolveCacheStore] = None,
    resolve_function: Optional[ResolveFunction] = None,
) -> ResolveCacheResolver:
    """Factory function to create a resolve cache resolver"""
    return ResolveCacheResolver(config, store, resolve_function)
