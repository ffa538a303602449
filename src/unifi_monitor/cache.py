"""Snapshot cache with per-resource TTL, stale fallback and single-flight fetches.

Serves the freshest available payload for each resource kind while shielding
callers from controller outages:

- fresh entry (younger than the kind's TTL): served without contacting the source
- expired or missing entry: one fetch per kind, shared by overlapping callers
- SourceError with a previous entry: the previous entry is served as stale
- ConfigurationError, or any failure with no previous entry: propagated
"""

import asyncio
import time
from collections.abc import Callable
from loguru import logger
from typing import Any, NamedTuple, Protocol
from unifi_monitor.models import ResourceKind, Snapshot
from unifi_monitor.utils.errors import SourceError
from unifi_monitor.utils.logging import get_logger


DEFAULT_TTLS = {
    ResourceKind.DEVICES: 30.0,
    ResourceKind.CLIENTS: 60.0,
}


class TelemetrySource(Protocol):
    """Anything that can fetch a raw resource list from the controller."""

    async def fetch(self, kind: ResourceKind) -> list[dict[str, Any]]: ...


class _Entry(NamedTuple):
    data: list[dict[str, Any]]
    timestamp: float


class SnapshotCache:
    """Per-resource-kind snapshot slots in front of a telemetry source.

    One instance per process, passed to whoever needs snapshots.
    """

    def __init__(
        self,
        source: TelemetrySource,
        ttls: dict[ResourceKind, float] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize snapshot cache.

        Args:
            source: Telemetry source to fetch from
            ttls: TTL in seconds per resource kind (defaults: devices 30s, clients 60s)
            clock: Monotonic clock, injectable for tests
        """
        self._source = source
        self._ttls = {**DEFAULT_TTLS, **(ttls or {})}
        self._clock = clock
        self._entries: dict[ResourceKind, _Entry] = {}
        self._inflight: dict[ResourceKind, asyncio.Task] = {}
        self._stats = {
            'hits': 0,
            'misses': 0,
            'fetches': 0,
            'failures': 0,
            'stale_served': 0,
            'joined': 0,
        }

    def ttl(self, kind: ResourceKind) -> float:
        return self._ttls[kind]

    async def get(self, kind: ResourceKind) -> Snapshot:
        """Get the freshest available snapshot of a resource.

        Args:
            kind: Resource kind

        Returns:
            Snapshot with `stale=True` when a failed refresh was covered by a
            previous payload

        Raises:
            ConfigurationError: If the source is not configured
            SourceError: If the fetch failed and no previous payload exists
        """
        log = get_logger(kind.value)
        entry = self._entries.get(kind)
        if entry is not None:
            age = self._clock() - entry.timestamp
            if age < self._ttls[kind]:
                self._stats['hits'] += 1
                log.debug(f'Cache hit (age: {age:.1f}s)')
                return Snapshot(data=entry.data, stale=False, fetched_at=entry.timestamp)

        self._stats['misses'] += 1

        # ConfigurationError is not a SourceError and always propagates.
        try:
            entry = await self._fetch_once(kind)
        except SourceError as e:
            fallback = self._entries.get(kind)
            if fallback is None:
                raise
            self._stats['stale_served'] += 1
            log.warning(
                'UniFi API error, returning stale cache',
                error_code=e.error_code,
                error=e.message,
                age=round(self._clock() - fallback.timestamp, 1),
            )
            return Snapshot(data=fallback.data, stale=True, fetched_at=fallback.timestamp)

        return Snapshot(data=entry.data, stale=False, fetched_at=entry.timestamp)

    async def _fetch_once(self, kind: ResourceKind) -> _Entry:
        """Join the in-flight fetch for this kind, or start one."""
        task = self._inflight.get(kind)
        if task is None:
            task = asyncio.create_task(self._refresh(kind))
            self._inflight[kind] = task
            task.add_done_callback(lambda done, k=kind: self._finish(k, done))
        else:
            self._stats['joined'] += 1
            get_logger(kind.value).debug('Joining in-flight fetch')

        # A cancelled caller must not cancel the fetch other callers share.
        return await asyncio.shield(task)

    def _finish(self, kind: ResourceKind, task: asyncio.Task) -> None:
        if self._inflight.get(kind) is task:
            del self._inflight[kind]
        if not task.cancelled():
            # Mark the exception retrieved even if every awaiter went away.
            task.exception()

    async def _refresh(self, kind: ResourceKind) -> _Entry:
        self._stats['fetches'] += 1
        try:
            data = await self._source.fetch(kind)
        except Exception:
            self._stats['failures'] += 1
            raise

        entry = _Entry(data=list(data), timestamp=self._clock())
        self._entries[kind] = entry
        get_logger(kind.value).debug(f'Cache set ({len(entry.data)} records)')
        return entry

    def peek(self, kind: ResourceKind) -> Snapshot | None:
        """Return the cached payload without fetching, stale if expired."""
        entry = self._entries.get(kind)
        if entry is None:
            return None
        stale = self._clock() - entry.timestamp >= self._ttls[kind]
        return Snapshot(data=entry.data, stale=stale, fetched_at=entry.timestamp)

    def invalidate(self, kind: ResourceKind) -> None:
        """Drop the cached payload for one kind."""
        if self._entries.pop(kind, None) is not None:
            get_logger(kind.value).debug('Cache invalidated')

    def clear(self) -> None:
        """Drop all cached payloads."""
        count = len(self._entries)
        self._entries.clear()
        logger.debug(f'Cache cleared: {count} entries removed')

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dict with hits, misses, fetches, failures, stale_served, joined,
            hit_rate and size
        """
        total_requests = self._stats['hits'] + self._stats['misses']
        hit_rate = (self._stats['hits'] / total_requests * 100) if total_requests > 0 else 0

        return {
            **self._stats,
            'size': len(self._entries),
            'in_flight': len(self._inflight),
            'hit_rate': f'{hit_rate:.1f}%',
            'total_requests': total_requests,
        }
