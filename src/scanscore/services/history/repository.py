"""Scan history repositories.

History is kept per device, newest first, and capped: adding beyond
``max_entries`` evicts the oldest scans. Re-adding a scan with a known id
replaces the stored copy and moves it to the front.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import orjson
from pydantic import ValidationError

from scanscore.observability.logging import get_logger
from scanscore.schemas.scan import ScanResult
from scanscore.services.history.exceptions import ScanNotFoundError


if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)

DEFAULT_MAX_ENTRIES = 50


class ScanHistoryRepository(Protocol):
    """Storage contract for per-device scan history."""

    async def list(self, device_id: str) -> list[ScanResult]: ...

    async def add(self, device_id: str, scan: ScanResult) -> ScanResult: ...

    async def remove(self, device_id: str, scan_id: str) -> None: ...

    async def clear(self, device_id: str) -> None: ...

    async def set_favorite(
        self,
        device_id: str,
        scan_id: str,
        is_favorite: bool,
    ) -> ScanResult: ...


# =============================================================================
# In-memory
# =============================================================================


class InMemoryScanHistoryRepository:
    """Process-local history for tests and single-instance development."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        self.max_entries = max_entries
        self._entries: dict[str, list[ScanResult]] = {}

    async def list(self, device_id: str) -> list[ScanResult]:
        return list(self._entries.get(device_id, []))

    async def add(self, device_id: str, scan: ScanResult) -> ScanResult:
        entries = [item for item in self._entries.get(device_id, []) if item.id != scan.id]
        entries.insert(0, scan)
        self._entries[device_id] = entries[: self.max_entries]
        return scan

    async def remove(self, device_id: str, scan_id: str) -> None:
        entries = self._entries.get(device_id)
        if entries:
            self._entries[device_id] = [item for item in entries if item.id != scan_id]

    async def clear(self, device_id: str) -> None:
        self._entries.pop(device_id, None)

    async def set_favorite(
        self,
        device_id: str,
        scan_id: str,
        is_favorite: bool,
    ) -> ScanResult:
        entries = self._entries.get(device_id, [])
        for index, item in enumerate(entries):
            if item.id == scan_id:
                updated = item.model_copy(update={"is_favorite": is_favorite})
                entries[index] = updated
                return updated
        raise ScanNotFoundError(scan_id)


# =============================================================================
# Redis
# =============================================================================


class RedisScanHistoryRepository:
    """History stored as a Redis list of JSON documents per device.

    Key: ``{key_prefix}:{device_id}``. Index 0 is the newest scan.
    """

    def __init__(
        self,
        client: Redis[Any],
        *,
        key_prefix: str = "scanscore:history",
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        self._client = client
        self.key_prefix = key_prefix
        self.max_entries = max_entries

    def _key(self, device_id: str) -> str:
        return f"{self.key_prefix}:{device_id}"

    @staticmethod
    def _serialize(scan: ScanResult) -> str:
        return orjson.dumps(scan.model_dump(mode="json")).decode()

    @staticmethod
    def _deserialize(raw: str | bytes) -> ScanResult | None:
        try:
            return ScanResult.model_validate(orjson.loads(raw))
        except (orjson.JSONDecodeError, ValidationError) as e:
            logger.warning("Skipping unreadable history entry", error=str(e))
            return None

    async def _raw_entries(self, device_id: str) -> list[str | bytes]:
        return await self._client.lrange(self._key(device_id), 0, -1)

    async def list(self, device_id: str) -> list[ScanResult]:
        scans = (self._deserialize(raw) for raw in await self._raw_entries(device_id))
        return [scan for scan in scans if scan is not None]

    async def add(self, device_id: str, scan: ScanResult) -> ScanResult:
        key = self._key(device_id)
        stale = [
            raw
            for raw in await self._raw_entries(device_id)
            if (existing := self._deserialize(raw)) is not None and existing.id == scan.id
        ]

        async with self._client.pipeline(transaction=True) as pipe:
            for raw in stale:
                pipe.lrem(key, 1, raw)
            pipe.lpush(key, self._serialize(scan))
            pipe.ltrim(key, 0, self.max_entries - 1)
            await pipe.execute()

        logger.debug("Scan saved to history", device_id=device_id, scan_id=scan.id)
        return scan

    async def remove(self, device_id: str, scan_id: str) -> None:
        key = self._key(device_id)
        for raw in await self._raw_entries(device_id):
            scan = self._deserialize(raw)
            if scan is not None and scan.id == scan_id:
                await self._client.lrem(key, 1, raw)

    async def clear(self, device_id: str) -> None:
        await self._client.delete(self._key(device_id))

    async def set_favorite(
        self,
        device_id: str,
        scan_id: str,
        is_favorite: bool,
    ) -> ScanResult:
        for index, raw in enumerate(await self._raw_entries(device_id)):
            scan = self._deserialize(raw)
            if scan is None or scan.id != scan_id:
                continue
            updated = scan.model_copy(update={"is_favorite": is_favorite})
            await self._client.lset(self._key(device_id), index, self._serialize(updated))
            return updated
        raise ScanNotFoundError(scan_id)
