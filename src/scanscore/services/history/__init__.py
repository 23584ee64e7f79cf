"""Scan history package."""

from __future__ import annotations

from scanscore.services.history.exceptions import HistoryError, ScanNotFoundError
from scanscore.services.history.repository import (
    InMemoryScanHistoryRepository,
    RedisScanHistoryRepository,
    ScanHistoryRepository,
)


__all__ = [
    "HistoryError",
    "InMemoryScanHistoryRepository",
    "RedisScanHistoryRepository",
    "ScanHistoryRepository",
    "ScanNotFoundError",
]
