"""Exceptions for scan history."""

from __future__ import annotations


class HistoryError(Exception):
    """Base exception for scan history errors."""

    error_code: str = "history_failed"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ScanNotFoundError(HistoryError):
    """No scan with the given id exists in the device's history."""

    error_code = "not_found"

    def __init__(self, scan_id: str) -> None:
        self.scan_id = scan_id
        super().__init__(f"Scan {scan_id} not found in history")
