"""Exceptions raised at the ingestion and query boundaries."""

from __future__ import annotations


class InvalidTimestamp(ValueError):
    """A trip start/end time could not be resolved to a minute of day."""

    def __init__(self, message: str, *, row_number: int | None = None, value: object = None):
        super().__init__(message)
        self.row_number = row_number
        self.value = value


class InvalidTripRecord(ValueError):
    """A trip record is missing a required field."""


class InvalidStationRecord(ValueError):
    """A station catalog entry is missing fields or duplicates another entry."""


class InvalidTimeFilter(ValueError):
    """Time-filter control value outside ``{-1} ∪ [0, 1439]``."""

    def __init__(self, value: object):
        super().__init__(
            f"Time filter must be -1 or an integer minute of day in [0, 1439], got {value!r}"
        )
        self.value = value


__all__ = [
    "InvalidStationRecord",
    "InvalidTimeFilter",
    "InvalidTimestamp",
    "InvalidTripRecord",
]
