"""Exception hierarchy raised by the scheduler core and its adapters."""

from __future__ import annotations


class SchedulerError(RuntimeError):
    """Base exception for scheduler errors."""


class InvalidArgumentError(SchedulerError, ValueError):
    """Raised when an organization id or input collection is missing."""


class NotConfiguredError(SchedulerError):
    """Raised when an organization has no stations or work-order types."""


class UnschedulableError(SchedulerError):
    """Raised when an operation cannot be placed on any station."""


class ParseFailureError(SchedulerError, ValueError):
    """Raised when an uploaded payload cannot be decoded."""


__all__ = [
    "SchedulerError",
    "InvalidArgumentError",
    "NotConfiguredError",
    "UnschedulableError",
    "ParseFailureError",
]
