"""
SysInventory Error Taxonomy
Collector faults are reported per section; only FatalEnvironment stops the run.
"""
from enum import Enum

import psutil


class InventoryError(Exception):
    """Base class for every error raised by sysinventory."""


class CollectorError(InventoryError):
    """A collector could not produce its record."""

    def __init__(self, domain: str, reason: str):
        super().__init__(f"{domain}: {reason}")
        self.domain = domain
        self.reason = reason


class PermissionDenied(CollectorError):
    """The current principal lacks rights to query the interface."""


class InterfaceUnavailable(CollectorError):
    """The query surface does not exist on this OS version."""


class FatalEnvironment(InventoryError):
    """Baseline context cannot be established; no section can run."""


class FailureKind(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    INTERFACE_UNAVAILABLE = "interface_unavailable"
    ERROR = "error"


def classify(exc: BaseException) -> FailureKind:
    """Map a raw collector fault to its failure kind."""
    if isinstance(exc, PermissionDenied):
        return FailureKind.PERMISSION_DENIED
    if isinstance(exc, InterfaceUnavailable):
        return FailureKind.INTERFACE_UNAVAILABLE
    if isinstance(exc, (PermissionError, psutil.AccessDenied)):
        return FailureKind.PERMISSION_DENIED
    if isinstance(exc, (NotImplementedError, AttributeError, ImportError, FileNotFoundError)):
        return FailureKind.INTERFACE_UNAVAILABLE
    return FailureKind.ERROR


def describe(exc: BaseException) -> str:
    """Short human-readable reason for a failure line."""
    if isinstance(exc, CollectorError):
        return exc.reason
    text = str(exc).strip()
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__
