# sysinventory/modules/base.py
from typing import Any, Callable

from sysinventory.core.exceptions import classify, describe
from sysinventory.core.schemas import CollectorResult, Severity

# Usage thresholds shared by memory and volume collectors (percent)
USAGE_CAUTION = 80.0
USAGE_CRITICAL = 90.0


def usage_severity(percent) -> Severity:
    """Grade a capacity usage percentage; unknown usage is not flagged."""
    if percent is None or percent < USAGE_CAUTION:
        return Severity.OK
    if percent < USAGE_CRITICAL:
        return Severity.CAUTION
    return Severity.CRITICAL


def run_collector(domain: str, func: Callable[[], Any]) -> CollectorResult:
    """Collector boundary: any fault becomes a failed CollectorResult, never an exception."""
    try:
        return CollectorResult(domain=domain, data=func())
    except Exception as exc:
        return CollectorResult(domain=domain, failure_kind=classify(exc), reason=describe(exc))
