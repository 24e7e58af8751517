"""
Windows Service Collector

Includes every service whose start mode is automatic, whatever its current
state: a stopped automatic service is exactly what an operator needs to see.
A service that refuses a full query is still judged by its start mode alone.
"""
from typing import List, Optional

import psutil

from sysinventory.core.schemas import ServiceStatus, Severity
from sysinventory.utils.logger import Logger

AUTOMATIC = "automatic"
RUNNING = "running"
UNKNOWN = "unknown"


def _restricted_service(service) -> Optional[ServiceStatus]:
    """Fallback for a service whose full configuration cannot be read.

    Returns:
        ServiceStatus with unknown fields marked, or None when even the start mode is unreadable
        or is not automatic.
    """
    try:
        start_type = service.start_type()
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        Logger().warning(f"Service '{service.name()}' skipped: start mode not readable")
        return None
    if (start_type or "").lower() != AUTOMATIC:
        return None

    try:
        status = service.status() or UNKNOWN
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        status = UNKNOWN
    return ServiceStatus(
        name=service.name(),
        display_name=service.display_name() or "",
        status=status,
        start_mode=start_type,
        description="",
        severity=Severity.OK if status == RUNNING else Severity.CAUTION,
    )


def collect_services() -> List[ServiceStatus]:
    """Enumerate automatic-start services via the Service Control Manager.

    Raises:
        AttributeError: psutil exposes no service API on this platform.
        psutil.AccessDenied: The SCM refused enumeration.
    """
    services = []
    for service in psutil.win_service_iter():
        try:
            info = service.as_dict()
        except psutil.NoSuchProcess:
            # Deleted between enumeration and query
            continue
        except psutil.AccessDenied:
            restricted = _restricted_service(service)
            if restricted is not None:
                services.append(restricted)
            continue
        if (info.get("start_type") or "").lower() != AUTOMATIC:
            continue
        status = info.get("status") or UNKNOWN
        services.append(ServiceStatus(
            name=info.get("name") or service.name(),
            display_name=info.get("display_name") or "",
            status=status,
            start_mode=info["start_type"],
            description=info.get("description") or "",
            severity=Severity.OK if status == RUNNING else Severity.CAUTION,
        ))
    services.sort(key=lambda s: s.name.lower())
    return services
