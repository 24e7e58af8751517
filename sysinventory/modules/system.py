"""
Operating System Collector

Reads Win32_OperatingSystem and Win32_ComputerSystem in one pass and derives
uptime from the boot timestamp. A boot time later than the collection time
is reported as a clock anomaly, never as a negative uptime.
"""
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from sysinventory.core.exceptions import CollectorError
from sysinventory.core.handles import WmiSource
from sysinventory.core.schemas import Severity, SystemSummary

DOMAIN_ROLES = {
    0: "Standalone Workstation",
    1: "Member Workstation",
    2: "Standalone Server",
    3: "Member Server",
    4: "Backup Domain Controller",
    5: "Primary Domain Controller",
}

# CIM_DATETIME: yyyymmddHHMMSS.mmmmmmsUUU (UUU = UTC offset in minutes)
CIM_DATETIME = re.compile(r"^(\d{14})\.(\d{6})([+-])(\d{3})$")


def parse_cim_datetime(value: str) -> datetime:
    """Convert a WMI CIM_DATETIME string to an aware datetime."""
    match = CIM_DATETIME.match(str(value).strip())
    if not match:
        raise ValueError(f"Unrecognised CIM datetime: {value!r}")
    stamp, micros, sign, offset = match.groups()
    minutes = int(offset) * (-1 if sign == "-" else 1)
    parsed = datetime.strptime(stamp, "%Y%m%d%H%M%S").replace(microsecond=int(micros))
    return parsed.replace(tzinfo=timezone(timedelta(minutes=minutes)))


def derive_uptime(boot_time: datetime, now: datetime) -> Optional[timedelta]:
    """Uptime, or None when the boot time lies in the future."""
    uptime = now - boot_time
    if uptime < timedelta(0):
        return None
    return uptime


def collect_system(cim: WmiSource, now: Optional[datetime] = None) -> SystemSummary:
    os_rows = cim.query("Win32_OperatingSystem")
    if not os_rows:
        raise CollectorError("system", "Win32_OperatingSystem returned no instance")
    os_info = os_rows[0]
    now = now or datetime.now(timezone.utc)

    cs_rows = cim.query("Win32_ComputerSystem")
    role = "Unknown"
    hostname = getattr(os_info, "CSName", None) or ""
    if cs_rows:
        role = DOMAIN_ROLES.get(cs_rows[0].DomainRole, "Unknown")
        hostname = cs_rows[0].Name or hostname

    boot_time = parse_cim_datetime(os_info.LastBootUpTime)
    uptime = derive_uptime(boot_time, now)

    return SystemSummary(
        hostname=hostname,
        os_name=(os_info.Caption or "").strip(),
        architecture=os_info.OSArchitecture or "Unknown",
        build=str(os_info.BuildNumber),
        boot_time=boot_time,
        collected_at=now,
        uptime=uptime,
        clock_anomaly=uptime is None,
        machine_role=role,
        anomaly_severity=Severity.CRITICAL if uptime is None else Severity.OK,
    )
