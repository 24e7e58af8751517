"""
SysInventory Data Contracts
Typed, read-once records produced by the collectors and consumed by the report views.
"""
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel

from sysinventory.core.exceptions import FailureKind


class Severity(str, Enum):
    OK = "ok"
    CAUTION = "caution"
    CRITICAL = "critical"


def usage_percent(total: int, free: int) -> Optional[float]:
    """Used share of a capacity at full precision, or None when total is not positive."""
    if total <= 0:
        return None
    return (total - free) / total * 100


class SystemSummary(BaseModel):
    hostname: str
    os_name: str
    architecture: str
    build: str
    boot_time: datetime
    collected_at: datetime
    uptime: Optional[timedelta] = None
    clock_anomaly: bool = False
    machine_role: str = "Unknown"
    anomaly_severity: Severity = Severity.OK


class FirmwareInfo(BaseModel):
    manufacturer: str
    product: str
    version: str
    serial: str


class ProcessorInfo(BaseModel):
    model: str
    physical_cores: int
    logical_cores: int
    clock_mhz: Optional[int] = None
    utilization: Optional[float] = None  # None = unknown, never coerced to 0


class MemorySummary(BaseModel):
    """Physical memory in bytes."""
    total_bytes: int
    free_bytes: int
    usage_severity: Severity = Severity.OK

    @property
    def used_bytes(self) -> int:
        return self.total_bytes - self.free_bytes

    @property
    def usage_percent(self) -> Optional[float]:
        return usage_percent(self.total_bytes, self.free_bytes)


class MemoryModule(BaseModel):
    manufacturer: str
    part_number: str
    capacity_bytes: int
    speed_mhz: Optional[int] = None
    slot: str


class MemoryReport(BaseModel):
    summary: MemorySummary
    modules: List[MemoryModule] = []


class DiskDevice(BaseModel):
    device_id: str
    model: str
    media_type: str
    size_bytes: Optional[int] = None


class VolumeUsage(BaseModel):
    """A fixed, local logical volume."""
    device_id: str
    label: str
    total_bytes: int
    free_bytes: int
    usage_severity: Severity = Severity.OK

    @property
    def usage_percent(self) -> Optional[float]:
        return usage_percent(self.total_bytes, self.free_bytes)


class StorageReport(BaseModel):
    disks: List[DiskDevice] = []
    volumes: List[VolumeUsage] = []


class NetworkInterfaceAddress(BaseModel):
    interface: str
    address: str
    prefix_length: Optional[int] = None


class FirewallProfile(BaseModel):
    name: str
    enabled: bool
    severity: Severity


class SecurityPosture(BaseModel):
    antivirus: str
    antivirus_severity: Severity
    uac_enabled: bool
    uac_severity: Severity
    execution_policy: str
    execution_policy_severity: Severity
    patch_count: int
    firewall: List[FirewallProfile] = []


class ServiceStatus(BaseModel):
    name: str
    display_name: str
    status: str
    start_mode: str
    description: str = ""
    severity: Severity = Severity.OK


class EnvironmentVariable(BaseModel):
    name: str
    value: Optional[str] = None


class NetworkConnection(BaseModel):
    pid: Optional[int] = None
    process_name: str = "unknown"
    local: str
    remote: str
    state: str


class CollectorResult(BaseModel):
    """Outcome of one collector run: either data or a failure reason."""
    domain: str
    data: Any = None
    failure_kind: Optional[FailureKind] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure_kind is None


class SectionFailure(BaseModel):
    title: str
    kind: FailureKind
    reason: str


class ReportOutcome(BaseModel):
    succeeded: List[str] = []
    failed: List[SectionFailure] = []

    @property
    def status(self) -> str:
        if not self.failed:
            return "complete"
        if not self.succeeded:
            return "failed"
        return "partial"

    @property
    def exit_code(self) -> int:
        return {"complete": 0, "partial": 1, "failed": 2}[self.status]
