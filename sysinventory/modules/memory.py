# sysinventory/modules/memory.py
from sysinventory.core.exceptions import CollectorError
from sysinventory.core.handles import WmiSource
from sysinventory.core.schemas import MemoryModule, MemoryReport, MemorySummary, usage_percent
from sysinventory.modules.base import usage_severity

KIB = 1024


def build_memory_summary(total_kib: int, free_kib: int) -> MemorySummary:
    """Win32_OperatingSystem reports physical memory in KiB."""
    total, free = int(total_kib) * KIB, int(free_kib) * KIB
    if free > total:
        raise CollectorError("memory", f"free memory ({free} B) exceeds total ({total} B)")
    return MemorySummary(
        total_bytes=total,
        free_bytes=free,
        usage_severity=usage_severity(usage_percent(total, free)),
    )


def collect_memory(cim: WmiSource) -> MemoryReport:
    rows = cim.query("Win32_OperatingSystem")
    if not rows:
        raise CollectorError("memory", "Win32_OperatingSystem returned no instance")
    summary = build_memory_summary(rows[0].TotalVisibleMemorySize, rows[0].FreePhysicalMemory)

    modules = [
        MemoryModule(
            manufacturer=(stick.Manufacturer or "Unknown").strip(),
            part_number=(stick.PartNumber or "").strip(),
            capacity_bytes=int(stick.Capacity or 0),
            speed_mhz=int(stick.Speed) if stick.Speed else None,
            slot=(stick.DeviceLocator or "").strip(),
        )
        for stick in cim.query("Win32_PhysicalMemory")
    ]
    return MemoryReport(summary=summary, modules=modules)
