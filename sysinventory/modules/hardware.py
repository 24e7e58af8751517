# sysinventory/modules/hardware.py
import time
from typing import Optional

import psutil

from sysinventory.core.exceptions import CollectorError
from sysinventory.core.handles import WmiSource
from sysinventory.core.schemas import FirmwareInfo, ProcessorInfo
from sysinventory.utils.logger import Logger


def _text(value) -> str:
    return str(value).strip() if value is not None else "Unknown"


def collect_firmware(cim: WmiSource) -> FirmwareInfo:
    """Reads the BIOS/UEFI identity from Win32_BIOS."""
    rows = cim.query("Win32_BIOS")
    if not rows:
        raise CollectorError("firmware", "Win32_BIOS returned no instance")
    bios = rows[0]
    return FirmwareInfo(
        manufacturer=_text(bios.Manufacturer),
        product=_text(bios.Name),
        version=_text(bios.SMBIOSBIOSVersion),
        serial=_text(bios.SerialNumber),
    )


def sample_cpu_utilization(interval: float) -> Optional[float]:
    """
    Measures system-wide CPU utilization over `interval` seconds.
    The first psutil reading only primes the counters and is discarded.

    Returns:
        float: Utilization in [0, 100], or None when the counters cannot be read.
    """
    try:
        psutil.cpu_percent(interval=None)
        time.sleep(interval)
        value = psutil.cpu_percent(interval=None)
    except Exception as e:
        Logger().warning(f"CPU sampling unavailable: {e}")
        return None
    if value is None or not 0.0 <= value <= 100.0:
        return None
    return float(value)


def collect_processor(cim: WmiSource, sample_interval: float = 1.0) -> ProcessorInfo:
    """Aggregates Win32_Processor over all sockets and attaches a utilization sample."""
    rows = cim.query("Win32_Processor")
    if not rows:
        raise CollectorError("processor", "Win32_Processor returned no instance")

    physical = sum(int(cpu.NumberOfCores or 0) for cpu in rows)
    logical = sum(int(cpu.NumberOfLogicalProcessors or 0) for cpu in rows)
    if physical < 1:
        physical = psutil.cpu_count(logical=False) or 1
    if logical < physical:
        logical = max(psutil.cpu_count(logical=True) or 0, physical)

    return ProcessorInfo(
        model=_text(rows[0].Name),
        physical_cores=physical,
        logical_cores=logical,
        clock_mhz=int(rows[0].MaxClockSpeed) if rows[0].MaxClockSpeed else None,
        utilization=sample_cpu_utilization(sample_interval),
    )
