# sysinventory/modules/storage.py
from typing import List

from sysinventory.core.handles import WmiSource
from sysinventory.core.schemas import DiskDevice, StorageReport, VolumeUsage, usage_percent
from sysinventory.modules.base import usage_severity

# Win32_LogicalDisk.DriveType: 2 removable, 3 local fixed, 4 network, 5 optical, 6 RAM disk
FIXED_DRIVE_TYPE = 3


def collect_disks(cim: WmiSource) -> List[DiskDevice]:
    return [
        DiskDevice(
            device_id=drive.DeviceID or "",
            model=(drive.Model or "Unknown").strip(),
            media_type=drive.MediaType or "Unknown",
            size_bytes=int(drive.Size) if drive.Size else None,
        )
        for drive in cim.query("Win32_DiskDrive")
    ]


def collect_volumes(cim: WmiSource) -> List[VolumeUsage]:
    """Fixed local volumes only; removable, network and optical drives are never volumes here."""
    volumes = []
    for disk in cim.query("Win32_LogicalDisk", DriveType=FIXED_DRIVE_TYPE):
        if disk.DriveType != FIXED_DRIVE_TYPE:
            continue
        total = int(disk.Size or 0)
        free = int(disk.FreeSpace or 0)
        volumes.append(VolumeUsage(
            device_id=disk.DeviceID,
            label=disk.VolumeName or "",
            total_bytes=total,
            free_bytes=free,
            usage_severity=usage_severity(usage_percent(total, free)),
        ))
    return volumes


def collect_storage(cim: WmiSource) -> StorageReport:
    return StorageReport(disks=collect_disks(cim), volumes=collect_volumes(cim))
