# sysinventory/report/views.py
from typing import List

from sysinventory.core.schemas import (
    EnvironmentVariable,
    FirmwareInfo,
    MemoryReport,
    NetworkConnection,
    NetworkInterfaceAddress,
    ProcessorInfo,
    SecurityPosture,
    ServiceStatus,
    StorageReport,
    SystemSummary,
)
from sysinventory.utils.formatter import (
    Flagged,
    ReportFormatter,
    format_bytes,
    format_duration,
    format_percent,
)

TIME_FORMAT = "%Y-%m-%d %H:%M:%S %z"


def render_system(fmt: ReportFormatter, title: str, info: SystemSummary) -> None:
    if info.clock_anomaly:
        uptime = Flagged("ANOMALY: boot time is later than the current time", info.anomaly_severity)
    else:
        uptime = format_duration(info.uptime)
    fmt.key_values(title, [
        ("Host", info.hostname),
        ("OS", info.os_name),
        ("Architecture", info.architecture),
        ("Build", info.build),
        ("Role", info.machine_role),
        ("Boot Time", info.boot_time.strftime(TIME_FORMAT)),
        ("Uptime", uptime),
    ])


def render_firmware(fmt: ReportFormatter, title: str, info: FirmwareInfo) -> None:
    fmt.key_values(title, [
        ("Manufacturer", info.manufacturer),
        ("Product", info.product),
        ("Version", info.version),
        ("Serial", info.serial),
    ])


def render_processor(fmt: ReportFormatter, title: str, info: ProcessorInfo) -> None:
    fmt.key_values(title, [
        ("Model", info.model),
        ("Cores / Threads", f"{info.physical_cores} / {info.logical_cores}"),
        ("Clock", f"{info.clock_mhz} MHz" if info.clock_mhz else "unknown"),
        ("Utilization", format_percent(info.utilization)),
    ])


def render_memory(fmt: ReportFormatter, title: str, report: MemoryReport) -> None:
    summary = report.summary
    fmt.key_values(title, [
        ("Total", format_bytes(summary.total_bytes)),
        ("Used", format_bytes(summary.used_bytes)),
        ("Free", format_bytes(summary.free_bytes)),
        ("Usage", Flagged(format_percent(summary.usage_percent), summary.usage_severity)),
    ])
    fmt.table("Memory Modules", ["Slot", "Manufacturer", "Part Number", "Capacity", "Speed"], [
        (m.slot, m.manufacturer, m.part_number, format_bytes(m.capacity_bytes),
         f"{m.speed_mhz} MHz" if m.speed_mhz else "unknown")
        for m in report.modules
    ])


def render_storage(fmt: ReportFormatter, title: str, report: StorageReport) -> None:
    fmt.table(f"{title} - Physical Disks", ["Device", "Model", "Media", "Size"], [
        (d.device_id, d.model, d.media_type, format_bytes(d.size_bytes)) for d in report.disks
    ])
    fmt.table(f"{title} - Fixed Volumes", ["Volume", "Label", "Size", "Free", "Usage"], [
        (v.device_id, v.label, format_bytes(v.total_bytes), format_bytes(v.free_bytes),
         Flagged(format_percent(v.usage_percent), v.usage_severity))
        for v in report.volumes
    ])


def render_interfaces(fmt: ReportFormatter, title: str, rows: List[NetworkInterfaceAddress]) -> None:
    fmt.table(title, ["Interface", "Address", "Prefix"], [
        (r.interface, r.address, f"/{r.prefix_length}" if r.prefix_length is not None else "-")
        for r in rows
    ])


def render_security(fmt: ReportFormatter, title: str, posture: SecurityPosture) -> None:
    rows = [
        ("Antivirus", Flagged(posture.antivirus, posture.antivirus_severity)),
        ("UAC", Flagged("enabled" if posture.uac_enabled else "disabled", posture.uac_severity)),
        ("Execution Policy", Flagged(posture.execution_policy, posture.execution_policy_severity)),
        ("Installed Updates", posture.patch_count),
    ]
    rows.extend(
        (f"Firewall ({p.name})", Flagged("enabled" if p.enabled else "disabled", p.severity))
        for p in posture.firewall
    )
    fmt.key_values(title, rows)


def render_services(fmt: ReportFormatter, title: str, services: List[ServiceStatus]) -> None:
    fmt.table(title, ["Name", "Display Name", "Status", "Start", "Description"], [
        (s.name, s.display_name, Flagged(s.status, s.severity), s.start_mode, s.description)
        for s in services
    ])


def render_environment(fmt: ReportFormatter, title: str, variables: List[EnvironmentVariable]) -> None:
    fmt.key_values(title, [(v.name, v.value if v.value is not None else "(not set)") for v in variables])


def render_connections(fmt: ReportFormatter, title: str, connections: List[NetworkConnection]) -> None:
    fmt.table(title, ["PID", "Process", "Local", "Remote", "State"], [
        ("-" if c.pid is None else c.pid, c.process_name, c.local, c.remote, c.state)
        for c in connections
    ])
