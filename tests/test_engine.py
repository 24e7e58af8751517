# tests/test_engine.py
from unittest.mock import MagicMock, patch

import psutil
import pytest

from conftest import FakePowerShell, FakeRegistry, FakeWmi
from sysinventory.core.exceptions import FailureKind, PermissionDenied
from sysinventory.core.handles import QueryHandles
from sysinventory.modules.base import run_collector
from sysinventory.report.engine import InventoryReport, ReportState, Section

HOST_TABLES = {
    "Win32_OperatingSystem": [{
        "Caption": "Microsoft Windows 11 Pro", "OSArchitecture": "64-bit", "BuildNumber": "22631",
        "LastBootUpTime": "20260101000000.000000+000", "CSName": "WS-01",
        "TotalVisibleMemorySize": 16_777_216, "FreePhysicalMemory": 4_194_304,
    }],
    "Win32_ComputerSystem": [{"Name": "WS-01", "DomainRole": 0}],
    "Win32_BIOS": [{"Manufacturer": "LENOVO", "Name": "N2IET", "SMBIOSBIOSVersion": "N2IET96W", "SerialNumber": "PF1"}],
    "Win32_Processor": [{"Name": "AMD Ryzen 7", "NumberOfCores": 8, "NumberOfLogicalProcessors": 16, "MaxClockSpeed": 3800}],
    "Win32_PhysicalMemory": [],
    "Win32_DiskDrive": [],
    "Win32_LogicalDisk": [],
    "Win32_QuickFixEngineering": [],
}


class StubConfig:
    cpu_sample_interval = 0.0


def _handles(tables=None):
    return QueryHandles(
        cimv2=FakeWmi(tables or HOST_TABLES),
        security_center=FakeWmi({"AntiVirusProduct": []}),
        registry=FakeRegistry(),
        powershell=FakePowerShell("RemoteSigned"),
    )


@pytest.fixture
def host_patches():
    with patch('psutil.cpu_percent', return_value=5.0), \
            patch('time.sleep'), \
            patch('psutil.net_if_addrs', return_value={}), \
            patch('psutil.net_connections', return_value=[]), \
            patch('psutil.win_service_iter', create=True, return_value=iter([])):
        yield


def test_run_collector_converts_faults():
    def denied():
        raise psutil.AccessDenied(pid=4)

    result = run_collector("services", denied)
    assert not result.ok
    assert result.failure_kind == FailureKind.PERMISSION_DENIED

    def no_service_api():
        raise AttributeError("module 'psutil' has no attribute 'win_service_iter'")

    missing = run_collector("services", no_service_api)
    assert missing.failure_kind == FailureKind.INTERFACE_UNAVAILABLE


def test_full_success(console_buffer, host_patches):
    buffer, fmt = console_buffer
    report = InventoryReport(_handles(), fmt, StubConfig())
    outcome = report.run()

    assert outcome.exit_code == 0
    assert len(outcome.succeeded) == 10
    assert report.state == ReportState.DONE
    assert "Report complete" in buffer.getvalue()


def test_permission_fault_does_not_stop_later_sections(console_buffer, host_patches):
    buffer, fmt = console_buffer
    report = InventoryReport(_handles(), fmt, StubConfig())
    sections = report.build_sections()

    def denied():
        raise PermissionDenied("firmware", "access denied by WMI")

    sections[1] = Section("Firmware", "firmware", denied, sections[1].render)
    with patch.object(report, 'build_sections', return_value=sections):
        outcome = report.run()

    assert [f.title for f in outcome.failed] == ["Firmware"]
    assert outcome.failed[0].kind == FailureKind.PERMISSION_DENIED
    assert outcome.succeeded[-1] == "Network Connections"
    assert outcome.exit_code == 1

    output = buffer.getvalue()
    assert "[!] Firmware: permission denied (access denied by WMI)" in output
    assert "Partial failure: 1 of 10 sections failed (Firmware)" in output
    assert output.index("[!] Firmware") < output.index("Processor")


def test_every_section_failing_is_total_failure(console_buffer):
    buffer, fmt = console_buffer
    report = InventoryReport(_handles(), fmt, StubConfig())
    broken = [
        Section(s.title, s.domain, MagicMock(side_effect=PermissionError("denied")), s.render)
        for s in report.build_sections()
    ]
    with patch.object(report, 'build_sections', return_value=broken):
        outcome = report.run()

    assert outcome.status == "failed"
    assert outcome.exit_code == 2
    assert "Total failure: 10 of 10 sections failed" in buffer.getvalue()


def test_sections_stream_in_fixed_order(console_buffer, host_patches):
    buffer, fmt = console_buffer
    InventoryReport(_handles(), fmt, StubConfig()).run()
    output = buffer.getvalue()
    titles = ["Operating System", "Firmware", "Processor", "Memory", "Storage",
              "Network Interfaces", "Security Posture", "Services", "Environment", "Network Connections"]
    positions = [output.index(t) for t in titles]
    assert positions == sorted(positions)


def test_cpu_sampling_failure_still_renders_every_section(console_buffer):
    buffer, fmt = console_buffer
    with patch('psutil.cpu_percent', side_effect=OSError("performance counters disabled")), \
            patch('time.sleep'), \
            patch('psutil.net_if_addrs', return_value={}), \
            patch('psutil.net_connections', return_value=[]), \
            patch('psutil.win_service_iter', create=True, return_value=iter([])):
        outcome = InventoryReport(_handles(), fmt, StubConfig()).run()

    assert outcome.exit_code == 0
    assert len(outcome.succeeded) == 10
    output = buffer.getvalue()
    processor = output[output.index("Processor"):output.index("Memory")]
    assert "unknown" in processor
    assert "Network Connections" in output
