# tests/test_system.py
from datetime import datetime, timedelta, timezone

import pytest

from conftest import FakeWmi
from sysinventory.core.schemas import Severity
from sysinventory.modules.system import collect_system, derive_uptime, parse_cim_datetime

OS_ROW = {
    "Caption": "Microsoft Windows 11 Pro ",
    "OSArchitecture": "64-bit",
    "BuildNumber": "22631",
    "LastBootUpTime": "20261018080000.000000+000",
    "CSName": "WS-01",
}


def test_parse_cim_datetime_applies_offset():
    parsed = parse_cim_datetime("20261018100000.500000+120")
    assert parsed.utcoffset() == timedelta(minutes=120)
    assert parsed.astimezone(timezone.utc) == datetime(2026, 10, 18, 8, 0, 0, 500000, tzinfo=timezone.utc)


def test_parse_cim_datetime_rejects_garbage():
    with pytest.raises(ValueError):
        parse_cim_datetime("yesterday")


def test_uptime_is_non_negative():
    now = datetime(2026, 10, 18, 12, tzinfo=timezone.utc)
    assert derive_uptime(now - timedelta(hours=4), now) == timedelta(hours=4)
    assert derive_uptime(now, now) == timedelta(0)


def test_collect_system_fields():
    cim = FakeWmi({
        "Win32_OperatingSystem": [OS_ROW],
        "Win32_ComputerSystem": [{"Name": "WS-01", "DomainRole": 1}],
    })
    now = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)
    info = collect_system(cim, now=now)

    assert info.os_name == "Microsoft Windows 11 Pro"
    assert info.build == "22631"
    assert info.machine_role == "Member Workstation"
    assert info.uptime == timedelta(hours=1, minutes=30)
    assert info.clock_anomaly is False


def test_future_boot_time_is_flagged_not_negative():
    cim = FakeWmi({"Win32_OperatingSystem": [OS_ROW], "Win32_ComputerSystem": []})
    now = datetime(2026, 10, 18, 7, 0, tzinfo=timezone.utc)
    info = collect_system(cim, now=now)

    assert info.uptime is None
    assert info.clock_anomaly is True
    assert info.anomaly_severity == Severity.CRITICAL
    assert info.hostname == "WS-01"
