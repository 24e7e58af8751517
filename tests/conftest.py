"""
Shared fakes: collectors receive handles as arguments, so tests hand them
in-memory stand-ins instead of live WMI / registry / PowerShell access.
"""
import io
import sys
import os
from types import SimpleNamespace

import pytest
from rich.console import Console

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sysinventory.utils.formatter import ReportFormatter
from sysinventory.utils.logger import Logger


class FakeWmi:
    """Answers query(class_name) from a dict of class name -> rows (or an exception to raise)."""

    def __init__(self, tables=None):
        self.tables = tables or {}
        self.calls = []

    def query(self, class_name, **filters):
        self.calls.append((class_name, filters))
        rows = self.tables.get(class_name, [])
        if isinstance(rows, Exception):
            raise rows
        return [SimpleNamespace(**row) for row in rows]


class FakeRegistry:
    def __init__(self, values=None):
        self.values = values or {}

    def read_value(self, hive, path, name):
        return self.values.get(f"{hive}\\{path}\\{name}")


class FakePowerShell:
    def __init__(self, output="RemoteSigned"):
        self.output = output

    def run(self, command):
        if isinstance(self.output, Exception):
            raise self.output
        return self.output


@pytest.fixture(autouse=True)
def quiet_logger():
    """No log file during tests."""
    Logger.reset()
    Logger(None)
    yield
    Logger.reset()


@pytest.fixture
def console_buffer():
    buffer = io.StringIO()
    console = Console(file=buffer, width=200, color_system=None, force_terminal=False)
    return buffer, ReportFormatter(console=console, color=False)
