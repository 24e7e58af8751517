"""
SysInventory Report Engine

Runs the fixed, ordered list of sections one after another:

1. Collect: call the section's collector through run_collector()
2. Render: stream the result to the formatter immediately
3. On failure: print one warning line, log it, move on

Lifecycle: INIT -> RUNNING -> DONE. Nothing branches on collected content;
the outcome only records which sections succeeded and which failed.
"""
import os
import platform
from datetime import datetime
from enum import Enum
from typing import Any, Callable, List, NamedTuple

from sysinventory.core.config import Config
from sysinventory.core.handles import QueryHandles
from sysinventory.core.schemas import ReportOutcome, SectionFailure
from sysinventory.modules.base import run_collector
from sysinventory.modules.environment import collect_environment
from sysinventory.modules.hardware import collect_firmware, collect_processor
from sysinventory.modules.memory import collect_memory
from sysinventory.modules.network import collect_connections, collect_interfaces
from sysinventory.modules.security import collect_security
from sysinventory.modules.services import collect_services
from sysinventory.modules.storage import collect_storage
from sysinventory.modules.system import collect_system
from sysinventory.report import views
from sysinventory.utils.formatter import ReportFormatter
from sysinventory.utils.logger import Logger


class ReportState(str, Enum):
    INIT = "init"
    RUNNING = "running"
    DONE = "done"


class Section(NamedTuple):
    title: str
    domain: str
    collect: Callable[[], Any]
    render: Callable[[ReportFormatter, str, Any], None]


class InventoryReport:
    """Sequential collector/formatter pipeline over a fixed set of sections.

    Handles are opened once by the caller and handed to each collector
    explicitly; the engine owns no system state of its own.
    """

    def __init__(self, handles: QueryHandles, formatter: ReportFormatter, config: Config):
        self.handles = handles
        self.formatter = formatter
        self.config = config
        self.logger = Logger()
        self.state = ReportState.INIT
        self.section_index = 0

    def build_sections(self) -> List[Section]:
        h = self.handles
        return [
            Section("Operating System", "system", lambda: collect_system(h.cimv2), views.render_system),
            Section("Firmware", "firmware", lambda: collect_firmware(h.cimv2), views.render_firmware),
            Section("Processor", "processor",
                    lambda: collect_processor(h.cimv2, self.config.cpu_sample_interval), views.render_processor),
            Section("Memory", "memory", lambda: collect_memory(h.cimv2), views.render_memory),
            Section("Storage", "storage", lambda: collect_storage(h.cimv2), views.render_storage),
            Section("Network Interfaces", "interfaces", collect_interfaces, views.render_interfaces),
            Section("Security Posture", "security",
                    lambda: collect_security(h.cimv2, h.security_center, h.registry, h.powershell),
                    views.render_security),
            Section("Services", "services", collect_services, views.render_services),
            Section("Environment", "environment", lambda: collect_environment(os.environ), views.render_environment),
            Section("Network Connections", "connections", collect_connections, views.render_connections),
        ]

    def _fail(self, outcome: ReportOutcome, section: Section, kind, reason: str) -> None:
        outcome.failed.append(SectionFailure(title=section.title, kind=kind, reason=reason))
        self.formatter.section_failed(section.title, kind, reason)
        self.logger.warning(f"Section '{section.title}' failed: {kind.value} ({reason})")

    def run_section(self, section: Section, outcome: ReportOutcome) -> None:
        self.logger.info(f"Collecting {section.domain}...")
        result = run_collector(section.domain, section.collect)
        if not result.ok:
            self._fail(outcome, section, result.failure_kind, result.reason)
            return

        rendered = run_collector(section.domain, lambda: section.render(self.formatter, section.title, result.data))
        if not rendered.ok:
            self._fail(outcome, section, rendered.failure_kind, f"rendering failed: {rendered.reason}")
            return
        outcome.succeeded.append(section.title)

    def run(self) -> ReportOutcome:
        """Run every section in order and print the closing summary."""
        outcome = ReportOutcome()
        sections = self.build_sections()

        self.formatter.banner(platform.node(), datetime.now().strftime("%Y-%m-%d %H:%M:%S"))
        self.state = ReportState.RUNNING
        for index, section in enumerate(sections):
            self.section_index = index
            self.run_section(section, outcome)
        self.state = ReportState.DONE

        self.formatter.summary(outcome)
        if outcome.failed:
            self.logger.warning(f"Report {outcome.status}: {len(outcome.failed)} section(s) failed.")
        else:
            self.logger.success(f"Report complete: {len(outcome.succeeded)} sections.")
        return outcome
