"""
SysInventory Entry Point
Builds config, logger and query handles, then runs the report. No command-line flags.
"""
import sys

from sysinventory.core.config import Config
from sysinventory.core.exceptions import FatalEnvironment
from sysinventory.core.handles import open_handles
from sysinventory.report.engine import InventoryReport
from sysinventory.utils.formatter import ReportFormatter
from sysinventory.utils.logger import Logger

EXIT_FATAL = 3
EXIT_INTERRUPTED = 130


def main() -> int:
    config = Config()
    logger = Logger(config.log_file, config.log_level)

    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding='utf-8')
        except Exception:
            pass

    try:
        handles = open_handles(config)
    except FatalEnvironment as e:
        logger.error(f"Cannot start inventory: {e}")
        return EXIT_FATAL

    report = InventoryReport(handles, ReportFormatter(color=config.color), config)
    try:
        outcome = report.run()
    except KeyboardInterrupt:
        logger.warning("Report interrupted by user.")
        return EXIT_INTERRUPTED
    return outcome.exit_code
