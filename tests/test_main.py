# tests/test_main.py
from unittest.mock import patch

from sysinventory import main as entry
from sysinventory.core.exceptions import FailureKind, FatalEnvironment
from sysinventory.core.schemas import ReportOutcome, SectionFailure


def _run_main(**patches):
    with patch('sysinventory.main.Config') as config, patch('sysinventory.main.Logger'):
        config.return_value.color = False
        with patch('sysinventory.main.open_handles', **patches.get("handles", {})), \
                patch('sysinventory.main.InventoryReport') as report:
            if "run" in patches:
                report.return_value.run.configure_mock(**patches["run"])
            code = entry.main()
    return code, report


def test_fatal_environment_exits_before_any_section():
    code, report = _run_main(handles={"side_effect": FatalEnvironment("Windows is required")})
    assert code == entry.EXIT_FATAL == 3
    report.assert_not_called()


def test_interrupt_exits_130():
    code, _ = _run_main(run={"side_effect": KeyboardInterrupt})
    assert code == entry.EXIT_INTERRUPTED == 130


def test_partial_outcome_passes_through():
    outcome = ReportOutcome(
        succeeded=["Operating System"],
        failed=[SectionFailure(title="Services", kind=FailureKind.PERMISSION_DENIED, reason="denied")],
    )
    code, report = _run_main(run={"return_value": outcome})
    assert code == 1
    report.return_value.run.assert_called_once_with()


def test_complete_outcome_exits_zero():
    code, _ = _run_main(run={"return_value": ReportOutcome(succeeded=["Operating System"])})
    assert code == 0
