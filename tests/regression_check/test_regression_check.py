"""Runs every manifest case through the full transform."""

from __future__ import annotations

from typing import Any

import pytest

from run_regression_check import load_cases, main, run_case


@pytest.mark.parametrize("case", load_cases(), ids=lambda case: case["name"])
def test_regression_case(case: dict[str, Any]) -> None:
    ok, detail = run_case(case)
    assert ok, detail


def test_main_keeps_log_events_off_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--verbose", "list_of_options"]) == 0
    captured = capsys.readouterr()
    assert captured.out == "list_of_options: ok\nall regression cases passed (1 cases)\n"
    assert "method_wrapped" in captured.err


def test_main_is_quiet_by_default(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["list_of_options"]) == 0
    captured = capsys.readouterr()
    assert captured.out == "list_of_options: ok\nall regression cases passed (1 cases)\n"
    assert "method_wrapped" not in captured.err
