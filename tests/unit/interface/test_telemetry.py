"""Tests for ConsoleTelemetry."""

import pytest

from sealed_class_verification.interface.telemetry import ConsoleTelemetry


def test_messages_go_to_stderr(capsys: pytest.CaptureFixture) -> None:
    telemetry = ConsoleTelemetry()

    telemetry.step("Checking 2 file(s)")
    telemetry.warning("careful")
    telemetry.error("broken")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.splitlines() == ["Checking 2 file(s)", "careful", "broken"]


def test_quiet_suppresses_steps_only(capsys: pytest.CaptureFixture) -> None:
    telemetry = ConsoleTelemetry(quiet=True)

    telemetry.step("Checking 2 file(s)")
    telemetry.warning("careful")

    assert capsys.readouterr().err == "careful\n"
