import sys

import pytest

from heistforge import cli


def test_forecast_prints_a_table(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["heistforge-forecast", "standard", "medium", "--skill", "50"])
    cli.run_forecast()
    out = capsys.readouterr().out
    assert "85.0%" in out
    assert "600-1200" in out


def test_simulator_runs_one_setup(monkeypatch, capsys):
    monkeypatch.setattr(
        sys,
        "argv",
        ["heistforge-simulate", "--mode", "shadow", "--risk", "low", "--runs", "20", "--seed", "1"],
    )
    cli.run_simulator()
    out = capsys.readouterr().out
    assert "Shadow" in out


def test_validate_fails_on_bad_environment(monkeypatch):
    monkeypatch.setenv("HEISTFORGE_SESSION_MAX_ITEMS", "9")
    monkeypatch.setattr(sys, "argv", ["heistforge-validate"])
    with pytest.raises(SystemExit) as exc:
        cli.run_validate()
    assert exc.value.code == 1
