from __future__ import annotations

import pytest

from reliefboard.cli import handle, main
from reliefboard.engine import Dashboard


@pytest.fixture
def engine(events) -> Dashboard:
    return Dashboard.from_events(events)


def test_filter_and_stats_commands(engine, capsys) -> None:
    handle(engine, 'filter country "Chile"')
    handle(engine, "filter year 2019 2020")
    handle(engine, "stats")
    out = capsys.readouterr().out
    assert "country=Chile" in out
    assert "Current result size: 2 of 6" in out


def test_rank_command_switches_metric(engine, capsys) -> None:
    handle(engine, "rank casualties 2")
    out = capsys.readouterr().out
    assert engine.options.ranking_metric == "casualties"
    assert "1. Peru" in out and "2. Japan" in out


def test_trend_and_toggle(engine, capsys) -> None:
    handle(engine, 'toggle "Flood"')
    handle(engine, "trend")
    out = capsys.readouterr().out
    assert "Flood hidden." in out
    assert "year  Earthquake  Wildfire  | total" in out


def test_unknown_filter_value_raises(engine) -> None:
    with pytest.raises(ValueError):
        handle(engine, 'filter type "Meteor"')


def test_main_reports_ingestion_failure(tmp_path, capsys) -> None:
    code = main(["--data", str(tmp_path / "missing.csv")])
    assert code == 1
    assert "Error loading data" in capsys.readouterr().out


def test_main_runs_repl_until_eof(tmp_path, monkeypatch, capsys) -> None:
    path = tmp_path / "d.csv"
    path.write_text("date,country,disaster_type\n2020-01-01,Chile,Flood\n", encoding="utf-8")
    commands = iter(["kpi", "bogus", "quit"])
    monkeypatch.setattr("builtins.input", lambda _prompt: next(commands))

    assert main(["--data", str(path)]) == 0
    out = capsys.readouterr().out
    assert "Loaded 1 events (0 rows dropped)" in out
    assert "Total events: 1" in out
    assert "Unknown command" in out


def test_main_reports_unreadable_workbook(tmp_path, capsys) -> None:
    path = tmp_path / "broken.xlsx"
    path.write_bytes(b"this is not a zip archive")
    assert main(["--data", str(path)]) == 1
    assert "Error loading data" in capsys.readouterr().out
