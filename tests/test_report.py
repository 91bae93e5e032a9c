from __future__ import annotations

import pytest

from reliefboard.engine import Dashboard
from reliefboard.report import ReportConfig, generate_docx_report

pytest.importorskip("docx")
pytest.importorskip("matplotlib")


def test_report_is_written(events, tmp_path) -> None:
    engine = Dashboard.from_events(events)
    out = tmp_path / "reports" / "dash.docx"

    path = generate_docx_report(engine, str(out), config=ReportConfig(command_log=["filter year 2019 2022"]))

    assert path == str(out)
    assert out.stat().st_size > 0


def test_report_refuses_empty_selection(tmp_path) -> None:
    engine = Dashboard.from_events([])
    with pytest.raises(ValueError):
        generate_docx_report(engine, str(tmp_path / "x.docx"))
