from __future__ import annotations

import csv
import json

import pytest

from reliefboard.config import ALL
from reliefboard.engine import Dashboard
from reliefboard.filters import filtered
from reliefboard.indices import build_indices

from conftest import make_event


@pytest.fixture
def engine(events) -> Dashboard:
    return Dashboard.from_events(events)


def test_initial_state_is_dataset_extent(engine, events) -> None:
    assert engine.state.year_range == (2019, 2022)
    assert engine.current() == events


def test_empty_dataset_uses_default_range() -> None:
    engine = Dashboard.from_events([])
    assert engine.state.year_range == (2018, 2024)
    assert engine.current() == []
    assert engine.kpis().total_events == 0
    assert engine.type_severity() == []
    assert engine.country_ranking() == []
    assert engine.scatter().points == []
    assert engine.time_trend().layers == []


def test_current_matches_pure_filter(engine, events) -> None:
    engine.set_year_range(2020, 2021)
    engine.set_country("Peru")
    assert engine.current() == filtered(events, engine.state)
    assert [e.event_id for e in engine.current()] == [3]


def test_year_setters_reject_crossing_and_clamp(engine) -> None:
    engine.set_year_max(2020)
    engine.set_year_min(2021)
    assert engine.state.year_range == (2019, 2020)
    engine.set_year_min(1990)
    assert engine.state.year_range == (2019, 2020)


def test_unknown_selector_values_are_rejected(engine) -> None:
    with pytest.raises(ValueError):
        engine.set_type("Meteor")
    with pytest.raises(ValueError):
        engine.set_country("Atlantis")
    with pytest.raises(ValueError):
        engine.set_ranking_metric("aid_amount_usd")
    with pytest.raises(ValueError):
        engine.set_scatter_metric("severity_index")


def test_reset_restores_extent_selectors_and_options(engine, events) -> None:
    engine.set_year_range(2020, 2020)
    engine.set_type("Flood")
    engine.set_country("Chile")
    engine.set_ranking_metric("casualties")
    engine.toggle_type("Flood")

    engine.reset()

    assert engine.state.year_range == (2019, 2022)
    assert (engine.state.selected_type, engine.state.selected_country) == (ALL, ALL)
    assert engine.options.ranking_metric == "response_time_hours"
    assert engine.options.hidden_types == frozenset()
    assert engine.current() == events


def test_undo_redo(engine) -> None:
    engine.set_type("Flood")
    engine.set_country("Chile")
    assert engine.undo()
    assert engine.state.selected_country == ALL
    assert engine.state.selected_type == "Flood"
    assert engine.redo()
    assert engine.state.selected_country == "Chile"
    assert not engine.redo()


def test_no_op_setter_does_not_add_history(engine) -> None:
    engine.set_year_min(2030)  # clamps to 2022, which is still <= max
    engine.set_year_min(2022)
    assert engine.undo()
    assert not engine.undo()


def test_country_ranking_follows_selected_metric(engine) -> None:
    assert [g.key for g in engine.country_ranking()] == ["Chile", "Peru", "Japan"]
    engine.set_ranking_metric("casualties")
    assert [g.key for g in engine.country_ranking(top_n=1)] == ["Peru"]


def test_time_trend_respects_hidden_types(engine) -> None:
    assert engine.toggle_type("Earthquake") is True
    table = engine.time_trend()
    assert "Earthquake" not in table.keys
    assert table.totals() == {2019: 2, 2020: 1, 2021: 0, 2022: 1}
    assert engine.toggle_type("Earthquake") is False


def test_scatter_samples_but_keeps_full_axis_domain() -> None:
    evs = [make_event(i, casualties=i, response_time_hours=float(i)) for i in range(10)]
    engine = Dashboard.from_events(evs)

    view = engine.scatter(max_points=3)

    assert [e.event_id for e in view.points] == [0, 3, 6]
    assert view.total == 10 and view.shown == 3 and view.is_sampled
    assert view.x_max == 9.0 and view.y_max == 9


def test_scatter_economic_loss_is_in_millions(engine) -> None:
    engine.set_scatter_metric("economic_loss_usd")
    view = engine.scatter()
    assert view.y[0] == pytest.approx(1.0)
    assert view.y_max == pytest.approx(9.0)
    assert not view.is_sampled


def test_export_csv_and_json(engine, tmp_path) -> None:
    engine.set_type("Earthquake")
    csv_path, json_path = tmp_path / "out.csv", tmp_path / "out.json"

    engine.export_csv(str(csv_path))
    engine.export_json(str(json_path))

    with open(csv_path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [r["country"] for r in rows] == ["Peru", "Japan"]
    payload = json.loads(json_path.read_text(encoding="utf-8"))
    assert payload[0]["date"] == "2020-01-01T00:00:00"
    assert payload[1]["year_month"] == "2021-01"


def test_bench_reports_both_timings(engine) -> None:
    res = engine.bench(rounds=2)
    assert set(res) == {"naive_ms", "indexed_ms"}


def test_from_events_renumbers_a_subset(events) -> None:
    subset = [e for e in events if e.country == "Peru"]
    engine = Dashboard.from_events(subset)

    assert [e.event_id for e in engine.events] == [0, 1]
    assert [e.disaster_type for e in engine.current()] == ["Wildfire", "Earthquake"]
    engine.set_type("Earthquake")
    assert [e.year for e in engine.current()] == [2020]


def test_direct_construction_rejects_foreign_ids(events) -> None:
    subset = events[3:]
    with pytest.raises(ValueError, match="event_id"):
        Dashboard(events=subset, idx=build_indices(subset))


def test_toggle_rejects_unknown_type(engine) -> None:
    with pytest.raises(ValueError):
        engine.toggle_type("Meteor")
    assert engine.options.hidden_types == frozenset()
