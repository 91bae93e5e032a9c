"""
reliefboard Command Line Interface (CLI)
========================================

This file provides the interactive terminal program you run like:

    python -m reliefboard.cli --data "path/to/disasters.csv"

It is the control surface of the dashboard: each command maps to one
selector/option setter on the engine or prints one per-chart table.

The CLI DOES NOT modify your dataset file. It only loads it once and
recomputes tables from the in-memory records.
"""

from __future__ import annotations
import argparse, logging, shlex, sys
from .config import DATA_PATH, LOG_LEVEL, RANKING_METRICS, SCATTER_METRICS, TOP_N
from .engine import Dashboard
from .loader import IngestionError, load_dataset

logger = logging.getLogger(__name__)

HELP = """
Commands:
  help
  stats
  reset
  undo
  redo

  filter year <y1> <y2>
  filter min <year>
  filter max <year>
  filter type "<Disaster Type>"      ("All" clears)
  filter country "<Country>"         ("All" clears)

  values type|country [prefix]

  kpi
  trend                              (stacked yearly counts by type)
  toggle "<Disaster Type>"           (hide/show a layer of the trend)
  severity                           (mean impact by disaster type)
  rank [metric] [n]                  (metrics: response_time_hours, casualties, economic_loss_usd)
  scatter [metric] [n]               (metrics: casualties, economic_loss_usd)

  show [n]
  export csv|json "<path>"
  report "<path.docx>"
  bench [rounds]
  quit
"""

def _print_rows(rows):
    for e in rows:
        print(f"[{e.event_id}] {e.date:%Y-%m-%d} | {e.country} | {e.disaster_type} | "
              f"casualties={e.casualties:g} loss=${e.economic_loss_usd:,.0f} response={e.response_time_hours:.1f}h")

def _selectors(engine: Dashboard) -> str:
    s = engine.state
    return f"years={s.year_range[0]}-{s.year_range[1]} type={s.selected_type} country={s.selected_country}"

def main(argv=None) -> int:
    """Entry point for the reliefboard CLI.

    1) Load dataset (terminal error if it cannot be read)
    2) Build the dashboard session
    3) Start an interactive REPL
    """
    ap = argparse.ArgumentParser(prog="reliefboard")
    ap.add_argument("--data", default=str(DATA_PATH), help="Path to the disasters CSV/XLSX export")
    ap.add_argument("--log-level", default=LOG_LEVEL, help="Logging level (default from RELIEFBOARD_LOG_LEVEL)")
    args = ap.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    print("Loading disaster data...")
    try:
        result = load_dataset(args.data)
    except IngestionError as e:
        logger.error("Error loading disaster data: %s", e)
        print(f"Error loading data: {e}")
        return 1
    engine = Dashboard.from_events(result.events, dataset_path=args.data)

    print(f"Loaded {len(result.events)} events ({result.dropped} rows dropped). Type 'help' for commands.")
    while True:
        try:
            line = input("reliefboard> ")
        except EOFError:
            break
        # Keep a lightweight log of commands for the report (reproducibility).
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.lower() in ("quit", "exit"):
            break
        if stripped.split()[0].lower() not in ("help", "show", "values", "stats", "quit"):
            engine.command_log.append(stripped)
        try:
            handle(engine, stripped)
        except (ValueError, IndexError, OSError, ImportError) as e:
            print(f"Error: {e}")
    return 0

def handle(engine: Dashboard, line: str) -> None:
    """Handle one CLI command line.

    This parses the command and calls the appropriate engine method.
    """
    parts = shlex.split(line)
    cmd = parts[0].lower()

    if cmd == "help":
        print(HELP)
        return

    if cmd == "stats":
        print(f"Current result size: {len(engine.current())} of {len(engine.events)}")
        print(f"Selectors: {_selectors(engine)}")
        print(f"Countries: {len(engine.idx.by_country)} | Types: {len(engine.idx.by_type)} | Years: {len(engine.idx.years_sorted)}")
        return

    if cmd == "reset":
        engine.reset()
        print(f"Filters reset. {_selectors(engine)}")
        return

    if cmd == "undo":
        print("Undone." if engine.undo() else "Nothing to undo.")
        return

    if cmd == "redo":
        print("Redone." if engine.redo() else "Nothing to redo.")
        return

    if cmd == "values":
        field = parts[1].lower()
        prefix = parts[2] if len(parts) >= 3 else ""
        if field == "country":
            vals = engine.idx.country_options()
        elif field == "type":
            vals = engine.idx.type_options()
        else:
            raise ValueError("values field must be: country | type")
        if prefix:
            p = prefix.lower()
            vals = [v for v in vals if v.lower().startswith(p)]
        for v in vals[:50]:
            print(v)
        if len(vals) > 50:
            print(f"... ({len(vals)} total, showing 50)")
        return

    if cmd == "filter":
        kind = parts[1].lower()
        if kind == "year":
            engine.set_year_range(int(parts[2]), int(parts[3]))
        elif kind == "min":
            engine.set_year_min(int(parts[2]))
        elif kind == "max":
            engine.set_year_max(int(parts[2]))
        elif kind == "type":
            engine.set_type(parts[2])
        elif kind == "country":
            engine.set_country(parts[2])
        else:
            raise ValueError("filter kind must be: year, min, max, type, country")
        print(f"{_selectors(engine)}. Size={len(engine.current())}")
        return

    if cmd == "kpi":
        k = engine.kpis()
        print(f"Total events: {k.total_events:,}")
        print(f"Total casualties: {k.total_casualties:,.0f}")
        print(f"Economic loss (USD): {k.total_economic_loss:,.0f}")
        print(f"Avg response time: {k.avg_response_time:.1f}h")
        return

    if cmd == "toggle":
        hidden = engine.toggle_type(parts[1])
        print(f"{parts[1]} {'hidden' if hidden else 'shown'}.")
        return

    if cmd == "trend":
        table = engine.time_trend()
        if not table.years:
            print("No events in the current selection.")
            return
        totals = table.totals()
        print("year  " + "  ".join(table.keys) + "  | total")
        for y in table.years:
            cells = "  ".join(str(table.counts[y].get(k, 0)) for k in table.keys)
            print(f"{y}  {cells}  | {totals[y]}")
        return

    if cmd == "severity":
        for g in engine.type_severity():
            print(f"{g.key}: avg casualties={g['avg_casualties']:.1f} "
                  f"avg loss=${g['avg_economic_loss']:.2f}M events={g.count}")
        return

    if cmd == "rank":
        if len(parts) >= 2 and parts[1] in RANKING_METRICS:
            engine.set_ranking_metric(parts[1])
            parts = parts[1:]
        n = int(parts[1]) if len(parts) >= 2 else TOP_N
        metric_key = RANKING_METRICS[engine.options.ranking_metric]
        rows = engine.country_ranking(n)
        print(f"Top {len(rows)} countries by {engine.options.ranking_metric}:")
        for i, g in enumerate(rows, 1):
            print(f"{i:>3}. {g.key}: {g[metric_key]:.1f} (events={g.count})")
        return

    if cmd == "scatter":
        if len(parts) >= 2 and parts[1] in SCATTER_METRICS:
            engine.set_scatter_metric(parts[1])
            parts = parts[1:]
        n = int(parts[1]) if len(parts) >= 2 else 10
        view = engine.scatter()
        note = f" (showing {view.shown:,} of {view.total:,} points)" if view.is_sampled else ""
        print(f"Response time vs {view.y_metric}{note}; x_max={view.x_max:.1f} y_max={view.y_max:.2f}")
        _print_rows(view.points[:n])
        return

    if cmd == "report":
        from .report import generate_docx_report, ReportConfig
        path = parts[1]
        cfg = ReportConfig(command_log=engine.command_log, dataset_name=engine.dataset_path or "disasters dataset")
        generate_docx_report(engine, path, config=cfg)
        print(f"Report written to {path}")
        return

    if cmd == "export":
        # export <csv|json> "<path>"
        if len(parts) < 3:
            print('Usage: export csv "out.csv"  OR  export json "out.json"')
            return
        fmt, out_path = parts[1].lower(), parts[2]
        if not engine.current():
            print("Nothing to export: current selection is empty.")
            return
        if fmt == "csv":
            engine.export_csv(out_path)
        elif fmt == "json":
            engine.export_json(out_path)
        else:
            print("Unknown export format. Use: csv or json")
            return
        print(f"Exported {fmt.upper()} to {out_path}")
        return

    if cmd == "bench":
        rounds = int(parts[1]) if len(parts) >= 2 else 30
        res = engine.bench(rounds)
        print(f"naive={res['naive_ms']:.3f}ms | indexed={res['indexed_ms']:.3f}ms")
        return

    if cmd == "show":
        n = int(parts[1]) if len(parts) >= 2 else 10
        _print_rows(engine.current()[:n])
        return

    print("Unknown command. Type 'help'.")

if __name__ == "__main__":
    sys.exit(main())
