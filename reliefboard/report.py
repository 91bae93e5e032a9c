from __future__ import annotations

"""
reliefboard report generator
----------------------------
This module renders the dashboard's per-chart tables into a DOCX report.

It is a reference *rendering collaborator*: it only reads the tables the
engine produces (KPIs, time trend bands, type severity, country ranking,
sampled scatter) and maps them to pictures. It never pushes anything back
into the engine.

Design goals:
- Keep the core usable even if report dependencies are missing (lazy imports).
- Colour direction for "lower is better" metrics is decided here, not in the
  ranking: response-time bars use a reversed red/green scale.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional, Tuple
import os
import tempfile

from .config import RANKING_METRICS

if TYPE_CHECKING:
    from .engine import Dashboard


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "Disaster Response Dashboard"
    subtitle: str = "Emergency response overview"
    dataset_name: str = "disasters dataset"
    # Optional: list of CLI commands used to create the current selection
    command_log: Optional[List[str]] = field(default=None)
    dpi: int = 200


def _money(num: float) -> str:
    if num >= 1e9:
        return f"${num / 1e9:.2f}B"
    if num >= 1e6:
        return f"${num / 1e6:.2f}M"
    if num >= 1e3:
        return f"${num / 1e3:.2f}K"
    return f"${num:.0f}"


def generate_docx_report(
    engine: "Dashboard",
    out_path: str,
    *,
    config: Optional[ReportConfig] = None,
) -> str:
    """Generate a DOCX report + charts for the engine's current selection."""
    config = config or ReportConfig()

    # Lazy imports: only required when "report" is used.
    try:
        from docx import Document
        from docx.shared import Inches
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        import numpy as np
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib (and numpy).\n"
            "Install with: python -m pip install matplotlib numpy"
        ) from e

    kpis = engine.kpis()
    if kpis.total_events == 0:
        raise ValueError("No events to report on (current selection is empty).")

    tmpdir = tempfile.mkdtemp(prefix="reliefboard_report_")
    # Each chart is: (title, file_path)
    chart_paths: List[Tuple[str, str]] = []

    def _save(title: str, filename: str) -> None:
        path = os.path.join(tmpdir, filename)
        plt.tight_layout()
        plt.savefig(path, dpi=config.dpi)
        plt.close()
        chart_paths.append((title, path))

    # 1) Disaster frequency over time (stacked area)
    trend = engine.time_trend()
    if trend.layers:
        plt.figure()
        plt.stackplot(
            trend.years,
            [[b.value for b in layer.bands] for layer in trend.layers],
            labels=trend.keys,
            alpha=0.7,
        )
        plt.xticks(trend.years, [str(y) for y in trend.years])
        plt.xlabel("Year")
        plt.ylabel("Number of Events")
        plt.legend(loc="upper left", fontsize="small")
        _save("Disaster Frequency Over Time", "time_trend.png")

    # 2) Average impact by disaster type (grouped bars)
    severity = engine.type_severity()
    if severity:
        x = np.arange(len(severity))
        width = 0.4
        plt.figure()
        plt.bar(x - width / 2, [g["avg_casualties"] for g in severity], width, label="Avg casualties", color="#667eea")
        plt.bar(x + width / 2, [g["avg_economic_loss"] for g in severity], width, label="Avg economic loss ($M)", color="#f093fb")
        plt.xticks(x, [str(g.key) for g in severity], rotation=45, ha="right")
        plt.xlabel("Disaster Type")
        plt.ylabel("Average Impact")
        plt.legend()
        _save("Average Impact by Disaster Type", "type_severity.png")

    # 3) Response time vs impact (sampled scatter)
    scatter = engine.scatter()
    if scatter.points:
        types = sorted({e.disaster_type for e in scatter.points})
        plt.figure()
        for t in types:
            xs = [x for x, e in zip(scatter.x, scatter.points) if e.disaster_type == t]
            ys = [y for y, e in zip(scatter.y, scatter.points) if e.disaster_type == t]
            plt.scatter(xs, ys, s=8, alpha=0.6, label=t)
        plt.xlim(0, scatter.x_max or 1)
        plt.ylim(0, scatter.y_max or 1)
        plt.xlabel("Response Time (hours)")
        plt.ylabel("Casualties" if scatter.y_metric == "casualties" else "Economic Loss ($M)")
        plt.legend(fontsize="small")
        title = "Response Time vs. Impact"
        if scatter.is_sampled:
            title += f" (showing {scatter.shown:,} of {scatter.total:,} points)"
        _save(title, "scatter.png")

    # 4) Country ranking (horizontal bars)
    metric = engine.options.ranking_metric
    metric_key = RANKING_METRICS[metric]
    ranking = engine.country_ranking()
    if ranking:
        values = [g[metric_key] for g in ranking]
        top = max(values) or 1.0
        cmap = matplotlib.colormaps["RdYlGn"]
        if metric == "response_time_hours":
            colors = [cmap(1 - v / top) for v in values]
        else:
            colors = [cmap(v / top) for v in values]
        plt.figure(figsize=(6.4, 6.4))
        plt.barh([str(g.key) for g in ranking][::-1], values[::-1], color=colors[::-1])
        plt.xlabel({
            "response_time_hours": "Avg Response Time (hours)",
            "casualties": "Avg Casualties per Event",
            "economic_loss_usd": "Avg Economic Loss per Event ($M)",
        }[metric])
        _save(f"Country Performance Ranking (top {len(ranking)})", "country_rank.png")

    # -----------------------------
    # Build DOCX report
    # -----------------------------
    doc = Document()
    doc.add_heading(config.title, level=0)
    doc.add_paragraph(config.subtitle)

    s = engine.state
    doc.add_paragraph(f"Dataset: {config.dataset_name}")
    doc.add_paragraph(
        f"Selection: years {s.year_range[0]}-{s.year_range[1]}, "
        f"type {s.selected_type}, country {s.selected_country}"
    )

    doc.add_heading("Key figures", level=1)
    t = doc.add_table(rows=1, cols=2)
    t.rows[0].cells[0].text = "Metric"
    t.rows[0].cells[1].text = "Value"
    for k, v in [
        ("Total Events", f"{kpis.total_events:,}"),
        ("Total Casualties", f"{kpis.total_casualties:,.0f}"),
        ("Economic Loss (USD)", _money(kpis.total_economic_loss)),
        ("Avg Response Time", f"{kpis.avg_response_time:.1f}h"),
    ]:
        row = t.add_row().cells
        row[0].text = k
        row[1].text = v

    doc.add_heading("Visualizations", level=1)
    for title, path in chart_paths:
        doc.add_paragraph(title)
        doc.add_picture(path, width=Inches(6.5))

    if config.command_log:
        doc.add_heading("Command log (reproducibility)", level=1)
        for line in config.command_log:
            doc.add_paragraph(line, style="List Bullet")

    from . import __version__
    doc.add_paragraph(f"reliefboard {__version__}, generated {datetime.now().isoformat(timespec='seconds')}")

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    return out_path
