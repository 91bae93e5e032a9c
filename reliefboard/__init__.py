"""
reliefboard package
===================

Data core behind the disaster response dashboard.

- Row normalization and dataset loading are in `reliefboard/loader.py`.
- Filter state and the pure `filtered()` function are in `reliefboard/filters.py`.
- Aggregation, ranking, stacking and sampling live in `aggregate.py`,
  `stack.py` and `dsa.py`.
- The dashboard session (selectors + per-chart tables) is in `reliefboard/engine.py`.
- The CLI entry point is in `reliefboard/cli.py`.
"""

__version__ = '0.1.0'
