"""Utility modules for the snapshot history.

This package groups the data-side helpers used by the chart engine:

- `dates`: Month arithmetic clamped to the representable date range.
- `snapshot`: The dated record of per-category resource totals.
- `history`: The lock-guarded, gap-filling snapshot store.
"""
