"""
Finance Tracker - Source Package

A single-user personal finance tracker organized around calendar months.
Income, bills and transactions are recorded per month and every month
carries a summary of its totals and net balance.

DESIGN PRINCIPLES:
1. One document is the single source of truth, reloaded on every call
2. Summaries are always recomputed on write, never trusted from storage
3. Missing entries are reported with sentinel returns, not exceptions
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
