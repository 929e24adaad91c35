"""
Core services for the reading lifecycle.

This package contains classification, the store adapter protocol, the
reading repository, trend aggregation and edit reconciliation.
"""

from .aggregator import aggregate, build_trend, filter_window
from .classifier import classify, classify_reading
from .reconciler import EditReconciler
from .repository import ReadingRepository, sort_readings
from .store import ReadingStore

__all__ = [
    "ReadingStore",
    "ReadingRepository",
    "EditReconciler",
    "aggregate",
    "build_trend",
    "classify",
    "classify_reading",
    "filter_window",
    "sort_readings",
]
