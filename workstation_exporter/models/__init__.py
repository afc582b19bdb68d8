"""
Data models for normalized telemetry.
"""

from .record import LABEL_NAMES, MetricRecord, MetricType

__all__ = [
    "LABEL_NAMES",
    "MetricRecord",
    "MetricType",
]
