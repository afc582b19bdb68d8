"""
CPU utilization collector using `mpstat -o JSON` (sysstat).

Only the aggregate "all" CPU load of the first statistics sample is used:

    {"sysstat": {"hosts": [{"statistics": [{"cpu-load": [{"cpu": "all", "idle": 91.2, ...}]}]}]}}
"""

from typing import Any

from ..models.record import MetricRecord, MetricType
from ..utils.numbers import round_half_up
from .base import JSONCommandModule, require

IDLE_PATH = ("sysstat", "hosts", 0, "statistics", 0, "cpu-load", 0, "idle")


class MpstatModule(JSONCommandModule):
    """Overall CPU utilization derived from idle percentage."""

    NAME = "mpstat"
    ADAPTER = "mpstat"
    DEFAULT_COMMAND = "mpstat -o JSON"

    def normalize(self, raw: Any) -> list[MetricRecord]:
        idle = require(raw, IDLE_PATH, self.NAME)
        if isinstance(idle, bool) or not isinstance(idle, (int, float)):
            raise self.parse_error(f"idle is not a number: {idle!r}")

        return [
            MetricRecord(
                type=MetricType.UTILIZATION,
                value=round_half_up(100 - idle),
                adapter=self.ADAPTER,
                sensor="cpu0_utilization",
            )
        ]
