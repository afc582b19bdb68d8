"""
lm-sensors collector.

Reads `sensors -j`, whose output maps chip (adapter) names to sensor
groups:

    {
        "coretemp-isa-0000": {
            "Adapter": "ISA adapter",
            "Package id 0": {"temp1_input": 45.0, "temp1_max": 80.0},
            ...
        }
    }

Only values that are themselves mappings are sensor groups. Each entry in
a group is classified by the first matching rule in SENSOR_TYPES.
"""

import re
from typing import Any

from ..models.record import MetricRecord, MetricType
from .base import JSONCommandModule

# Evaluated in order, first match wins; the catch-all must stay last.
SENSOR_TYPES: list[tuple[re.Pattern[str], MetricType | None]] = [
    (re.compile(r"^temp\d+_input"), MetricType.TEMPERATURE),
    (re.compile(r"^fan\d+_input"), MetricType.FAN),
    (re.compile(r"^in\d+_input"), MetricType.VOLTAGE),
    (re.compile(r"^in\d+_min"), MetricType.VOLTAGE_MIN),
    (re.compile(r"^in\d+_max"), MetricType.VOLTAGE_MAX),
    (re.compile(r".*"), None),
]


def classify(key: str) -> MetricType | None:
    """Return the metric type for a sensor entry name (None if unrecognized)."""
    for pattern, metric_type in SENSOR_TYPES:
        if pattern.match(key):
            return metric_type
    return None


class LmSensorsModule(JSONCommandModule):
    """Temperatures, fan speeds and voltages from lm-sensors."""

    NAME = "lm_sensors"
    DEFAULT_COMMAND = "sensors -j"

    def normalize(self, raw: Any) -> list[MetricRecord]:
        if not isinstance(raw, dict):
            raise self.parse_error("expected a mapping of adapters")

        records: list[MetricRecord] = []

        for adapter, chip in raw.items():
            if not isinstance(chip, dict):
                raise self.parse_error(f"adapter {adapter!r} is not a mapping")

            for group, entries in chip.items():
                if not isinstance(entries, dict):
                    continue  # "Adapter": "ISA adapter" and similar

                for sensor, value in entries.items():
                    if isinstance(value, bool) or not isinstance(value, (int, float)):
                        raise self.parse_error(
                            f"non-numeric value for {adapter}/{group}/{sensor}: {value!r}"
                        )
                    records.append(
                        MetricRecord(
                            type=classify(sensor),
                            value=value,
                            sensor=sensor,
                            adapter=adapter,
                            label=group,
                        )
                    )

        return records
