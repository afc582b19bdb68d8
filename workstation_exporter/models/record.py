"""
Normalized metric record shared by all source modules.
"""

from dataclasses import dataclass
from enum import Enum


class MetricType(str, Enum):
    """Declared metric vocabulary. Values are part of the exposed contract."""

    TEMPERATURE = "temperature"  # °C
    VOLTAGE = "voltage"  # V
    VOLTAGE_MIN = "voltageMin"  # V
    VOLTAGE_MAX = "voltageMax"  # V
    POWER = "power"  # W
    MEMORY_USAGE = "memoryUsage"  # MB
    MEMORY_TOTAL = "memoryTotal"  # MB
    MEMORY_FREE = "memoryFree"  # MB
    UTILIZATION = "utilization"  # %
    FAN = "fan"  # RPM
    FAN_SPEED = "fanSpeed"  # % duty
    FREQUENCY = "frequency"  # Hz


LABEL_NAMES: tuple[str, ...] = ("device", "adapter", "sensor", "label")


@dataclass(frozen=True)
class MetricRecord:
    """
    One reading produced by a parser.

    A record with ``type=None`` is valid parser output for a reading that
    does not belong to the declared vocabulary; it is dropped before any
    gauge is touched.
    """

    type: MetricType | None
    value: float
    device: str | None = None
    adapter: str | None = None
    sensor: str | None = None
    label: str | None = None

    @property
    def recognized(self) -> bool:
        return self.type is not None

    def labels(self) -> dict[str, str]:
        """Label values in gauge order; absent attributes become empty strings."""
        return {name: getattr(self, name) or "" for name in LABEL_NAMES}

    def __repr__(self) -> str:
        kind = self.type.value if self.type else "unrecognized"
        attrs = ", ".join(f"{k}={v!r}" for k, v in self.labels().items() if v)
        return f"MetricRecord({kind}={self.value}, {attrs})"
