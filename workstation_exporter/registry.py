"""
Metric registry: the fixed set of gauge series the exporter publishes.

Every MetricType maps to exactly one prometheus_client Gauge labelled by
(device, adapter, sensor, label). Gauges are declared once when the
registry is created; collection cycles only overwrite values.
"""

from collections.abc import Iterable
from typing import NamedTuple

from prometheus_client import CollectorRegistry, Gauge

from .models.record import LABEL_NAMES, MetricRecord, MetricType


class MetricDefinition(NamedTuple):
    """Series name and help text for one metric type."""

    name: str
    documentation: str


class GaugeSample(NamedTuple):
    """Current value of one series for one label-combination."""

    name: str
    labels: dict[str, str]
    value: float


METRIC_DEFINITIONS: dict[MetricType, MetricDefinition] = {
    MetricType.TEMPERATURE: MetricDefinition("sensors_temperature", "Temperature in celsius"),
    MetricType.VOLTAGE: MetricDefinition("sensors_voltage", "Voltage in volts"),
    MetricType.VOLTAGE_MIN: MetricDefinition("sensors_voltage_min", "Minimum voltage in volts"),
    MetricType.VOLTAGE_MAX: MetricDefinition("sensors_voltage_max", "Maximum voltage in volts"),
    MetricType.POWER: MetricDefinition("sensors_power", "Power usage in watts"),
    MetricType.MEMORY_USAGE: MetricDefinition("sensors_memory_usage", "Memory usage in megabytes"),
    MetricType.MEMORY_TOTAL: MetricDefinition("sensors_memory_total", "Memory total in megabytes"),
    MetricType.MEMORY_FREE: MetricDefinition("sensors_memory_free", "Memory free in megabytes"),
    MetricType.UTILIZATION: MetricDefinition("sensors_utilization", "Utilization in percentage"),
    MetricType.FAN: MetricDefinition("sensors_fans", "Fan speed in RPM"),
    MetricType.FAN_SPEED: MetricDefinition("sensors_fanspeed", "Fan speed in percentage"),
    # Published name, kept for existing dashboards
    MetricType.FREQUENCY: MetricDefinition("sensors_frequenzy", "Frequency in Hz"),
}


class MetricRegistry:
    """
    Holds one Gauge per metric type in its own CollectorRegistry.

    Usage:
        registry = MetricRegistry()
        registry.apply_all(records)
        text = render_exposition(registry)
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Args:
            registry: Target prometheus registry (a fresh one if None, so
                several MetricRegistry instances never collide)
        """
        self._registry = registry if registry is not None else CollectorRegistry()
        self._gauges: dict[MetricType, Gauge] = {
            metric_type: Gauge(
                definition.name,
                definition.documentation,
                list(LABEL_NAMES),
                registry=self._registry,
            )
            for metric_type, definition in METRIC_DEFINITIONS.items()
        }

    @property
    def collector_registry(self) -> CollectorRegistry:
        return self._registry

    @property
    def types(self) -> frozenset[MetricType]:
        """Metric types that have a declared series."""
        return frozenset(self._gauges)

    def __contains__(self, metric_type: object) -> bool:
        return metric_type in self._gauges

    def apply(self, record: MetricRecord) -> bool:
        """
        Set the gauge for the record's label-combination.

        Returns:
            False (and changes nothing) if the record's type has no series
        """
        gauge = self._gauges.get(record.type) if record.type is not None else None
        if gauge is None:
            return False
        gauge.labels(**record.labels()).set(record.value)
        return True

    def apply_all(self, records: Iterable[MetricRecord]) -> int:
        """Apply records in order; returns how many were applied."""
        return sum(1 for record in records if self.apply(record))

    def snapshot(self) -> list[GaugeSample]:
        """Current value of every series and label-combination."""
        samples = []
        for gauge in self._gauges.values():
            for metric in gauge.collect():
                for sample in metric.samples:
                    samples.append(GaugeSample(sample.name, dict(sample.labels), sample.value))
        return samples

    def value(self, metric_type: MetricType, **labels: str) -> float | None:
        """Current value for one label-combination, None if never set."""
        definition = METRIC_DEFINITIONS.get(metric_type)
        if definition is None:
            return None
        wanted = {name: labels.get(name, "") for name in LABEL_NAMES}
        for sample in self.snapshot():
            if sample.name == definition.name and sample.labels == wanted:
                return sample.value
        return None
