"""
Tests for the metric registry and exposition rendering.
"""

from prometheus_client import CollectorRegistry

from workstation_exporter.exposition import CONTENT_TYPE, render_exposition
from workstation_exporter.models.record import LABEL_NAMES, MetricRecord, MetricType
from workstation_exporter.registry import METRIC_DEFINITIONS, MetricRegistry


def test_every_type_has_a_series() -> None:
    """Each metric type has a gauge."""
    registry = MetricRegistry()
    assert registry.types == frozenset(MetricType)
    assert set(METRIC_DEFINITIONS) == set(MetricType)
    assert MetricType.FAN_SPEED in registry
    assert None not in registry


def test_published_series_names() -> None:
    """Series names match the published ones."""
    names = {t.value: d.name for t, d in METRIC_DEFINITIONS.items()}
    assert names == {
        "temperature": "sensors_temperature",
        "voltage": "sensors_voltage",
        "voltageMin": "sensors_voltage_min",
        "voltageMax": "sensors_voltage_max",
        "power": "sensors_power",
        "memoryUsage": "sensors_memory_usage",
        "memoryTotal": "sensors_memory_total",
        "memoryFree": "sensors_memory_free",
        "utilization": "sensors_utilization",
        "fan": "sensors_fans",
        "fanSpeed": "sensors_fanspeed",
        "frequency": "sensors_frequenzy",
    }


def test_apply_sets_value() -> None:
    """Applying a record sets the labelled gauge."""
    registry = MetricRegistry()
    record = MetricRecord(MetricType.TEMPERATURE, 45.0, adapter="coretemp-isa-0000",
                          sensor="temp1_input", label="Package id 0")

    assert registry.apply(record) is True
    assert registry.value(MetricType.TEMPERATURE, adapter="coretemp-isa-0000",
                          sensor="temp1_input", label="Package id 0") == 45.0


def test_apply_overwrites_same_labels() -> None:
    """A later record with the same labels replaces the value."""
    registry = MetricRegistry()
    registry.apply(MetricRecord(MetricType.POWER, 10, sensor="p"))
    registry.apply(MetricRecord(MetricType.POWER, 30, sensor="p"))

    samples = [s for s in registry.snapshot() if s.name == "sensors_power"]
    assert len(samples) == 1
    assert samples[0].value == 30


def test_unrecognized_record_is_dropped() -> None:
    """Untyped records are not applied."""
    registry = MetricRegistry()
    assert registry.apply(MetricRecord(None, 80.0, sensor="temp1_max")) is False
    assert registry.snapshot() == []


def test_apply_all_counts() -> None:
    """apply_all returns how many records were applied."""
    registry = MetricRegistry()
    records = [
        MetricRecord(MetricType.FAN, 1000, sensor="fan1_input"),
        MetricRecord(None, 1, sensor="fan1_min"),
        MetricRecord(MetricType.FAN, 1100, sensor="fan2_input"),
    ]
    assert registry.apply_all(records) == 2


def test_snapshot_labels_use_empty_string() -> None:
    """Missing labels are published as empty strings."""
    registry = MetricRegistry()
    registry.apply(MetricRecord(MetricType.UTILIZATION, 9, adapter="mpstat",
                                sensor="cpu0_utilization"))

    (sample,) = registry.snapshot()
    assert sample.name == "sensors_utilization"
    assert tuple(sample.labels) == LABEL_NAMES
    assert sample.labels["device"] == ""
    assert sample.labels["label"] == ""


def test_registries_are_independent() -> None:
    """Two registries do not share gauges."""
    first = MetricRegistry()
    second = MetricRegistry()
    first.apply(MetricRecord(MetricType.FAN, 1, sensor="a"))
    assert second.snapshot() == []


def test_external_collector_registry() -> None:
    """An existing CollectorRegistry can be supplied."""
    target = CollectorRegistry()
    registry = MetricRegistry(target)
    assert registry.collector_registry is target


def test_render_exposition(sample_value) -> None:
    """The exposition carries metadata and labelled samples."""
    registry = MetricRegistry()
    registry.apply(MetricRecord(MetricType.FREQUENCY, 2_400_000_000, adapter="cpu",
                                sensor="cpu0_clock"))

    text = render_exposition(registry)

    assert "# HELP sensors_frequenzy Frequency in Hz" in text
    assert "# TYPE sensors_frequenzy gauge" in text
    assert sample_value(text, "sensors_frequenzy", device="", adapter="cpu",
                        sensor="cpu0_clock", label="") == 2_400_000_000
    # Declared but never set series still carry metadata
    assert "# HELP sensors_temperature Temperature in celsius" in text


def test_content_type() -> None:
    """The content type is the text exposition format."""
    assert CONTENT_TYPE.startswith("text/plain")
