"""
Pytest configuration and fixtures.

Sample outputs are trimmed captures from real machines.
"""

import asyncio
import json
from pathlib import Path

import pytest
from prometheus_client.parser import text_string_to_metric_families

from workstation_exporter.collectors.base import SourceModule
from workstation_exporter.models.record import MetricRecord


SENSORS_JSON = {
    "coretemp-isa-0000": {
        "Adapter": "ISA adapter",
        "Package id 0": {
            "temp1_input": 45.0,
            "temp1_max": 80.0,
            "temp1_crit": 100.0,
            "temp1_crit_alarm": 0.0,
        },
        "Core 0": {
            "temp2_input": 43.0,
            "temp2_max": 80.0,
        },
    },
    "nct6775-isa-0290": {
        "Adapter": "ISA adapter",
        "Vcore": {
            "in0_input": 0.88,
            "in0_min": 0.0,
            "in0_max": 1.74,
            "in0_alarm": 0.0,
        },
        "fan2": {
            "fan2_input": 1192.0,
            "fan2_min": 0.0,
        },
    },
}

NVIDIA_SMI_XML = """<?xml version="1.0" ?>
<!DOCTYPE nvidia_smi_log SYSTEM "nvsmi_device_v11.dtd">
<nvidia_smi_log>
    <driver_version>535.154.05</driver_version>
    <attached_gpus>1</attached_gpus>
    <gpu id="00000000:01:00.0">
        <product_name>NVIDIA GeForce RTX 3070</product_name>
        <fan_speed>36 %</fan_speed>
        <fb_memory_usage>
            <total>8192 MiB</total>
            <reserved>243 MiB</reserved>
            <used>1024 MiB</used>
            <free>6924 MiB</free>
        </fb_memory_usage>
        <utilization>
            <gpu_util>12 %</gpu_util>
            <memory_util>7 %</memory_util>
            <encoder_util>0 %</encoder_util>
            <decoder_util>0 %</decoder_util>
        </utilization>
        <temperature>
            <gpu_temp>52 C</gpu_temp>
            <gpu_temp_max_threshold>98 C</gpu_temp_max_threshold>
        </temperature>
        <power_readings>
            <power_state>P8</power_state>
            <power_draw>45.31 W</power_draw>
            <power_limit>220.00 W</power_limit>
        </power_readings>
        <clocks>
            <graphics_clock>210 MHz</graphics_clock>
            <sm_clock>210 MHz</sm_clock>
            <mem_clock>405 MHz</mem_clock>
            <video_clock>555 MHz</video_clock>
        </clocks>
    </gpu>
</nvidia_smi_log>
"""

FREE_OUTPUT = """\
               total        used        free      shared  buff/cache   available
Mem:           15895        6011        1848         789        8035        8771
Swap:           2047           0        2047
"""

MPSTAT_JSON = {
    "sysstat": {
        "hosts": [
            {
                "nodename": "workstation",
                "sysname": "Linux",
                "number-of-cpus": 8,
                "statistics": [
                    {
                        "timestamp": "10:15:01 AM",
                        "cpu-load": [
                            {
                                "cpu": "all",
                                "usr": 5.52,
                                "nice": 0.01,
                                "sys": 1.87,
                                "iowait": 0.1,
                                "idle": 91.5,
                            }
                        ],
                    }
                ],
            }
        ]
    }
}

NVIDIA_SETTINGS_OUTPUT = """\
Attributes queried on workstation:0[gpu:0]:
  Attribute 'GPUCoreTemp' (workstation:0[gpu:0]): 52.
  Attribute 'GPUCurrentFanSpeedRPM' (workstation:0[fan:0]): 1150.
    'GPUCurrentFanSpeedRPM' is an integer attribute.
  Attribute 'GPUCurrentFanSpeedRPM' (workstation:0[fan:1]): 1175.
"""


@pytest.fixture
def sensors_json() -> dict:
    # Fresh copy per test; some tests mutate it
    return json.loads(json.dumps(SENSORS_JSON))


@pytest.fixture
def nvidia_smi_xml() -> str:
    return NVIDIA_SMI_XML


@pytest.fixture
def free_output() -> str:
    return FREE_OUTPUT


@pytest.fixture
def mpstat_json() -> dict:
    return json.loads(json.dumps(MPSTAT_JSON))


@pytest.fixture
def nvidia_settings_output() -> str:
    return NVIDIA_SETTINGS_OUTPUT


@pytest.fixture
def example_config_path() -> Path:
    """Path to the shipped example config file."""
    return Path(__file__).parent.parent / "config.example.conf"


class StaticModule(SourceModule):
    """Source module returning fixed records, or raising a fixed error."""

    NAME = "static"

    def __init__(self, records=None, error=None, delay=0.0, name=None, **kwargs):
        super().__init__(**kwargs)
        self.records = list(records or [])
        self.error = error
        self.delay = delay
        self.probes = 0
        if name is not None:
            self.NAME = name

    async def probe(self):
        self.probes += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.records

    def normalize(self, raw) -> list[MetricRecord]:
        return list(raw)


@pytest.fixture
def static_module():
    """Factory for StaticModule instances."""
    return StaticModule


def _sample_value(text: str, name: str, **labels: str) -> float | None:
    for family in text_string_to_metric_families(text):
        for sample in family.samples:
            if sample.name == name and sample.labels == labels:
                return sample.value
    return None


@pytest.fixture
def sample_value():
    """Look up one sample in an exposition by name and exact label set (None if absent)."""
    return _sample_value
