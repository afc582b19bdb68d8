"""
NVIDIA GPU collector using `nvidia-smi -x -q`.

The XML report contains one <gpu> element per physical GPU. Fields are
read into a GpuReading by fixed paths; any missing or non-numeric field
fails the whole module for the cycle.

Values carry units ("45 C", "8192 MiB", "61.32 W", "1410 MHz"); only the
leading integer of the first token is used. Clocks are converted to Hz.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass

from ..models.record import MetricRecord, MetricType
from ..utils.numbers import leading_int
from .base import CommandModule, MissingFieldError

MHZ = 1000 * 1000

# Newer drivers renamed power_readings to gpu_power_readings
POWER_DRAW_PATHS = ("power_readings/power_draw", "gpu_power_readings/power_draw")


@dataclass(frozen=True)
class GpuReading:
    """Fields extracted from one <gpu> element."""

    fan_speed: int
    temperature: int
    memory_total: int
    memory_used: int
    memory_free: int
    gpu_util: int
    memory_util: int
    encoder_util: int
    decoder_util: int
    power_draw: int
    graphics_clock: int
    sm_clock: int
    mem_clock: int
    video_clock: int


class NvidiaSmiModule(CommandModule):
    """Temperature, memory, utilization, power, fan and clocks per NVIDIA GPU."""

    NAME = "nvidia_smi"
    ADAPTER = "nvidia-smi"
    DEFAULT_COMMAND = "nvidia-smi -x -q"

    async def probe(self) -> ET.Element:
        output = await self.run()
        try:
            return ET.fromstring(output)
        except ET.ParseError as e:
            raise self.parse_error(f"invalid XML from '{self.command}': {e}") from e

    def _field(self, gpu: ET.Element, index: int, *paths: str) -> int:
        """Read the first present path as a leading integer."""
        for path in paths:
            element = gpu.find(path)
            if element is not None and element.text is not None:
                value = leading_int(element.text)
                if value is None:
                    raise self.parse_error(f"gpu[{index}]/{path}: not a number: {element.text!r}")
                return value
        raise MissingFieldError(f"gpu[{index}]/{paths[0]}", self.NAME)

    def read_gpu(self, gpu: ET.Element, index: int) -> GpuReading:
        return GpuReading(
            fan_speed=self._field(gpu, index, "fan_speed"),
            temperature=self._field(gpu, index, "temperature/gpu_temp"),
            memory_total=self._field(gpu, index, "fb_memory_usage/total"),
            memory_used=self._field(gpu, index, "fb_memory_usage/used"),
            memory_free=self._field(gpu, index, "fb_memory_usage/free"),
            gpu_util=self._field(gpu, index, "utilization/gpu_util"),
            memory_util=self._field(gpu, index, "utilization/memory_util"),
            encoder_util=self._field(gpu, index, "utilization/encoder_util"),
            decoder_util=self._field(gpu, index, "utilization/decoder_util"),
            power_draw=self._field(gpu, index, *POWER_DRAW_PATHS),
            graphics_clock=self._field(gpu, index, "clocks/graphics_clock"),
            sm_clock=self._field(gpu, index, "clocks/sm_clock"),
            mem_clock=self._field(gpu, index, "clocks/mem_clock"),
            video_clock=self._field(gpu, index, "clocks/video_clock"),
        )

    def normalize(self, raw: ET.Element) -> list[MetricRecord]:
        if raw.tag != "nvidia_smi_log":
            raise self.parse_error(f"unexpected root element <{raw.tag}>")

        records: list[MetricRecord] = []

        for index, gpu in enumerate(raw.findall("gpu")):
            reading = self.read_gpu(gpu, index)
            entries = [
                (MetricType.TEMPERATURE, reading.temperature, "temperature"),
                (MetricType.MEMORY_TOTAL, reading.memory_total, "memory_total"),
                (MetricType.MEMORY_USAGE, reading.memory_used, "memory_used"),
                (MetricType.MEMORY_FREE, reading.memory_free, "memory_free"),
                (MetricType.UTILIZATION, reading.gpu_util, "utilization"),
                (MetricType.UTILIZATION, reading.memory_util, "memory_utilization"),
                (MetricType.UTILIZATION, reading.encoder_util, "encoder_utilization"),
                (MetricType.UTILIZATION, reading.decoder_util, "decoder_utilization"),
                (MetricType.POWER, reading.power_draw, "power_readings"),
                (MetricType.FAN_SPEED, reading.fan_speed, "fan_speed"),
                (MetricType.FREQUENCY, reading.graphics_clock * MHZ, "graphics_clock"),
                (MetricType.FREQUENCY, reading.sm_clock * MHZ, "sm_clock"),
                (MetricType.FREQUENCY, reading.mem_clock * MHZ, "mem_clock"),
                (MetricType.FREQUENCY, reading.video_clock * MHZ, "video_clock"),
            ]
            records.extend(
                MetricRecord(
                    type=metric_type,
                    value=value,
                    device=f"gpu{index}",
                    adapter=self.ADAPTER,
                    sensor=f"gpu{index}_{sensor}",
                )
                for metric_type, value, sensor in entries
            )

        return records
