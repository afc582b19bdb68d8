"""
NVIDIA fan RPM collector using `nvidia-settings -q all`.

Relevant lines look like:

    Attribute 'GPUCurrentFanSpeedRPM' (workstation:0[fan:0]): 1150.
"""

import re

from ..models.record import MetricRecord, MetricType
from .base import CommandModule

ATTRIBUTE = "Attribute 'GPUCurrentFanSpeedRPM'"
FAN_RPM = re.compile(r"(\d+)\[fan:(\d+)\]\): (\d+)")


class NvidiaSettingsModule(CommandModule):
    """Fan RPM per NVIDIA GPU fan."""

    NAME = "nvidia_settings"
    ADAPTER = "nvidia-settings"
    DEFAULT_COMMAND = "nvidia-settings -q all"

    def normalize(self, raw: str) -> list[MetricRecord]:
        records = []

        for line in raw.strip().splitlines():
            if ATTRIBUTE not in line:
                continue

            match = FAN_RPM.search(line)
            if match is None:
                raise self.parse_error(f"unrecognized fan attribute line: {line.strip()!r}")

            gpu_id, fan_id, rpm = match.groups()
            records.append(
                MetricRecord(
                    type=MetricType.FAN,
                    value=int(rpm),
                    device=f"gpu{gpu_id}",
                    adapter=self.ADAPTER,
                    sensor=f"fan{fan_id}_input",
                )
            )

        return records
