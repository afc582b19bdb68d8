"""
CPU frequency collector from the cpufreq sysfs interface.

Reads /sys/devices/system/cpu/cpu*/cpufreq/scaling_cur_freq (kHz), one
file per core, ordered by core number.
"""

from typing import Any

from ..config.schema import ModuleConfig
from ..models.record import MetricRecord, MetricType
from ..utils.sysfs import glob_paths, read_files_async
from .base import SourceModule

DEFAULT_PATTERN = "/sys/devices/system/cpu/cpu*/cpufreq/scaling_cur_freq"


class CpuFreqModule(SourceModule):
    """Current clock of every core."""

    NAME = "cpufreq"
    ADAPTER = "cpu"

    def __init__(self, path: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.pattern = path or DEFAULT_PATTERN

    @classmethod
    def config_kwargs(cls, config: ModuleConfig) -> dict[str, Any]:
        return {**super().config_kwargs(config), "path": config.path}

    async def probe(self) -> str:
        paths = glob_paths(self.pattern)
        if not paths:
            raise self.probe_error(f"no files match {self.pattern}")
        try:
            contents = await read_files_async(paths)
        except OSError as e:
            raise self.probe_error(str(e)) from e
        return "".join(text.strip() + "\n" for text in contents)

    def normalize(self, raw: str) -> list[MetricRecord]:
        records = []
        for index, line in enumerate(line for line in raw.splitlines() if line.strip()):
            try:
                khz = int(line.strip())
            except ValueError:
                raise self.parse_error(f"line {index + 1}: not a frequency: {line!r}") from None
            records.append(
                MetricRecord(
                    type=MetricType.FREQUENCY,
                    value=khz * 1000,
                    adapter=self.ADAPTER,
                    sensor=f"cpu{index}_clock",
                )
            )
        return records
