"""
Package power collector from the powercap (Intel RAPL) interface.

energy_uj is a monotonically increasing microjoule counter. The probe
reads it twice, `interval` seconds apart, and the difference gives the
average power over that window. The counter rolls over at
max_energy_range_uj; a single wrap inside the window is unwrapped
using that range. Disabled unless enabled in the
configuration, since reading energy_uj usually requires root.
"""

import asyncio
from pathlib import Path
from typing import Any, NamedTuple

from ..config.schema import ModuleConfig
from ..models.record import MetricRecord, MetricType
from ..utils.numbers import round_half_up
from ..utils.sysfs import read_file_async
from .base import SourceModule

DEFAULT_PATH = "/sys/class/powercap/intel-rapl:0/energy_uj"
DEFAULT_INTERVAL = 1.0
MICROJOULES = 1e6


class EnergySample(NamedTuple):
    """Two counter readings taken `interval` seconds apart."""

    before: int
    after: int
    interval: float = DEFAULT_INTERVAL
    # Counter range from max_energy_range_uj, None if unknown
    max_range: int | None = None


class PowercapModule(SourceModule):
    """Average package power over a short sampling window."""

    NAME = "powercap"
    ADAPTER = "powercap"
    ENABLED_BY_DEFAULT = False

    def __init__(self, path: str | None = None, interval: float | None = None, **kwargs):
        super().__init__(**kwargs)
        self.path = Path(path or DEFAULT_PATH)
        self.interval = interval or DEFAULT_INTERVAL

    @classmethod
    def config_kwargs(cls, config: ModuleConfig) -> dict[str, Any]:
        return {**super().config_kwargs(config), "path": config.path, "interval": config.interval}

    @property
    def zone(self) -> str:
        """Powercap zone name, e.g. intel-rapl:0."""
        return self.path.parent.name

    async def _read_counter(self) -> int:
        try:
            text = await read_file_async(self.path)
        except OSError as e:
            raise self.probe_error(f"cannot read {self.path}: {e}") from e
        try:
            return int(text.strip())
        except ValueError:
            raise self.parse_error(f"{self.path}: not a counter: {text.strip()!r}") from None

    async def _read_max_range(self) -> int | None:
        path = self.path.with_name("max_energy_range_uj")
        try:
            return int((await read_file_async(path)).strip())
        except (OSError, ValueError):
            return None

    async def probe(self) -> EnergySample:
        before = await self._read_counter()
        await asyncio.sleep(self.interval)
        after = await self._read_counter()
        return EnergySample(before, after, self.interval, await self._read_max_range())

    def normalize(self, raw: EnergySample) -> list[MetricRecord]:
        if raw.interval <= 0:
            raise self.parse_error(f"invalid sampling interval {raw.interval}")

        delta = raw.after - raw.before
        if delta < 0:
            if not raw.max_range:
                raise self.parse_error("energy counter wrapped and max_energy_range_uj is unknown")
            delta += raw.max_range

        watts = delta / MICROJOULES / raw.interval
        return [
            MetricRecord(
                type=MetricType.POWER,
                value=round_half_up(watts),
                device=self.zone,
                adapter=self.ADAPTER,
                sensor=f"{self.zone}_power",
            )
        ]
