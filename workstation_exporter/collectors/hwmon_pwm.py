"""
PWM fan duty collector from hwmon sysfs.

Globs /sys/devices/platform/*/hwmon/hwmon*/pwm* and keeps the duty files
(pwm1, pwm2, ...), skipping pwm1_enable, pwm1_mode and friends. A path
such as

    /sys/devices/platform/nct6775.656/hwmon/hwmon2/pwm1

yields adapter "nct6775.656", device "hwmon2", sensor "pwm1". Duty is
0-255 and is reported as a percentage.
"""

import re
from pathlib import PurePosixPath
from typing import Any, NamedTuple

from ..config.schema import ModuleConfig
from ..models.record import MetricRecord, MetricType
from ..utils.numbers import round_half_up
from ..utils.sysfs import glob_paths, read_files_async
from .base import SourceModule

DEFAULT_ROOT = "/sys/devices/platform"
PWM_FILE = re.compile(r"/pwm\d+$")
PWM_MAX = 255


class PwmFile(NamedTuple):
    """A PWM pseudo-file and its raw content."""

    path: str
    content: str


class HwmonPwmModule(SourceModule):
    """Fan duty cycle for platform hwmon PWM outputs."""

    NAME = "hwmon_pwm"

    def __init__(self, path: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.root = (path or DEFAULT_ROOT).rstrip("/")

    @classmethod
    def config_kwargs(cls, config: ModuleConfig) -> dict[str, Any]:
        return {**super().config_kwargs(config), "path": config.path}

    @property
    def pattern(self) -> str:
        return f"{self.root}/*/hwmon/hwmon*/pwm*"

    async def probe(self) -> list[PwmFile]:
        paths = [p for p in glob_paths(self.pattern) if PWM_FILE.search(str(p))]
        try:
            contents = await read_files_async(paths)
        except OSError as e:
            raise self.probe_error(str(e)) from e
        return [PwmFile(str(path), content) for path, content in zip(paths, contents)]

    def _split(self, path: str) -> tuple[str, str, str]:
        try:
            parts = PurePosixPath(path).relative_to(self.root).parts
        except ValueError:
            raise self.parse_error(f"{path} is outside {self.root}") from None
        if len(parts) != 4 or parts[1] != "hwmon":
            raise self.parse_error(f"unexpected hwmon layout: {path}")
        adapter, _, device, sensor = parts
        return adapter, device, sensor

    def normalize(self, raw: list[PwmFile]) -> list[MetricRecord]:
        records = []

        for path, content in raw:
            adapter, device, sensor = self._split(path)
            try:
                duty = int(content.strip())
            except ValueError:
                raise self.parse_error(f"{path}: not an integer: {content.strip()!r}") from None
            if not 0 <= duty <= PWM_MAX:
                raise self.parse_error(f"{path}: duty {duty} outside 0-{PWM_MAX}")

            records.append(
                MetricRecord(
                    type=MetricType.FAN_SPEED,
                    value=round_half_up(duty / PWM_MAX * 100),
                    device=device,
                    adapter=adapter,
                    sensor=sensor,
                )
            )

        return records
