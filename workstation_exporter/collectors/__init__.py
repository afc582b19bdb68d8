"""
Telemetry source modules.
"""

from ..config.schema import Config
from .base import (
    CommandModule,
    JSONCommandModule,
    MissingFieldError,
    ModuleError,
    ModuleResult,
    ParseError,
    ProbeError,
    SourceModule,
)
from .cpufreq import CpuFreqModule
from .hwmon_pwm import HwmonPwmModule
from .lm_sensors import LmSensorsModule
from .memory import MemoryModule
from .mpstat import MpstatModule
from .nvidia_settings import NvidiaSettingsModule
from .nvidia_smi import NvidiaSmiModule
from .powercap import PowercapModule

# Collection order; records are flattened in this order every cycle
MODULES: dict[str, type[SourceModule]] = {
    module.NAME: module
    for module in (
        LmSensorsModule,
        NvidiaSmiModule,
        CpuFreqModule,
        MemoryModule,
        MpstatModule,
        NvidiaSettingsModule,
        HwmonPwmModule,
        PowercapModule,
    )
}


def create_modules(config: Config | None = None) -> list[SourceModule]:
    """Instantiate every known module, enabled or not, from configuration."""
    config = config or Config()
    return [module.from_config(config.module(name)) for name, module in MODULES.items()]


__all__ = [
    "MODULES",
    "create_modules",
    "SourceModule",
    "CommandModule",
    "JSONCommandModule",
    "ModuleResult",
    "ModuleError",
    "ProbeError",
    "ParseError",
    "MissingFieldError",
    "LmSensorsModule",
    "NvidiaSmiModule",
    "CpuFreqModule",
    "MemoryModule",
    "MpstatModule",
    "NvidiaSettingsModule",
    "HwmonPwmModule",
    "PowercapModule",
]
