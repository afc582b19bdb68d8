"""
Base source module interface.

A source module wraps one external telemetry provider. It exposes two
capabilities:

1. probe() - gather raw output (subprocess, pseudo-file, glob)
2. normalize() - pure transformation of that output into MetricRecords

safe_collect() runs both with a timeout and turns every failure into an
empty ModuleResult, so one broken provider never affects the others.
"""

import asyncio
import json
import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from ..config.schema import ModuleConfig
from ..const import DEFAULT_PROBE_TIMEOUT
from ..logging import get_logger
from ..models.record import MetricRecord
from ..utils.process import run_command


class ModuleError(Exception):
    """Base class for source module failures."""

    def __init__(self, message: str, module: str | None = None):
        self.module = module
        super().__init__(message)


class ProbeError(ModuleError):
    """External tool or file unavailable, non-zero exit, I/O failure."""


class ParseError(ModuleError):
    """Probe output did not have the expected structure."""


class MissingFieldError(ParseError):
    """A required field is absent from a structured document."""

    def __init__(self, path: str, module: str | None = None):
        self.path = path
        super().__init__(f"Missing field: {path}", module)


@dataclass
class ModuleResult:
    """Outcome of one module in one collection cycle."""

    module: str
    records: list[MetricRecord] = field(default_factory=list)
    error: str | None = None
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None

    def __repr__(self) -> str:
        status = "OK" if self.ok else f"ERROR: {self.error}"
        return f"ModuleResult({self.module}, {len(self.records)} records, {status})"


class SourceModule(ABC):
    """
    Abstract base class for telemetry source modules.

    Subclasses set NAME (the configuration key) and ADAPTER (the default
    adapter label), and implement probe() and normalize().
    """

    NAME: str = "unknown"
    ADAPTER: str | None = None

    # Whether the module runs when the configuration does not mention it
    ENABLED_BY_DEFAULT: bool = True

    def __init__(
        self,
        enabled: bool | None = None,
        timeout: float | None = DEFAULT_PROBE_TIMEOUT,
    ):
        """
        Initialize source module.

        Args:
            enabled: Whether the module takes part in collection cycles
                (None selects ENABLED_BY_DEFAULT)
            timeout: Maximum probe duration in seconds (None = unbounded)
        """
        self._enabled = self.ENABLED_BY_DEFAULT if enabled is None else bool(enabled)
        self.timeout = timeout
        self.logger = get_logger(f"collectors.{self.NAME}")

    @classmethod
    def from_config(cls, config: ModuleConfig) -> "SourceModule":
        """Build the module from its configuration section."""
        return cls(**cls.config_kwargs(config))

    @classmethod
    def config_kwargs(cls, config: ModuleConfig) -> dict[str, Any]:
        return {"enabled": config.enabled, "timeout": config.timeout}

    @property
    def enabled(self) -> bool:
        """Fixed for the lifetime of the module."""
        return self._enabled

    @property
    def name(self) -> str:
        return self.NAME

    @abstractmethod
    async def probe(self) -> Any:
        """
        Gather raw output from the provider.

        Raises:
            ProbeError: If the provider is unavailable or fails
        """

    @abstractmethod
    def normalize(self, raw: Any) -> list[MetricRecord]:
        """
        Convert raw probe output into metric records.

        Must be pure: no I/O, same input gives the same records.

        Raises:
            ParseError: If the output does not have the expected shape
        """

    def probe_error(self, message: str) -> ProbeError:
        return ProbeError(message, self.NAME)

    def parse_error(self, message: str) -> ParseError:
        return ParseError(message, self.NAME)

    async def collect(self) -> list[MetricRecord]:
        """Probe, then normalize."""
        raw = await self.probe()
        return self.normalize(raw)

    async def safe_collect(self) -> ModuleResult:
        """
        Collect records, converting any failure into an empty result.

        Returns:
            ModuleResult, with error set if probe or normalize failed
        """
        started = time.monotonic()
        result = ModuleResult(module=self.NAME)

        try:
            if self.timeout:
                records = await asyncio.wait_for(self.collect(), timeout=self.timeout)
            else:
                records = await self.collect()
            result.records = records
        except TimeoutError:
            result.error = f"probe timed out after {self.timeout}s"
        except ProbeError as e:
            result.error = f"probe failed: {e}"
        except ParseError as e:
            result.error = f"parse failed: {e}"
        except Exception as e:
            self.logger.debug(f"Unexpected failure in {self.NAME}", exc_info=True)
            result.error = f"{type(e).__name__}: {e}"

        result.duration = time.monotonic() - started

        if result.ok:
            self.logger.debug(
                f"{self.NAME} produced {len(result.records)} records in {result.duration:.3f}s"
            )
        else:
            self.logger.warning(f"Module {self.NAME} failed: {result.error}")

        return result

    def __repr__(self) -> str:
        status = "enabled" if self.enabled else "disabled"
        return f"{self.__class__.__name__}({status}, timeout={self.timeout})"


class CommandModule(SourceModule):
    """Source module whose probe is the stdout of a command."""

    DEFAULT_COMMAND: str = ""

    def __init__(
        self,
        enabled: bool | None = None,
        timeout: float | None = DEFAULT_PROBE_TIMEOUT,
        command: str | None = None,
    ):
        super().__init__(enabled=enabled, timeout=timeout)
        self.command = command or self.DEFAULT_COMMAND

    @classmethod
    def config_kwargs(cls, config: ModuleConfig) -> dict[str, Any]:
        return {**super().config_kwargs(config), "command": config.command}

    async def run(self) -> str:
        """Run the configured command and return its stdout."""
        result = await run_command(self.command)
        if not result.ok:
            detail = result.stderr or f"exit code {result.returncode}"
            raise self.probe_error(f"'{self.command}' failed: {detail}")
        return result.stdout

    async def probe(self) -> Any:
        return await self.run()


class JSONCommandModule(CommandModule):
    """Command module whose output is a JSON document."""

    async def probe(self) -> Any:
        output = await self.run()
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise self.parse_error(f"invalid JSON from '{self.command}': {e}") from e


def require(document: Any, path: Sequence[str | int], module: str | None = None) -> Any:
    """
    Walk a nested mapping/list along path.

    Raises:
        MissingFieldError: If any step is absent or of the wrong kind
    """
    node = document
    walked: list[str] = []
    for step in path:
        walked.append(str(step))
        try:
            node = node[step]
        except (KeyError, IndexError, TypeError):
            raise MissingFieldError(".".join(walked), module) from None
    return node
