"""
Memory collector using `free -m`.

    $ free -m
                   total        used        free      shared  buff/cache   available
    Mem:           15895        6011        1848         789        8035        8771
    Swap:           2047           0        2047

The header is skipped; each remaining row is one memory pool. Only the
first three numeric columns are used.
"""

from ..models.record import MetricRecord, MetricType
from .base import CommandModule


class MemoryModule(CommandModule):
    """Total, used and free megabytes for physical memory and swap."""

    NAME = "memory"
    ADAPTER = "free"
    DEFAULT_COMMAND = "free -m"

    def normalize(self, raw: str) -> list[MetricRecord]:
        records: list[MetricRecord] = []

        for row in raw.splitlines()[1:]:
            columns = row.replace(":", "", 1).split()
            if not columns:
                continue
            if len(columns) < 4:
                raise self.parse_error(f"expected name, total, used, free in {row.strip()!r}")

            key, total, used, free = columns[:4]
            name = key.lower()
            try:
                values = [
                    (MetricType.MEMORY_TOTAL, int(total), "total"),
                    (MetricType.MEMORY_USAGE, int(used), "used"),
                    (MetricType.MEMORY_FREE, int(free), "free"),
                ]
            except ValueError:
                raise self.parse_error(f"non-integer column in {row.strip()!r}") from None

            records.extend(
                MetricRecord(
                    type=metric_type,
                    value=value,
                    adapter=self.ADAPTER,
                    sensor=f"{name}_{suffix}",
                )
                for metric_type, value, suffix in values
            )

        return records
