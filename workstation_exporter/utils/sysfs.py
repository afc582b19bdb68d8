"""
Helpers for kernel pseudo-files (sysfs).

Reads are small but may block on misbehaving drivers, so the async
variants run them in a worker thread.
"""

import asyncio
import glob
import re
from pathlib import Path

_DIGITS = re.compile(r"(\d+)")


def natural_key(value: str | Path) -> list[int | str]:
    """Sort key that orders cpu2 before cpu10."""
    parts = _DIGITS.split(str(value))
    return [int(part) if part.isdigit() else part for part in parts]


def glob_paths(pattern: str) -> list[Path]:
    """Expand a glob pattern, naturally sorted."""
    return [Path(p) for p in sorted(glob.glob(pattern), key=natural_key)]


def read_file(path: str | Path) -> str:
    """Read a pseudo-file as text."""
    return Path(path).read_text()


async def read_file_async(path: str | Path) -> str:
    return await asyncio.to_thread(read_file, path)


async def read_files_async(paths: list[Path]) -> list[str]:
    """Read several pseudo-files concurrently, preserving order."""
    return list(await asyncio.gather(*(read_file_async(p) for p in paths)))
