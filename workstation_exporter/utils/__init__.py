"""
Utility functions and helpers.
"""

from .numbers import leading_int, round_half_up
from .process import CommandResult, run_command
from .sysfs import glob_paths, natural_key, read_file, read_file_async, read_files_async

__all__ = [
    "CommandResult",
    "run_command",
    "glob_paths",
    "natural_key",
    "read_file",
    "read_file_async",
    "read_files_async",
    "leading_int",
    "round_half_up",
]
