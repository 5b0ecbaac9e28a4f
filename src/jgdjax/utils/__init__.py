"""Shared utility functions for jgdjax.

Provides data directory lookup for locally stored parameter files.
"""

from jgdjax.utils.data_dir import PARAMETER_FILES, find_parameter_file, get_data_dir

__all__ = [
    "PARAMETER_FILES",
    "find_parameter_file",
    "get_data_dir",
]
