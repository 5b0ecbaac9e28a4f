"""Location of locally stored GSI parameter files.

jgdjax never downloads parameter files.  Users place the official files
(unzipped) in a data directory, whose root is determined by the
``JGDJAX_DATA`` environment variable.  If unset, it defaults to
``~/.cache/jgdjax``.
"""

from __future__ import annotations

import os
from pathlib import Path

_ENV_VAR = "JGDJAX_DATA"
_DEFAULT_SUBDIR = ".cache/jgdjax"

PARAMETER_FILES: dict[str, str] = {
    "tky2jgd": "TKY2JGD.par",
    "patchjgd": "touhokutaiheiyouoki2011.par",
}
"""Canonical file names of the supported parameter grids."""


def get_data_dir() -> Path:
    """Return the jgdjax data directory.

    The root is ``$JGDJAX_DATA`` if set, otherwise ``~/.cache/jgdjax``.
    Unlike a cache, the directory is not created.

    Returns:
        :class:`~pathlib.Path` to the data directory.
    """
    env = os.environ.get(_ENV_VAR)
    if env is not None:
        return Path(env)
    return Path.home() / _DEFAULT_SUBDIR


def find_parameter_file(name: str, data_dir: str | Path | None = None) -> Path:
    """Resolve the path of a named parameter file.

    Args:
        name: ``"tky2jgd"`` or ``"patchjgd"`` (case-insensitive).
        data_dir: Directory to search.  Defaults to :func:`get_data_dir`.

    Returns:
        Path to the existing file.

    Raises:
        ValueError: If *name* is not a known grid.
        FileNotFoundError: If the file is not present.
    """
    try:
        filename = PARAMETER_FILES[name.lower()]
    except KeyError as err:
        raise ValueError(
            f"Unknown parameter grid '{name}'. "
            f"Available: {sorted(PARAMETER_FILES)}"
        ) from err

    root = Path(data_dir) if data_dir is not None else get_data_dir()
    filepath = root / filename
    if not filepath.exists():
        raise FileNotFoundError(
            f"Parameter file not found: {filepath} "
            f"(set {_ENV_VAR} to the directory holding {filename})"
        )
    return filepath
