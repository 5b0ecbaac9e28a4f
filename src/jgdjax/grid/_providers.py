"""Factory functions for creating CorrectionGrid instances.

- :func:`uniform_grid`: Constant corrections over a latitude/longitude box
  (useful for testing or when a single offset is known).
- :func:`load_grid_from_file`: Load a GSI ``.par`` parameter file.
- :func:`load_grid_by_name`: Load ``tky2jgd`` or ``patchjgd`` from the
  data directory (see :mod:`jgdjax.utils.data_dir`).
"""

from __future__ import annotations

import logging
from pathlib import Path

from jgdjax.grid._build import build_grid
from jgdjax.grid._parsers import parse_par_file
from jgdjax.grid._types import CorrectionGrid
from jgdjax.mesh import MeshCode, mesh_code_of
from jgdjax.utils.data_dir import find_parameter_file

logger = logging.getLogger(__name__)


def uniform_grid(
    lat_min: float,
    lon_min: float,
    lat_max: float,
    lon_max: float,
    shift_lat: float = 0.0,
    shift_lon: float = 0.0,
) -> CorrectionGrid:
    """Create a grid with the same correction at every node of a box.

    Nodes are placed so that every point with ``lat_min <= lat <= lat_max``
    and ``lon_min <= lon <= lon_max`` has all four cell corners.

    Args:
        lat_min: Southern edge [deg].
        lon_min: Western edge [deg].
        lat_max: Northern edge [deg].
        lon_max: Eastern edge [deg].
        shift_lat: Latitude correction [arc-seconds]. Default: 0.0.
        shift_lon: Longitude correction [arc-seconds]. Default: 0.0.

    Returns:
        CorrectionGrid with constant corrections.

    Examples:
        ```python
        from jgdjax.grid import correction_at, uniform_grid
        grid = uniform_grid(35.0, 139.0, 36.0, 140.0, shift_lat=1.0)
        correction_at(grid, 35.5, 139.5).to_as()  # (1.0, 0.0)
        ```
    """
    sw = mesh_code_of(lat_min, lon_min)
    ne = mesh_code_of(lat_max, lon_max)
    records = (
        (MeshCode(lat, lon), shift_lat, shift_lon)
        for lat in range(sw.lat, ne.lat + 2)
        for lon in range(sw.lon, ne.lon + 2)
    )
    return build_grid(records)


def load_grid_from_file(filepath: str | Path, *, strict: bool = False) -> CorrectionGrid:
    """Load a correction grid from a GSI ``.par`` file.

    Args:
        filepath: Path to the parameter file (e.g. ``TKY2JGD.par``).
        strict: Reject duplicate mesh codes instead of keeping the last.

    Returns:
        CorrectionGrid ready for lookups.

    Raises:
        FileNotFoundError: If the file does not exist.
        MalformedGridError: If the file cannot be parsed or holds no records.

    Examples:
        ```python
        from jgdjax.grid import load_grid_from_file
        grid = load_grid_from_file("path/to/TKY2JGD.par")
        ```
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Parameter file not found: {filepath}")

    grid = build_grid(parse_par_file(filepath), strict=strict)
    logger.info("Loaded %d correction nodes from %s", grid.size, filepath)
    return grid


def load_grid_by_name(
    name: str,
    data_dir: str | Path | None = None,
    *,
    strict: bool = False,
) -> CorrectionGrid:
    """Load a named grid from the data directory.

    Args:
        name: ``"tky2jgd"`` or ``"patchjgd"``.
        data_dir: Directory holding the files.  Defaults to ``$JGDJAX_DATA``
            or ``~/.cache/jgdjax``.
        strict: Reject duplicate mesh codes.

    Returns:
        CorrectionGrid loaded from the canonical file.

    Raises:
        ValueError: If *name* is unknown.
        FileNotFoundError: If the file is not present.
    """
    return load_grid_from_file(find_parameter_file(name, data_dir), strict=strict)
