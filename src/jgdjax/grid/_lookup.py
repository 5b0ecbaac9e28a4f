"""Correction lookup and bilinear interpolation on a :class:`CorrectionGrid`.

The numerical core, :func:`correction_at_jax`, uses only JAX primitives
(``jnp.searchsorted``, array indexing, ``jnp.where``) and works inside
``jax.jit`` and ``jax.vmap``.  Missing corners cannot raise inside traced
code, so the core reports them through a boolean mask and NaN shifts.

:func:`correction_at` is the checked scalar entry point: it runs the core
and raises :class:`~jgdjax.errors.OutOfGridError` naming the first missing
corner.  A correction is never silently replaced by zero.
"""

from __future__ import annotations

import math
from collections.abc import Iterator

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from jgdjax.config import get_dtype
from jgdjax.constants import FIXED_PER_DEG, MESH3_PER_LAT_DEG, MESH3_PER_LON_DEG
from jgdjax.errors import OutOfGridError
from jgdjax.grid._types import CorrectionGrid, CorrectionVector, GridNode
from jgdjax.interpolation import interpolate
from jgdjax.mesh import (
    MeshCode,
    mesh_code_of,
    mesh_from_key,
    mesh_indices_jax,
    mesh_key,
    mesh_keys_jax,
    neighbors,
)

CORNERS: tuple[str, ...] = ("sw", "se", "nw", "ne")
"""Corner names in the order used by the lookup mask."""

# Row/column offsets of the corners relative to the south-west mesh
_CORNER_DLAT = (0, 0, 1, 1)
_CORNER_DLON = (0, 1, 0, 1)


def _search(grid: CorrectionGrid, keys: Array) -> tuple[Array, Array]:
    """Locate *keys* in the grid.

    Returns:
        Tuple of (clamped indices, found mask).
    """
    n = grid.keys.shape[0]
    idx = jnp.clip(jnp.searchsorted(grid.keys, keys), 0, n - 1)
    return idx, grid.keys[idx] == keys


def _correction_core(
    grid: CorrectionGrid, lat: ArrayLike, lon: ArrayLike
) -> tuple[Array, Array]:
    lat = jnp.asarray(lat, dtype=jnp.float64)
    lon = jnp.asarray(lon, dtype=jnp.float64)

    lat_index, lon_index = mesh_indices_jax(lat, lon)
    corner_keys = mesh_keys_jax(
        lat_index + jnp.array(_CORNER_DLAT, dtype=jnp.int32),
        lon_index + jnp.array(_CORNER_DLON, dtype=jnp.int32),
    )
    idx, found = _search(grid, corner_keys)

    # Fractional position inside the cell, clamped against fixed-point rounding
    fx = jnp.clip(lon * MESH3_PER_LON_DEG - lon_index, 0.0, 1.0)
    fy = jnp.clip(lat * MESH3_PER_LAT_DEG - lat_index, 0.0, 1.0)

    corner_lat = grid.shift_lat[idx] / FIXED_PER_DEG
    corner_lon = grid.shift_lon[idx] / FIXED_PER_DEG
    dlat = interpolate(corner_lat[0], corner_lat[1], corner_lat[2], corner_lat[3], fx, fy)
    dlon = interpolate(corner_lon[0], corner_lon[1], corner_lon[2], corner_lon[3], fx, fy)

    shift = jnp.where(jnp.all(found), jnp.stack([dlat, dlon]), jnp.nan)
    return shift.astype(get_dtype()), found


@jax.jit
def correction_at_jax(
    grid: CorrectionGrid, lat: ArrayLike, lon: ArrayLike
) -> tuple[Array, Array]:
    """Interpolate the correction at a single point (JIT-compatible).

    Args:
        grid: Correction grid.
        lat: Latitude [deg], scalar.
        lon: Longitude [deg], scalar.

    Returns:
        Tuple ``(shift, found)``: ``shift`` is ``[dlat, dlon]`` in degrees
        (NaN if any corner is missing) and ``found`` is a boolean mask over
        the corners in :data:`CORNERS` order.
    """
    return _correction_core(grid, lat, lon)


_correction_batch = jax.jit(jax.vmap(_correction_core, in_axes=(None, 0, 0)))


def correction_at(grid: CorrectionGrid, lat: float, lon: float) -> CorrectionVector:
    """Return the correction to add to a point.

    Args:
        grid: Correction grid.
        lat: Latitude [deg].
        lon: Longitude [deg].

    Returns:
        CorrectionVector in degrees.

    Raises:
        OutOfGridError: If the point's cell lacks a corner node, i.e. the
            point lies outside the surveyed area.
        ValueError: If a coordinate is NaN or infinite.

    Examples:
        ```python
        from jgdjax.grid import correction_at, uniform_grid
        grid = uniform_grid(35.0, 139.0, 36.0, 140.0, shift_lat=11.5, shift_lon=-11.9)
        shift = correction_at(grid, 35.5, 139.5)
        shift.to_as()  # (11.5, -11.9)
        ```
    """
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise ValueError(f"non-finite coordinate ({lat}, {lon})")
    shift, found = correction_at_jax(grid, lat, lon)
    found = [bool(f) for f in found]
    if not all(found):
        sw = mesh_code_of(lat, lon)
        corners = (sw, *neighbors(sw))
        i = found.index(False)
        raise OutOfGridError(corners[i], CORNERS[i], lat, lon)
    return CorrectionVector(float(shift[0]), float(shift[1]))


def correction_at_array(grid: CorrectionGrid, lats: ArrayLike, lons: ArrayLike) -> Array:
    """Vectorised correction lookup.

    Args:
        grid: Correction grid.
        lats: Latitudes [deg], shape ``(N,)``.
        lons: Longitudes [deg], shape ``(N,)``.

    Returns:
        Array of shape ``(N, 2)`` holding ``[dlat, dlon]`` in degrees, NaN
        for points outside the grid.
    """
    lats = jnp.atleast_1d(jnp.asarray(lats, dtype=jnp.float64))
    lons = jnp.atleast_1d(jnp.asarray(lons, dtype=jnp.float64))
    shifts, _ = _correction_batch(grid, lats, lons)
    return shifts


def node_at(grid: CorrectionGrid, mesh: MeshCode) -> GridNode | None:
    """Return the node stored for *mesh*, or ``None``."""
    key = mesh_key(mesh)
    idx = int(jnp.searchsorted(grid.keys, key))
    if idx < grid.size and int(grid.keys[idx]) == key:
        return GridNode(mesh, int(grid.shift_lat[idx]), int(grid.shift_lon[idx]))
    return None


def grid_nodes(grid: CorrectionGrid) -> Iterator[GridNode]:
    """Iterate over all nodes in mesh order."""
    for key, shift_lat, shift_lon in zip(
        grid.keys.tolist(), grid.shift_lat.tolist(), grid.shift_lon.tolist()
    ):
        yield GridNode(mesh_from_key(key), shift_lat, shift_lon)


def grid_bounds(grid: CorrectionGrid) -> tuple[float, float, float, float]:
    """Bounding box of the grid nodes.

    Returns:
        ``(lat_min, lon_min, lat_max, lon_max)`` in degrees, taken over
        the nodes' south-west corners.
    """
    meshes = [mesh_from_key(key) for key in grid.keys.tolist()]
    lats = [m.lat for m in meshes]
    lons = [m.lon for m in meshes]
    return (
        min(lats) / MESH3_PER_LAT_DEG,
        min(lons) / MESH3_PER_LON_DEG,
        max(lats) / MESH3_PER_LAT_DEG,
        max(lons) / MESH3_PER_LON_DEG,
    )
