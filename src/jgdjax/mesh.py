"""Third-level mesh (JIS X 0410) indexing for correction grids.

A third-level mesh cell spans 30 arc-seconds of latitude by 45 arc-seconds
of longitude (roughly 1 km square in Japan).  Cells are identified here by
a :class:`MeshCode` holding their serial row/column counted from latitude 0
and longitude 0, which keeps neighbour arithmetic trivial.  The official
8-digit code used in GSI parameter files is available through
:meth:`MeshCode.to_code` and :meth:`MeshCode.from_code`.

Correction parameters are attached to the **south-west corner** of each
cell (Tobita, 2001), so a query point is interpolated from its own cell's
node and the nodes of the cells to the east, north and north-east.

Locating the cell of a coordinate uses fixed-point arithmetic: degrees are
scaled to integer 1e-5 arc-seconds before the floor division, so a point
exactly on a cell boundary always lands in the cell whose south-west
corner it is, regardless of floating-point noise in the degree value.

Two flavours are provided: plain Python functions (:func:`mesh_code_of`,
:func:`neighbors`, :func:`cell_origin`) and JAX-traceable array versions
(:func:`mesh_indices_jax`, :func:`mesh_keys_jax`) used by the JIT lookup
path.  Both produce identical indices.
"""

from __future__ import annotations

from typing import NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from jgdjax.constants import (
    FIXED_PER_DEG,
    MESH1_LON_ORIGIN,
    MESH3_LAT_FIXED,
    MESH3_LON_FIXED,
    MESH3_PER_LAT_DEG,
    MESH3_PER_LON_DEG,
    MESH3_PER_MESH1,
)

# Key packing: rows/columns are offset so every index on the globe (plus one
# row/column for neighbours) maps to a non-negative int32.
_LAT_OFFSET = 90 * MESH3_PER_LAT_DEG
_LON_OFFSET = 180 * MESH3_PER_LON_DEG
_LON_SPAN = 2 * _LON_OFFSET + 2

_MESH1_LON_SERIAL = MESH1_LON_ORIGIN * MESH3_PER_LON_DEG


class MeshCode(NamedTuple):
    """Serial index of a third-level mesh cell.

    Attributes:
        lat: Row counted from the equator, ``floor(latitude * 120)``.
        lon: Column counted from the prime meridian, ``floor(longitude * 80)``.
    """

    lat: int
    lon: int

    def to_code(self) -> int:
        """Return the official 8-digit mesh code of this cell.

        Returns:
            int: Code ``pp qq r s t u`` (first, second and third level
            digits for latitude and longitude, interleaved).

        Raises:
            ValueError: If the cell lies outside latitude [0, 66.67) or
                longitude [100, 200), which 8-digit codes cannot express.

        Examples:
            ```python
            from jgdjax.mesh import mesh_code_of
            mesh_code_of(35.6586, 139.7454).to_code()  # 53393599
            ```
        """
        lat = self.lat
        lon = self.lon - _MESH1_LON_SERIAL
        limit = 100 * MESH3_PER_MESH1
        if not (0 <= lat < limit and 0 <= lon < limit):
            raise ValueError(f"{self} has no 8-digit mesh code")

        p, lat_rest = divmod(lat, MESH3_PER_MESH1)
        q, lon_rest = divmod(lon, MESH3_PER_MESH1)
        r, t = divmod(lat_rest, 10)
        s, u = divmod(lon_rest, 10)
        return p * 1_000_000 + q * 10_000 + r * 1_000 + s * 100 + t * 10 + u

    @classmethod
    def from_code(cls, code: int) -> MeshCode:
        """Decode an 8-digit mesh code.

        Args:
            code: Official third-level mesh code, e.g. ``53394611``.

        Returns:
            MeshCode: The corresponding serial index.

        Raises:
            ValueError: If *code* is negative, longer than 8 digits, or has
                a second-level digit of 8 or 9.
        """
        if isinstance(code, bool) or not isinstance(code, int):
            raise ValueError(f"mesh code must be an integer, got {code!r}")
        if not 0 <= code <= 99_999_999:
            raise ValueError(f"mesh code out of range: {code}")

        p, rest = divmod(code, 1_000_000)
        q, rest = divmod(rest, 10_000)
        r, rest = divmod(rest, 1_000)
        s, rest = divmod(rest, 100)
        t, u = divmod(rest, 10)
        if r >= 8 or s >= 8:
            raise ValueError(f"invalid second-level digits in mesh code {code:08d}")

        lat = p * MESH3_PER_MESH1 + r * 10 + t
        lon = _MESH1_LON_SERIAL + q * MESH3_PER_MESH1 + s * 10 + u
        return cls(lat, lon)


class Neighbors(NamedTuple):
    """Meshes completing the interpolation cell of a south-west mesh."""

    east: MeshCode
    north: MeshCode
    northeast: MeshCode


def _to_fixed(degrees: float) -> int:
    return round(degrees * FIXED_PER_DEG)


def mesh_code_of(lat: float, lon: float) -> MeshCode:
    """Return the mesh containing a coordinate.

    The coordinate is the cell's south-west corner or lies strictly inside
    it.  Every coordinate maps to some mesh; whether that mesh has a grid
    node is a separate question.

    Args:
        lat: Latitude [deg].
        lon: Longitude [deg].

    Returns:
        MeshCode: The containing mesh.
    """
    return MeshCode(
        _to_fixed(lat) // MESH3_LAT_FIXED,
        _to_fixed(lon) // MESH3_LON_FIXED,
    )


def neighbors(mesh: MeshCode) -> Neighbors:
    """Return the east, north and north-east neighbours of *mesh*."""
    return Neighbors(
        east=MeshCode(mesh.lat, mesh.lon + 1),
        north=MeshCode(mesh.lat + 1, mesh.lon),
        northeast=MeshCode(mesh.lat + 1, mesh.lon + 1),
    )


def cell_origin(mesh: MeshCode) -> tuple[float, float]:
    """Return the south-west corner of *mesh* as ``(lat, lon)`` degrees."""
    return mesh.lat / MESH3_PER_LAT_DEG, mesh.lon / MESH3_PER_LON_DEG


def cell_fraction(mesh: MeshCode, lat: float, lon: float) -> tuple[float, float]:
    """Fractional position of a point inside *mesh*.

    Args:
        mesh: Mesh whose south-west corner is the reference.
        lat: Latitude [deg].
        lon: Longitude [deg].

    Returns:
        ``(fx, fy)``: eastward and northward fractions, clamped to [0, 1].
    """
    fx = lon * MESH3_PER_LON_DEG - mesh.lon
    fy = lat * MESH3_PER_LAT_DEG - mesh.lat
    return min(max(fx, 0.0), 1.0), min(max(fy, 0.0), 1.0)


def mesh_key(mesh: MeshCode) -> int:
    """Pack *mesh* into a non-negative integer ordered by ``(lat, lon)``."""
    return (mesh.lat + _LAT_OFFSET) * _LON_SPAN + (mesh.lon + _LON_OFFSET)


def mesh_from_key(key: int) -> MeshCode:
    """Inverse of :func:`mesh_key`."""
    lat, lon = divmod(int(key), _LON_SPAN)
    return MeshCode(lat - _LAT_OFFSET, lon - _LON_OFFSET)


def mesh_indices_jax(lat: ArrayLike, lon: ArrayLike) -> tuple[Array, Array]:
    """JAX-traceable :func:`mesh_code_of`.

    Computation is carried out in float64 on integer-valued fixed-point
    numbers, which are exact well beyond the range of valid degrees.

    Args:
        lat: Latitude(s) [deg].
        lon: Longitude(s) [deg].

    Returns:
        Tuple of int32 arrays ``(lat_index, lon_index)``.
    """
    lat_fixed = jnp.round(jnp.asarray(lat, dtype=jnp.float64) * FIXED_PER_DEG)
    lon_fixed = jnp.round(jnp.asarray(lon, dtype=jnp.float64) * FIXED_PER_DEG)
    lat_index = jnp.floor(lat_fixed / MESH3_LAT_FIXED).astype(jnp.int32)
    lon_index = jnp.floor(lon_fixed / MESH3_LON_FIXED).astype(jnp.int32)
    return lat_index, lon_index


def mesh_keys_jax(lat_index: ArrayLike, lon_index: ArrayLike) -> Array:
    """JAX-traceable :func:`mesh_key` on index arrays."""
    lat_index = jnp.asarray(lat_index, dtype=jnp.int32)
    lon_index = jnp.asarray(lon_index, dtype=jnp.int32)
    return (lat_index + _LAT_OFFSET) * _LON_SPAN + (lon_index + _LON_OFFSET)
