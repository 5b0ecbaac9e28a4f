"""Type definitions for datum correction grids.

- :class:`CorrectionGrid`: Immutable container holding a parameter table
  as sorted JAX arrays for O(log n) lookup via ``jnp.searchsorted``.
- :class:`GridNode`: One measured correction at a mesh's south-west corner.
- :class:`CorrectionVector`: An interpolated ``(dlat, dlon)`` shift.

``CorrectionGrid`` is a :class:`~typing.NamedTuple`, which JAX treats as a
pytree automatically, so a grid can be passed straight into ``jax.jit``
and ``jax.vmap`` compiled functions.  Grids hold no Python-level mutable
state and may be shared freely between threads.
"""

from __future__ import annotations

from typing import NamedTuple

from jax import Array

from jgdjax.constants import DEG2AS, FIXED_PER_AS, FIXED_PER_DEG
from jgdjax.mesh import MeshCode


class GridNode(NamedTuple):
    """Correction parameters at one grid point.

    Attributes:
        mesh: Mesh whose south-west corner carries the parameters.
        shift_lat: Latitude correction [1e-5 arc-seconds].
        shift_lon: Longitude correction [1e-5 arc-seconds].
    """

    mesh: MeshCode
    shift_lat: int
    shift_lon: int

    def shift_as(self) -> tuple[float, float]:
        """Return the correction in arc-seconds."""
        return self.shift_lat / FIXED_PER_AS, self.shift_lon / FIXED_PER_AS

    def shift_degrees(self) -> tuple[float, float]:
        """Return the correction in degrees."""
        return self.shift_lat / FIXED_PER_DEG, self.shift_lon / FIXED_PER_DEG


class CorrectionGrid(NamedTuple):
    """A datum-pair parameter table for JIT-compatible lookups.

    Shifts are stored as exact fixed-point integers (1e-5 arc-second
    units) and only converted to floating point during interpolation, so
    chaining several grids does not accumulate rounding from storage.

    Attributes:
        keys: Strictly increasing packed mesh keys
            (see :func:`jgdjax.mesh.mesh_key`), int32, shape ``(N,)``.
        shift_lat: Latitude corrections [1e-5 as], int32, shape ``(N,)``.
        shift_lon: Longitude corrections [1e-5 as], int32, shape ``(N,)``.
    """

    keys: Array
    shift_lat: Array
    shift_lon: Array

    @property
    def size(self) -> int:
        """Number of grid nodes."""
        return int(self.keys.shape[0])


class CorrectionVector(NamedTuple):
    """Correction to add to a coordinate.

    Attributes:
        lat: Latitude shift [deg].
        lon: Longitude shift [deg].
    """

    lat: float
    lon: float

    def to_as(self) -> tuple[float, float]:
        """Return the shift in arc-seconds."""
        return self.lat * DEG2AS, self.lon * DEG2AS
