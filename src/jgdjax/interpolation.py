"""Bilinear interpolation over a unit cell.

Pure JAX arithmetic, compatible with ``jax.jit``, ``jax.vmap`` and
``jax.grad``.  No bounds checking is performed: fractions outside [0, 1]
extrapolate linearly.  Callers (the correction grid) clamp fractions
before calling.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike


def lerp(a: ArrayLike, b: ArrayLike, t: ArrayLike) -> Array:
    """Linear blend ``a + (b - a) * t``."""
    a = jnp.asarray(a)
    return a + (jnp.asarray(b) - a) * jnp.asarray(t)


def interpolate(
    v00: ArrayLike,
    v10: ArrayLike,
    v01: ArrayLike,
    v11: ArrayLike,
    fx: ArrayLike,
    fy: ArrayLike,
) -> Array:
    """Bilinearly interpolate four corner values.

    Corner naming: the first index is east/west (0 = west), the second is
    north/south (0 = south).  The blend runs along x first, then y:

    .. math::

        v = \\mathrm{lerp}(\\mathrm{lerp}(v_{00}, v_{10}, f_x),
                           \\mathrm{lerp}(v_{01}, v_{11}, f_x), f_y)

    Args:
        v00: South-west value.
        v10: South-east value.
        v01: North-west value.
        v11: North-east value.
        fx: Eastward fraction, nominally in [0, 1).
        fy: Northward fraction, nominally in [0, 1).

    Returns:
        Interpolated value(s), broadcast over the inputs.

    Examples:
        ```python
        from jgdjax.interpolation import interpolate
        float(interpolate(0.0, 10.0, 0.0, 10.0, 0.5, 0.5))  # 5.0
        ```
    """
    return lerp(lerp(v00, v10, fx), lerp(v01, v11, fx), fy)
