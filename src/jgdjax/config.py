"""Module-wide floating-point precision configuration.

Provides ``set_dtype`` and ``get_dtype`` to control the float dtype used
for correction arithmetic throughout jgdjax.  The default is
``jnp.float64``: corrections are fractions of a millimetre on coordinates
around 35 degrees, which float32 cannot resolve.  Importing this module
therefore enables JAX's 64-bit mode (``jax_enable_x64``).

Call ``set_dtype`` **before** any JIT compilation, just like JAX's own
``jax.config.update("jax_enable_x64", True)``.  Under JIT, ``get_dtype()``
runs during tracing and its result is baked into the compiled program.

Mesh keys and fixed-point shifts are always ``jnp.int32`` regardless of
this setting.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

from jgdjax.constants import AS2DEG

jax.config.update("jax_enable_x64", True)

_VALID_DTYPES = (jnp.float32, jnp.float64)

_dtype = jnp.float64

DEFAULT_MAX_ITERATIONS: int = 10
"""Iteration bound for inverse (destination-to-source) grid transforms."""

DEFAULT_TOLERANCE_AS: float = 1.0e-5
"""Convergence threshold for inverse transforms [arc-seconds]."""


def set_dtype(dtype) -> None:
    """Set the module-wide float dtype for jgdjax.

    Must be called **before** any ``jax.jit`` compilation.  In eager mode
    the change takes effect immediately.

    Args:
        dtype: ``jnp.float32`` or ``jnp.float64``.

    Raises:
        ValueError: If *dtype* is not a supported float type.
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: jnp.float32, jnp.float64"
        )
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = dtype


def get_dtype():
    """Return the current module-wide float dtype.

    Returns:
        The active float dtype (default ``jnp.float64``).
    """
    return _dtype


def get_inverse_tolerance() -> float:
    """Return the dtype-adaptive convergence tolerance for inverse transforms.

    - ``float64``:  1e-5 arc-second
    - ``float32``:  0.05 arc-second (the float32 resolution near 35 degrees)

    Returns:
        float: Tolerance in degrees.
    """
    if _dtype == jnp.float64:
        return DEFAULT_TOLERANCE_AS * AS2DEG
    return 0.05 * AS2DEG
