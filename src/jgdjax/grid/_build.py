"""Construction of :class:`CorrectionGrid` instances from parameter records.

A record is ``(mesh_code, shift_lat, shift_lon)``:

- ``mesh_code``: an 8-digit official mesh code (``int`` or digit string)
  or a :class:`~jgdjax.mesh.MeshCode`.
- ``shift_lat`` / ``shift_lon``: corrections in arc-seconds as ``str``,
  ``int``, ``float`` or :class:`~decimal.Decimal`.  Strings and decimals
  are converted exactly and may carry at most five decimal places, the
  precision of GSI parameter files.

Records may arrive in any order.  When the same mesh appears twice the last
record wins, unless ``strict=True`` is passed.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation

import jax.numpy as jnp

from jgdjax.constants import FIXED_PER_AS
from jgdjax.errors import MalformedGridError
from jgdjax.grid._types import CorrectionGrid
from jgdjax.mesh import _LAT_OFFSET, _LON_OFFSET, MeshCode, mesh_key

logger = logging.getLogger(__name__)

_INT32_MAX = 2**31 - 1
_MAX_DECIMALS = 5


def _parse_mesh(value, index: int) -> MeshCode:
    if isinstance(value, MeshCode):
        if abs(value.lat) > _LAT_OFFSET or abs(value.lon) > _LON_OFFSET:
            raise MalformedGridError(f"record {index}: mesh {value} out of range")
        return value
    if isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.isdigit()):
            raise MalformedGridError(f"record {index}: non-numeric mesh code {value!r}")
        value = int(text)
    try:
        return MeshCode.from_code(value)
    except ValueError as err:
        raise MalformedGridError(f"record {index}: {err}") from err


def to_fixed_as(value, index: int = 0) -> int:
    """Convert an arc-second value to fixed-point 1e-5 arc-second units.

    Args:
        value: Arc-seconds as ``str``, ``int``, ``float`` or ``Decimal``.
        index: Record number, used in error messages.

    Returns:
        int: The value in 1e-5 arc-seconds.

    Raises:
        MalformedGridError: If *value* is not a finite number, has more
            than five decimal places, or does not fit in int32.
    """
    if isinstance(value, bool):
        raise MalformedGridError(f"record {index}: boolean is not a correction value")

    if isinstance(value, int):
        fixed = value * FIXED_PER_AS
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise MalformedGridError(f"record {index}: non-finite correction {value}")
        fixed = round(value * FIXED_PER_AS)
    elif isinstance(value, (str, Decimal)):
        try:
            number = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation as err:
            raise MalformedGridError(
                f"record {index}: non-numeric correction {value!r}"
            ) from err
        if not number.is_finite():
            raise MalformedGridError(f"record {index}: non-finite correction {value!r}")
        if number.as_tuple().exponent < -_MAX_DECIMALS:
            raise MalformedGridError(
                f"record {index}: {value!r} has more than {_MAX_DECIMALS} decimals"
            )
        fixed = int(number * FIXED_PER_AS)
    else:
        raise MalformedGridError(
            f"record {index}: unsupported correction type {type(value).__name__}"
        )

    if abs(fixed) > _INT32_MAX:
        raise MalformedGridError(f"record {index}: correction {value!r} too large")
    return fixed


def build_grid(records: Iterable, *, strict: bool = False) -> CorrectionGrid:
    """Build a correction grid from parameter records.

    Args:
        records: Iterable of ``(mesh_code, shift_lat, shift_lon)``.
        strict: If ``True``, reject duplicate mesh codes instead of letting
            the last record win.

    Returns:
        CorrectionGrid sorted by mesh.

    Raises:
        MalformedGridError: If *records* is empty or any record is
            structurally invalid.  No partial grid is returned.

    Examples:
        ```python
        from jgdjax.grid import build_grid, correction_at
        grid = build_grid([
            (53394500, "11.49669", "-11.88074"),
            (53394501, "11.49587", "-11.88257"),
            (53394510, "11.49833", "-11.87900"),
            (53394511, "11.49750", "-11.88080"),
        ])
        shift = correction_at(grid, 35.67, 139.63)
        ```
    """
    nodes: dict[int, tuple[int, int]] = {}
    duplicates = 0

    for index, record in enumerate(records):
        try:
            mesh_code, shift_lat, shift_lon = record
        except (TypeError, ValueError) as err:
            raise MalformedGridError(
                f"record {index}: expected (mesh_code, shift_lat, shift_lon), "
                f"got {record!r}"
            ) from err

        mesh = _parse_mesh(mesh_code, index)
        key = mesh_key(mesh)
        if key in nodes:
            if strict:
                raise MalformedGridError(f"record {index}: duplicate mesh {mesh}")
            duplicates += 1
        nodes[key] = (to_fixed_as(shift_lat, index), to_fixed_as(shift_lon, index))

    if not nodes:
        raise MalformedGridError("no grid records supplied")

    if duplicates:
        logger.warning(
            "%d duplicate mesh codes overwritten (last record wins)", duplicates
        )

    keys = sorted(nodes)
    return CorrectionGrid(
        keys=jnp.array(keys, dtype=jnp.int32),
        shift_lat=jnp.array([nodes[k][0] for k in keys], dtype=jnp.int32),
        shift_lon=jnp.array([nodes[k][1] for k in keys], dtype=jnp.int32),
    )
