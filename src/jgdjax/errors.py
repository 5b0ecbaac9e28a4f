"""Exception types raised by grid construction, lookup and datum transforms.

All exceptions derive from builtin exception classes so that callers who
only care about broad categories can keep catching ``ValueError``,
``LookupError`` or ``RuntimeError``:

- :class:`MalformedGridError` (``ValueError``): a parameter record or file
  is structurally invalid.  No partial grid is produced.
- :class:`OutOfGridError` (``LookupError``): a query point's mesh cell is
  missing one or more corner nodes.
- :class:`TransformError` (``RuntimeError``): base class for failures of a
  chained datum transform, with :class:`OutOfCoverageError`,
  :class:`NoIterativeConvergenceError` and :class:`MissingGridError`.
- :class:`DegreesRangeError` (``ValueError``): a coordinate is outside the
  valid degree range.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jgdjax.datum._types import TransformStep
    from jgdjax.mesh import MeshCode


class MalformedGridError(ValueError):
    """A correction grid could not be built from the supplied records."""


class OutOfGridError(LookupError):
    """The mesh cell containing a point lacks a corner node.

    Attributes:
        mesh: The missing corner's mesh code.
        corner: Which corner is missing: ``"sw"``, ``"se"``, ``"nw"``
            or ``"ne"``.
        lat: Query latitude [deg].
        lon: Query longitude [deg].
    """

    def __init__(self, mesh: MeshCode, corner: str, lat: float, lon: float):
        self.mesh = mesh
        self.corner = corner
        self.lat = lat
        self.lon = lon
        super().__init__(
            f"no correction parameter at {corner} corner {mesh} "
            f"for point ({lat}, {lon})"
        )


class TransformError(RuntimeError):
    """Base class for datum transform failures."""

    def __init__(self, message: str, step: TransformStep | None = None):
        self.step = step
        super().__init__(message)


class OutOfCoverageError(TransformError):
    """A transform step failed because the point is outside its grid.

    The originating :class:`OutOfGridError` is available as ``__cause__``.
    """


class NoIterativeConvergenceError(TransformError):
    """An inverse transform step did not converge.

    Attributes:
        iterations: Number of iterations performed.
        residual_as: Last update size [arc-seconds].
    """

    def __init__(
        self,
        message: str,
        step: TransformStep | None = None,
        iterations: int = 0,
        residual_as: float = float("nan"),
    ):
        self.iterations = iterations
        self.residual_as = residual_as
        super().__init__(message, step)


class MissingGridError(TransformError):
    """A transform step needs a correction grid that was not supplied."""


class DegreesRangeError(ValueError):
    """Latitude or longitude outside [-90, 90] x [-180, 180].

    Attributes:
        possibly_reversed: ``True`` if swapping latitude and longitude would
            give a valid coordinate.
    """

    def __init__(self, possibly_reversed: bool = False):
        self.possibly_reversed = possibly_reversed
        message = "degrees out of range"
        if possibly_reversed:
            message += "; may be lat and lon reversed?"
        super().__init__(message)
