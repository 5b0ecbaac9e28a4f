"""Datum and transform step definitions.

- :class:`Datum`: the closed set of supported Japanese datums.
- :class:`OutOfGridPolicy`: what a transform step does for points outside
  its correction grid.
- :class:`TransformStep`: one hop between adjacent datums.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from jgdjax.grid._types import CorrectionGrid


class Datum(enum.Enum):
    """Supported geodetic datums, in chain order.

    Attributes:
        TOKYO: Tokyo Datum, Bessel ellipsoid (EPSG:4301).
        JGD2000: Japanese Geodetic Datum 2000 (EPSG:4612).
        JGD2011: Japanese Geodetic Datum 2011 (EPSG:6668).
    """

    TOKYO = "tokyo"
    JGD2000 = "jgd2000"
    JGD2011 = "jgd2011"

    @property
    def epsg(self) -> int:
        """EPSG code of the geographic 2D CRS."""
        return _EPSG[self]

    def __str__(self) -> str:
        return _DISPLAY[self]


_EPSG = {
    Datum.TOKYO: 4301,
    Datum.JGD2000: 4612,
    Datum.JGD2011: 6668,
}

_DISPLAY = {
    Datum.TOKYO: "Tokyo",
    Datum.JGD2000: "JGD2000",
    Datum.JGD2011: "JGD2011",
}


class OutOfGridPolicy(enum.Enum):
    """Behaviour of a transform step outside its correction grid.

    Resolved at trace time in the array path, like any Python-level option.

    Attributes:
        RAISE: Fail with :class:`~jgdjax.errors.OutOfCoverageError`
            (NaN in the array path).
        IDENTITY: Leave the point unchanged.  This is the GSI PatchJGD
            convention for areas without published parameters and must be
            chosen explicitly.
    """

    RAISE = "raise"
    IDENTITY = "identity"


@dataclass(frozen=True)
class TransformStep:
    """One hop between adjacent datums.

    Args:
        source: Datum of the input coordinate.
        target: Datum of the output coordinate.
        grid_name: Name of the parameter grid (``"tky2jgd"`` or
            ``"patchjgd"``).
        direction: ``+1`` adds the grid correction (the grid's published
            direction); ``-1`` removes it by fixed-point iteration.
        grid: The correction grid, or ``None`` if it was not supplied.
    """

    source: Datum
    target: Datum
    grid_name: str
    direction: int
    grid: CorrectionGrid | None = field(default=None, compare=False, repr=False)

    @property
    def is_inverse(self) -> bool:
        return self.direction < 0

    def __str__(self) -> str:
        suffix = " (inverse)" if self.is_inverse else ""
        return f"{self.source} -> {self.target} via {self.grid_name}{suffix}"
