"""Coordinate value types exchanged with the datum transforms.

- :class:`LatLon`: a latitude/longitude pair in degrees with element-wise
  arithmetic.
- :class:`Dms`: degrees, minutes, seconds.
- :class:`Coordinate`: a latitude/longitude pair tagged with its datum.

All types are immutable; transforms return new values.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from jgdjax.constants import DEG2AS
from jgdjax.datum._types import Datum
from jgdjax.errors import DegreesRangeError

# Seconds closer than this to 60 are float noise on a whole minute
_CARRY_AS = 1e-9


def _in_degrees_range(lat: float, lon: float) -> bool:
    return abs(lat) <= 90.0 and abs(lon) <= 180.0


@dataclass(frozen=True)
class Dms:
    """Degrees, minutes, seconds.

    For negative angles every component carries the sign, e.g.
    ``-1.5`` degrees is ``Dms(-1, -30, -0.0)``.

    Args:
        d: Degrees.
        m: Minutes.
        s: Seconds.

    Examples:
        ```python
        from jgdjax.coordinates import Dms
        Dms(35, 39, 29.1572).to_degrees()  # 35.658099...
        ```
    """

    d: int
    m: int = 0
    s: float = 0.0

    @classmethod
    def from_degrees(cls, degrees: float) -> Dms:
        """Split decimal degrees into degrees, minutes and seconds.

        Works in total arc-seconds so that values a hair below a whole
        minute carry into the minute instead of yielding 59.999... seconds.
        """
        sign = -1 if degrees < 0 else 1
        d, rest = divmod(abs(degrees) * DEG2AS, DEG2AS)
        m, s = divmod(rest, 60.0)
        if 60.0 - s < _CARRY_AS:
            s = 0.0
            m += 1
            if m == 60:
                m = 0
                d += 1
        return cls(sign * int(d), sign * int(m), sign * s)

    def to_degrees(self) -> float:
        """Convert to decimal degrees."""
        return self.d + self.m / 60.0 + self.s / DEG2AS


@dataclass(frozen=True)
class LatLon:
    """Latitude and longitude in degrees.

    Supports ``+`` and ``-`` with another :class:`LatLon` and ``*`` and
    ``/`` with a scalar.

    Examples:
        ```python
        from jgdjax.coordinates import LatLon
        LatLon(35.0, 135.0) + LatLon.from_secs(1.0, -1.0)
        ```
    """

    lat: float
    lon: float

    @classmethod
    def from_secs(cls, lat: float, lon: float) -> LatLon:
        """Construct from arc-seconds."""
        return cls(lat / DEG2AS, lon / DEG2AS)

    @classmethod
    def from_milli_secs(cls, lat: float, lon: float) -> LatLon:
        """Construct from milli-arc-seconds."""
        return cls.from_secs(lat / 1_000.0, lon / 1_000.0)

    @classmethod
    def from_micro_secs(cls, lat: float, lon: float) -> LatLon:
        """Construct from micro-arc-seconds."""
        return cls.from_milli_secs(lat / 1_000.0, lon / 1_000.0)

    @classmethod
    def from_dms(cls, lat: Dms, lon: Dms) -> LatLon:
        """Construct from a pair of :class:`Dms`."""
        return cls(lat.to_degrees(), lon.to_degrees())

    def to_dms(self) -> tuple[Dms, Dms]:
        """Convert to ``(lat, lon)`` :class:`Dms`."""
        return Dms.from_degrees(self.lat), Dms.from_degrees(self.lon)

    def map(self, f: Callable[[float], float]) -> LatLon:
        """Apply *f* to both components."""
        return LatLon(f(self.lat), f(self.lon))

    def validate_degrees(self) -> LatLon:
        """Check that the pair is within [-90, 90] x [-180, 180].

        Returns:
            self, for chaining.

        Raises:
            DegreesRangeError: If out of range.  ``possibly_reversed`` is set
                when swapping the components would make the pair valid.
        """
        if _in_degrees_range(self.lat, self.lon):
            return self
        raise DegreesRangeError(possibly_reversed=_in_degrees_range(self.lon, self.lat))

    def __iter__(self):
        yield self.lat
        yield self.lon

    def __add__(self, other: LatLon) -> LatLon:
        return LatLon(self.lat + other.lat, self.lon + other.lon)

    def __sub__(self, other: LatLon) -> LatLon:
        return LatLon(self.lat - other.lat, self.lon - other.lon)

    def __mul__(self, k: float) -> LatLon:
        return LatLon(self.lat * k, self.lon * k)

    def __truediv__(self, k: float) -> LatLon:
        return LatLon(self.lat / k, self.lon / k)


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in a given datum.

    Args:
        lat: Latitude [deg].
        lon: Longitude [deg].
        datum: The datum the coordinate is expressed in.

    Examples:
        ```python
        from jgdjax.coordinates import Coordinate
        c = Coordinate.tokyo(35.0, 135.0)
        c.datum  # Datum.TOKYO
        ```
    """

    lat: float
    lon: float
    datum: Datum

    @classmethod
    def _checked(cls, lat: float, lon: float, datum: Datum) -> Coordinate:
        LatLon(lat, lon).validate_degrees()
        return cls(float(lat), float(lon), datum)

    @classmethod
    def tokyo(cls, lat: float, lon: float) -> Coordinate:
        """Construct a Tokyo Datum coordinate, validating the degree range."""
        return cls._checked(lat, lon, Datum.TOKYO)

    @classmethod
    def jgd2000(cls, lat: float, lon: float) -> Coordinate:
        """Construct a JGD2000 coordinate, validating the degree range."""
        return cls._checked(lat, lon, Datum.JGD2000)

    @classmethod
    def jgd2011(cls, lat: float, lon: float) -> Coordinate:
        """Construct a JGD2011 coordinate, validating the degree range."""
        return cls._checked(lat, lon, Datum.JGD2011)

    @property
    def latlon(self) -> LatLon:
        return LatLon(self.lat, self.lon)

    def with_datum(self, datum: Datum) -> Coordinate:
        """Return the same latitude/longitude relabelled as *datum*.

        No correction is applied; use a transform chain to convert.
        """
        return replace(self, datum=datum)

    def to_dms(self) -> tuple[Dms, Dms]:
        return self.latlon.to_dms()
