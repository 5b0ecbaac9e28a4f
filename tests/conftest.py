import jax.numpy as jnp
import pytest

from jgdjax.config import set_dtype
from jgdjax.constants import FIXED_PER_AS, FIXED_PER_DEG
from jgdjax.grid import CorrectionGrid, build_grid
from jgdjax.mesh import MeshCode

# Synthetic grids cover latitude 35-36 and longitude 139-140 (mesh rows and
# columns below, plus one extra row/column of corner nodes).
LAT0 = 4200  # 35.0 deg * 120
LON0 = 11120  # 139.0 deg * 80
N_ROWS = 122
N_COLS = 82


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    Tests that switch to float32 (test_config.py) must not leak the change
    into the transform tests.
    """
    set_dtype(jnp.float64)


class LinearField:
    """A correction field linear in mesh row/column, in fixed-point units.

    Bilinear interpolation reproduces a linear field exactly, so expected
    corrections at arbitrary points can be computed in closed form.
    """

    def __init__(self, base_lat, base_lon, lat_per_row, lat_per_col, lon_per_row, lon_per_col):
        self.base_lat = base_lat
        self.base_lon = base_lon
        self.lat_per_row = lat_per_row
        self.lat_per_col = lat_per_col
        self.lon_per_row = lon_per_row
        self.lon_per_col = lon_per_col

    def fixed_at(self, row: float, col: float) -> tuple[float, float]:
        drow, dcol = row - LAT0, col - LON0
        return (
            self.base_lat + self.lat_per_row * drow + self.lat_per_col * dcol,
            self.base_lon + self.lon_per_row * drow + self.lon_per_col * dcol,
        )

    def shift_degrees(self, lat: float, lon: float) -> tuple[float, float]:
        """Expected correction [deg] at a point."""
        slat, slon = self.fixed_at(lat * 120.0, lon * 80.0)
        return slat / FIXED_PER_DEG, slon / FIXED_PER_DEG

    def grid(self) -> CorrectionGrid:
        records = []
        for row in range(LAT0, LAT0 + N_ROWS):
            for col in range(LON0, LON0 + N_COLS):
                slat, slon = self.fixed_at(row, col)
                records.append((MeshCode(row, col), slat / FIXED_PER_AS, slon / FIXED_PER_AS))
        return build_grid(records)


# Roughly TKY2JGD around Tokyo: +11.5" latitude, -11.9" longitude
TKY2JGD_FIELD = LinearField(1_150_000, -1_190_000, 25, -12, 8, 30)

# Roughly PatchJGD in Kanto: sub-arc-second shifts
PATCHJGD_FIELD = LinearField(-12_000, 9_000, 40, 15, -22, 35)


@pytest.fixture(scope="session")
def tky2jgd_field() -> LinearField:
    return TKY2JGD_FIELD


@pytest.fixture(scope="session")
def patchjgd_field() -> LinearField:
    return PATCHJGD_FIELD


@pytest.fixture(scope="session")
def tky2jgd_grid() -> CorrectionGrid:
    return TKY2JGD_FIELD.grid()


@pytest.fixture(scope="session")
def patchjgd_grid() -> CorrectionGrid:
    return PATCHJGD_FIELD.grid()
