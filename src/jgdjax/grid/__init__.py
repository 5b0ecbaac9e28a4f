"""Datum correction grids with JAX-compatible lookups.

Stores a GSI parameter table as sorted JAX arrays and interpolates the
correction at any point bilinearly from the four nodes of its mesh cell.
The array core works inside ``jax.jit`` and ``jax.vmap``; the checked
scalar entry point raises :class:`~jgdjax.errors.OutOfGridError` outside
the surveyed area.

Typical usage::

    from jgdjax.grid import load_grid_from_file, correction_at
    grid = load_grid_from_file("TKY2JGD.par")
    shift = correction_at(grid, 35.0, 135.0)
"""

from jgdjax.grid._build import build_grid, to_fixed_as
from jgdjax.grid._lookup import (
    CORNERS,
    correction_at,
    correction_at_array,
    correction_at_jax,
    grid_bounds,
    grid_nodes,
    node_at,
)
from jgdjax.grid._parsers import parse_par_file, parse_par_line
from jgdjax.grid._providers import load_grid_by_name, load_grid_from_file, uniform_grid
from jgdjax.grid._types import CorrectionGrid, CorrectionVector, GridNode

__all__ = [
    "CORNERS",
    "CorrectionGrid",
    "CorrectionVector",
    "GridNode",
    "build_grid",
    "correction_at",
    "correction_at_array",
    "correction_at_jax",
    "grid_bounds",
    "grid_nodes",
    "load_grid_by_name",
    "load_grid_from_file",
    "node_at",
    "parse_par_file",
    "parse_par_line",
    "to_fixed_as",
    "uniform_grid",
]
