"""Chained datum transforms over correction grids.

Correction grids are only published for adjacent datum pairs:

- ``tky2jgd``: Tokyo -> JGD2000
- ``patchjgd``: JGD2000 -> JGD2011

so the datums form a three-node chain and Tokyo <-> JGD2011 always passes
through JGD2000.  A forward step adds the grid correction evaluated at the
input point.  An inverse step has to find the source point ``x`` whose
corrected position is the input ``y``, i.e. solve ``x + g(x) = y``.  The
grids are keyed by source-datum positions, so ``y - g(y)`` is only a first
guess; the fixed-point iteration

.. math::

    x_{k+1} = y - g(x_k), \\qquad x_0 = y

is run until both components move by less than the tolerance (1e-5
arc-second by default) or the iteration bound (10) is reached.  The
correction surfaces are smooth with gradients far below one, so the
iteration contracts quickly; failing to converge means the input is
pathological.

Two entry points are provided:

- :meth:`DatumTransformChain.transform`: checked scalar path raising
  :class:`~jgdjax.errors.TransformError` subclasses.
- :meth:`DatumTransformChain.transform_array`: JIT/vmap path over arrays
  using ``jax.lax.while_loop``; failures are reported as NaN.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Mapping

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from jgdjax.config import DEFAULT_MAX_ITERATIONS, get_inverse_tolerance
from jgdjax.constants import AS2DEG, DEG2AS
from jgdjax.coordinates import Coordinate
from jgdjax.datum._types import Datum, OutOfGridPolicy, TransformStep
from jgdjax.errors import (
    MissingGridError,
    NoIterativeConvergenceError,
    OutOfCoverageError,
    OutOfGridError,
)
from jgdjax.grid._lookup import _correction_core, correction_at
from jgdjax.grid._types import CorrectionGrid

logger = logging.getLogger(__name__)

_ORDER = (Datum.TOKYO, Datum.JGD2000, Datum.JGD2011)

# Published grid for each forward edge of the chain
_EDGES = {
    (Datum.TOKYO, Datum.JGD2000): "tky2jgd",
    (Datum.JGD2000, Datum.JGD2011): "patchjgd",
}


class DatumTransformChain:
    """Datum transforms between Tokyo, JGD2000 and JGD2011.

    The chain holds read-only references to its grids and no other state,
    so one instance can serve any number of threads.

    Args:
        tky2jgd: Tokyo -> JGD2000 grid.  Optional; steps that need a
            missing grid raise :class:`~jgdjax.errors.MissingGridError`.
        patchjgd: JGD2000 -> JGD2011 grid.  Optional.
        max_iterations: Iteration bound for inverse steps.
        tolerance_as: Convergence threshold for inverse steps
            [arc-seconds].  Defaults to
            :func:`jgdjax.config.get_inverse_tolerance`.
        out_of_grid: :class:`OutOfGridPolicy` for all grids, or a mapping
            from grid name to policy.  Grids missing from the mapping use
            ``RAISE``.

    Examples:
        ```python
        from jgdjax import Coordinate, Datum, DatumTransformChain
        from jgdjax.grid import load_grid_from_file

        chain = DatumTransformChain(
            tky2jgd=load_grid_from_file("TKY2JGD.par"),
            patchjgd=load_grid_from_file("touhokutaiheiyouoki2011.par"),
        )
        jgd2011 = chain.transform(Coordinate.tokyo(35.0, 139.0), Datum.TOKYO, Datum.JGD2011)
        ```
    """

    def __init__(
        self,
        tky2jgd: CorrectionGrid | None = None,
        patchjgd: CorrectionGrid | None = None,
        *,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        tolerance_as: float | None = None,
        out_of_grid: OutOfGridPolicy | Mapping[str, OutOfGridPolicy] = OutOfGridPolicy.RAISE,
    ):
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")
        if tolerance_as is not None and tolerance_as <= 0.0:
            raise ValueError(f"tolerance_as must be positive, got {tolerance_as}")

        self._grids = {"tky2jgd": tky2jgd, "patchjgd": patchjgd}
        self.max_iterations = max_iterations
        self.tolerance = (
            get_inverse_tolerance() if tolerance_as is None else tolerance_as * AS2DEG
        )
        if isinstance(out_of_grid, OutOfGridPolicy):
            self._policies = dict.fromkeys(self._grids, out_of_grid)
        else:
            unknown = set(out_of_grid) - set(self._grids)
            if unknown:
                raise ValueError(f"Unknown grid names in out_of_grid: {sorted(unknown)}")
            self._policies = {
                name: out_of_grid.get(name, OutOfGridPolicy.RAISE) for name in self._grids
            }

    def grid(self, name: str) -> CorrectionGrid | None:
        """Return the grid registered under *name*."""
        return self._grids[name]

    def policy(self, name: str) -> OutOfGridPolicy:
        """Return the out-of-grid policy for grid *name*."""
        return self._policies[name]

    def path(self, source: Datum, target: Datum) -> tuple[TransformStep, ...]:
        """Return the steps leading from *source* to *target*.

        Args:
            source: Starting datum.
            target: Destination datum.

        Returns:
            Tuple of steps; empty when ``source is target``.
        """
        i, j = _ORDER.index(source), _ORDER.index(target)
        steps = []
        if i < j:
            for a, b in zip(_ORDER[i:j], _ORDER[i + 1 : j + 1]):
                name = _EDGES[(a, b)]
                steps.append(TransformStep(a, b, name, +1, self._grids[name]))
        else:
            for a, b in zip(_ORDER[j + 1 : i + 1][::-1], _ORDER[j:i][::-1]):
                name = _EDGES[(b, a)]
                steps.append(TransformStep(a, b, name, -1, self._grids[name]))
        return tuple(steps)

    def transform(
        self, coordinate: Coordinate, source: Datum, target: Datum
    ) -> Coordinate:
        """Transform a coordinate from *source* to *target* datum.

        Args:
            coordinate: Input coordinate, tagged with *source*.
            source: Datum of the input.
            target: Datum of the output.

        Returns:
            New coordinate tagged with *target*.

        Raises:
            ValueError: If ``coordinate.datum`` is not *source*.
            OutOfCoverageError: If a step's grid does not cover the point.
            NoIterativeConvergenceError: If an inverse step does not converge.
            MissingGridError: If a needed grid was not supplied.
        """
        if coordinate.datum is not source:
            raise ValueError(
                f"Coordinate is in {coordinate.datum}, expected source datum {source}"
            )
        current = coordinate
        for step in self.path(source, target):
            current = self.apply_step(current, step)
        return current

    def to_datum(self, coordinate: Coordinate, target: Datum) -> Coordinate:
        """Transform *coordinate* from its own datum to *target*."""
        return self.transform(coordinate, coordinate.datum, target)

    def apply_step(self, coordinate: Coordinate, step: TransformStep) -> Coordinate:
        """Apply a single transform step.

        Raises:
            ValueError: If the coordinate is not in ``step.source``.
            OutOfCoverageError: If the grid does not cover the point.
            NoIterativeConvergenceError: If an inverse step does not converge.
            MissingGridError: If the step has no grid.
        """
        if coordinate.datum is not step.source:
            raise ValueError(
                f"Coordinate is in {coordinate.datum}, step {step} expects {step.source}"
            )
        if step.grid is None:
            raise MissingGridError(f"No '{step.grid_name}' grid loaded for {step}", step)

        lat, lon = coordinate.lat, coordinate.lon
        try:
            if step.is_inverse:
                lat, lon = self._inverse(step, lat, lon)
            else:
                shift = correction_at(step.grid, lat, lon)
                lat, lon = lat + shift.lat, lon + shift.lon
        except OutOfGridError as err:
            if self._policies[step.grid_name] is OutOfGridPolicy.RAISE:
                raise OutOfCoverageError(f"{step} failed: {err}", step) from err
            logger.debug("%s: outside grid, coordinate left unchanged", step)
            lat, lon = coordinate.lat, coordinate.lon

        return Coordinate(lat, lon, step.target)

    def _inverse(self, step: TransformStep, lat: float, lon: float) -> tuple[float, float]:
        x_lat, x_lon = lat, lon
        residual = float("inf")
        for _ in range(self.max_iterations):
            shift = correction_at(step.grid, x_lat, x_lon)
            new_lat, new_lon = lat - shift.lat, lon - shift.lon
            residual = max(abs(new_lat - x_lat), abs(new_lon - x_lon))
            x_lat, x_lon = new_lat, new_lon
            if residual < self.tolerance:
                return x_lat, x_lon

        raise NoIterativeConvergenceError(
            f"{step} did not converge within {self.max_iterations} iterations "
            f"(last update {residual * DEG2AS:.3e} arc-seconds)",
            step,
            iterations=self.max_iterations,
            residual_as=residual * DEG2AS,
        )

    def transform_array(
        self,
        lats: ArrayLike,
        lons: ArrayLike,
        source: Datum,
        target: Datum,
    ) -> tuple[Array, Array]:
        """Transform arrays of coordinates from *source* to *target*.

        Each step runs as one JIT-compiled ``vmap`` over the points.  Points
        outside coverage (with the ``RAISE`` policy) or whose inverse step
        does not converge come back as NaN and stay NaN through later steps.

        Args:
            lats: Latitudes [deg], shape ``(N,)``.
            lons: Longitudes [deg], shape ``(N,)``.
            source: Datum of the inputs.
            target: Datum of the outputs.

        Returns:
            Tuple ``(lats, lons)`` of float64 arrays in *target*.

        Raises:
            MissingGridError: If a needed grid was not supplied.
        """
        lats = jnp.atleast_1d(jnp.asarray(lats, dtype=jnp.float64))
        lons = jnp.atleast_1d(jnp.asarray(lons, dtype=jnp.float64))

        for step in self.path(source, target):
            if step.grid is None:
                raise MissingGridError(f"No '{step.grid_name}' grid loaded for {step}", step)
            identity = self._policies[step.grid_name] is OutOfGridPolicy.IDENTITY
            if step.is_inverse:
                lats, lons = _inverse_batch(
                    step.grid, lats, lons, self.tolerance, self.max_iterations, identity
                )
            else:
                lats, lons = _forward_batch(step.grid, lats, lons, identity)
        return lats, lons


def _shift_jax(grid: CorrectionGrid, lat: Array, lon: Array, identity: bool) -> Array:
    shift, found = _correction_core(grid, lat, lon)
    if identity:
        shift = jnp.where(jnp.all(found), shift, 0.0)
    return shift.astype(jnp.float64)


@functools.partial(jax.jit, static_argnames=("identity",))
def _forward_batch(
    grid: CorrectionGrid, lats: Array, lons: Array, identity: bool
) -> tuple[Array, Array]:
    def one(lat, lon):
        shift = _shift_jax(grid, lat, lon, identity)
        return lat + shift[0], lon + shift[1]

    return jax.vmap(one)(lats, lons)


@functools.partial(jax.jit, static_argnames=("max_iterations", "identity"))
def _inverse_batch(
    grid: CorrectionGrid,
    lats: Array,
    lons: Array,
    tolerance: float,
    max_iterations: int,
    identity: bool,
) -> tuple[Array, Array]:
    def one(lat, lon):
        # State: (x_lat, x_lon, residual, iteration_count, left_grid)
        def cond(state):
            _, _, residual, i, left_grid = state
            return (residual >= tolerance) & (i < max_iterations) & ~left_grid

        def body(state):
            x_lat, x_lon, _, i, _ = state
            shift, found = _correction_core(grid, x_lat, x_lon)
            shift = shift.astype(jnp.float64)
            new_lat = lat - shift[0]
            new_lon = lon - shift[1]
            residual = jnp.maximum(jnp.abs(new_lat - x_lat), jnp.abs(new_lon - x_lon))
            # NaN residual (outside grid) ends the loop as not converged
            residual = jnp.where(jnp.isnan(residual), -jnp.inf, residual)
            return new_lat, new_lon, residual, i + 1, ~jnp.all(found)

        init_state = (
            lat,
            lon,
            jnp.array(jnp.inf, dtype=jnp.float64),
            jnp.int32(0),
            jnp.array(False),
        )
        x_lat, x_lon, residual, _, left_grid = jax.lax.while_loop(cond, body, init_state)

        ok = (residual >= 0.0) & (residual < tolerance)
        x_lat = jnp.where(ok, x_lat, jnp.nan)
        x_lon = jnp.where(ok, x_lon, jnp.nan)
        if identity:
            # Any iterate outside the grid leaves the point unchanged
            x_lat = jnp.where(left_grid, lat, x_lat)
            x_lon = jnp.where(left_grid, lon, x_lon)
        return x_lat, x_lon

    return jax.vmap(one)(lats, lons)


def transform(
    chain: DatumTransformChain,
    coordinate: Coordinate,
    source: Datum,
    target: Datum,
) -> Coordinate:
    """Functional alias for :meth:`DatumTransformChain.transform`."""
    return chain.transform(coordinate, source, target)
