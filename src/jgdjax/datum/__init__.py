"""Datum transforms between Tokyo Datum, JGD2000 and JGD2011.

Typical usage::

    from jgdjax.coordinates import Coordinate
    from jgdjax.datum import Datum, DatumTransformChain
    from jgdjax.grid import load_grid_by_name

    chain = DatumTransformChain(tky2jgd=load_grid_by_name("tky2jgd"))
    jgd2000 = chain.transform(Coordinate.tokyo(35.0, 139.0), Datum.TOKYO, Datum.JGD2000)
"""

from jgdjax.datum._types import Datum, OutOfGridPolicy, TransformStep
from jgdjax.datum._chain import DatumTransformChain, transform

__all__ = [
    "Datum",
    "DatumTransformChain",
    "OutOfGridPolicy",
    "TransformStep",
    "transform",
]
