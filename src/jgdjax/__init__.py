"""
jgdjax converts coordinates between the Japanese datums (Tokyo, JGD2000, JGD2011) using GSI correction grids, implemented in JAX.
"""

from .config import set_dtype, get_dtype

from .constants import (
    DEG2AS,
    AS2DEG,
    FIXED_PER_AS,
    MESH3_LAT_AS,
    MESH3_LON_AS,
)

from .errors import (
    MalformedGridError,
    OutOfGridError,
    TransformError,
    OutOfCoverageError,
    NoIterativeConvergenceError,
    MissingGridError,
    DegreesRangeError,
)

from .mesh import (
    MeshCode,
    mesh_code_of,
    neighbors,
    cell_origin,
)

from .interpolation import interpolate

from .grid import (
    CorrectionGrid,
    CorrectionVector,
    GridNode,
    build_grid,
    correction_at,
    correction_at_array,
    load_grid_from_file,
    load_grid_by_name,
    uniform_grid,
)

from .datum import (
    Datum,
    DatumTransformChain,
    OutOfGridPolicy,
    TransformStep,
    transform,
)

from .coordinates import (
    Coordinate,
    Dms,
    LatLon,
)

__all__ = [
    # Config
    "set_dtype",
    "get_dtype",
    # Constants
    "DEG2AS",
    "AS2DEG",
    "FIXED_PER_AS",
    "MESH3_LAT_AS",
    "MESH3_LON_AS",
    # Errors
    "MalformedGridError",
    "OutOfGridError",
    "TransformError",
    "OutOfCoverageError",
    "NoIterativeConvergenceError",
    "MissingGridError",
    "DegreesRangeError",
    # Mesh
    "MeshCode",
    "mesh_code_of",
    "neighbors",
    "cell_origin",
    # Interpolation
    "interpolate",
    # Grid
    "CorrectionGrid",
    "CorrectionVector",
    "GridNode",
    "build_grid",
    "correction_at",
    "correction_at_array",
    "load_grid_from_file",
    "load_grid_by_name",
    "uniform_grid",
    # Datum
    "Datum",
    "DatumTransformChain",
    "OutOfGridPolicy",
    "TransformStep",
    "transform",
    # Coordinates
    "Coordinate",
    "Dms",
    "LatLon",
]
