# /// script
# requires-python = ">=3.10"
# dependencies = ["typer>=0.9.0", "jgdjax"]
#
# [tool.uv.sources]
# jgdjax = { path = ".." }
# ///
"""Convert a coordinate between Japanese datums.

Loads the GSI parameter files from ``$JGDJAX_DATA`` (or ``--data-dir``),
transforms one coordinate and prints the result in degrees and DMS.

Requires jgdjax to be installed (``uv pip install -e .`` from the repo root)
and the unzipped ``TKY2JGD.par`` / ``touhokutaiheiyouoki2011.par`` files.

Usage:
    uv run examples/convert.py LAT LON [OPTIONS]

Examples:
    # Tokyo Datum -> JGD2011
    uv run examples/convert.py 36.46089 140.58503 --source tokyo --target jgd2011

    # JGD2011 -> Tokyo Datum (inverse, iterative)
    uv run examples/convert.py 36.46405 140.58169 --source jgd2011 --target tokyo

    # Leave points without PatchJGD parameters unchanged (GSI convention)
    uv run examples/convert.py 34.70 135.50 --source jgd2000 --target jgd2011 --patch-identity
"""

import enum
import sys
import time
from pathlib import Path
from typing import Annotated

import typer

from jgdjax import Coordinate, Datum, DatumTransformChain, OutOfGridPolicy, TransformError
from jgdjax.grid import load_grid_by_name


class DatumName(str, enum.Enum):
    tokyo = "tokyo"
    jgd2000 = "jgd2000"
    jgd2011 = "jgd2011"


def main(
    lat: Annotated[float, typer.Argument(help="Latitude in degrees")],
    lon: Annotated[float, typer.Argument(help="Longitude in degrees")],
    source: Annotated[DatumName, typer.Option(help="Datum of the input")] = DatumName.tokyo,
    target: Annotated[DatumName, typer.Option(help="Datum of the output")] = DatumName.jgd2011,
    data_dir: Annotated[
        Path | None,
        typer.Option(help="Directory holding the .par files (or set JGDJAX_DATA)"),
    ] = None,
    patch_identity: Annotated[
        bool, typer.Option(help="Leave points outside the PatchJGD grid unchanged")
    ] = False,
) -> None:
    """Transform one coordinate between Tokyo, JGD2000 and JGD2011."""
    src = Datum(source.value)
    dst = Datum(target.value)

    path_chain = DatumTransformChain()
    needed = {step.grid_name for step in path_chain.path(src, dst)}

    grids = {}
    for name in sorted(needed):
        t0 = time.perf_counter()
        grids[name] = load_grid_by_name(name, data_dir)
        print(f"Loaded {name}: {grids[name].size} nodes in {time.perf_counter() - t0:.1f}s")

    policy = {"patchjgd": OutOfGridPolicy.IDENTITY} if patch_identity else {}
    chain = DatumTransformChain(**grids, out_of_grid=policy)

    coordinate = Coordinate(lat, lon, src)
    coordinate.latlon.validate_degrees()
    try:
        result = chain.transform(coordinate, src, dst)
    except TransformError as err:
        print(f"ERROR: {err}")
        sys.exit(1)

    dms_lat, dms_lon = result.to_dms()
    print(f"{src} ({lat:.9f}, {lon:.9f}) -> {dst} ({result.lat:.9f}, {result.lon:.9f})")
    print(
        f"  DMS: {dms_lat.d}°{dms_lat.m:02d}'{dms_lat.s:08.5f}\" "
        f"{dms_lon.d}°{dms_lon.m:02d}'{dms_lon.s:08.5f}\""
    )


if __name__ == "__main__":
    typer.run(main)
