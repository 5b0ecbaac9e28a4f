"""Parsers for GSI correction parameter (``.par``) files.

Supports the line-oriented format of ``TKY2JGD.par`` and the PatchJGD
files (e.g. ``touhokutaiheiyouoki2011.par``)::

    JGD2000 TKY2JGD Ver.2.1.2
    MeshCode   dB(sec)   dL(sec)
    46303582  12.79799  -8.13354
    ...

Free-text header lines precede a column header starting with
``MeshCode``.  Each body line holds an 8-digit mesh code followed by the
latitude and longitude corrections in arc-seconds; further columns (such
as the ellipsoidal height correction of PatchJGD height files) are
ignored.  Files use CRLF line endings and may contain Shift_JIS text in the
free-text header, which is not interpreted.
"""

from __future__ import annotations

from pathlib import Path

from jgdjax.errors import MalformedGridError

_HEADER_PREFIX = "MeshCode"


def parse_par_line(line: str) -> tuple[int, str, str] | None:
    """Parse a single body line of a ``.par`` file.

    Corrections are returned as strings so that the grid builder can
    convert them to fixed point without a float round trip.

    Args:
        line: One line of the file body.

    Returns:
        ``(mesh_code, shift_lat, shift_lon)``, or ``None`` for a blank line.

    Raises:
        MalformedGridError: If the line has fewer than three fields or a
            non-numeric mesh code.
    """
    fields = line.split()
    if not fields:
        return None
    if len(fields) < 3:
        raise MalformedGridError(f"expected 3 fields, got {len(fields)}: {line!r}")

    mesh = fields[0]
    if not (mesh.isascii() and mesh.isdigit()):
        raise MalformedGridError(f"non-numeric mesh code {mesh!r}")
    return int(mesh), fields[1], fields[2]


def parse_par_file(filepath: str | Path) -> list[tuple[int, str, str]]:
    """Parse an entire ``.par`` file.

    Args:
        filepath: Path to the parameter file.

    Returns:
        List of ``(mesh_code, shift_lat, shift_lon)`` records in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        MalformedGridError: If the ``MeshCode`` header is missing or a body
            line cannot be parsed.  The message carries the line number.
    """
    records: list[tuple[int, str, str]] = []
    in_body = False

    with open(filepath, encoding="ascii", errors="replace") as f:
        for lineno, line in enumerate(f, start=1):
            if not in_body:
                in_body = line.lstrip().startswith(_HEADER_PREFIX)
                continue
            try:
                record = parse_par_line(line)
            except MalformedGridError as err:
                raise MalformedGridError(f"{filepath}:{lineno}: {err}") from err
            if record is not None:
                records.append(record)

    if not in_body:
        raise MalformedGridError(f"No '{_HEADER_PREFIX}' header found in {filepath}")

    return records
