"""Tests for .par file parsing and grid loading."""

from __future__ import annotations

import logging

import pytest

from jgdjax.errors import MalformedGridError
from jgdjax.grid import (
    correction_at,
    load_grid_by_name,
    load_grid_from_file,
    node_at,
    parse_par_file,
    parse_par_line,
)
from jgdjax.mesh import MeshCode

TKY2JGD_HEADER = "JGD2000 TKY2JGD Ver.2.1.2\r\nMeshCode   dB(sec)   dL(sec)\r\n"

TKY2JGD_BODY = (
    "53394500  11.49669 -11.88074\r\n"
    "53394501  11.49587 -11.88257\r\n"
    "53394510  11.49833 -11.87900\r\n"
    "53394511  11.49750 -11.88080\r\n"
)

PATCHJGD_TEXT = (
    "JGD2000 to JGD2011 (touhokutaiheiyouoki2011) Ver.4.0.0\r\n"
    "MeshCode   dB(sec)   dL(sec)   dH(m)\r\n"
    "57412300  -0.05813   0.17478  -0.0810\r\n"
    "57412301  -0.05822   0.17498  -0.0810\r\n"
)


def _write(path, text: str):
    path.write_bytes(text.encode("ascii"))
    return path


# ---------------------------------------------------------------------------
# Line parser
# ---------------------------------------------------------------------------


class TestParseParLine:
    def test_standard_line(self):
        assert parse_par_line("46303582  12.79799  -8.13354\r\n") == (46303582, "12.79799", "-8.13354")

    def test_extra_columns_ignored(self):
        assert parse_par_line("57412300  -0.05813   0.17478  -0.0810") == (57412300, "-0.05813", "0.17478")

    def test_blank_line(self):
        assert parse_par_line("\r\n") is None
        assert parse_par_line("   ") is None

    def test_too_few_fields(self):
        with pytest.raises(MalformedGridError, match="expected 3 fields, got 2"):
            parse_par_line("46303582  12.79799")

    def test_non_numeric_mesh(self):
        with pytest.raises(MalformedGridError, match="non-numeric mesh code"):
            parse_par_line("4630358A  12.79799  -8.13354")

    def test_leaves_values_unparsed(self):
        # Value validation happens in build_grid
        assert parse_par_line("46303582 abc def") == (46303582, "abc", "def")


# ---------------------------------------------------------------------------
# File parser
# ---------------------------------------------------------------------------


class TestParseParFile:
    def test_crlf_file(self, tmp_path):
        path = _write(tmp_path / "TKY2JGD.par", TKY2JGD_HEADER + TKY2JGD_BODY)
        records = parse_par_file(path)
        assert len(records) == 4
        assert records[0] == (53394500, "11.49669", "-11.88074")
        assert records[-1] == (53394511, "11.49750", "-11.88080")

    def test_lf_file_and_blank_lines(self, tmp_path):
        text = (TKY2JGD_HEADER + TKY2JGD_BODY).replace("\r\n", "\n") + "\n\n"
        path = _write(tmp_path / "lf.par", text)
        assert len(parse_par_file(path)) == 4

    def test_multiple_free_text_lines(self, tmp_path):
        text = "line one\r\nline two\r\n" + TKY2JGD_HEADER + TKY2JGD_BODY
        path = _write(tmp_path / "multi.par", text)
        assert len(parse_par_file(path)) == 4

    def test_non_ascii_header_tolerated(self, tmp_path):
        path = tmp_path / "sjis.par"
        path.write_bytes("東北地方太平洋沖地震\r\n".encode("shift_jis") + (TKY2JGD_HEADER + TKY2JGD_BODY).encode("ascii"))
        assert len(parse_par_file(path)) == 4

    def test_missing_header(self, tmp_path):
        path = _write(tmp_path / "noheader.par", TKY2JGD_BODY)
        with pytest.raises(MalformedGridError, match="No 'MeshCode' header"):
            parse_par_file(path)

    def test_bad_line_reports_line_number(self, tmp_path):
        text = TKY2JGD_HEADER + TKY2JGD_BODY + "53394520  11.49\r\n"
        path = _write(tmp_path / "bad.par", text)
        with pytest.raises(MalformedGridError, match=r"bad\.par:7"):
            parse_par_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_par_file(tmp_path / "missing.par")


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------


class TestLoadGridFromFile:
    def test_load(self, tmp_path):
        path = _write(tmp_path / "TKY2JGD.par", TKY2JGD_HEADER + TKY2JGD_BODY)
        grid = load_grid_from_file(path)
        assert grid.size == 4
        node = node_at(grid, MeshCode.from_code(53394510))
        assert node.shift_as() == pytest.approx((11.49833, -11.87900))

    def test_load_str_path(self, tmp_path):
        path = _write(tmp_path / "TKY2JGD.par", TKY2JGD_HEADER + TKY2JGD_BODY)
        assert load_grid_from_file(str(path)).size == 4

    def test_load_patchjgd_with_height_column(self, tmp_path):
        path = _write(tmp_path / "patch.par", PATCHJGD_TEXT)
        grid = load_grid_from_file(path)
        assert grid.size == 2
        assert node_at(grid, MeshCode.from_code(57412301)).shift_as() == pytest.approx((-0.05822, 0.17498))

    def test_unsorted_file(self, tmp_path):
        lines = TKY2JGD_BODY.splitlines(keepends=True)
        path = _write(tmp_path / "unsorted.par", TKY2JGD_HEADER + "".join(reversed(lines)))
        grid = load_grid_from_file(path)
        keys = [int(k) for k in grid.keys]
        assert keys == sorted(keys)

    def test_lookup_after_load(self, tmp_path):
        path = _write(tmp_path / "TKY2JGD.par", TKY2JGD_HEADER + TKY2JGD_BODY)
        grid = load_grid_from_file(path)
        dlat, dlon = correction_at(grid, 35.67, 139.63).to_as()
        assert 11.495 < dlat < 11.499
        assert -11.883 < dlon < -11.879

    def test_logs_node_count(self, tmp_path, caplog):
        path = _write(tmp_path / "TKY2JGD.par", TKY2JGD_HEADER + TKY2JGD_BODY)
        with caplog.at_level(logging.INFO, logger="jgdjax.grid._providers"):
            load_grid_from_file(path)
        assert "Loaded 4 correction nodes" in caplog.text

    def test_duplicates_strict(self, tmp_path):
        path = _write(tmp_path / "dup.par", TKY2JGD_HEADER + TKY2JGD_BODY + "53394500  0.0 0.0\r\n")
        assert load_grid_from_file(path).size == 4
        with pytest.raises(MalformedGridError, match="duplicate"):
            load_grid_from_file(path, strict=True)

    def test_header_only(self, tmp_path):
        path = _write(tmp_path / "empty.par", TKY2JGD_HEADER)
        with pytest.raises(MalformedGridError, match="no grid records"):
            load_grid_from_file(path)

    def test_bad_value(self, tmp_path):
        path = _write(tmp_path / "bad.par", TKY2JGD_HEADER + "53394500  11.4966x -11.88074\r\n")
        with pytest.raises(MalformedGridError, match="non-numeric correction"):
            load_grid_from_file(path)

    def test_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Parameter file not found"):
            load_grid_from_file(tmp_path / "missing.par")


class TestLoadGridByName:
    def test_env_var(self, tmp_path, monkeypatch):
        _write(tmp_path / "TKY2JGD.par", TKY2JGD_HEADER + TKY2JGD_BODY)
        monkeypatch.setenv("JGDJAX_DATA", str(tmp_path))
        assert load_grid_by_name("tky2jgd").size == 4

    def test_explicit_dir(self, tmp_path):
        _write(tmp_path / "touhokutaiheiyouoki2011.par", PATCHJGD_TEXT)
        assert load_grid_by_name("PatchJGD", tmp_path).size == 2

    def test_unknown_name(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown parameter grid"):
            load_grid_by_name("tokyo97", tmp_path)

    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="JGDJAX_DATA"):
            load_grid_by_name("tky2jgd", tmp_path)
