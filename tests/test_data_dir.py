"""Tests for the parameter file data directory."""

from pathlib import Path

import pytest

from jgdjax.utils import PARAMETER_FILES, find_parameter_file, get_data_dir


class TestGetDataDir:
    def test_env_var(self, tmp_path, monkeypatch):
        monkeypatch.setenv("JGDJAX_DATA", str(tmp_path))
        assert get_data_dir() == tmp_path

    def test_default(self, monkeypatch):
        monkeypatch.delenv("JGDJAX_DATA", raising=False)
        assert get_data_dir() == Path.home() / ".cache" / "jgdjax"

    def test_not_created(self, tmp_path, monkeypatch):
        target = tmp_path / "nonexistent"
        monkeypatch.setenv("JGDJAX_DATA", str(target))
        get_data_dir()
        assert not target.exists()


class TestFindParameterFile:
    @pytest.mark.parametrize("name", ["tky2jgd", "patchjgd", "TKY2JGD"])
    def test_found(self, tmp_path, name):
        path = tmp_path / PARAMETER_FILES[name.lower()]
        path.write_text("MeshCode dB(sec) dL(sec)\n")
        assert find_parameter_file(name, tmp_path) == path

    def test_uses_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "TKY2JGD.par"
        path.write_text("MeshCode dB(sec) dL(sec)\n")
        monkeypatch.setenv("JGDJAX_DATA", str(tmp_path))
        assert find_parameter_file("tky2jgd") == path

    def test_unknown(self):
        with pytest.raises(ValueError, match="Available"):
            find_parameter_file("semidynamic")

    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="TKY2JGD.par"):
            find_parameter_file("tky2jgd", tmp_path)
