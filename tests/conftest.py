"""Shared fixtures: importing generated modules straight from disk."""

import importlib.util
import itertools
import sys
from pathlib import Path

import pytest

from astgen.generator import generate
from astgen.lox import load_lox

_ids = itertools.count()


@pytest.fixture
def import_generated(monkeypatch):
    """Import a generated module file under a throwaway name."""

    def _import(path: Path):
        name = f"_astgen_generated_{path.stem}_{next(_ids)}"
        spec = importlib.util.spec_from_file_location(name, path)
        module = importlib.util.module_from_spec(spec)
        monkeypatch.setitem(sys.modules, name, module)
        spec.loader.exec_module(module)
        return module

    return _import


@pytest.fixture
def lox(tmp_path, import_generated):
    """The generated Lox modules, keyed by family module name."""
    paths = generate(load_lox(), tmp_path / "lox")
    return {path.stem: import_generated(path) for path in paths}
