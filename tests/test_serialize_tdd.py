from __future__ import annotations

import json
from pathlib import Path

import pytest

from grid_shuffle.serialize import build_run_meta, emit_grid_json, grid_hash, load_grid, write_json


def test_load_grid_json_variants(tmp_path: Path):
    bare = tmp_path / "bare.json"
    bare.write_text('[["a", "b"], ["c", "d"]]', encoding="utf-8")
    wrapped = tmp_path / "wrapped.json"
    wrapped.write_text('{"grid": [["a", 1]]}', encoding="utf-8")
    assert load_grid(bare) == [["a", "b"], ["c", "d"]]
    assert load_grid(wrapped) == [["a", "1"]]


def test_load_grid_csv(tmp_path: Path):
    p = tmp_path / "grid.csv"
    p.write_text("ab, ab,FREE\nso,so,no\n\n", encoding="utf-8")
    assert load_grid(p) == [["ab", "ab", "FREE"], ["so", "so", "no"]]


def test_load_grid_errors(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_grid(tmp_path / "missing.json")
    txt = tmp_path / "grid.txt"
    txt.write_text("a b", encoding="utf-8")
    with pytest.raises(ValueError):
        load_grid(txt)
    bad = tmp_path / "bad.json"
    bad.write_text('{"rows": []}', encoding="utf-8")
    with pytest.raises(ValueError):
        load_grid(bad)


def test_write_json_refuses_overwrite(tmp_path: Path):
    p = tmp_path / "out" / "r.json"
    write_json(p, {"a": 1}, mkdirs=True, overwrite=False)
    with pytest.raises(FileExistsError):
        write_json(p, {"a": 2}, mkdirs=True, overwrite=False)
    write_json(p, {"a": 2}, mkdirs=True, overwrite=True)
    assert json.loads(p.read_text(encoding="utf-8")) == {"a": 2}


def test_emit_grid_json_round_trips_through_load(tmp_path: Path):
    meta = build_run_meta(app_version="0.1.0", params_hash="sha256:x", seed=1, rng_engine="py_random")
    p = tmp_path / "grid.json"
    emit_grid_json(p, input_grid=[["a", "b"]], grid=[["b", "a"]], run_meta=meta, mkdirs=True, overwrite=False)
    data = json.loads(p.read_text(encoding="utf-8"))
    assert data["grid_hash"].startswith("sha256:")
    assert data["input_hash"] == grid_hash([["a", "b"]])
    assert data["run_meta"]["seed"] == 1
    assert load_grid(p) == [["b", "a"]]


def test_grid_hash_stable_and_order_sensitive():
    a = [["x", "y"], ["z", "w"]]
    b = [["x", "z"], ["y", "w"]]
    assert grid_hash(a).startswith("sha256:")
    assert grid_hash(a) == grid_hash([list(r) for r in a])
    assert grid_hash(a) != grid_hash(b)
