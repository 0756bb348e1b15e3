from __future__ import annotations

import os
from pathlib import Path

import pytest

from grid_shuffle.config import resolve_parameters


def test_env_precedence_over_config(tmp_path: Path, monkeypatch):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("iterations: 10\nmax_attempts: 5\n", encoding="utf-8")
    monkeypatch.setenv("GRID_SHUFFLE_ITERATIONS", "75")

    resolved, params_hash, _ = resolve_parameters(
        config_path_str=str(cfg), cli_overrides={}, env=os.environ
    )
    assert resolved["iterations"] == 75
    assert resolved["max_attempts"] == 5
    assert params_hash.startswith("sha256:")


def test_cli_precedence_over_env(tmp_path: Path, monkeypatch):
    cfg = tmp_path / "config.json"
    cfg.write_text('{"iterations": 10}', encoding="utf-8")
    monkeypatch.setenv("GRID_SHUFFLE_ITERATIONS", "70")

    resolved, _hash, _ = resolve_parameters(
        config_path_str=str(cfg), cli_overrides={"iterations": 80}, env=os.environ
    )
    assert resolved["iterations"] == 80


def test_nested_seed_from_config_keeps_engine_default(tmp_path: Path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("seed:\n  value: 42\n", encoding="utf-8")
    resolved, _hash, _ = resolve_parameters(config_path_str=str(cfg), cli_overrides={}, env={})
    assert resolved["seed"] == {"engine": "py_random", "value": 42}


def test_env_bool_and_dotted_keys():
    env = {"GRID_SHUFFLE_CHECK_ADJACENCY": "yes", "GRID_SHUFFLE_SEED_VALUE": "9"}
    resolved, _hash, _ = resolve_parameters(config_path_str=None, cli_overrides={}, env=env)
    assert resolved["check_adjacency"] is True
    assert resolved["seed"]["value"] == 9


def test_path_normalization_cli_vs_config(tmp_path: Path, monkeypatch):
    cfg_dir = tmp_path / "cfg"
    cfg_dir.mkdir()
    cfg = cfg_dir / "conf.yaml"
    cfg.write_text("input: grid.json\n", encoding="utf-8")

    monkeypatch.chdir(tmp_path)
    resolved, _hash, _ = resolve_parameters(
        config_path_str=str(cfg),
        cli_overrides={"out_report": "rep.json"},
        env={},
    )
    assert Path(resolved["input"]).parent == cfg_dir.resolve()
    assert Path(resolved["out_report"]).parent == tmp_path.resolve()


def test_params_hash_ignores_logging_fields():
    base = {
        "iterations": 500,
        "max_attempts": 10,
        "seed": {"engine": "py_random", "value": 20250824},
        "log_level": "INFO",
    }
    _, h1, _ = resolve_parameters(config_path_str=None, cli_overrides=base, env={})
    altered = dict(base, log_level="DEBUG")
    _, h2, _ = resolve_parameters(config_path_str=None, cli_overrides=altered, env={})
    changed = dict(base, iterations=501)
    _, h3, _ = resolve_parameters(config_path_str=None, cli_overrides=changed, env={})
    assert h1 == h2
    assert h1 != h3


def test_invalid_iterations_rejected():
    with pytest.raises(ValueError):
        resolve_parameters(config_path_str=None, cli_overrides={"iterations": 0}, env={})


def test_missing_config_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        resolve_parameters(config_path_str=str(tmp_path / "nope.yaml"), cli_overrides={}, env={})


def test_unknown_rng_engine_rejected():
    with pytest.raises(ValueError, match="seed.engine"):
        resolve_parameters(
            config_path_str=None, cli_overrides={"seed.engine": "bogus"}, env={}
        )
