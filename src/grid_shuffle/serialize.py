from __future__ import annotations

import csv
import hashlib
import json
import platform
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Sequence


def grid_hash(grid: Sequence[Sequence[str]]) -> str:
    """sha256 of the grid as compact JSON, prefixed with the algorithm name."""
    payload = json.dumps(grid, ensure_ascii=True, separators=(",", ":"))
    return "sha256:" + hashlib.sha256(payload.encode("utf-8")).hexdigest()


def ensure_parent(path: Path, *, mkdirs: bool) -> None:
    parent = path.parent
    if not parent.exists() and mkdirs:
        parent.mkdir(parents=True, exist_ok=True)


def write_json(path: Path, data: object, *, mkdirs: bool, overwrite: bool) -> None:
    if path.exists() and not overwrite:
        raise FileExistsError(
            f"Refusing to overwrite existing file without --force: {path}"
        )
    ensure_parent(path, mkdirs=mkdirs)
    text = json.dumps(data, ensure_ascii=True, sort_keys=True, indent=2)
    path.write_text(text + "\n", encoding="utf-8")


def _as_grid(data: object, source: Path) -> List[List[str]]:
    if isinstance(data, dict):
        data = data.get("grid")
    if not isinstance(data, list) or not all(isinstance(row, list) for row in data):
        raise ValueError(f"{source}: expected a list of rows or a mapping with 'grid'")
    return [[None if v is None else str(v) for v in row] for row in data]


def load_grid(path: Path) -> List[List[str]]:
    """Read a grid from ``.json`` (list of rows or ``{"grid": ...}``) or ``.csv``."""
    if not path.exists():
        raise FileNotFoundError(f"Grid file not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".json":
        return _as_grid(json.loads(path.read_text(encoding="utf-8")), path)
    if suffix == ".csv":
        with path.open(newline="", encoding="utf-8") as f:
            rows = [[cell.strip() for cell in row] for row in csv.reader(f) if row]
        return _as_grid(rows, path)
    raise ValueError(f"Unsupported grid file extension: {suffix}")


def build_run_meta(
    *,
    app_version: str,
    params_hash: str,
    seed: int,
    rng_engine: str,
) -> Dict[str, object]:
    return {
        "app_version": app_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "python_version": sys.version.split()[0],
        "platform": platform.system().lower(),
        "params_hash": params_hash,
        "seed": seed,
        "rng_engine": rng_engine,
        "hash_algorithm": "sha256",
    }


def emit_grid_json(
    path: Path,
    *,
    input_grid: Sequence[Sequence[str]],
    grid: Sequence[Sequence[str]],
    run_meta: Dict[str, object],
    mkdirs: bool,
    overwrite: bool,
) -> None:
    data = {
        "run_meta": run_meta,
        "input_hash": grid_hash(input_grid),
        "grid": grid,
        "grid_hash": grid_hash(grid),
    }
    write_json(path, data, mkdirs=mkdirs, overwrite=overwrite)


def emit_report_json(
    path: Path, *, report: Dict[str, object], mkdirs: bool, overwrite: bool
) -> None:
    write_json(path, report, mkdirs=mkdirs, overwrite=overwrite)
