from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List

import typer
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

from .config import resolve_parameters
from .core import GridShuffler, ShuffleParams
from .driver import DEFAULT_GRID, run_trials
from .feasibility import check_grid
from .logging_setup import setup_logging
from .serialize import build_run_meta, emit_grid_json, emit_report_json, load_grid
from .verify import verify_report
from .version import __version__

app = typer.Typer(help="Run-preserving grid shuffler CLI")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(0)


@app.callback()
def common_options(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show application version and exit",
        is_eager=True,
        callback=_version_callback,
    ),
) -> None:
    pass


def _resolve(config: str | None, cli_overrides: Dict[str, Any]) -> tuple[Dict[str, Any], str]:
    try:
        resolved, params_hash, _cfg_path_unused = resolve_parameters(
            config_path_str=config, cli_overrides=cli_overrides
        )
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=2)
    setup_logging(
        level=str(resolved.get("log_level", "INFO")),
        log_file=resolved.get("log_file"),
        json_format=(str(resolved.get("log_format", "text")) == "json"),
    )
    return resolved, params_hash


def _load_or_exit(path: Path) -> List[List[str]]:
    try:
        return load_grid(path)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"Input error: {exc}", err=True)
        raise typer.Exit(code=2)


def _input_grid(resolved: Dict[str, Any]) -> List[List[str]]:
    path = resolved.get("input")
    if not path:
        return [list(row) for row in DEFAULT_GRID]
    grid = _load_or_exit(Path(path))
    feas = check_grid(grid)
    if not feas.feasible:
        typer.echo("Input error: " + "; ".join(feas.reasons), err=True)
        raise typer.Exit(code=2)
    return grid


@app.command()
def run(
    config: str = typer.Option(None, "--config", help="Path to config file (YAML/JSON)"),
    input_path: str = typer.Option(None, "--input", help="Grid file (.json/.csv); sample card if omitted"),
    iterations: int = typer.Option(None, "--iterations", help="Number of shuffle trials"),
    seed: int = typer.Option(None, "--seed", help="Base seed"),
    rng_engine: str = typer.Option(None, "--rng-engine", help="py_random|numpy_pcg64"),
    check_adjacency: bool = typer.Option(
        False, "--check-adjacency", help="Also fail trials that merge runs"
    ),
    out_report: str = typer.Option(None, "--out-report", help="report.json output path"),
    log_file: str = typer.Option(None, "--log-file", help="Log file path"),
    log_level: str = typer.Option(None, "--log-level", help="DEBUG|INFO|WARN|ERROR"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Resolve params and exit"),
    force: bool = typer.Option(False, "--force", help="Overwrite outputs if they exist"),
    no_mkdirs: bool = typer.Option(False, "--no-mkdirs", help="Do not create parent directories"),
) -> None:
    """Shuffle and verify the input grid repeatedly, reporting failed trials."""

    cli_overrides: Dict[str, Any] = {}
    if input_path:
        cli_overrides["input"] = input_path
    if iterations is not None:
        cli_overrides["iterations"] = iterations
    if seed is not None:
        cli_overrides["seed.value"] = seed
    if rng_engine:
        cli_overrides["seed.engine"] = rng_engine
    if check_adjacency:
        cli_overrides["check_adjacency"] = True
    if out_report:
        cli_overrides["out_report"] = out_report
    if log_file:
        cli_overrides["log_file"] = log_file
    if log_level:
        cli_overrides["log_level"] = log_level

    resolved, params_hash = _resolve(config, cli_overrides)

    if dry_run:
        typer.echo(f"Params hash: {params_hash}")
        raise typer.Exit(0)

    grid = _input_grid(resolved)
    n_iter = int(resolved["iterations"])
    seed_value = int(resolved["seed"]["value"])
    engine = str(resolved["seed"].get("engine", "py_random"))

    typer.echo("Input: " + ", ".join(v for row in grid for v in row))

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
    ) as progress:
        task = progress.add_task("Shuffling", total=1.0)
        report = run_trials(
            grid,
            iterations=n_iter,
            seed=seed_value,
            rng_engine=engine,
            check_adjacency=bool(resolved.get("check_adjacency", False)),
            on_progress=lambda fraction: progress.update(task, completed=fraction),
        )

    for message in report.first_errors:
        typer.echo(message)

    if resolved.get("out_report"):
        data = report.to_dict()
        data["run_meta"] = build_run_meta(
            app_version=__version__, params_hash=params_hash, seed=seed_value, rng_engine=engine
        )
        emit_report_json(
            Path(resolved["out_report"]), report=data, mkdirs=(not no_mkdirs), overwrite=force
        )

    typer.echo(f"{report.summary()} ({report.failures}/{report.iterations} trials failed)")
    raise typer.Exit(code=0 if report.ok else 1)


@app.command()
def shuffle(
    config: str = typer.Option(None, "--config", help="Path to config file (YAML/JSON)"),
    input_path: str = typer.Option(None, "--input", help="Grid file (.json/.csv); sample card if omitted"),
    out_grid: str = typer.Option(None, "--out-grid", help="Shuffled grid.json output path"),
    seed: int = typer.Option(None, "--seed", help="Base seed"),
    rng_engine: str = typer.Option(None, "--rng-engine", help="py_random|numpy_pcg64"),
    max_attempts: int = typer.Option(None, "--max-attempts", help="Retries on infeasible layouts"),
    check_adjacency: bool = typer.Option(
        False, "--check-adjacency", help="Reject shuffles that merge runs"
    ),
    log_level: str = typer.Option(None, "--log-level", help="DEBUG|INFO|WARN|ERROR"),
    force: bool = typer.Option(False, "--force", help="Overwrite outputs if they exist"),
    no_mkdirs: bool = typer.Option(False, "--no-mkdirs", help="Do not create parent directories"),
) -> None:
    """Shuffle the input grid once (retrying infeasible layouts) and print or save it."""

    cli_overrides: Dict[str, Any] = {}
    if input_path:
        cli_overrides["input"] = input_path
    if out_grid:
        cli_overrides["out_grid"] = out_grid
    if seed is not None:
        cli_overrides["seed.value"] = seed
    if rng_engine:
        cli_overrides["seed.engine"] = rng_engine
    if max_attempts is not None:
        cli_overrides["max_attempts"] = max_attempts
    if check_adjacency:
        cli_overrides["check_adjacency"] = True
    if log_level:
        cli_overrides["log_level"] = log_level

    resolved, params_hash = _resolve(config, cli_overrides)
    grid = _input_grid(resolved)
    params = ShuffleParams(
        seed=int(resolved["seed"]["value"]),
        rng_engine=str(resolved["seed"].get("engine", "py_random")),
        max_attempts=int(resolved["max_attempts"]),
        check_adjacency=bool(resolved.get("check_adjacency", False)),
    )

    try:
        result = GridShuffler(strategy="retry").shuffle(grid, params)
    except ValueError as exc:
        typer.echo(f"Input error: {exc}", err=True)
        raise typer.Exit(code=2)
    except RuntimeError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    if resolved.get("out_grid"):
        run_meta = build_run_meta(
            app_version=__version__,
            params_hash=params_hash,
            seed=params.seed,
            rng_engine=params.rng_engine,
        )
        emit_grid_json(
            Path(resolved["out_grid"]),
            input_grid=grid,
            grid=result.grid,
            run_meta=run_meta,
            mkdirs=(not no_mkdirs),
            overwrite=force,
        )
        typer.echo(f"Output file: {resolved['out_grid']}")
    else:
        for row in result.grid:
            typer.echo(", ".join(row))

    typer.echo(
        f"Shuffled in {result.metrics.attempts} attempt(s), {result.metrics.total_time:.3f}s"
    )
    raise typer.Exit(code=0)


@app.command()
def verify(
    input_path: str = typer.Option(..., "--input", help="Original grid file"),
    output_path: str = typer.Option(..., "--output", help="Shuffled grid file"),
    check_adjacency: bool = typer.Option(
        False, "--check-adjacency", help="Also fail if runs were merged"
    ),
    out_report: str = typer.Option(None, "--out-report", help="report.json output path"),
    force: bool = typer.Option(False, "--force", help="Overwrite outputs if they exist"),
) -> None:
    """Verify a shuffled grid against its input."""
    expected = _load_or_exit(Path(input_path))
    actual = _load_or_exit(Path(output_path))
    report = verify_report(expected, actual, check_adjacency=check_adjacency)
    if out_report:
        emit_report_json(Path(out_report), report=report, mkdirs=True, overwrite=force)
    if not report["ok"]:
        typer.echo(f"Verification failed [{report['kind']}]: {report['error']}")
        raise typer.Exit(code=1)
    typer.echo("Verified")
    raise typer.Exit(code=0)


def main(_argv: list[str] | None = None) -> int:
    try:
        app(args=_argv, standalone_mode=True)
        return 0
    except SystemExit as e:
        return int(e.code) if e.code is not None else 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
