from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from .dictionary import build_dictionary, render_dictionary_markdown
from .errors import AdsPrepError
from .export import columns_needing_sanitization, sanitize_for_export, write_export_csv
from .ingest import load_csv
from .log import setup_logging
from .models import PrepConfig, default_maxlevels, load_config
from .pipeline import prepare_dataset, run_prep

app = typer.Typer(add_completion=False, help="Analytic data set preparation: typing, labels, data dictionary, export.")


def _load_config_or_default(config: Optional[Path]) -> PrepConfig:
    return load_config(config) if config is not None else PrepConfig()


def _with_dictionary_overrides(
    cfg: PrepConfig,
    *,
    maxlevels: Optional[int],
    sortlevels: Optional[bool],
) -> PrepConfig:
    """CLI flags win over the config file; ADS_PREP_MAXLEVELS fills an unset cap."""
    update: dict[str, object] = {}
    if maxlevels is not None:
        update["maxlevels"] = maxlevels
    elif cfg.dictionary.maxlevels is None:
        env_cap = default_maxlevels()
        if env_cap is not None:
            update["maxlevels"] = env_cap
    if sortlevels is not None:
        update["sortlevels"] = sortlevels
    if not update:
        return cfg
    return cfg.model_copy(update={"dictionary": cfg.dictionary.model_copy(update=update)})


@app.command()
def prepare(
    data: Path = typer.Option(..., "--data", help="Path to the raw CSV file"),
    config: Optional[Path] = typer.Option(None, "--config", help="JSON preparation config (column types, labels)"),
    out: Path = typer.Option(Path("prep_out"), "--out", help="Output directory for run artifacts"),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", help="Export delimiter (overrides config)"),
    maxlevels: Optional[int] = typer.Option(None, "--maxlevels", min=1, help="Max levels listed per categorical column"),
    sortlevels: Optional[bool] = typer.Option(None, "--sortlevels/--no-sortlevels", help="Sort level tables"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Type, label and describe a CSV, then write a sanitized export.

    Writes under --out:
      data_dictionary.json, data_dictionary.md, export.csv, table_view.json, prep_log.json
    """
    setup_logging(verbose=verbose)
    try:
        cfg = _with_dictionary_overrides(_load_config_or_default(config), maxlevels=maxlevels, sortlevels=sortlevels)
        if delimiter is not None:
            cfg = cfg.model_copy(update={"export": cfg.export.model_copy(update={"delimiter": delimiter})})

        result = run_prep(data_path=data, config=cfg, out_dir=out)

        typer.echo("Preparation complete.")
        typer.echo(f"Rows: {result.dataset.n_rows}  Columns: {len(result.dataset.columns)}")
        typer.echo(f"Dictionary: {result.artifacts.dictionary_md}")
        typer.echo(f"Dictionary (JSON): {result.artifacts.dictionary_json}")
        typer.echo(f"Export: {result.artifacts.export_csv}")
        typer.echo(f"Table view: {result.artifacts.table_view_json}")
        typer.echo(f"Log: {result.artifacts.prep_log_json}")
        if result.table_view.sanitized_columns:
            typer.echo(f"Sanitized columns: {', '.join(result.table_view.sanitized_columns)}")
        for w in result.warnings:
            typer.echo(f"WARNING: {w}")
    except FileNotFoundError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)
    except (AdsPrepError, ValueError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def describe(
    data: Path = typer.Option(..., "--data", help="Path to the raw CSV file"),
    config: Optional[Path] = typer.Option(None, "--config", help="JSON preparation config (column types, labels)"),
    maxlevels: Optional[int] = typer.Option(None, "--maxlevels", min=1, help="Max levels listed per categorical column"),
    sortlevels: Optional[bool] = typer.Option(None, "--sortlevels/--no-sortlevels", help="Sort level tables"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Print the Markdown data dictionary of a CSV without writing anything."""
    setup_logging(verbose=verbose)
    try:
        cfg = _with_dictionary_overrides(_load_config_or_default(config), maxlevels=maxlevels, sortlevels=sortlevels)
        typed, _ = prepare_dataset(load_csv(data), cfg)
        opts = cfg.dictionary
        rows = build_dictionary(typed, sortlevels=opts.sortlevels, maxlevels=opts.maxlevels, frequencies=opts.frequencies)
        typer.echo(render_dictionary_markdown(rows, title=f"Data Dictionary: {data.name}").rstrip())
    except FileNotFoundError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)
    except (AdsPrepError, ValueError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def sanitize(
    data: Path = typer.Option(..., "--data", help="Path to the raw CSV file"),
    out: Path = typer.Option(..., "--out", help="Where to write the sanitized file"),
    delimiter: str = typer.Option(",", "--delimiter", help="Export delimiter"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Replace the export delimiter inside cells and write the result."""
    setup_logging(verbose=verbose)
    try:
        raw = load_csv(data)
        touched = columns_needing_sanitization(raw, delimiter)
        write_export_csv(sanitize_for_export(raw, delimiter), out, delimiter=delimiter)
        typer.echo(f"Wrote: {out}")
        typer.echo(f"Sanitized columns: {', '.join(touched) if touched else '(none)'}")
    except FileNotFoundError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)
    except (AdsPrepError, ValueError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)
