from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..column_types import type_columns
from ..dataset import Dataset
from ..dictionary import DictionaryRow, build_dictionary, dictionary_to_records, render_dictionary_markdown
from ..errors import TypeCoercionWarning
from ..export import (
    TableView,
    columns_needing_sanitization,
    package_table_view,
    sanitize_for_export,
    write_export_csv,
)
from ..ingest import load_csv
from ..labels import set_labels, set_value_labels, unlabeled_columns
from ..models import PrepArtifacts, PrepConfig
from ..utils import merge_json_log, now_iso, write_json
from .context import PrepContext

logger = logging.getLogger(__name__)


@dataclass
class PrepResult:
    ctx: PrepContext
    dataset: Dataset
    sanitized: Dataset
    dictionary: list[DictionaryRow]
    table_view: TableView
    artifacts: PrepArtifacts
    coercions: dict[str, int] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


def prepare_dataset(raw: Dataset, config: PrepConfig) -> tuple[Dataset, dict[str, int]]:
    """Type and label a raw dataset according to `config`.

    Returns the typed dataset and, per column, how many values were lost to
    coercion (columns without losses are omitted).
    """
    coercions: dict[str, int] = {}
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", TypeCoercionWarning)
        typed = type_columns(raw, config.column_specs())

    for w in caught:
        if isinstance(w.message, TypeCoercionWarning):
            coercions[w.message.column] = coercions.get(w.message.column, 0) + w.message.count
        else:
            warnings.showwarning(w.message, w.category, w.filename, w.lineno)

    set_labels(typed, config.labels())
    for name, mapping in config.value_labels().items():
        set_value_labels(typed, name, mapping)
    return typed, coercions


def run_prep(
    *,
    data_path: Path,
    config: PrepConfig,
    out_dir: Path,
    run_id: Optional[str] = None,
) -> PrepResult:
    """Run the full preparation and write the run artifacts into `out_dir`.

    Always writes (on success):
      data_dictionary.json, data_dictionary.md, export.csv, table_view.json,
      prep_log.json

    Structural errors (unknown column, duplicate name, bad config) are
    recorded in prep_log.json and re-raised.
    """
    ctx = PrepContext.create(out_dir=out_dir, run_id=run_id)
    ctx.out_dir.mkdir(parents=True, exist_ok=True)
    log_path = ctx.prep_log_path()

    write_json(
        log_path,
        {
            "run_id": ctx.run_id,
            "created_at": now_iso(),
            "source": str(data_path),
            "config": config.model_dump(mode="json"),
        },
    )

    try:
        raw = load_csv(Path(data_path))
        typed, coercions = prepare_dataset(raw, config)

        opts = config.dictionary
        rows = build_dictionary(typed, sortlevels=opts.sortlevels, maxlevels=opts.maxlevels, frequencies=opts.frequencies)

        delimiter = config.export.delimiter
        touched = columns_needing_sanitization(typed, delimiter)
        sanitized = sanitize_for_export(typed, delimiter)
        view = package_table_view(
            sanitized,
            delimiter=delimiter,
            sanitized_columns=touched,
            page_length=config.export.page_length,
        )
    except Exception as e:
        merge_json_log(log_path, {"status": "failed", "error": f"{type(e).__name__}: {e}", "finished_at": now_iso()})
        raise

    write_json(ctx.dictionary_json_path(), {"columns": dictionary_to_records(rows), "row_count": typed.n_rows})
    ctx.dictionary_md_path().write_text(render_dictionary_markdown(rows), encoding="utf-8")
    write_export_csv(sanitized, ctx.export_csv_path(), delimiter=delimiter)
    write_json(ctx.table_view_path(), view.model_dump(mode="json"))

    run_warnings = [f"Column '{c}' has no label." for c in unlabeled_columns(typed)]
    run_warnings += [f"Column '{c}': {n} value(s) became missing during typing." for c, n in coercions.items()]

    merge_json_log(
        log_path,
        {
            "status": "success",
            "finished_at": now_iso(),
            "row_count": typed.n_rows,
            "column_count": len(typed.columns),
            "coercions": coercions,
            "sanitized_columns": view.sanitized_columns,
            "warnings": run_warnings,
        },
    )
    logger.info(f"Preparation run {ctx.run_id} complete: {ctx.out_dir}")

    artifacts = PrepArtifacts(
        out_dir=str(ctx.out_dir),
        dictionary_json=str(ctx.dictionary_json_path()),
        dictionary_md=str(ctx.dictionary_md_path()),
        export_csv=str(ctx.export_csv_path()),
        table_view_json=str(ctx.table_view_path()),
        prep_log_json=str(log_path),
    )
    return PrepResult(
        ctx=ctx,
        dataset=typed,
        sanitized=sanitized,
        dictionary=rows,
        table_view=view,
        artifacts=artifacts,
        coercions=coercions,
        warnings=run_warnings,
    )
