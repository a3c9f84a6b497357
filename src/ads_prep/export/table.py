from __future__ import annotations

import datetime as dt
import math
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
from pydantic import BaseModel, Field

from ..dataset import Dataset, SemanticType
from .sanitize import cell_strings, columns_needing_sanitization, placeholder_for, sanitize_for_export

# Buttons the interactive grid offers. The presenter implements them.
EXPORT_FORMATS: tuple[str, ...] = ("copy", "csv", "excel", "pdf", "print")


class TableColumn(BaseModel):
    name: str
    label: str = ""
    type: SemanticType
    levels: list[str] = Field(default_factory=list)


class TableView(BaseModel):
    """
    Everything an interactive, paginated, exportable grid needs.

    records hold the sanitized cells (missing -> null); no cell contains an
    unescaped delimiter.
    """
    columns: list[TableColumn]
    records: list[dict[str, Any]]
    row_count: int
    delimiter: str
    placeholder: str
    sanitized_columns: list[str] = Field(default_factory=list)
    page_length: int = 10
    export_formats: list[str] = Field(default_factory=lambda: list(EXPORT_FORMATS))


def build_table_view(dataset: Dataset, *, delimiter: str = ",", page_length: int = 10) -> TableView:
    """Sanitize `dataset` for `delimiter` and package it for the table presenter."""
    touched = columns_needing_sanitization(dataset, delimiter)
    clean = sanitize_for_export(dataset, delimiter)
    return package_table_view(clean, delimiter=delimiter, sanitized_columns=touched, page_length=page_length)


def package_table_view(
    clean: Dataset,
    *,
    delimiter: str,
    sanitized_columns: list[str],
    page_length: int = 10,
) -> TableView:
    """Package an already sanitized dataset for the table presenter."""
    if page_length < 1:
        raise ValueError("page_length must be a positive integer.")

    columns = [
        TableColumn(name=d.name, label=d.label, type=d.semantic_type, levels=list(d.levels))
        for d in clean.descriptors()
    ]
    return TableView(
        columns=columns,
        records=frame_records(clean),
        row_count=clean.n_rows,
        delimiter=delimiter,
        placeholder=placeholder_for(delimiter),
        sanitized_columns=list(sanitized_columns),
        page_length=page_length,
    )


def frame_records(dataset: Dataset) -> list[dict[str, Any]]:
    """Row dicts with JSON-safe cell values; missing cells become None."""
    records: list[dict[str, Any]] = []
    formats = {c: dataset.date_format(c) for c in dataset.columns}
    for row in dataset.frame.itertuples(index=False, name=None):
        records.append({c: _json_cell(v, formats[c]) for c, v in zip(dataset.columns, row)})
    return records


def _json_cell(v: Any, date_format: str) -> Any:
    if v is None or v is pd.NaT or v is pd.NA:
        return None
    if isinstance(v, (pd.Timestamp, dt.datetime, dt.date)):
        return v.strftime(date_format)
    if isinstance(v, np.generic):
        v = v.item()
    if isinstance(v, float) and math.isnan(v):
        return None
    return v


def write_export_csv(dataset: Dataset, path: Path, *, delimiter: str = ",") -> Path:
    """Write a sanitized dataset as a delimited file (missing cells empty).

    Date columns are written in their own format, the same string form the
    sanitizer inspected.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    frame = dataset.frame.copy()
    for name in dataset.columns:
        if pd.api.types.is_datetime64_any_dtype(frame[name]):
            frame[name] = cell_strings(dataset, name)
    frame.to_csv(path, sep=delimiter, index=False, encoding="utf-8")
    return path
