from __future__ import annotations

import logging

import pandas as pd

from ..dataset import Dataset, SemanticType

logger = logging.getLogger(__name__)

# Fixed placeholder tokens. The substitution is one-way: a cell that already
# contained the token text cannot be told apart from a substituted one.
PLACEHOLDER_TOKENS: dict[str, str] = {
    ",": "_comma_",
    ";": "_semicolon_",
    "\t": "_tab_",
    "|": "_pipe_",
}
DEFAULT_PLACEHOLDER = "_delim_"


def placeholder_for(delimiter: str) -> str:
    """Token that replaces `delimiter` in sanitized cells."""
    if not delimiter:
        raise ValueError("delimiter must be a non-empty string.")
    token = PLACEHOLDER_TOKENS.get(delimiter, DEFAULT_PLACEHOLDER)
    if delimiter in token:
        raise ValueError(f"delimiter {delimiter!r} occurs in its own placeholder {token!r}.")
    return token


def cell_strings(dataset: Dataset, name: str) -> pd.Series:
    """String form of every non-missing cell of a column; missing stays missing.

    Dates are written with the column's date format.
    """
    series = dataset.column(name)
    if pd.api.types.is_datetime64_any_dtype(series):
        out = series.dt.strftime(dataset.date_format(name)).astype(object)
        return out.where(series.notna(), None)
    values = series.astype(object)
    return values.where(values.isna(), values.map(str))


def columns_needing_sanitization(dataset: Dataset, delimiter: str) -> list[str]:
    """Columns with at least one cell, or declared level, containing the delimiter literal."""
    placeholder_for(delimiter)
    hits: list[str] = []
    for name in dataset.columns:
        strs = cell_strings(dataset, name).dropna()
        series = dataset.column(name)
        if isinstance(series.dtype, pd.CategoricalDtype):
            # unused levels still reach the presenter through the column metadata
            strs = pd.Series([str(c) for c in series.cat.categories], dtype=object)
        if bool(strs.map(lambda s: delimiter in s).any()):
            hits.append(name)
    return hits


def sanitize_for_export(dataset: Dataset, delimiter: str) -> Dataset:
    """Return a copy with the delimiter replaced by its placeholder token.

    Substitution is column-wide: a column that contains the delimiter in any
    cell gets every occurrence replaced in every cell, other columns are left
    exactly as they were. Row and column counts never change, missing values
    stay missing and categorical columns keep their (rewritten) levels.
    Numeric and date columns that needed substitution hold strings afterwards
    and are retyped as text.
    Running it again with the same delimiter changes nothing.
    """
    token = placeholder_for(delimiter)
    targets = columns_needing_sanitization(dataset, delimiter)

    frame = dataset.frame.copy()
    types = dict(dataset.types)
    date_formats = dict(dataset.date_formats)
    for name in targets:
        series = frame[name]
        if isinstance(series.dtype, pd.CategoricalDtype):
            old = [str(c) for c in series.cat.categories]
            new = [c.replace(delimiter, token) for c in old]
            if len(set(new)) != len(new):
                raise ValueError(
                    f"Sanitizing column '{name}' would merge distinct levels; "
                    f"a level already contains the placeholder {token!r}."
                )
            frame[name] = series.cat.rename_categories(new)
        else:
            strs = cell_strings(dataset, name)
            frame[name] = strs.where(strs.isna(), strs.map(lambda s: s.replace(delimiter, token), na_action="ignore"))
            types[name] = SemanticType.TEXT
            date_formats.pop(name, None)

    if targets:
        logger.info(f"Sanitized {len(targets)} column(s) for delimiter {delimiter!r}: {targets}")
    return Dataset(frame, types, dataset.labels.copy(), date_formats)
