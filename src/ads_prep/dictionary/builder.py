from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import pandas as pd

from ..dataset import Dataset, SemanticType

logger = logging.getLogger(__name__)

MORE_LABEL = "more..."


@dataclass(frozen=True)
class LevelFrequency:
    level: str
    count: int
    value_label: str = ""


@dataclass(frozen=True)
class LevelRemainder:
    """Summary of the levels cut off by `maxlevels`."""

    omitted: int
    count: int
    label: str = MORE_LABEL


@dataclass(frozen=True)
class DictionaryRow:
    """One data dictionary entry, derived from a typed and labelled column.

    level_count is set for categorical columns only; minimum/maximum for
    numeric and date columns only.
    """

    name: str
    semantic_type: SemanticType
    label: str
    count: int
    missing_count: int
    distinct_count: int
    level_count: Optional[int] = None
    levels: tuple[LevelFrequency, ...] = ()
    remainder: Optional[LevelRemainder] = None
    minimum: Any = None
    maximum: Any = None


def build_dictionary(
    dataset: Dataset,
    *,
    sortlevels: bool = False,
    maxlevels: Optional[int] = None,
    frequencies: bool = True,
) -> list[DictionaryRow]:
    """Derive one DictionaryRow per column, in dataset column order.

    sortlevels: list ordinal levels in level order and nominal levels
        alphabetically; otherwise levels follow their declaration order
    maxlevels: show at most this many levels and summarize the rest in a
        `more...` remainder record (default: show all)
    frequencies: include per-level counts for categorical columns

    Pure projection: the dataset is only read.
    """
    if maxlevels is not None and maxlevels < 1:
        raise ValueError("maxlevels must be a positive integer or None.")

    rows = [
        _build_row(dataset, name, sortlevels=sortlevels, maxlevels=maxlevels, frequencies=frequencies)
        for name in dataset.columns
    ]
    logger.debug(f"Built data dictionary: {len(rows)} rows")
    return rows


def _build_row(
    dataset: Dataset,
    name: str,
    *,
    sortlevels: bool,
    maxlevels: Optional[int],
    frequencies: bool,
) -> DictionaryRow:
    series = dataset.frame[name]
    st = dataset.types[name]
    missing = int(series.isna().sum())

    base: dict[str, Any] = {
        "name": name,
        "semantic_type": st,
        "label": dataset.labels.labels.get(name, ""),
        "count": int(series.shape[0]) - missing,
        "missing_count": missing,
        "distinct_count": int(series.nunique(dropna=True)),
    }

    if st.is_categorical:
        levels, remainder = _level_table(
            series,
            st,
            value_labels=dataset.labels.value_labels.get(name, {}),
            sortlevels=sortlevels,
            maxlevels=maxlevels,
        )
        return DictionaryRow(
            **base,
            level_count=len(series.cat.categories),
            levels=levels if frequencies else (),
            remainder=remainder if frequencies else None,
        )

    if st is SemanticType.NUMERIC:
        values = pd.to_numeric(series, errors="coerce").dropna()
        if values.empty:
            return DictionaryRow(**base)
        return DictionaryRow(**base, minimum=float(values.min()), maximum=float(values.max()))

    if st is SemanticType.DATE:
        if pd.api.types.is_datetime64_any_dtype(series):
            values = series.dropna()
        else:
            values = pd.to_datetime(series, format=dataset.date_format(name), errors="coerce").dropna()
        if values.empty:
            return DictionaryRow(**base)
        return DictionaryRow(**base, minimum=values.min().date(), maximum=values.max().date())

    return DictionaryRow(**base)


def _level_table(
    series: pd.Series,
    st: SemanticType,
    *,
    value_labels: dict[str, str],
    sortlevels: bool,
    maxlevels: Optional[int],
) -> tuple[tuple[LevelFrequency, ...], Optional[LevelRemainder]]:
    levels = [str(c) for c in series.cat.categories]
    if sortlevels and st is SemanticType.NOMINAL:
        levels = sorted(levels)

    counts = {str(k): int(v) for k, v in series.value_counts(dropna=True).items()}
    table = [LevelFrequency(level=lv, count=counts.get(lv, 0), value_label=value_labels.get(lv, "")) for lv in levels]

    if maxlevels is None or len(table) <= maxlevels:
        return tuple(table), None

    shown, rest = table[:maxlevels], table[maxlevels:]
    remainder = LevelRemainder(omitted=len(rest), count=sum(f.count for f in rest))
    return tuple(shown), remainder
