from __future__ import annotations

import logging
import warnings
from typing import Any, Mapping, Optional, Union

import pandas as pd
from pydantic import ValidationError

from .dataset import DEFAULT_DATE_FORMAT, Dataset, SemanticType
from .errors import ConfigError, DuplicateNameError, TypeCoercionWarning
from .models import ColumnSpec

logger = logging.getLogger(__name__)

SpecLike = Union[ColumnSpec, Mapping[str, Any]]


def type_columns(dataset: Dataset, specs: Mapping[str, SpecLike]) -> Dataset:
    """Return a new Dataset with the requested columns renamed and retyped.

    Rules:
    - every spec key must name an existing column (ColumnNotFoundError)
    - renames are applied before typing and must not collide with any other
      column name (DuplicateNameError); labels follow the rename
    - categorical: values outside the level list become missing
    - numeric / date: unparsable values become missing
    - values lost to coercion are reported once per column through a
      TypeCoercionWarning, never raised

    The input dataset is not modified. Column order is preserved.
    """
    parsed = {name: _as_spec(name, spec) for name, spec in specs.items()}
    for name in parsed:
        dataset.require(name)

    renames = _plan_renames(dataset.columns, parsed)

    frame = dataset.frame.copy()
    types = dict(dataset.types)
    date_formats = dict(dataset.date_formats)
    labels = dataset.labels.copy()

    if renames:
        frame = frame.rename(columns=renames)
        types = {renames.get(k, k): v for k, v in types.items()}
        date_formats = {renames.get(k, k): v for k, v in date_formats.items()}
        labels.rename(renames)
        logger.debug(f"Renamed columns: {renames}")

    for original, spec in parsed.items():
        name = renames.get(original, original)
        typed, lost = coerce_series(frame[name], spec)
        frame[name] = typed
        types[name] = spec.type
        if spec.type is SemanticType.DATE:
            date_formats[name] = spec.format or DEFAULT_DATE_FORMAT
        else:
            date_formats.pop(name, None)

        if lost:
            logger.info(f"Column '{name}': {lost} value(s) could not be coerced to {spec.type.value}")
            warnings.warn(TypeCoercionWarning(name, lost, spec.type.value), stacklevel=2)

    logger.debug(f"Typed {len(parsed)} of {len(types)} columns")
    return Dataset(frame, types, labels, date_formats)


def coerce_series(series: pd.Series, spec: ColumnSpec) -> tuple[pd.Series, int]:
    """Coerce one column to the semantic type named by its ColumnSpec.

    Returns the typed series and how many non-missing values became missing.
    """
    before = int(series.notna().sum())
    st = spec.type

    if st.is_categorical:
        typed = _to_categorical(series, spec.levels, ordered=st is SemanticType.ORDINAL)
    elif st is SemanticType.NUMERIC:
        typed = pd.to_numeric(_stripped(series), errors="coerce").astype("float64")
    elif st is SemanticType.DATE:
        if pd.api.types.is_datetime64_any_dtype(series):
            typed = series.copy()
        else:
            typed = pd.to_datetime(_stripped(series), format=spec.format or DEFAULT_DATE_FORMAT, errors="coerce")
    else:
        values = series.astype(object)
        typed = values.where(values.isna(), values.map(str))

    typed = pd.Series(typed, index=series.index, name=series.name)
    return typed, before - int(typed.notna().sum())


def level_key(value: Any) -> str:
    """String form used to match a raw cell against categorical levels."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _to_categorical(series: pd.Series, levels: Optional[list[str]], *, ordered: bool) -> pd.Series:
    values = series.astype(object)
    keys = values.where(values.isna(), values.map(level_key))
    if levels is None:
        levels = sorted({k for k in keys.dropna()})
    levels = list(levels)
    # out-of-level values must already be missing when the Categorical is built
    keys = keys.where(keys.isin(levels))
    cat = pd.Categorical(keys, categories=levels, ordered=ordered)
    return pd.Series(cat, index=series.index, name=series.name)


def _stripped(series: pd.Series) -> pd.Series:
    values = series.astype(object)
    return values.where(values.isna(), values.map(lambda v: v.strip() if isinstance(v, str) else v))


def _plan_renames(columns: list[str], specs: Mapping[str, ColumnSpec]) -> dict[str, str]:
    existing = set(columns)
    renames: dict[str, str] = {}
    for old, spec in specs.items():
        new = spec.rename
        if not new or new == old:
            continue
        if new in existing:
            raise DuplicateNameError(f"Cannot rename '{old}' to '{new}': a column named '{new}' already exists.")
        if new in renames.values():
            raise DuplicateNameError(f"Cannot rename '{old}' to '{new}': another column is already renamed to '{new}'.")
        renames[old] = new
    return renames


def _as_spec(name: str, spec: SpecLike) -> ColumnSpec:
    if isinstance(spec, ColumnSpec):
        return spec
    try:
        return ColumnSpec.model_validate(spec)
    except ValidationError as e:
        raise ConfigError(f"Invalid spec for column '{name}': {e}") from e
