from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Mapping, Optional

import pandas as pd

from .errors import ColumnNotFoundError, DuplicateNameError

DEFAULT_DATE_FORMAT = "%Y-%m-%d"


class SemanticType(str, Enum):
    """
    Intended interpretation of a column's values.

    - NOMINAL: unordered categorical with a closed level set
    - ORDINAL: categorical whose level order is a total order
    - NUMERIC: floating point values
    - DATE: calendar dates parsed against a format
    - TEXT: free text
    """
    NOMINAL = "nominal"
    ORDINAL = "ordinal"
    NUMERIC = "numeric"
    DATE = "date"
    TEXT = "text"

    @property
    def is_categorical(self) -> bool:
        return self in (SemanticType.NOMINAL, SemanticType.ORDINAL)


@dataclass(frozen=True)
class ColumnDescriptor:
    """Read-only view of one column's name, semantic type, levels and label."""

    name: str
    semantic_type: SemanticType
    levels: tuple[str, ...] = ()
    label: str = ""


@dataclass
class LabelStore:
    """
    Side-table of column labels keyed by column name.

    Labels live here rather than on the column data so that renaming or
    retyping a column never loses or duplicates its metadata.
    """

    labels: dict[str, str] = field(default_factory=dict)
    value_labels: dict[str, dict[str, str]] = field(default_factory=dict)

    def copy(self) -> "LabelStore":
        return LabelStore(
            labels=dict(self.labels),
            value_labels={k: dict(v) for k, v in self.value_labels.items()},
        )

    def rename(self, mapping: Mapping[str, str]) -> None:
        self.labels = {mapping.get(k, k): v for k, v in self.labels.items()}
        self.value_labels = {mapping.get(k, k): v for k, v in self.value_labels.items()}


def infer_semantic_type(series: pd.Series) -> SemanticType:
    """Initial semantic type of an untyped column, derived from its pandas dtype."""
    if isinstance(series.dtype, pd.CategoricalDtype):
        return SemanticType.ORDINAL if series.cat.ordered else SemanticType.NOMINAL
    if pd.api.types.is_bool_dtype(series):
        return SemanticType.TEXT
    if pd.api.types.is_datetime64_any_dtype(series):
        return SemanticType.DATE
    if pd.api.types.is_numeric_dtype(series):
        return SemanticType.NUMERIC
    return SemanticType.TEXT


class Dataset:
    """
    Ordered named columns plus their semantic types and labels.

    Cells live in a pandas DataFrame. Pipeline stages never modify a
    Dataset's frame in place; they return a new Dataset instead. Only the
    label side-table is updated in place (see `ads_prep.labels`).
    """

    def __init__(
        self,
        frame: pd.DataFrame,
        types: Mapping[str, SemanticType],
        labels: Optional[LabelStore] = None,
        date_formats: Optional[Mapping[str, str]] = None,
    ) -> None:
        columns = [str(c) for c in frame.columns]
        dupes = sorted({c for c in columns if columns.count(c) > 1})
        if dupes:
            raise DuplicateNameError(f"Duplicate column names: {dupes}")

        missing = [c for c in columns if c not in types]
        extra = [c for c in types if c not in columns]
        if missing or extra:
            raise ValueError(f"Semantic types do not match columns (untyped={missing}, unknown={extra}).")

        resolved: dict[str, SemanticType] = {}
        for c in columns:
            st = SemanticType(types[c])
            if st.is_categorical and not isinstance(frame[c].dtype, pd.CategoricalDtype):
                raise ValueError(f"Column '{c}' is declared {st.value} but is not stored as a categorical.")
            resolved[c] = st

        self.frame = frame
        self.types = resolved
        self.labels = labels if labels is not None else LabelStore()
        self.date_formats: dict[str, str] = dict(date_formats or {})

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> "Dataset":
        """Wrap a raw DataFrame, inferring initial semantic types from dtypes."""
        frame = frame.copy()
        frame.columns = [str(c) for c in frame.columns]
        types = {c: infer_semantic_type(frame[c]) for c in frame.columns}
        return cls(frame, types)

    @property
    def columns(self) -> list[str]:
        return [str(c) for c in self.frame.columns]

    @property
    def n_rows(self) -> int:
        return int(self.frame.shape[0])

    def __len__(self) -> int:
        return self.n_rows

    def __contains__(self, name: object) -> bool:
        return name in self.types

    def __iter__(self) -> Iterator[str]:
        return iter(self.columns)

    def __repr__(self) -> str:
        return f"Dataset(rows={self.n_rows}, columns={self.columns})"

    def require(self, name: str) -> None:
        if name not in self.types:
            raise ColumnNotFoundError(name, self.columns)

    def column(self, name: str) -> pd.Series:
        self.require(name)
        return self.frame[name]

    def semantic_type(self, name: str) -> SemanticType:
        self.require(name)
        return self.types[name]

    def levels(self, name: str) -> tuple[str, ...]:
        if not self.semantic_type(name).is_categorical:
            return ()
        return tuple(str(c) for c in self.frame[name].cat.categories)

    def date_format(self, name: str) -> str:
        return self.date_formats.get(name, DEFAULT_DATE_FORMAT)

    def descriptor(self, name: str) -> ColumnDescriptor:
        return ColumnDescriptor(
            name=name,
            semantic_type=self.semantic_type(name),
            levels=self.levels(name),
            label=self.labels.labels.get(name, ""),
        )

    def descriptors(self) -> list[ColumnDescriptor]:
        return [self.descriptor(c) for c in self.columns]

    def copy(self) -> "Dataset":
        return Dataset(self.frame.copy(), dict(self.types), self.labels.copy(), dict(self.date_formats))

    def equals(self, other: "Dataset") -> bool:
        """Deep equality over cells, dtypes, types, labels and date formats."""
        return (
            self.columns == other.columns
            and self.frame.equals(other.frame)
            and self.types == other.types
            and self.labels == other.labels
            and self.date_formats == other.date_formats
        )
