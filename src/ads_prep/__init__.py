"""Analytic data set preparation.

raw dataset -> type_columns -> labels -> {build_dictionary, sanitize_for_export -> build_table_view}
"""

from .column_types import type_columns
from .dataset import ColumnDescriptor, Dataset, LabelStore, SemanticType
from .dictionary import DictionaryRow, LevelFrequency, LevelRemainder, build_dictionary
from .errors import AdsPrepError, ColumnNotFoundError, ConfigError, DuplicateNameError, TypeCoercionWarning
from .export import TableView, build_table_view, sanitize_for_export
from .ingest import load_csv
from .labels import get_label, get_value_labels, set_label, set_labels, set_value_labels, unlabeled_columns
from .models import ColumnConfig, ColumnSpec, PrepConfig

__version__ = "0.1.0"

__all__ = [
    "AdsPrepError",
    "ColumnConfig",
    "ColumnDescriptor",
    "ColumnNotFoundError",
    "ColumnSpec",
    "ConfigError",
    "Dataset",
    "DictionaryRow",
    "DuplicateNameError",
    "LabelStore",
    "LevelFrequency",
    "LevelRemainder",
    "PrepConfig",
    "SemanticType",
    "TableView",
    "TypeCoercionWarning",
    "build_dictionary",
    "build_table_view",
    "get_label",
    "get_value_labels",
    "load_csv",
    "sanitize_for_export",
    "set_label",
    "set_labels",
    "set_value_labels",
    "type_columns",
    "unlabeled_columns",
]
