"""Label Store operations.

Labels are plain text kept in the dataset's side-table, keyed by column
name. Nothing here interprets markup; presenters may escape as they see fit.
"""

from __future__ import annotations

from typing import Any, Mapping

from .dataset import Dataset


def set_label(dataset: Dataset, column_name: str, label_text: str) -> None:
    dataset.require(column_name)
    dataset.labels.labels[column_name] = str(label_text)


def get_label(dataset: Dataset, column_name: str) -> str:
    """Label of a column, or "" if it was never labelled."""
    dataset.require(column_name)
    return dataset.labels.labels.get(column_name, "")


def set_labels(dataset: Dataset, mapping: Mapping[str, str]) -> None:
    """Set several labels at once. Nothing is applied if any column is unknown."""
    for name in mapping:
        dataset.require(name)
    for name, text in mapping.items():
        dataset.labels.labels[name] = str(text)


def set_value_labels(dataset: Dataset, column_name: str, mapping: Mapping[Any, str]) -> None:
    """Attach labels to individual values (e.g. "f" -> "front-wheel drive")."""
    dataset.require(column_name)
    dataset.labels.value_labels[column_name] = {str(k): str(v) for k, v in mapping.items()}


def get_value_labels(dataset: Dataset, column_name: str) -> dict[str, str]:
    dataset.require(column_name)
    return dict(dataset.labels.value_labels.get(column_name, {}))


def unlabeled_columns(dataset: Dataset) -> list[str]:
    """Columns that never received a label, in dataset order."""
    return [c for c in dataset.columns if c not in dataset.labels.labels]
