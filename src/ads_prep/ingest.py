from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from .dataset import Dataset
from .errors import DuplicateNameError

logger = logging.getLogger(__name__)

# Cells read as missing. Everything else is kept as raw text until typed.
NA_VALUES = ["", "NA"]


def load_csv(csv_path: Path, *, delimiter: str = ",") -> Dataset:
    """
    Read a delimited file into a raw Dataset.

    All cells are read as strings so that typing decisions are made by the
    Column Typer only. Empty cells and "NA" become missing values.
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV not found: {csv_path}")

    # pandas silently de-duplicates header names ("a", "a.1"); check the raw header first.
    header = pd.read_csv(csv_path, sep=delimiter, header=None, nrows=1, dtype=str, keep_default_na=False)
    names = [str(v) for v in header.iloc[0].tolist()] if not header.empty else []
    dupes = sorted({n for n in names if names.count(n) > 1})
    if dupes:
        raise DuplicateNameError(f"Duplicate column names in {csv_path.name}: {dupes}")

    df = pd.read_csv(csv_path, sep=delimiter, dtype=str, keep_default_na=False, na_values=NA_VALUES)
    logger.info(f"Loaded {csv_path}: {df.shape[0]} rows, {df.shape[1]} columns")
    return Dataset.from_frame(df)
