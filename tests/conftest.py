from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from ads_prep.dataset import Dataset

MPG_COLUMNS = ["manufacturer", "model", "displ", "year", "cyl", "trans", "drv", "cty", "hwy", "fl", "class"]

MPG_ROWS = [
    ("audi", "a4", "1.8", "1999", "4", "auto(l5)", "f", "18", "29", "p", "compact"),
    ("audi", "a4", "2.0", "2008", "4", "manual(m6)", "f", "20", "31", "p", "compact"),
    ("chevrolet", "c1500 suburban 2wd", "5.3", "2008", "8", "auto(l4)", "r", "14", "20", "r", "suv"),
    ("dodge", "dakota pickup 4wd", "3.7", "2008", "6", "manual(m6)", "4", "15", "19", "r", "pickup"),
    ("ford", "mustang", "4.0", "1999", "6", "auto(l5)", "r", "15", "21", "r", "subcompact"),
    ("honda", "civic", "1.6", "1999", "4", "manual(m5)", "f", "28", "33", "r", "subcompact"),
    ("jeep", "grand cherokee 4wd", "4.7", "2008", "8", "auto(l5)", "4", "14", "19", "r", "suv"),
    ("toyota", "camry", "2.2", "1999", "4", "manual(m5)", "f", "21", "29", "r", "midsize"),
    ("volkswagen", "jetta", "2.0", "2008", "4", "auto(s6)", "f", "22", "29", "p", "compact"),
    ("nissan", "altima", "2.5", "2008", "4", "manual(m6)", "f", "23", "32", "r", "midsize"),
]


@pytest.fixture
def mpg_frame() -> pd.DataFrame:
    """A small slice of the fuel economy sample data, every cell as raw text."""
    return pd.DataFrame(MPG_ROWS, columns=MPG_COLUMNS)


@pytest.fixture
def raw_mpg(mpg_frame: pd.DataFrame) -> Dataset:
    return Dataset.from_frame(mpg_frame)


@pytest.fixture
def mpg_specs() -> dict[str, dict[str, object]]:
    return {
        "displ": {"type": "numeric"},
        "year": {"type": "ordinal", "levels": ["1999", "2008"]},
        "cyl": {"type": "ordinal", "levels": ["4", "5", "6", "8"]},
        "drv": {"type": "nominal", "levels": ["f", "r", "4"]},
        "cty": {"type": "numeric"},
        "hwy": {"type": "numeric"},
        "class": {"type": "nominal", "rename": "car_class"},
    }


@pytest.fixture
def demo_with_missing(mpg_frame: pd.DataFrame) -> tuple[pd.DataFrame, int]:
    """mpg slice with random missing values in `hwy` (seeded, for demonstration only).

    Returns the frame and how many cells were blanked.
    """
    rng = np.random.default_rng(42)
    mask = rng.random(len(mpg_frame)) < 0.3
    frame = mpg_frame.copy()
    frame.loc[mask, "hwy"] = None
    return frame, int(mask.sum())


@pytest.fixture
def mpg_csv(tmp_path: Path, mpg_frame: pd.DataFrame) -> Path:
    path = tmp_path / "mpg.csv"
    mpg_frame.to_csv(path, index=False)
    return path
