from __future__ import annotations

import pytest

from ads_prep.dataset import Dataset
from ads_prep.errors import ColumnNotFoundError
from ads_prep.labels import (
    get_label,
    get_value_labels,
    set_label,
    set_labels,
    set_value_labels,
    unlabeled_columns,
)


def test_set_and_get_label(raw_mpg: Dataset) -> None:
    set_label(raw_mpg, "hwy", "Highway miles per gallon")
    assert get_label(raw_mpg, "hwy") == "Highway miles per gallon"
    assert raw_mpg.descriptor("hwy").label == "Highway miles per gallon"


def test_missing_label_is_empty_string(raw_mpg: Dataset) -> None:
    assert get_label(raw_mpg, "cty") == ""


def test_unknown_column_raises(raw_mpg: Dataset) -> None:
    with pytest.raises(ColumnNotFoundError):
        set_label(raw_mpg, "mileage", "x")
    with pytest.raises(ColumnNotFoundError):
        get_label(raw_mpg, "mileage")
    # also usable as a KeyError by callers
    with pytest.raises(KeyError):
        get_value_labels(raw_mpg, "mileage")


def test_labels_are_plain_text(raw_mpg: Dataset) -> None:
    set_label(raw_mpg, "model", "<b>Model</b> name")
    assert get_label(raw_mpg, "model") == "<b>Model</b> name"


def test_labels_do_not_touch_cells(raw_mpg: Dataset) -> None:
    before = raw_mpg.frame.copy()
    set_label(raw_mpg, "year", "Year of manufacture")
    assert raw_mpg.frame.equals(before)


def test_set_labels_is_all_or_nothing(raw_mpg: Dataset) -> None:
    with pytest.raises(ColumnNotFoundError):
        set_labels(raw_mpg, {"cty": "City mpg", "mileage": "nope"})
    assert get_label(raw_mpg, "cty") == ""

    set_labels(raw_mpg, {"cty": "City mpg", "hwy": "Highway mpg"})
    assert get_label(raw_mpg, "cty") == "City mpg"
    assert get_label(raw_mpg, "hwy") == "Highway mpg"


def test_value_labels(raw_mpg: Dataset) -> None:
    set_value_labels(raw_mpg, "drv", {"f": "front-wheel drive", "r": "rear wheel drive", 4: "4wd"})
    labels = get_value_labels(raw_mpg, "drv")
    assert labels == {"f": "front-wheel drive", "r": "rear wheel drive", "4": "4wd"}

    # returned mapping is a copy
    labels["f"] = "changed"
    assert get_value_labels(raw_mpg, "drv")["f"] == "front-wheel drive"
    assert get_value_labels(raw_mpg, "cty") == {}


def test_unlabeled_columns_in_dataset_order(raw_mpg: Dataset) -> None:
    set_labels(raw_mpg, {c: c.upper() for c in raw_mpg.columns if c not in ("year", "cty")})
    assert unlabeled_columns(raw_mpg) == ["year", "cty"]

    set_label(raw_mpg, "cty", "")
    assert unlabeled_columns(raw_mpg) == ["year"]
