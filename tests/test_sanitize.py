from __future__ import annotations

import pandas as pd
import pytest

from ads_prep.column_types import type_columns
from ads_prep.dataset import Dataset, SemanticType
from ads_prep.dictionary import build_dictionary
from ads_prep.export import (
    build_table_view,
    cell_strings,
    columns_needing_sanitization,
    placeholder_for,
    sanitize_for_export,
)
from ads_prep.labels import get_label, set_label


@pytest.fixture
def comments() -> Dataset:
    return Dataset.from_frame(
        pd.DataFrame(
            {
                "question": ["Does it come in green?", "a,b,c"],
                "model": ["a4", "civic"],
            }
        )
    )


def test_only_cells_with_delimiter_change(comments: Dataset) -> None:
    clean = sanitize_for_export(comments, ",")

    assert clean.frame["question"].tolist() == ["Does it come in green?", "a_comma_b_comma_c"]
    assert clean.frame["model"].tolist() == ["a4", "civic"]
    assert columns_needing_sanitization(comments, ",") == ["question"]


def test_original_dataset_is_untouched(comments: Dataset) -> None:
    before = comments.copy()
    sanitize_for_export(comments, ",")
    assert comments.equals(before)


def test_substitution_is_column_wide() -> None:
    ds = Dataset.from_frame(pd.DataFrame({"c": ["x,y", "p,q,r", "plain"], "d": ["1;2", "3", "4"]}))
    clean = sanitize_for_export(ds, ",")

    assert clean.frame["c"].tolist() == ["x_comma_y", "p_comma_q_comma_r", "plain"]
    assert clean.frame["d"].tolist() == ["1;2", "3", "4"]


def test_shape_is_preserved_and_missing_stays_missing() -> None:
    ds = Dataset.from_frame(pd.DataFrame({"c": ["a,b", None, "c"], "n": [1.0, None, 2.5]}))
    clean = sanitize_for_export(ds, ",")

    assert clean.frame.shape == ds.frame.shape
    assert clean.columns == ds.columns
    assert pd.isna(clean.frame["c"].iloc[1])
    assert pd.isna(clean.frame["n"].iloc[1])


def test_sanitizing_twice_equals_sanitizing_once(raw_mpg: Dataset, mpg_specs) -> None:
    ds = type_columns(raw_mpg, mpg_specs)
    for delimiter in [",", ";", ".", "(", "\t"]:
        once = sanitize_for_export(ds, delimiter)
        twice = sanitize_for_export(once, delimiter)
        assert twice.equals(once), delimiter


def test_no_cell_contains_delimiter_after_sanitizing(raw_mpg: Dataset, mpg_specs) -> None:
    ds = type_columns(raw_mpg, mpg_specs)
    clean = sanitize_for_export(ds, "(")

    for name in clean.columns:
        assert not cell_strings(clean, name).dropna().map(lambda s: "(" in s).any()
    assert clean.frame["trans"].iloc[0] == "auto_delim_l5)"


def test_categorical_levels_are_rewritten() -> None:
    ds = Dataset.from_frame(pd.DataFrame({"tag": ["a,b", "c", None]}))
    ds = type_columns(ds, {"tag": {"type": "nominal", "levels": ["a,b", "c"]}})
    set_label(ds, "tag", "Tag")

    clean = sanitize_for_export(ds, ",")

    assert isinstance(clean.frame["tag"].dtype, pd.CategoricalDtype)
    assert clean.levels("tag") == ("a_comma_b", "c")
    assert clean.frame["tag"].astype(object).tolist()[:2] == ["a_comma_b", "c"]
    assert pd.isna(clean.frame["tag"].iloc[2])
    assert get_label(clean, "tag") == "Tag"


def test_level_merge_is_rejected() -> None:
    ds = Dataset.from_frame(pd.DataFrame({"tag": ["a,b", "a_comma_b"]}))
    ds = type_columns(ds, {"tag": {"type": "nominal"}})

    with pytest.raises(ValueError):
        sanitize_for_export(ds, ",")


def test_numeric_and_date_columns_use_their_string_form() -> None:
    ds = Dataset.from_frame(pd.DataFrame({"displ": ["1.5", "2"], "sold": ["2008-01-02", None]}))
    ds = type_columns(ds, {"displ": {"type": "numeric"}, "sold": {"type": "date"}})

    clean = sanitize_for_export(ds, "-")
    assert clean.frame["sold"].iloc[0] == "2008_delim_01_delim_02"
    assert pd.isna(clean.frame["sold"].iloc[1])
    # substituted date column now holds strings and is typed as text
    assert clean.semantic_type("sold") is SemanticType.TEXT
    assert "sold" not in clean.date_formats
    # numeric column has no "-" and is left alone
    assert clean.frame["displ"].tolist() == [1.5, 2.0]
    assert clean.semantic_type("displ") is SemanticType.NUMERIC

    clean = sanitize_for_export(ds, ".")
    assert clean.frame["displ"].tolist() == ["1_delim_5", "2_delim_0"]
    assert clean.semantic_type("displ") is SemanticType.TEXT
    assert clean.semantic_type("sold") is SemanticType.DATE

    rows = {r.name: r for r in build_dictionary(clean)}
    assert rows["displ"].semantic_type is SemanticType.TEXT
    assert rows["displ"].missing_count == 0
    assert rows["displ"].distinct_count == 2


def test_unused_level_containing_delimiter_is_rewritten() -> None:
    ds = Dataset.from_frame(pd.DataFrame({"tag": ["c", "c", None]}))
    ds = type_columns(ds, {"tag": {"type": "nominal", "levels": ["a,b", "c"]}})

    assert columns_needing_sanitization(ds, ",") == ["tag"]
    clean = sanitize_for_export(ds, ",")
    assert clean.levels("tag") == ("a_comma_b", "c")
    assert clean.frame["tag"].astype(object).tolist()[:2] == ["c", "c"]

    view = build_table_view(ds, delimiter=",")
    assert view.columns[0].levels == ["a_comma_b", "c"]
    assert view.sanitized_columns == ["tag"]


def test_placeholder_tokens() -> None:
    assert placeholder_for(",") == "_comma_"
    assert placeholder_for(";") == "_semicolon_"
    assert placeholder_for("\t") == "_tab_"
    assert placeholder_for("|") == "_pipe_"
    assert placeholder_for("#") == "_delim_"
    for delimiter in [",", ";", "\t", "|", "#"]:
        assert delimiter not in placeholder_for(delimiter)


@pytest.mark.parametrize("delimiter", ["", "_", "d"])
def test_unusable_delimiters_are_rejected(delimiter: str, comments: Dataset) -> None:
    with pytest.raises(ValueError):
        sanitize_for_export(comments, delimiter)
