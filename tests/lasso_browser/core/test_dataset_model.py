from __future__ import annotations

import math

import pandas as pd
import pytest

from lasso_browser.core.attributes import AttributePartition, classify_attributes
from lasso_browser.core.dataset import Dataset, DatasetModel
from lasso_browser.core.exceptions import AttributeMismatchError, LoadError


def _make_pokemon_like():
    return Dataset.from_records(
        "pokemon",
        [
            {"#": "1", "Name": "Bulbasaur", "Type 1": "Grass", "Type 2": "Poison", "Total": "318", "Legendary": "False"},
            {"#": "4", "Name": "Charmander", "Type 1": "Fire", "Type 2": "", "Total": "309", "Legendary": "False"},
            {"#": "150", "Name": "Mewtwo", "Type 1": "Psychic", "Type 2": "", "Total": " 680 ", "Legendary": "True"},
        ],
    )


def test_classification_partitions_every_attribute():
    ds = _make_pokemon_like()

    partition = classify_attributes(ds)

    assert partition.quantitative == ("Total",)
    assert partition.categorical == ("#", "Name", "Type 1", "Type 2", "Legendary")
    assert set(partition.quantitative) | set(partition.categorical) == set(ds.attributes)


def test_excluded_identifier_columns_are_configurable():
    partition = classify_attributes(_make_pokemon_like(), excluded=())

    assert partition.quantitative == ("#", "Total")
    assert partition.kind_of("#") == "quantitative"
    with pytest.raises(KeyError):
        partition.kind_of("missing")


def test_nan_strings_are_not_numeric():
    ds = Dataset.from_records("t", [{"a": "1"}, {"a": "NaN"}])

    assert classify_attributes(ds).categorical == ("a",)


def test_dataset_without_rows_classifies_everything_quantitative():
    ds = Dataset("empty", pd.DataFrame(columns=["a", "b"]))

    assert len(ds) == 0
    assert classify_attributes(ds) == AttributePartition(("a", "b"), ())


def test_rows_are_read_only_and_stable():
    ds = _make_pokemon_like()

    assert ds[0] is ds.rows[0]
    assert list(ds)[2]["Name"] == "Mewtwo"
    with pytest.raises(TypeError):
        ds[0]["Name"] = "Ivysaur"


def test_numeric_coerces_and_strict_variant_reports_rows():
    ds = Dataset.from_records("t", [{"a": "1.5"}, {"a": "x"}, {"a": "2"}])

    values = ds.numeric("a")
    assert values[0] == 1.5 and math.isnan(values[1]) and values[2] == 2.0

    with pytest.raises(AttributeMismatchError) as exc:
        ds.require_numeric("a")
    assert exc.value.bad_rows == [1]


def test_unknown_attribute_raises_key_error():
    with pytest.raises(KeyError):
        _make_pokemon_like().column("Speed")


def test_model_swaps_dataset_on_complete_load():
    model = DatasetModel()
    ds = _make_pokemon_like()

    ticket = model.begin_load("pokemon")
    assert model.is_loading
    assert model.dataset is None

    assert model.complete_load(ticket, ds)
    assert model.dataset is ds
    assert model.partition.quantitative == ("Total",)
    assert model.generation == ticket.generation
    assert not model.is_loading


def test_stale_load_is_ignored():
    model = DatasetModel()
    old = model.begin_load("old")
    new = model.begin_load("new")

    newer_ds = Dataset.from_records("new", [{"a": "1"}])
    assert model.complete_load(new, newer_ds)
    assert not model.complete_load(old, Dataset.from_records("old", [{"b": "2"}]))

    assert model.dataset is newer_ds


def test_failed_load_keeps_previous_dataset():
    model = DatasetModel()
    first = model.begin_load("ok")
    ds = Dataset.from_records("ok", [{"a": "1"}])
    model.complete_load(first, ds)

    ticket = model.begin_load("broken")
    error = LoadError("broken", "file not found")
    assert model.fail_load(ticket, error)

    assert model.dataset is ds
    assert model.error is error
    assert not model.is_loading


def test_infinite_values_are_not_quantitative():
    ds = Dataset.from_records("t", [{"a": "1", "b": "2"}, {"a": "inf", "b": "3"}, {"a": "-inf", "b": "4"}])

    assert classify_attributes(ds) == AttributePartition(("b",), ("a",))
    values = ds.numeric("a")
    assert values[0] == 1.0
    assert math.isnan(values[1]) and math.isnan(values[2])


def test_column_with_empty_cells_is_categorical():
    ds = Dataset.from_records("t", [{"a": "1", "b": "1"}, {"a": "", "b": "2"}, {"a": "3", "b": " "}])

    assert classify_attributes(ds) == AttributePartition((), ("a", "b"))
