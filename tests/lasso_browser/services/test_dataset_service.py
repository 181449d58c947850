from pathlib import Path

import pytest

from lasso_browser.config.model import DatasetConfig
from lasso_browser.core.dataset_loader import load_csv, resolve_dataset_path
from lasso_browser.core.exceptions import LoadError
from lasso_browser.services.dataset_service import DatasetService

CSV = "#,Name,Type 1,HP,Attack\n1,Bulbasaur,Grass,45,49\n4,Charmander,Fire,39,52\n7,Squirtle,Water,44,48\n"


@pytest.fixture(autouse=True)
def _no_data_root_override(monkeypatch):
    monkeypatch.delenv("LASSO_BROWSER_DATA_ROOT", raising=False)


def _make_service(tmp_path: Path) -> DatasetService:
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "pokemon.csv").write_text(CSV)

    cfg = DatasetConfig(
        raw={"name": "pokemon", "label": "Pokemon", "file": "data/pokemon.csv"},
        source_path=tmp_path / "pokemon.json",
        index=0,
    )
    return DatasetService({"pokemon": cfg}, data_root=tmp_path)


def test_service_loads_and_caches(tmp_path):
    service = _make_service(tmp_path)

    ds = service.load("pokemon")

    assert len(ds) == 3
    assert ds.attributes == ["#", "Name", "Type 1", "HP", "Attack"]
    assert ds[0]["Name"] == "Bulbasaur"
    assert service.is_loaded("pokemon")
    assert service["pokemon"] is ds


def test_service_partition_excludes_identifiers(tmp_path):
    service = _make_service(tmp_path)

    partition = service.partition("pokemon")

    assert partition.quantitative == ("HP", "Attack")
    assert partition.categorical == ("#", "Name", "Type 1")


def test_service_mapping_interface(tmp_path):
    service = _make_service(tmp_path)

    assert list(service) == ["pokemon"]
    assert len(service) == 1
    assert "pokemon" in service
    assert "iris" not in service
    assert service.label("pokemon") == "Pokemon"
    assert service.label("unregistered") == "unregistered"


def test_unregistered_name_falls_back_to_test_data(tmp_path):
    service = _make_service(tmp_path)
    test_dir = tmp_path / "testing" / "data"
    test_dir.mkdir(parents=True)
    (test_dir / "sample.csv").write_text("a,b\n1,x\n")

    ds = service.load("sample")

    assert ds.name == "sample"
    assert service.path_for("sample") == tmp_path / "testing" / "data" / "sample.csv"


def test_missing_file_raises_load_error(tmp_path):
    service = _make_service(tmp_path)

    with pytest.raises(LoadError) as exc:
        service.load("nope")
    assert exc.value.dataset_name == "nope"
    assert not service.is_loaded("nope")


def test_evict_forces_reload(tmp_path):
    service = _make_service(tmp_path)
    first = service.load("pokemon")

    service.evict("pokemon")

    assert not service.is_loaded("pokemon")
    assert service.load("pokemon") is not first


def test_env_var_overrides_data_root(tmp_path, monkeypatch):
    monkeypatch.setenv("LASSO_BROWSER_DATA_ROOT", str(tmp_path / "elsewhere"))

    path = resolve_dataset_path("x", {}, data_root=tmp_path)

    assert path == tmp_path / "elsewhere" / "testing" / "data" / "x.csv"


def test_absolute_paths_are_used_as_is(tmp_path):
    cfg = DatasetConfig(raw={"name": "abs", "file": str(tmp_path / "abs.csv")}, source_path=tmp_path, index=0)

    assert resolve_dataset_path("abs", {"abs": cfg}, data_root=Path("/ignored")) == tmp_path / "abs.csv"


def test_load_csv_keeps_values_as_strings(tmp_path):
    path = tmp_path / "t.csv"
    path.write_text("code,label\n007,NA\n,x\n")

    ds = load_csv("t", path)

    assert ds[0]["code"] == "007"
    assert ds[0]["label"] == "NA"
    assert ds[1]["code"] == ""


def test_load_csv_header_only_gives_empty_dataset(tmp_path):
    path = tmp_path / "t.csv"
    path.write_text("a,b\n")

    ds = load_csv("t", path)

    assert len(ds) == 0
    assert ds.attributes == ["a", "b"]


def test_load_csv_empty_file_raises(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("")

    with pytest.raises(LoadError):
        load_csv("empty", path)


def test_load_csv_malformed_file_raises(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text('a,b\n1,2\n"unterminated,3\n')

    with pytest.raises(LoadError):
        load_csv("bad", path)


def test_registered_dataset_without_file_raises_load_error(tmp_path):
    cfg = DatasetConfig(raw={"name": "nofile", "label": "No file"}, source_path=tmp_path / "nofile.json", index=0)
    service = DatasetService({"nofile": cfg}, data_root=tmp_path)

    with pytest.raises(LoadError) as exc:
        service.load("nofile")
    assert "nofile.json" in str(exc.value)
