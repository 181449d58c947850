from pathlib import Path

import pytest

from lasso_browser.config.model import DatasetConfig, GlobalConfig
from lasso_browser.core.plot_state import PlotState, SelectionState
from lasso_browser.services.dataset_service import DatasetService
from lasso_browser.ui.callbacks.callbacks_dataset import apply_attribute_choice, load_plot_state
from lasso_browser.ui.callbacks.callbacks_render import render_boxplot, render_scatter, selection_count_text
from lasso_browser.ui.callbacks.callbacks_selection import lasso_vertices, selection_from_gesture
from lasso_browser.ui.callbacks.callbacks_utils import try_parse_plot_state, try_parse_selection_state
from lasso_browser.ui.config import AppConfig

# Screen positions on the default canvas: (0,0)->(50,350), (10,10)->(550,50), (5,5)->(300,200)
TINY_CSV = "x,y,g,v\n0,0,A,1\n10,10,B,2\n5,5,A,3\n"
WHOLE_CANVAS = {"lassoPoints": {"x": [0, 600, 600, 0], "y": [0, 0, 400, 400]}}


@pytest.fixture(autouse=True)
def _no_data_root_override(monkeypatch):
    monkeypatch.delenv("LASSO_BROWSER_DATA_ROOT", raising=False)


def _make_ctx(tmp_path: Path) -> AppConfig:
    (tmp_path / "tiny.csv").write_text(TINY_CSV)
    (tmp_path / "nocat.csv").write_text("a,b\n1,2\n3,4\n")

    cfg_by_name = {
        name: DatasetConfig(raw={"name": name, "file": f"{name}.csv"}, source_path=tmp_path, index=i)
        for i, name in enumerate(["tiny", "nocat", "missing"])
    }
    cfg_by_name["nofile"] = DatasetConfig(raw={"name": "nofile"}, source_path=tmp_path / "nofile.json", index=3)
    datasets = DatasetService(cfg_by_name, data_root=tmp_path)
    return AppConfig(
        config_root=tmp_path,
        global_config=GlobalConfig(data_root=tmp_path),
        datasets=datasets,
        dataset_names=list(cfg_by_name),
        default_dataset="tiny",
    )


def test_lasso_vertices_from_selected_data():
    assert lasso_vertices(WHOLE_CANVAS) == [(0.0, 0.0), (600.0, 0.0), (600.0, 400.0), (0.0, 400.0)]


def test_lasso_vertices_without_lasso_path():
    assert lasso_vertices(None) is None
    assert lasso_vertices({"points": []}) is None
    assert lasso_vertices({"range": {"x": [0, 1], "y": [0, 1]}}) is None


def test_load_plot_state_picks_defaults_and_bumps_load_id(tmp_path):
    ctx = _make_ctx(tmp_path)

    state, partition = load_plot_state(ctx, "tiny", PlotState(dataset_name="tiny", load_id=4))

    assert state.load_id == 5
    assert (state.x_attr, state.y_attr, state.color_attr, state.box_attr) == ("x", "y", "g", "x")
    assert partition.quantitative == ("x", "y", "v")
    assert state.error is None


def test_load_plot_state_reports_missing_file(tmp_path):
    ctx = _make_ctx(tmp_path)

    state, partition = load_plot_state(ctx, "missing", None)

    assert state.load_id == 1
    assert "missing" in state.error
    assert not state.is_complete
    assert partition.quantitative == ()


def test_load_plot_state_requires_both_attribute_families(tmp_path):
    ctx = _make_ctx(tmp_path)

    state, _ = load_plot_state(ctx, "nocat", None)

    assert "categorical" in state.error


def test_apply_attribute_choice(tmp_path):
    ctx = _make_ctx(tmp_path)
    state, _ = load_plot_state(ctx, "tiny", None)

    updated = apply_attribute_choice(ctx, state, "v", "y", "g", "v")

    assert updated.x_attr == "v" and updated.box_attr == "v"
    assert updated.load_id == state.load_id
    # Categorical attributes are not allowed on an axis
    assert apply_attribute_choice(ctx, state, "g", "y", "g", "v") is None
    # Values left over from another dataset
    assert apply_attribute_choice(ctx, state, "HP", "y", "g", "v") is None


def test_selection_from_gesture_commits_lasso(tmp_path):
    ctx = _make_ctx(tmp_path)
    state, _ = load_plot_state(ctx, "tiny", None)

    selection = selection_from_gesture(ctx, state, lasso_vertices(WHOLE_CANVAS))

    assert selection.active
    assert selection.selected == [0, 1, 2]
    assert selection.belongs_to(state)
    assert selection_count_text(state, selection) == "Selected Points: 3"


def test_selection_from_gesture_without_path_clears(tmp_path):
    ctx = _make_ctx(tmp_path)
    state, _ = load_plot_state(ctx, "tiny", None)

    selection = selection_from_gesture(ctx, state, None)

    assert not selection.active
    assert selection.selected == []
    assert selection_count_text(state, selection) == ""


def test_selection_count_hidden_for_stale_selection():
    state = PlotState(dataset_name="tiny", load_id=2)
    stale = SelectionState(dataset_name="tiny", load_id=1, active=True, selected=[0])

    assert selection_count_text(state, stale) == ""
    assert selection_count_text(None, stale) == ""


def test_render_scatter_and_boxplot(tmp_path):
    ctx = _make_ctx(tmp_path)
    state, _ = load_plot_state(ctx, "tiny", None)
    selection = selection_from_gesture(ctx, state, lasso_vertices(WHOLE_CANVAS))

    scatter = render_scatter(ctx, state, selection)
    boxplot = render_boxplot(ctx, state, selection)

    assert len(scatter.data[0].x) == 3
    # Two groups of fewer than five values: markers only
    assert [trace.type for trace in boxplot.data] == ["scatter", "scatter"]
    # Same color per group in both plots
    assert boxplot.data[0].marker.color == scatter.data[0].marker.color[0]


def test_render_with_failed_load_shows_message(tmp_path):
    ctx = _make_ctx(tmp_path)
    state, _ = load_plot_state(ctx, "missing", None)

    fig = render_scatter(ctx, state, SelectionState.cleared(state))

    assert len(fig.data) == 0
    assert "could not be shown" in fig.layout.annotations[0].text


def test_store_parsing_is_lenient():
    assert try_parse_plot_state(None) is None
    assert try_parse_plot_state({}) is None
    assert try_parse_plot_state({"dataset_name": "x", "load_id": "oops"}) is None
    assert try_parse_selection_state("junk") == SelectionState()
    assert try_parse_selection_state({"selected": ["a"]}) == SelectionState()


def test_load_plot_state_reports_entry_without_file(tmp_path):
    ctx = _make_ctx(tmp_path)

    state, partition = load_plot_state(ctx, "nofile", None)

    assert "no 'file' or 'path'" in state.error
    assert not state.is_complete
    assert partition.categorical == ()
