from __future__ import annotations

from lasso_browser.core.lasso import PointStyle
from lasso_browser.core.plot_state import PlotState, SelectionState


def test_plot_state_to_from_dict_roundtrip():
    st = PlotState(
        dataset_name="pokemon",
        load_id=3,
        x_attr="Attack",
        y_attr="Defense",
        color_attr="Type 1",
        box_attr="HP",
    )

    rebuilt = PlotState.from_dict(st.to_dict())

    assert rebuilt == st
    assert rebuilt.is_complete


def test_plot_state_with_error_is_incomplete():
    st = PlotState(dataset_name="broken", load_id=1, error="file not found")

    assert not st.is_complete
    assert PlotState.from_dict(st.to_dict()).error == "file not found"


def test_selection_goes_stale_after_reload():
    first = PlotState(dataset_name="iris", load_id=1)
    selection = SelectionState(dataset_name="iris", load_id=1, active=True, selected=[0, 2])

    assert selection.belongs_to(first)
    assert not selection.belongs_to(PlotState(dataset_name="iris", load_id=2))
    assert not selection.belongs_to(PlotState(dataset_name="penguins", load_id=1))


def test_selection_styles():
    inactive = SelectionState()
    active = SelectionState(active=True, selected=[1])

    assert inactive.styles(2) == [PointStyle.DEFAULT, PointStyle.DEFAULT]
    assert active.styles(3) == [PointStyle.NOT_SELECTED, PointStyle.SELECTED, PointStyle.NOT_SELECTED]


def test_cleared_selection_matches_plot_state():
    state = PlotState(dataset_name="iris", load_id=4)

    cleared = SelectionState.cleared(state)

    assert cleared.belongs_to(state)
    assert not cleared.active
    assert SelectionState.from_dict(cleared.to_dict()) == cleared
