from __future__ import annotations

__all__ = ["IDs"]


class IDs:
    class Store:
        PLOT_STATE = "plot-state"
        SELECTION_STATE = "selection-state"

    class Control:
        # Core selectors
        DATASET_SELECT = "dataset-select"
        X_SELECT = "x-attribute"
        Y_SELECT = "y-attribute"
        COLOR_SELECT = "color-attribute"
        BOX_SELECT = "boxplot-attribute"

        CLEAR_SELECTION_BTN = "clear-selection-btn"

        # Graphs
        SCATTER_GRAPH = "scatterplot"
        BOXPLOT_GRAPH = "boxplot"

        # Side outputs
        COLOR_KEY = "color-key"
        SELECTION_COUNT = "selection-count"
        LOAD_ERROR = "load-error"
        STATUS_BAR = "status-bar"
