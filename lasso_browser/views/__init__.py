from .scatter_view import ScatterView
from .boxplot_view import BoxplotView

__all__ = ["ScatterView", "BoxplotView"]
