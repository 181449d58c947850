"""
Top-level package for the lasso browser.

Scatterplot with lasso selection driving a grouped boxplot summary.
Most code should import from submodules such as:
    lasso_browser.core
    lasso_browser.views
    lasso_browser.ui
"""

__all__: list[str] = []
