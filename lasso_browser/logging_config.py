from __future__ import annotations

import logging
import os
from typing import Optional, Union

from pythonjsonlogger import jsonlogger

LOG_FORMAT_ENV = "LASSO_BROWSER_LOG_FORMAT"
LOG_LEVEL_ENV = "LASSO_BROWSER_LOG_LEVEL"

# Per-request access lines from the dev server drown out selection events
QUIET_LOGGERS = ("werkzeug",)


def resolve_log_format(force_format: Optional[str] = None) -> str:
    """'json' or 'plain'; anything unrecognised falls back to 'json'."""
    mode = (force_format or os.getenv(LOG_FORMAT_ENV, "json")).lower()
    return mode if mode in ("json", "plain") else "json"


def resolve_log_level(level: Union[int, str, None] = None) -> int:
    """
    Numeric level from an argument, LASSO_BROWSER_LOG_LEVEL or INFO.

    Level names are case-insensitive; unknown names fall back to INFO.
    """
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
        level: Union[int, str, None] = None,
        force_format: Optional[str] = None,
) -> None:
    """
    Configure the root logger for the lasso browser.

    JSON records carry the structured `extra` fields the app logs with
    (dataset, n_selected, n_groups, duration_ms) as top-level keys; plain
    text is meant for local runs.
    """
    root = logging.getLogger()
    root.setLevel(resolve_log_level(level))

    handler = logging.StreamHandler()
    if resolve_log_format(force_format) == "plain":
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-7s %(name)s | %(message)s")
        )
    else:
        handler.setFormatter(
            jsonlogger.JsonFormatter(
                "%(asctime)s %(levelname)s %(name)s %(message)s",
                rename_fields={"asctime": "ts", "levelname": "level", "name": "logger"},
            )
        )

    # Replace any existing handlers to avoid duplicate logs
    root.handlers.clear()
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))
