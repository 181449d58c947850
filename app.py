import logging
import os
import socket
from pathlib import Path

from lasso_browser.logging_config import configure_logging
from lasso_browser.ui.dash_app import create_dash_app

configure_logging()
logger = logging.getLogger("lasso_browser.app")

# Config lives next to this file unless LASSO_BROWSER_CONFIG points elsewhere
CONFIG_ROOT = Path(os.getenv("LASSO_BROWSER_CONFIG", Path(__file__).resolve().parent / "config"))
PORT_SEARCH_SPAN = 100

app = create_dash_app(CONFIG_ROOT)
server = app.server


def port_is_free(port: int, host: str = "localhost") -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        return s.connect_ex((host, port)) != 0


def find_free_port(start_port: int, span: int = PORT_SEARCH_SPAN) -> int:
    """First free port in [start_port, start_port + span), else start_port."""
    for port in range(start_port, start_port + span):
        if port_is_free(port):
            return port
    logger.warning("No free port found", extra={"start_port": start_port, "span": span})
    return start_port


if __name__ == "__main__":
    preferred_port = int(os.getenv("PORT", "8050"))
    final_port = find_free_port(preferred_port)
    debug = os.getenv("DEBUG", "0") == "1"

    if final_port != preferred_port:
        logger.warning(
            "Preferred port taken",
            extra={"preferred_port": preferred_port, "port": final_port},
        )
    logger.info(
        "Starting lasso browser",
        extra={"config_root": str(CONFIG_ROOT), "port": final_port, "debug": debug},
    )
    app.run(host="0.0.0.0", port=final_port, debug=debug)
