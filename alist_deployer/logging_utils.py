from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LOG_PATH = "/var/log/alist-deployer.log"


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
    console: Optional[Console] = None,
) -> str:
    """Attach the deployer's handlers to the root logger.

    The file handler keeps timestamped records of every command and decision
    for later support; the RichHandler shows the operator the same messages
    with green, yellow and red levels. Non-root dry runs cannot open
    /var/log, in which case ./alist-deployer.log is used instead.

    Returns the log file path actually opened.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Second and later calls keep the first call's handlers.
    if getattr(logger, "_alist_deployer_configured", False):
        return getattr(logger, "_alist_deployer_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: logging.Handler
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
    except OSError:
        fallback = str(Path.cwd() / "alist-deployer.log")
        file_handler = logging.FileHandler(fallback)
        chosen_path = fallback
    file_handler.setFormatter(fmt)
    handlers.append(file_handler)

    if also_console:
        rich_handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        rich_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(rich_handler)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_alist_deployer_configured", True)
    setattr(logger, "_alist_deployer_log_path", chosen_path)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
