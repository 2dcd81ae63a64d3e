from __future__ import annotations
import logging

from prepdesk.config import LOG_LEVEL

# Third-party loggers that flood the console at DEBUG
NOISY_LOGGERS = ("urllib3", "sqlalchemy.engine", "asyncio")


def setup_console_logging(level: int = LOG_LEVEL) -> None:
    """
    Configure console logging for the server and the CLI.

    Safe to call more than once: a second call only adjusts the level.
    """
    root = logging.getLogger()
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    if root.handlers:
        root.setLevel(level)
        return

    root.setLevel(level)
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root.addHandler(handler)
