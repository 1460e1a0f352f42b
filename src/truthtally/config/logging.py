"""Root logger setup shared by the CLI and trigger entry points."""

from __future__ import annotations

import logging
from typing import Final

from .env import env_log_level

LOG_LEVEL_ENV: Final[str] = "TRUTHTALLY_LOG_LEVEL"
# chatty below WARNING; only let them through when debugging
_LIBRARY_LOGGERS: Final[tuple[str, ...]] = ("sqlalchemy.engine", "sqlalchemy.pool")


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Configure the root logger once.

    Without an explicit ``level`` the ``TRUTHTALLY_LOG_LEVEL`` variable decides,
    falling back to INFO. Pass ``force=True`` to replace handlers installed earlier.
    """

    resolved = env_log_level(LOG_LEVEL_ENV, logging.INFO) if level is None else level
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    if resolved > logging.DEBUG:
        for name in _LIBRARY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
