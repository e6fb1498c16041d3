from __future__ import annotations

import logging


def configure_logging(level: int | str = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger with a terse timestamped format."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=force,
    )
