"""Service log configuration."""

from __future__ import annotations

import logging
import sys

from dynamic_agent.config import LoggingConfig


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Attach a single stdout handler to the root logger."""
    config = config or LoggingConfig()
    level = getattr(logging, config.level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(config.format))
    root_logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("langchain").setLevel(logging.WARNING)
