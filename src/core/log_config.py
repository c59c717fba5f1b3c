"""Logging setup for whatever process embeds the service (UI controller, network session, tests)."""

import logging

from src.core.config import Settings, settings as default_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings | None = None) -> None:
    config = settings or default_settings
    logging.basicConfig(level=config.log_level.upper(), format=LOG_FORMAT)
