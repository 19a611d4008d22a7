"""
Catalog RAG - Logging
======================
Logger factory shared by the API, the query engine and the CLI.

Verbosity comes from ``settings.LOG_LEVEL`` when it is set, otherwise
from ``settings.ENV``:
  • ``"dev"``  → DEBUG level
  • ``"prod"`` → WARNING level

The Gemini client stack (``httpx``, ``httpcore``, ``google``, ``grpc``)
logs every request at INFO/DEBUG.  Those loggers are held at WARNING so
search traces stay readable in dev mode.

Usage:
    from catalog_rag.src.utils.logger import get_logger
    logger = get_logger(__name__)
    logger.info("[SEARCH] ...")
"""

import logging
import sys

from catalog_rag.config.settings import Settings, settings

_ENV_LEVEL_MAP = {
    "dev": logging.DEBUG,
    "prod": logging.WARNING,
}
_NOISY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "urllib3", "google", "grpc")
_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%H:%M:%S"


def resolve_level(config: Settings) -> int:
    """Explicit ``LOG_LEVEL`` wins; otherwise the ``ENV`` default."""
    if config.LOG_LEVEL is not None:
        return logging.getLevelName(config.LOG_LEVEL)
    return _ENV_LEVEL_MAP[config.ENV]


def quiet_provider_loggers(level: int = logging.WARNING) -> None:
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level)


_DEFAULT_LEVEL = resolve_level(settings)
quiet_provider_loggers(max(_DEFAULT_LEVEL, logging.WARNING))


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Return a named logger writing to stdout.

    Args:
        name:  Typically ``__name__`` of the calling module.
        level: Explicit level; defaults to ``resolve_level(settings)``.
    """
    resolved_level = level if level is not None else _DEFAULT_LEVEL
    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(resolved_level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(resolved_level)
        console_handler.setFormatter(logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT))
        logger.addHandler(console_handler)

        # Keep records off the root logger so uvicorn does not print them twice
        logger.propagate = False

    return logger
