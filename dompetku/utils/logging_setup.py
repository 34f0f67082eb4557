# dompetku/utils/logging_setup.py
import logging
import os
import sys
from typing import IO, Union

_PKG_LOGGER_NAME = "dompetku"
_CONFIGURED = False


def _parse_level(level: Union[int, str, None]) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    if level is None:
        env_val = os.getenv("DOMPETKU_LOG_LEVEL")
        if env_val:
            return _parse_level(env_val)
    return logging.INFO


def configure_logging(level: Union[int, str, None] = None, fmt: Union[str, None] = None, stream: IO[str] = sys.stderr) -> None:
    """Pasang satu StreamHandler di logger 'dompetku'. Dipanggil sekali saat startup."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setLevel(_parse_level(level))
    handler.setFormatter(logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s"))

    logger.setLevel(_parse_level(level))
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Ambil logger; modul library tidak pernah memasang handler sendiri."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
