"""Logging configuration for programs that read or write presets.

The codec modules only create loggers under ``phaseplant``. Their debug
records trace the byte offset of every table and snapin, which is the
quickest way to find where a file stops making sense. ``LOG_LEVEL`` sets the
level of the whole process and ``PHASEPLANT_LOG_LEVEL`` can raise or lower
the codec loggers on their own.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Tuple

CODEC_LOGGER = "phaseplant"
FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _resolve(variable: str, fallback: Optional[str]) -> Tuple[Optional[int], Optional[str]]:
    """Level named by an environment variable, and the name when it is unknown."""
    level_name = os.environ.get(variable, fallback)
    if level_name is None:
        return None, None
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        return None, level_name.upper()
    return level, None


def configure_logging(default_level: str = "WARNING", codec_level: Optional[str] = None) -> int:
    """Configure process-wide logging and return the resolved root level.

    ``codec_level`` applies to the ``phaseplant`` loggers only and is
    overridden by ``PHASEPLANT_LOG_LEVEL``. Without either they follow the
    root level.
    """
    level, invalid_level = _resolve("LOG_LEVEL", default_level)
    if level is None:
        level = logging.getLevelName(default_level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logging.basicConfig(
        level=level,
        format=FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )

    codec, invalid_codec = _resolve("PHASEPLANT_LOG_LEVEL", codec_level)
    logging.getLogger(CODEC_LOGGER).setLevel(codec if codec is not None else logging.NOTSET)

    logger = logging.getLogger(__name__)
    if invalid_level is not None:
        logger.warning("Invalid LOG_LEVEL '%s'; using %s",
                       invalid_level, logging.getLevelName(level))
    if invalid_codec is not None:
        logger.warning("Invalid PHASEPLANT_LOG_LEVEL '%s'; codec loggers follow %s",
                       invalid_codec, logging.getLevelName(level))

    return level
