"""Logging utilities tailored for puzzle generation."""

from __future__ import annotations

import logging
from typing import Optional, TextIO


def configure_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> None:
    """Configure root logging with a sensible formatter.

    The generator runs many discarded attempts, so logging needs to be
    structured while remaining lightweight. The default configuration can be
    customized by callers before invoking :class:`PuzzleGenerator`.
    """

    handler = logging.StreamHandler(stream)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a namespaced logger, configuring defaults if needed."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "tilepuzzle")


def parse_level(value: str | int) -> int:
    """Translate ``"debug"``/``"INFO"``/``20`` style values into a logging level."""

    if isinstance(value, int):
        return value
    text = value.strip().upper()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {value}")
    return level
