# ./src/memocache/utils/logger.py
"""Logger builder with optional cache-key redaction for memocache.

Run path: imported by ``memocache.cache``.
Inputs: logger name/level and redaction controls.
Outputs: configured ``logging.Logger`` instance.
Side effects: attaches a stream handler when one is not already present.
Operational notes: formatter masks ``key=...`` tokens unless redaction style is ``none``.
"""

from __future__ import annotations

import logging
import re

_KEY_RX = re.compile(r"\bkey=(?P<key>\S+)")


def mask_key(key: str) -> str:
    if len(key) <= 2:
        return key[:1] + "*" * max(0, len(key) - 1)
    return key[0] + "*" * (len(key) - 2) + key[-1]


class RedactingFormatter(logging.Formatter):
    """Formatter that can mask cache keys in log messages."""

    def __init__(self, fmt: str, redact: bool, redact_style: str):
        super().__init__(fmt)
        self._redact = redact
        self._redact_style = redact_style

    def format(self, record: logging.LogRecord) -> str:
        rendered = super().format(record)
        if not self._redact or self._redact_style == "none":
            return rendered

        def _mask(match: re.Match[str]) -> str:
            return f"key={mask_key(match.group('key'))}"

        return _KEY_RX.sub(_mask, rendered)


def build_logger(
    name: str,
    level: int,
    redact_keys: bool = True,
    redact_style: str = "mask",
) -> logging.Logger:
    """Create or reuse a configured logger instance."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = RedactingFormatter(
            "%(asctime)s [%(levelname)s] %(name)s :: %(message)s",
            redact_keys,
            redact_style,
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger
