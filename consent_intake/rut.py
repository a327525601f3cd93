"""
Chilean RUT normalization and check-digit validation.

A RUT is written as a digit body followed by a check character, usually
formatted like ``76.543.210-3``. The check character is computed with the
weighted modulo-11 scheme: digits are read right-to-left, multiplied by the
cyclic weights 2..7 and summed; ``11 - (sum % 11)`` maps 11 → ``0``,
10 → ``K`` and anything else to its own digit.

These are pure functions — no I/O, no state.
"""

from __future__ import annotations

import re
from itertools import cycle

_SEPARATORS_RE = re.compile(r"[.\-]")
_BODY_RE = re.compile(r"[0-9]+")

WEIGHTS: tuple[int, ...] = (2, 3, 4, 5, 6, 7)


def normalize(raw: str) -> str:
    """Strip periods and hyphens and uppercase: ``76.543.210-k`` → ``76543210K``."""
    return _SEPARATORS_RE.sub("", raw).upper()


def compute_check_char(body: str) -> str:
    """Return the expected check character for a digit-only ``body``.

    The caller guarantees ``body`` holds ASCII digits only.
    """
    total = sum(int(digit) * weight for digit, weight in zip(reversed(body), cycle(WEIGHTS)))
    remainder = 11 - (total % 11)
    if remainder == 11:
        return "0"
    if remainder == 10:
        return "K"
    return str(remainder)


def split(raw: str) -> tuple[str, str]:
    """Normalize and split into ``(body, check_char)``. No validation."""
    normalized = normalize(raw)
    return normalized[:-1], normalized[-1:]


def is_valid(raw: str) -> bool:
    """True if ``raw`` normalizes to a digit body plus a matching check character."""
    normalized = normalize(raw)
    if len(normalized) < 2:
        return False

    body, supplied = normalized[:-1], normalized[-1]
    if not _BODY_RE.fullmatch(body):
        return False

    return compute_check_char(body) == supplied
