"""Credential validation: only version-4 UUID strings are accepted."""

from __future__ import annotations

import re

_HEX32 = re.compile(r"[0-9a-f]{32}")
_VERSION_INDEX = 12
_VARIANT_INDEX = 16
_VARIANT_CHARS = frozenset("89ab")


def is_valid_credential(raw: str | None) -> bool:
    """Return True if ``raw`` is a version-4 UUID, hyphens anywhere or nowhere.

    Hyphens are stripped without checking their positions. Whitespace is not
    stripped here; callers trim user input first.
    """
    if not raw:
        return False
    clean = raw.replace("-", "").lower()
    if not _HEX32.fullmatch(clean):
        return False
    if clean[_VERSION_INDEX] != "4":
        return False
    return clean[_VARIANT_INDEX] in _VARIANT_CHARS
