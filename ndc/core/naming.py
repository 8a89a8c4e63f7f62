"""Name derivation helpers."""

from __future__ import annotations

import re

_SEPARATORS = re.compile(r"[-_\s]+")


def to_title_case(value: str) -> str:
    """Convert a raw project name into its display form.

    Words are split on hyphens, underscores and whitespace. Each word keeps
    only its first letter upper-cased and the words are joined without a
    separator, so ``"my-api"`` becomes ``"MyApi"`` and ``"WebApp"`` becomes
    ``"Webapp"``.
    """
    words = [word for word in _SEPARATORS.split(value) if word]
    return "".join(word[0].upper() + word[1:].lower() for word in words)


def to_service_name(value: str) -> str:
    return value.lower()
