"""Placeholder substitution in file and directory names."""

from __future__ import annotations

import re

from ..core.errors import TemplateRenderError
from ..core.models import ContextMapping

_TOKEN = re.compile(r"\{\{\s*\.(\w+)\s*\}\}")
_ANY_ACTION = re.compile(r"\{\{.*?\}\}")


def _check_actions(raw_name: str) -> None:
    for action in _ANY_ACTION.findall(raw_name):
        if not _TOKEN.fullmatch(action):
            raise TemplateRenderError(
                f"unsupported placeholder {action!r} in name {raw_name!r}: "
                "names only allow {{.Key}} substitution",
                path=raw_name,
            )


def render_name(raw_name: str, context: ContextMapping) -> str:
    """Substitute ``{{.Key}}`` tokens in a single path segment.

    Args:
        raw_name: File or directory name from the asset tree
        context: Rendering context keyed by placeholder name

    Returns:
        The rendered name

    Raises:
        TemplateRenderError: On an unknown key, a value that is not a string
            or integer, or a result that is not a plain path segment
    """
    _check_actions(raw_name)

    def _substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in context:
            raise TemplateRenderError(
                f"undefined placeholder {match.group(0)!r} in name {raw_name!r}",
                path=raw_name,
            )
        value = context[key]
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise TemplateRenderError(
                f"placeholder {match.group(0)!r} in name {raw_name!r} resolves to "
                f"{type(value).__name__}, expected str or int",
                path=raw_name,
            )
        return str(value)

    rendered = _TOKEN.sub(_substitute, raw_name)
    if rendered in {"", ".", ".."} or "/" in rendered or "\\" in rendered:
        raise TemplateRenderError(
            f"name {raw_name!r} renders to invalid path segment {rendered!r}",
            path=raw_name,
        )
    return rendered
