"""CLI argument parsers and validators."""

from __future__ import annotations

import typer

from ..core.models import Feature


def parse_file_mode(value: str) -> int:
    """Parse octal file mode string."""
    try:
        return int(value, 8)
    except ValueError as e:
        raise typer.BadParameter(f"Invalid octal mode: {value!r}") from e


def parse_services(value: str) -> frozenset[Feature]:
    """Parse a comma-separated feature list (``cache,queue`` or ``all``)."""
    features: set[Feature] = set()
    for item in (part.strip().lower() for part in value.split(",")):
        if not item:
            continue
        if item == "all":
            return frozenset(Feature)
        try:
            features.add(Feature(item))
        except ValueError as e:
            choices = ", ".join(f.value for f in Feature)
            raise typer.BadParameter(
                f"Unknown service {item!r}. Choose from: {choices}, all"
            ) from e
    return frozenset(features)
