"""Mirror a template root into a destination tree."""

from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import Environment

from ..core.errors import OutputError
from ..core.models import ContextMapping
from .engine import create_environment, render_file
from .io import ensure_dir
from .paths import render_name
from .store import TemplateStore

logger = logging.getLogger(__name__)


def _make_dir(path: Path) -> None:
    try:
        ensure_dir(path)
    except OSError as exc:
        raise OutputError(f"failed to create directory {path}: {exc}", path=path) from exc


def _walk(
    store: TemplateStore,
    asset_dir: str,
    dest_dir: Path,
    context: ContextMapping,
    env: Environment,
    file_mode: int,
    written: list[Path],
) -> None:
    for entry in store.list_children(asset_dir):
        dest_path = dest_dir / render_name(entry.name, context)

        if entry.is_dir:
            _make_dir(dest_path)
            logger.debug(f"Created directory {dest_path}")
            _walk(store, entry.path, dest_path, context, env, file_mode, written)
        else:
            render_file(
                store.read_bytes(entry.path),
                dest_path,
                context,
                env=env,
                name=entry.path,
                file_mode=file_mode,
            )
            written.append(dest_path)


def materialize(
    store: TemplateStore,
    template_root: str,
    dest_root: Path,
    context: ContextMapping,
    *,
    file_mode: int = 0o644,
) -> list[Path]:
    """Render every asset under template_root into dest_root.

    The walk is depth-first and stops at the first error. Files written
    before the failure are left in place.

    Args:
        store: Asset repository
        template_root: Root directory in the store
        dest_root: Destination directory, created if missing
        context: Rendering context keyed by placeholder name
        file_mode: Permissions for written files

    Returns:
        Written file paths in walk order
    """
    env = create_environment()
    written: list[Path] = []

    _make_dir(dest_root)
    _walk(store, template_root, dest_root, context, env, file_mode, written)

    logger.debug(f"Materialized {len(written)} file(s) from {template_root} into {dest_root}")
    return written
