"""Project generation entry point."""

from __future__ import annotations

import logging

from .context.builder import IdentifierFactory, build_context, new_guid
from .core.config import ProjectConfig
from .core.errors import AssetError
from .core.models import GenerationResult
from .rendering.store import TemplateStore
from .rendering.walker import materialize

logger = logging.getLogger(__name__)


def generate_project(
    config: ProjectConfig,
    *,
    store: TemplateStore | None = None,
    new_id: IdentifierFactory = new_guid,
    file_mode: int = 0o644,
) -> GenerationResult:
    """Generate a project tree from a validated configuration.

    Args:
        config: Validated project configuration
        store: Asset repository (the bundled templates when omitted)
        new_id: Source of unique identifiers for the rendering context
        file_mode: Permissions for written files

    Returns:
        Destination root and the files written into it

    Raises:
        ScaffoldError: On the first asset, template or filesystem failure
    """
    store = store or TemplateStore.bundled()
    descriptor = config.descriptor

    if not store.has_root(descriptor.asset_root):
        raise AssetError(
            f"template root '{descriptor.asset_root}' for {descriptor.name} "
            "is missing from the asset repository",
            path=descriptor.asset_root,
        )

    context = build_context(config, new_id)
    project_path = config.output_path

    logger.info(f"Generating {descriptor.name} project '{config.name}' in {project_path}")

    files = materialize(
        store,
        descriptor.asset_root,
        project_path,
        context.as_mapping(),
        file_mode=file_mode,
    )

    logger.info(f"Successfully generated {len(files)} file(s)")
    return GenerationResult(template=descriptor.name, project_path=project_path, files=files)
