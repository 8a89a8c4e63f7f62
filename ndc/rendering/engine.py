"""Template rendering engine."""

from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import Environment, StrictUndefined, Template, TemplateError, TemplateSyntaxError

from ..core.errors import AssetError, OutputError, TemplateRenderError
from ..core.models import ContextMapping
from .dialect import DotActionExtension
from .io import atomic_write_chunks

logger = logging.getLogger(__name__)


def _finalize(value: object) -> object:
    """Print booleans as lower-case literals, matching C# and HCL."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def create_environment() -> Environment:
    """Create the Jinja2 environment shared by every file in a run."""
    return Environment(
        undefined=StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
        finalize=_finalize,
        extensions=[DotActionExtension],
    )


def compile_template(
    template_bytes: bytes, env: Environment, name: str = "<template>"
) -> Template:
    """Compile raw asset bytes into a template.

    Args:
        template_bytes: UTF-8 encoded template source
        env: Environment from create_environment()
        name: Asset path used in error messages

    Returns:
        Compiled Jinja2 template

    Raises:
        AssetError: If the bytes are not valid UTF-8
        TemplateRenderError: If the template source is malformed
    """
    try:
        source = template_bytes.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise AssetError(f"template {name} is not valid UTF-8: {exc}", path=name) from exc

    if "\r\n" in source:
        # Keep CRLF assets (solution files) in their own line endings.
        env = env.overlay(newline_sequence="\r\n")

    try:
        return env.from_string(source)
    except TemplateSyntaxError as exc:
        raise TemplateRenderError(
            f"failed to parse template {name} (line {exc.lineno}): {exc.message}",
            path=name,
        ) from exc


def render_file(
    template_bytes: bytes,
    dest_path: Path,
    context: ContextMapping,
    *,
    env: Environment | None = None,
    name: str = "<template>",
    file_mode: int = 0o644,
) -> Path:
    """Render one asset file into the destination tree.

    Existing files at dest_path are overwritten.

    Args:
        template_bytes: Raw asset content
        dest_path: File to create
        context: Rendering context keyed by placeholder name
        env: Environment to compile with (a new one when omitted)
        name: Asset path used in log and error messages
        file_mode: File permissions

    Returns:
        Output file path
    """
    logger.debug(f"Rendering template: {name}")

    template = compile_template(template_bytes, env or create_environment(), name)

    try:
        atomic_write_chunks(dest_path, template.generate(dict(context)), mode=file_mode)
    except (TemplateError, TypeError) as exc:
        raise TemplateRenderError(
            f"failed to execute template {name}: {exc}", path=name
        ) from exc
    except OSError as exc:
        raise OutputError(f"failed to create file {dest_path}: {exc}", path=dest_path) from exc

    logger.debug(f"Rendered {name} → {dest_path}")
    return dest_path
