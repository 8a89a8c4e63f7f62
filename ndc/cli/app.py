"""Main CLI application."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from ..core.catalog import TEMPLATE_NAMES, list_templates
from ..core.config import ProjectConfig
from ..core.errors import ScaffoldError
from ..core.models import Feature
from ..generator import generate_project
from ..rendering.store import TemplateStore
from ..settings import get_settings
from .parsers import parse_file_mode, parse_services

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="ndc",
    help="Generate cloud-native .NET projects with deployment configuration.",
    no_args_is_help=True,
)


def _fail(exc: ScaffoldError) -> typer.Exit:
    typer.echo(f"Error: {exc}", err=True)
    return typer.Exit(code=1)


@app.command()
def create(
    template: Annotated[
        str,
        typer.Argument(help=f"Template to use ({', '.join(TEMPLATE_NAMES)})."),
    ],
    name: Annotated[
        str,
        typer.Option("--name", "-n", help="Project name.", metavar="NAME"),
    ],
    output: Annotated[
        str,
        typer.Option(
            "--output",
            "-o",
            help="Directory the project folder is created in (default: NDC_OUTPUT_DIR or cwd).",
            metavar="DIR",
        ),
    ] = "",
    framework: Annotated[
        Optional[str],
        typer.Option("--framework", "-f", help=".NET framework version, e.g. net9.0."),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", help="Application port."),
    ] = None,
    min_instances: Annotated[
        Optional[int],
        typer.Option("--min-instances", help="Minimum instances."),
    ] = None,
    max_instances: Annotated[
        Optional[int],
        typer.Option("--max-instances", help="Maximum instances."),
    ] = None,
    cpu: Annotated[
        str,
        typer.Option("--cpu", help="CPU allocation (cloud-specific; default per cloud)."),
    ] = "",
    memory: Annotated[
        str,
        typer.Option("--memory", help="Memory allocation (cloud-specific; default per cloud)."),
    ] = "",
    database: Annotated[
        Optional[str],
        typer.Option("--database", help="Database type (PostgreSQL, MySQL, SqlServer)."),
    ] = None,
    cache: Annotated[bool, typer.Option("--cache", help="Include Redis cache.")] = False,
    storage: Annotated[
        bool, typer.Option("--storage", help="Include S3-compatible storage.")
    ] = False,
    mail: Annotated[bool, typer.Option("--mail", help="Include email service.")] = False,
    queue: Annotated[bool, typer.Option("--queue", help="Include message queue.")] = False,
    jobs: Annotated[bool, typer.Option("--jobs", help="Include background jobs.")] = False,
    worker: Annotated[bool, typer.Option("--worker", help="Include worker service.")] = False,
    services: Annotated[
        str,
        typer.Option(
            "--services",
            help="Comma-separated services (cache,storage,mail,queue,jobs,worker,all).",
            metavar="LIST",
        ),
    ] = "",
    templates_dir: Annotated[
        str,
        typer.Option(
            "--templates-dir",
            help="Render from this directory instead of the bundled templates.",
            metavar="DIR",
        ),
    ] = "",
    file_mode: Annotated[
        str,
        typer.Option(
            "--mode",
            help="File permissions in octal (default: NDC_FILE_MODE or 0644).",
            metavar="OCTAL",
        ),
    ] = "",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Create a new project from a template."""
    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    flags = {
        Feature.CACHE: cache,
        Feature.STORAGE: storage,
        Feature.MAIL: mail,
        Feature.QUEUE: queue,
        Feature.JOBS: jobs,
        Feature.WORKER: worker,
    }
    features = parse_services(services) | {f for f, enabled in flags.items() if enabled}

    try:
        settings = get_settings()
        mode = parse_file_mode(file_mode) if file_mode else settings.file_mode
        config = ProjectConfig.create(
            name=name,
            template=template,
            output_dir=Path(output) if output else settings.output_dir,
            framework=framework or settings.framework,
            port=settings.port if port is None else port,
            min_instances=settings.min_instances if min_instances is None else min_instances,
            max_instances=settings.max_instances if max_instances is None else max_instances,
            cpu=cpu,
            memory=memory,
            database=database or None,
            features=features,
        )
        logger.debug(f"Config: {config.template}, {len(config.features)} explicit feature(s)")

        source_dir = Path(templates_dir) if templates_dir else settings.templates_dir
        store = TemplateStore.from_directory(source_dir) if source_dir else TemplateStore.bundled()

        typer.echo(f"Creating {template} project '{name}' in {config.output_path}")
        result = generate_project(config, store=store, file_mode=mode)
    except ScaffoldError as exc:
        raise _fail(exc) from exc

    descriptor = config.descriptor
    typer.echo(f"Successfully created {name} project!")
    typer.echo(f"Location: {result.project_path}")
    typer.echo("Next steps:")
    typer.echo(f"   cd {result.project_path}")
    typer.echo(f"   # Configure {descriptor.cloud_label} credentials")
    typer.echo("   # Update terraform/variables.tf as needed")
    typer.echo("   cd terraform && terraform init && terraform plan")


@app.command("list")
def list_command() -> None:
    """List available templates."""
    typer.echo("Available NDC Templates:")
    typer.echo()
    for descriptor in list_templates():
        typer.echo(f"  {descriptor.name}")
        typer.echo(f"     Cloud: {descriptor.cloud_label}")
        typer.echo(f"     Service: {descriptor.service}")
        typer.echo(f"     Description: {descriptor.description}")
        typer.echo()

    typer.echo("Usage:")
    typer.echo("  ndc create <template> --name <project-name>")
    typer.echo()
    typer.echo("Example:")
    typer.echo(f"  ndc create {TEMPLATE_NAMES[0]} --name my-api")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
