"""Registry of the template roots the generator can scaffold."""

from __future__ import annotations

from .errors import UnknownTemplateError
from .models import Feature, TemplateDescriptor

_CLOUDS = {
    "aws": {
        "cloud_label": "AWS",
        "asset_root": "aws",
        "default_region": "us-east-1",
        "default_cpu": "1024",  # 1 vCPU
        "default_memory": "2048",  # 2 GB
    },
    "gcp": {
        "cloud_label": "Google Cloud",
        "asset_root": "gcp",
        "default_region": "us-central1",
        "default_cpu": "1000m",
        "default_memory": "2Gi",
    },
    "azure": {
        "cloud_label": "Azure",
        "asset_root": "azure",
        "default_region": "eastus",
        "default_cpu": "1.0",
        "default_memory": "2.0Gi",
    },
}

_SERVICES = {
    "aws": ("App Runner", "ECR"),
    "gcp": ("Cloud Run", "Artifact Registry"),
    "azure": ("Container Apps", "ACR"),
}

_ALL_FEATURES = frozenset(Feature)


def _descriptor(
    name: str,
    cloud: str,
    *,
    description: str,
    implied: frozenset[Feature] = frozenset(),
    database: str | None = None,
) -> TemplateDescriptor:
    service, _registry = _SERVICES[cloud]
    fields = dict(_CLOUDS[cloud])
    if database:
        fields["default_database"] = database
    return TemplateDescriptor(
        name=name,
        cloud=cloud,
        service=service,
        description=description,
        implied_features=implied,
        **fields,
    )


def _build_catalog() -> dict[str, TemplateDescriptor]:
    descriptors: list[TemplateDescriptor] = []
    for cloud, (service, registry) in _SERVICES.items():
        label = _CLOUDS[cloud]["cloud_label"]
        # Azure Aspire stacks pair with SQL Server; everything else uses the default.
        aspire_db = "SqlServer" if cloud == "azure" else None
        descriptors.extend(
            [
                _descriptor(
                    f"dotnet-webapp-{cloud}",
                    cloud,
                    description=f".NET web application deployed to {label} {service} with {registry}",
                ),
                _descriptor(
                    f"aspire-webapp-{cloud}",
                    cloud,
                    description=f".NET Aspire web application with Redis cache on {label} {service}",
                    implied=frozenset({Feature.CACHE}),
                    database=aspire_db,
                ),
                _descriptor(
                    f"aspire-fullstack-{cloud}",
                    cloud,
                    description=(
                        f".NET Aspire full stack (cache, storage, mail, queue, jobs, worker) "
                        f"on {label} {service}"
                    ),
                    implied=_ALL_FEATURES,
                    database=aspire_db,
                ),
            ]
        )
    return {descriptor.name: descriptor for descriptor in descriptors}


TEMPLATES: dict[str, TemplateDescriptor] = _build_catalog()
TEMPLATE_NAMES: tuple[str, ...] = tuple(TEMPLATES)


def get_template(name: str) -> TemplateDescriptor:
    """Look up a template descriptor by identifier.

    Raises:
        UnknownTemplateError: If the identifier is not in the catalog
    """
    try:
        return TEMPLATES[name]
    except KeyError:
        raise UnknownTemplateError(
            f"unsupported template '{name}'. Run 'ndc list' to see available templates"
        ) from None


def list_templates() -> list[TemplateDescriptor]:
    """Return every descriptor ordered by cloud, then name."""
    return sorted(TEMPLATES.values(), key=lambda d: (d.cloud, d.name))
