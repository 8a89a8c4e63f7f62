"""Domain models for template descriptors, rendering context and results."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal, Mapping, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_REGION = "us-east-1"
DEFAULT_DATABASE = "PostgreSQL"

# Values a template may reference: scalars or a sequence of scalars for `range`.
Scalar = Union[str, int, bool]
ContextValue = Union[Scalar, Sequence[Scalar]]
ContextMapping = Mapping[str, ContextValue]


class Feature(str, Enum):
    """Optional capabilities a generated project can include."""

    CACHE = "cache"
    STORAGE = "storage"
    MAIL = "mail"
    QUEUE = "queue"
    JOBS = "jobs"
    WORKER = "worker"


class TemplateDescriptor(BaseModel):
    """Everything known about one scaffoldable template root."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Template-root identifier")
    cloud: Literal["aws", "gcp", "azure"] = Field(..., description="Target cloud")
    cloud_label: str = Field(..., description="Human readable cloud name")
    service: str = Field(..., description="Hosting service the project deploys to")
    description: str = Field(default="", description="One-line summary")
    asset_root: str = Field(..., description="Root directory in the asset repository")
    default_region: str = Field(default=DEFAULT_REGION)
    default_database: str = Field(default=DEFAULT_DATABASE)
    default_cpu: str = Field(..., description="CPU allocation when none is given")
    default_memory: str = Field(..., description="Memory allocation when none is given")
    implied_features: frozenset[Feature] = Field(
        default_factory=frozenset, description="Features always included"
    )


class RenderContext(BaseModel):
    """Values substituted into asset names and bodies.

    Field aliases are the placeholder names used by the bundled assets.
    """

    model_config = ConfigDict(frozen=True, strict=True, populate_by_name=True)

    name: str = Field(..., alias="Name")
    project_name: str = Field(..., alias="ProjectName")
    template: str = Field(..., alias="Template")
    cloud: str = Field(..., alias="Cloud")
    framework: str = Field(..., alias="Framework")
    port: int = Field(..., alias="Port")
    min_instances: int = Field(..., alias="MinInstances")
    max_instances: int = Field(..., alias="MaxInstances")
    cpu: str = Field(..., alias="CPU")
    memory: str = Field(..., alias="Memory")
    image_repository: str = Field(..., alias="ImageRepository")
    service_name: str = Field(..., alias="ServiceName")
    region: str = Field(..., alias="Region")
    database: str = Field(..., alias="Database")

    project_guid: str = Field(..., alias="ProjectGuid")
    app_host_guid: str = Field(..., alias="AppHostGuid")
    api_guid: str = Field(..., alias="ApiGuid")
    service_defaults_guid: str = Field(..., alias="ServiceDefaultsGuid")
    worker_guid: str = Field(..., alias="WorkerGuid")

    include_cache: bool = Field(..., alias="IncludeCache")
    include_storage: bool = Field(..., alias="IncludeStorage")
    include_mail: bool = Field(..., alias="IncludeMail")
    include_message_queue: bool = Field(..., alias="IncludeMessageQueue")
    include_jobs: bool = Field(..., alias="IncludeJobs")
    include_worker: bool = Field(..., alias="IncludeWorker")
    has_any_service: bool = Field(..., alias="HasAnyService")
    services: tuple[str, ...] = Field(..., alias="Services")

    def as_mapping(self) -> dict[str, ContextValue]:
        """Return the context keyed by placeholder name."""
        return self.model_dump(by_alias=True)


class GenerationResult(BaseModel):
    """Outcome of a successful generation run."""

    template: str = Field(..., description="Template-root identifier")
    project_path: Path = Field(..., description="Destination root")
    files: list[Path] = Field(default_factory=list, description="Written files")
