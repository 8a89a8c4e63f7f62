"""Validated project configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .catalog import TEMPLATES, get_template
from .errors import ConfigurationError
from .models import Feature, TemplateDescriptor
from .naming import to_title_case

Database = Literal["PostgreSQL", "MySQL", "SqlServer"]


class ProjectConfig(BaseModel):
    """Immutable description of the project to generate."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Raw project name")
    template: str = Field(..., description="Template-root identifier")
    output_dir: Path = Field(default=Path("."), description="Parent of the project directory")
    framework: str = Field(default="net9.0", description=".NET framework moniker")
    port: int = Field(default=8080, ge=1, le=65535)
    min_instances: int = Field(default=1, ge=0)
    max_instances: int = Field(default=5, gt=0)
    cpu: str = Field(default="", description="CPU allocation (cloud-specific)")
    memory: str = Field(default="", description="Memory allocation (cloud-specific)")
    database: Optional[Database] = Field(default=None, description="Database engine override")
    features: frozenset[Feature] = Field(default_factory=frozenset)

    @model_validator(mode="before")
    @classmethod
    def _apply_cloud_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        descriptor = TEMPLATES.get(data.get("template", ""))
        if descriptor is None:
            return data
        data = dict(data)
        if not data.get("cpu"):
            data["cpu"] = descriptor.default_cpu
        if not data.get("memory"):
            data["memory"] = descriptor.default_memory
        return data

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("project name is required")
        if "/" in value or "\\" in value or value in {".", ".."}:
            raise ValueError(f"project name must not be a path: {value!r}")
        return value

    @field_validator("template")
    @classmethod
    def _check_template(cls, value: str) -> str:
        get_template(value)
        return value

    @model_validator(mode="after")
    def _check_instances(self) -> ProjectConfig:
        if self.min_instances > self.max_instances:
            raise ValueError("min-instances cannot be greater than max-instances")
        return self

    @property
    def display_name(self) -> str:
        return to_title_case(self.name)

    @property
    def output_path(self) -> Path:
        return self.output_dir / self.name

    @property
    def descriptor(self) -> TemplateDescriptor:
        return get_template(self.template)

    @classmethod
    def create(cls, **values: Any) -> ProjectConfig:
        """Validate raw values into a configuration.

        Raises:
            UnknownTemplateError: If the template identifier is not in the catalog
            ConfigurationError: If any other field is invalid
        """
        get_template(values.get("template", ""))
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(f"invalid project configuration: {exc}") from exc
