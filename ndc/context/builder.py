"""Rendering context construction."""

from __future__ import annotations

import logging
import uuid
from typing import Callable

from ..core.config import ProjectConfig
from ..core.models import Feature, RenderContext
from ..core.naming import to_service_name, to_title_case

logger = logging.getLogger(__name__)

REGISTRY_NAMESPACE = "noundry"

IdentifierFactory = Callable[[], str]


def new_guid() -> str:
    """Return a fresh upper-case GUID (8-4-4-4-12 hex digits)."""
    return str(uuid.uuid4()).upper()


def resolve_features(config: ProjectConfig) -> dict[Feature, bool]:
    """Combine explicit feature flags with those the template always includes.

    Args:
        config: Validated project configuration

    Returns:
        Mapping of every feature to whether it is enabled
    """
    implied = config.descriptor.implied_features
    return {
        feature: feature in config.features or feature in implied
        for feature in Feature
    }


def build_context(
    config: ProjectConfig, new_id: IdentifierFactory = new_guid
) -> RenderContext:
    """Build the rendering context for one generation run.

    Args:
        config: Validated project configuration
        new_id: Source of unique identifiers, called once per identifier slot

    Returns:
        Context shared by every name and file rendered in the run
    """
    descriptor = config.descriptor
    features = resolve_features(config)
    enabled = tuple(feature.value for feature, on in features.items() if on)

    logger.debug(
        f"Building context for {config.name!r} ({descriptor.name}), "
        f"features: {', '.join(enabled) or 'none'}"
    )

    return RenderContext(
        name=config.name,
        project_name=to_title_case(config.name),
        template=descriptor.name,
        cloud=descriptor.cloud,
        framework=config.framework,
        port=config.port,
        min_instances=config.min_instances,
        max_instances=config.max_instances,
        cpu=config.cpu,
        memory=config.memory,
        image_repository=f"{REGISTRY_NAMESPACE}/{config.name.lower()}",
        service_name=to_service_name(config.name),
        region=descriptor.default_region,
        database=config.database or descriptor.default_database,
        project_guid=new_id(),
        app_host_guid=new_id(),
        api_guid=new_id(),
        service_defaults_guid=new_id(),
        worker_guid=new_id(),
        include_cache=features[Feature.CACHE],
        include_storage=features[Feature.STORAGE],
        include_mail=features[Feature.MAIL],
        include_message_queue=features[Feature.QUEUE],
        include_jobs=features[Feature.JOBS],
        include_worker=features[Feature.WORKER],
        has_any_service=bool(enabled),
        services=enabled,
    )
