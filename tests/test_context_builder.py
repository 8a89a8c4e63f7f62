from __future__ import annotations

import re

import pytest
from pydantic import ValidationError

from ndc.context.builder import build_context, new_guid, resolve_features
from ndc.core.catalog import TEMPLATE_NAMES
from ndc.core.config import ProjectConfig
from ndc.core.models import Feature, RenderContext

GUID = re.compile(r"^[0-9A-F]{8}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{12}$")


def test_pass_through_and_derived_values(orders_config: ProjectConfig, sequential_ids) -> None:
    context = build_context(orders_config, sequential_ids).as_mapping()

    assert context["Name"] == "orders"
    assert context["ProjectName"] == "Orders"
    assert context["Template"] == "dotnet-webapp-aws"
    assert context["Cloud"] == "aws"
    assert context["Framework"] == "net9.0"
    assert context["Port"] == 8080
    assert context["MinInstances"] == 1
    assert context["MaxInstances"] == 3
    assert context["CPU"] == "1024"
    assert context["Memory"] == "2048"
    assert context["ImageRepository"] == "noundry/orders"
    assert context["ServiceName"] == "orders"
    assert context["Region"] == "us-east-1"
    assert context["Database"] == "PostgreSQL"


def test_identifiers_come_from_the_injected_factory(
    orders_config: ProjectConfig, sequential_ids
) -> None:
    context = build_context(orders_config, sequential_ids)

    assert [
        context.project_guid,
        context.app_host_guid,
        context.api_guid,
        context.service_defaults_guid,
        context.worker_guid,
    ] == [f"00000000-0000-0000-0000-{n:012d}" for n in range(1, 6)]


def test_default_identifiers_are_unique_guids(orders_config: ProjectConfig) -> None:
    first = build_context(orders_config)
    second = build_context(orders_config)

    ids = {
        first.project_guid,
        first.app_host_guid,
        first.api_guid,
        first.service_defaults_guid,
        first.worker_guid,
        second.project_guid,
    }
    assert len(ids) == 6
    assert all(GUID.match(value) for value in ids)


def test_new_guid_format() -> None:
    assert GUID.match(new_guid())


def test_no_features_by_default(orders_config: ProjectConfig, sequential_ids) -> None:
    context = build_context(orders_config, sequential_ids)

    assert not context.include_cache
    assert not context.include_worker
    assert not context.has_any_service
    assert context.services == ()


def test_explicit_features_are_enabled(sequential_ids) -> None:
    config = ProjectConfig.create(
        name="svc", template="dotnet-webapp-gcp", features={Feature.QUEUE, Feature.CACHE}
    )
    context = build_context(config, sequential_ids)

    assert context.include_cache
    assert context.include_message_queue
    assert not context.include_storage
    assert context.has_any_service
    # enum order, not insertion order
    assert context.services == ("cache", "queue")


@pytest.mark.parametrize("template", TEMPLATE_NAMES)
@pytest.mark.parametrize("feature", list(Feature))
def test_explicit_flags_never_disable_implied_features(template: str, feature: Feature) -> None:
    baseline = resolve_features(ProjectConfig.create(name="svc", template=template))
    enabled = resolve_features(
        ProjectConfig.create(name="svc", template=template, features={feature})
    )

    assert enabled[feature]
    for other, on in baseline.items():
        if on:
            assert enabled[other]


def test_fullstack_implies_everything(sequential_ids) -> None:
    config = ProjectConfig.create(name="svc", template="aspire-fullstack-aws")
    context = build_context(config, sequential_ids)

    assert context.services == tuple(f.value for f in Feature)
    assert context.include_jobs and context.include_mail and context.include_worker


def test_region_and_database_follow_the_descriptor(sequential_ids) -> None:
    azure = build_context(
        ProjectConfig.create(name="svc", template="aspire-webapp-azure"), sequential_ids
    )
    assert (azure.region, azure.database) == ("eastus", "SqlServer")

    override = build_context(
        ProjectConfig.create(name="svc", template="aspire-webapp-azure", database="MySQL"),
        sequential_ids,
    )
    assert override.database == "MySQL"


def test_render_context_is_strictly_typed(orders_config: ProjectConfig, sequential_ids) -> None:
    values = build_context(orders_config, sequential_ids).as_mapping()
    values["Port"] = "8080"

    with pytest.raises(ValidationError):
        RenderContext(**values)
