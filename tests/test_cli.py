from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from ndc.cli.app import app
from ndc.core.catalog import TEMPLATE_NAMES

runner = CliRunner()


def test_list_shows_every_template() -> None:
    result = runner.invoke(app, ["list"])

    assert result.exit_code == 0
    assert "Available NDC Templates:" in result.output
    for name in TEMPLATE_NAMES:
        assert name in result.output
    assert "ndc create dotnet-webapp-aws --name my-api" in result.output


def test_create_generates_project(tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["create", "dotnet-webapp-aws", "--name", "orders", "--output", str(tmp_path)]
    )

    assert result.exit_code == 0, result.output
    assert "Successfully created orders project!" in result.output
    assert "Configure AWS credentials" in result.output
    assert (tmp_path / "orders" / "Orders.sln").is_file()
    assert (tmp_path / "orders" / "src" / "Orders.Api" / "Program.cs").is_file()


def test_create_with_services(tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        [
            "create",
            "dotnet-webapp-gcp",
            "-n",
            "shop",
            "-o",
            str(tmp_path),
            "--services",
            "cache,queue",
            "--worker",
        ],
    )

    assert result.exit_code == 0, result.output
    readme = (tmp_path / "shop" / "README.md").read_text()
    assert "- cache" in readme
    assert "- queue" in readme
    assert "- worker" in readme
    assert "- storage" not in readme


def test_create_uses_environment_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("NDC_OUTPUT_DIR", str(tmp_path))
    monkeypatch.setenv("NDC_PORT", "5005")

    result = runner.invoke(app, ["create", "dotnet-webapp-aws", "--name", "orders"])

    assert result.exit_code == 0, result.output
    assert "5005" in (tmp_path / "orders" / "Dockerfile").read_text()


def test_create_from_templates_dir(tmp_path: Path) -> None:
    assets = tmp_path / "assets" / "azure"
    assets.mkdir(parents=True)
    (assets / "{{.ServiceName}}.txt").write_text("{{.Region}} {{.CPU}}")

    result = runner.invoke(
        app,
        [
            "create",
            "dotnet-webapp-azure",
            "--name",
            "Orders",
            "--output",
            str(tmp_path / "out"),
            "--templates-dir",
            str(tmp_path / "assets"),
        ],
    )

    assert result.exit_code == 0, result.output
    assert (tmp_path / "out" / "Orders" / "orders.txt").read_text() == "eastus 1.0"


def test_unknown_template_fails_without_output(tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["create", "rails-app", "--name", "orders", "--output", str(tmp_path)]
    )

    assert result.exit_code == 1
    assert "unsupported template 'rails-app'" in result.output
    assert list(tmp_path.iterdir()) == []


def test_invalid_instance_bounds(tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        [
            "create",
            "dotnet-webapp-aws",
            "--name",
            "orders",
            "--output",
            str(tmp_path),
            "--min-instances",
            "5",
            "--max-instances",
            "2",
        ],
    )

    assert result.exit_code == 1
    assert "min-instances cannot be greater than max-instances" in result.output


def test_unknown_service_is_a_usage_error(tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        ["create", "dotnet-webapp-aws", "--name", "orders", "-o", str(tmp_path), "--services", "ftp"],
    )

    assert result.exit_code == 2
    assert not (tmp_path / "orders").exists()


def test_invalid_environment_setting_reports_error(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("NDC_PORT", "not-a-port")

    result = runner.invoke(app, ["create", "dotnet-webapp-aws", "--name", "orders", "-o", str(tmp_path)])

    assert result.exit_code == 1
    assert "Error: invalid NDC_* environment settings" in result.output
    assert not (tmp_path / "orders").exists()
