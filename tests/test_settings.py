from __future__ import annotations

from pathlib import Path

import pytest

from ndc.core.errors import ConfigurationError
from ndc.settings import Settings, get_settings


def test_defaults(monkeypatch) -> None:
    for var in ("NDC_PORT", "NDC_FILE_MODE", "NDC_TEMPLATES_DIR", "NDC_OUTPUT_DIR"):
        monkeypatch.delenv(var, raising=False)

    settings = Settings()

    assert settings.output_dir == Path(".")
    assert settings.framework == "net9.0"
    assert settings.port == 8080
    assert settings.file_mode == 0o644
    assert settings.templates_dir is None


def test_environment_overrides(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("NDC_PORT", "9090")
    monkeypatch.setenv("NDC_FILE_MODE", "0640")
    monkeypatch.setenv("ndc_templates_dir", str(tmp_path))

    settings = get_settings()

    assert settings.port == 9090
    assert settings.file_mode == 0o640
    assert settings.templates_dir == tmp_path


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()


def test_invalid_environment_is_a_configuration_error(monkeypatch) -> None:
    monkeypatch.setenv("NDC_FILE_MODE", "999")

    with pytest.raises(ConfigurationError, match="invalid NDC_\\* environment settings"):
        get_settings()
