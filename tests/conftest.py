from __future__ import annotations

import itertools
from pathlib import Path
from typing import Callable, Union

import pytest

from ndc.core.config import ProjectConfig
from ndc.rendering.store import TemplateStore
from ndc.settings import get_settings

Tree = dict[str, Union[str, bytes, "Tree"]]


def write_tree(root: Path, tree: Tree) -> None:
    """Create files (str/bytes values) and directories (dict values) under root."""
    root.mkdir(parents=True, exist_ok=True)
    for name, value in tree.items():
        path = root / name
        if isinstance(value, dict):
            write_tree(path, value)
        elif isinstance(value, bytes):
            path.write_bytes(value)
        else:
            path.write_text(value, encoding="utf-8")


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sequential_ids() -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"00000000-0000-0000-0000-{next(counter):012d}"


@pytest.fixture
def make_store(tmp_path: Path) -> Callable[[Tree], TemplateStore]:
    def _make(tree: Tree) -> TemplateStore:
        base = tmp_path / "assets"
        write_tree(base, tree)
        return TemplateStore.from_directory(base)

    return _make


@pytest.fixture
def orders_config(tmp_path: Path) -> ProjectConfig:
    return ProjectConfig.create(
        name="orders",
        template="dotnet-webapp-aws",
        port=8080,
        min_instances=1,
        max_instances=3,
        output_dir=tmp_path / "out",
    )
