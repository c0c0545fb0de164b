"""Pytest fixtures for deploy-to-root tests."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from deploy_to_root.config import get_settings
from deploy_to_root.pipeline import DeployConfig


def write_tree(root: Path, files: dict[str, str]) -> None:
    """Create files (and parent directories) from a {relative path: content} map."""
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)


def snapshot(root: Path, exclude: tuple[str, ...] = ()) -> dict[str, str]:
    """Map every path under ``root`` to its content ("<dir>" for directories)."""
    result = {}
    for path in sorted(root.rglob("*")):
        rel_path = path.relative_to(root).as_posix()
        if rel_path.split("/")[0] in exclude:
            continue
        result[rel_path] = "<dir>" if path.is_dir() else path.read_text()
    return result


@pytest.fixture
def repo_root(tmp_path):
    """Destination root with some files that do not belong to any deployment."""
    root = tmp_path / "repo"
    write_tree(
        root,
        {
            "README.md": "# repo",
            "my-app/package.json": "{}",
        },
    )
    return root


@pytest.fixture
def build_dir(repo_root):
    """Empty build output directory inside the repository."""
    path = repo_root / "my-app" / "build"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def deploy_config(repo_root, build_dir):
    """DeployConfig pointing the build directory at the repository root."""
    return DeployConfig(source_dir=build_dir, dest_root=repo_root)


@pytest.fixture
def cli_runner():
    """Typer CLI runner."""
    return CliRunner()


@pytest.fixture
def clear_settings_cache():
    """Clear the settings cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
