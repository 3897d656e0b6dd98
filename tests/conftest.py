"""Pytest fixtures for release-with-ease tests."""

import json
from pathlib import Path

import pytest

from release_with_ease.config import ReleaseConfig, resolve_release_config

README = "# my-lib\n\nSome intro.\n\n# Changelog\n\n## 1.2.3\n\n- Fix a crash\n"


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Temporary npm project with README.md changelog and package.json at 1.2.3."""
    (tmp_path / "README.md").write_text(README)
    (tmp_path / "package.json").write_text(json.dumps({"name": "my-lib", "version": "1.2.3"}))
    return tmp_path


@pytest.fixture
def config(project: Path) -> ReleaseConfig:
    return resolve_release_config(project, None)
