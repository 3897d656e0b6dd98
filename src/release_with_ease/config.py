"""Release configuration (paths, git remote, advisor model).

Optional YAML file `.release-with-ease.yaml` in the project root:
- changelog: markdown file holding the `# Changelog` section (default README.md)
- manifest: npm manifest the current version is read from (default package.json)
- remote, branch: where the release commit and tags are pushed
- commit_limit: commits read when no version tag exists yet
- api_url, model, temperature, max_tokens: release advisor request
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from release_with_ease.errors import ConfigurationError

CONFIG_FILE_NAME = ".release-with-ease.yaml"
API_KEY_ENV = "OPENAI_API_KEY"

DEFAULT_RELEASE_CONFIG: dict[str, Any] = {
    "changelog": "README.md",
    "manifest": "package.json",
    "remote": "origin",
    "branch": "main",
    "commit_limit": 100,
    "api_url": "https://api.openai.com/v1/chat/completions",
    "model": "gpt-4o-mini",
    "temperature": 0.2,
    "max_tokens": 500,
}

_FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "changelog": (str,),
    "manifest": (str,),
    "remote": (str,),
    "branch": (str,),
    "commit_limit": (int,),
    "api_url": (str,),
    "model": (str,),
    "temperature": (int, float),
    "max_tokens": (int,),
}


@dataclass(frozen=True)
class ReleaseConfig:
    project_root: Path
    changelog: str
    manifest: str
    remote: str
    branch: str
    commit_limit: int
    api_url: str
    model: str
    temperature: float
    max_tokens: int

    @property
    def changelog_path(self) -> Path:
        return self.project_root / self.changelog

    @property
    def manifest_path(self) -> Path:
        return self.project_root / self.manifest


def resolve_release_config(project_root: Path, overrides: Mapping[str, Any] | None) -> ReleaseConfig:
    """Return config with defaults filled. Unknown keys are ignored; wrong types raise ConfigurationError."""
    values = dict(DEFAULT_RELEASE_CONFIG)
    for key, value in (overrides or {}).items():
        if key not in _FIELD_TYPES:
            continue
        expected = _FIELD_TYPES[key]
        # bool is an int subclass; never a valid count or temperature here
        if isinstance(value, bool) or not isinstance(value, expected):
            names = " or ".join(t.__name__ for t in expected)
            msg = f"Config key {key!r} must be {names}, got {type(value).__name__}"
            raise ConfigurationError(msg)
        values[key] = value
    if values["commit_limit"] < 1:
        msg = f"Config key 'commit_limit' must be positive, got {values['commit_limit']}"
        raise ConfigurationError(msg)
    values["temperature"] = float(values["temperature"])
    return ReleaseConfig(project_root=project_root, **values)


def load_config(project_root: Path, config_path: Path | None = None) -> ReleaseConfig:
    """Load `.release-with-ease.yaml` (or config_path) and merge over defaults.

    A missing default file means defaults; a missing explicit config_path is an error.
    """
    import yaml

    explicit = config_path is not None
    path = config_path if config_path is not None else project_root / CONFIG_FILE_NAME
    if not path.is_absolute():
        path = project_root / path
    if not path.is_file():
        if explicit:
            msg = f"Config file not found: {path}"
            raise ConfigurationError(msg)
        return resolve_release_config(project_root, None)

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f"Could not parse {path}: {e}"
        raise ConfigurationError(msg) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping, got {type(data).__name__}"
        raise ConfigurationError(msg)
    return resolve_release_config(project_root, data)


def require_api_key(environ: Mapping[str, str] | None = None) -> str:
    """Return the advisor API key from the environment. Raises ConfigurationError when unset."""
    env = os.environ if environ is None else environ
    key = env.get(API_KEY_ENV, "").strip()
    if not key:
        msg = (
            f"{API_KEY_ENV} environment variable is required.\n"
            "   You can get one from https://platform.openai.com/api-keys\n"
            f"   Please add it to your .env file: {API_KEY_ENV}=your_key_here"
        )
        raise ConfigurationError(msg)
    return key
