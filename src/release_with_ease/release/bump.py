"""Compute the next semantic version and bump package.json via `npm version`.

Source of truth: the manifest's "version" field (X.Y.Z, no "v" prefix, no prerelease).
`npm version <bump>` rewrites the manifest, commits it and creates the vX.Y.Z tag.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from release_with_ease.errors import ParseError, StructureError
from release_with_ease.helpers import run_command

log = logging.getLogger(__name__)

BUMP_KINDS = ("major", "minor", "patch")

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


def parse_version(version: str) -> tuple[int, int, int]:
    """Split X.Y.Z into three non-negative ints. Raises ParseError otherwise."""
    m = _VERSION_RE.match(version)
    if not m:
        msg = f"Invalid version: {version!r} (expected MAJOR.MINOR.PATCH)"
        raise ParseError(msg)
    return int(m.group(1)), int(m.group(2)), int(m.group(3))


def next_version(current: str, bump: str) -> str:
    """Compute next version. Bump: major, minor, patch. Returns X.Y.Z."""
    x, y, z = parse_version(current)
    if bump == "major":
        return f"{x + 1}.0.0"
    if bump == "minor":
        return f"{x}.{y + 1}.0"
    if bump == "patch":
        return f"{x}.{y}.{z + 1}"
    msg = f"Unknown bump: {bump}. Use major, minor, or patch."
    raise ParseError(msg)


def read_current_version(manifest: Path) -> str:
    """Read "version" from package.json."""
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        msg = f"{manifest} not found"
        raise StructureError(msg) from e
    except json.JSONDecodeError as e:
        msg = f"Could not parse {manifest}: {e}"
        raise StructureError(msg) from e
    version = data.get("version") if isinstance(data, dict) else None
    if not isinstance(version, str) or not version:
        msg = f"Could not find \"version\" in {manifest}"
        raise StructureError(msg)
    return version


def npm_version(project_root: Path, bump: str) -> None:
    """Run `npm version <bump>`; npm commits the manifest and tags it with the version as message."""
    if bump not in BUMP_KINDS:
        msg = f"Unknown bump: {bump}. Use major, minor, or patch."
        raise ParseError(msg)
    out = run_command(["npm", "version", bump, "-m", "%s"], cwd=project_root)
    log.debug("npm version %s -> %s", bump, out.strip())
