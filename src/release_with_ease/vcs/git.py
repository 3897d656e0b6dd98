"""Read commit history since the last vX.Y.Z tag; stage, commit and push.

Log records are `%H%x1f%s%x1f%b%x1e`: fields separated by 0x1F, records by 0x1E,
so subjects and bodies may contain any printable text including newlines.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from release_with_ease.errors import ExecutionError
from release_with_ease.helpers import run_command

log = logging.getLogger(__name__)

FIELD_SEP = "\x1f"
RECORD_SEP = "\x1e"
LOG_FORMAT = "--pretty=format:%H%x1f%s%x1f%b%x1e"
VERSION_TAG_GLOB = "v[0-9]*.[0-9]*.[0-9]*"


@dataclass(frozen=True)
class CommitRecord:
    hash: str
    subject: str
    body: str = ""

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


def fetch_tags(project_root: Path, remote: str = "origin") -> bool:
    """Best-effort `git fetch <remote> --tags`. Returns False when it fails (offline, no remote)."""
    try:
        run_command(["git", "fetch", remote, "--tags"], cwd=project_root)
    except ExecutionError as e:
        log.debug("Could not fetch tags from %s: %s %s", remote, e, e.stderr.strip())
        return False
    return True


def last_version_tag(project_root: Path) -> str | None:
    """Most recent tag reachable from HEAD matching vX.Y.Z, or None."""
    try:
        out = run_command(
            ["git", "describe", "--tags", "--match", VERSION_TAG_GLOB, "--abbrev=0"],
            cwd=project_root,
        )
    except ExecutionError as e:
        log.debug("No version tag found: %s", e.stderr.strip())
        return None
    return out.strip() or None


def read_log(project_root: Path, since_tag: str | None, limit: int = 100) -> str:
    """Raw log since since_tag, or the last `limit` commits when there is no tag."""
    if since_tag:
        args = ["git", "log", f"{since_tag}..HEAD", LOG_FORMAT]
    else:
        args = ["git", "log", "-n", str(limit), LOG_FORMAT]
    return run_command(args, cwd=project_root)


def parse_commits(raw: str) -> list[CommitRecord]:
    """Split raw log output into CommitRecords. Empty chunks are dropped."""
    out: list[CommitRecord] = []
    for chunk in raw.split(RECORD_SEP):
        chunk = chunk.strip()
        if not chunk:
            continue
        fields = chunk.split(FIELD_SEP)
        commit_hash = fields[0]
        subject = fields[1] if len(fields) > 1 else ""
        body = fields[2] if len(fields) > 2 else ""
        out.append(CommitRecord(hash=commit_hash, subject=subject, body=body))
    return out


def commits_since_last_tag(
    project_root: Path,
    remote: str = "origin",
    limit: int = 100,
) -> tuple[str | None, list[CommitRecord]]:
    """Fetch tags, find the last version tag, return (tag, commits since it)."""
    fetch_tags(project_root, remote)
    tag = last_version_tag(project_root)
    raw = read_log(project_root, tag, limit)
    return tag, parse_commits(raw)


def commit_file(project_root: Path, path: Path, message: str) -> None:
    """`git add <path>` then `git commit -m <message>`."""
    try:
        rel = path.relative_to(project_root)
    except ValueError:
        rel = path
    run_command(["git", "add", str(rel)], cwd=project_root)
    run_command(["git", "commit", "-m", message], cwd=project_root)


def push_with_tags(project_root: Path, remote: str = "origin", branch: str = "main") -> None:
    """`git push <remote> <branch> --tags`."""
    run_command(["git", "push", remote, branch, "--tags"], cwd=project_root)
