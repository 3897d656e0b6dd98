"""git: commit history since the last version tag; commit, push."""

from .git import (
    CommitRecord,
    commit_file,
    commits_since_last_tag,
    fetch_tags,
    last_version_tag,
    parse_commits,
    push_with_tags,
    read_log,
)

__all__ = [
    "CommitRecord",
    "commit_file",
    "commits_since_last_tag",
    "fetch_tags",
    "last_version_tag",
    "parse_commits",
    "push_with_tags",
    "read_log",
]
