"""Release: next version, changelog entry, release advisor, editor session, run orchestration."""

from .bump import BUMP_KINDS, next_version, npm_version, parse_version, read_current_version
from .changelog import compose_entry, insert_entry, update_changelog
from .flow import ReleaseRun, Stage, execute, resolve_bump

__all__ = [
    "BUMP_KINDS",
    "ReleaseRun",
    "Stage",
    "compose_entry",
    "execute",
    "insert_entry",
    "next_version",
    "npm_version",
    "parse_version",
    "read_current_version",
    "resolve_bump",
    "update_changelog",
]
