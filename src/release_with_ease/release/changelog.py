"""Insert a version entry under the `# Changelog` heading of a markdown document."""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from release_with_ease.errors import StructureError

_CHANGELOG_HEADING = re.compile(r"^#\s*Changelog\s*$", re.IGNORECASE)


def compose_entry(version: str, notes: Sequence[str]) -> str:
    """Entry skeleton: "## <version>", blank line, one bullet per note, trailing newline."""
    return "\n".join([f"## {version}", "", *(f"- {note}" for note in notes), ""])


def insert_entry(document: str, entry_lines: Sequence[str]) -> str:
    """Insert entry_lines plus one blank line right after the Changelog heading and its blank lines.

    Everything outside the inserted block is kept verbatim. Raises StructureError
    if no line is a single-# "Changelog" heading.
    """
    lines = document.split("\n")
    heading_idx = next(
        (i for i, line in enumerate(lines) if _CHANGELOG_HEADING.match(line.strip())),
        None,
    )
    if heading_idx is None:
        msg = 'Could not find "# Changelog" section'
        raise StructureError(msg)

    insert_at = heading_idx + 1
    while insert_at < len(lines) and lines[insert_at].strip() == "":
        insert_at += 1

    lines[insert_at:insert_at] = [*entry_lines, ""]
    return "\n".join(lines)


def update_changelog(path: Path, entry_lines: Sequence[str]) -> None:
    """Read path, insert the entry, write it back."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        msg = f"Changelog file not found: {path}"
        raise StructureError(msg) from e
    try:
        updated = insert_entry(text, entry_lines)
    except StructureError as e:
        msg = f"{e} in {path.name}"
        raise StructureError(msg) from e
    path.write_text(updated, encoding="utf-8")
