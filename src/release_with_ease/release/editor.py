"""Scoped temporary changelog entry file and the external editor session."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import tempfile
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path

from release_with_ease.errors import ExecutionError, UserAbort

log = logging.getLogger(__name__)

EDITOR_ENV_VARS = ("EDITOR", "VISUAL")
DEFAULT_EDITOR = "nano"


def resolve_editor(environ: Mapping[str, str] | None = None) -> str:
    """First of EDITOR, VISUAL that is set; else nano."""
    env = os.environ if environ is None else environ
    for name in EDITOR_ENV_VARS:
        value = env.get(name, "").strip()
        if value:
            return value
    return DEFAULT_EDITOR


@contextmanager
def scoped_entry_file(content: str) -> Iterator[Path]:
    """Write content to a uniquely named temp file; remove it on exit, whatever happened."""
    fd, name = tempfile.mkstemp(prefix="changelog-entry-", suffix=".tmp")
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            log.warning("Could not remove temporary entry file %s: %s", path, e)


def open_in_editor(path: Path, editor: str) -> None:
    """Block until the editor exits. The editor value may carry arguments, e.g. "code --wait"."""
    msg = "Failed to open editor. Please set EDITOR or VISUAL environment variable."
    try:
        command = shlex.split(editor)
    except ValueError as e:
        raise ExecutionError(f"{msg} Could not parse {editor!r}: {e}") from e
    if not command or not command[0]:
        raise ExecutionError(f"{msg} Editor command {editor!r} is empty.")
    args = [*command, str(path)]
    log.debug("Opening editor: %s", " ".join(args))
    try:
        subprocess.run(args, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise ExecutionError(msg, command=args) from e


def read_edited_entry(path: Path) -> list[str]:
    """Edited entry as lines (surrounding whitespace trimmed). A removed file means the user discarded it."""
    if not path.exists():
        msg = "Editor was closed without saving. Aborting release."
        raise UserAbort(msg)
    text = path.read_text(encoding="utf-8").strip()
    if not text:
        msg = "Changelog entry is empty. Aborting release."
        raise UserAbort(msg)
    return text.split("\n")
