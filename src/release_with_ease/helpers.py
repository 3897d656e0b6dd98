"""Shared helpers for release_with_ease (external commands).

Used by vcs.git, release.bump.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from release_with_ease.errors import ExecutionError

log = logging.getLogger(__name__)


def run_command(args: list[str], cwd: Path | None = None) -> str:
    """Run a command, capture output, return stdout. Raises ExecutionError on failure."""
    log.debug("Running %s (cwd=%s)", " ".join(args), cwd)
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            check=True,
            cwd=cwd,
        )
    except FileNotFoundError as e:
        msg = f"{args[0]} not found in PATH"
        raise ExecutionError(msg, command=args) from e
    except subprocess.CalledProcessError as e:
        msg = f"Command failed with exit code {e.returncode}: {' '.join(args)}"
        raise ExecutionError(msg, command=args, stderr=e.stderr or "") from e
    return result.stdout
