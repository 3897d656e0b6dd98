"""Main CLI entry point for release-with-ease."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from release_with_ease.config import load_config, require_api_key
from release_with_ease.errors import ExecutionError, ReleaseError, UpstreamError
from release_with_ease.release import editor
from release_with_ease.release.flow import ReleaseRun, execute

USAGE = "Usage: release-with-ease [--dry-run] [--project-root <path>] [--config <path>] [--verbose]"


def _print_usage() -> None:
    print(USAGE, file=sys.stderr)
    print("  --dry-run             Preview the release; change nothing", file=sys.stderr)
    print("  --project-root <path> Repository root (default: current directory)", file=sys.stderr)
    print(
        "  --config <path>       YAML config (default: <project-root>/.release-with-ease.yaml)",
        file=sys.stderr,
    )
    print("  --verbose, -v         Log external commands and requests", file=sys.stderr)


@dataclass
class CliOptions:
    dry_run: bool = False
    verbose: bool = False
    project_root: Path = field(default_factory=Path.cwd)
    config_path: Path | None = None


def parse_args(argv: list[str]) -> CliOptions:
    """Parse argv into options. Exits 1 on unknown arguments, 0 on --help."""
    opts = CliOptions()
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--dry-run":
            opts.dry_run = True
            i += 1
        elif arg in ("--verbose", "-v"):
            opts.verbose = True
            i += 1
        elif arg == "--project-root" and i + 1 < len(argv):
            opts.project_root = Path(argv[i + 1]).resolve()
            i += 2
        elif arg == "--config" and i + 1 < len(argv):
            opts.config_path = Path(argv[i + 1]).resolve()
            i += 2
        elif arg in ("--help", "-h"):
            _print_usage()
            sys.exit(0)
        else:
            print(f"Error: Unknown argument: {arg}", file=sys.stderr)
            _print_usage()
            sys.exit(1)
    return opts


def run(
    project_root: Path,
    *,
    dry_run: bool = False,
    config_path: Path | None = None,
) -> int:
    """Run one release. Returns 0 on success or completed preview, 1 on any abort or error."""
    try:
        api_key = require_api_key()
        config = load_config(project_root, config_path)
        if dry_run:
            print("DRY RUN MODE - No changes will be made\n")
        execute(
            ReleaseRun(
                config=config,
                api_key=api_key,
                dry_run=dry_run,
                editor_command=editor.resolve_editor(),
            )
        )
    except ReleaseError as e:
        print(f"Error: {e}", file=sys.stderr)
        if isinstance(e, ExecutionError) and e.stderr:
            print(e.stderr.rstrip(), file=sys.stderr)
        if isinstance(e, UpstreamError) and e.detail:
            print(e.detail.rstrip(), file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    opts = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if opts.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(
        run(
            opts.project_root,
            dry_run=opts.dry_run,
            config_path=opts.config_path,
        )
    )


if __name__ == "__main__":
    main()
