"""Release run as an explicit sequence of stages.

collect-commits -> obtain-advice -> confirm-bump -> compose-entry
    -> edit-entry (skipped on dry run) -> preview | persist -> done

Each step returns the next stage; no stage is revisited. Failures raise a
ReleaseError subclass and end the run. The temporary entry file is registered
on the run's ExitStack so it is removed on every exit path.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import ExitStack
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TypeVar

from release_with_ease.config import ReleaseConfig
from release_with_ease.errors import ReleaseError, UserAbort
from release_with_ease.release import editor
from release_with_ease.release.advisor import ReleaseAdvice, request_advice
from release_with_ease.release.bump import BUMP_KINDS, next_version, npm_version, read_current_version
from release_with_ease.release.changelog import compose_entry, update_changelog
from release_with_ease.vcs import git

log = logging.getLogger(__name__)

CONFIRM_PROMPT = "Proceed with this bump? [Y/n/major/minor/patch] "

T = TypeVar("T")


class Stage(Enum):
    COLLECT_COMMITS = "collect-commits"
    OBTAIN_ADVICE = "obtain-advice"
    CONFIRM_BUMP = "confirm-bump"
    COMPOSE_ENTRY = "compose-entry"
    EDIT_ENTRY = "edit-entry"
    PREVIEW = "preview"
    PERSIST = "persist"
    DONE = "done"


@dataclass
class ReleaseRun:
    config: ReleaseConfig
    api_key: str
    dry_run: bool = False
    editor_command: str = editor.DEFAULT_EDITOR
    ask: Callable[[str], str] = input
    stage: Stage = Stage.COLLECT_COMMITS
    last_tag: str | None = None
    commits: list[git.CommitRecord] = field(default_factory=list)
    advice: ReleaseAdvice | None = None
    bump: str | None = None
    current_version: str | None = None
    new_version: str | None = None
    entry_path: Path | None = None
    entry_lines: list[str] = field(default_factory=list)
    resources: ExitStack | None = None

    @property
    def project_root(self) -> Path:
        return self.config.project_root


def resolve_bump(answer: str, suggested: str) -> str:
    """Map the confirmation answer to a bump. "n"/"no" aborts; a bump keyword overrides; anything else accepts."""
    choice = answer.strip().lower()
    if choice in BUMP_KINDS:
        return choice
    if choice in ("n", "no"):
        msg = "Aborted by user."
        raise UserAbort(msg)
    return suggested


def _require(value: T | None, name: str) -> T:
    """Return a value an earlier stage must have set; a stage run out of order is a ReleaseError."""
    if value is None:
        msg = f"Release run is missing {name}; stages ran out of order"
        raise ReleaseError(msg)
    return value


def _collect_commits(run: ReleaseRun) -> Stage:
    run.last_tag, run.commits = git.commits_since_last_tag(
        run.project_root,
        remote=run.config.remote,
        limit=run.config.commit_limit,
    )
    if not run.commits:
        msg = "No commits found since last tag. Aborting."
        raise ReleaseError(msg)

    print(f"\nAnalyzing {len(run.commits)} commits since {run.last_tag or 'beginning'}:")
    for commit in run.commits:
        print(f"  {commit.short_hash} {commit.subject}")
    return Stage.OBTAIN_ADVICE


def _obtain_advice(run: ReleaseRun) -> Stage:
    print("\nWaiting for the release advisor to analyze commits...")
    run.advice = request_advice(run.commits, run.api_key, run.config)
    print(f"\nSuggested version bump: {run.advice.bump}\n")
    print(f"Reasoning:\n\n{run.advice.reasoning}\n")
    return Stage.CONFIRM_BUMP


def _confirm_bump(run: ReleaseRun) -> Stage:
    advice = _require(run.advice, "advice")
    try:
        answer = run.ask(CONFIRM_PROMPT)
    except (EOFError, KeyboardInterrupt) as e:
        msg = "No confirmation received. Aborted."
        raise UserAbort(msg) from e
    run.bump = resolve_bump(answer, advice.bump)
    if run.bump != advice.bump:
        log.debug("Bump overridden: %s -> %s", advice.bump, run.bump)
    run.current_version = read_current_version(run.config.manifest_path)
    run.new_version = next_version(run.current_version, run.bump)
    return Stage.COMPOSE_ENTRY


def _compose_entry(run: ReleaseRun) -> Stage:
    advice = _require(run.advice, "advice")
    new_version = _require(run.new_version, "new version")
    resources = _require(run.resources, "resources")
    content = compose_entry(new_version, advice.notes)
    run.entry_path = resources.enter_context(editor.scoped_entry_file(content))

    print(f"\nRelease notes for {new_version}:")
    for note in advice.notes:
        print(f"  - {note}")
    return Stage.PREVIEW if run.dry_run else Stage.EDIT_ENTRY


def _edit_entry(run: ReleaseRun) -> Stage:
    entry_path = _require(run.entry_path, "entry file")
    print(f"\nOpening editor to review changelog entry for {run.new_version}...")
    print("   Edit the changelog entry as needed, then save and close the editor.")
    editor.open_in_editor(entry_path, run.editor_command)
    run.entry_lines = editor.read_edited_entry(entry_path)
    return Stage.PERSIST


def _preview(run: ReleaseRun) -> Stage:
    changelog = run.config.changelog
    print("\nDRY RUN - Would have done the following:")
    print(f"  1. Insert changelog entry for {run.new_version} into {changelog}")
    print(f"  2. git add {changelog}")
    print(f'  3. git commit -m "{_commit_message(run)}"')
    print(f'  4. npm version {run.bump} -m "%s"')
    print(f"  5. git push {run.config.remote} {run.config.branch} --tags")
    print("\nDry run complete. Use without --dry-run to execute.")
    return Stage.DONE


def _persist(run: ReleaseRun) -> Stage:
    bump = _require(run.bump, "bump")
    update_changelog(run.config.changelog_path, run.entry_lines)
    git.commit_file(run.project_root, run.config.changelog_path, _commit_message(run))
    npm_version(run.project_root, bump)
    git.push_with_tags(run.project_root, run.config.remote, run.config.branch)
    print(f"\nRelease {run.new_version} created and pushed with tags.")
    return Stage.DONE


def _commit_message(run: ReleaseRun) -> str:
    return f"Update changelog for {run.new_version}"


STEPS: dict[Stage, Callable[[ReleaseRun], Stage]] = {
    Stage.COLLECT_COMMITS: _collect_commits,
    Stage.OBTAIN_ADVICE: _obtain_advice,
    Stage.CONFIRM_BUMP: _confirm_bump,
    Stage.COMPOSE_ENTRY: _compose_entry,
    Stage.EDIT_ENTRY: _edit_entry,
    Stage.PREVIEW: _preview,
    Stage.PERSIST: _persist,
}


def execute(run: ReleaseRun) -> ReleaseRun:
    """Advance run through STEPS until DONE. Raises ReleaseError on any terminal failure."""
    with ExitStack() as stack:
        run.resources = stack
        try:
            while run.stage is not Stage.DONE:
                log.debug("Stage %s", run.stage.value)
                run.stage = STEPS[run.stage](run)
        finally:
            run.resources = None
    return run
