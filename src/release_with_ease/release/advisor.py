"""Ask an OpenAI-compatible chat completions API for a semver bump and release notes.

The completion must be a bare JSON object:
    {"bump": "major|minor|patch", "reasoning": "...", "notes": ["...", ...]}
Responses are validated strictly; nothing is defaulted and nothing is retried.
"""

from __future__ import annotations

import http.client
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from release_with_ease.config import ReleaseConfig
from release_with_ease.errors import UpstreamError
from release_with_ease.release.bump import BUMP_KINDS
from release_with_ease.vcs.git import CommitRecord

log = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a release assistant. Given recent git commits, decide one of: major, minor, "
    "or patch following semver. Consider conventional commits, breaking changes, and scope. "
    "Also generate concise release notes for a public changelog. Respond with JSON containing "
    '"bump" (major/minor/patch), "reasoning" (brief explanation for version bump), and '
    '"notes" (array of 3-8 short bullet points of the most important user-facing changes). '
    'Use present tense for release notes (e.g. "Add script" not "Added script" or '
    '"Adds script"). Do not wrap the JSON in ```json or anything else.'
)


@dataclass(frozen=True)
class ReleaseAdvice:
    bump: str
    reasoning: str
    notes: tuple[str, ...]


def render_commits(commits: Sequence[CommitRecord]) -> str:
    """One bullet per commit: "- <subject>" then the stripped body on the next line."""
    return "\n".join(f"- {c.subject}\n{c.body.strip()}" for c in commits)


def build_request_body(commits: Sequence[CommitRecord], config: ReleaseConfig) -> dict[str, Any]:
    return {
        "model": config.model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": render_commits(commits)},
        ],
        "temperature": config.temperature,
        "max_tokens": config.max_tokens,
    }


def parse_advice(content: str) -> ReleaseAdvice:
    """Validate the completion text. Raises UpstreamError on any missing or invalid field."""
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        msg = f"Release advisor returned invalid JSON: {e}"
        raise UpstreamError(msg, detail=content) from e
    if not isinstance(parsed, dict):
        msg = "Release advisor response is not a JSON object"
        raise UpstreamError(msg, detail=content)

    bump = parsed.get("bump")
    if bump not in BUMP_KINDS:
        msg = f"Invalid bump value in release advisor response: {bump!r}"
        raise UpstreamError(msg, detail=content)

    reasoning = parsed.get("reasoning")
    if not isinstance(reasoning, str) or not reasoning.strip():
        msg = "Missing reasoning in release advisor response"
        raise UpstreamError(msg, detail=content)

    notes = parsed.get("notes")
    if not isinstance(notes, list) or not notes:
        msg = "Missing or invalid notes array in release advisor response"
        raise UpstreamError(msg, detail=content)
    if not all(isinstance(n, str) and n.strip() for n in notes):
        msg = "Release advisor notes must be non-empty strings"
        raise UpstreamError(msg, detail=content)

    return ReleaseAdvice(
        bump=bump,
        reasoning=reasoning.strip(),
        notes=tuple(n.strip() for n in notes),
    )


def _completion_text(data: Any) -> str:
    """First choice's message content, stripped."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        msg = "Release advisor response has no completion content"
        raise UpstreamError(msg, detail=json.dumps(data)[:2000]) from e
    return (content or "").strip()


def request_advice(
    commits: Sequence[CommitRecord],
    api_key: str,
    config: ReleaseConfig,
) -> ReleaseAdvice:
    """POST the commits to the chat completions endpoint and validate the answer."""
    body = json.dumps(build_request_body(commits, config)).encode()
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
        "User-Agent": "release-with-ease",
    }
    req = Request(config.api_url, data=body, headers=headers, method="POST")
    log.debug("POST %s model=%s commits=%d", config.api_url, config.model, len(commits))

    try:
        with urlopen(req) as response:
            raw = response.read().decode()
    except HTTPError as e:
        detail = e.read().decode(errors="replace") if e.fp is not None else ""
        msg = f"Failed to determine version bump: {e.reason} {e.code}"
        raise UpstreamError(msg, detail=detail) from e
    except URLError as e:
        msg = f"Failed to reach release advisor at {config.api_url}: {e.reason}"
        raise UpstreamError(msg) from e
    except (OSError, http.client.HTTPException) as e:
        msg = f"Release advisor connection failed: {type(e).__name__}: {e}"
        raise UpstreamError(msg) from e
    except UnicodeDecodeError as e:
        msg = f"Release advisor returned a body that is not UTF-8: {e}"
        raise UpstreamError(msg) from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        msg = f"Release advisor returned a non-JSON body: {e}"
        raise UpstreamError(msg, detail=raw[:2000]) from e

    return parse_advice(_completion_text(data))
