"""Error taxonomy. Every failure is fatal to the run; the CLI maps ReleaseError to exit code 1."""

from __future__ import annotations


class ReleaseError(Exception):
    """Base class for errors that end a release run."""


class ConfigurationError(ReleaseError):
    """Missing credential or unusable config file."""


class StructureError(ReleaseError):
    """A document (changelog, manifest) does not have the expected shape."""


class ParseError(StructureError):
    """Version string or bump keyword could not be parsed."""


class UpstreamError(ReleaseError):
    """Release advisor request failed or returned an invalid response."""

    def __init__(self, message: str, detail: str = "") -> None:
        super().__init__(message)
        self.detail = detail


class UserAbort(ReleaseError):
    """User rejected the bump or discarded the changelog entry."""


class ExecutionError(ReleaseError):
    """An external command (git, npm, editor) failed."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command or []
        self.stderr = stderr
