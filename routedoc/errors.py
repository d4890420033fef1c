"""Exception types raised by routedoc."""

from __future__ import annotations

from pathlib import Path


class RouteDocError(RuntimeError):
    """Base class for failures that abort a generation run."""


class FrameworkNotDetectedError(RouteDocError):
    """Raised when no supported web framework is imported and none was forced."""

    def __init__(self) -> None:
        super().__init__(
            "No supported web framework detected. "
            "Specify one with --framework (supported: axum, actix-web)."
        )


class NoSourceFilesError(RouteDocError):
    """Raised when a project yields no usable Rust sources."""


class SourceParseError(RouteDocError):
    """Raised when a Rust source file cannot be parsed."""

    def __init__(self, path: Path | str, message: str) -> None:
        self.path = Path(path)
        self.message = message
        super().__init__(f"Failed to parse {self.path}: {message}")


__all__ = [
    "FrameworkNotDetectedError",
    "NoSourceFilesError",
    "RouteDocError",
    "SourceParseError",
]
