"""Error hierarchy for edge bundle builds.

Every failure aborts the build; none of these leave a usable bundle behind.
"""

from __future__ import annotations

from pathlib import Path


class BundleError(RuntimeError):
    """Base error for all bundle build operations."""


class BuildConfigError(ValueError):
    """Raised when the build configuration file is invalid or incomplete."""


class BuildMetadataError(BundleError):
    """Raised when the framework build metadata is missing or unreadable."""


class FrameworkBuildError(BundleError):
    """Raised when the framework's own build command fails."""


class ClassificationConflict(BundleError):
    """Raised when two source files resolve to the same route."""

    def __init__(self, route: str, first: str, second: str) -> None:
        self.route = route
        self.files = (first, second)
        msg = f"Route {route!r} is produced by both {first!r} and {second!r}."
        super().__init__(msg)


class MalformedRoutePath(BundleError, ValueError):
    """Raised when a route path has invalid parameter or catch-all syntax."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed route path {path!r}: {reason}")


class FilesystemFailure(BundleError):
    """Raised when emptying, copying, or writing bundle output fails."""

    def __init__(self, action: str, path: Path | str) -> None:
        self.action = action
        self.path = Path(path)
        super().__init__(f"Unable to {action} {self.path}")


__all__ = [
    "BuildConfigError",
    "BuildMetadataError",
    "BundleError",
    "ClassificationConflict",
    "FilesystemFailure",
    "FrameworkBuildError",
    "MalformedRoutePath",
]
