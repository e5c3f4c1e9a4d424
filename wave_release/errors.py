"""Exceptions raised by the publish pipeline.

Every error is fatal: nothing is retried, and the CLI turns any
``ReleaseError`` into a non-zero exit with the message on stderr.
"""

from __future__ import annotations

from collections.abc import Iterable


class ReleaseError(Exception):
    """Base class for all wave-release failures."""


class CatalogLoadError(ReleaseError):
    """Raised when the packages directory or a package.json can't be read."""


class CyclicDependencyError(ReleaseError):
    """Raised when scheduling stalls with unpublished packages remaining.

    Attributes:
        remaining: Packages that could never be scheduled.
        cycle: One dependency cycle among them, first node repeated at the end.
    """

    def __init__(self, remaining: Iterable[str], cycle: list[str] | None = None):
        self.remaining = sorted(remaining)
        self.cycle = cycle or []
        msg = "Unable to publish packages: cyclical dependencies encountered."
        if self.cycle:
            msg += f"\n  cycle: {' → '.join(self.cycle)}"
        msg += f"\n  blocked: {', '.join(self.remaining)}"
        super().__init__(msg)


class RegistryUnavailableError(ReleaseError):
    """Raised when the registry can't answer an "is it published?" query."""


class PublishActionError(ReleaseError):
    """Raised when ``npm publish`` fails for a package."""

    def __init__(self, name: str, returncode: int | None, detail: str = ""):
        self.name = name
        self.returncode = returncode
        msg = f"Failed to publish {name}"
        if returncode is not None:
            msg += f" (exit code {returncode})"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
