"""Data models for wave-release.

These Pydantic models represent the core data structures used throughout
the publish pipeline.
"""

from __future__ import annotations

from enum import Enum

import semver
from pydantic import BaseModel, ConfigDict, Field, field_validator


class PublishTag(str, Enum):
    """npm distribution tag applied to every publish in a run."""

    LATEST = "latest"
    NIGHTLY = "nightly"

    @property
    def label(self) -> str:
        """Human-readable tag for log lines.

        LATEST is npm's default, so no ``--tag`` flag is passed for it.
        """
        return "default tag" if self is PublishTag.LATEST else f"tag {self.value}"


class PackageRecord(BaseModel):
    """Metadata for a single package found under the packages directory.

    Attributes:
        name: Package name from package.json (unique key).
        version: Version string from package.json.
        path: Path to the package directory.
        dependency_names: Names from dependencies, optionalDependencies and
              peerDependencies. devDependencies are not included since they
              don't gate publish order.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    path: str
    dependency_names: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        if not semver.Version.is_valid(value):
            raise ValueError(f"not a valid semantic version: {value!r}")
        return value


class DependencyGraph(BaseModel):
    """Directed graph over package names.

    An edge P → D means "P depends on D". Edges only point at packages in
    ``nodes``; anything else was dropped when the graph was built.
    """

    model_config = ConfigDict(frozen=True)

    nodes: dict[str, PackageRecord]
    edges: dict[str, frozenset[str]]

    def dependencies_of(self, name: str) -> frozenset[str]:
        """In-catalog packages that ``name`` depends on.

        Unknown names have no dependencies.
        """
        return self.edges.get(name, frozenset())

    def dependents_of(self, name: str) -> list[str]:
        """Packages that have an edge pointing at ``name``, sorted."""
        return sorted(n for n, deps in self.edges.items() if name in deps)

    @property
    def edge_count(self) -> int:
        """Total number of dependency edges in the graph."""
        return sum(len(deps) for deps in self.edges.values())
