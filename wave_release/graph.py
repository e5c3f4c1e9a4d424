"""Dependency graph utilities.

Builds the package dependency graph and splits it into publish waves.
Packages must be published in dependency order so that when package A
depends on package B, B is already on the registry when A goes out.
"""

from __future__ import annotations

from collections.abc import Mapping, Set

from .errors import CyclicDependencyError
from .models import DependencyGraph, PackageRecord


def build_graph(catalog: Mapping[str, PackageRecord]) -> DependencyGraph:
    """Build the dependency graph for a package catalog.

    Only dependencies that are themselves in the catalog become edges.
    External packages (e.g. "lodash") are assumed to be available already
    and can't be waited on, so they are dropped.
    """
    edges: dict[str, frozenset[str]] = {}
    for name, record in catalog.items():
        edges[name] = frozenset(d for d in record.dependency_names if d in catalog)
    return DependencyGraph(nodes=dict(catalog), edges=edges)


def frontier(graph: DependencyGraph, published: Set[str]) -> list[str]:
    """Return the unpublished packages whose dependencies are all published.

    Sorted alphabetically for deterministic output.
    """
    return sorted(
        name
        for name in graph.nodes
        if name not in published and graph.dependencies_of(name) <= published
    )


def find_cycle(graph: DependencyGraph, among: Set[str]) -> list[str]:
    """Find one dependency cycle among the given packages.

    Only used to make the stall error readable; the scheduler itself detects
    cycles by the lack of progress. Returns the cycle with its first node
    repeated at the end (e.g. ["x", "y", "x"]), or [] if there is none.
    """
    # 0 = unvisited, 1 = on the current DFS path, 2 = done
    state = dict.fromkeys(among, 0)

    for start in sorted(among):
        if state[start]:
            continue
        path = [start]
        state[start] = 1
        stack = [iter(sorted(graph.dependencies_of(start) & among))]
        while stack:
            dep = next(stack[-1], None)
            if dep is None:
                stack.pop()
                state[path.pop()] = 2
            elif state[dep] == 1:
                return path[path.index(dep) :] + [dep]
            elif state[dep] == 0:
                state[dep] = 1
                path.append(dep)
                stack.append(iter(sorted(graph.dependencies_of(dep) & among)))

    return []


def stall_error(graph: DependencyGraph, published: Set[str]) -> CyclicDependencyError:
    """Build the error raised when no further package can be scheduled."""
    remaining = set(graph.nodes) - set(published)
    return CyclicDependencyError(remaining, find_cycle(graph, remaining))


def compute_waves(graph: DependencyGraph) -> list[list[str]]:
    """Split the graph into publish waves.

    Each wave holds every package whose dependencies were all covered by the
    previous waves, so members of a wave are independent of each other.

    Raises:
        CyclicDependencyError: If a pass schedules nothing while packages
            remain (a dependency cycle).

    Example:
        A has no deps, B depends on A, C depends on A and B:
        compute_waves(...) → [["a"], ["b"], ["c"]]
    """
    published: set[str] = set()
    waves: list[list[str]] = []

    while len(published) != len(graph.nodes):
        wave = frontier(graph, published)
        if not wave:
            raise stall_error(graph, published)
        waves.append(wave)
        published.update(wave)

    return waves
