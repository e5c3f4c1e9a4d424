"""Publish pipeline: discover → graph → schedule → publish.

This module orchestrates the wave-release process:
1. Discover all packages under the packages directory
2. Build the graph of their interdependencies
3. Publish in waves: each wave holds every package whose in-repo
   dependencies were published by earlier waves
4. Skip any package whose exact version is already on the registry

Reruns are safe: a run that died halfway picks up where it stopped, since
everything it already published is skipped.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import httpx
from pydantic import ValidationError

from .config import ReleaseConfig
from .credentials import npmrc
from .errors import CatalogLoadError, PublishActionError
from .graph import build_graph, frontier, stall_error
from .manifest import (
    get_dependency_names,
    get_package_name,
    get_package_version,
    is_package_dir,
    load_manifest,
)
from .models import DependencyGraph, PackageRecord, PublishTag
from .registry import is_published
from .shell import run, step

PublishFn = Callable[[PackageRecord], bool]


def load_catalog(root: Path) -> dict[str, PackageRecord]:
    """Scan ``root`` and load every package in it.

    Each direct subdirectory containing a package.json is a package; other
    entries are ignored.

    Returns:
        Map of package name to PackageRecord.

    Raises:
        CatalogLoadError: If ``root`` can't be listed, a manifest can't be
            parsed, or two packages share a name.
    """
    step(f"Discovering packages in {root}")

    try:
        entries = sorted(root.iterdir())
    except OSError as exc:
        raise CatalogLoadError(f"Cannot read packages directory {root}: {exc}") from exc

    packages: dict[str, PackageRecord] = {}
    for d in entries:
        if not is_package_dir(d):
            continue
        doc = load_manifest(d)
        name = get_package_name(doc, d)
        if name in packages:
            raise CatalogLoadError(
                f"Duplicate package name {name!r} in {packages[name].path} and {d}"
            )
        try:
            packages[name] = PackageRecord(
                name=name,
                version=get_package_version(doc, d),
                path=str(d),
                dependency_names=get_dependency_names(doc),
            )
        except ValidationError as exc:
            raise CatalogLoadError(f"Invalid package.json in {d}: {exc}") from exc

    # Print discovered packages for user feedback
    for name, info in packages.items():
        print(f"  {name} {info.version} ({info.path})")

    return packages


def npm_publish(record: PackageRecord, tag: PublishTag) -> None:
    """Run ``npm publish`` in the package directory.

    Raises:
        PublishActionError: If npm can't be started or exits non-zero.
    """
    args = ["npm", "publish", "--no-workspaces"]
    if tag is PublishTag.NIGHTLY:
        args.extend(["--tag", tag.value])
    try:
        result = run(*args, cwd=record.path, check=False)
    except OSError as exc:
        raise PublishActionError(record.name, None, str(exc)) from exc
    if result.returncode != 0:
        raise PublishActionError(record.name, result.returncode)


def publish_if_needed(
    record: PackageRecord,
    config: ReleaseConfig,
    client: httpx.Client | None = None,
) -> bool:
    """Publish one package unless its version is already on the registry.

    Returns:
        True if ``npm publish`` ran, False if the package was skipped.
    """
    if is_published(
        record.name, record.version, registry=config.registry, client=client
    ):
        print(f"  Already published: {record.name} {record.version}")
        return False

    if config.dry_run:
        print(f"  Would publish: {record.name} {record.version} ({config.tag.label})")
        return False

    print(f"  Publishing: {record.name} {record.version} ({config.tag.label})")
    token = config.token if config.writes_npmrc else None
    with npmrc(Path(record.path), config.registry, token):
        npm_publish(record, config.tag)
    return True


def publish_wave(
    graph: DependencyGraph, wave: list[str], publish_fn: PublishFn, jobs: int
) -> list[str]:
    """Publish every package in a wave, up to ``jobs`` at a time.

    Members of a wave don't depend on each other, so their order doesn't
    matter. If any publish fails, the rest of the wave still finishes and
    the first error is raised afterwards.

    Returns:
        Names of the packages that were actually published.
    """
    if jobs <= 1 or len(wave) == 1:
        return [name for name in wave if publish_fn(graph.nodes[name])]

    published: list[str] = []
    first_error: BaseException | None = None
    with ThreadPoolExecutor(max_workers=min(jobs, len(wave))) as executor:
        futures = {executor.submit(publish_fn, graph.nodes[n]): n for n in wave}
        for future in as_completed(futures):
            try:
                if future.result():
                    published.append(futures[future])
            except Exception as exc:
                if first_error is None:
                    first_error = exc
    if first_error is not None:
        raise first_error
    return sorted(published)


def publish_all(
    graph: DependencyGraph, publish_fn: PublishFn, *, jobs: int = 1
) -> list[str]:
    """Publish the whole graph wave by wave.

    A package is only handed to ``publish_fn`` once everything it depends on
    has been handled. Only this loop adds to the set of handled packages.

    Returns:
        Names of the packages that were actually published, in wave order.

    Raises:
        CyclicDependencyError: If a wave comes up empty with packages left.
    """
    done: set[str] = set()
    published: list[str] = []
    index = 0

    while len(done) != len(graph.nodes):
        wave = frontier(graph, done)
        if not wave:
            raise stall_error(graph, done)
        step(f"Wave {index}: {', '.join(wave)}")
        published.extend(publish_wave(graph, wave, publish_fn, jobs))
        done.update(wave)
        index += 1

    return published


def run_release(packages_dir: Path, config: ReleaseConfig) -> list[str]:
    """Execute the full publish pipeline.

    Args:
        packages_dir: Directory whose subdirectories are the packages.
        config: Settings for this run.

    Returns:
        Names of the packages that were actually published.
    """
    catalog = load_catalog(packages_dir)
    graph = build_graph(catalog)

    with httpx.Client(follow_redirects=True) as client:
        published = publish_all(
            graph,
            lambda record: publish_if_needed(record, config, client),
            jobs=config.jobs,
        )

    skipped = len(graph.nodes) - len(published)
    summary = f"Done! Published {len(published)}, skipped {skipped}."
    print(f"\n{'=' * 60}\n{summary}\n{'=' * 60}")
    return published
