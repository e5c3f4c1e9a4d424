"""CLI entry point for wave-release."""

from __future__ import annotations

from pathlib import Path

import click

from wave_release.config import ReleaseConfig
from wave_release.errors import ReleaseError
from wave_release.graph import build_graph, compute_waves
from wave_release.models import PublishTag
from wave_release.pipeline import load_catalog, run_release

packages_dir_option = click.option(
    "--packages-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default="packages",
    show_default=True,
    help="Directory whose subdirectories are the packages to publish.",
)


@click.group()
@click.version_option(package_name="wave-release")
def cli() -> None:
    """Publish interdependent npm packages in dependency order."""


@cli.command()
@packages_dir_option
def plan(packages_dir: Path) -> None:
    """Show the publish waves without touching the registry."""
    try:
        graph = build_graph(load_catalog(packages_dir))
        waves = compute_waves(graph)
    except ReleaseError as exc:
        raise click.ClickException(str(exc)) from exc

    for index, wave in enumerate(waves):
        click.echo(f"Wave {index}:")
        for name in wave:
            deps = sorted(graph.dependencies_of(name))
            suffix = f" → [{', '.join(deps)}]" if deps else ""
            click.echo(f"  {name} {graph.nodes[name].version}{suffix}")


@cli.command()
@packages_dir_option
@click.option(
    "--nightly",
    is_flag=True,
    help=(
        "Publish under the 'nightly' tag. Also enabled by RELEASE_NIGHTLY"
        " (formerly COMPILER_NIGHTLY, still accepted)."
    ),
)
@click.option(
    "--jobs",
    "-j",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Max packages published at once within a wave.",
)
@click.option("--dry-run", is_flag=True, help="Check the registry but don't publish.")
@click.option(
    "--registry", default=None, help="npm registry URL (default: NPM_REGISTRY)."
)
def publish(
    packages_dir: Path,
    nightly: bool,
    jobs: int,
    dry_run: bool,
    registry: str | None,
) -> None:
    """Publish every package whose version isn't on the registry yet."""
    config = ReleaseConfig.from_env()
    overrides: dict[str, object] = {"jobs": jobs, "dry_run": dry_run}
    if nightly:
        overrides["tag"] = PublishTag.NIGHTLY
    if registry:
        overrides["registry"] = registry.rstrip("/")
    config = config.model_copy(update=overrides)

    try:
        run_release(packages_dir, config)
    except ReleaseError as exc:
        raise click.ClickException(str(exc)) from exc
