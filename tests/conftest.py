"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from wave_release.models import PackageRecord


def record(name: str, *deps: str, version: str = "1.0.0") -> PackageRecord:
    """Build a PackageRecord without touching the filesystem."""
    return PackageRecord(
        name=name, version=version, path=f"packages/{name}", dependency_names=frozenset(deps)
    )


@pytest.fixture
def write_package(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper that writes packages/<dir>/package.json under tmp_path."""

    def _write(dir_name: str, manifest: dict[str, Any] | str) -> Path:
        package_dir = tmp_path / "packages" / dir_name
        package_dir.mkdir(parents=True)
        text = manifest if isinstance(manifest, str) else json.dumps(manifest)
        (package_dir / "package.json").write_text(text)
        return package_dir

    (tmp_path / "packages").mkdir()
    return _write


@pytest.fixture
def sample_manifest() -> dict[str, Any]:
    """A package.json using every dependency section."""
    return {
        "name": "@scope/my-package",
        "version": "2.0.0",
        "dependencies": {"lodash": "^4.17.0", "internal-dep": "1.0.0"},
        "optionalDependencies": {"fsevents": "*"},
        "peerDependencies": {"peer-internal": ">=0.5"},
        "devDependencies": {"jest": "^29.0.0"},
    }
