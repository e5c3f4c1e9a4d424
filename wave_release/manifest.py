"""package.json reading utilities.

Manifests are free-form JSON. A package must declare its name and version;
missing or oddly-typed dependency sections just count as empty.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .errors import CatalogLoadError

MANIFEST_NAME = "package.json"

# Dependency sections that gate publish order. devDependencies are left out:
# they're only needed to build/test a package, not to install it.
DEPENDENCY_FIELDS = ("dependencies", "optionalDependencies", "peerDependencies")


def is_package_dir(path: Path) -> bool:
    """Return True if ``path`` is a directory containing a package.json."""
    return path.is_dir() and (path / MANIFEST_NAME).is_file()


def load_manifest(package_dir: Path) -> dict[str, Any]:
    """Load and parse a package's package.json.

    Raises:
        CatalogLoadError: If the file can't be read or isn't a JSON object.
    """
    manifest_path = package_dir / MANIFEST_NAME
    try:
        doc = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogLoadError(f"Cannot read {manifest_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogLoadError(f"Invalid JSON in {manifest_path}: {exc}") from exc
    if not isinstance(doc, dict):
        raise CatalogLoadError(f"{manifest_path} must contain a JSON object")
    return doc


def _require_string(doc: dict[str, Any], field: str, package_dir: Path) -> str:
    value = doc.get(field)
    if not isinstance(value, str) or not value:
        raise CatalogLoadError(f"{package_dir / MANIFEST_NAME} has no {field}")
    return value


def get_package_name(doc: dict[str, Any], package_dir: Path) -> str:
    """Extract ``name``; the registry identity is useless without it.

    Raises:
        CatalogLoadError: If ``name`` is missing or not a non-empty string.
    """
    return _require_string(doc, "name", package_dir)


def get_package_version(doc: dict[str, Any], package_dir: Path) -> str:
    """Extract ``version``.

    Raises:
        CatalogLoadError: If ``version`` is missing or not a non-empty string.
    """
    return _require_string(doc, "version", package_dir)


def get_dependency_names(doc: dict[str, Any]) -> frozenset[str]:
    """Collect the names of all publish-relevant dependencies.

    Gathers keys from three sections:
    - dependencies (runtime deps)
    - optionalDependencies
    - peerDependencies

    A section that is missing or isn't an object contributes nothing.
    """
    names: set[str] = set()
    for field in DEPENDENCY_FIELDS:
        section = doc.get(field)
        if isinstance(section, dict):
            names.update(str(key) for key in section)
    return frozenset(names)
