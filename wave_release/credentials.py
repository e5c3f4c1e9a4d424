"""Temporary .npmrc handling.

For ``npm publish`` to authenticate in CI, the token has to be in an .npmrc
file next to the package. The file only exists for the duration of the
publish and is removed however the publish ends.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

NPMRC_NAME = ".npmrc"


def render_npmrc(registry: str, token: str) -> str:
    """Render .npmrc contents pointing npm at ``registry`` with ``token``.

    Example:
        render_npmrc("https://registry.npmjs.org", "abc") →
        "registry=https://registry.npmjs.org\\n//registry.npmjs.org/:_authToken=abc\\n"
    """
    registry = registry.rstrip("/")
    auth_prefix = registry.split(":", 1)[1] if "://" in registry else f"//{registry}"
    return f"registry={registry}\n{auth_prefix}/:_authToken={token}\n"


@contextmanager
def npmrc(package_dir: Path, registry: str, token: str | None) -> Iterator[Path | None]:
    """Write an .npmrc into ``package_dir`` for the duration of the block.

    Any .npmrc already in the directory is put back afterwards. Without a
    token nothing is written and None is yielded.
    """
    if not token:
        print("  Not running in GitHub Actions with NPM_TOKEN; using existing npm auth")
        yield None
        return

    path = package_dir / NPMRC_NAME
    previous = path.read_text(encoding="utf-8") if path.exists() else None
    path.write_text(render_npmrc(registry, token), encoding="utf-8")
    try:
        yield path
    finally:
        if previous is None:
            path.unlink(missing_ok=True)
        else:
            path.write_text(previous, encoding="utf-8")
