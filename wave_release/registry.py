"""npm registry queries."""

from __future__ import annotations

from urllib.parse import quote

import httpx

from .config import DEFAULT_REGISTRY
from .errors import RegistryUnavailableError

# Only these mean "this version doesn't exist"; anything else (401, 403, 5xx)
# leaves the answer unknown.
NOT_FOUND_STATUSES = frozenset({404, 410})


def version_url(name: str, version: str, registry: str = DEFAULT_REGISTRY) -> str:
    """URL of a single version's metadata document.

    Scoped names keep their "@" and "/" (e.g. ".../@scope/pkg/1.0.0").
    """
    return f"{registry.rstrip('/')}/{quote(name, safe='@/')}/{quote(version)}"


def is_published(
    name: str,
    version: str,
    *,
    registry: str = DEFAULT_REGISTRY,
    client: httpx.Client | None = None,
) -> bool:
    """Check whether ``name@version`` already exists on the registry.

    A 404 or 410 is a normal "not published" answer. Any other non-2xx
    response (auth failures, server errors) or a transport failure means we
    can't tell, which is fatal.

    Raises:
        RegistryUnavailableError: On unexpected responses or network errors.
    """
    url = version_url(name, version, registry)
    try:
        if client is None:
            response = httpx.get(url, follow_redirects=True)
        else:
            response = client.get(url)
    except httpx.HTTPError as exc:
        raise RegistryUnavailableError(
            f"Could not reach registry for {name}@{version}: {exc}"
        ) from exc

    if response.is_success:
        return True
    if response.status_code in NOT_FOUND_STATUSES:
        return False
    raise RegistryUnavailableError(
        f"Registry returned {response.status_code} for {name}@{version}"
    )
