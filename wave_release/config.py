"""Run configuration read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel

from .models import PublishTag

DEFAULT_REGISTRY = "https://registry.npmjs.org"

NIGHTLY_ENV = "RELEASE_NIGHTLY"
# Older release workflows set this name; still honoured.
NIGHTLY_ENV_ALIAS = "COMPILER_NIGHTLY"
TOKEN_ENV = "NPM_TOKEN"
CI_ENV = "GITHUB_ACTIONS"
REGISTRY_ENV = "NPM_REGISTRY"


class ReleaseConfig(BaseModel):
    """Settings shared by every publish in a run.

    Attributes:
        tag: Distribution tag; NIGHTLY when RELEASE_NIGHTLY (or its older
             name COMPILER_NIGHTLY) is set to anything.
        registry: Base URL of the npm registry.
        token: Auth token for the registry (NPM_TOKEN), if any.
        in_ci: Whether we're running under GitHub Actions. The .npmrc
               credential file is only written in CI.
        jobs: Max packages published at once within a wave.
        dry_run: Check the registry but don't publish anything.
    """

    tag: PublishTag = PublishTag.LATEST
    registry: str = DEFAULT_REGISTRY
    token: str | None = None
    in_ci: bool = False
    jobs: int = 1
    dry_run: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ReleaseConfig:
        env = os.environ if environ is None else environ
        return cls(
            tag=(
                PublishTag.NIGHTLY
                if env.get(NIGHTLY_ENV) or env.get(NIGHTLY_ENV_ALIAS)
                else PublishTag.LATEST
            ),
            registry=(env.get(REGISTRY_ENV) or DEFAULT_REGISTRY).rstrip("/"),
            token=env.get(TOKEN_ENV) or None,
            in_ci=bool(env.get(CI_ENV)),
        )

    @property
    def writes_npmrc(self) -> bool:
        return self.in_ci and bool(self.token)
