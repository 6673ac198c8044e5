from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from .config import PLACEHOLDER_IDENTITY, StartupConfig
from .git import LocalRepository, discover_local_repository
from .github import Repository

logger = logging.getLogger(__name__)


class RepositoryGateway(Protocol):
    async def get_repository(self, owner: str, repo: str, token: str | None) -> Repository: ...


@dataclass
class RepositoryContext:
    """Cached view of the target repository.

    `owner` and `repo_name` are fixed for the session; `url`, `name` and
    `default_branch` are only filled in by a successful `sync`.
    """

    owner: str
    repo_name: str
    url: str = ""
    name: str = ""
    default_branch: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo_name}"

    async def sync(self, gateway: RepositoryGateway, token: str | None) -> RepositoryContext:
        """Refresh url/name/default_branch from GitHub.

        The fields are replaced together after the call succeeds; when the
        gateway raises, nothing is modified and the error propagates.

        Args:
            gateway: Object providing `get_repository`.
            token: Personal access token.

        Returns:
            This context, updated.

        Raises:
            PullRequestError: Whatever the gateway raises.
        """
        repo = await gateway.get_repository(self.owner, self.repo_name, token)
        self.url, self.name, self.default_branch = repo.url, repo.name, repo.default_branch
        logger.info(f"Synced {self.full_name}: default branch {self.default_branch or '<none>'}")
        return self


def resolve_local_identity(
    config: StartupConfig,
    discover: Callable[[], LocalRepository | None] = discover_local_repository,
) -> tuple[str, str]:
    """Decide which GitHub repository this session targets.

    An explicit owner and repo in the startup config win; otherwise the git
    `origin` remote is used, then whichever config value is set, then the
    placeholder.

    Args:
        config: Startup configuration with optional owner/repo values.
        discover: Callable returning the local repository identity, if any.

    Returns:
        An `(owner, repo_name)` tuple; never empty strings.
    """
    if config.owner and config.repo_name:
        return config.owner, config.repo_name
    local = discover()
    if local is not None:
        return local.owner, local.name
    logger.warning("Could not determine repository from git remote; using placeholder")
    return config.owner or PLACEHOLDER_IDENTITY, config.repo_name or PLACEHOLDER_IDENTITY
