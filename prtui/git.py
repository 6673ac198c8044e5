"""Read-only helpers around the git CLI."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]


@dataclass(frozen=True)
class LocalRepository:
    owner: str
    name: str


def _run_git(args: list[str], runner: Runner) -> str | None:
    try:
        proc = runner(["git", *args], capture_output=True, text=True, check=False)
    except OSError as e:
        logger.warning(f"git {' '.join(args)} could not run: {e}")
        return None
    if proc.returncode != 0:
        logger.debug(f"git {' '.join(args)} exited {proc.returncode}: {(proc.stderr or '').strip()}")
        return None
    return (proc.stdout or "").strip()


def parse_remote_url(url: str) -> LocalRepository | None:
    """Extract owner and repository name from a git remote URL.

    Accepts `https://host/owner/repo(.git)` and `git@host:owner/repo(.git)`.

    Args:
        url: Remote URL as printed by git.

    Returns:
        The parsed `LocalRepository`, or None for unsupported URLs.
    """
    url = url.strip().rstrip("/")
    if url.startswith("https://"):
        _, _, path = url[len("https://") :].partition("/")
    elif url.startswith("git@"):
        _, _, path = url.partition(":")
    else:
        return None
    parts = [p for p in path.split("/") if p]
    if len(parts) < 2:
        return None
    owner = parts[-2]
    name = parts[-1].removesuffix(".git")
    if not owner or not name:
        return None
    return LocalRepository(owner=owner, name=name)


def discover_local_repository(runner: Runner = subprocess.run) -> LocalRepository | None:
    """Resolve the GitHub owner/repo from the `origin` remote of the current directory."""
    url = _run_git(["config", "--get", "remote.origin.url"], runner)
    if not url:
        return None
    repo = parse_remote_url(url)
    if repo is None:
        logger.info(f"Remote URL not recognised: {url}")
    return repo


def discover_current_branch(runner: Runner = subprocess.run) -> str | None:
    """Return the checked-out branch name, or None outside a repository."""
    branch = _run_git(["rev-parse", "--abbrev-ref", "HEAD"], runner)
    # Detached checkouts report the literal "HEAD"
    if not branch or branch == "HEAD":
        return None
    return branch
