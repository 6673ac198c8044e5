from __future__ import annotations

import pytest

from conftest import FakeGateway
from prtui.config import StartupConfig
from prtui.errors import RepoNotFoundError
from prtui.git import LocalRepository
from prtui.repository import RepositoryContext, resolve_local_identity


def test_config_owner_and_repo_override_discovery() -> None:
    def discover():
        raise AssertionError("discovery should not run")

    cfg = StartupConfig(owner="acme", repo_name="widgets")
    assert resolve_local_identity(cfg, discover) == ("acme", "widgets")


def test_discovery_used_when_config_incomplete() -> None:
    cfg = StartupConfig(owner="acme")
    assert resolve_local_identity(cfg, lambda: LocalRepository("o", "r")) == ("o", "r")


def test_placeholder_when_nothing_is_known() -> None:
    assert resolve_local_identity(StartupConfig(), lambda: None) == ("-", "-")
    assert resolve_local_identity(StartupConfig(repo_name="widgets"), lambda: None) == ("-", "widgets")


@pytest.mark.asyncio
async def test_sync_overwrites_remote_fields() -> None:
    gateway = FakeGateway()
    ctx = RepositoryContext(owner="o", repo_name="r")
    result = await ctx.sync(gateway, "tok")
    assert result is ctx
    assert (ctx.url, ctx.name, ctx.default_branch) == ("https://github.com/o/r", "o/r", "main")
    assert gateway.calls == [("get_repository", "o", "r", "tok")]


@pytest.mark.asyncio
async def test_sync_failure_changes_nothing() -> None:
    ctx = RepositoryContext(owner="o", repo_name="r", url="u", name="n", default_branch="b")
    with pytest.raises(RepoNotFoundError):
        await ctx.sync(FakeGateway(repo_error=RepoNotFoundError("o/r")), "tok")
    assert ctx == RepositoryContext(owner="o", repo_name="r", url="u", name="n", default_branch="b")
