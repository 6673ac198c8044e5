from __future__ import annotations

import asyncio
from typing import Any

import pytest

from prtui.config import StartupConfig
from prtui.credential import CredentialHolder
from prtui.github import CreatedPullRequest, Repository
from prtui.session import KeyPress, Session


class FakeGateway:
    """In-memory stand-in for `GitHubClient` that records every call."""

    def __init__(
        self,
        repo: Repository | None = None,
        pr: CreatedPullRequest | None = None,
        repo_error: Exception | None = None,
        pr_error: Exception | None = None,
    ) -> None:
        self.repo = repo or Repository(url="https://github.com/o/r", name="o/r", default_branch="main")
        self.pr = pr or CreatedPullRequest(number=7, html_url="https://github.com/o/r/pull/7")
        self.repo_error = repo_error
        self.pr_error = pr_error
        self.calls: list[tuple[Any, ...]] = []
        self.gate: asyncio.Event | None = None

    async def get_repository(self, owner: str, repo: str, token: str | None) -> Repository:
        self.calls.append(("get_repository", owner, repo, token))
        if self.gate is not None:
            await self.gate.wait()
        if self.repo_error:
            raise self.repo_error
        return self.repo

    async def create_pull_request(
        self, owner: str, repo: str, title: str, head: str, base: str, body: str, token: str | None
    ) -> CreatedPullRequest:
        self.calls.append(("create_pull_request", owner, repo, title, head, base, body, token))
        if self.pr_error:
            raise self.pr_error
        return self.pr


def make_session(
    gateway: FakeGateway | None = None,
    token: str | None = "tok",
    source_branch: str = "feature/log",
    saved: list[str] | None = None,
    config: StartupConfig | None = None,
) -> Session:
    saver = saved.append if saved is not None else (lambda _t: None)
    return Session(
        config or StartupConfig(),
        gateway or FakeGateway(),
        owner="o",
        repo_name="r",
        source_branch=source_branch,
        credential=CredentialHolder(token, saver=saver),
    )


async def press(session: Session, *keys: str) -> None:
    """Feed keys to the session; single characters also carry their character."""
    for key in keys:
        if len(key) == 1:
            await session.handle_key(KeyPress(key, key))
        else:
            await session.handle_key(KeyPress(key))


async def type_text(session: Session, text: str) -> None:
    for ch in text:
        await session.handle_key(KeyPress("space" if ch == " " else ch, ch))


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()
