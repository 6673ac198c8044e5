from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from conftest import make_session
from prtui.event_handler import SESSION_WORKER_GROUP, EventHandler
from prtui.session import Mode


class FakeEvent:
    def __init__(self, key: str | None = None, character: str | None = None) -> None:
        self.key = key
        self.character = character
        self._stopped = False

    def prevent_default(self):
        pass

    def stop(self):
        self._stopped = True


def _app(session) -> SimpleNamespace:
    app = SimpleNamespace(session=session, workers=[], refreshed=0)

    def run_worker(coro: Any, group: str) -> None:
        app.workers.append((coro, group))

    def refresh_view() -> None:
        app.refreshed += 1

    app.run_worker = run_worker
    app.refresh_view = refresh_view
    return app


@pytest.mark.asyncio
async def test_on_key_runs_session_in_worker_and_refreshes() -> None:
    app = _app(make_session())
    handler = EventHandler(app)
    event = FakeEvent("e", "e")

    handler.on_key(event)

    assert event._stopped is True
    assert len(app.workers) == 1
    coro, group = app.workers[0]
    assert group == SESSION_WORKER_GROUP
    await coro
    assert app.session.mode is Mode.EDITING
    assert app.refreshed == 1


@pytest.mark.asyncio
async def test_character_is_forwarded_with_key() -> None:
    app = _app(make_session())
    app.session.mode = Mode.EDITING
    handler = EventHandler(app)
    handler.on_key(FakeEvent("space", " "))
    handler.on_key(FakeEvent("x", "x"))
    for coro, _ in app.workers:
        await coro
    assert app.session.draft.title == " x"


def test_event_without_key_is_ignored() -> None:
    app = _app(make_session())
    EventHandler(app).on_key(FakeEvent(None))
    assert app.workers == []


def test_keys_dropped_while_busy() -> None:
    app = _app(make_session())
    app.session.busy = True
    event = FakeEvent("e", "e")
    EventHandler(app).on_key(event)
    assert app.workers == []
    assert event._stopped is True
