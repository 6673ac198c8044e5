from __future__ import annotations

from types import SimpleNamespace

from conftest import make_session
from prtui.draft import Field
from prtui.session import Mode
from prtui.ui.form import CURSOR, render_form, render_repository
from prtui.ui.popups import PopupManager, render_confirm_popup, render_credential_popup, render_exit_popup
from prtui.ui.status import INSTRUCTIONS, StatusManager, render_output


class FakeLabel:
    def __init__(self) -> None:
        self.display = False
        self._text = ""

    def update(self, text) -> None:
        self._text = str(text)


class FakeApp:
    def __init__(self, session) -> None:
        self.session = session
        self._output = FakeLabel()
        self._instructions = FakeLabel()
        self._confirm_popup = FakeLabel()
        self._credential_popup = FakeLabel()
        self._exit_popup = FakeLabel()


def test_render_repository_lists_context() -> None:
    session = make_session()
    session.repository.url = "https://github.com/o/r"
    plain = render_repository(session).plain
    assert "URL: https://github.com/o/r" in plain
    assert "Owner: o" in plain
    assert "Repo: r" in plain
    assert "Default Branch: -" in plain


def test_render_form_shows_fields_and_cursor_while_editing() -> None:
    session = make_session()
    session.draft.title = "Add logging"
    plain = render_form(session).plain
    assert "Title: Add logging" in plain
    assert "Source Branch: feature/log" in plain
    assert "Target Branch: main" in plain
    assert CURSOR not in plain

    session.mode = Mode.EDITING
    assert f"Title: Add logging{CURSOR}" in render_form(session).plain


def test_render_form_indents_multiline_description() -> None:
    session = make_session()
    session.draft.description = "one\ntwo"
    session.fields.select(Field.DESCRIPTION)
    plain = render_form(session).plain
    assert "Description: \n  one\n  two" in plain


def test_highlight_follows_mode() -> None:
    session = make_session()
    text = render_form(session)
    assert any("yellow" in str(span.style) for span in text.spans)
    session.mode = Mode.EDITING
    assert any("green" in str(span.style) for span in render_form(session).spans)


def test_popups_render_draft_and_mask_token() -> None:
    session = make_session()
    assert "from feature/log to main" in render_confirm_popup(session).plain

    session.credential_input = "ghp_secret"
    plain = render_credential_popup(session).plain
    assert "ghp_secret" not in plain
    assert "*" * len("ghp_secret") in plain
    assert "[esc]" in plain
    assert "[esc]" not in render_credential_popup(make_session(token=None)).plain

    session.draft.title = "WIP"
    assert "will be lost" in render_exit_popup(session).plain


def test_popup_manager_shows_only_the_popup_for_the_mode() -> None:
    session = make_session()
    app = FakeApp(session)
    manager = PopupManager(app)

    session.mode = Mode.CONFIRMING
    manager.update_popups()
    assert (app._confirm_popup.display, app._credential_popup.display, app._exit_popup.display) == (True, False, False)

    session.mode = Mode.CONFIRMING_EXIT
    manager.update_popups()
    assert (app._confirm_popup.display, app._credential_popup.display, app._exit_popup.display) == (False, False, True)

    session.mode = Mode.NORMAL
    manager.update_popups()
    assert not any(p.display for p in (app._confirm_popup, app._credential_popup, app._exit_popup))


def test_status_manager_shows_messages_and_instructions() -> None:
    session = make_session()
    app = FakeApp(session)
    manager = StatusManager(app)

    session.set_error("Failed to sync repository: boom")
    manager.update_status()
    assert app._output._text == "Failed to sync repository: boom"
    assert app._instructions._text == INSTRUCTIONS[Mode.NORMAL]

    session.set_success("Pull request created successfully! Url: u")
    session.mode = Mode.EDITING
    manager.update_status()
    assert app._output._text.startswith("Pull request created")
    assert app._instructions._text.startswith("[Editing mode]")


def test_busy_indicator_wins_over_messages() -> None:
    session = make_session()
    session.set_error("old")
    session.busy = True
    assert "GitHub" in render_output(session).plain
    assert render_output(SimpleNamespace(busy=False, error_message=None, success_message=None)).plain == ""


def test_every_mode_has_instructions() -> None:
    assert set(INSTRUCTIONS) == set(Mode)
