from __future__ import annotations

from typing import ClassVar

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.widgets import Footer, Header, Static

from .config import StartupConfig
from .event_handler import EventHandler
from .github import GitHubClient
from .session import KeyPress, Session
from .ui import DraftForm, PopupManager, RepositoryPanel, StatusManager


class PRComposeApp(App):
    """Textual TUI for composing and submitting a GitHub pull request."""

    TITLE = "PRT: Pull Request TUI"

    CSS = """
    Screen { layers: base popup; }
    #repository { border: round $primary; border-title-align: left; padding: 0 1; height: auto; }
    #form { border: round $primary; padding: 1 2; height: 1fr; }
    #output { border: round $primary; padding: 0 1; height: auto; min-height: 3; }
    #instructions { padding: 0 1; height: auto; text-style: dim; }
    #popups { layer: popup; width: 100%; height: 100%; align: center middle; }
    .popup { display: none; width: 64; height: auto; border: round $accent; background: $surface; padding: 1 2; }
    """

    # Tab is claimed by the screen for focus cycling unless bound with priority.
    BINDINGS: ClassVar[list[Binding]] = [
        Binding("tab", "session_key('tab')", "Next field", show=False, priority=True),
        Binding("shift+tab", "session_key('shift+tab')", "Previous field", show=False, priority=True),
    ]

    def __init__(self, session: Session | None = None, config: StartupConfig | None = None) -> None:
        """Initialize application state and widgets.

        Args:
            session: Pre-built session; by default one is started from local git
                metadata, the stored credential and the GitHub client.
            config: Startup configuration; read from the environment when omitted.
        """
        super().__init__()
        self.config = config or StartupConfig.from_env()
        self.session = session or Session.start(self.config, GitHubClient())
        self.session.on_busy_change = lambda _busy: self.refresh_view()
        self._repository_panel = RepositoryPanel(id="repository")
        self._repository_panel.border_title = "Config"
        self._form = DraftForm(id="form")
        self._form.border_title = "Create"
        self._output = Static("", id="output")
        self._output.border_title = "Output"
        self._instructions = Static("", id="instructions")
        self._confirm_popup = Static("", id="confirm-popup", classes="popup")
        self._credential_popup = Static("", id="credential-popup", classes="popup")
        self._exit_popup = Static("", id="exit-popup", classes="popup")
        # Initialize UI managers
        self._status_manager = StatusManager(self)
        self._popup_manager = PopupManager(self)
        self._event_handler = EventHandler(self)

    def compose(self) -> ComposeResult:
        """Compose the repository panel, form, output box, instructions and popups."""
        yield Header(show_clock=False)
        with Vertical():
            yield self._repository_panel
            yield self._form
            yield self._output
            yield self._instructions
        with Container(id="popups"):
            yield self._confirm_popup
            yield self._credential_popup
            yield self._exit_popup
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_view()

    def refresh_view(self) -> None:
        """Redraw every panel from the session, exiting once it has terminated."""
        if self.session.terminated:
            self.exit()
            return
        self._repository_panel.show(self.session)
        self._form.show(self.session)
        self._status_manager.update_status()
        self._popup_manager.update_popups()

    def action_session_key(self, key: str) -> None:
        """Forward a priority-bound key to the session."""
        self._event_handler.dispatch(KeyPress(key))

    # ---------------- Event handler delegation ----------------

    def on_key(self, event) -> None:  # type: ignore[override]
        """Send every key press to the session."""
        self._event_handler.on_key(event)
