from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text

from ..session import Mode, Session

if TYPE_CHECKING:  # For type checking only, not used at runtime
    from ..tui import PRComposeApp

INSTRUCTIONS: dict[Mode, str] = {
    Mode.NORMAL: (
        "[Normal mode] Press [n] for a new PR, [e] to edit, [s] to sync with GitHub, "
        "[p] to change token, [↑]/[↓] to move or [q] to quit"
    ),
    Mode.EDITING: "[Editing mode] Press [Esc] to go back, [Tab]/[Shift+Tab] to change field, [Enter] to send",
    Mode.CONFIRMING: "[Confirm mode] Press [y] to create the PR, [e] to keep editing, [n] to cancel",
    Mode.ENTERING_CREDENTIAL: "[Token] Type your GitHub personal access token and press [Enter]",
    Mode.CONFIRMING_EXIT: "[Quit] Press [y] to quit or [n] to stay",
    Mode.TERMINATED: "",
}


def render_output(session: Session) -> Text:
    """Render the output box: busy indicator, then the error or success message."""
    if session.busy:
        return Text("Talking to GitHub…", style="italic")
    if session.error_message:
        return Text(session.error_message, style="red")
    if session.success_message:
        return Text(session.success_message, style="green")
    return Text("")


class StatusManager:
    """Manages the output box and instruction line for the prtui TUI."""

    def __init__(self, app: PRComposeApp) -> None:
        """Initialize with reference to the main app."""
        self.app = app

    def update_status(self) -> None:
        session = self.app.session
        self.app._output.update(render_output(session))
        self.app._instructions.update(INSTRUCTIONS[session.mode])
