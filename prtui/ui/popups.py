from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text

from ..credential import mask
from ..session import Session

if TYPE_CHECKING:  # For type checking only, not used at runtime
    from ..tui import PRComposeApp


def render_confirm_popup(session: Session) -> Text:
    draft = session.draft
    text = Text()
    text.append("Pull Request Confirmation\n\n", style="bold")
    text.append(f"Please confirm PR creation from {draft.source_branch} to {draft.target_branch}\n")
    text.append(f"Title: {draft.title or '(empty)'}\n\n", style="dim")
    text.append("Press [y] to confirm, [e] to keep editing or [n] to cancel")
    return text


def render_credential_popup(session: Session) -> Text:
    """Render the token prompt; the typed token is masked."""
    text = Text()
    text.append("Enter your GitHub PAT:\n\n", style="bold")
    text.append(mask(session.credential_input) or " ", style="reverse")
    text.append("\n\n")
    if session.credential.is_empty():
        text.append("Press [enter] to confirm")
    else:
        text.append("Press [enter] to confirm or [esc] to cancel")
    return text


def render_exit_popup(session: Session) -> Text:
    text = Text()
    text.append("Quit\n\n", style="bold")
    if session.draft.title or session.draft.description:
        text.append("The current draft will be lost.\n\n", style="yellow")
    text.append("Press [y] to quit or [n] to stay")
    return text


class PopupManager:
    """Shows at most one popup, chosen by the session mode."""

    def __init__(self, app: PRComposeApp) -> None:
        """Initialize with reference to the main app."""
        self.app = app

    def update_popups(self) -> None:
        session = self.app.session
        popups = (
            (self.app._confirm_popup, session.show_confirm_popup, render_confirm_popup),
            (self.app._credential_popup, session.show_credential_popup, render_credential_popup),
            (self.app._exit_popup, session.show_exit_popup, render_exit_popup),
        )
        for widget, visible, render in popups:
            if visible:
                widget.update(render(session))
            widget.display = visible
