from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from ..draft import Field
from ..session import Mode, Session

CURSOR = "▏"


def render_repository(session: Session) -> Text:
    """Render the repository context panel.

    Args:
        session: Session to read from.

    Returns:
        Rich text with one line per repository attribute.
    """
    repo = session.repository
    lines = [
        ("Name", repo.name),
        ("URL", repo.url),
        ("Owner", repo.owner),
        ("Repo", repo.repo_name),
        ("Default Branch", repo.default_branch),
    ]
    text = Text()
    for i, (label, value) in enumerate(lines):
        if i:
            text.append("\n")
        text.append(f"{label}: ", style="bold")
        text.append(value or "-", style="" if value else "dim")
    return text


def _field_style(session: Session, field: Field) -> str:
    if field is not session.current_field:
        return ""
    if session.mode is Mode.NORMAL:
        return "yellow"
    if session.mode is Mode.EDITING:
        return "green"
    return ""


def render_form(session: Session) -> Text:
    """Render the draft form, highlighting the active field.

    Multi-line values are indented under their label.
    """
    text = Text()
    editing = session.mode is Mode.EDITING
    for field in Field:
        if field.value:
            text.append("\n")
        style = _field_style(session, field)
        value = session.draft.get(field)
        if editing and field is session.current_field:
            value += CURSOR
        text.append(f"{field.label}: ", style=f"bold {style}".strip())
        if field.multiline and "\n" in value:
            indented = "\n".join(f"  {line}" for line in value.split("\n"))
            text.append("\n" + indented, style=style)
        else:
            text.append(value, style=style)
    return text


class RepositoryPanel(Static):
    """Bordered panel showing the repository context."""

    def show(self, session: Session) -> None:
        self.update(render_repository(session))


class DraftForm(Static):
    """Bordered panel showing the draft being composed."""

    def show(self, session: Session) -> None:
        self.update(render_form(session))
