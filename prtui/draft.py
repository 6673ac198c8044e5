from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Field(Enum):
    """Editable draft fields, in on-screen order."""

    TITLE = 0
    DESCRIPTION = 1
    SOURCE_BRANCH = 2
    TARGET_BRANCH = 3

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def multiline(self) -> bool:
        return self is Field.DESCRIPTION

    def step(self, direction: int) -> Field:
        """Return the field `direction` positions away, wrapping around.

        Args:
            direction: Number of positions to move; usually +1 or -1.

        Returns:
            The neighbouring `Field`.
        """
        return Field((self.value + direction) % len(Field))


_LABELS = {
    Field.TITLE: "Title",
    Field.DESCRIPTION: "Description",
    Field.SOURCE_BRANCH: "Source Branch",
    Field.TARGET_BRANCH: "Target Branch",
}

_ATTRS = {
    Field.TITLE: "title",
    Field.DESCRIPTION: "description",
    Field.SOURCE_BRANCH: "source_branch",
    Field.TARGET_BRANCH: "target_branch",
}


@dataclass
class PullRequestDraft:
    """The in-progress pull request.

    Attributes:
        title: PR title; may be empty.
        description: PR body; may contain newlines.
        source_branch: Head branch the changes come from.
        target_branch: Base branch the PR merges into.
    """

    title: str = ""
    description: str = ""
    source_branch: str = ""
    target_branch: str = ""

    def get(self, field: Field) -> str:
        return getattr(self, _ATTRS[field])

    def set(self, field: Field, value: str) -> None:
        setattr(self, _ATTRS[field], value)


class FieldStore:
    """Holds the draft together with the active field."""

    def __init__(self, source_branch: str = "", target_branch: str = "") -> None:
        """Create a store holding a fresh draft.

        Args:
            source_branch: Branch to pre-fill as the PR head.
            target_branch: Branch to pre-fill as the PR base.
        """
        self.draft = PullRequestDraft(source_branch=source_branch, target_branch=target_branch)
        self.current_field: Field = Field.TITLE

    @property
    def current_index(self) -> int:
        return self.current_field.value

    @property
    def current_value(self) -> str:
        return self.draft.get(self.current_field)

    def set_value(self, field: Field, value: str) -> None:
        self.draft.set(field, value)

    def append(self, text: str) -> None:
        """Append text to the active field.

        Newlines are dropped unless the active field is multi-line.
        """
        if not self.current_field.multiline:
            text = text.replace("\r", "").replace("\n", "")
        if text:
            self.draft.set(self.current_field, self.current_value + text)

    def backspace(self) -> None:
        """Remove the last character of the active field, if any."""
        self.draft.set(self.current_field, self.current_value[:-1])

    def advance(self, direction: int) -> Field:
        """Move the active field by `direction`, wrapping modulo the field count."""
        self.current_field = self.current_field.step(direction)
        return self.current_field

    def select(self, field: Field) -> None:
        self.current_field = field

    def reset(self, source_branch: str = "", target_branch: str = "") -> PullRequestDraft:
        """Replace the draft with a fresh one and select the first field.

        Calling this repeatedly with the same arguments yields the same draft.

        Args:
            source_branch: Head branch for the new draft.
            target_branch: Base branch for the new draft.

        Returns:
            The newly created draft.
        """
        self.draft = PullRequestDraft(source_branch=source_branch, target_branch=target_branch)
        self.current_field = Field.TITLE
        return self.draft
