"""Interactive session state machine.

The session owns the draft, the repository context and the credential, and
is the only thing that mutates them. The presentation layer feeds it
`KeyPress` values and redraws from its public attributes afterwards.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .config import PLACEHOLDER_IDENTITY, StartupConfig, load_credential
from .credential import CredentialHolder
from .draft import Field, FieldStore, PullRequestDraft
from .errors import InvalidInputError, PersistenceError, PullRequestError, RepoNotFoundError
from .git import LocalRepository, discover_current_branch, discover_local_repository
from .github import CreatedPullRequest
from .repository import RepositoryContext, RepositoryGateway, resolve_local_identity

logger = logging.getLogger(__name__)

NO_URL_PLACEHOLDER = "No URL available"
EMPTY_CREDENTIAL_MESSAGE = "Credential cannot be empty"


class Mode(Enum):
    NORMAL = "normal"
    EDITING = "editing"
    CONFIRMING = "confirming"
    ENTERING_CREDENTIAL = "entering_credential"
    CONFIRMING_EXIT = "confirming_exit"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class KeyPress:
    """A key event, decoupled from the terminal library.

    Attributes:
        key: Key name, e.g. "a", "enter", "shift+tab", "escape".
        character: The character the key produces, if any.
    """

    key: str
    character: str | None = None

    @property
    def printable(self) -> str | None:
        if self.character and self.character.isprintable():
            return self.character
        return None


class PullRequestGateway(RepositoryGateway, Protocol):
    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        head: str,
        base: str,
        body: str,
        token: str | None,
    ) -> CreatedPullRequest: ...


class Session:
    """Mode-driven controller for composing and submitting one pull request at a time."""

    def __init__(
        self,
        config: StartupConfig,
        gateway: PullRequestGateway,
        *,
        owner: str,
        repo_name: str,
        source_branch: str = "",
        credential: CredentialHolder | None = None,
    ) -> None:
        """Initialize the session.

        Starts in `Mode.NORMAL`, or in `Mode.ENTERING_CREDENTIAL` when no
        credential is available.

        Args:
            config: Startup configuration (fallback target branch).
            gateway: Remote gateway used for sync and PR creation.
            owner: Repository owner, fixed for the session.
            repo_name: Repository name, fixed for the session.
            source_branch: Branch to pre-fill as the PR head.
            credential: Holder with the stored token, if any.
        """
        self.config = config
        self.gateway = gateway
        self.repository = RepositoryContext(owner=owner, repo_name=repo_name)
        self.credential = credential or CredentialHolder()
        self.fields = FieldStore(source_branch=source_branch, target_branch=self._seed_target_branch())
        self.mode = Mode.NORMAL
        self.error_message: str | None = None
        self.success_message: str | None = None
        self.credential_input = ""
        self.busy = False
        # Called with the new value whenever a remote call starts or finishes
        self.on_busy_change: Callable[[bool], None] | None = None
        if self.credential.is_empty():
            self.mode = Mode.ENTERING_CREDENTIAL

    @classmethod
    def start(
        cls,
        config: StartupConfig,
        gateway: PullRequestGateway,
        *,
        discover_repository: Callable[[], LocalRepository | None] = discover_local_repository,
        discover_branch: Callable[[], str | None] = discover_current_branch,
        load_token: Callable[[], str | None] = load_credential,
    ) -> Session:
        """Build a session from local git metadata and the stored credential."""
        owner, repo_name = resolve_local_identity(config, discover_repository)
        source_branch = discover_branch() or ""
        logger.info(f"Starting session for {owner}/{repo_name} on branch {source_branch or '<unknown>'}")
        return cls(
            config,
            gateway,
            owner=owner,
            repo_name=repo_name,
            source_branch=source_branch,
            credential=CredentialHolder(load_token()),
        )

    # ---------------- Read-only views ----------------

    @property
    def draft(self) -> PullRequestDraft:
        return self.fields.draft

    @property
    def current_field(self) -> Field:
        return self.fields.current_field

    @property
    def current_field_index(self) -> int:
        return self.fields.current_index

    @property
    def show_confirm_popup(self) -> bool:
        return self.mode is Mode.CONFIRMING

    @property
    def show_credential_popup(self) -> bool:
        return self.mode is Mode.ENTERING_CREDENTIAL

    @property
    def show_exit_popup(self) -> bool:
        return self.mode is Mode.CONFIRMING_EXIT

    @property
    def terminated(self) -> bool:
        return self.mode is Mode.TERMINATED

    # ---------------- Status messages ----------------

    def set_error(self, message: str) -> None:
        self.success_message = None
        self.error_message = message

    def set_success(self, message: str) -> None:
        self.error_message = None
        self.success_message = message

    def clear_status(self) -> None:
        self.error_message = None
        self.success_message = None

    # ---------------- Transitions ----------------

    def _seed_target_branch(self) -> str:
        return self.repository.default_branch or self.config.default_target_branch

    def reset_draft(self, source_branch: str | None = None) -> PullRequestDraft:
        """Replace the draft, keeping the source branch unless one is given."""
        if source_branch is None:
            source_branch = self.fields.draft.source_branch
        return self.fields.reset(source_branch=source_branch, target_branch=self._seed_target_branch())

    def enter_edit_mode(self, field: Field | None = None) -> None:
        if field is not None:
            self.fields.select(field)
        self.clear_status()
        self.mode = Mode.EDITING

    def new_draft(self) -> None:
        """Start over with an empty draft and begin editing its title."""
        self.reset_draft()
        self.enter_edit_mode(Field.TITLE)

    def open_credential_prompt(self) -> None:
        self.credential_input = ""
        self.clear_status()
        self.mode = Mode.ENTERING_CREDENTIAL

    def confirm_pull_request(self) -> None:
        self.mode = Mode.CONFIRMING

    @contextlib.contextmanager
    def _in_flight(self) -> Iterator[None]:
        if self.busy:
            raise RuntimeError("a remote call is already in progress")
        self._set_busy(True)
        try:
            yield
        finally:
            self._set_busy(False)

    def _set_busy(self, busy: bool) -> None:
        self.busy = busy
        if self.on_busy_change is not None:
            self.on_busy_change(busy)

    def _describe_failure(self, action: str, error: PullRequestError) -> str:
        message = f"Failed to {action}: {error}"
        if isinstance(error, RepoNotFoundError):
            if PLACEHOLDER_IDENTITY in (self.repository.owner, self.repository.repo_name):
                return message + ". No GitHub remote was found; set GITHUB_OWNER and GITHUB_REPO"
            message += f". Check that {self.repository.full_name} is the right repository and the token can access it"
        return message

    async def sync_repository(self) -> bool:
        """Refresh repository metadata and point the draft at its default branch.

        Returns:
            True on success; False when an error message was set instead.
        """
        self.clear_status()
        try:
            with self._in_flight():
                await self.repository.sync(self.gateway, self.credential.value)
        except PullRequestError as e:
            logger.warning(f"Sync of {self.repository.full_name} failed: {e}")
            self.set_error(self._describe_failure("sync repository", e))
            return False
        if self.repository.default_branch:
            self.fields.set_value(Field.TARGET_BRANCH, self.repository.default_branch)
        self.set_success(f"Synced with {self.repository.name or self.repository.full_name}")
        return True

    def _validate_draft(self, draft: PullRequestDraft) -> None:
        if not draft.source_branch:
            raise InvalidInputError("source branch", "Source branch is empty")
        if not draft.target_branch:
            raise InvalidInputError("target branch", "Target branch is empty")
        if self.credential.is_empty():
            raise InvalidInputError("token", "GitHub token is not set")

    async def submit(self) -> bool:
        """Create the pull request described by the current draft.

        On success the draft is replaced by a fresh one from the same source
        branch and the PR URL is reported; on failure the draft is kept.

        Returns:
            True if the pull request was created.
        """
        self.mode = Mode.NORMAL
        draft = self.fields.draft
        try:
            self._validate_draft(draft)
            with self._in_flight():
                pr = await self.gateway.create_pull_request(
                    self.repository.owner,
                    self.repository.repo_name,
                    draft.title,
                    draft.source_branch,
                    draft.target_branch,
                    draft.description,
                    self.credential.value,
                )
        except PullRequestError as e:
            logger.warning(f"Pull request creation failed: {e}")
            self.set_error(self._describe_failure("create pull request", e))
            return False
        self.reset_draft(source_branch=draft.source_branch)
        self.set_success(f"Pull request created successfully! Url: {pr.html_url or NO_URL_PLACEHOLDER}")
        return True

    async def submit_credential(self) -> bool:
        """Validate the typed token against GitHub, then store and persist it.

        A rejected token leaves the previous credential in place and keeps the
        prompt open. A token that validates but cannot be saved is still used
        for this session.

        Returns:
            True if the prompt was closed.
        """
        token = self.credential_input.strip()
        if not token:
            self.set_error(EMPTY_CREDENTIAL_MESSAGE)
            return False
        previous = self.credential.value
        self.credential.set(token)
        self.clear_status()
        try:
            with self._in_flight():
                await self.repository.sync(self.gateway, self.credential.value)
        except PullRequestError as e:
            self.credential.set(previous)
            logger.warning(f"Credential validation failed: {e}")
            self.set_error(self._describe_failure("validate credential", e))
            return False
        if self.repository.default_branch:
            self.fields.set_value(Field.TARGET_BRANCH, self.repository.default_branch)
        self.credential_input = ""
        self.mode = Mode.NORMAL
        try:
            self.credential.persist()
        except PersistenceError as e:
            self.set_error(str(e))
        else:
            self.set_success("Credential saved")
        return True

    # ---------------- Key dispatch ----------------

    async def handle_key(self, press: KeyPress) -> None:
        """Apply one key press to the session.

        Keys are ignored while a remote call is outstanding or after exit.
        """
        if self.busy or self.terminated:
            logger.debug(f"Ignoring key {press.key!r} (busy={self.busy}, mode={self.mode.value})")
            return
        if self.mode is Mode.NORMAL:
            await self._on_normal_key(press)
        elif self.mode is Mode.EDITING:
            self._on_editing_key(press)
        elif self.mode is Mode.CONFIRMING:
            await self._on_confirming_key(press)
        elif self.mode is Mode.ENTERING_CREDENTIAL:
            await self._on_credential_key(press)
        elif self.mode is Mode.CONFIRMING_EXIT:
            self._on_exit_key(press)

    async def _on_normal_key(self, press: KeyPress) -> None:
        key = press.key
        if key == "e":
            self.enter_edit_mode()
        elif key == "n":
            self.new_draft()
        elif key == "s":
            await self.sync_repository()
        elif key == "p":
            self.open_credential_prompt()
        elif key in ("q", "escape"):
            self.mode = Mode.CONFIRMING_EXIT
        elif key in ("down", "tab"):
            self.fields.advance(1)
        elif key in ("up", "shift+tab"):
            self.fields.advance(-1)

    def _on_editing_key(self, press: KeyPress) -> None:
        key = press.key
        if key == "escape":
            self.mode = Mode.NORMAL
        elif key == "enter":
            if self.current_field.multiline:
                self.fields.append("\n")
            else:
                self.confirm_pull_request()
        elif key == "backspace":
            self.fields.backspace()
        elif key == "tab":
            self.fields.advance(1)
        elif key == "shift+tab":
            self.fields.advance(-1)
        elif press.printable:
            self.fields.append(press.printable)

    async def _on_confirming_key(self, press: KeyPress) -> None:
        key = press.key
        if key in ("y", "enter"):
            await self.submit()
        elif key == "e":
            self.mode = Mode.EDITING
        elif key in ("n", "q", "escape"):
            self.mode = Mode.NORMAL

    async def _on_credential_key(self, press: KeyPress) -> None:
        key = press.key
        if key == "enter":
            await self.submit_credential()
        elif key == "backspace":
            self.credential_input = self.credential_input[:-1]
        elif key == "escape":
            # Only a re-entry can be abandoned; first run requires a token.
            if not self.credential.is_empty():
                self.credential_input = ""
                self.clear_status()
                self.mode = Mode.NORMAL
        elif press.printable:
            self.credential_input += press.printable

    def _on_exit_key(self, press: KeyPress) -> None:
        if press.key in ("y", "enter"):
            logger.info("Exit confirmed")
            self.mode = Mode.TERMINATED
        elif press.key in ("n", "escape"):
            self.mode = Mode.NORMAL
