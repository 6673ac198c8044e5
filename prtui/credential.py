from __future__ import annotations

import logging
from collections.abc import Callable

from .config import save_credential
from .errors import PersistenceError

logger = logging.getLogger(__name__)


def mask(value: str, char: str = "*") -> str:
    """Return one mask character per character of `value`."""
    return char * len(value)


class CredentialHolder:
    """Holds the GitHub personal access token used for every remote call.

    The raw value is available through `value` so the presentation layer can
    mask it; it is never written to logs or shown by `repr()`.
    """

    def __init__(self, value: str | None = None, saver: Callable[[str], None] = save_credential) -> None:
        """Initialize the holder.

        Args:
            value: Token loaded from the config file, if any.
            saver: Callable that durably stores a token; raises `OSError` on failure.
        """
        self._value = value or ""
        self._saver = saver

    def __repr__(self) -> str:
        state = "empty" if self.is_empty() else "set"
        return f"CredentialHolder(<{state}>)"

    @property
    def value(self) -> str:
        return self._value

    def is_empty(self) -> bool:
        return not self._value

    def set(self, value: str) -> None:
        self._value = value.strip()

    def persist(self) -> None:
        """Write the current token through the configured saver.

        Raises:
            PersistenceError: If the saver fails. The in-memory token stays usable.
        """
        try:
            self._saver(self._value)
        except OSError as e:
            logger.error(f"Failed to persist credential: {e}")
            raise PersistenceError(str(e)) from e
        logger.info("Credential saved to config")
