from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "prtui"
CONFIG_PATH = CONFIG_DIR / "config.json"

DEFAULT_TARGET_BRANCH = "main"
# Owner/repo used when nothing could be discovered; GitHub answers 404 for it.
PLACEHOLDER_IDENTITY = "-"


@dataclass
class AppConfig:
    auth_token: str | None = None

    @staticmethod
    def from_dict(data: dict[str, Any]) -> AppConfig:
        """Create an `AppConfig` instance from a plain dictionary.

        Args:
            data: A mapping parsed from JSON containing the optional key
                `auth_token` (str | None).

        Returns:
            A populated `AppConfig` object.
        """
        token = data.get("auth_token")
        return AppConfig(auth_token=str(token) if token else None)

    def to_dict(self) -> dict[str, Any]:
        """Serialize this configuration to a JSON-safe dictionary.

        Returns:
            A dictionary suitable for `json.dump`.
        """
        return {"auth_token": self.auth_token}


@dataclass(frozen=True)
class StartupConfig:
    """Environment-derived defaults, read once at process start.

    Attributes:
        default_target_branch: Target branch used until a sync reports the
            repository's real default branch.
        owner: Optional owner override/fallback for the GitHub repository.
        repo_name: Optional repository name override/fallback.
        log_level: Level name for the log file.
    """

    default_target_branch: str = DEFAULT_TARGET_BRANCH
    owner: str | None = None
    repo_name: str | None = None
    log_level: str = "INFO"

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> StartupConfig:
        """Build a `StartupConfig` from environment variables.

        Reads `GITHUB_DEFAULT_BRANCH`, `GITHUB_OWNER`, `GITHUB_REPO` and
        `PRTUI_LOG_LEVEL`. Empty values are treated as unset.

        Args:
            environ: Mapping to read from; defaults to `os.environ`.

        Returns:
            The resulting configuration.
        """
        env = os.environ if environ is None else environ
        return StartupConfig(
            default_target_branch=env.get("GITHUB_DEFAULT_BRANCH") or DEFAULT_TARGET_BRANCH,
            owner=env.get("GITHUB_OWNER") or None,
            repo_name=env.get("GITHUB_REPO") or None,
            log_level=env.get("PRTUI_LOG_LEVEL") or "INFO",
        )


def ensure_config_dir() -> None:
    """Ensure the configuration directory exists.

    Creates `CONFIG_DIR` with parents if it does not already exist.

    Raises:
        OSError: If the directory cannot be created.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)


def load_config() -> AppConfig:
    """Load configuration from `CONFIG_PATH`.

    A missing file yields an empty default config without touching the disk.

    Returns:
        The loaded `AppConfig` instance.

    Raises:
        OSError: If reading the file fails.
        json.JSONDecodeError: If the file exists but contains invalid JSON.
    """
    if not CONFIG_PATH.exists():
        return AppConfig()
    with CONFIG_PATH.open("r", encoding="utf-8") as f:
        data = json.load(f)
    return AppConfig.from_dict(data)


def save_config(cfg: AppConfig) -> None:
    """Persist configuration to `CONFIG_PATH` as JSON.

    Args:
        cfg: The configuration to save.

    Raises:
        OSError: If writing the file fails.
    """
    ensure_config_dir()
    with CONFIG_PATH.open("w", encoding="utf-8") as f:
        json.dump(cfg.to_dict(), f, indent=2)


def load_credential() -> str | None:
    """Return the stored GitHub token, or None when absent or unreadable."""
    try:
        return load_config().auth_token
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable config at {CONFIG_PATH}: {e}")
        return None


def save_credential(token: str) -> None:
    """Store the GitHub token in the config file.

    Args:
        token: The personal access token to persist.

    Raises:
        OSError: If the file cannot be written.
    """
    try:
        cfg = load_config()
    except (OSError, json.JSONDecodeError):
        cfg = AppConfig()
    cfg.auth_token = token
    save_config(cfg)
