from __future__ import annotations

import logging

from .config import StartupConfig
from .logging import configure_logging
from .tui import PRComposeApp

logger = logging.getLogger(__name__)


def main() -> None:
    """Entry point for the `prtui` console script.

    Reads the startup configuration from the environment, configures the log
    file and runs the Textual TUI until the user confirms exit. Terminal setup
    failures propagate and end the process with an error.

    Returns:
        None
    """
    config = StartupConfig.from_env()
    configure_logging(config.log_level)
    logger.info("prtui starting")
    PRComposeApp(config=config).run()
    logger.info("prtui exited")
