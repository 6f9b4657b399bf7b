"""Shared utilities for wamention CLI commands."""

import logging
from typing import Optional

from rich.console import Console

from wamention.config import MentionSettings
from wamention.errors import classify_error
from wamention.participants import Participant, load_participants

console = Console()
logger = logging.getLogger("wamention.cli")

_log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(settings: MentionSettings):
    """Route logs to stderr, plus the configured log file if any."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=_log_format, handlers=handlers)


def load_roster(path: Optional[str], settings: MentionSettings) -> list[Participant]:
    """Roster from --participants, else the configured default, else empty."""
    path = path or settings.participants_path
    if not path:
        return []
    participants = load_participants(path)
    logger.info(f"Using roster {path} ({len(participants)} participants)")
    return participants


def fail(e: Exception):
    """Print a classified error and exit with status 1."""
    logger.debug(f"Command failed: {e!r}", exc_info=True)
    console.print(f"[red]{classify_error(e)}[/red]")
    raise SystemExit(1)
