"""Conversation roster — participants supplied per call by the caller.

Nothing here is cached: the caller owns the roster (and any TTL cache of
it) and passes a fresh snapshot into every call.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .errors import ParticipantLoadError
from .jid import MIN_PHONE_DIGITS, extract_digits, mention_user, normalize_jid, phone_jid

logger = logging.getLogger("wamention.participants")

# Names shorter than this are never looked for in running prose
MIN_PROSE_NAME_LENGTH = 3


@dataclass(frozen=True)
class Participant:
    jid: str
    name: Optional[str] = None          # display / saved contact name
    notify: Optional[str] = None        # push name the user set themself
    phone_number: Optional[str] = None

    @property
    def phone_digits(self) -> str:
        return extract_digits(self.phone_number)

    def prose_names(self) -> list[str]:
        """Display and notify names long enough to match in plain text."""
        return [
            value for value in (self.name, self.notify)
            if value and len(value.strip()) >= MIN_PROSE_NAME_LENGTH
        ]

    @classmethod
    def from_dict(cls, d: dict) -> "Participant":
        jid = str(d.get("jid") or d.get("id") or "").strip()
        if not jid:
            raise ParticipantLoadError(f"participant entry without jid: {d!r}")
        phone = d.get("phoneNumber", d.get("phone_number"))
        return cls(
            jid=jid,
            name=d.get("name") or None,
            notify=d.get("notify") or None,
            phone_number=str(phone) if phone else None,
        )


def preferred_participant_jid(participant: Participant) -> str:
    """Phone-domain JID when the roster knows a phone number, else the own JID."""
    digits = participant.phone_digits
    if len(digits) >= MIN_PHONE_DIGITS:
        return phone_jid(digits)
    return normalize_jid(participant.jid)


def build_preferred_map(participants: Optional[Iterable[Participant]]) -> dict[str, str]:
    """Map local ids (own JID user and phone digits) to the preferred JID.

    Both keys point at the same JID so a lookup by either succeeds.
    """
    preferred: dict[str, str] = {}
    for participant in participants or []:
        preferred_jid = preferred_participant_jid(participant)
        preferred_user = mention_user(preferred_jid)
        participant_user = mention_user(participant.jid)
        if preferred_user:
            preferred[preferred_user] = preferred_jid
        if participant_user:
            preferred[participant_user] = preferred_jid
    return preferred


def load_participants(path: str | Path) -> list[Participant]:
    """Load a roster from a JSON file (list of participant objects).

    Raises:
        ParticipantLoadError: unreadable file, invalid JSON or bad entries
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ParticipantLoadError(f"cannot read roster {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ParticipantLoadError(f"roster {path} is not valid JSON: {e}") from e

    if isinstance(raw, dict):
        raw = raw.get("participants", [])
    if not isinstance(raw, list):
        raise ParticipantLoadError(f"roster {path} must be a JSON list")

    participants = []
    for item in raw:
        if not isinstance(item, dict):
            raise ParticipantLoadError(f"roster entry must be an object: {item!r}")
        participants.append(Participant.from_dict(item))
    logger.debug(f"Loaded {len(participants)} participants from {path}")
    return participants
