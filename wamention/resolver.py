"""Mention resolution — message text to the JIDs it refers to.

Three sources feed the result, in this order:
  1. ``@number`` tokens (LIDs optionally mapped to phone JIDs)
  2. ``@Name`` tokens matched against the roster
  3. Roster names written in plain prose, no ``@`` at all

Sources 2 and 3 need a roster; without one only numeric tokens resolve.
The result is deduplicated by local id, first JID seen wins.
"""

import asyncio
import logging
from typing import Iterable, Optional

from .extract import extract_mention_jids, extract_name_mentions
from .jid import is_lid_jid, mention_user, normalize_jid
from .lookup import CrossDomainLookup
from .matching import includes_name, resolve_name_to_jid
from .participants import Participant, build_preferred_map, preferred_participant_jid

logger = logging.getLogger("wamention.resolver")


class MentionSet:
    """Ordered JID collection keyed by local id."""

    def __init__(self):
        self._by_user: dict[str, str] = {}

    def add(self, jid: Optional[str]):
        if not jid:
            return
        jid = normalize_jid(jid)
        user = mention_user(jid)
        if user:
            self._by_user.setdefault(user, jid)

    def __contains__(self, jid: str) -> bool:
        return mention_user(jid) in self._by_user

    def __len__(self) -> int:
        return len(self._by_user)

    def to_list(self) -> list[str]:
        return list(self._by_user.values())


async def map_lid_to_phone(jid: str, lookup: Optional[CrossDomainLookup]) -> str:
    """Phone-domain JID for a LID when the lookup knows it, else ``jid`` unchanged.

    Never raises: a failing lookup only costs this one mention its mapping.
    """
    if lookup is None or not is_lid_jid(jid):
        return jid
    try:
        mapped = await lookup.to_phone_jid(jid)
        return normalize_jid(mapped) if mapped else jid
    except Exception as e:
        logger.debug(f"LID lookup failed for {jid}: {type(e).__name__}: {e}")
        return jid


async def _resolve_numeric(
    jid: str,
    lookup: Optional[CrossDomainLookup],
    preferred: dict[str, str],
) -> str:
    original = normalize_jid(jid)
    resolved = await map_lid_to_phone(original, lookup)

    # Roster wins over the live lookup; fall back to the pre-lookup id
    # when the mapped number is not on the roster.
    for user in (mention_user(resolved), mention_user(original)):
        preferred_jid = preferred.get(user)
        if preferred_jid:
            return preferred_jid
    return resolved


def _prose_mentions(text: str, participants: Iterable[Participant]) -> list[str]:
    found = []
    for participant in participants:
        for candidate in participant.prose_names():
            if includes_name(text, candidate):
                found.append(preferred_participant_jid(participant))
                break
    return found


async def resolve_mention_jids(
    text: str,
    lookup: Optional[CrossDomainLookup] = None,
    participants: Optional[list[Participant]] = None,
) -> list[str]:
    """Resolve every mention in ``text`` to a canonical JID.

    Args:
        text: Message text (inbound body or outbound reply)
        lookup: Optional LID → phone mapping capability
        participants: Conversation roster snapshot (not mutated)

    Returns:
        JIDs in first-seen order, one per local id
    """
    participants = list(participants or [])
    preferred = build_preferred_map(participants)
    resolved = MentionSet()

    # Lookups for different tokens are independent; run them together and
    # insert afterwards so result order follows the text.
    numeric = extract_mention_jids(text)
    if numeric:
        results = await asyncio.gather(
            *(_resolve_numeric(jid, lookup, preferred) for jid in numeric)
        )
        for jid in results:
            resolved.add(jid)

    if participants:
        for name in extract_name_mentions(text):
            resolved.add(resolve_name_to_jid(name, participants))
        for jid in _prose_mentions(text, participants):
            resolved.add(jid)

    logger.debug(f"Resolved {len(resolved)} mention(s) from {len(numeric)} numeric token(s)")
    return resolved.to_list()
