"""Fuzzy name matching against a conversation roster.

Matchers run as an ordered chain, each over the whole roster, and the
first tier that finds someone wins:
  1. exact     — full display or notify name, or any single word of either
  2. prefix    — one string is a prefix of the other, both >= 3 chars

Within a tier the roster order decides, so "bob" picks an earlier
"Bob Jones" over a later "Bob".

Normalization (lowercase, diacritics, zero-width chars) is for
comparison only; stored and sent text is never touched.
"""

import re
import unicodedata
from typing import Callable, Iterable, Optional

from .jid import MIN_PHONE_DIGITS, extract_digits, normalize_jid, phone_jid
from .participants import Participant

# Both query and name must be at least this long for the prefix tier
MIN_PREFIX_MATCH_LENGTH = 3

_COMBINING_RE = re.compile(r'[\u0300-\u036f]')
_ZERO_WIDTH_RE = re.compile(r'[\u200b-\u200d\ufeff]')
_WORD_CHAR_RE = re.compile(r'[a-z0-9_]', re.IGNORECASE)


def normalize_for_match(text: str) -> str:
    text = unicodedata.normalize('NFKD', text.lower())
    text = _COMBINING_RE.sub('', text)
    text = _ZERO_WIDTH_RE.sub('', text)
    return text.strip()


def _is_word_char(ch: Optional[str]) -> bool:
    return bool(ch and _WORD_CHAR_RE.match(ch))


def includes_name(text: str, name: str) -> bool:
    """Case-insensitive whole-word search for ``name`` inside ``text``.

    Every occurrence is checked, so "Al" inside "Sally" does not hide a
    later standalone "Al".
    """
    hay = text.lower()
    needle = name.strip().lower()
    if not needle:
        return False

    idx = hay.find(needle)
    while idx >= 0:
        prev = hay[idx - 1] if idx > 0 else None
        end = idx + len(needle)
        nxt = hay[end] if end < len(hay) else None
        if not _is_word_char(prev) and not _is_word_char(nxt):
            return True
        idx = hay.find(needle, idx + 1)
    return False


# ── Matchers ────────────────────────────────────────────────
# Each takes (normalized query, participant) and says yes or no.

def _match_exact(query: str, participant: Participant) -> bool:
    """Full display/notify name, or any whitespace-separated word of either."""
    for value in (participant.name, participant.notify):
        if not value:
            continue
        if normalize_for_match(value) == query:
            return True
        if any(normalize_for_match(part) == query for part in value.split()):
            return True
    return False


def _match_prefix(query: str, participant: Participant) -> bool:
    candidate = normalize_for_match(participant.name or participant.notify or '')
    if len(candidate) < MIN_PREFIX_MATCH_LENGTH or len(query) < MIN_PREFIX_MATCH_LENGTH:
        return False
    return candidate.startswith(query) or query.startswith(candidate)


NameMatcher = Callable[[str, Participant], bool]

NAME_MATCHERS: list[tuple[str, NameMatcher]] = [
    ("exact", _match_exact),
    ("prefix", _match_prefix),
]


def find_participant_by_name(
    name: str,
    participants: Iterable[Participant],
    matchers: Optional[list[tuple[str, NameMatcher]]] = None,
) -> Optional[Participant]:
    """Return the first participant matched by the highest tier, or None."""
    query = normalize_for_match(name)
    if not query:
        return None
    roster = list(participants)
    for _tier, matcher in matchers or NAME_MATCHERS:
        for participant in roster:
            if matcher(query, participant):
                return participant
    return None


def resolve_name_to_jid(name: str, participants: Iterable[Participant]) -> Optional[str]:
    """Turn an ``@Name`` token into a JID.

    Roster hit: phone-domain JID when the phone number is known, else the
    participant's own JID. Miss: the name itself when it holds enough
    digits to be a phone number. Otherwise None.
    """
    participant = find_participant_by_name(name, participants)
    if participant is not None:
        digits = participant.phone_digits
        if len(digits) >= MIN_PHONE_DIGITS:
            return phone_jid(digits)
        return normalize_jid(participant.jid)

    digits = extract_digits(name)
    if len(digits) >= MIN_PHONE_DIGITS:
        return phone_jid(digits)
    return None
