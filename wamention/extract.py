"""Mention token extraction — pure text scanning, no roster involved.

Two independent passes:
  1. Numeric tokens:  ``@6281234567``, ``@+6281234567``, ``@123456789@lid``
  2. Name tokens:     ``@Alice``, ``@bob_92``

A numeric token only counts when both of its neighbours are boundary
characters, so ``mail me at 5551234567@test`` and ``foo@5551234567bar``
yield nothing. A name token has to start with a letter, so the two
passes never claim the same ``@``.
"""

import re

from .jid import extract_digits, normalize_domain

MENTION_TOKEN_RE = re.compile(
    r'@(\+?\d{6,20})(?:@(s\.whatsapp\.net|lid|hosted\.lid|hosted))?',
    re.IGNORECASE,
)
NAME_TOKEN_RE = re.compile(r'@([A-Za-z][A-Za-z0-9_\s]{1,30}?)(?=[\s)\]}"\'`>.,!?;:]|\Z)')

MENTION_LEFT_BOUNDARY = frozenset(' \t\n\r\f\v([{"\'`<')
MENTION_RIGHT_BOUNDARY = frozenset(' \t\n\r\f\v)]}"\'`>.,!?;:')


def _is_boundary(ch: str, allowed: frozenset) -> bool:
    return ch in allowed or ch.isspace()


def has_mention_boundary(text: str, start: int, end: int) -> bool:
    """True when ``text[start:end]`` is delimited on both sides."""
    left_ok = start == 0 or _is_boundary(text[start - 1], MENTION_LEFT_BOUNDARY)
    right_ok = end >= len(text) or _is_boundary(text[end], MENTION_RIGHT_BOUNDARY)
    return left_ok and right_ok


def extract_mention_jids(text: str) -> list[str]:
    """Return JIDs for every boundary-delimited ``@number`` token.

    Tokens without an explicit domain default to the phone domain.
    Order is first appearance, duplicates (by full JID) removed.
    """
    if not text:
        return []

    mentions: dict[str, None] = {}
    for match in MENTION_TOKEN_RE.finditer(text):
        if not has_mention_boundary(text, match.start(), match.end()):
            continue
        digits = extract_digits(match.group(1))
        if not digits:
            continue
        domain = normalize_domain(match.group(2))
        mentions.setdefault(f"{digits}@{domain}", None)
    return list(mentions)


def extract_name_mentions(text: str) -> list[str]:
    """Return ``@Name`` candidates (trimmed, at least 2 chars), first-seen order."""
    if not text:
        return []

    names: dict[str, None] = {}
    for match in NAME_TOKEN_RE.finditer(text):
        name = match.group(1).strip()
        if len(name) >= 2:
            names.setdefault(name, None)
    return list(names)
