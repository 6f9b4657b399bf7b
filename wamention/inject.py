"""Mention token injection for outgoing text."""

from typing import Iterable

from .extract import extract_mention_jids
from .jid import jid_user, normalize_jid


def inject_mention_tokens(text: str, mention_jids: Iterable[str]) -> str:
    """Append ``@user`` for every JID that has no visible token yet.

    Existing tokens are compared by local id only (domain ignored) and
    are never moved or rewritten. Missing tokens go on a new line after
    the text, or make up the whole text when it is blank.
    """
    existing = {jid_user(jid) for jid in extract_mention_jids(text)}
    missing: list[str] = []
    for jid in mention_jids:
        user = jid_user(normalize_jid(jid))
        if not user or user in existing:
            continue
        existing.add(user)
        missing.append(user)

    if not missing:
        return text
    suffix = " ".join(f"@{user}" for user in missing)
    if not text.strip():
        return suffix
    return f"{text}\n{suffix}"
