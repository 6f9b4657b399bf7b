"""JID (address) normalization.

A JID is ``<user>@<domain>``. Two domains carry people:
- ``s.whatsapp.net`` — phone-number backed
- ``lid`` — linked identity (privacy addressing), sometimes spelled ``hosted.lid``

Device JIDs carry a ``:N`` suffix on the user part (``628123:12@s.whatsapp.net``).
That suffix is transient and is always dropped before comparing or storing.
"""

import re
from typing import Optional

PHONE_DOMAIN = "s.whatsapp.net"
LID_DOMAIN = "lid"
LID_ALIAS_DOMAIN = "hosted.lid"

# Minimum digits before a string is treated as a phone number
MIN_PHONE_DIGITS = 6

_DEVICE_SUFFIX_RE = re.compile(r':\d+(?=@)')
_LID_ALIAS_RE = re.compile(r'@hosted\.lid$')
_NON_DIGIT_RE = re.compile(r'\D')


def extract_digits(value: Optional[str]) -> str:
    """Return only the ASCII digits of ``value`` ('' for None)."""
    return _NON_DIGIT_RE.sub('', value or '')


def normalize_jid(jid: str) -> str:
    """Drop the device suffix and fold ``@hosted.lid`` onto ``@lid``.

    Idempotent: ``normalize_jid(normalize_jid(x)) == normalize_jid(x)``.
    """
    jid = _DEVICE_SUFFIX_RE.sub('', jid, count=1)
    return _LID_ALIAS_RE.sub('@' + LID_DOMAIN, jid)


def jid_user(jid: str) -> str:
    """Part before the first ``@``."""
    return jid.split('@', 1)[0]


def jid_domain(jid: str) -> str:
    """Part after the first ``@`` ('' when there is none)."""
    return jid.split('@', 1)[1] if '@' in jid else ''


def is_lid_jid(jid: str) -> bool:
    return normalize_jid(jid).endswith('@' + LID_DOMAIN)


def normalize_domain(domain: Optional[str]) -> str:
    """Map an explicit token domain onto one of the two canonical domains.

    ``lid`` and ``hosted.lid`` are linked-identity spellings; everything
    else (including a bare ``hosted``) is treated as the phone domain.
    """
    normalized = (domain or '').lower()
    if normalized in (LID_DOMAIN, LID_ALIAS_DOMAIN):
        return LID_DOMAIN
    return PHONE_DOMAIN


def phone_jid(user: str) -> str:
    return f"{user}@{PHONE_DOMAIN}"


def mention_user(value: str) -> str:
    """Local id used for mention comparisons.

    Accepts a JID, a bare number or an ``+E164`` string. The device
    suffix is removed first so ``123:4@lid`` compares as ``123``.
    Falls back to the raw local part when it holds no digits at all.
    """
    user = jid_user(normalize_jid(value or ''))
    return extract_digits(user) or user
