"""Mention policy — who an automated reply is allowed to tag.

A reply may only mention people the requester asked for. The policy is
built fresh from one inbound message and thrown away once the reply for
that message is sent:

- No tag-intent word ("tag", "mention", "ping") → no policy, replies
  are resolved unfiltered.
- Requested people (``@number`` tokens, protocol mentions, roster names
  in the text) → only they may be tagged.
- Nobody requested → the sender may tag themself ("ping me").

Under a policy the reply draft is stripped of disallowed ``@number``
tokens, re-resolved, filtered, and if filtering leaves nobody the full
allowed set is forced in so an explicit request is never dropped.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from .extract import MENTION_TOKEN_RE, extract_mention_jids, has_mention_boundary
from .inject import inject_mention_tokens
from .jid import mention_user, phone_jid
from .lookup import CrossDomainLookup
from .matching import includes_name
from .participants import Participant, build_preferred_map, preferred_participant_jid
from .resolver import resolve_mention_jids

logger = logging.getLogger("wamention.policy")

TAG_INTENT_RE = re.compile(r'\b(?:tag|mention|ping)\b', re.IGNORECASE)
# English plus common romanized Hindi/Urdu forms of "me"
SELF_MENTION_RE = re.compile(
    r'\b(?:me|myself|mujhe|muje|mujhko|mujko|merko|mereko|meko)\b',
    re.IGNORECASE,
)


@dataclass
class InboundEnvelope:
    """The parts of an inbound message the policy reads. Never mutated."""
    body: str
    sender_jid: Optional[str] = None
    sender_e164: Optional[str] = None
    mentioned_jids: list[str] = field(default_factory=list)
    participants: list[Participant] = field(default_factory=list)


@dataclass
class MentionPolicy:
    allowed_users: set[str]
    preferred_jid_by_user: dict[str, str]

    def allows(self, jid: str) -> bool:
        return mention_user(jid) in self.allowed_users

    def allowed_jids(self) -> list[str]:
        """Preferred JID for every allowed user (phone domain when unmapped)."""
        return [
            self.preferred_jid_by_user.get(user) or phone_jid(user)
            for user in sorted(self.allowed_users)
        ]


@dataclass
class OutboundMentions:
    text: str
    mention_jids: list[str]


def has_tag_intent(text: str) -> bool:
    return TAG_INTENT_RE.search(text or '') is not None


def has_self_mention(text: str) -> bool:
    return SELF_MENTION_RE.search(text or '') is not None


def _requested_users(envelope: InboundEnvelope) -> list[str]:
    requested: dict[str, None] = {}

    for jid in extract_mention_jids(envelope.body):
        user = mention_user(jid)
        if user:
            requested.setdefault(user, None)

    for jid in envelope.mentioned_jids or []:
        user = mention_user(jid)
        if user:
            requested.setdefault(user, None)

    for participant in envelope.participants or []:
        for candidate in participant.prose_names():
            if includes_name(envelope.body, candidate):
                user = mention_user(preferred_participant_jid(participant))
                if user:
                    requested.setdefault(user, None)
                break

    return list(requested)


def compute_policy(envelope: InboundEnvelope) -> Optional[MentionPolicy]:
    """Work out which users a reply to ``envelope`` may mention.

    Returns:
        MentionPolicy, or None when no restriction applies
    """
    body = envelope.body or ''
    if not has_tag_intent(body):
        return None

    preferred = build_preferred_map(envelope.participants)
    requested = _requested_users(envelope)

    if requested:
        allowed: set[str] = set()
        for user in requested:
            preferred_jid = preferred.get(user)
            if preferred_jid:
                allowed.add(mention_user(preferred_jid))
                continue
            allowed.add(user)
            preferred.setdefault(user, phone_jid(user))
        logger.debug(f"Mention policy: requester asked for {sorted(allowed)}")
        return MentionPolicy(allowed_users=allowed, preferred_jid_by_user=preferred)

    sender_user = mention_user(envelope.sender_jid or envelope.sender_e164 or '')
    if not sender_user:
        return None

    preferred.setdefault(sender_user, phone_jid(sender_user))
    # Tag intent is already established here, so a bare "tag" also counts
    # as the sender asking for themself.
    if not (has_self_mention(body) or has_tag_intent(body)):
        return None
    logger.debug(f"Mention policy: self-mention for {sender_user}")
    return MentionPolicy(allowed_users={sender_user}, preferred_jid_by_user=preferred)


def strip_disallowed_tokens(text: str, allowed_users: set[str]) -> str:
    """Remove ``@number`` tokens whose user is not allowed.

    Allowed tokens are rewritten to the bare ``@digits`` form. Whitespace
    is tidied only when something was actually removed.
    """
    removed = False

    def _replace(match: re.Match) -> str:
        nonlocal removed
        if not has_mention_boundary(match.string, match.start(), match.end()):
            return match.group(0)
        user = mention_user(match.group(1))
        if not user or user in allowed_users:
            return f"@{user}"
        removed = True
        return ''

    stripped = MENTION_TOKEN_RE.sub(_replace, text)
    if not removed:
        return stripped

    stripped = re.sub(r'[ \t]{2,}', ' ', stripped)
    stripped = re.sub(r'[ \t]+\n', '\n', stripped)
    stripped = re.sub(r'\n{3,}', '\n\n', stripped)
    return stripped.strip()


async def resolve_outbound_mentions(
    text: str,
    policy: Optional[MentionPolicy] = None,
    lookup: Optional[CrossDomainLookup] = None,
    participants: Optional[list[Participant]] = None,
) -> OutboundMentions:
    """Final reply text and mention list for the transport.

    Without a policy the draft is resolved as-is. With one, disallowed
    tokens are stripped first and the result is held to the allowed set.
    """
    policy_text = strip_disallowed_tokens(text, policy.allowed_users) if policy else text
    mention_jids = await resolve_mention_jids(policy_text, lookup=lookup, participants=participants)

    if policy:
        mention_jids = [jid for jid in mention_jids if policy.allows(jid)]
        if not mention_jids:
            mention_jids = policy.allowed_jids()
            logger.debug(f"Mention policy: forcing allowed mentions {mention_jids}")

    return OutboundMentions(
        text=inject_mention_tokens(policy_text, mention_jids),
        mention_jids=mention_jids,
    )
