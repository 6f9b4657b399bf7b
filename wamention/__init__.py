"""wamention — mention resolution and tagging policy for WhatsApp replies."""

__version__ = "0.1.0"

from .extract import extract_mention_jids, extract_name_mentions
from .inject import inject_mention_tokens
from .jid import jid_user, normalize_jid
from .lookup import BridgeHttpLookup, CrossDomainLookup, SessionStoreLookup
from .matching import find_participant_by_name, includes_name
from .participants import Participant
from .policy import (
    InboundEnvelope,
    MentionPolicy,
    OutboundMentions,
    compute_policy,
    resolve_outbound_mentions,
    strip_disallowed_tokens,
)
from .resolver import resolve_mention_jids

__all__ = [
    "__version__",
    # Tokens & JIDs
    "extract_mention_jids",
    "extract_name_mentions",
    "normalize_jid",
    "jid_user",
    # Roster
    "Participant",
    "find_participant_by_name",
    "includes_name",
    # Resolution
    "CrossDomainLookup",
    "SessionStoreLookup",
    "BridgeHttpLookup",
    "resolve_mention_jids",
    "inject_mention_tokens",
    # Policy
    "InboundEnvelope",
    "MentionPolicy",
    "OutboundMentions",
    "compute_policy",
    "strip_disallowed_tokens",
    "resolve_outbound_mentions",
]
