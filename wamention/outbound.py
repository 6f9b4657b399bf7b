"""Outbound payloads — what the transport's send call receives.

The transport sends ``text``/``caption`` literally and attaches
``mentions`` as given; it does no mention rewriting of its own.
"""

import logging
from typing import Optional

from .jid import PHONE_DOMAIN, extract_digits, jid_domain, jid_user, normalize_jid, phone_jid
from .lookup import CrossDomainLookup
from .participants import Participant
from .policy import MentionPolicy, OutboundMentions, resolve_outbound_mentions

logger = logging.getLogger("wamention.outbound")


def to_whatsapp_jid(target: str) -> str:
    """Chat JID for a send target (``+62 812…``, ``whatsapp:628…`` or a JID)."""
    target = target.strip()
    if target.startswith("whatsapp:"):
        target = target[len("whatsapp:"):].strip()
    if "@" in target:
        return target
    return phone_jid(extract_digits(target))


def jid_to_e164(jid: str) -> Optional[str]:
    """``+<digits>`` for a phone-domain JID, None for anything else."""
    jid = normalize_jid(jid)
    if jid_domain(jid) != PHONE_DOMAIN:
        return None
    user = jid_user(jid)
    return f"+{user}" if user.isdigit() else None


def build_message_payload(
    text: str,
    mention_jids: list[str],
    media: Optional[bytes] = None,
    media_type: Optional[str] = None,
    file_name: Optional[str] = None,
    gif_playback: bool = False,
) -> dict:
    """Build the send payload for text or a media message.

    Mentions ride along on text and captioned media. Voice notes carry
    neither caption nor mentions.
    """
    mentions = {"mentions": list(mention_jids)} if mention_jids else {}

    if media is None or not media_type:
        return {"text": text, **mentions}

    caption = {"caption": text} if text else {}
    if media_type.startswith("image/"):
        return {"image": media, **caption, "mimetype": media_type, **mentions}
    if media_type.startswith("audio/"):
        return {"audio": media, "ptt": True, "mimetype": media_type}
    if media_type.startswith("video/"):
        payload = {"video": media, **caption, "mimetype": media_type}
        if gif_playback:
            payload["gifPlayback"] = True
        return {**payload, **mentions}

    return {
        "document": media,
        "fileName": (file_name or "").strip() or "file",
        **caption,
        "mimetype": media_type,
        **mentions,
    }


async def prepare_outbound(
    text: str,
    policy: Optional[MentionPolicy] = None,
    lookup: Optional[CrossDomainLookup] = None,
    participants: Optional[list[Participant]] = None,
    media: Optional[bytes] = None,
    media_type: Optional[str] = None,
    file_name: Optional[str] = None,
    gif_playback: bool = False,
) -> tuple[dict, OutboundMentions]:
    """Resolve mentions for ``text`` and wrap the result in a send payload.

    Returns:
        Tuple of (payload, resolved mentions)
    """
    outbound = await resolve_outbound_mentions(
        text, policy=policy, lookup=lookup, participants=participants,
    )
    payload = build_message_payload(
        outbound.text,
        outbound.mention_jids,
        media=media,
        media_type=media_type,
        file_name=file_name,
        gif_playback=gif_playback,
    )
    logger.debug(
        f"Prepared outbound payload ({', '.join(sorted(payload))}) "
        f"with {len(outbound.mention_jids)} mention(s)"
    )
    return payload, outbound
