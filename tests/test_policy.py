"""Tests for the mention policy and reply reconciliation."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from wamention.lookup import CrossDomainLookup
from wamention.policy import (
    InboundEnvelope,
    MentionPolicy,
    compute_policy,
    has_self_mention,
    has_tag_intent,
    resolve_outbound_mentions,
    strip_disallowed_tokens,
)

SENDER = "5550001111:7@s.whatsapp.net"


class TestIntentWords:
    def test_tag_intent_whole_word(self):
        assert has_tag_intent("can you TAG him")
        assert has_tag_intent("mention everyone")
        assert has_tag_intent("ping")
        assert not has_tag_intent("I'm tagging along")
        assert not has_tag_intent("")

    def test_self_mention_variants(self):
        assert has_self_mention("ping me")
        assert has_self_mention("tag myself")
        assert has_self_mention("mujhe tag karo")
        assert not has_self_mention("meet the team")


class TestComputePolicy:
    """Building the allow-set from one inbound message."""

    def test_no_tag_intent(self, roster):
        envelope = InboundEnvelope(body="hello there", sender_jid=SENDER, participants=roster)
        assert compute_policy(envelope) is None

    def test_named_participant(self, roster):
        envelope = InboundEnvelope(body="can you tag Bob", sender_jid=SENDER, participants=roster)
        policy = compute_policy(envelope)
        assert policy.allowed_users == {"333333333"}
        assert policy.preferred_jid_by_user["333333333"] == "333333333@s.whatsapp.net"

    def test_prose_name_uses_preferred_phone(self, roster):
        envelope = InboundEnvelope(body="please mention Alice Smith", participants=roster)
        assert compute_policy(envelope).allowed_users == {"15550001111"}

    def test_protocol_mention_mapped_through_roster(self, roster):
        envelope = InboundEnvelope(
            body="tag her",
            sender_jid=SENDER,
            mentioned_jids=["111111111@lid"],
            participants=roster,
        )
        policy = compute_policy(envelope)
        assert policy.allowed_users == {"15550001111"}
        assert policy.allowed_jids() == ["15550001111@s.whatsapp.net"]

    def test_unlisted_number_defaults_to_phone_domain(self):
        envelope = InboundEnvelope(body="ping @5557778888 please", sender_jid=SENDER)
        policy = compute_policy(envelope)
        assert policy.allowed_users == {"5557778888"}
        assert policy.preferred_jid_by_user["5557778888"] == "5557778888@s.whatsapp.net"

    def test_self_mention(self):
        policy = compute_policy(InboundEnvelope(body="ping me", sender_jid=SENDER))
        assert policy.allowed_users == {"5550001111"}

    def test_self_mention_from_e164(self):
        policy = compute_policy(InboundEnvelope(body="tag me", sender_e164="+1 555 000 2222"))
        assert policy.allowed_users == {"15550002222"}

    def test_bare_tag_allows_sender(self):
        policy = compute_policy(InboundEnvelope(body="tag", sender_jid=SENDER))
        assert policy.allowed_users == {"5550001111"}

    def test_no_sender_no_request(self):
        assert compute_policy(InboundEnvelope(body="can you tag someone")) is None

    def test_envelope_not_mutated(self, roster):
        mentioned = ["111111111@lid"]
        envelope = InboundEnvelope(body="tag", mentioned_jids=mentioned, participants=roster)
        snapshot = list(roster)
        compute_policy(envelope)
        assert envelope.participants == snapshot
        assert mentioned == ["111111111@lid"]


class TestStripDisallowedTokens:
    def test_removes_disallowed(self):
        text = "hi @5551234567 and @5559998888 bye"
        assert strip_disallowed_tokens(text, {"5551234567"}) == "hi @5551234567 and bye"

    def test_allowed_token_rewritten_to_bare_digits(self):
        assert strip_disallowed_tokens("hey @+5551234567@lid", {"5551234567"}) == "hey @5551234567"

    def test_no_removal_keeps_formatting(self):
        text = "a  b\n\n\n\nc @5551234567 "
        assert strip_disallowed_tokens(text, {"5551234567"}) == text

    def test_removal_tidies_whitespace(self):
        assert strip_disallowed_tokens("@5559998888\n\n\n\nhello", set()) == "hello"

    def test_trailing_space_before_newline(self):
        text = "line one @5559998888   \nline two"
        assert strip_disallowed_tokens(text, set()) == "line one\nline two"

    def test_non_boundary_token_untouched(self):
        assert strip_disallowed_tokens("x@5559998888", set()) == "x@5559998888"


class TestResolveOutboundMentions:
    """Reconciling a reply draft with the policy."""

    @pytest.mark.asyncio
    async def test_without_policy(self):
        result = await resolve_outbound_mentions("cc @5551234567")
        assert result.text == "cc @5551234567"
        assert result.mention_jids == ["5551234567@s.whatsapp.net"]

    @pytest.mark.asyncio
    async def test_unrequested_mention_stripped_and_request_forced(self, roster):
        policy = compute_policy(InboundEnvelope(body="can you tag Bob", participants=roster))
        result = await resolve_outbound_mentions(
            "Sure! @5559998888 will help", policy=policy, participants=roster,
        )
        assert result.mention_jids == ["333333333@s.whatsapp.net"]
        assert result.text == "Sure! will help\n@333333333"

    @pytest.mark.asyncio
    async def test_draft_naming_allowed_person(self, roster):
        policy = compute_policy(InboundEnvelope(body="tag Bob", participants=roster))
        result = await resolve_outbound_mentions("Hey Bob, look", policy=policy, participants=roster)
        assert result.mention_jids == ["333333333@s.whatsapp.net"]
        assert result.text == "Hey Bob, look\n@333333333"

    @pytest.mark.asyncio
    async def test_other_names_filtered_out(self, roster):
        policy = compute_policy(InboundEnvelope(body="tag Bob", participants=roster))
        result = await resolve_outbound_mentions("Bob and Alicia", policy=policy, participants=roster)
        assert result.mention_jids == ["333333333@s.whatsapp.net"]
        assert result.text == "Bob and Alicia\n@333333333"

    @pytest.mark.asyncio
    async def test_self_mention_forced(self):
        policy = compute_policy(InboundEnvelope(body="ping me", sender_jid=SENDER))
        result = await resolve_outbound_mentions("Done!", policy=policy)
        assert result.mention_jids == ["5550001111@s.whatsapp.net"]
        assert result.text == "Done!\n@5550001111"

    @pytest.mark.asyncio
    async def test_failing_lookup_without_policy(self):
        lookup = MagicMock(spec=CrossDomainLookup)
        lookup.to_phone_jid = AsyncMock(side_effect=ConnectionError("down"))
        result = await resolve_outbound_mentions("hi @123456789@lid", lookup=lookup)
        assert result.mention_jids == ["123456789@lid"]
        assert result.text == "hi @123456789@lid"

    @pytest.mark.asyncio
    async def test_allowed_lid_token_resolves_as_bare_number(self):
        """Stripping rewrites allowed tokens to @digits, so no LID lookup happens."""
        lookup = MagicMock(spec=CrossDomainLookup)
        lookup.to_phone_jid = AsyncMock(return_value="5550009999@s.whatsapp.net")
        policy = MentionPolicy(
            allowed_users={"123456789"},
            preferred_jid_by_user={"123456789": "123456789@lid"},
        )
        result = await resolve_outbound_mentions("hi @123456789@lid", policy=policy, lookup=lookup)
        assert result.text == "hi @123456789"
        assert result.mention_jids == ["123456789@s.whatsapp.net"]
        lookup.to_phone_jid.assert_not_called()
