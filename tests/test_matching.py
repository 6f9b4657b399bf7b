"""Tests for roster name matching."""

from wamention.matching import (
    NAME_MATCHERS,
    find_participant_by_name,
    includes_name,
    normalize_for_match,
    resolve_name_to_jid,
)
from wamention.participants import Participant


class TestNormalizeForMatch:
    def test_case_diacritics_zero_width(self):
        assert normalize_for_match("  JOSÉ\u200b ") == "jose"

    def test_bom_removed(self):
        assert normalize_for_match("\ufeffAlice") == "alice"


class TestIncludesName:
    """Whole-word, case-insensitive search in running prose."""

    def test_word_match(self):
        assert includes_name("Ping BOB please", "bob")

    def test_inside_longer_word(self):
        assert not includes_name("bobby is here", "bob")
        assert not includes_name("bob_smith", "bob")

    def test_later_occurrence_counts(self):
        assert includes_name("sally and al", "al")

    def test_punctuation_is_a_boundary(self):
        assert includes_name("thanks, bob-smith", "bob")
        assert includes_name("hi Alice Smith!", "alice smith")

    def test_blank_name(self):
        assert not includes_name("anything", "   ")


class TestFindParticipantByName:
    """Ordered matcher chain: exact (name or word), then prefix."""

    def test_chain_order(self):
        assert [tier for tier, _ in NAME_MATCHERS] == ["exact", "prefix"]

    def test_word_match_beats_prefix(self, alice, alicia):
        assert find_participant_by_name("Alice", [alice, alicia]) is alice

    def test_word_match_beats_prefix_regardless_of_order(self, alice, alicia):
        assert find_participant_by_name("Alice", [alicia, alice]) is alice

    def test_word_and_full_name_share_a_tier(self):
        """Roster order decides between a word match and a full-name match."""
        bob_jones = Participant(jid="1@s.whatsapp.net", name="Bob Jones")
        bob = Participant(jid="2@s.whatsapp.net", name="Bob")
        assert find_participant_by_name("bob", [bob_jones, bob]) is bob_jones
        assert find_participant_by_name("bob", [bob, bob_jones]) is bob

    def test_exact_match_on_notify(self, roster, jose):
        assert find_participant_by_name("jose", roster) is jose

    def test_word_of_notify(self, roster, bob):
        assert find_participant_by_name("Bobby", roster) is bob

    def test_prefix_match(self, alice, alicia):
        assert find_participant_by_name("Alic", [alice, alicia]) is alice

    def test_query_longer_than_name(self, alicia):
        assert find_participant_by_name("Aliciaaa", [alicia]) is alicia

    def test_prefix_needs_three_chars_in_query(self):
        alexander = Participant(jid="1@s.whatsapp.net", name="Alexander")
        assert find_participant_by_name("Al", [alexander]) is None

    def test_prefix_needs_three_chars_in_name(self):
        ed = Participant(jid="1@s.whatsapp.net", name="Ed")
        assert find_participant_by_name("Edward", [ed]) is None

    def test_no_match(self, roster):
        assert find_participant_by_name("Zed", roster) is None

    def test_single_tier_chain(self, alice, alicia):
        exact_only = NAME_MATCHERS[:1]
        assert find_participant_by_name("Alic", [alice, alicia], matchers=exact_only) is None
        assert find_participant_by_name("Smith", [alicia, alice], matchers=exact_only) is alice


class TestResolveNameToJid:
    def test_phone_number_preferred(self, roster):
        assert resolve_name_to_jid("Alice", roster) == "15550001111@s.whatsapp.net"

    def test_own_jid_without_phone(self, roster):
        assert resolve_name_to_jid("Jose", roster) == "444444444@lid"

    def test_digits_in_unmatched_name(self, roster):
        assert resolve_name_to_jid("x6281234567", roster) == "6281234567@s.whatsapp.net"

    def test_miss(self, roster):
        assert resolve_name_to_jid("Zed", roster) is None
