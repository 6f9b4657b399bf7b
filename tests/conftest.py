"""Pytest configuration and shared fixtures."""

import json

import pytest

from wamention.participants import Participant


@pytest.fixture
def alice():
    """LID participant whose phone number is known."""
    return Participant(jid="111111111@lid", name="Alice Smith", phone_number="+1 555 000 1111")


@pytest.fixture
def alicia():
    return Participant(jid="222222222@s.whatsapp.net", name="Alicia")


@pytest.fixture
def bob():
    return Participant(jid="333333333@s.whatsapp.net", name="Bob", notify="Bobby B")


@pytest.fixture
def jose():
    """LID participant with only a push name and no phone number."""
    return Participant(jid="444444444:2@lid", notify="José")


@pytest.fixture
def roster(alice, alicia, bob, jose):
    return [alice, alicia, bob, jose]


@pytest.fixture
def roster_file(tmp_path):
    """Roster JSON as the CLI reads it."""
    path = tmp_path / "participants.json"
    path.write_text(json.dumps([
        {"jid": "111111111@lid", "name": "Alice Smith", "phoneNumber": "+1 555 000 1111"},
        {"jid": "222222222@s.whatsapp.net", "name": "Alicia"},
        {"jid": "333333333@s.whatsapp.net", "name": "Bob", "notify": "Bobby B"},
    ]))
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's WAMENTION_* environment out of the tests."""
    for key in (
        "WAMENTION_LID_STORE_PATH",
        "WAMENTION_BRIDGE_URL",
        "WAMENTION_LOOKUP_TIMEOUT",
        "WAMENTION_PARTICIPANTS_PATH",
        "WAMENTION_LOG_LEVEL",
        "WAMENTION_LOG_FILE",
        "WAMENTION_DEBUG",
    ):
        monkeypatch.delenv(key, raising=False)
