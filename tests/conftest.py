"""
Shared pytest fixtures.

Firestore and FCM are replaced with MagicMock fakes; no test talks to the
network.
"""

from unittest.mock import MagicMock

import pytest

from kine_amigo.core.config import Settings
from kine_amigo.services.notification_dispatcher import NotificationDispatcher
from kine_amigo.services.user_service import UserService


@pytest.fixture
def test_settings() -> Settings:
    return Settings(SWEEP_BATCH_SIZE=400, MESSAGE_PREVIEW_LENGTH=60)


@pytest.fixture
def make_snapshot():
    """Factory for fake Firestore document snapshots."""

    def _make(data, doc_id="doc-1"):
        snapshot = MagicMock(name=f"snapshot-{doc_id}")
        snapshot.id = doc_id
        snapshot.exists = data is not None
        snapshot.to_dict.return_value = data
        snapshot.reference = MagicMock(name=f"ref-{doc_id}")
        return snapshot

    return _make


@pytest.fixture
def mock_db() -> MagicMock:
    return MagicMock(name="firestore")


@pytest.fixture
def mock_users() -> MagicMock:
    users = MagicMock(spec=UserService)
    users.get_device_tokens.return_value = ["token-a", "token-b"]
    return users


@pytest.fixture
def mock_dispatcher() -> MagicMock:
    return MagicMock(spec=NotificationDispatcher)
