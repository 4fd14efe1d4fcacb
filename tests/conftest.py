import pytest

from sealed_session.manager import SessionManager
from sealed_session.vault.config import SessionKey


@pytest.fixture
def key():
    """A fresh random AES-GCM session key."""
    return SessionKey.generate()


@pytest.fixture
def manager(key):
    """SessionManager bound to the ``key`` fixture."""
    return SessionManager(key=key)
