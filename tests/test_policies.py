"""
Tests for the access policies.

Tests cover:
- authentication and ownership predicates
- PII heuristics (SSN, card and phone shapes), including accepted trade-offs
- composite submit/read guards and their deny reasons
- owner_decrypt_if_allowed end to end
"""
import pytest

from sealed_session.data import SessionRecord
from sealed_session.exceptions import PolicyDenied
from sealed_session.policies import (
    DenyReason,
    authorize_read,
    authorize_submit,
    owner_decrypt_if_allowed,
    reject_sensitive_text,
    require_authenticated,
    user_may_access,
)


def session_for(username: str) -> SessionRecord:
    """Build a resolved session for ``username``."""
    return SessionRecord(username=username)


class TestAuthentication:
    """Tests for require_authenticated."""

    def test_absent_session(self):
        """Test no session means not authenticated."""
        assert require_authenticated(None) is False

    def test_resolved_session(self, manager):
        """Test any resolved session is authenticated."""
        session = manager.resolve(manager.issue("alice").value)
        assert require_authenticated(session) is True


class TestOwnership:
    """Tests for user_may_access."""

    def test_other_user_denied(self):
        """Test alice cannot access bob's data."""
        assert user_may_access(session_for("alice"), "bob") is False

    def test_own_data_allowed(self):
        """Test alice can access her own data."""
        assert user_may_access(session_for("alice"), "alice") is True

    def test_case_sensitive(self):
        """Test usernames are compared exactly."""
        assert user_may_access(session_for("alice"), "Alice") is False


class TestSensitiveText:
    """Tests for reject_sensitive_text (True means acceptable)."""

    @pytest.mark.parametrize("text", [
        "my ssn is 123-45-6789",
        "card 4111111111111111",
        "call 555-123-4567",
        "call 555 123 4567",
        "call 5551234567",
        "amex 378282246310005",
        "1234567890123456789",
        "ssn:123-45-6789.",
    ])
    def test_rejected(self, text):
        """Test SSN, card and phone shapes are rejected."""
        assert reject_sensitive_text(text) is False

    @pytest.mark.parametrize("text", [
        "hello world",
        "",
        "meeting at 10:30 in room 204",
        "version 1.2.3",
        "12-34-5678",
        "123456789",
        "12345678901234567890",
        "call (555) 123-4567",
    ])
    def test_accepted(self, text):
        """Test text without PII shapes is accepted."""
        assert reject_sensitive_text(text) is True

    def test_long_non_pii_digit_run_rejected(self):
        """Test the known false positive: any 13-19 digit run is rejected."""
        assert reject_sensitive_text("order 20240101123456") is False


class TestAuthorizeSubmit:
    """Tests for the composite submit guard."""

    def test_login_required(self):
        """Test a submit without a session needs login."""
        with pytest.raises(PolicyDenied) as exc:
            authorize_submit(None, "alice", "hello")
        assert exc.value.reason is DenyReason.LOGIN_REQUIRED

    def test_not_allowed(self):
        """Test a submit into another user's data is not allowed."""
        with pytest.raises(PolicyDenied) as exc:
            authorize_submit(session_for("alice"), "bob", "hello")
        assert exc.value.reason is DenyReason.NOT_ALLOWED

    def test_content_rejected(self):
        """Test a submit containing an SSN is rejected."""
        with pytest.raises(PolicyDenied) as exc:
            authorize_submit(session_for("alice"), "alice", "ssn 123-45-6789")
        assert exc.value.reason is DenyReason.CONTENT_REJECTED

    def test_ownership_checked_before_content(self):
        """Test ownership is checked before content."""
        with pytest.raises(PolicyDenied) as exc:
            authorize_submit(session_for("alice"), "bob", "ssn 123-45-6789")
        assert exc.value.reason is DenyReason.NOT_ALLOWED

    def test_allowed(self):
        """Test a clean submit into own data returns the session."""
        session = session_for("alice")
        assert authorize_submit(session, "alice", "hello") is session

    def test_denial_does_not_log_text(self, caplog):
        """Test denials log the reason but never the submitted text."""
        with caplog.at_level("INFO", logger="sealed_session.policies"):
            with pytest.raises(PolicyDenied):
                authorize_submit(session_for("alice"), "alice", "ssn 123-45-6789")
        assert "content_rejected" in caplog.text
        assert "123-45-6789" not in caplog.text


class TestAuthorizeRead:
    """Tests for the composite read guard."""

    def test_login_required(self):
        """Test a read without a session needs login."""
        with pytest.raises(PolicyDenied) as exc:
            authorize_read(None, "alice")
        assert exc.value.reason is DenyReason.LOGIN_REQUIRED

    def test_not_allowed(self):
        """Test a read of another user's data is not allowed."""
        with pytest.raises(PolicyDenied) as exc:
            authorize_read(session_for("alice"), "bob")
        assert exc.value.reason is DenyReason.NOT_ALLOWED


class TestUserMessages:
    """Tests for the generic messages shown to end users."""

    def test_read_failures_look_identical(self):
        """Test the three read failures show the same message."""
        messages = {
            DenyReason.NOT_ALLOWED.user_message,
            DenyReason.INVALID_ENCODING.user_message,
            DenyReason.DECRYPT_FAILED.user_message,
        }
        assert len(messages) == 1

    def test_distinct_categories(self):
        """Test login and content denials have their own messages."""
        assert DenyReason.LOGIN_REQUIRED.user_message != DenyReason.NOT_ALLOWED.user_message
        assert DenyReason.CONTENT_REJECTED.user_message != DenyReason.NOT_ALLOWED.user_message

    def test_exception_exposes_message(self):
        """Test PolicyDenied exposes only the generic message."""
        err = PolicyDenied(DenyReason.DECRYPT_FAILED, "tag mismatch")
        assert err.user_message == "Not allowed."
        assert "tag mismatch" not in err.user_message


class TestOwnerDecrypt:
    """Tests for owner_decrypt_if_allowed."""

    def test_owner_reads_payload(self, manager):
        """Test the carol end-to-end case: issue, encrypt, store, read back."""
        carol = manager.resolve(manager.issue("carol").value)
        stored = manager.encrypt_text_for(carol, "hi")
        assert owner_decrypt_if_allowed(manager, carol, stored) == "hi"
        assert owner_decrypt_if_allowed(manager, carol, stored, owner="carol") == "hi"

    def test_other_user_blocked_by_ownership(self, manager):
        """Test dave cannot read carol's payload even though decryption would work."""
        carol = manager.resolve(manager.issue("carol").value)
        dave = manager.resolve(manager.issue("dave").value)
        stored = manager.encrypt_text_for(carol, "hi")
        with pytest.raises(PolicyDenied) as exc:
            owner_decrypt_if_allowed(manager, dave, stored, owner="carol")
        assert exc.value.reason is DenyReason.NOT_ALLOWED

    def test_invalid_encoding(self, manager):
        """Test a non-base64 payload is an invalid_encoding denial."""
        with pytest.raises(PolicyDenied) as exc:
            owner_decrypt_if_allowed(manager, session_for("carol"), "***")
        assert exc.value.reason is DenyReason.INVALID_ENCODING

    def test_decrypt_failed(self, manager):
        """Test a tampered payload is a decrypt_failed denial."""
        carol = session_for("carol")
        stored = manager.encrypt_text_for(carol, "hi")
        tampered = stored[:-4] + ("AAAA" if stored[-4:] != "AAAA" else "BBBB")
        with pytest.raises(PolicyDenied) as exc:
            owner_decrypt_if_allowed(manager, carol, tampered)
        assert exc.value.reason is DenyReason.DECRYPT_FAILED

    def test_missing_session(self, manager):
        """Test an absent session fails closed with login_required."""
        stored = manager.encrypt_text_for(session_for("carol"), "hi")
        with pytest.raises(PolicyDenied) as exc:
            owner_decrypt_if_allowed(manager, None, stored)
        assert exc.value.reason is DenyReason.LOGIN_REQUIRED
        with pytest.raises(PolicyDenied) as exc:
            owner_decrypt_if_allowed(manager, None, stored, owner="carol")
        assert exc.value.reason is DenyReason.LOGIN_REQUIRED
