"""
Access policies for stored user data.

Every submit and read passes three independent checks:
- the caller holds a valid session (``require_authenticated``)
- the caller owns the data it touches (``user_may_access``)
- submitted text does not look like PII (``reject_sensitive_text``)

PII detection is a regex heuristic and a best-effort guard only. It misses
creatively formatted numbers (false negatives) and rejects unrelated long
digit runs such as order or tracking numbers (false positives).
"""
import logging
import re
from enum import Enum
from typing import Optional

from .data import SessionRecord
from .exceptions import FormatError, PolicyDenied
from .manager import SessionManager
from .vault import codec

logger = logging.getLogger("sealed_session.policies")

_SSN = re.compile(r"\b\d{3}-\d{2}-\d{4}\b")
_CARD = re.compile(r"\b\d{13,19}\b")
_PHONE = re.compile(r"\b\d{3}[- ]?\d{3}[- ]?\d{4}\b")

SENSITIVE_PATTERNS = (_SSN, _CARD, _PHONE)


class DenyReason(Enum):
    LOGIN_REQUIRED = "login_required"
    NOT_ALLOWED = "not_allowed"
    CONTENT_REJECTED = "content_rejected"
    INVALID_ENCODING = "invalid_encoding"
    DECRYPT_FAILED = "decrypt_failed"

    @property
    def user_message(self) -> str:
        # read failures share one message
        if self is DenyReason.LOGIN_REQUIRED:
            return "Please log in."
        if self is DenyReason.CONTENT_REJECTED:
            return "Content rejected: it looks like sensitive personal data."
        return "Not allowed."


def require_authenticated(session: Optional[SessionRecord]) -> bool:
    """Only authenticated users can submit or read."""
    return session is not None


def user_may_access(session: SessionRecord, target_username: str) -> bool:
    """A user can only access their own data. There is no admin override."""
    return session.username == target_username


def reject_sensitive_text(text: str) -> bool:
    """Return True when ``text`` is acceptable (no SSN, card or phone shapes)."""
    return not any(p.search(text) for p in SENSITIVE_PATTERNS)


def _deny(reason: DenyReason, session: Optional[SessionRecord], detail: str = None):
    logger.info(
        "Policy denied (%s) for user=%s",
        reason.value, session.username if session else None,
    )
    raise PolicyDenied(reason, detail)


def authorize_read(session: Optional[SessionRecord], target_username: str) -> SessionRecord:
    """Check a read of ``target_username``'s data.

    Returns:
        The authenticated session.

    Raises:
        PolicyDenied: login_required or not_allowed.
    """
    if not require_authenticated(session):
        _deny(DenyReason.LOGIN_REQUIRED, session)
    if not user_may_access(session, target_username):
        _deny(DenyReason.NOT_ALLOWED, session, f"target={target_username}")
    return session


def authorize_submit(
    session: Optional[SessionRecord],
    target_username: str,
    text: str,
) -> SessionRecord:
    """Check a write of ``text`` into ``target_username``'s data.

    Raises:
        PolicyDenied: login_required, not_allowed or content_rejected,
            checked in that order.
    """
    authorize_read(session, target_username)
    if not reject_sensitive_text(text):
        _deny(DenyReason.CONTENT_REJECTED, session)
    return session


def owner_decrypt_if_allowed(
    manager: SessionManager,
    session: Optional[SessionRecord],
    sealed_b64: str,
    owner: Optional[str] = None,
) -> str:
    """Decrypt a stored payload for its owner.

    Args:
        manager: SessionManager holding the process key.
        session: Resolved session of the caller.
        sealed_b64: Stored payload (base64 of nonce || ciphertext || tag).
        owner: Username the payload is stored under; defaults to the
            caller's own username.

    Returns:
        The decrypted text.

    Raises:
        PolicyDenied: login_required when there is no session; otherwise
            not_allowed, invalid_encoding or decrypt_failed, which all
            share the same ``user_message``.
    """
    if not require_authenticated(session):
        _deny(DenyReason.LOGIN_REQUIRED, session)
    owner = session.username if owner is None else owner
    if not user_may_access(session, owner):
        _deny(DenyReason.NOT_ALLOWED, session, f"owner={owner}")
    try:
        sealed = codec.from_cookie_value(sealed_b64)
    except FormatError as err:
        _deny(DenyReason.INVALID_ENCODING, session, str(err))
    plaintext = manager.decrypt_for(session, sealed)
    if plaintext is None:
        _deny(DenyReason.DECRYPT_FAILED, session)
    return plaintext
