"""Sealed Session errors.

Format and decryption failures are recoverable and collapse to "no session"
at the SessionManager boundary. Encryption failures are not collapsed.
"""


class SessionError(Exception):
    """Base class for Sealed Session errors."""


class FormatError(SessionError, ValueError):
    """Malformed base64 or malformed serialized record."""


class DecryptError(SessionError):
    """AEAD authentication failed (tampered, truncated or foreign data)."""


class SessionEncryptionError(SessionError, RuntimeError):
    """Sealing failed; indicates a programming or environment fault."""


class PolicyDenied(SessionError):
    """An access policy rejected the request.

    The ``reason`` is kept for diagnostics; only ``user_message`` should
    ever reach the end user.
    """

    def __init__(self, reason, detail: str = None):
        self.reason = reason
        self.detail = detail
        super().__init__(f"{reason.value}: {detail}" if detail else reason.value)

    @property
    def user_message(self) -> str:
        return self.reason.user_message
