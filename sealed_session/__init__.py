"""Sealed Session.

Encrypted session cookies and access policies for user-owned stored data.
"""
from .version import __version__
from .data import SessionRecord, CookieAttributes
from .exceptions import (
    SessionError,
    FormatError,
    DecryptError,
    SessionEncryptionError,
    PolicyDenied,
)
from .manager import SessionManager, Outcome, Status
from .policies import (
    DenyReason,
    require_authenticated,
    user_may_access,
    reject_sensitive_text,
    owner_decrypt_if_allowed,
    authorize_read,
    authorize_submit,
)
from .storage import AbstractStore, MemoryStore

__all__ = [
    "__version__",
    "SessionRecord",
    "CookieAttributes",
    "SessionError",
    "FormatError",
    "DecryptError",
    "SessionEncryptionError",
    "PolicyDenied",
    "SessionManager",
    "Outcome",
    "Status",
    "DenyReason",
    "require_authenticated",
    "user_may_access",
    "reject_sensitive_text",
    "owner_decrypt_if_allowed",
    "authorize_read",
    "authorize_submit",
    "AbstractStore",
    "MemoryStore",
]
