"""Session Vault — process key, AEAD sealing and cookie codec.

Security Note (Threat Model):
    One key is shared by every session of a running process. Isolation
    between users' stored payloads is enforced by the ownership policy,
    not by the cryptography; anyone holding the key can open any payload.
"""

from .config import SessionKey, SessionConfig, load_session_key, generate_master_key
from .crypto import seal, open_sealed, NONCE_SIZE, TAG_SIZE
from .codec import encode, decode, to_cookie_value, from_cookie_value

__all__ = [
    "SessionKey",
    "SessionConfig",
    "load_session_key",
    "generate_master_key",
    "seal",
    "open_sealed",
    "NONCE_SIZE",
    "TAG_SIZE",
    "encode",
    "decode",
    "to_cookie_value",
    "from_cookie_value",
]
