"""
Vault Configuration — Session key loading and validated settings.

Reads the process key from environment variables:
    SESSION_MASTER_KEY = <base64-encoded 32-byte key>
    SESSION_CIPHER_BACKEND = aesgcm | chacha20
    SESSION_COOKIE_SECURE = true | false

If SESSION_MASTER_KEY is not set a random key is generated for this process;
cookies and stored payloads sealed under it become unreadable after restart.

Security Note:
    Never log key material. Only log the cipher backend.
"""
import os
import base64
import binascii
import secrets
import logging
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretBytes,
    field_validator,
)

from ..conf import (
    CIPHER_BACKENDS,
    ENV_CIPHER_BACKEND,
    ENV_COOKIE_SECURE,
    ENV_MASTER_KEY,
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_PATH,
)

logger = logging.getLogger("sealed_session.vault")

KEY_LENGTH = 32  # AES-256 / ChaCha20
_LEGACY_PREFIX = "base64:"


def _validate_backend(v: str) -> str:
    v = v.lower()
    if v not in CIPHER_BACKENDS:
        raise ValueError(f"Unsupported cipher backend: {v}")
    return v


class SessionKey(BaseModel):
    """Symmetric key material owned by the SessionManager.

    Immutable after construction; ``material`` is a SecretBytes so the key
    never shows up in repr, str or model dumps.
    """

    model_config = ConfigDict(frozen=True)

    material: SecretBytes
    cipher_backend: str = Field(default="aesgcm")

    @field_validator("material")
    @classmethod
    def validate_length(cls, v: SecretBytes) -> SecretBytes:
        """Key must be exactly 32 bytes."""
        size = len(v.get_secret_value())
        if size != KEY_LENGTH:
            raise ValueError(
                f"session key must be exactly {KEY_LENGTH} bytes, got {size}"
            )
        return v

    @field_validator("cipher_backend")
    @classmethod
    def validate_cipher(cls, v: str) -> str:
        """Validate cipher backend is supported."""
        return _validate_backend(v)

    def secret(self) -> bytes:
        return self.material.get_secret_value()

    @classmethod
    def generate(cls, cipher_backend: str = "aesgcm") -> "SessionKey":
        """Create a fresh random key."""
        return cls(
            material=secrets.token_bytes(KEY_LENGTH),
            cipher_backend=cipher_backend,
        )

    @classmethod
    def from_b64(cls, value: str, cipher_backend: str = "aesgcm") -> "SessionKey":
        """Build a key from its base64 text form.

        Raises:
            ValueError: If the value is not base64 or not 32 bytes long.
        """
        value = value.strip()
        if value.startswith(_LEGACY_PREFIX):
            value = value[len(_LEGACY_PREFIX):]
        try:
            key_bytes = base64.b64decode(value, validate=True)
        except binascii.Error as err:
            raise ValueError(f"session key is not valid base64: {err}") from err
        return cls(material=key_bytes, cipher_backend=cipher_backend)


def load_session_key(cipher_backend: Optional[str] = None) -> SessionKey:
    """Load the process session key from SESSION_MASTER_KEY.

    Args:
        cipher_backend: AEAD backend for the key; falls back to
            SESSION_CIPHER_BACKEND when omitted.

    Returns:
        SessionKey bound to the requested backend.

    Raises:
        ValueError: If SESSION_MASTER_KEY is set but invalid.
    """
    backend = cipher_backend or os.environ.get(ENV_CIPHER_BACKEND, "aesgcm")
    raw = os.environ.get(ENV_MASTER_KEY)
    if not raw:
        logger.warning(
            "%s is not set; generated an ephemeral session key. "
            "Sessions will not survive a restart.",
            ENV_MASTER_KEY,
        )
        return SessionKey.generate(cipher_backend=backend)
    key = SessionKey.from_b64(raw, cipher_backend=backend)
    logger.debug("Loaded session key from environment (backend=%s)", key.cipher_backend)
    return key


def generate_master_key() -> str:
    """Generate a random 32-byte key and return as base64 string.

    This is a utility for operators to generate SESSION_MASTER_KEY values.

    Returns:
        Base64-encoded 32-byte key string.
    """
    return base64.b64encode(secrets.token_bytes(KEY_LENGTH)).decode("ascii")


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class SessionConfig(BaseModel):
    """Validated session settings."""

    model_config = ConfigDict(frozen=True)

    cookie_name: str = Field(default=SESSION_COOKIE_NAME, min_length=1)
    cookie_path: str = Field(default=SESSION_COOKIE_PATH)
    cookie_secure: bool = False
    cipher_backend: str = Field(default="aesgcm")

    @field_validator("cipher_backend")
    @classmethod
    def validate_cipher(cls, v: str) -> str:
        """Validate cipher backend is supported."""
        return _validate_backend(v)

    @classmethod
    def from_env(cls) -> "SessionConfig":
        """Create SessionConfig by loading values from environment.

        Returns:
            Populated SessionConfig instance.
        """
        return cls(
            cookie_secure=_env_flag(ENV_COOKIE_SECURE),
            cipher_backend=os.environ.get(ENV_CIPHER_BACKEND, "aesgcm"),
        )
