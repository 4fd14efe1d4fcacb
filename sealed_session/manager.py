"""
SessionManager — issues and resolves encrypted session cookies.

Provides the public API used by application handlers:
- ``issue(username)`` — build the sealed ``session`` cookie directive
- ``resolve(cookie_value)`` — SessionRecord, or None on any failure
- ``encrypt_for(record, plaintext)`` / ``decrypt_for(record, sealed)`` —
  seal and open user payloads under the process key

Security Note:
    Never log cookie values, plaintext or ciphertext. Only log usernames
    and failure categories.
"""
import logging
from enum import Enum
from typing import NamedTuple, Optional

from .data import CookieAttributes, SessionRecord
from .exceptions import DecryptError, FormatError, SessionEncryptionError
from .vault.config import SessionConfig, SessionKey, load_session_key
from .vault.crypto import seal, open_sealed
from .vault import codec

logger = logging.getLogger("sealed_session.manager")


class Status(Enum):
    OK = "ok"
    MISSING = "missing"
    FORMAT = "format"
    DECRYPT = "decrypt"


class Outcome(NamedTuple):
    """Tagged result of resolving a cookie.

    ``value`` is only set when ``status`` is ``Status.OK``.
    """
    status: Status
    value: Optional[SessionRecord] = None

    @property
    def ok(self) -> bool:
        return self.status is Status.OK


class SessionManager:
    """Holder of the process session key.

    The key is fixed at construction and never changes, so one manager can
    be shared by every request handler without locking.

    Args:
        key: Session key; loaded from the environment when omitted.
        config: Session settings. When omitted they follow the key's
            backend, or the environment if no key is given either.

    Raises:
        ValueError: If the key's cipher backend differs from the config.
    """

    def __init__(
        self,
        key: Optional[SessionKey] = None,
        config: Optional[SessionConfig] = None,
    ):
        if config is None:
            config = (
                SessionConfig(cipher_backend=key.cipher_backend)
                if key is not None else SessionConfig.from_env()
            )
        if key is None:
            key = load_session_key(cipher_backend=config.cipher_backend)
        elif key.cipher_backend != config.cipher_backend:
            raise ValueError(
                f"session key backend {key.cipher_backend!r} does not match "
                f"configured backend {config.cipher_backend!r}"
            )
        self._config = config
        self._key = key
        logger.debug(
            "SessionManager ready (cookie=%s, backend=%s)",
            self._config.cookie_name, self._key.cipher_backend,
        )

    def __repr__(self) -> str:
        return f'<SessionManager cookie={self._config.cookie_name!r}>'

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def cookie_name(self) -> str:
        return self._config.cookie_name

    # ------------------------------------------------------------------
    # Cookies
    # ------------------------------------------------------------------

    def issue(self, username: str) -> CookieAttributes:
        """Create a session for ``username`` and return its cookie directive.

        Raises:
            pydantic.ValidationError: If the username is blank.
            SessionEncryptionError: If sealing fails.
        """
        record = SessionRecord(username=username)
        sealed = seal(self._key, codec.encode(record))
        logger.debug("Issued session for user=%s", record.username)
        return CookieAttributes(
            name=self._config.cookie_name,
            value=codec.to_cookie_value(sealed),
            path=self._config.cookie_path,
            httponly=True,
            secure=self._config.cookie_secure,
        )

    def clear_cookie(self) -> CookieAttributes:
        """Cookie directive that overwrites the session cookie with nothing."""
        return CookieAttributes(
            name=self._config.cookie_name,
            value="",
            path=self._config.cookie_path,
            httponly=True,
            secure=self._config.cookie_secure,
        )

    def inspect(self, cookie_value: Optional[str]) -> Outcome:
        """Resolve a cookie value, keeping the failure category."""
        if not cookie_value:
            return Outcome(Status.MISSING)
        try:
            sealed = codec.from_cookie_value(cookie_value)
            record = codec.decode(open_sealed(self._key, sealed))
        except FormatError as err:
            logger.debug("Session cookie rejected (format): %s", err)
            return Outcome(Status.FORMAT)
        except DecryptError:
            logger.debug("Session cookie rejected (decrypt)")
            return Outcome(Status.DECRYPT)
        return Outcome(Status.OK, record)

    def resolve(self, cookie_value: Optional[str]) -> Optional[SessionRecord]:
        """Return the SessionRecord sealed in ``cookie_value``, or None."""
        return self.inspect(cookie_value).value

    # ------------------------------------------------------------------
    # Payloads
    # ------------------------------------------------------------------

    def encrypt_for(self, record: SessionRecord, plaintext: bytes) -> Optional[bytes]:
        """Seal a payload under the process key.

        ``record`` does not influence the key; every session shares it.
        Returns None only when sealing fails, which is logged as an error.
        """
        try:
            return seal(self._key, plaintext)
        except SessionEncryptionError as err:
            logger.error(
                "Payload encryption failed for user=%s: %s", record.username, err
            )
            return None

    def decrypt_for(self, record: SessionRecord, sealed: bytes) -> Optional[str]:
        """Open a payload sealed by :meth:`encrypt_for` and decode it as UTF-8."""
        try:
            return open_sealed(self._key, sealed).decode("utf-8")
        except DecryptError:
            logger.debug("Payload decryption failed for user=%s", record.username)
        except UnicodeDecodeError:
            logger.debug("Payload for user=%s is not valid UTF-8", record.username)
        return None

    def encrypt_text_for(self, record: SessionRecord, text: str) -> Optional[str]:
        """Seal ``text`` and return the base64 string handed to the store."""
        sealed = self.encrypt_for(record, text.encode("utf-8"))
        if sealed is None:
            return None
        return codec.to_cookie_value(sealed)
