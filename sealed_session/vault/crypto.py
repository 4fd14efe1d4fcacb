"""
Vault Crypto Core — authenticated encryption of cookie and payload bytes.

Format: [nonce 12B][encrypted_payload + tag 16B]

The nonce is random per call and travels with the ciphertext; any change to
nonce, ciphertext or tag makes ``open_sealed`` fail without returning data.

Security Note:
    Never log plaintext or ciphertext values.
    Nonces are random 96-bit; collision probability negligible under normal usage.
"""
import os
import logging

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM, ChaCha20Poly1305

from ..exceptions import DecryptError, SessionEncryptionError
from .config import SessionKey

logger = logging.getLogger("sealed_session.vault")

NONCE_SIZE = 12  # 96-bit nonce
TAG_SIZE = 16  # 128-bit tag

_CIPHERS = {
    "aesgcm": AESGCM,
    "chacha20": ChaCha20Poly1305,
}


def _cipher(key: SessionKey):
    return _CIPHERS[key.cipher_backend](key.secret())


def seal(key: SessionKey, plaintext: bytes) -> bytes:
    """Encrypt plaintext under the session key with a fresh nonce.

    Args:
        key: Process session key.
        plaintext: Data to encrypt.

    Returns:
        nonce || ciphertext || tag.

    Raises:
        SessionEncryptionError: If the AEAD refuses the input.
    """
    nonce = os.urandom(NONCE_SIZE)
    try:
        ct = _cipher(key).encrypt(nonce, plaintext, None)
    except (TypeError, ValueError, OverflowError) as err:
        raise SessionEncryptionError(f"sealing failed: {err}") from err
    return nonce + ct


def open_sealed(key: SessionKey, sealed: bytes) -> bytes:
    """Decrypt bytes produced by :func:`seal`.

    Args:
        key: Process session key.
        sealed: Data in format [nonce 12B][payload+tag].

    Returns:
        Decrypted plaintext bytes.

    Raises:
        DecryptError: If the input is too short or fails authentication.
    """
    _min = NONCE_SIZE + TAG_SIZE
    if len(sealed) < _min:
        raise DecryptError(
            f"sealed data too short: {len(sealed)} bytes (minimum {_min})"
        )
    nonce = sealed[:NONCE_SIZE]
    ct = sealed[NONCE_SIZE:]
    try:
        return _cipher(key).decrypt(nonce, ct, None)
    except InvalidTag as err:
        raise DecryptError("authentication failed") from err
