"""
Vault Session Codec — SessionRecord serialization and cookie armoring.
"""
import base64

import orjson
from pydantic import ValidationError

from ..data import SessionRecord
from ..exceptions import FormatError


def encode(record: SessionRecord) -> bytes:
    """Serialize a SessionRecord to deterministic JSON bytes."""
    return orjson.dumps(record.model_dump(), option=orjson.OPT_SORT_KEYS)


def decode(data: bytes) -> SessionRecord:
    """Deserialize bytes produced by :func:`encode`.

    Raises:
        FormatError: If data is not JSON, not an object, or fails validation.
    """
    try:
        parsed = orjson.loads(data)
    except orjson.JSONDecodeError as err:
        raise FormatError(f"session record is not valid JSON: {err}") from err
    if not isinstance(parsed, dict):
        raise FormatError("session record must be a JSON object")
    try:
        return SessionRecord.model_validate(parsed)
    except ValidationError as err:
        raise FormatError(
            f"invalid session record ({err.error_count()} error(s))"
        ) from err


def to_cookie_value(sealed: bytes) -> str:
    return base64.b64encode(sealed).decode("ascii")


def from_cookie_value(value: str) -> bytes:
    """Decode a base64 cookie value back to sealed bytes.

    Raises:
        FormatError: On invalid alphabet or padding.
    """
    try:
        return base64.b64decode(value, validate=True)
    except ValueError as err:
        # binascii.Error, or non-ASCII characters in the value
        raise FormatError(f"invalid base64: {err}") from err
