"""Compact serialization: split, Base64URL, and JSON framing of tokens."""

import base64
import binascii
import json
import re
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from jwtkit.core.errors import DecodeError, JWTCreationError
from jwtkit.crypto.algorithm import Algorithm
from jwtkit.tokens.types import AUDIENCE, DecodedToken, Header, Payload

_BASE64URL = re.compile(r"[A-Za-z0-9_-]*")


def base64url_encode(raw: bytes) -> str:
    """Encode bytes as base64url without padding."""
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def base64url_decode(segment: str) -> bytes:
    """Strictly decode unpadded base64url text."""
    if not _BASE64URL.fullmatch(segment) or len(segment) % 4 == 1:
        raise DecodeError("The input is not a valid base 64 encoded string.")
    padded = segment + "=" * (-len(segment) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError("The input is not a valid base 64 encoded string.") from exc
    # unused trailing bits must be zero, so each byte string has one encoding
    if base64url_encode(raw) != segment:
        raise DecodeError("The input is not a valid base 64 encoded string.")
    return raw


def split_token(token: str) -> tuple[str, str, str]:
    """Split compact text into header, payload and signature segments.

    The signature segment may be empty (unsigned tokens); the other two
    may not.
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise DecodeError(
            f"The token was expected to have 3 parts, but got {len(parts)}."
        )
    if not parts[0] or not parts[1]:
        raise DecodeError("The token's header and payload parts can't be empty.")
    return parts[0], parts[1], parts[2]


def _reject_constant(value: str) -> Any:
    raise ValueError(f"Unsupported JSON constant: {value}")


def parse_json_object(raw: bytes) -> dict[str, Any]:
    """Parse decoded segment bytes as a JSON object."""
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError("The decoded segment is not valid UTF-8.") from exc
    if not (text.startswith("{") and text.endswith("}")):
        raise DecodeError(f"The string '{text}' doesn't have a valid JSON format.")
    try:
        tree = json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise DecodeError(
            f"The string '{text}' doesn't have a valid JSON format."
        ) from exc
    if not isinstance(tree, dict):
        raise DecodeError(f"The string '{text}' doesn't have a valid JSON format.")
    return tree


def decode_token(token: str) -> DecodedToken:
    """Decode a compact token without verifying it."""
    parts = split_token(token)
    header = Header.from_tree(parse_json_object(base64url_decode(parts[0])))
    payload = Payload.from_tree(parse_json_object(base64url_decode(parts[1])))
    signature = base64url_decode(parts[2])
    return DecodedToken(header=header, payload=payload, signature=signature, parts=parts)


def _to_json_value(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return int(value.timestamp())
    if isinstance(value, Mapping):
        return {str(key): _to_json_value(item) for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, str | bytes):
        return [_to_json_value(item) for item in value]
    return value


def serialize_claims(claims: Mapping[str, Any]) -> str:
    """Serialize a claim mapping to compact JSON.

    Dates become whole epoch seconds, naive ones read as UTC; a single audience is written as a
    plain string and an empty one is dropped.
    """
    prepared: dict[str, Any] = {}
    for name, value in claims.items():
        if name == AUDIENCE and not isinstance(value, str):
            audience = list(value)
            if not audience:
                continue
            prepared[name] = audience[0] if len(audience) == 1 else audience
            continue
        prepared[name] = _to_json_value(value)
    try:
        return json.dumps(
            prepared, separators=(",", ":"), sort_keys=True, allow_nan=False
        )
    except (TypeError, ValueError) as exc:
        raise JWTCreationError(
            "Some of the Claims couldn't be converted to a valid JSON format."
        ) from exc


def encode_token(
    header_claims: Mapping[str, Any],
    payload_claims: Mapping[str, Any],
    algorithm: Algorithm,
) -> str:
    """Serialize, sign and join a token in compact form."""
    header = base64url_encode(serialize_claims(header_claims).encode())
    payload = base64url_encode(serialize_claims(payload_claims).encode())
    content = f"{header}.{payload}"
    signature = algorithm.sign(content.encode("ascii"))
    return f"{content}.{base64url_encode(signature)}"
