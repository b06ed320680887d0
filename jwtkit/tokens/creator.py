"""Builder for issuing signed tokens."""

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Self

from jwtkit.crypto.algorithm import Algorithm
from jwtkit.tokens.codec import encode_token
from jwtkit.tokens.types import (
    ALGORITHM,
    AUDIENCE,
    EXPIRES_AT,
    ISSUED_AT,
    ISSUER,
    JWT_ID,
    KEY_ID,
    NOT_BEFORE,
    SUBJECT,
    TYPE,
)

ClaimScalar = bool | int | float | str | datetime


class TokenBuilder:
    """Collects header and payload claims, then signs them.

    Passing ``None`` as a value removes a previously set claim.
    """

    def __init__(self) -> None:
        self._header: dict[str, Any] = {}
        self._payload: dict[str, Any] = {}

    def with_header(self, claims: Mapping[str, Any]) -> Self:
        """Replace extra header claims; alg and typ are always set by sign."""
        self._header = {k: v for k, v in claims.items() if v is not None}
        return self

    def with_key_id(self, key_id: str | None) -> Self:
        _put(self._header, KEY_ID, key_id)
        return self

    def with_issuer(self, issuer: str | None) -> Self:
        _put(self._payload, ISSUER, issuer)
        return self

    def with_subject(self, subject: str | None) -> Self:
        _put(self._payload, SUBJECT, subject)
        return self

    def with_audience(self, *audience: str) -> Self:
        _put(self._payload, AUDIENCE, list(audience) or None)
        return self

    def with_expires_at(self, expires_at: datetime | None) -> Self:
        _put(self._payload, EXPIRES_AT, expires_at)
        return self

    def with_not_before(self, not_before: datetime | None) -> Self:
        _put(self._payload, NOT_BEFORE, not_before)
        return self

    def with_issued_at(self, issued_at: datetime | None) -> Self:
        _put(self._payload, ISSUED_AT, issued_at)
        return self

    def with_jwt_id(self, jwt_id: str | None) -> Self:
        _put(self._payload, JWT_ID, jwt_id)
        return self

    def with_claim(self, name: str, value: ClaimScalar | Mapping[str, Any] | None) -> Self:
        _assert_name(name)
        _put(self._payload, name, value)
        return self

    def with_array_claim(self, name: str, items: Iterable[ClaimScalar] | None) -> Self:
        _assert_name(name)
        _put(self._payload, name, None if items is None else list(items))
        return self

    def sign(self, algorithm: Algorithm) -> str:
        """Sign the collected claims and return the compact token."""
        if algorithm is None:
            raise ValueError("The Algorithm cannot be null.")
        header = dict(self._header)
        header[ALGORITHM] = algorithm.name
        header[TYPE] = "JWT"
        if algorithm.key_id is not None:
            header[KEY_ID] = algorithm.key_id
        return encode_token(header, self._payload, algorithm)


def _assert_name(name: str) -> None:
    if name is None:
        raise ValueError("The Custom Claim's name can't be null.")


def _put(claims: dict[str, Any], name: str, value: Any) -> None:
    if value is None:
        claims.pop(name, None)
        return
    claims[name] = value
