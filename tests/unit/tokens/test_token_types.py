"""Tests for Header, Payload and DecodedToken views."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from jwtkit.tokens.claims import JsonClaim, MissingClaim, NullClaim
from jwtkit.tokens.types import DecodedToken, Header, Payload


class TestHeader:
    """Tests for header extraction."""

    def test_registered_parameters(self) -> None:
        header = Header.from_tree(
            {"alg": "RS256", "typ": "JWT", "cty": "JWT", "kid": "key-1", "x5t": "abc"}
        )
        assert header.algorithm == "RS256"
        assert header.token_type == "JWT"
        assert header.content_type == "JWT"
        assert header.key_id == "key-1"
        assert header.get_claim("x5t").as_string() == "abc"

    def test_non_string_parameters_ignored(self) -> None:
        header = Header.from_tree({"alg": 5})
        assert header.algorithm is None
        assert isinstance(header.get_claim("alg"), JsonClaim)


class TestPayload:
    """Tests for payload extraction."""

    def test_registered_claims(self) -> None:
        payload = Payload.from_tree(
            {
                "iss": "auth0",
                "sub": "user-1",
                "aud": ["a", "b"],
                "exp": 200,
                "nbf": 100,
                "iat": 100,
                "jti": "id-1",
            }
        )
        assert payload.issuer == "auth0"
        assert payload.subject == "user-1"
        assert payload.audience == ["a", "b"]
        assert payload.expires_at == datetime.fromtimestamp(200, UTC)
        assert payload.not_before == datetime.fromtimestamp(100, UTC)
        assert payload.issued_at == datetime.fromtimestamp(100, UTC)
        assert payload.jwt_id == "id-1"

    def test_null_registered_claims(self) -> None:
        payload = Payload.from_tree({"aud": None, "exp": None})
        assert payload.audience is None
        assert payload.expires_at is None
        assert isinstance(payload.get_claim("exp"), NullClaim)

    def test_claims_mapping(self) -> None:
        payload = Payload.from_tree({"a": 1, "b": None})
        claims = payload.claims
        assert set(claims) == {"a", "b"}
        assert claims["a"].as_int() == 1
        assert claims["b"].is_null()


class TestDecodedToken:
    """Tests for the decoded token container."""

    def _token(self) -> DecodedToken:
        return DecodedToken(
            header=Header.from_tree({"alg": "none"}),
            payload=Payload.from_tree({"sub": "1"}),
            signature=b"",
            parts=("aGVhZA", "Ym9keQ", ""),
        )

    def test_segments(self) -> None:
        token = self._token()
        assert token.header_segment == "aGVhZA"
        assert token.payload_segment == "Ym9keQ"
        assert token.signature_segment == ""
        assert token.token == "aGVhZA.Ym9keQ."
        assert token.signing_input == b"aGVhZA.Ym9keQ"

    def test_claim_lookups(self) -> None:
        token = self._token()
        assert token.get_claim("sub").as_string() == "1"
        assert isinstance(token.get_claim("iss"), MissingClaim)
        assert token.get_header_claim("alg").as_string() == "none"

    def test_frozen(self) -> None:
        token = self._token()
        with pytest.raises(ValidationError):
            token.signature = b"x"  # type: ignore[misc]
