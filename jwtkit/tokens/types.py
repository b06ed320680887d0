"""Type definitions for decoded token parts."""

from datetime import datetime
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field

from jwtkit.core.errors import DecodeError
from jwtkit.tokens.claims import ClaimValue, JsonClaim, claim_from_tree

# Header parameters
ALGORITHM = "alg"
TYPE = "typ"
CONTENT_TYPE = "cty"
KEY_ID = "kid"

# Registered payload claims
ISSUER = "iss"
SUBJECT = "sub"
AUDIENCE = "aud"
EXPIRES_AT = "exp"
NOT_BEFORE = "nbf"
ISSUED_AT = "iat"
JWT_ID = "jti"

DATE_CLAIMS = (EXPIRES_AT, NOT_BEFORE, ISSUED_AT)


def _get_string(tree: dict[str, Any], name: str) -> str | None:
    value = tree.get(name)
    return value if isinstance(value, str) else None


def _get_audience(tree: dict[str, Any]) -> list[str] | None:
    node = tree.get(AUDIENCE)
    if node is None:
        return None
    if isinstance(node, str):
        return [node]
    if isinstance(node, list) and all(isinstance(item, str) for item in node):
        return list(node)
    raise DecodeError("The Claim 'aud' must be a string or an array of strings.")


def _get_date(tree: dict[str, Any], name: str) -> datetime | None:
    node = tree.get(name)
    if node is None:
        return None
    date = JsonClaim(name, node).as_date()
    if date is None:
        raise DecodeError(f"The Claim '{name}' must be a NumericDate.")
    return date


class Header(BaseModel):
    """The JOSE header of a token."""

    model_config = ConfigDict(frozen=True)

    algorithm: str | None = None
    token_type: str | None = None
    content_type: str | None = None
    key_id: str | None = None
    tree: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_tree(cls, tree: dict[str, Any]) -> Self:
        return cls(
            algorithm=_get_string(tree, ALGORITHM),
            token_type=_get_string(tree, TYPE),
            content_type=_get_string(tree, CONTENT_TYPE),
            key_id=_get_string(tree, KEY_ID),
            tree=tree,
        )

    def get_claim(self, name: str) -> ClaimValue:
        return claim_from_tree(self.tree, name)


class Payload(BaseModel):
    """The claim set of a token, with registered claims pre-extracted."""

    model_config = ConfigDict(frozen=True)

    issuer: str | None = None
    subject: str | None = None
    audience: list[str] | None = None
    expires_at: datetime | None = None
    not_before: datetime | None = None
    issued_at: datetime | None = None
    jwt_id: str | None = None
    tree: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_tree(cls, tree: dict[str, Any]) -> Self:
        """Build a payload, rejecting registered claims of the wrong JSON type."""
        return cls(
            issuer=_get_string(tree, ISSUER),
            subject=_get_string(tree, SUBJECT),
            audience=_get_audience(tree),
            expires_at=_get_date(tree, EXPIRES_AT),
            not_before=_get_date(tree, NOT_BEFORE),
            issued_at=_get_date(tree, ISSUED_AT),
            jwt_id=_get_string(tree, JWT_ID),
            tree=tree,
        )

    def get_claim(self, name: str) -> ClaimValue:
        return claim_from_tree(self.tree, name)

    @property
    def claims(self) -> dict[str, ClaimValue]:
        return {name: claim_from_tree(self.tree, name) for name in self.tree}


class DecodedToken(BaseModel):
    """A split and parsed token; its signature has not necessarily been checked."""

    model_config = ConfigDict(frozen=True)

    header: Header
    payload: Payload
    signature: bytes
    parts: tuple[str, str, str]

    @property
    def algorithm(self) -> str | None:
        return self.header.algorithm

    @property
    def header_segment(self) -> str:
        return self.parts[0]

    @property
    def payload_segment(self) -> str:
        return self.parts[1]

    @property
    def signature_segment(self) -> str:
        return self.parts[2]

    @property
    def token(self) -> str:
        return ".".join(self.parts)

    @property
    def signing_input(self) -> bytes:
        """The exact bytes the issuer signed, taken from the received text."""
        return f"{self.parts[0]}.{self.parts[1]}".encode("ascii")

    def get_claim(self, name: str) -> ClaimValue:
        return self.payload.get_claim(name)

    def get_header_claim(self, name: str) -> ClaimValue:
        return self.header.get_claim(name)
