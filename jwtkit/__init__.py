"""JSON Web Token creation and verification."""

from jwtkit.core.errors import (
    AlgorithmMismatchError,
    ClaimError,
    DecodeError,
    IncorrectClaimError,
    InvalidClaimError,
    JWTCreationError,
    JWTError,
    JWTVerificationError,
    MissingClaimError,
    SignatureGenerationError,
    SignatureVerificationError,
    TokenExpiredError,
)
from jwtkit.crypto.algorithm import Algorithm
from jwtkit.tokens.claims import ClaimValue, JsonClaim, MissingClaim, NullClaim
from jwtkit.tokens.codec import decode_token
from jwtkit.tokens.creator import TokenBuilder
from jwtkit.tokens.types import DecodedToken, Header, Payload
from jwtkit.tokens.verifier import Verification, Verifier

__version__ = "0.1.0"

__all__ = [
    "Algorithm",
    "AlgorithmMismatchError",
    "ClaimError",
    "ClaimValue",
    "DecodeError",
    "DecodedToken",
    "Header",
    "IncorrectClaimError",
    "InvalidClaimError",
    "JWTCreationError",
    "JWTError",
    "JWTVerificationError",
    "JsonClaim",
    "MissingClaim",
    "MissingClaimError",
    "NullClaim",
    "Payload",
    "SignatureGenerationError",
    "SignatureVerificationError",
    "TokenBuilder",
    "TokenExpiredError",
    "Verification",
    "Verifier",
    "decode_token",
]
