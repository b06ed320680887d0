"""Exception hierarchy for token creation, decoding, and verification."""

from datetime import datetime
from typing import Any


class JWTError(Exception):
    """Base class for every error raised by jwtkit."""


class JWTCreationError(JWTError):
    """Raised when a token cannot be built or serialized."""


class SignatureGenerationError(JWTCreationError):
    """Raised when the algorithm fails to produce a signature."""

    def __init__(self, description: str) -> None:
        super().__init__(
            "The Token's Signature couldn't be generated when signing "
            f"using the Algorithm: {description}"
        )
        self.description = description


class JWTVerificationError(JWTError):
    """Base class for every reason a token is rejected."""


class DecodeError(JWTVerificationError):
    """Raised when the token text is structurally invalid."""


class SignatureVerificationError(JWTVerificationError):
    """Raised when the signature does not match the signing input."""

    def __init__(self, description: str) -> None:
        super().__init__(
            "The Token's Signature resulted invalid when verified "
            f"using the Algorithm: {description}"
        )
        self.description = description


class ClaimError(JWTVerificationError):
    """Base class for claim-level verification failures."""


class MissingClaimError(ClaimError):
    """Raised when a required claim is absent from the token."""

    def __init__(self, claim_name: str) -> None:
        super().__init__(f"The Claim '{claim_name}' is not present in the JWT.")
        self.claim_name = claim_name


class AlgorithmMismatchError(ClaimError):
    """Raised when the header's alg differs from the verifying algorithm."""

    def __init__(self, expected: str, actual: str | None) -> None:
        super().__init__(
            "The provided Algorithm doesn't match the one defined "
            f"in the JWT's Header (expected {expected!r}, got {actual!r})."
        )
        self.expected = expected
        self.actual = actual


class InvalidClaimError(ClaimError):
    """Raised when a claim is present but fails an assertion."""

    def __init__(self, message: str, claim_name: str | None = None) -> None:
        super().__init__(message)
        self.claim_name = claim_name


class IncorrectClaimError(InvalidClaimError):
    """Raised when a claim's value does not match the expected one."""

    def __init__(self, message: str, claim_name: str, claim_value: Any) -> None:
        super().__init__(message, claim_name)
        self.claim_value = claim_value


class TokenExpiredError(InvalidClaimError):
    """Raised when the exp claim lies in the past beyond the leeway."""

    def __init__(self, expired_on: datetime) -> None:
        super().__init__(f"The Token has expired on {expired_on.isoformat()}.", "exp")
        self.expired_on = expired_on
