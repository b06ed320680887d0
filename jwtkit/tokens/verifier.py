"""Token verification: algorithm match, signature, then claim assertions."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from types import MappingProxyType
from typing import Any, Protocol, Self

from jwtkit.core.errors import (
    AlgorithmMismatchError,
    IncorrectClaimError,
    JWTVerificationError,
    MissingClaimError,
    TokenExpiredError,
)
from jwtkit.core.settings import VerifierSettings
from jwtkit.crypto.algorithm import Algorithm
from jwtkit.tokens.claims import ClaimValue, JsonClaim
from jwtkit.tokens.codec import decode_token
from jwtkit.tokens.types import (
    AUDIENCE,
    DATE_CLAIMS,
    EXPIRES_AT,
    ISSUED_AT,
    ISSUER,
    JWT_ID,
    NOT_BEFORE,
    SUBJECT,
    DecodedToken,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
ClaimPredicate = Callable[[ClaimValue, DecodedToken], bool]
ExpectedValue = bool | int | float | str | datetime

# Audience checks are keyed apart from "aud" so that exact and any-of
# matching replace each other instead of coexisting.
AUDIENCE_EXACT = "AUDIENCE_EXACT"
AUDIENCE_CONTAINS = "AUDIENCE_CONTAINS"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _normalize_date(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.replace(microsecond=0)


def _actual(claim: ClaimValue) -> Any:
    return claim.node if isinstance(claim, JsonClaim) else None


def _mismatch(claim: ClaimValue, message: str | None = None) -> IncorrectClaimError:
    return IncorrectClaimError(
        message or f"The Claim '{claim.name}' value doesn't match the required one.",
        claim.name,
        _actual(claim),
    )


def _require_present(claim: ClaimValue) -> None:
    if claim.is_missing():
        raise MissingClaimError(claim.name)


class ClaimAssertion(Protocol):
    claim_name: str

    def check(self, token: DecodedToken, now: datetime) -> None: ...


@dataclass(frozen=True, slots=True)
class OneOf:
    """String claim equal to one of the accepted values."""

    claim_name: str
    accepted: tuple[str, ...]

    def check(self, token: DecodedToken, now: datetime) -> None:
        claim = token.get_claim(self.claim_name)
        _require_present(claim)
        if claim.as_string() not in self.accepted:
            raise _mismatch(claim)


@dataclass(frozen=True, slots=True)
class Equals:
    """Claim coerced to the expected value's type and compared."""

    claim_name: str
    expected: ExpectedValue

    def _coerce(self, claim: ClaimValue) -> Any:
        match self.expected:
            case bool():
                return claim.as_boolean()
            case int():
                return claim.as_long()
            case float():
                return claim.as_double()
            case str():
                return claim.as_string()
            case datetime():
                return claim.as_date()
        return None

    def check(self, token: DecodedToken, now: datetime) -> None:
        claim = token.get_claim(self.claim_name)
        _require_present(claim)
        actual = self._coerce(claim)
        # True == 1 in Python, keep booleans and numbers apart
        if isinstance(actual, bool) != isinstance(self.expected, bool):
            raise _mismatch(claim)
        if actual != self.expected:
            raise _mismatch(claim)


@dataclass(frozen=True, slots=True)
class ArrayEquals:
    """Array claim equal, element by element and in order, to the expected items."""

    claim_name: str
    expected: tuple[Any, ...]

    def check(self, token: DecodedToken, now: datetime) -> None:
        claim = token.get_claim(self.claim_name)
        _require_present(claim)
        items = claim.as_list(lambda item: item)
        if items is None or list(self.expected) != items:
            raise _mismatch(claim)


@dataclass(frozen=True, slots=True)
class AudienceMatch:
    """Audience list equal to the expected one, or sharing any entry with it."""

    expected: tuple[str, ...]
    exact: bool
    claim_name: str = AUDIENCE

    def check(self, token: DecodedToken, now: datetime) -> None:
        claim = token.get_claim(AUDIENCE)
        _require_present(claim)
        audience = token.payload.audience
        if audience is None:
            valid = False
        elif self.exact:
            valid = audience == list(self.expected)
        else:
            valid = any(item in audience for item in self.expected)
        if not valid:
            raise _mismatch(
                claim, "The Claim 'aud' value doesn't contain the required audience."
            )


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """Date claim checked against the current time, allowing clock skew.

    ``exp`` must not lie before now - leeway; ``nbf`` and ``iat`` must not
    lie after now + leeway. Absent dates pass.
    """

    claim_name: str
    leeway: int

    def check(self, token: DecodedToken, now: datetime) -> None:
        claim = token.get_claim(self.claim_name)
        if claim.is_missing() or claim.is_null():
            return
        date = claim.as_date()
        if date is None:
            raise _mismatch(claim)
        skew = timedelta(seconds=self.leeway)
        if self.claim_name == EXPIRES_AT:
            if now - skew > date:
                raise TokenExpiredError(date)
        elif now + skew < date:
            raise _mismatch(
                claim, f"The Token can't be used before {date.isoformat()}."
            )


@dataclass(frozen=True, slots=True)
class Present:
    """Claim present and not null, whatever its value."""

    claim_name: str

    def check(self, token: DecodedToken, now: datetime) -> None:
        claim = token.get_claim(self.claim_name)
        _require_present(claim)
        if claim.is_null():
            raise _mismatch(claim, f"The Claim '{self.claim_name}' is null.")


@dataclass(frozen=True, slots=True)
class Satisfies:
    """Caller-supplied predicate over the claim and the whole token."""

    claim_name: str
    predicate: ClaimPredicate

    def check(self, token: DecodedToken, now: datetime) -> None:
        claim = token.get_claim(self.claim_name)
        if not self.predicate(claim, token):
            raise _mismatch(claim)


class Verifier:
    """Immutable verification pipeline produced by ``Verification.build``."""

    def __init__(
        self,
        algorithm: Algorithm,
        assertions: Mapping[str, ClaimAssertion],
        clock: Clock = _utcnow,
    ) -> None:
        self._algorithm = algorithm
        self._assertions = MappingProxyType(dict(assertions))
        self._clock = clock

    @property
    def algorithm(self) -> Algorithm:
        return self._algorithm

    @property
    def assertions(self) -> Mapping[str, ClaimAssertion]:
        return self._assertions

    def verify(self, token: str) -> DecodedToken:
        """Decode and verify a compact token.

        Raises:
            DecodeError: malformed token text.
            AlgorithmMismatchError: header alg differs from this verifier's.
            SignatureVerificationError: signature does not match.
            ClaimError: a registered claim assertion failed.
        """
        try:
            decoded = decode_token(token)
            return self._verify_decoded(decoded)
        except JWTVerificationError as exc:
            logger.debug("Rejected token: %s: %s", type(exc).__name__, exc)
            raise

    def verify_decoded(self, decoded: DecodedToken) -> DecodedToken:
        """Verify a token that was already decoded."""
        try:
            return self._verify_decoded(decoded)
        except JWTVerificationError as exc:
            logger.debug("Rejected token: %s: %s", type(exc).__name__, exc)
            raise

    def _verify_decoded(self, decoded: DecodedToken) -> DecodedToken:
        if decoded.algorithm != self._algorithm.name:
            raise AlgorithmMismatchError(self._algorithm.name, decoded.algorithm)
        self._algorithm.verify(decoded.signing_input, decoded.signature)

        now = _normalize_date(self._clock())
        for assertion in self._assertions.values():
            assertion.check(decoded, now)
        return decoded


class Verification:
    """Mutable builder of claim assertions for a ``Verifier``.

    Assertions run in registration order. Registering ``None`` (or no
    values) for a claim removes the earlier assertion for it.
    """

    def __init__(self, algorithm: Algorithm) -> None:
        if algorithm is None:
            raise ValueError("The Algorithm cannot be null.")
        self._algorithm = algorithm
        self._assertions: dict[str, ClaimAssertion] = {}
        self._default_leeway = 0
        self._ignore_issued_at = False

    @classmethod
    def from_settings(
        cls, algorithm: Algorithm, settings: VerifierSettings | None = None
    ) -> Self:
        """Start a builder pre-populated from ``JWT_*`` settings."""
        settings = settings or VerifierSettings()
        verification = cls(algorithm).accept_leeway(settings.leeway)
        verification.with_issuer(*settings.get_issuer_list())
        verification.with_any_of_audience(*settings.get_audience_list())
        if settings.ignore_issued_at:
            verification.ignore_issued_at()
        return verification

    def _require(self, key: str, assertion: ClaimAssertion | None) -> Self:
        if assertion is None:
            self._assertions.pop(key, None)
        else:
            self._assertions[key] = assertion
        return self

    def with_issuer(self, *issuers: str | None) -> Self:
        accepted = tuple(i for i in issuers if i is not None)
        return self._require(ISSUER, OneOf(ISSUER, accepted) if accepted else None)

    def with_subject(self, subject: str | None) -> Self:
        return self._require(SUBJECT, None if subject is None else OneOf(SUBJECT, (subject,)))

    def with_jwt_id(self, jwt_id: str | None) -> Self:
        return self._require(JWT_ID, None if jwt_id is None else OneOf(JWT_ID, (jwt_id,)))

    def with_audience(self, *audience: str | None) -> Self:
        """Require exactly this audience list, in this order."""
        expected = tuple(a for a in audience if a is not None)
        self._assertions.pop(AUDIENCE_CONTAINS, None)
        return self._require(
            AUDIENCE_EXACT, AudienceMatch(expected, exact=True) if expected else None
        )

    def with_any_of_audience(self, *audience: str | None) -> Self:
        """Require the audience to contain at least one of these values."""
        expected = tuple(a for a in audience if a is not None)
        self._assertions.pop(AUDIENCE_EXACT, None)
        return self._require(
            AUDIENCE_CONTAINS, AudienceMatch(expected, exact=False) if expected else None
        )

    def _with_date(self, name: str, value: datetime | None) -> Self:
        return self._require(
            name, None if value is None else Equals(name, _normalize_date(value))
        )

    def with_expires_at(self, expires_at: datetime | None) -> Self:
        """Require this exact exp.

        Replaces the clock check for exp, so a token with this exp passes
        even once it lies in the past.
        """
        return self._with_date(EXPIRES_AT, expires_at)

    def with_not_before(self, not_before: datetime | None) -> Self:
        """Require this exact nbf; replaces the clock check for nbf."""
        return self._with_date(NOT_BEFORE, not_before)

    def with_issued_at(self, issued_at: datetime | None) -> Self:
        """Require this exact iat; replaces the clock check for iat."""
        return self._with_date(ISSUED_AT, issued_at)

    def accept_leeway(self, leeway: int) -> Self:
        """Default clock skew, in seconds, for exp, nbf and iat."""
        _assert_positive(leeway)
        self._default_leeway = leeway
        return self

    def accept_expires_at(self, leeway: int) -> Self:
        _assert_positive(leeway)
        return self._require(EXPIRES_AT, TimeWindow(EXPIRES_AT, leeway))

    def accept_not_before(self, leeway: int) -> Self:
        _assert_positive(leeway)
        return self._require(NOT_BEFORE, TimeWindow(NOT_BEFORE, leeway))

    def accept_issued_at(self, leeway: int) -> Self:
        _assert_positive(leeway)
        return self._require(ISSUED_AT, TimeWindow(ISSUED_AT, leeway))

    def ignore_issued_at(self) -> Self:
        self._ignore_issued_at = True
        return self

    def with_claim(self, name: str, value: ExpectedValue | None) -> Self:
        _assert_name(name)
        if isinstance(value, datetime):
            value = _normalize_date(value)
        return self._require(name, None if value is None else Equals(name, value))

    def with_array_claim(self, name: str, *items: Any) -> Self:
        _assert_name(name)
        return self._require(name, ArrayEquals(name, items) if items else None)

    def with_claim_presence(self, name: str) -> Self:
        _assert_name(name)
        return self._require(name, Present(name))

    def with_custom_claim(self, name: str, predicate: ClaimPredicate | None) -> Self:
        _assert_name(name)
        return self._require(
            name, None if predicate is None else Satisfies(name, predicate)
        )

    def build(self, clock: Clock | None = None) -> Verifier:
        """Freeze the assertions into a reusable verifier."""
        assertions = dict(self._assertions)
        for name in DATE_CLAIMS:
            if name == ISSUED_AT and self._ignore_issued_at:
                assertions.pop(name, None)
                continue
            assertions.setdefault(name, TimeWindow(name, self._default_leeway))
        return Verifier(self._algorithm, assertions, clock or _utcnow)


def _assert_positive(leeway: int) -> None:
    if leeway < 0:
        raise ValueError("Leeway value can't be negative.")


def _assert_name(name: str) -> None:
    if name is None:
        raise ValueError("The Custom Claim's name can't be null.")
