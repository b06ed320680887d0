"""Shared test fixtures for jwtkit."""

import time
from collections.abc import Callable, Iterator
from datetime import UTC, datetime

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from jwtkit.crypto.algorithm import Algorithm

HMAC_SECRET = "a-very-long-secret-that-is-at-least-32-bytes"
FROZEN_NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ambient JWT_* variables out of settings-driven tests."""
    for name in ("JWT_ISSUER", "JWT_AUDIENCE", "JWT_LEEWAY", "JWT_IGNORE_ISSUED_AT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def new_york_tz(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run with a local timezone that is not UTC."""
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """One RSA key for the whole run; generation is slow."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec256_private_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ec384_private_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP384R1())


@pytest.fixture(scope="session")
def ec521_private_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP521R1())


@pytest.fixture
def hs256() -> Algorithm:
    return Algorithm.hmac256(HMAC_SECRET)


@pytest.fixture
def frozen_clock() -> Callable[[], datetime]:
    """Clock pinned to FROZEN_NOW."""
    return lambda: FROZEN_NOW
