"""Signing algorithms for HS*, RS*, ES* and unsigned tokens."""

from typing import Self

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa

from jwtkit.core.errors import SignatureGenerationError, SignatureVerificationError
from jwtkit.crypto.signature_codec import der_to_jose, is_der_signature, jose_to_der
from jwtkit.crypto.types import (
    DIGESTS,
    ECDSA_CURVES,
    ECDSA_NUMBER_SIZES,
    AlgorithmFamily,
)

PublicKey = rsa.RSAPublicKey | ec.EllipticCurvePublicKey
PrivateKey = rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey

_VERIFY_FAILURES = (InvalidSignature, UnsupportedAlgorithm, ValueError, TypeError)
_SIGN_FAILURES = (UnsupportedAlgorithm, ValueError, TypeError)


class Algorithm:
    """Signs and verifies the ``header.payload`` bytes of a token.

    Instances are built through the class-method factories, hold their key
    material for life, and are safe to share between threads.
    """

    __slots__ = (
        "_name",
        "_description",
        "_family",
        "_bits",
        "_secret",
        "_public_key",
        "_private_key",
        "_key_id",
    )

    def __init__(
        self,
        name: str,
        description: str,
        family: AlgorithmFamily,
        *,
        bits: int = 0,
        secret: bytes | None = None,
        public_key: PublicKey | None = None,
        private_key: PrivateKey | None = None,
        key_id: str | None = None,
    ) -> None:
        self._name = name
        self._description = description
        self._family = family
        self._bits = bits
        self._secret = secret
        self._public_key = public_key
        self._private_key = private_key
        self._key_id = key_id

    # ------------------------------------------------------------------ #
    # Factories
    # ------------------------------------------------------------------ #

    @classmethod
    def none(cls) -> Self:
        """Unsigned tokens. Must be chosen explicitly, never a fallback."""
        return cls("none", "none", AlgorithmFamily.NONE)

    @classmethod
    def hmac256(cls, secret: str | bytes, key_id: str | None = None) -> Self:
        """HMAC with SHA-256 (HS256)."""
        return cls._hmac(256, secret, key_id)

    @classmethod
    def hmac384(cls, secret: str | bytes, key_id: str | None = None) -> Self:
        """HMAC with SHA-384 (HS384)."""
        return cls._hmac(384, secret, key_id)

    @classmethod
    def hmac512(cls, secret: str | bytes, key_id: str | None = None) -> Self:
        """HMAC with SHA-512 (HS512)."""
        return cls._hmac(512, secret, key_id)

    @classmethod
    def rsa256(
        cls,
        public_key: rsa.RSAPublicKey | None = None,
        private_key: rsa.RSAPrivateKey | None = None,
        key_id: str | None = None,
    ) -> Self:
        """RSASSA-PKCS1-v1_5 with SHA-256 (RS256)."""
        return cls._rsa(256, public_key, private_key, key_id)

    @classmethod
    def rsa384(
        cls,
        public_key: rsa.RSAPublicKey | None = None,
        private_key: rsa.RSAPrivateKey | None = None,
        key_id: str | None = None,
    ) -> Self:
        """RSASSA-PKCS1-v1_5 with SHA-384 (RS384)."""
        return cls._rsa(384, public_key, private_key, key_id)

    @classmethod
    def rsa512(
        cls,
        public_key: rsa.RSAPublicKey | None = None,
        private_key: rsa.RSAPrivateKey | None = None,
        key_id: str | None = None,
    ) -> Self:
        """RSASSA-PKCS1-v1_5 with SHA-512 (RS512)."""
        return cls._rsa(512, public_key, private_key, key_id)

    @classmethod
    def ecdsa256(
        cls,
        public_key: ec.EllipticCurvePublicKey | None = None,
        private_key: ec.EllipticCurvePrivateKey | None = None,
        key_id: str | None = None,
    ) -> Self:
        """ECDSA on P-256 with SHA-256 (ES256)."""
        return cls._ecdsa(256, public_key, private_key, key_id)

    @classmethod
    def ecdsa384(
        cls,
        public_key: ec.EllipticCurvePublicKey | None = None,
        private_key: ec.EllipticCurvePrivateKey | None = None,
        key_id: str | None = None,
    ) -> Self:
        """ECDSA on P-384 with SHA-384 (ES384)."""
        return cls._ecdsa(384, public_key, private_key, key_id)

    @classmethod
    def ecdsa512(
        cls,
        public_key: ec.EllipticCurvePublicKey | None = None,
        private_key: ec.EllipticCurvePrivateKey | None = None,
        key_id: str | None = None,
    ) -> Self:
        """ECDSA on P-521 with SHA-512 (ES512)."""
        return cls._ecdsa(512, public_key, private_key, key_id)

    @classmethod
    def _hmac(cls, bits: int, secret: str | bytes | None, key_id: str | None) -> Self:
        if not secret:
            raise ValueError("The Secret cannot be null or empty.")
        key = secret.encode() if isinstance(secret, str) else bytes(secret)
        return cls(
            f"HS{bits}",
            f"HmacSHA{bits}",
            AlgorithmFamily.HMAC,
            bits=bits,
            secret=key,
            key_id=key_id,
        )

    @classmethod
    def _rsa(
        cls,
        bits: int,
        public_key: rsa.RSAPublicKey | None,
        private_key: rsa.RSAPrivateKey | None,
        key_id: str | None,
    ) -> Self:
        if public_key is None and private_key is None:
            raise ValueError("Both provided Keys cannot be null.")
        if public_key is not None and not isinstance(public_key, rsa.RSAPublicKey):
            raise ValueError("The given public key is not an RSA public key.")
        if private_key is not None and not isinstance(private_key, rsa.RSAPrivateKey):
            raise ValueError("The given private key is not an RSA private key.")
        if public_key is None and private_key is not None:
            public_key = private_key.public_key()
        return cls(
            f"RS{bits}",
            f"SHA{bits}withRSA",
            AlgorithmFamily.RSA,
            bits=bits,
            public_key=public_key,
            private_key=private_key,
            key_id=key_id,
        )

    @classmethod
    def _ecdsa(
        cls,
        bits: int,
        public_key: ec.EllipticCurvePublicKey | None,
        private_key: ec.EllipticCurvePrivateKey | None,
        key_id: str | None,
    ) -> Self:
        if public_key is None and private_key is None:
            raise ValueError("Both provided Keys cannot be null.")
        if public_key is not None and not isinstance(
            public_key, ec.EllipticCurvePublicKey
        ):
            raise ValueError("The given public key is not an EC public key.")
        if private_key is not None and not isinstance(
            private_key, ec.EllipticCurvePrivateKey
        ):
            raise ValueError("The given private key is not an EC private key.")

        curve = ECDSA_CURVES[bits]
        for key in (public_key, private_key):
            if key is not None and not isinstance(key.curve, curve):
                raise ValueError(
                    f"ES{bits} requires a key on curve {curve.name}, "
                    f"got {key.curve.name}."
                )
        if public_key is None and private_key is not None:
            public_key = private_key.public_key()
        return cls(
            f"ES{bits}",
            f"SHA{bits}withECDSA",
            AlgorithmFamily.ECDSA,
            bits=bits,
            public_key=public_key,
            private_key=private_key,
            key_id=key_id,
        )

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    @property
    def name(self) -> str:
        """Name as it appears in the token header, e.g. ``HS256``."""
        return self._name

    @property
    def description(self) -> str:
        """Provider-facing identifier, e.g. ``SHA256withECDSA``."""
        return self._description

    @property
    def family(self) -> AlgorithmFamily:
        return self._family

    @property
    def key_id(self) -> str | None:
        return self._key_id

    def __str__(self) -> str:
        return self._description

    def __repr__(self) -> str:
        return f"Algorithm({self._name!r})"

    # ------------------------------------------------------------------ #
    # Sign / verify
    # ------------------------------------------------------------------ #

    def sign(self, content: bytes) -> bytes:
        """Sign the signing input and return the raw signature bytes."""
        try:
            match self._family:
                case AlgorithmFamily.NONE:
                    return b""
                case AlgorithmFamily.HMAC:
                    return self._mac(content).finalize()
                case AlgorithmFamily.RSA:
                    return self._sign_rsa(content)
                case AlgorithmFamily.ECDSA:
                    return self._sign_ecdsa(content)
        except _SIGN_FAILURES as exc:
            raise SignatureGenerationError(self._description) from exc
        raise SignatureGenerationError(self._description)

    def verify(self, content: bytes, signature: bytes) -> None:
        """Check a raw signature against the signing input.

        Raises:
            SignatureVerificationError: on any mismatch or malformed input.
        """
        try:
            match self._family:
                case AlgorithmFamily.NONE:
                    if signature:
                        raise SignatureVerificationError(self._description)
                case AlgorithmFamily.HMAC:
                    self._mac(content).verify(signature)
                case AlgorithmFamily.RSA:
                    self._verify_rsa(content, signature)
                case AlgorithmFamily.ECDSA:
                    self._verify_ecdsa(content, signature)
        except _VERIFY_FAILURES as exc:
            raise SignatureVerificationError(self._description) from exc

    def _digest(self) -> hashes.HashAlgorithm:
        return DIGESTS[self._bits]()

    def _mac(self, content: bytes) -> hmac.HMAC:
        assert self._secret is not None
        mac = hmac.HMAC(self._secret, self._digest())
        mac.update(content)
        return mac

    def _sign_rsa(self, content: bytes) -> bytes:
        if self._private_key is None:
            raise ValueError("The given Private Key is null.")
        assert isinstance(self._private_key, rsa.RSAPrivateKey)
        return self._private_key.sign(content, padding.PKCS1v15(), self._digest())

    def _verify_rsa(self, content: bytes, signature: bytes) -> None:
        assert isinstance(self._public_key, rsa.RSAPublicKey)
        self._public_key.verify(signature, content, padding.PKCS1v15(), self._digest())

    def _sign_ecdsa(self, content: bytes) -> bytes:
        if self._private_key is None:
            raise ValueError("The given Private Key is null.")
        assert isinstance(self._private_key, ec.EllipticCurvePrivateKey)
        der = self._private_key.sign(content, ec.ECDSA(self._digest()))
        return der_to_jose(der, ECDSA_NUMBER_SIZES[self._bits])

    def _verify_ecdsa(self, content: bytes, signature: bytes) -> None:
        assert isinstance(self._public_key, ec.EllipticCurvePublicKey)
        number_size = ECDSA_NUMBER_SIZES[self._bits]
        if not is_der_signature(signature, number_size):
            signature = jose_to_der(signature, number_size)
        self._public_key.verify(signature, content, ec.ECDSA(self._digest()))
