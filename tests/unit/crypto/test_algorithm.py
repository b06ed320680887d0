"""Tests for Algorithm construction, signing and verification."""

import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from jwtkit.core.errors import SignatureGenerationError, SignatureVerificationError
from jwtkit.crypto.algorithm import Algorithm
from jwtkit.crypto.types import AlgorithmFamily
from jwtkit.tokens.codec import decode_token

HS256_TOKEN = (
    "eyJhbGciOiJIUzI1NiIsImN0eSI6IkpXVCJ9"
    ".eyJpc3MiOiJhdXRoMCJ9"
    ".mZ0m_N1J4PgeqWmi903JuUoDRZDBPB7HwkS4nVyWH1M"
)
CONTENT = b"eyJhbGciOiJIUzI1NiJ9.eyJzdWIiOiIxMjMifQ"


class TestConstruction:
    """Tests for factory validation."""

    @pytest.mark.parametrize("secret", [None, "", b""])
    def test_empty_secret_rejected(self, secret: str | bytes | None) -> None:
        with pytest.raises(ValueError, match="Secret cannot be null or empty"):
            Algorithm.hmac256(secret)  # type: ignore[arg-type]

    def test_rsa_requires_a_key(self) -> None:
        with pytest.raises(ValueError, match="Both provided Keys cannot be null"):
            Algorithm.rsa256()

    def test_ecdsa_requires_a_key(self) -> None:
        with pytest.raises(ValueError, match="Both provided Keys cannot be null"):
            Algorithm.ecdsa256()

    def test_rsa_rejects_ec_key(
        self, ec256_private_key: ec.EllipticCurvePrivateKey
    ) -> None:
        with pytest.raises(ValueError, match="not an RSA"):
            Algorithm.rsa256(private_key=ec256_private_key)  # type: ignore[arg-type]

    def test_ecdsa_rejects_wrong_curve(
        self, ec384_private_key: ec.EllipticCurvePrivateKey
    ) -> None:
        with pytest.raises(ValueError, match="secp256r1"):
            Algorithm.ecdsa256(private_key=ec384_private_key)

    @pytest.mark.parametrize(
        ("factory", "name", "description"),
        [
            (Algorithm.hmac256, "HS256", "HmacSHA256"),
            (Algorithm.hmac384, "HS384", "HmacSHA384"),
            (Algorithm.hmac512, "HS512", "HmacSHA512"),
        ],
    )
    def test_hmac_names(self, factory, name: str, description: str) -> None:
        algorithm = factory("secret")
        assert algorithm.name == name
        assert algorithm.description == description
        assert str(algorithm) == description
        assert algorithm.family is AlgorithmFamily.HMAC

    def test_rsa_and_ecdsa_names(
        self,
        rsa_private_key: rsa.RSAPrivateKey,
        ec521_private_key: ec.EllipticCurvePrivateKey,
    ) -> None:
        assert Algorithm.rsa384(private_key=rsa_private_key).description == "SHA384withRSA"
        es512 = Algorithm.ecdsa512(private_key=ec521_private_key)
        assert es512.name == "ES512"
        assert es512.description == "SHA512withECDSA"

    def test_key_id_carried(self) -> None:
        assert Algorithm.hmac256("secret", key_id="k1").key_id == "k1"
        assert Algorithm.none().key_id is None


class TestHmac:
    """Tests for HS* signatures."""

    def test_known_token_verifies(self) -> None:
        decoded = decode_token(HS256_TOKEN)
        Algorithm.hmac256("secret").verify(decoded.signing_input, decoded.signature)

    def test_known_token_wrong_secret(self) -> None:
        decoded = decode_token(HS256_TOKEN)
        with pytest.raises(SignatureVerificationError) as exc_info:
            Algorithm.hmac256("not_real_secret").verify(
                decoded.signing_input, decoded.signature
            )
        assert str(exc_info.value).endswith("HmacSHA256")

    def test_str_and_bytes_secret_equivalent(self) -> None:
        assert (
            Algorithm.hmac512("secret").sign(CONTENT)
            == Algorithm.hmac512(b"secret").sign(CONTENT)
        )

    @pytest.mark.parametrize(
        ("factory", "size"),
        [(Algorithm.hmac256, 32), (Algorithm.hmac384, 48), (Algorithm.hmac512, 64)],
    )
    def test_signature_size(self, factory, size: int) -> None:
        assert len(factory("secret").sign(CONTENT)) == size

    def test_truncated_signature_rejected(self, hs256: Algorithm) -> None:
        signature = hs256.sign(CONTENT)
        with pytest.raises(SignatureVerificationError):
            hs256.verify(CONTENT, signature[:-1])


class TestRsa:
    """Tests for RS* signatures."""

    def test_sign_and_verify(self, rsa_private_key: rsa.RSAPrivateKey) -> None:
        signer = Algorithm.rsa256(private_key=rsa_private_key)
        verifier = Algorithm.rsa256(public_key=rsa_private_key.public_key())
        verifier.verify(CONTENT, signer.sign(CONTENT))

    def test_digest_mismatch_rejected(self, rsa_private_key: rsa.RSAPrivateKey) -> None:
        signature = Algorithm.rsa256(private_key=rsa_private_key).sign(CONTENT)
        with pytest.raises(SignatureVerificationError, match="SHA512withRSA"):
            Algorithm.rsa512(private_key=rsa_private_key).verify(CONTENT, signature)

    def test_sign_without_private_key(self, rsa_private_key: rsa.RSAPrivateKey) -> None:
        algorithm = Algorithm.rsa256(public_key=rsa_private_key.public_key())
        with pytest.raises(SignatureGenerationError, match="SHA256withRSA"):
            algorithm.sign(CONTENT)


class TestEcdsa:
    """Tests for ES* signatures and their JOSE encoding."""

    @pytest.mark.parametrize(
        ("factory", "key_fixture", "size"),
        [
            (Algorithm.ecdsa256, "ec256_private_key", 64),
            (Algorithm.ecdsa384, "ec384_private_key", 96),
            (Algorithm.ecdsa512, "ec521_private_key", 132),
        ],
    )
    def test_sign_produces_jose(
        self, factory, key_fixture: str, size: int, request: pytest.FixtureRequest
    ) -> None:
        key = request.getfixturevalue(key_fixture)
        algorithm = factory(private_key=key)
        signature = algorithm.sign(CONTENT)
        assert len(signature) == size
        algorithm.verify(CONTENT, signature)

    def test_der_signature_accepted(
        self, ec256_private_key: ec.EllipticCurvePrivateKey
    ) -> None:
        der = ec256_private_key.sign(CONTENT, ec.ECDSA(hashes.SHA256()))
        Algorithm.ecdsa256(public_key=ec256_private_key.public_key()).verify(
            CONTENT, der
        )

    def test_wrong_key_message(
        self, ec256_private_key: ec.EllipticCurvePrivateKey
    ) -> None:
        signature = Algorithm.ecdsa256(private_key=ec256_private_key).sign(CONTENT)
        other = ec.generate_private_key(ec.SECP256R1())
        with pytest.raises(SignatureVerificationError) as exc_info:
            Algorithm.ecdsa256(public_key=other.public_key()).verify(CONTENT, signature)
        assert str(exc_info.value) == (
            "The Token's Signature resulted invalid when verified "
            "using the Algorithm: SHA256withECDSA"
        )

    def test_wrong_length_rejected(
        self, ec256_private_key: ec.EllipticCurvePrivateKey
    ) -> None:
        algorithm = Algorithm.ecdsa256(private_key=ec256_private_key)
        with pytest.raises(SignatureVerificationError):
            algorithm.verify(CONTENT, b"\x01" * 63)


class TestNone:
    """Tests for unsigned tokens."""

    def test_sign_is_empty(self) -> None:
        assert Algorithm.none().sign(CONTENT) == b""

    def test_verify_accepts_only_empty(self) -> None:
        algorithm = Algorithm.none()
        algorithm.verify(CONTENT, b"")
        with pytest.raises(SignatureVerificationError, match="none"):
            algorithm.verify(CONTENT, b"\x00")
