"""RSA and EC key generation and in-memory PEM loading."""

import uuid_utils
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.asymmetric.types import (
    PrivateKeyTypes,
    PublicKeyTypes,
)

from jwtkit.crypto.types import CURVE_NAMES, SigningKeyData

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537


def _to_key_data(private_key: rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey) -> SigningKeyData:
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = (
        private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )
    kid = str(uuid_utils.uuid7())
    return SigningKeyData(
        kid=kid, private_key_pem=private_pem, public_key_pem=public_pem
    )


def generate_rsa_keypair(key_size: int = RSA_KEY_SIZE) -> SigningKeyData:
    """Generate a new RSA keypair for RS* signing."""
    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=key_size,
    )
    return _to_key_data(private_key)


def generate_ec_keypair(curve: str = "P-256") -> SigningKeyData:
    """Generate a new EC keypair on a named NIST curve for ES* signing."""
    try:
        curve_cls = CURVE_NAMES[curve]
    except KeyError:
        raise ValueError(f"Unsupported curve: {curve}") from None
    private_key = ec.generate_private_key(curve_cls())
    return _to_key_data(private_key)


def load_private_key(private_key_pem: str) -> PrivateKeyTypes:
    """Parse an unencrypted PEM private key held in memory."""
    return serialization.load_pem_private_key(private_key_pem.encode(), password=None)


def load_public_key(public_key_pem: str) -> PublicKeyTypes:
    """Parse a PEM SubjectPublicKeyInfo held in memory."""
    return serialization.load_pem_public_key(public_key_pem.encode())
