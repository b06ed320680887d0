"""Type definitions for signing algorithms and key material."""

from enum import StrEnum

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from pydantic import BaseModel


class AlgorithmFamily(StrEnum):
    """Closed set of signing schemes an Algorithm can dispatch to."""

    NONE = "none"
    HMAC = "HMAC"
    RSA = "RSA"
    ECDSA = "ECDSA"


DIGESTS: dict[int, type[hashes.HashAlgorithm]] = {
    256: hashes.SHA256,
    384: hashes.SHA384,
    512: hashes.SHA512,
}

# Byte length of R and S in a JOSE signature, keyed by digest size.
ECDSA_NUMBER_SIZES: dict[int, int] = {256: 32, 384: 48, 512: 66}

ECDSA_CURVES: dict[int, type[ec.EllipticCurve]] = {
    256: ec.SECP256R1,
    384: ec.SECP384R1,
    512: ec.SECP521R1,
}

CURVE_NAMES: dict[str, type[ec.EllipticCurve]] = {
    "P-256": ec.SECP256R1,
    "P-384": ec.SECP384R1,
    "P-521": ec.SECP521R1,
}


class SigningKeyData(BaseModel):
    """An asymmetric keypair in PEM form, tagged with a key id."""

    kid: str
    private_key_pem: str
    public_key_pem: str
