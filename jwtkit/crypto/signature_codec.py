"""Conversion between JOSE (R || S) and ASN.1 DER ECDSA signatures.

JWS mandates a fixed-width signature: R and S as big-endian unsigned
integers, each left-padded to the curve's byte length. The underlying
provider speaks DER:

    0x30 <len> 0x02 <lenR> <R> 0x02 <lenS> <S>

The ASN.1 work is delegated to ``cryptography``'s DSS helpers; this module
only enforces the fixed widths.
"""

from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

SEQUENCE_TAG = 0x30
LONG_FORM_ONE_BYTE = 0x81
MAX_LONG_LENGTH = 0xFF


def is_der_signature(signature: bytes, number_size: int) -> bool:
    """Guess whether a signature is DER rather than fixed-width JOSE.

    A JOSE signature is always exactly twice the curve's byte length, so
    anything else starting with the SEQUENCE tag is treated as DER.
    """
    return (
        len(signature) > 0
        and signature[0] == SEQUENCE_TAG
        and len(signature) != number_size * 2
    )


def _content_length(der: bytes) -> int:
    if der[1] == LONG_FORM_ONE_BYTE:
        return der[2]
    return der[1]


def jose_to_der(signature: bytes, number_size: int) -> bytes:
    """Re-encode a fixed-width R || S signature as a DER SEQUENCE."""
    if len(signature) != number_size * 2:
        raise ValueError(
            "The signature length was invalid. "
            f"Expected {number_size * 2} bytes but received {len(signature)}"
        )

    r = int.from_bytes(signature[:number_size], "big")
    s = int.from_bytes(signature[number_size:], "big")
    der = encode_dss_signature(r, s)
    if _content_length(der) > MAX_LONG_LENGTH:
        raise ValueError("Invalid ECDSA signature format")
    return der


def der_to_jose(der: bytes, number_size: int) -> bytes:
    """Decode a DER SEQUENCE of two INTEGERs into fixed-width R || S."""
    try:
        r, s = decode_dss_signature(der)
    except ValueError as exc:
        raise ValueError("Invalid DER signature: malformed SEQUENCE") from exc

    try:
        return r.to_bytes(number_size, "big") + s.to_bytes(number_size, "big")
    except OverflowError as exc:
        raise ValueError(
            f"Invalid DER signature: INTEGER wider than {number_size} bytes"
        ) from exc
