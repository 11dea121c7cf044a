"""
Elliptic Curves
^^^^^^^^^^^^^^^

Recoverable ECDSA over secp256k1, backed by `coincurve`.
"""

from typing import Tuple

import coincurve
from ethereum_types.bytes import Bytes, Bytes32, Bytes64
from ethereum_types.numeric import U256

from ..base_types import Address
from ..exceptions import (
    InternalCryptoError,
    InvalidKeyError,
    InvalidLengthError,
    InvalidSignatureComponentError,
    RecoveryFailedError,
)
from .hash import keccak256

SECP256K1B = U256(7)
SECP256K1P = U256(
    0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
)
SECP256K1N = U256(
    0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
)

SECRET_KEY_LENGTH = 32
PUBLIC_KEY_LENGTH = 64


def validate_secret_key(secret_key: Bytes) -> Bytes32:
    """
    Check that `secret_key` is a 32-byte scalar in `[1, n)`.

    Parameters
    ----------
    secret_key :
        Candidate secret key.

    Returns
    -------
    secret_key : `Bytes32`
        The validated key.
    """
    if len(secret_key) != SECRET_KEY_LENGTH:
        raise InvalidKeyError(f"invalid secret key length {len(secret_key)}")
    scalar = U256.from_be_bytes(secret_key)
    if not U256(0) < scalar < SECP256K1N:
        raise InvalidKeyError("secret key is not a valid secp256k1 scalar")
    return Bytes32(secret_key)


def secp256k1_sign(secret_key: Bytes, msg_hash: Bytes) -> Tuple[U256, U256, int]:
    """
    Signs a 32-byte digest, deterministically (RFC 6979) and with a low `s`.

    Parameters
    ----------
    secret_key :
        The 32-byte secret key.
    msg_hash :
        Digest to sign.

    Returns
    -------
    r : `U256`
    s : `U256`
    recovery_id : `int`
        0 or 1; selects which of the two candidate points is the signer's
        public key.
    """
    secret_key = validate_secret_key(secret_key)
    if len(msg_hash) != 32:
        raise InvalidLengthError(f"invalid digest length {len(msg_hash)}")
    try:
        signature = coincurve.PrivateKey(bytes(secret_key)).sign_recoverable(
            bytes(msg_hash), hasher=None
        )
    except ValueError as e:
        raise InternalCryptoError from e

    return (
        U256.from_be_bytes(signature[0:32]),
        U256.from_be_bytes(signature[32:64]),
        signature[64],
    )


def secp256k1_recover(
    r: U256, s: U256, recovery_id: int, msg_hash: Bytes
) -> Bytes64:
    """
    Recovers the public key from a given signature.

    Parameters
    ----------
    r :
        The `r` component of the signature.
    s :
        The `s` component of the signature.
    recovery_id :
        The raw recovery id, 0 or 1.
    msg_hash :
        Hash of the message being recovered.

    Returns
    -------
    public_key : `Bytes64`
        Recovered public key as the concatenated `x` and `y` coordinates.
    """
    r, s = U256(r), U256(s)
    if recovery_id not in (0, 1):
        raise InvalidSignatureComponentError(
            f"invalid recovery id {recovery_id}"
        )
    if not U256(0) < r < SECP256K1N or not U256(0) < s < SECP256K1N:
        raise InvalidSignatureComponentError(
            "r and s must be in the range [1, n)"
        )
    if len(msg_hash) != 32:
        raise InvalidLengthError(f"invalid digest length {len(msg_hash)}")

    is_square = pow(
        pow(r, U256(3), SECP256K1P) + SECP256K1B,
        (SECP256K1P - U256(1)) // U256(2),
        SECP256K1P,
    )

    if is_square != 1:
        raise RecoveryFailedError(
            "r is not the x-coordinate of a point on the secp256k1 curve"
        )

    signature = r.to_be_bytes32() + s.to_be_bytes32() + bytes([recovery_id])

    # If the recovery algorithm returns the point at infinity,
    # the below function will raise a ValueError.
    try:
        public_key = coincurve.PublicKey.from_signature_and_message(
            signature, bytes(msg_hash), hasher=None
        )
    except ValueError as e:
        raise RecoveryFailedError from e

    return Bytes64(public_key.format(compressed=False)[1:])


def secret_key_to_public_key(secret_key: Bytes) -> Bytes64:
    """
    Derive the 64-byte uncompressed public key of `secret_key`.
    """
    secret_key = validate_secret_key(secret_key)
    public_key = coincurve.PrivateKey(bytes(secret_key)).public_key
    return Bytes64(public_key.format(compressed=False)[1:])


def public_key_to_address(public_key: Bytes) -> Address:
    """
    Derive the address of a 64-byte public key: the last 20 bytes of its
    Keccak-256 hash.
    """
    if len(public_key) != PUBLIC_KEY_LENGTH:
        raise InvalidLengthError(
            f"invalid public key length {len(public_key)}"
        )
    return Address(keccak256(public_key)[12:])


def secret_key_to_address(secret_key: Bytes) -> Address:
    """
    Derive the address controlled by `secret_key`.
    """
    return public_key_to_address(secret_key_to_public_key(secret_key))
