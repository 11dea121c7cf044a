"""
Signing and Recovery
^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Produces and consumes `(v, r, s)` signatures over hashes, personal messages
and transactions. The curve only ever deals with the raw recovery id (0 or
1); this module maps it onto the `v` convention of each context:

- hashes and personal messages: `v = recovery_id + 27`;
- legacy transactions without a chain id: `v = recovery_id + 27`;
- legacy transactions with a chain id ([EIP-155]):
  `v = recovery_id + 35 + 2 * chain_id`;
- typed transactions ([EIP-2718]): `v = recovery_id`.

[EIP-155]: https://eips.ethereum.org/EIPS/eip-155
[EIP-2718]: https://eips.ethereum.org/EIPS/eip-2718
"""

from typing import Tuple

from ethereum_types.bytes import Bytes
from ethereum_types.numeric import U256

from .base_types import Address, Hash, HexNumber, Signature
from .crypto.elliptic_curve import (
    public_key_to_address,
    secp256k1_recover,
    secp256k1_sign,
    secret_key_to_address,
)
from .crypto.hash import keccak256
from .exceptions import (
    ChainIdMismatchError,
    InvalidLengthError,
    InvalidSignatureComponentError,
    InvalidSignerError,
    MissingSignatureError,
)
from .message import add_message_prefix
from .transactions import Transaction, TransactionType, signing_hash

LEGACY_V_OFFSET = 27
EIP155_V_OFFSET = 35


def _digest(msg_hash: Bytes) -> Hash:
    if len(msg_hash) != 32:
        raise InvalidLengthError(f"invalid digest length {len(msg_hash)}")
    return Hash(msg_hash)


def _recover(msg_hash: Bytes, r: int, s: int, recovery_id: int) -> Address:
    public_key = secp256k1_recover(U256(r), U256(s), recovery_id, msg_hash)
    return public_key_to_address(public_key)


def _recovery_id_from_legacy_v(v: int) -> int:
    """
    Normalize a pre-EIP-155 `v`: both 27/28 and the bare 0/1 are accepted.
    """
    if v in (0, 1):
        return v
    if v in (LEGACY_V_OFFSET, LEGACY_V_OFFSET + 1):
        return v - LEGACY_V_OFFSET
    raise InvalidSignatureComponentError(f"invalid v value {v}")


def sign_hash(secret_key: Bytes, msg_hash: Bytes) -> Signature:
    """
    Sign a 32-byte digest. `v` is `recovery_id + 27`.
    """
    r, s, recovery_id = secp256k1_sign(secret_key, _digest(msg_hash))
    return Signature(v=recovery_id + LEGACY_V_OFFSET, r=int(r), s=int(s))


def recover_hash(msg_hash: Bytes, signature: Signature) -> Address:
    """
    Recover the address that signed a 32-byte digest.
    """
    recovery_id = _recovery_id_from_legacy_v(int(signature.v))
    return _recover(_digest(msg_hash), signature.r, signature.s, recovery_id)


def sign_message(secret_key: Bytes, data: bytes) -> Signature:
    """
    Sign `data` as a personal message.
    """
    return sign_hash(secret_key, keccak256(add_message_prefix(data)))


def recover_message(data: bytes, signature: Signature) -> Address:
    """
    Recover the address that signed `data` as a personal message.
    """
    return recover_hash(keccak256(add_message_prefix(data)), signature)


def sign_transaction(secret_key: Bytes, tx: Transaction) -> Transaction:
    """
    Sign a transaction.

    Returns a copy of `tx` carrying the signature and the signer's address
    in `from`; `tx` itself is left untouched, also when signing fails.

    Raises `InvalidSignerError` when `tx` already names a different sender.
    """
    address = secret_key_to_address(secret_key)
    if tx.sender is not None and tx.sender != address:
        raise InvalidSignerError(str(tx.sender), str(address))

    r, s, recovery_id = secp256k1_sign(secret_key, signing_hash(tx))

    v = recovery_id
    if tx.ty == TransactionType.LEGACY:
        if tx.chain_id:
            v += EIP155_V_OFFSET + 2 * int(tx.chain_id)
        else:
            v += LEGACY_V_OFFSET

    return tx.model_copy(
        deep=True,
        update={
            "sender": address,
            "v": HexNumber(v),
            "r": HexNumber(int(r)),
            "s": HexNumber(int(s)),
        },
    )


def transaction_recovery_id(tx: Transaction) -> Tuple[int, int | None]:
    """
    Invert the `v` convention of `tx`.

    Returns the raw recovery id and, for [EIP-155] signatures, the chain id
    encoded in `v` (`None` otherwise).

    [EIP-155]: https://eips.ethereum.org/EIPS/eip-155
    """
    signature = tx.signature
    if signature is None or signature.is_zero():
        raise MissingSignatureError("transaction is not signed")

    v = int(signature.v)
    if tx.ty != TransactionType.LEGACY:
        if v > 1:
            raise InvalidSignatureComponentError(
                f"invalid v value {v} for a typed transaction"
            )
        return v, None

    if v >= EIP155_V_OFFSET:
        chain_id = (v - EIP155_V_OFFSET) // 2
        if tx.chain_id is not None and tx.chain_id != chain_id:
            raise ChainIdMismatchError(int(tx.chain_id), chain_id)
        return (v - EIP155_V_OFFSET) % 2, chain_id
    return _recovery_id_from_legacy_v(v), None


def recover_transaction(tx: Transaction) -> Address:
    """
    Recover the address that signed `tx`.
    """
    recovery_id, chain_id = transaction_recovery_id(tx)
    if tx.ty == TransactionType.LEGACY:
        # The pre-image follows the convention the signature was made with,
        # not whatever chain id the caller put on the transaction.
        tx = tx.model_copy(update={"chain_id": None if chain_id is None else HexNumber(chain_id)})
    if tx.r is None or tx.s is None:
        raise MissingSignatureError("transaction is not signed")
    return _recover(signing_hash(tx), int(tx.r), int(tx.s), recovery_id)
