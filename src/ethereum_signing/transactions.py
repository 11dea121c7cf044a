"""
Transactions are atomic units of work created externally to Ethereum and
submitted to be executed. This module models the three envelopes a signer
produces and implements their wire encoding and signing pre-images.
"""

import logging
from enum import IntEnum
from typing import Any, List, Sequence, Tuple

from ethereum_types.bytes import Bytes as RawBytes
from pydantic import ConfigDict, Field, field_serializer, field_validator

from . import rlp
from .base_types import AccessTuple, Address, Bytes, CamelModel, Hash, HexNumber, Signature
from .base_types.composite_types import UINT256_CEILING
from .crypto.hash import keccak256
from .exceptions import (
    InvalidSignatureComponentError,
    RLPDecodingError,
    UnsupportedTransactionTypeError,
)
from .hexadecimal import number_to_hex

logger = logging.getLogger(__name__)


class TransactionType(IntEnum):
    """[EIP-2718] transaction types."""

    LEGACY = 0
    ACCESS_LIST = 1
    DYNAMIC_FEE = 2


class Transaction(CamelModel):
    """
    Object that can represent all supported transaction types.

    Every numeric field is optional so that an unset value stays distinguishable from
    zero until the transaction is encoded. Fields that do not belong to the selected
    type are ignored by the encoder.
    """

    ty: TransactionType = Field(TransactionType.LEGACY, alias="type")
    sender: Address | None = Field(None, alias="from")
    to: Address | None = None
    nonce: HexNumber | None = None
    gas_limit: HexNumber | None = Field(None, alias="gas")
    gas_price: HexNumber | None = None
    max_priority_fee_per_gas: HexNumber | None = None
    max_fee_per_gas: HexNumber | None = None
    value: HexNumber | None = None
    data: Bytes = Field(Bytes(b""), alias="input")
    chain_id: HexNumber | None = None
    access_list: List[AccessTuple] | None = None

    v: HexNumber | None = None
    r: HexNumber | None = None
    s: HexNumber | None = None

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("ty", mode="before")
    @classmethod
    def parse_type(cls, value: Any) -> Any:
        """Accept the JSON-RPC hex form of the type."""
        if isinstance(value, str):
            return int(value, 0)
        return value

    @field_validator(
        "nonce",
        "gas_limit",
        "gas_price",
        "max_priority_fee_per_gas",
        "max_fee_per_gas",
        "value",
        "chain_id",
        "v",
    )
    @classmethod
    def non_negative(cls, value: HexNumber | None) -> HexNumber | None:
        """Transaction integers are unsigned."""
        if value is not None and value < 0:
            raise ValueError(f"value must not be negative: {value}")
        return value

    @field_validator("r", "s")
    @classmethod
    def fits_in_32_bytes(cls, value: HexNumber | None) -> HexNumber | None:
        """`r` and `s` are 256-bit unsigned integers."""
        if value is not None and not 0 <= value < UINT256_CEILING:
            raise InvalidSignatureComponentError(f"signature component out of range: {value}")
        return value

    @field_serializer("ty", when_used="json")
    def serialize_type(self, ty: TransactionType) -> str:
        """Render the type as a hex number, like every other integer field."""
        return number_to_hex(ty)

    def set_type(self, ty: TransactionType | int) -> "Transaction":
        """Set the envelope type."""
        self.ty = ty  # type: ignore[assignment]
        return self

    def set_from(self, sender: Address | str | bytes | None) -> "Transaction":
        """Set the informational sender address."""
        self.sender = sender  # type: ignore[assignment]
        return self

    def set_to(self, to: Address | str | bytes | None) -> "Transaction":
        """Set the recipient; `None` makes the transaction a contract creation."""
        self.to = to  # type: ignore[assignment]
        return self

    def set_nonce(self, nonce: int | None) -> "Transaction":
        """Set the nonce."""
        self.nonce = nonce  # type: ignore[assignment]
        return self

    def set_gas_limit(self, gas_limit: int | None) -> "Transaction":
        """Set the gas limit."""
        self.gas_limit = gas_limit  # type: ignore[assignment]
        return self

    def set_gas_price(self, gas_price: int | None) -> "Transaction":
        """Set the gas price of a legacy or access list transaction."""
        self.gas_price = gas_price  # type: ignore[assignment]
        return self

    def set_max_priority_fee_per_gas(self, fee: int | None) -> "Transaction":
        """Set the priority fee cap of a dynamic fee transaction."""
        self.max_priority_fee_per_gas = fee  # type: ignore[assignment]
        return self

    def set_max_fee_per_gas(self, fee: int | None) -> "Transaction":
        """Set the total fee cap of a dynamic fee transaction."""
        self.max_fee_per_gas = fee  # type: ignore[assignment]
        return self

    def set_value(self, value: int | None) -> "Transaction":
        """Set the amount of wei transferred."""
        self.value = value  # type: ignore[assignment]
        return self

    def set_input(self, data: bytes | str) -> "Transaction":
        """Set the call data."""
        self.data = data  # type: ignore[assignment]
        return self

    def set_chain_id(self, chain_id: int | None) -> "Transaction":
        """Set the chain id."""
        self.chain_id = chain_id  # type: ignore[assignment]
        return self

    def set_access_list(self, access_list: Sequence[AccessTuple] | None) -> "Transaction":
        """Set the access list."""
        self.access_list = access_list  # type: ignore[assignment]
        return self

    def set_signature(self, signature: Signature | None) -> "Transaction":
        """Attach a signature, or remove it with `None`."""
        if signature is None:
            self.v = self.r = self.s = None
        else:
            self.v, self.r, self.s = signature.v, signature.r, signature.s
        return self

    @property
    def signature(self) -> Signature | None:
        """Return the attached signature, if any."""
        if self.v is None or self.r is None or self.s is None:
            return None
        return Signature(v=self.v, r=self.r, s=self.s)

    def raw(self) -> RawBytes:
        """Return the wire encoding of the transaction."""
        return encode_transaction(self)

    def hash(self) -> Hash:
        """Return the transaction hash, the Keccak-256 digest of the wire encoding."""
        return keccak256(encode_transaction(self))

    def signing_hash(self) -> Hash:
        """Return the digest that is signed to authorize the transaction."""
        return signing_hash(self)


#
# Field defaults
#


def _uint(value: int | None) -> int:
    return 0 if value is None else int(value)


def _to(to: Address | None) -> bytes:
    return b"" if to is None else bytes(to)


def _access_list(access_list: Sequence[AccessTuple] | None) -> List[Any]:
    if access_list is None:
        return []
    return [entry.to_list() for entry in access_list]


def _signature_fields(tx: Transaction) -> List[int]:
    return [_uint(tx.v), _uint(tx.r), _uint(tx.s)]


def _unsigned_fields(tx: Transaction) -> List[Any]:
    """
    Return the fields of `tx` shared by its wire form and its signing
    pre-image, with unset values folded into their defaults.
    """
    if tx.ty == TransactionType.LEGACY:
        return [
            _uint(tx.nonce),
            _uint(tx.gas_price),
            _uint(tx.gas_limit),
            _to(tx.to),
            _uint(tx.value),
            bytes(tx.data),
        ]
    elif tx.ty == TransactionType.ACCESS_LIST:
        return [
            _uint(tx.chain_id),
            _uint(tx.nonce),
            _uint(tx.gas_price),
            _uint(tx.gas_limit),
            _to(tx.to),
            _uint(tx.value),
            bytes(tx.data),
            _access_list(tx.access_list),
        ]
    elif tx.ty == TransactionType.DYNAMIC_FEE:
        return [
            _uint(tx.chain_id),
            _uint(tx.nonce),
            _uint(tx.max_priority_fee_per_gas),
            _uint(tx.max_fee_per_gas),
            _uint(tx.gas_limit),
            _to(tx.to),
            _uint(tx.value),
            bytes(tx.data),
            _access_list(tx.access_list),
        ]
    raise UnsupportedTransactionTypeError(tx.ty)


def _type_prefix(tx: Transaction) -> bytes:
    if tx.ty == TransactionType.LEGACY:
        return b""
    return bytes([tx.ty])


#
# Wire encoding
#


def encode_transaction(tx: Transaction) -> RawBytes:
    """
    Encode a transaction into its wire form: the RLP list for legacy
    transactions, and the type byte followed by the RLP list otherwise.
    """
    return _type_prefix(tx) + rlp.encode(_unsigned_fields(tx) + _signature_fields(tx))


def decode_transaction(encoded_transaction: RawBytes) -> Tuple[Transaction, int]:
    """
    Decode the transaction at the start of `encoded_transaction`.

    Returns the transaction and the number of bytes it occupied; anything
    after it is left to the caller.
    """
    if len(encoded_transaction) == 0:
        raise RLPDecodingError("Cannot decode empty transaction")

    first_byte = encoded_transaction[0]
    if first_byte >= 0xC0:
        item, consumed = rlp.decode_item(encoded_transaction)
        tx = _decode_legacy_transaction(rlp.deserialize_list(item, 9))
    elif first_byte == TransactionType.ACCESS_LIST:
        item, consumed = rlp.decode_item(encoded_transaction[1:])
        tx = _decode_access_list_transaction(rlp.deserialize_list(item, 11))
        consumed += 1
    elif first_byte == TransactionType.DYNAMIC_FEE:
        item, consumed = rlp.decode_item(encoded_transaction[1:])
        tx = _decode_dynamic_fee_transaction(rlp.deserialize_list(item, 12))
        consumed += 1
    else:
        raise UnsupportedTransactionTypeError(first_byte)

    logger.debug("decoded %s transaction of %d bytes", tx.ty.name, consumed)
    return tx, consumed


def _decode_number(value: rlp.Simple) -> HexNumber:
    return HexNumber(int(rlp.deserialize_uint(value)))


def _decode_to(value: rlp.Simple) -> Address | None:
    to = rlp.deserialize_bytes(value)
    if len(to) == 0:
        return None
    return Address(rlp.deserialize_bytes(to, 20))


def _decode_access_list_items(value: rlp.Simple) -> List[AccessTuple]:
    access_list = []
    for entry in rlp.deserialize_list(value):
        address, storage_keys = rlp.deserialize_list(entry, 2)
        access_list.append(
            AccessTuple(
                address=Address(rlp.deserialize_bytes(address, 20)),
                storage_keys=[
                    Hash(rlp.deserialize_bytes(key, 32))
                    for key in rlp.deserialize_list(storage_keys)
                ],
            )
        )
    return access_list


def _decode_signature(fields: Sequence[rlp.Simple], typed: bool) -> dict:
    v, r, s = (rlp.deserialize_uint(field) for field in fields)
    if int(r) >= UINT256_CEILING or int(s) >= UINT256_CEILING:
        raise InvalidSignatureComponentError("r and s must fit in 32 bytes")
    if typed and int(v) > 0xFF:
        raise InvalidSignatureComponentError(f"v does not fit in one byte: {int(v)}")
    if v == 0 and r == 0 and s == 0:
        return {}
    return {"v": int(v), "r": int(r), "s": int(s)}


def _decode_legacy_transaction(fields: Sequence[rlp.Simple]) -> Transaction:
    signature = _decode_signature(fields[6:9], typed=False)
    chain_id = None
    if signature and signature["v"] >= 35:
        chain_id = (signature["v"] - 35) // 2
    return Transaction(
        ty=TransactionType.LEGACY,
        nonce=_decode_number(fields[0]),
        gas_price=_decode_number(fields[1]),
        gas_limit=_decode_number(fields[2]),
        to=_decode_to(fields[3]),
        value=_decode_number(fields[4]),
        data=rlp.deserialize_bytes(fields[5]),
        chain_id=chain_id,
        **signature,
    )


def _decode_access_list_transaction(fields: Sequence[rlp.Simple]) -> Transaction:
    return Transaction(
        ty=TransactionType.ACCESS_LIST,
        chain_id=_decode_number(fields[0]),
        nonce=_decode_number(fields[1]),
        gas_price=_decode_number(fields[2]),
        gas_limit=_decode_number(fields[3]),
        to=_decode_to(fields[4]),
        value=_decode_number(fields[5]),
        data=rlp.deserialize_bytes(fields[6]),
        access_list=_decode_access_list_items(fields[7]),
        **_decode_signature(fields[8:11], typed=True),
    )


def _decode_dynamic_fee_transaction(fields: Sequence[rlp.Simple]) -> Transaction:
    return Transaction(
        ty=TransactionType.DYNAMIC_FEE,
        chain_id=_decode_number(fields[0]),
        nonce=_decode_number(fields[1]),
        max_priority_fee_per_gas=_decode_number(fields[2]),
        max_fee_per_gas=_decode_number(fields[3]),
        gas_limit=_decode_number(fields[4]),
        to=_decode_to(fields[5]),
        value=_decode_number(fields[6]),
        data=rlp.deserialize_bytes(fields[7]),
        access_list=_decode_access_list_items(fields[8]),
        **_decode_signature(fields[9:12], typed=True),
    )


#
# Signing pre-image
#


def signing_pre_image(tx: Transaction) -> RawBytes:
    """
    Return the bytes whose Keccak-256 digest is signed.

    Legacy transactions with a non-zero chain id append `chain_id, 0, 0` as
    described in [EIP-155]; typed transactions are prefixed with their type
    byte. The signature itself is never part of the pre-image.

    [EIP-155]: https://eips.ethereum.org/EIPS/eip-155
    """
    fields = _unsigned_fields(tx)
    if tx.ty == TransactionType.LEGACY and tx.chain_id:
        fields += [int(tx.chain_id), 0, 0]
    return _type_prefix(tx) + rlp.encode(fields)


def signing_hash(tx: Transaction) -> Hash:
    """
    Compute the hash of a transaction used in its signature.
    """
    return keccak256(signing_pre_image(tx))
