"""
Ethereum transaction encoding, signing and key storage.

Builds the wire form of legacy, access list and dynamic fee transactions,
signs them (and plain hashes or personal messages) with secp256k1 keys, and
recovers the signer from a signature. Keys can be stored in and loaded from
version 3 keystore files.
"""

from .base_types import AccessTuple, Address, BlockNumber, Bytes, Hash, HexNumber, Signature
from .crypto.hash import keccak256, to_checksum_address
from .keys import PrivateKey
from .message import add_message_prefix
from .signer import (
    recover_hash,
    recover_message,
    recover_transaction,
    sign_hash,
    sign_message,
    sign_transaction,
)
from .transactions import (
    Transaction,
    TransactionType,
    decode_transaction,
    encode_transaction,
    signing_hash,
    signing_pre_image,
)

__version__ = "0.1.0"

__all__ = (
    "AccessTuple",
    "Address",
    "BlockNumber",
    "Bytes",
    "Hash",
    "HexNumber",
    "PrivateKey",
    "Signature",
    "Transaction",
    "TransactionType",
    "add_message_prefix",
    "decode_transaction",
    "encode_transaction",
    "keccak256",
    "recover_hash",
    "recover_message",
    "recover_transaction",
    "sign_hash",
    "sign_message",
    "sign_transaction",
    "signing_hash",
    "signing_pre_image",
    "to_checksum_address",
)
