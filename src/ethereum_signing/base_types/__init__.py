"""
Common definitions and types.
"""

from .base_types import Address, Bytes, FixedSizeBytes, Hash, HexNumber, Number
from .composite_types import AccessTuple, BlockNumber, Signature
from .constants import ADDRESS_LENGTH, HASH_LENGTH, SIGNATURE_LENGTH, ZeroAddress, ZeroHash
from .conversions import to_bytes, to_hex, to_number
from .json import to_json
from .pydantic import CamelModel, SigningBaseModel

__all__ = (
    "ADDRESS_LENGTH",
    "AccessTuple",
    "Address",
    "BlockNumber",
    "Bytes",
    "CamelModel",
    "FixedSizeBytes",
    "HASH_LENGTH",
    "Hash",
    "HexNumber",
    "Number",
    "SIGNATURE_LENGTH",
    "Signature",
    "SigningBaseModel",
    "ZeroAddress",
    "ZeroHash",
    "to_bytes",
    "to_hex",
    "to_json",
    "to_number",
)
