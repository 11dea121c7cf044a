"""
Common values and sizes.
"""

from .base_types import Address, Hash

ADDRESS_LENGTH = 20
HASH_LENGTH = 32
SIGNATURE_LENGTH = 65

ZeroAddress = Address(0x00)
ZeroHash = Hash(0x00)
