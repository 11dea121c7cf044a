"""
Cryptographic Hash Functions
^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Keccak-256 is the only digest used for signing pre-images, addresses and
keystore MACs. It uses the original Keccak padding and is not interchangeable
with the standardized SHA3-256.
"""

from Crypto.Hash import keccak

from ..base_types import Address, Hash
from ..base_types.conversions import FixedSizeBytesConvertible


def keccak256(*parts: bytes) -> Hash:
    """
    Computes the keccak256 hash of the concatenation of `parts`.

    Parameters
    ----------
    parts :
        Byte segments fed to the sponge in order. Passing several segments is
        equivalent to passing their concatenation.

    Returns
    -------
    hash : `ethereum_signing.base_types.Hash`
        Output of the hash function.
    """
    k = keccak.new(digest_bits=256)
    for part in parts:
        k.update(bytes(part))
    return Hash(k.digest())


def to_checksum_address(address: FixedSizeBytesConvertible) -> str:
    """
    Render an address with the [EIP-55] mixed-case checksum.

    A hex letter is upper-cased when the matching nibble of the Keccak-256
    hash of the lower-case hex address is 8 or higher.

    [EIP-55]: https://eips.ethereum.org/EIPS/eip-55
    """
    lower = bytes(Address(address)).hex()
    digest = keccak256(lower.encode("ascii")).hex()[2:]
    return "0x" + "".join(
        char.upper() if int(nibble, 16) >= 8 else char
        for char, nibble in zip(lower, digest)
    )
