"""
.. _rlp:

Recursive Length Prefix (RLP) Encoding
^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Defines the serialization and deserialization format used for transaction
envelopes. Decoding is strict: only the canonical (shortest) encoding of
every item is accepted.
"""

from typing import List, Sequence, Tuple, TypeAlias, Union

from ethereum_types.bytes import Bytes
from ethereum_types.numeric import FixedUnsigned, Uint

from .exceptions import RLPDecodingError, RLPEncodingError

Simple: TypeAlias = Union[Sequence["Simple"], bytes]

Extended: TypeAlias = Union[
    Sequence["Extended"], bytearray, bytes, Uint, FixedUnsigned, int, str, bool
]

MAX_NESTING_DEPTH = 128


#
# RLP Encode
#


def encode(raw_data: Extended) -> Bytes:
    """
    Encodes `raw_data` into a sequence of bytes using RLP.

    Parameters
    ----------
    raw_data :
        A `Bytes`, a non-negative integer, or a sequence of RLP encodable
        objects.

    Returns
    -------
    encoded : `ethereum_types.bytes.Bytes`
        The RLP encoded bytes representing `raw_data`.
    """
    if isinstance(raw_data, Sequence):
        if isinstance(raw_data, (bytearray, bytes)):
            return encode_bytes(bytes(raw_data))
        elif isinstance(raw_data, str):
            return encode_bytes(raw_data.encode())
        else:
            return encode_sequence(raw_data)
    elif isinstance(raw_data, bool):
        if raw_data:
            return encode_bytes(b"\x01")
        else:
            return encode_bytes(b"")
    elif isinstance(raw_data, (Uint, FixedUnsigned)):
        return encode_bytes(raw_data.to_be_bytes())
    elif isinstance(raw_data, int):
        try:
            return encode_bytes(Uint(raw_data).to_be_bytes())
        except OverflowError as e:
            raise RLPEncodingError(
                f"cannot encode negative integer {raw_data}"
            ) from e
    else:
        raise RLPEncodingError(
            "RLP Encoding of type {} is not supported".format(type(raw_data))
        )


def encode_bytes(raw_bytes: Bytes) -> Bytes:
    """
    Encodes `raw_bytes`, a sequence of bytes, using RLP.

    Parameters
    ----------
    raw_bytes :
        Bytes to encode with RLP.

    Returns
    -------
    encoded : `ethereum_types.bytes.Bytes`
        The RLP encoded bytes representing `raw_bytes`.
    """
    len_raw_data = len(raw_bytes)

    if len_raw_data == 1 and raw_bytes[0] < 0x80:
        return raw_bytes
    elif len_raw_data < 0x38:
        return bytes([0x80 + len_raw_data]) + raw_bytes
    else:
        # length of raw data represented as big endian bytes
        len_raw_data_as_be = Uint(len_raw_data).to_be_bytes()
        return (
            bytes([0xB7 + len(len_raw_data_as_be)])
            + len_raw_data_as_be
            + raw_bytes
        )


def encode_sequence(raw_sequence: Sequence[Extended]) -> Bytes:
    """
    Encodes a list of RLP encodable objects (`raw_sequence`) using RLP.

    Parameters
    ----------
    raw_sequence :
        Sequence of RLP encodable objects.

    Returns
    -------
    encoded : `ethereum_types.bytes.Bytes`
        The RLP encoded bytes representing `raw_sequence`.
    """
    joined_encodings = get_joined_encodings(raw_sequence)
    len_joined_encodings = len(joined_encodings)

    if len_joined_encodings < 0x38:
        return bytes([0xC0 + len_joined_encodings]) + joined_encodings
    else:
        len_joined_encodings_as_be = Uint(len_joined_encodings).to_be_bytes()
        return (
            bytes([0xF7 + len(len_joined_encodings_as_be)])
            + len_joined_encodings_as_be
            + joined_encodings
        )


def get_joined_encodings(raw_sequence: Sequence[Extended]) -> Bytes:
    """
    Obtain concatenation of rlp encoding for each item in the sequence
    raw_sequence.
    """
    return b"".join(encode(item) for item in raw_sequence)


#
# RLP Decode
#


def decode(encoded_data: Bytes) -> Simple:
    """
    Decodes a byte sequence or list of RLP encodable objects from the byte
    sequence `encoded_data`, using RLP. The whole input must be a single
    item.

    Parameters
    ----------
    encoded_data :
        A sequence of bytes, in RLP form.

    Returns
    -------
    decoded_data : `Simple`
        Object decoded from `encoded_data`.
    """
    decoded_data, consumed = decode_item(encoded_data)
    if consumed != len(encoded_data):
        raise RLPDecodingError(
            f"{len(encoded_data) - consumed} trailing byte(s) after RLP item"
        )
    return decoded_data


def decode_item(encoded_data: Bytes) -> Tuple[Simple, int]:
    """
    Decodes the first item of `encoded_data` and reports how many bytes it
    occupied. Bytes after the item are left to the caller.

    Parameters
    ----------
    encoded_data :
        A sequence of bytes starting with an RLP item.

    Returns
    -------
    decoded_data : `Simple`
        Object decoded from the start of `encoded_data`.
    consumed : `int`
        Length of the encoding of that object.
    """
    return _decode_item(encoded_data, 0)


def _decode_item(encoded_data: Bytes, depth: int) -> Tuple[Simple, int]:
    is_list, offset, length = decode_item_length(encoded_data)
    payload = bytes(encoded_data[offset : offset + length])
    if is_list:
        return _decode_joined_encodings(payload, depth + 1), offset + length
    return payload, offset + length


def decode_joined_encodings(joined_encodings: Bytes) -> List[Simple]:
    """
    Decodes `joined_encodings`, which is a concatenation of RLP encoded
    objects.

    Parameters
    ----------
    joined_encodings :
        concatenation of RLP encoded objects

    Returns
    -------
    decoded : `List[Simple]`
        A list of objects decoded from `joined_encodings`.
    """
    return _decode_joined_encodings(joined_encodings, 0)


def _decode_joined_encodings(joined_encodings: Bytes, depth: int) -> List[Simple]:
    if depth > MAX_NESTING_DEPTH:
        raise RLPDecodingError(
            f"RLP lists nested deeper than {MAX_NESTING_DEPTH} levels"
        )

    decoded_sequence = []

    item_start_idx = 0
    while item_start_idx < len(joined_encodings):
        decoded, consumed = _decode_item(joined_encodings[item_start_idx:], depth)
        decoded_sequence.append(decoded)
        item_start_idx += consumed

    return decoded_sequence


def decode_item_length(encoded_data: Bytes) -> Tuple[bool, int, int]:
    """
    Parse the prefix of the first RLP item in `encoded_data`.

    Parameters
    ----------
    encoded_data :
        A sequence of bytes starting with an RLP item.

    Returns
    -------
    is_list : `bool`
        Whether the item is a list.
    offset : `int`
        Number of prefix bytes before the payload.
    length : `int`
        Number of payload bytes.
    """
    if len(encoded_data) <= 0:
        raise RLPDecodingError("Cannot decode empty bytestring")

    first_rlp_byte = encoded_data[0]

    # A single byte below 0x80 is its own encoding.
    if first_rlp_byte < 0x80:
        return False, 0, 1

    if first_rlp_byte <= 0xB7:
        is_list, offset, length = False, 1, first_rlp_byte - 0x80
        if length == 1:
            if len(encoded_data) < 2:
                raise RLPDecodingError("truncated RLP string")
            if encoded_data[1] < 0x80:
                raise RLPDecodingError(
                    "single byte below 0x80 must not carry a length prefix"
                )
    elif first_rlp_byte <= 0xBF:
        is_list = False
        offset, length = _decode_long_length(encoded_data, 0xB7)
    elif first_rlp_byte <= 0xF7:
        is_list, offset, length = True, 1, first_rlp_byte - 0xC0
    else:
        is_list = True
        offset, length = _decode_long_length(encoded_data, 0xF7)

    if offset + length > len(encoded_data):
        raise RLPDecodingError(
            f"RLP item declares {length} byte(s) but only "
            f"{len(encoded_data) - offset} remain"
        )
    return is_list, offset, length


def _decode_long_length(encoded_data: Bytes, base: int) -> Tuple[int, int]:
    length_length = encoded_data[0] - base
    if 1 + length_length > len(encoded_data):
        raise RLPDecodingError("truncated RLP length prefix")
    if encoded_data[1] == 0:
        raise RLPDecodingError("RLP length prefix has leading zeros")
    length = int(Uint.from_be_bytes(encoded_data[1 : 1 + length_length]))
    if length < 0x38:
        raise RLPDecodingError("RLP long form used for a short payload")
    return 1 + length_length, length


#
# Typed views of decoded items
#


def deserialize_bytes(value: Simple, length: int | None = None) -> Bytes:
    """
    Return `value` as a byte string, optionally of exactly `length` bytes.
    """
    if not isinstance(value, bytes):
        raise RLPDecodingError("expected an RLP string, got a list")
    if length is not None and len(value) != length:
        raise RLPDecodingError(
            f"expected {length} byte(s), got {len(value)}"
        )
    return value


def deserialize_uint(value: Simple) -> Uint:
    """
    Return `value` as an unsigned integer, rejecting leading zero bytes.
    """
    if not isinstance(value, bytes):
        raise RLPDecodingError("expected an RLP integer, got a list")
    if len(value) > 0 and value[0] == 0:
        raise RLPDecodingError("RLP integer has leading zero bytes")
    return Uint.from_be_bytes(value)


def deserialize_list(
    value: Simple, length: int | None = None
) -> Sequence[Simple]:
    """
    Return `value` as a list, optionally of exactly `length` items.
    """
    if isinstance(value, bytes):
        raise RLPDecodingError("expected an RLP list, got a string")
    if length is not None and len(value) != length:
        raise RLPDecodingError(
            f"expected {length} list item(s), got {len(value)}"
        )
    return value
