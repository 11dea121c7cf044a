"""
Utility Functions For Hexadecimal Strings
^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Conversions between hexadecimal strings and numbers or bytes, following the
JSON-RPC conventions: numbers are `0x` prefixed without leading zeros (`0x0`
for zero, `-0x` for negative values) and byte strings are `0x` prefixed with
two digits per byte.
"""


def has_hex_prefix(hex_string: str) -> bool:
    """
    Check if a hex string starts with hex prefix (0x or 0X).

    Parameters
    ----------
    hex_string :
        The hexadecimal string to be checked for presence of prefix.

    Returns
    -------
    has_prefix : `bool`
        Boolean indicating whether the hex string has 0x prefix.
    """
    return len(hex_string) >= 2 and hex_string[0] == "0" and hex_string[1] in "xX"


def remove_hex_prefix(hex_string: str) -> str:
    """
    Remove 0x prefix from a hex string if present. This function returns the
    passed hex string if it isn't prefixed with 0x.
    """
    if has_hex_prefix(hex_string):
        return hex_string[len("0x") :]

    return hex_string


def number_to_hex(number: int) -> str:
    """
    Convert an integer to its JSON-RPC hexadecimal form.

    Parameters
    ----------
    number :
        The integer to convert. Negative values are allowed.

    Returns
    -------
    hex_string : `str`
        `0x0` for zero, `0x` followed by the digits without leading zeros
        otherwise, with a leading `-` for negative numbers.
    """
    number = int(number)
    if number < 0:
        return "-0x" + format(-number, "x")
    return "0x" + format(number, "x")


def hex_to_number(hex_string: str) -> int:
    """
    Convert a hexadecimal string to an integer.

    Parameters
    ----------
    hex_string :
        Hex digits with an optional `0x` prefix and an optional leading `-`.

    Returns
    -------
    number : `int`
        The value of the string.
    """
    negative = len(hex_string) > 1 and hex_string[0] == "-"
    if negative:
        hex_string = hex_string[1:]
    digits = remove_hex_prefix(hex_string)
    if not digits:
        raise ValueError("invalid hex string: no digits")
    try:
        number = int(digits, 16)
    except ValueError as e:
        raise ValueError(f"invalid hex string: {hex_string!r}") from e
    return -number if negative else number


def bytes_to_hex(buffer: bytes) -> str:
    """
    Convert bytes to an even-length, `0x` prefixed hexadecimal string.
    """
    return "0x" + bytes(buffer).hex()


def hex_to_bytes(hex_string: str) -> bytes:
    """
    Convert hex string to bytes.

    Parameters
    ----------
    hex_string :
        The hexadecimal string to be converted to bytes. A lone `0` digit is
        read as a single zero byte; any other odd number of digits is
        rejected.

    Returns
    -------
    byte_stream : `bytes`
        Byte stream corresponding to the given hexadecimal string.
    """
    digits = remove_hex_prefix(hex_string)
    if digits == "0":
        return b"\x00"
    if len(digits) % 2 != 0:
        raise ValueError("invalid hex string, length must be even")
    return bytes.fromhex(digits)
