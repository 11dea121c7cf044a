"""Common conversion methods."""

from re import sub
from typing import List, SupportsBytes, TypeAlias

from ..exceptions import InvalidLengthError
from ..hexadecimal import has_hex_prefix, hex_to_bytes, hex_to_number

BytesConvertible: TypeAlias = str | bytes | SupportsBytes | List[int]
FixedSizeBytesConvertible: TypeAlias = str | bytes | SupportsBytes | List[int] | int
NumberConvertible: TypeAlias = str | bytes | SupportsBytes | int


def to_bytes(input_bytes: BytesConvertible) -> bytes:
    """Convert multiple types into bytes."""
    if input_bytes is None:
        raise TypeError("cannot convert `None` input to bytes")

    if isinstance(input_bytes, (bytes, bytearray, list)) or isinstance(
        input_bytes, SupportsBytes
    ):
        return bytes(input_bytes)

    if isinstance(input_bytes, str):
        # Hex strings may contain whitespace for readability
        return hex_to_bytes(sub(r"\s+", "", input_bytes))

    raise TypeError(f"invalid type for `bytes`: {type(input_bytes).__name__}")


def to_fixed_size_bytes(
    input_bytes: FixedSizeBytesConvertible,
    size: int,
    *,
    left_padding: bool = False,
) -> bytes:
    """
    Convert multiple types into fixed-size bytes.

    :param input_bytes: The input data to convert. Integers are always left-padded, and
        negative integers are stored in two's complement.
    :param size: The size of the output bytes.
    :param left_padding: Whether to allow left-padding of shorter input data with zeros.
    """
    if isinstance(input_bytes, int):
        try:
            return int.to_bytes(input_bytes, length=size, byteorder="big", signed=input_bytes < 0)
        except OverflowError as e:
            raise InvalidLengthError(f"integer does not fit in {size} bytes") from e
    input_bytes = to_bytes(input_bytes)
    if len(input_bytes) > size:
        raise InvalidLengthError(
            f"input is too large for fixed size bytes: {len(input_bytes)} > {size}"
        )
    if len(input_bytes) < size:
        if left_padding:
            return bytes(input_bytes).rjust(size, b"\x00")
        raise InvalidLengthError(
            f"input is too small for fixed size bytes: {len(input_bytes)} < {size}"
        )
    return input_bytes


def to_hex(input_bytes: BytesConvertible) -> str:
    """Convert multiple types into a bytes hex string."""
    return "0x" + to_bytes(input_bytes).hex()


def to_number(input_number: NumberConvertible) -> int:
    """Convert multiple types into a number."""
    if isinstance(input_number, int):
        return int(input_number)
    if isinstance(input_number, str):
        stripped = input_number.strip()
        if has_hex_prefix(stripped.lstrip("-")):
            return hex_to_number(stripped)
        return int(stripped, 10)
    if isinstance(input_number, (bytes, bytearray)) or isinstance(input_number, SupportsBytes):
        return int.from_bytes(bytes(input_number), byteorder="big")
    raise TypeError(f"invalid type for `number`: {type(input_number).__name__}")
