"""Basic type primitives used to define other types."""

from typing import Any, ClassVar, SupportsBytes, Type, TypeVar

from pydantic import GetCoreSchemaHandler
from pydantic_core.core_schema import (
    PlainValidatorFunctionSchema,
    no_info_plain_validator_function,
    to_string_ser_schema,
)

from ..hexadecimal import number_to_hex
from .conversions import (
    BytesConvertible,
    FixedSizeBytesConvertible,
    NumberConvertible,
    to_bytes,
    to_fixed_size_bytes,
    to_number,
)

N = TypeVar("N", bound="Number")


class ToStringSchema:
    """
    Type converter to add a simple pydantic schema that correctly
    parses and serializes the type.
    """

    @staticmethod
    def __get_pydantic_core_schema__(
        source_type: Any, handler: GetCoreSchemaHandler
    ) -> PlainValidatorFunctionSchema:
        """Call the class constructor without info and appends the serialization schema."""
        return no_info_plain_validator_function(
            source_type,
            serialization=to_string_ser_schema(),
        )


class Number(int, ToStringSchema):
    """Arbitrary-precision integer that can be parsed from decimal or hex strings."""

    def __new__(cls, input_number: NumberConvertible | N):
        """Create a new Number object."""
        return super(Number, cls).__new__(cls, to_number(input_number))

    def __str__(self) -> str:
        """Return the string representation of the number."""
        return str(int(self))

    def hex(self) -> str:
        """Return the JSON-RPC hexadecimal representation of the number."""
        return number_to_hex(int(self))


class HexNumber(Number):
    """Integer that is rendered as a `0x` prefixed hexadecimal string."""

    def __str__(self) -> str:
        """Return the string representation of the number."""
        return self.hex()


class Bytes(bytes, ToStringSchema):
    """Byte string of variable length rendered as `0x` prefixed hex."""

    def __new__(cls, input_bytes: BytesConvertible = b""):
        """Create a new Bytes object."""
        if type(input_bytes) is cls:
            return input_bytes
        return super(Bytes, cls).__new__(cls, to_bytes(input_bytes))

    def __hash__(self) -> int:
        """Return the hash of the bytes."""
        return super(Bytes, self).__hash__()

    def __str__(self) -> str:
        """Return the hexadecimal representation of the bytes."""
        return self.hex()

    def __repr__(self) -> str:
        """Return the representation of the bytes as a hex string."""
        return f"{type(self).__name__}({self.hex()!r})"

    def hex(self, *args, **kwargs) -> str:
        """Return the hexadecimal representation of the bytes."""
        return "0x" + super().hex(*args, **kwargs)


T = TypeVar("T", bound="FixedSizeBytes")


class FixedSizeBytes(Bytes):
    """Byte string of a fixed length."""

    byte_length: ClassVar[int]
    left_padding: ClassVar[bool] = False

    def __class_getitem__(cls, length: int) -> Type["FixedSizeBytes"]:
        """Create a new FixedSizeBytes class with the given length."""

        class Sized(cls):  # type: ignore
            byte_length = length

        return Sized

    def __new__(cls, input_bytes: FixedSizeBytesConvertible | T):
        """Create a new FixedSizeBytes object."""
        if type(input_bytes) is cls:
            return input_bytes
        return super(FixedSizeBytes, cls).__new__(
            cls,
            to_fixed_size_bytes(input_bytes, cls.byte_length, left_padding=cls.left_padding),
        )

    def __hash__(self) -> int:
        """Return the hash of the bytes."""
        return super(FixedSizeBytes, self).__hash__()

    def __eq__(self, other: object) -> bool:
        """Compare two FixedSizeBytes objects to be equal."""
        if other is None:
            return False
        if not isinstance(other, FixedSizeBytes):
            if not isinstance(other, (str, int, bytes, SupportsBytes)):
                return NotImplemented
            try:
                other = type(self)(other)
            except (ValueError, TypeError):
                return False
        return super().__eq__(other)

    def __ne__(self, other: object) -> bool:
        """Compare two FixedSizeBytes objects to be not equal."""
        return not self.__eq__(other)

    def is_zero(self) -> bool:
        """Return whether every byte is zero."""
        return not any(self)


class Address(FixedSizeBytes[20]):  # type: ignore
    """
    20-byte Ethereum account address.

    Byte and hex input must be exactly 20 bytes long; integers are left-padded.
    """

    pass


class Hash(FixedSizeBytes[32]):  # type: ignore
    """
    32-byte Keccak-256 digest.

    Shorter input is left-padded with zeros, and negative integers are stored in two's
    complement.
    """

    left_padding = True
