"""Composite types built from the base types."""

from typing import Any, ClassVar, List

from pydantic import ConfigDict, Field, field_validator

from ..exceptions import InvalidLengthError, InvalidSignatureComponentError
from ..hexadecimal import hex_to_bytes, hex_to_number, number_to_hex
from .base_types import Address, Hash, HexNumber, ToStringSchema
from .pydantic import CamelModel

UINT256_CEILING = 2**256


class AccessTuple(CamelModel):
    """
    Entry of an [EIP-2930] access list: an address and the storage keys of that address
    the transaction intends to touch.

    [EIP-2930]: https://eips.ethereum.org/EIPS/eip-2930
    """

    address: Address
    storage_keys: List[Hash] = Field(default_factory=list)

    def to_list(self) -> List[Any]:
        """Return the access tuple as a list of RLP encodable items."""
        return [bytes(self.address), [bytes(key) for key in self.storage_keys]]


class Signature(CamelModel):
    """
    A recoverable ECDSA signature `(v, r, s)`.

    How `v` carries the recovery id depends on where the signature is used; this type
    only stores the three integers.
    """

    LENGTH: ClassVar[int] = 65

    model_config = ConfigDict(frozen=True)

    v: HexNumber = HexNumber(0)
    r: HexNumber = HexNumber(0)
    s: HexNumber = HexNumber(0)

    @field_validator("v", "r", "s")
    @classmethod
    def fits_in_32_bytes(cls, value: HexNumber) -> HexNumber:
        """Signature components are unsigned and at most 256 bits."""
        if not 0 <= value < UINT256_CEILING:
            raise InvalidSignatureComponentError(f"signature component out of range: {value}")
        return value

    @classmethod
    def from_bytes(cls, data: bytes) -> "Signature":
        """Parse the 65-byte `r || s || v` form."""
        if len(data) != cls.LENGTH:
            raise InvalidLengthError(f"invalid signature length {len(data)}")
        return cls(
            v=data[64],
            r=int.from_bytes(data[0:32], "big"),
            s=int.from_bytes(data[32:64], "big"),
        )

    @classmethod
    def from_hex(cls, hex_string: str) -> "Signature":
        """Parse the 65-byte `r || s || v` form from a hex string."""
        return cls.from_bytes(hex_to_bytes(hex_string))

    def to_bytes(self) -> bytes:
        """Return the 65-byte `r || s || v` form."""
        if self.v > 0xFF:
            raise InvalidSignatureComponentError(f"v does not fit in one byte: {int(self.v)}")
        return self.r.to_bytes(32, "big") + self.s.to_bytes(32, "big") + bytes([self.v])

    def hex(self) -> str:
        """Return the 65-byte form as a hex string."""
        return "0x" + self.to_bytes().hex()

    def is_zero(self) -> bool:
        """Return whether all three components are zero, marking an unsigned payload."""
        return self.v == 0 and self.r == 0 and self.s == 0


class BlockNumber(ToStringSchema):
    """
    A block number, or one of the tags `earliest`, `latest` and `pending`.

    Rendered as the tag itself or as a hexadecimal number.
    """

    MAX_NUMBER: ClassVar[int] = 2**63 - 1
    TAGS: ClassVar[tuple[str, ...]] = ("earliest", "latest", "pending")

    __slots__ = ("_number", "_tag")

    _number: int | None
    _tag: str | None

    def __init__(self, value: "int | str | BlockNumber"):
        """Parse a number, a decimal or hex string, or a tag."""
        if isinstance(value, BlockNumber):
            self._number, self._tag = value._number, value._tag
            return
        if isinstance(value, str):
            text = value.strip()
            if text.lower() in self.TAGS:
                self._number, self._tag = None, text.lower()
                return
            if text.lstrip("-")[:2].lower() == "0x":
                value = hex_to_number(text)
            else:
                value = int(text, 10)
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"invalid type for block number: {type(value).__name__}")
        if value < 0:
            raise ValueError(f"block number must not be negative: {value}")
        if value > self.MAX_NUMBER:
            raise ValueError("block number larger than int64")
        self._number, self._tag = int(value), None

    @classmethod
    def earliest(cls) -> "BlockNumber":
        """Return the `earliest` tag."""
        return cls("earliest")

    @classmethod
    def latest(cls) -> "BlockNumber":
        """Return the `latest` tag."""
        return cls("latest")

    @classmethod
    def pending(cls) -> "BlockNumber":
        """Return the `pending` tag."""
        return cls("pending")

    @property
    def number(self) -> int | None:
        """Return the block number, or `None` for a tag."""
        return self._number

    @property
    def tag(self) -> str | None:
        """Return the tag, or `None` for a number."""
        return self._tag

    def is_tag(self) -> bool:
        """Return whether this is one of the tags."""
        return self._tag is not None

    def is_earliest(self) -> bool:
        """Return whether this is the `earliest` tag."""
        return self._tag == "earliest"

    def is_latest(self) -> bool:
        """Return whether this is the `latest` tag."""
        return self._tag == "latest"

    def is_pending(self) -> bool:
        """Return whether this is the `pending` tag."""
        return self._tag == "pending"

    def __str__(self) -> str:
        if self._tag is not None:
            return self._tag
        assert self._number is not None
        return number_to_hex(self._number)

    def __repr__(self) -> str:
        return f"BlockNumber({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BlockNumber):
            try:
                other = BlockNumber(other)  # type: ignore[arg-type]
            except (TypeError, ValueError):
                return False
        return self._number == other._number and self._tag == other._tag

    def __hash__(self) -> int:
        return hash((self._number, self._tag))
