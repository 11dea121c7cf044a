"""
A secret key bound to its address, with signing and verification helpers.
"""

import logging
import secrets
from pathlib import Path

from ethereum_types.bytes import Bytes, Bytes32, Bytes64
from ethereum_types.numeric import U256

from . import keystore, signer
from .base_types import Address, Signature
from .config import STANDARD_SCRYPT, ScryptParams
from .crypto.elliptic_curve import (
    SECP256K1N,
    secret_key_to_public_key,
    validate_secret_key,
)
from .crypto.hash import keccak256, to_checksum_address
from .exceptions import EthereumSigningException
from .hexadecimal import hex_to_bytes
from .transactions import Transaction

logger = logging.getLogger(__name__)


def _as_signature(signature: Signature | Bytes) -> Signature:
    if isinstance(signature, Signature):
        return signature
    if isinstance(signature, str):
        return Signature.from_hex(signature)
    if isinstance(signature, (bytes, bytearray)):
        return Signature.from_bytes(bytes(signature))
    raise TypeError(f"invalid signature type: {type(signature).__name__}")


class PrivateKey:
    """
    A secp256k1 secret key and the address it controls.

    The `verify_*` methods recover the signer and compare it to this key's
    address; they return `False` for any malformed input instead of raising.
    """

    __slots__ = ("_secret", "_public_key", "_address")

    def __init__(self, secret: Bytes):
        self._secret: Bytes32 = validate_secret_key(bytes(secret))
        self._public_key: Bytes64 = secret_key_to_public_key(self._secret)
        self._address = Address(keccak256(self._public_key)[12:])

    @classmethod
    def from_bytes(cls, secret: Bytes) -> "PrivateKey":
        """Create a key from its 32 raw bytes."""
        return cls(secret)

    @classmethod
    def from_hex(cls, secret: str) -> "PrivateKey":
        """Create a key from a hex string."""
        return cls(hex_to_bytes(secret))

    @classmethod
    def random(cls) -> "PrivateKey":
        """Create a key from the operating system's secure random source."""
        while True:
            candidate = secrets.token_bytes(32)
            if U256(0) < U256.from_be_bytes(candidate) < SECP256K1N:
                return cls(candidate)

    @classmethod
    def from_keystore_json(
        cls, content: str | bytes, passphrase: str | bytes
    ) -> "PrivateKey":
        """Decrypt a key from keystore JSON text."""
        return cls(keystore.load_key_from_content(content, passphrase))

    @classmethod
    def from_keystore_file(
        cls, path: Path | str, passphrase: str | bytes
    ) -> "PrivateKey":
        """Decrypt a key from a keystore file."""
        return cls(keystore.load_key_from_file(path, passphrase))

    @classmethod
    def from_keystore_directory(
        cls,
        path: Path | str,
        passphrase: str | bytes,
        address: Address | str | bytes,
    ) -> "PrivateKey":
        """Find and decrypt the key of `address` among the keystores in a directory."""
        return cls(keystore.load_key_from_directory(path, passphrase, address))

    @property
    def address(self) -> Address:
        """The address controlled by this key."""
        return self._address

    @property
    def checksum_address(self) -> str:
        """The address with its EIP-55 checksum."""
        return to_checksum_address(self._address)

    @property
    def public_key(self) -> Bytes64:
        """The uncompressed public key, `x || y`."""
        return self._public_key

    def to_bytes(self) -> Bytes32:
        """Return the raw secret. Handle with care."""
        return self._secret

    def to_keystore(
        self, passphrase: str | bytes, scrypt_params: ScryptParams = STANDARD_SCRYPT
    ) -> keystore.Keystore:
        """Encrypt this key into a keystore."""
        return keystore.encrypt_key(self._secret, passphrase, scrypt_params)

    def to_keystore_json(
        self, passphrase: str | bytes, scrypt_params: ScryptParams = STANDARD_SCRYPT
    ) -> str:
        """Encrypt this key into keystore JSON text."""
        return self.to_keystore(passphrase, scrypt_params).to_json()

    def sign_hash(self, msg_hash: Bytes) -> Signature:
        """Sign a 32-byte digest."""
        return signer.sign_hash(self._secret, msg_hash)

    def sign_message(self, data: bytes) -> Signature:
        """Sign `data` as a personal message."""
        return signer.sign_message(self._secret, data)

    def sign_transaction(self, tx: Transaction) -> Transaction:
        """Return a signed copy of `tx`."""
        return signer.sign_transaction(self._secret, tx)

    def verify_hash(self, msg_hash: Bytes, signature: Signature | Bytes) -> bool:
        """Return whether `signature` over `msg_hash` was made by this key."""
        try:
            return signer.recover_hash(msg_hash, _as_signature(signature)) == self._address
        except (EthereumSigningException, ValueError, TypeError) as e:
            logger.debug("hash signature rejected: %s", e)
            return False

    def verify_message(self, data: bytes, signature: Signature | Bytes) -> bool:
        """Return whether `signature` over the personal message `data` was made by this key."""
        try:
            return signer.recover_message(data, _as_signature(signature)) == self._address
        except (EthereumSigningException, ValueError, TypeError) as e:
            logger.debug("message signature rejected: %s", e)
            return False

    def verify_transaction(self, tx: Transaction) -> bool:
        """Return whether `tx` is signed by this key."""
        try:
            return signer.recover_transaction(tx) == self._address
        except (EthereumSigningException, ValueError, TypeError, AttributeError) as e:
            logger.debug("transaction signature rejected: %s", e)
            return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self._address == other._address

    def __hash__(self) -> int:
        return hash(self._address)

    def __repr__(self) -> str:
        return f"PrivateKey(address={self._address})"
