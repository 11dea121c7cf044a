"""
Keystore V3
^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Encrypted storage of secret keys as described by the [Web3 Secret Storage
Definition]. A passphrase is stretched with scrypt or PBKDF2-HMAC-SHA256;
the first half of the derived key encrypts the secret with AES-128-CTR and
the second half authenticates the ciphertext through a Keccak-256 MAC.

[Web3 Secret Storage Definition]: https://ethereum.org/en/developers/docs/data-structures-and-encoding/web3-secret-storage/
"""

import hmac
import logging
import secrets
import uuid
from pathlib import Path
from typing import Literal

from Crypto.Cipher import AES
from Crypto.Hash import SHA256
from Crypto.Protocol.KDF import PBKDF2, scrypt
from ethereum_types.bytes import Bytes, Bytes32
from pydantic import AliasChoices, Field, ValidationError

from .base_types import Address
from .base_types import Bytes as HexBytes
from .base_types.pydantic import SigningBaseModel
from .config import (
    DEFAULT_KEYSTORE_CONFIG,
    KEYSTORE_VERSION,
    STANDARD_SCRYPT,
    KeystoreConfig,
    ScryptParams,
)
from .crypto.elliptic_curve import secret_key_to_address, validate_secret_key
from .crypto.hash import keccak256
from .exceptions import (
    AddressMismatchError,
    EthereumSigningException,
    InternalCryptoError,
    InvalidKeystoreError,
    InvalidPassphraseError,
    KeyNotFoundError,
    UnsupportedCipherError,
    UnsupportedKdfError,
    UnsupportedPrfError,
)

logger = logging.getLogger(__name__)

CIPHER = "aes-128-ctr"
PBKDF2_PRF = "hmac-sha256"
IV_LENGTH = AES.block_size
SALT_LENGTH = 32


class KeystoreHex(HexBytes):
    """Byte string rendered as lowercase hex without the `0x` prefix."""

    def __str__(self) -> str:
        """Return the hexadecimal representation of the bytes."""
        return self.hex()[2:]


class KeystoreAddress(Address):
    """Address rendered as lowercase hex without the `0x` prefix."""

    def __str__(self) -> str:
        """Return the hexadecimal representation of the address."""
        return self.hex()[2:]


class CipherParams(SigningBaseModel):
    """Parameters of the cipher."""

    iv: KeystoreHex


class KdfParams(SigningBaseModel):
    """
    Parameters of the key derivation function.

    `n`, `r` and `p` are used by scrypt; `c` and `prf` by PBKDF2.
    """

    dklen: int
    salt: KeystoreHex
    n: int | None = None
    r: int | None = None
    p: int | None = None
    c: int | None = None
    prf: str | None = None


class KeystoreCrypto(SigningBaseModel):
    """The encrypted key and everything needed to decrypt it."""

    cipher: str
    ciphertext: KeystoreHex
    cipherparams: CipherParams
    kdf: str
    kdfparams: KdfParams
    mac: KeystoreHex


class Keystore(SigningBaseModel):
    """A version 3 keystore file."""

    version: int
    id: str | None = None
    address: KeystoreAddress | None = None
    crypto: KeystoreCrypto = Field(validation_alias=AliasChoices("crypto", "Crypto"))

    @classmethod
    def from_json(cls, content: str | bytes) -> "Keystore":
        """Parse a keystore from its JSON text."""
        try:
            return cls.model_validate_json(content)
        except ValidationError as e:
            raise InvalidKeystoreError(f"malformed keystore: {e}") from e

    def to_json(self) -> str:
        """Render the keystore as JSON text."""
        return self.model_dump_json(exclude_none=True)


def _passphrase_bytes(passphrase: str | bytes) -> bytes:
    if isinstance(passphrase, str):
        return passphrase.encode("utf-8")
    return bytes(passphrase)


def derive_key(crypto: KeystoreCrypto, passphrase: str | bytes) -> Bytes:
    """
    Stretch `passphrase` with the key derivation function declared in
    `crypto`.

    Parameters
    ----------
    crypto :
        The `crypto` section of a keystore.
    passphrase :
        The passphrase; text is encoded as UTF-8.

    Returns
    -------
    derived_key : `Bytes`
        `dklen` bytes of key material.
    """
    params = crypto.kdfparams
    password = _passphrase_bytes(passphrase)
    logger.debug("deriving keystore key with %s", crypto.kdf)

    if crypto.kdf == "scrypt":
        if params.n is None or params.r is None or params.p is None:
            raise InvalidKeystoreError("scrypt parameters n, r and p are required")
        try:
            return scrypt(
                password,
                bytes(params.salt),
                key_len=params.dklen,
                N=params.n,
                r=params.r,
                p=params.p,
            )
        except ValueError as e:
            raise InternalCryptoError(f"scrypt failed: {e}") from e
    elif crypto.kdf == "pbkdf2":
        if params.prf != PBKDF2_PRF:
            raise UnsupportedPrfError(str(params.prf))
        if params.c is None:
            raise InvalidKeystoreError("pbkdf2 iteration count c is required")
        try:
            return PBKDF2(
                password,
                bytes(params.salt),
                dkLen=params.dklen,
                count=params.c,
                hmac_hash_module=SHA256,
            )
        except ValueError as e:
            raise InternalCryptoError(f"pbkdf2 failed: {e}") from e

    raise UnsupportedKdfError(crypto.kdf)


def aes_128_ctr(key: Bytes, data: Bytes, iv: Bytes) -> Bytes:
    """
    Encrypt or decrypt `data` with AES-128-CTR, using the whole `iv` as the
    initial 128-bit big endian counter block.
    """
    if len(iv) != IV_LENGTH:
        raise InvalidKeystoreError(f"invalid iv length {len(iv)}")
    try:
        cipher = AES.new(bytes(key), AES.MODE_CTR, nonce=b"", initial_value=bytes(iv))
        return cipher.encrypt(bytes(data))
    except ValueError as e:
        raise InternalCryptoError(f"aes-128-ctr failed: {e}") from e


def decrypt_key(keystore: Keystore | str | bytes, passphrase: str | bytes) -> Bytes32:
    """
    Decrypt the secret key held in `keystore`.

    The MAC is checked before anything is decrypted; a mismatch means the
    passphrase is wrong and raises `InvalidPassphraseError`.
    """
    if not isinstance(keystore, Keystore):
        keystore = Keystore.from_json(keystore)
    if keystore.version != KEYSTORE_VERSION:
        raise InvalidKeystoreError(
            f"only version {KEYSTORE_VERSION} keystores are supported, got {keystore.version}"
        )

    crypto = keystore.crypto
    if crypto.cipher != CIPHER:
        raise UnsupportedCipherError(crypto.cipher)

    derived_key = derive_key(crypto, passphrase)
    if len(derived_key) < 32:
        raise InvalidKeystoreError(f"derived key too short: dklen={len(derived_key)}")

    mac = keccak256(derived_key[16:32], crypto.ciphertext)
    if not hmac.compare_digest(bytes(mac), bytes(crypto.mac)):
        raise InvalidPassphraseError("invalid passphrase or keyfile")

    secret_key = validate_secret_key(
        aes_128_ctr(derived_key[:16], crypto.ciphertext, crypto.cipherparams.iv)
    )

    if keystore.address is not None and not keystore.address.is_zero():
        address = secret_key_to_address(secret_key)
        if address != keystore.address:
            expected = Address(keystore.address)
            logger.warning("keystore address %s does not match its key", expected)
            raise AddressMismatchError(str(expected), str(address))

    return secret_key


def encrypt_key(
    secret_key: Bytes,
    passphrase: str | bytes,
    scrypt_params: ScryptParams = STANDARD_SCRYPT,
) -> Keystore:
    """
    Encrypt `secret_key` into a new keystore, using scrypt with
    `scrypt_params` and a fresh random salt, IV and id.
    """
    secret_key = validate_secret_key(secret_key)
    salt = secrets.token_bytes(SALT_LENGTH)
    iv = secrets.token_bytes(IV_LENGTH)

    kdfparams = KdfParams(
        dklen=scrypt_params.dklen,
        salt=salt,
        n=scrypt_params.n,
        r=scrypt_params.r,
        p=scrypt_params.p,
    )
    crypto = KeystoreCrypto(
        cipher=CIPHER,
        ciphertext=b"",
        cipherparams=CipherParams(iv=iv),
        kdf="scrypt",
        kdfparams=kdfparams,
        mac=b"",
    )
    derived_key = derive_key(crypto, passphrase)
    ciphertext = aes_128_ctr(derived_key[:16], secret_key, iv)
    mac = keccak256(derived_key[16:32], ciphertext)

    return Keystore(
        version=KEYSTORE_VERSION,
        id=str(uuid.uuid4()),
        address=secret_key_to_address(secret_key),
        crypto=crypto.model_copy(
            update={"ciphertext": KeystoreHex(ciphertext), "mac": KeystoreHex(mac)}
        ),
    )


def load_key_from_content(content: str | bytes, passphrase: str | bytes) -> Bytes32:
    """
    Decrypt the secret key of a keystore given as JSON text.
    """
    return decrypt_key(Keystore.from_json(content), passphrase)


def load_key_from_file(path: Path | str, passphrase: str | bytes) -> Bytes32:
    """
    Decrypt the secret key of the keystore file at `path`.
    """
    content = Path(path).read_bytes()
    secret_key = load_key_from_content(content, passphrase)
    logger.info("loaded key %s from %s", secret_key_to_address(secret_key), path)
    return secret_key


def _skip_reason(entry: Path, max_file_size: int) -> Literal["", "not a file", "size"]:
    if not entry.is_file():
        return "not a file"
    size = entry.stat().st_size
    if size == 0 or size >= max_file_size:
        return "size"
    return ""


def load_key_from_directory(
    path: Path | str,
    passphrase: str | bytes,
    address: Address | str | bytes,
    config: KeystoreConfig = DEFAULT_KEYSTORE_CONFIG,
) -> Bytes32:
    """
    Search the files directly inside `path` for a keystore that decrypts to
    `address` with `passphrase`.

    Directories, empty files and files of `config.max_file_size` bytes or
    more are skipped, as is every file that fails to load or decrypt.
    Raises `KeyNotFoundError` when no file matches.
    """
    address = Address(address)
    for entry in sorted(Path(path).iterdir()):
        try:
            reason = _skip_reason(entry, config.max_file_size)
            if reason:
                logger.debug("skipping %s: %s", entry, reason)
                continue
            secret_key = load_key_from_content(entry.read_bytes(), passphrase)
        except (OSError, ValueError, EthereumSigningException) as e:
            logger.debug("skipping %s: %s", entry, type(e).__name__)
            continue
        if secret_key_to_address(secret_key) == address:
            logger.info("loaded key %s from %s", address, entry)
            return secret_key

    raise KeyNotFoundError(str(address))
