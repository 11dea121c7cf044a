"""
Error types raised by the signing, encoding and keystore routines.
"""

from typing import Final


class EthereumSigningException(Exception):
    """
    Base class for all exceptions _expected_ to be thrown by this library.
    """


class InvalidEncodingError(EthereumSigningException, ValueError):
    """
    Indicates that a byte stream is not a valid, canonical encoding.
    """


class RLPDecodingError(InvalidEncodingError):
    """
    Indicates that RLP decoding failed: truncated input, a declared length
    running past the input, or a non-canonical form.
    """


class RLPEncodingError(InvalidEncodingError):
    """
    Indicates that RLP encoding failed.
    """


class UnsupportedTransactionTypeError(InvalidEncodingError):
    """
    Unknown [EIP-2718] transaction type byte.

    [EIP-2718]: https://eips.ethereum.org/EIPS/eip-2718
    """

    transaction_type: Final[int]
    """
    The type byte that was found.
    """

    def __init__(self, transaction_type: int):
        super().__init__(f"unsupported transaction type: {transaction_type}")
        self.transaction_type = transaction_type


class InvalidLengthError(EthereumSigningException, ValueError):
    """
    Thrown when an address, hash or signature has the wrong number of bytes.
    """


class InvalidSignatureComponentError(EthereumSigningException, ValueError):
    """
    Thrown when `v`, `r` or `s` is out of range for the envelope it is used
    with.
    """


class InvalidKeyError(EthereumSigningException, ValueError):
    """
    Thrown when a secret key is not a valid secp256k1 scalar.
    """


class MissingSignatureError(EthereumSigningException):
    """
    Thrown when recovery is attempted on a transaction without a signature.
    """


class ChainIdMismatchError(EthereumSigningException):
    """
    The chain id embedded in an EIP-155 `v` contradicts the transaction's
    own chain id.
    """

    expected: Final[int]
    actual: Final[int]

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"chain id mismatch: transaction has {expected}, "
            f"signature encodes {actual}"
        )
        self.expected = expected
        self.actual = actual


class InvalidSignerError(EthereumSigningException):
    """
    The transaction's `from` field does not match the signing key.
    """

    expected: Final[str]
    actual: Final[str]

    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"invalid signer: transaction is from {expected}, key is {actual}"
        )
        self.expected = expected
        self.actual = actual


class RecoveryFailedError(EthereumSigningException):
    """
    The curve library could not recover a public key from a signature.
    """


class InternalCryptoError(EthereumSigningException):
    """
    An underlying curve, cipher or key derivation primitive failed.
    """


class KeystoreError(EthereumSigningException):
    """
    Base class for errors raised while handling keystore files.
    """


class InvalidKeystoreError(KeystoreError, ValueError):
    """
    The keystore JSON is malformed or declares an unsupported version.
    """


class InvalidPassphraseError(KeystoreError):
    """
    The keystore MAC does not match; the passphrase is wrong.
    """


class AddressMismatchError(KeystoreError):
    """
    The address stored in a keystore differs from the address derived from
    the decrypted key.
    """

    expected: Final[str]
    actual: Final[str]

    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"address mismatch: keystore declares {expected}, "
            f"key derives {actual}"
        )
        self.expected = expected
        self.actual = actual


class KeyNotFoundError(KeystoreError):
    """
    No keystore in a directory decrypts to the requested address.
    """

    address: Final[str]

    def __init__(self, address: str):
        super().__init__(f"no key found for address {address}")
        self.address = address


class UnsupportedKdfError(KeystoreError):
    """
    The keystore declares a key derivation function other than scrypt or
    pbkdf2.
    """

    kdf: Final[str]

    def __init__(self, kdf: str):
        super().__init__(f"unsupported kdf: {kdf}")
        self.kdf = kdf


class UnsupportedCipherError(KeystoreError):
    """
    The keystore declares a cipher other than aes-128-ctr.
    """

    cipher: Final[str]

    def __init__(self, cipher: str):
        super().__init__(f"unsupported cipher: {cipher}")
        self.cipher = cipher


class UnsupportedPrfError(KeystoreError):
    """
    The pbkdf2 parameters declare a pseudo-random function other than
    hmac-sha256.
    """

    prf: Final[str]

    def __init__(self, prf: str):
        super().__init__(f"unsupported prf: {prf}")
        self.prf = prf
