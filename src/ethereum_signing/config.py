"""
A module for keystore configuration.

Classes:
- ScryptParams: Cost parameters of the scrypt key derivation function.
- KeystoreConfig: Settings used when writing and scanning keystore files.

Usage:
- Pass `LIGHT_SCRYPT` to `encrypt_key` where decrypt time matters more than
  brute-force resistance (tests, throwaway keys).
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

STANDARD_SCRYPT_N = 1 << 18
STANDARD_SCRYPT_P = 1

LIGHT_SCRYPT_N = 1 << 12
LIGHT_SCRYPT_P = 6

SCRYPT_R = 8
SCRYPT_DKLEN = 32

KEYSTORE_VERSION = 3
MAX_KEYSTORE_FILE_SIZE = 1024 * 1024


class ScryptParams(BaseModel):
    """Scrypt cost parameters used to encrypt a key."""

    model_config = ConfigDict(frozen=True)

    n: int = Field(STANDARD_SCRYPT_N, gt=1)
    """CPU/memory cost, a power of two."""

    p: int = Field(STANDARD_SCRYPT_P, ge=1)
    """Parallelization factor."""

    r: int = Field(SCRYPT_R, ge=1)
    """Block size."""

    dklen: int = Field(SCRYPT_DKLEN, ge=32)
    """Length of the derived key; the cipher key and MAC key are cut from it."""

    @field_validator("n")
    @classmethod
    def n_is_power_of_two(cls, n: int) -> int:
        """Scrypt only accepts a power of two as its cost parameter."""
        if n & (n - 1) != 0:
            raise ValueError(f"scrypt n must be a power of two, got {n}")
        return n


STANDARD_SCRYPT = ScryptParams(n=STANDARD_SCRYPT_N, p=STANDARD_SCRYPT_P)
LIGHT_SCRYPT = ScryptParams(n=LIGHT_SCRYPT_N, p=LIGHT_SCRYPT_P)


class KeystoreConfig(BaseModel):
    """Settings for writing and scanning keystore files."""

    model_config = ConfigDict(frozen=True)

    scrypt: ScryptParams = STANDARD_SCRYPT
    """Parameters used when encrypting new keys."""

    max_file_size: int = Field(MAX_KEYSTORE_FILE_SIZE, gt=0)
    """Files of this size or larger are skipped when scanning a directory."""

    version: int = KEYSTORE_VERSION
    """The only keystore version that is read and written."""


DEFAULT_KEYSTORE_CONFIG = KeystoreConfig()
