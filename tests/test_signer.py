"""
Test suite for signing and signer recovery.
"""

import pytest
from ethereum_types.numeric import U256

from ethereum_signing.base_types import AccessTuple, Address, Hash, Signature
from ethereum_signing.crypto.elliptic_curve import (
    SECP256K1N,
    secp256k1_recover,
    secret_key_to_address,
    secret_key_to_public_key,
    validate_secret_key,
)
from ethereum_signing.crypto.hash import keccak256
from ethereum_signing.exceptions import (
    ChainIdMismatchError,
    InvalidKeyError,
    InvalidLengthError,
    InvalidSignatureComponentError,
    InvalidSignerError,
    MissingSignatureError,
    RecoveryFailedError,
)
from ethereum_signing.message import add_message_prefix
from ethereum_signing.signer import (
    recover_hash,
    recover_message,
    recover_transaction,
    sign_hash,
    sign_message,
    sign_transaction,
    transaction_recovery_id,
)
from ethereum_signing.transactions import (
    Transaction,
    TransactionType,
    decode_transaction,
    signing_hash,
)

from tests.helpers import SECRET_KEY_ADDRESS

HASH_SIGNATURE = Signature(
    v=0x1B,
    r=0x97EF30233EAD25D10F7BB2BF9EAF571A16F2DEB33A75F20819284F0CB8FF3CC1,
    s=0x4870CA05940199C113B4DC77866F001702691CDE269F6835581E7AEA1EAD2660,
)
MESSAGE_SIGNATURE = Signature(
    v=0x1B,
    r=0x0F2B67E452D18CE781203F10380EA5A2726494162C49C495069CF99118BCF199,
    s=0x51601FE3219055482C45A14BF616C3E2BC7914C953F438627DE2AA541EEF61B5,
)


def transaction_to_sign(ty: TransactionType, **kwargs) -> Transaction:
    """
    Unsigned transaction used by the signing vectors.
    """
    tx = Transaction(
        ty=ty,
        to="0x3535353535353535353535353535353535353535",
        gas_limit=21000,
        nonce=9,
        value=10**18,
    )
    if ty == TransactionType.DYNAMIC_FEE:
        tx.set_max_fee_per_gas(20 * 10**9).set_max_priority_fee_per_gas(20 * 10**9)
    else:
        tx.set_gas_price(20 * 10**9)
    for name, value in kwargs.items():
        setattr(tx, name, value)
    return tx


TRANSACTION_VECTORS = [
    pytest.param(
        transaction_to_sign(TransactionType.LEGACY),
        Signature(
            v=0x1B,
            r=0x2BFAD43BA1B40E7F3FFB6342B1A6EECC700DD344FB0ABA543AED5C10FD1A9470,
            s=0x615BFF48C483D368ED4F6E327A6DDD8831E544D0CA08F1345433E4ED204F8537,
        ),
        id="legacy",
    ),
    pytest.param(
        transaction_to_sign(TransactionType.LEGACY, chain_id=1337),
        Signature(
            v=0xA95,
            r=0x14702A15DD7739397F25E3902A0C2BF6989E93888201139AAC2C67A8F33A2F3F,
            s=0x4A10BA6CF47ACE7E3C847E38583F5B1E1C7D8A862F4B43CD74480A03007363F7,
        ),
        id="legacy-eip-155",
    ),
    pytest.param(
        transaction_to_sign(TransactionType.ACCESS_LIST, chain_id=1),
        Signature(
            v=0x1,
            r=0xDC1FCD0C6F56EDDC8DBE70635690CCE521276B8A6E167F8E57E4064DB8A5738E,
            s=0x2743F261C001EE472C9664258708EAF849FC85623EE337D2018D37FC6F397D8C,
        ),
        id="access-list",
    ),
    pytest.param(
        transaction_to_sign(TransactionType.DYNAMIC_FEE, chain_id=1),
        Signature(
            v=0x0,
            r=0x62072D055F9CEB871A47F2D81AEB5AA34DF50C625DA16C6D0D57D232FA3CD152,
            s=0x57FD88DF7C85076F5729493BE7E87F51B618A78BC89441ED741BDFDB9D1D5572,
        ),
        id="dynamic-fee",
    ),
]


#
# Curve primitives
#


def test_secret_key_to_address(secret_key: bytes) -> None:
    assert secret_key_to_address(secret_key) == SECRET_KEY_ADDRESS
    assert len(secret_key_to_public_key(secret_key)) == 64


@pytest.mark.parametrize(
    "secret",
    [
        pytest.param(b"\x00" * 32, id="zero"),
        pytest.param(int(SECP256K1N).to_bytes(32, "big"), id="order"),
        pytest.param(b"\xff" * 32, id="above-order"),
        pytest.param(b"\x01" * 31, id="short"),
    ],
)
def test_invalid_secret_key(secret: bytes) -> None:
    with pytest.raises(InvalidKeyError):
        validate_secret_key(secret)
    with pytest.raises(InvalidKeyError):
        sign_hash(secret, b"\x02" * 32)


@pytest.mark.parametrize(
    "secret",
    [
        pytest.param((1).to_bytes(32, "big"), id="one"),
        pytest.param((int(SECP256K1N) - 1).to_bytes(32, "big"), id="order-minus-one"),
        pytest.param(b"\x02" * 32, id="arbitrary"),
    ],
)
def test_valid_secret_key(secret: bytes) -> None:
    assert validate_secret_key(secret) == secret
    signature = sign_hash(secret, b"\x02" * 32)
    assert recover_hash(b"\x02" * 32, signature) == secret_key_to_address(secret)


@pytest.mark.parametrize(
    "r, s, recovery_id",
    [
        pytest.param(0, 1, 0, id="zero-r"),
        pytest.param(1, 0, 0, id="zero-s"),
        pytest.param(int(SECP256K1N), 1, 0, id="r-is-order"),
        pytest.param(1, int(SECP256K1N), 0, id="s-is-order"),
        pytest.param(1, 1, 2, id="recovery-id"),
    ],
)
def test_secp256k1_recover_rejects_components(r: int, s: int, recovery_id: int) -> None:
    with pytest.raises(InvalidSignatureComponentError):
        secp256k1_recover(U256(r), U256(s), recovery_id, b"\x02" * 32)


def test_secp256k1_recover_off_curve_r() -> None:
    # x = 5 has no matching y on secp256k1
    with pytest.raises(RecoveryFailedError):
        secp256k1_recover(U256(5), U256(1), 0, b"\x02" * 32)


#
# Hashes and messages
#


def test_sign_hash(secret_key: bytes) -> None:
    assert sign_hash(secret_key, b"\x02" * 32) == HASH_SIGNATURE


def test_sign_hash_is_deterministic(secret_key: bytes) -> None:
    assert sign_hash(secret_key, b"\x03" * 32) == sign_hash(secret_key, b"\x03" * 32)


def test_sign_hash_wrong_length(secret_key: bytes) -> None:
    with pytest.raises(InvalidLengthError):
        sign_hash(secret_key, b"\x02" * 31)


def test_recover_hash() -> None:
    assert recover_hash(b"\x02" * 32, HASH_SIGNATURE) == SECRET_KEY_ADDRESS


def test_recover_hash_accepts_raw_recovery_id() -> None:
    signature = HASH_SIGNATURE.model_copy(update={"v": 0})
    assert recover_hash(b"\x02" * 32, signature) == SECRET_KEY_ADDRESS


@pytest.mark.parametrize("v", [2, 26, 29, 35, 37])
def test_recover_hash_invalid_v(v: int) -> None:
    signature = HASH_SIGNATURE.model_copy(update={"v": v})
    with pytest.raises(InvalidSignatureComponentError):
        recover_hash(b"\x02" * 32, signature)


def test_recover_hash_other_digest() -> None:
    assert recover_hash(b"\x03" * 32, HASH_SIGNATURE) != SECRET_KEY_ADDRESS


def test_add_message_prefix() -> None:
    assert add_message_prefix(b"hello world") == (
        b"\x19Ethereum Signed Message:\n11hello world"
    )
    assert add_message_prefix(b"") == b"\x19Ethereum Signed Message:\n0"


def test_sign_message(secret_key: bytes) -> None:
    assert sign_message(secret_key, b"hello world") == MESSAGE_SIGNATURE


def test_recover_message() -> None:
    assert recover_message(b"hello world", MESSAGE_SIGNATURE) == SECRET_KEY_ADDRESS
    assert recover_message(b"hello world!", MESSAGE_SIGNATURE) != SECRET_KEY_ADDRESS


@pytest.mark.parametrize(
    "data",
    [
        pytest.param(b"a", id="one-byte"),
        pytest.param(b"hello world", id="text"),
        pytest.param(b"\x00" * 100, id="zeros"),
        pytest.param(bytes(range(256)), id="all-bytes"),
    ],
)
def test_message_signature_differs_from_hash_signature(secret_key: bytes, data: bytes) -> None:
    signature = sign_message(secret_key, data)
    assert signature != sign_hash(secret_key, keccak256(data))
    assert recover_message(data, signature) == SECRET_KEY_ADDRESS
    assert recover_hash(keccak256(data), signature) != SECRET_KEY_ADDRESS



#
# Transactions
#


@pytest.mark.parametrize("tx, expected", TRANSACTION_VECTORS)
def test_sign_transaction(secret_key: bytes, tx: Transaction, expected: Signature) -> None:
    """
    Test transaction signatures against known signatures.
    """
    signed = sign_transaction(secret_key, tx)

    assert signed.signature == expected
    assert signed.sender == SECRET_KEY_ADDRESS
    assert tx.signature is None
    assert tx.sender is None


@pytest.mark.parametrize("tx, expected", TRANSACTION_VECTORS)
def test_recover_transaction(tx: Transaction, expected: Signature) -> None:
    """
    Test that the signer is recovered from a known signature, also after the
    transaction went through its wire encoding.
    """
    signed = tx.model_copy().set_signature(expected)
    assert recover_transaction(signed) == SECRET_KEY_ADDRESS

    decoded, _ = decode_transaction(signed.raw())
    assert recover_transaction(decoded) == SECRET_KEY_ADDRESS


def test_recover_eip155_example() -> None:
    """
    Test the signed transaction of the example in EIP-155.
    """
    raw = bytes.fromhex(
        "f86c098504a817c800825208943535353535353535353535353535353535353535880de0b6b3"
        "a76400008025a028ef61340bd939bc2195fe537567866003e1a15d3c71ff63e1590620aa6362"
        "76a067cbe9d8997f761aecb703304b3800ccf555c9f3dc64214b297fb1966a3b6d83"
    )
    tx, _ = decode_transaction(raw)
    assert recover_transaction(tx) == Address("0x9d8a62f656a8d1615c1294fd71e9cfb3e4855a4f")


def test_sign_transaction_with_matching_sender(secret_key: bytes) -> None:
    tx = transaction_to_sign(TransactionType.LEGACY).set_from(SECRET_KEY_ADDRESS)
    assert sign_transaction(secret_key, tx).sender == SECRET_KEY_ADDRESS


def test_sign_transaction_with_other_sender(secret_key: bytes) -> None:
    tx = transaction_to_sign(TransactionType.LEGACY).set_from(
        "0x1111111111111111111111111111111111111111"
    )
    with pytest.raises(InvalidSignerError) as e:
        sign_transaction(secret_key, tx)
    assert e.value.expected == "0x1111111111111111111111111111111111111111"
    assert e.value.actual == SECRET_KEY_ADDRESS
    assert tx.signature is None


def test_sign_transaction_replaces_signature(secret_key: bytes) -> None:
    tx = transaction_to_sign(TransactionType.DYNAMIC_FEE, chain_id=1)
    tx.set_signature(Signature(v=1, r=1, s=1))
    signed = sign_transaction(secret_key, tx)
    assert signed.r == 0x62072D055F9CEB871A47F2D81AEB5AA34DF50C625DA16C6D0D57D232FA3CD152
    assert tx.r == 1


@pytest.mark.parametrize(
    "ty",
    [TransactionType.LEGACY, TransactionType.ACCESS_LIST, TransactionType.DYNAMIC_FEE],
)
def test_signed_copy_does_not_share_state(secret_key: bytes, ty: TransactionType) -> None:
    tx = transaction_to_sign(ty, chain_id=1, access_list=[])
    signed = sign_transaction(secret_key, tx)
    raw = signed.raw()

    tx.access_list.append(
        AccessTuple(address="0x3333333333333333333333333333333333333333")
    )
    assert signed.access_list == []
    assert signed.raw() == raw
    assert recover_transaction(signed) == SECRET_KEY_ADDRESS


def test_signed_copy_does_not_share_storage_keys(secret_key: bytes) -> None:
    entry = AccessTuple(
        address="0x3333333333333333333333333333333333333333", storage_keys=[]
    )
    tx = transaction_to_sign(TransactionType.ACCESS_LIST, chain_id=1, access_list=[entry])
    signed = sign_transaction(secret_key, tx)

    tx.access_list[0].storage_keys.append(Hash(b"\x44" * 32))
    assert signed.access_list[0].storage_keys == []
    assert recover_transaction(signed) == SECRET_KEY_ADDRESS


@pytest.mark.parametrize(
    "chain_id",
    [
        pytest.param(1, id="mainnet"),
        pytest.param(5, id="goerli"),
        pytest.param(1337, id="dev"),
        pytest.param(2**64 + 1, id="wide"),
    ],
)
def test_eip155_chain_id_round_trip(secret_key: bytes, chain_id: int) -> None:
    tx = transaction_to_sign(TransactionType.LEGACY, chain_id=chain_id)
    other = transaction_to_sign(TransactionType.LEGACY, chain_id=chain_id + 1)
    unprotected = transaction_to_sign(TransactionType.LEGACY)
    assert signing_hash(tx) != signing_hash(other)
    assert signing_hash(tx) != signing_hash(unprotected)

    signed = sign_transaction(secret_key, tx)
    assert signed.v in (35 + 2 * chain_id, 36 + 2 * chain_id)

    decoded, _ = decode_transaction(signed.raw())
    assert decoded.chain_id == chain_id
    assert transaction_recovery_id(decoded)[1] == chain_id
    assert recover_transaction(decoded) == SECRET_KEY_ADDRESS



def test_recover_unsigned_transaction() -> None:
    with pytest.raises(MissingSignatureError):
        recover_transaction(transaction_to_sign(TransactionType.LEGACY))
    with pytest.raises(MissingSignatureError):
        recover_transaction(
            transaction_to_sign(TransactionType.ACCESS_LIST).set_signature(Signature())
        )
    with pytest.raises(MissingSignatureError):
        recover_transaction(transaction_to_sign(TransactionType.LEGACY, v=27))


def test_recover_chain_id_mismatch(secret_key: bytes) -> None:
    signed = sign_transaction(
        secret_key, transaction_to_sign(TransactionType.LEGACY, chain_id=1337)
    )
    signed.set_chain_id(5)
    with pytest.raises(ChainIdMismatchError) as e:
        recover_transaction(signed)
    assert e.value.expected == 5
    assert e.value.actual == 1337


def test_recover_eip155_without_chain_id(secret_key: bytes) -> None:
    signed = sign_transaction(
        secret_key, transaction_to_sign(TransactionType.LEGACY, chain_id=1337)
    )
    signed.set_chain_id(None)
    assert recover_transaction(signed) == SECRET_KEY_ADDRESS


@pytest.mark.parametrize("v", [2, 27, 28, 37])
def test_recover_typed_transaction_invalid_v(v: int) -> None:
    tx = transaction_to_sign(TransactionType.DYNAMIC_FEE, chain_id=1)
    tx.set_signature(Signature(v=v, r=1, s=1))
    with pytest.raises(InvalidSignatureComponentError):
        recover_transaction(tx)


@pytest.mark.parametrize(
    "ty, v, chain_id, expected",
    [
        (TransactionType.LEGACY, 27, None, (0, None)),
        (TransactionType.LEGACY, 28, None, (1, None)),
        (TransactionType.LEGACY, 0, None, (0, None)),
        (TransactionType.LEGACY, 37, None, (0, 1)),
        (TransactionType.LEGACY, 38, 1, (1, 1)),
        (TransactionType.LEGACY, 0xA95, 1337, (0, 1337)),
        (TransactionType.ACCESS_LIST, 1, 1, (1, None)),
        (TransactionType.DYNAMIC_FEE, 0, 1, (0, None)),
    ],
)
def test_transaction_recovery_id(ty, v, chain_id, expected) -> None:
    tx = Transaction(ty=ty, chain_id=chain_id, v=v, r=1, s=1)
    assert transaction_recovery_id(tx) == expected
