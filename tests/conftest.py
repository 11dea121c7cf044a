import pytest

from ethereum_signing import PrivateKey, Transaction, TransactionType
from tests.helpers import EIP155_RECIPIENT, SECRET_KEY


@pytest.fixture
def secret_key() -> bytes:
    """
    Well known secret key used by the signing vectors.
    """
    return SECRET_KEY


@pytest.fixture
def private_key() -> PrivateKey:
    """
    Key facade around `secret_key`.
    """
    return PrivateKey(SECRET_KEY)


@pytest.fixture
def eip155_transaction() -> Transaction:
    """
    Unsigned legacy transaction from the EIP-155 example, without a chain id.
    """
    return Transaction(
        ty=TransactionType.LEGACY,
        nonce=9,
        gas_price=20_000_000_000,
        gas_limit=21000,
        to=EIP155_RECIPIENT,
        value=10**18,
    )
