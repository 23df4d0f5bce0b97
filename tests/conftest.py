import pytest
from pytoniq_core import Address, Builder

from walletv5 import WalletV5, WalletV5Options
from walletv5.core.crypto import private_key_to_public_key

NOW = 1_700_000_000


@pytest.fixture
def private_key():
    return bytes(range(32))


@pytest.fixture
def public_key(private_key):
    return private_key_to_public_key(private_key)


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def code():
    return Builder().store_uint(0xDEADBEEF, 32).end_cell()


@pytest.fixture
def address_a():
    return Address("0:" + "11" * 32)


@pytest.fixture
def address_b():
    return Address("-1:" + "ab" * 32)


@pytest.fixture
def message_cell():
    """Stand-in for a serialized MessageRelaxed."""
    return Builder().store_uint(0x1234, 16).end_cell()


@pytest.fixture
def wallet(public_key, code, clock):
    return WalletV5(WalletV5Options(public_key=public_key), code=code, clock=clock)
