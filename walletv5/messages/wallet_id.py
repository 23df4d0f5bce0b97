from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Union

from pytoniq_core import Builder

from walletv5.core.utils import check_int, check_uint

MAINNET_GLOBAL_ID = -239
TESTNET_GLOBAL_ID = -3


class WalletV5Version(IntEnum):
    V5R1 = 0


@dataclass(frozen=True)
class ClientContext:
    # wallet_id_client$1 workchain:int8 version:uint8 subwallet_id:uint15
    version: WalletV5Version = WalletV5Version.V5R1
    subwallet_id: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'version', WalletV5Version(self.version))
        check_uint('subwallet_id', self.subwallet_id, 15)


@dataclass(frozen=True)
class CustomContext:
    # wallet_id_custom$0 value:uint31
    value: int

    def __post_init__(self):
        check_uint('context value', self.value, 31)


WalletIdContext = Union[ClientContext, CustomContext]


@dataclass(frozen=True)
class WalletId:
    network_global_id: int = MAINNET_GLOBAL_ID
    context: WalletIdContext = field(default_factory=ClientContext)

    def __post_init__(self):
        check_int('network_global_id', self.network_global_id, 32)
        if not isinstance(self.context, (ClientContext, CustomContext)):
            raise TypeError(f"Unsupported wallet id context: {type(self.context).__name__}")


@dataclass(frozen=True)
class ParsedWalletId:
    context: WalletIdContext
    workchain: Optional[int] = None


def serialize_context(context: WalletIdContext, workchain: int) -> int:
    """
    Packs the context into 32 bits and reads them back as a signed integer.
    """
    builder = Builder()
    if isinstance(context, ClientContext):
        builder.store_uint(1, 1) \
            .store_int(check_int('workchain', workchain, 8), 8) \
            .store_uint(context.version, 8) \
            .store_uint(context.subwallet_id, 15)
    elif isinstance(context, CustomContext):
        builder.store_uint(0, 1) \
            .store_uint(context.value, 31)
    else:
        raise TypeError(f"Unsupported wallet id context: {type(context).__name__}")
    return builder.end_cell().begin_parse().load_int(32)


def serialize_wallet_id(wallet_id: WalletId, workchain: int = 0) -> int:
    return wallet_id.network_global_id ^ serialize_context(wallet_id.context, workchain)


def parse_wallet_id(value: int, network_global_id: int = MAINNET_GLOBAL_ID) -> ParsedWalletId:
    check_int('wallet_id', value, 32)
    context_bits = value ^ network_global_id
    s = Builder().store_int(context_bits, 32).end_cell().begin_parse()
    if s.load_bit():
        workchain = s.load_int(8)
        version = WalletV5Version(s.load_uint(8))
        subwallet_id = s.load_uint(15)
        return ParsedWalletId(ClientContext(version, subwallet_id), workchain)
    return ParsedWalletId(CustomContext(s.load_uint(31)))
