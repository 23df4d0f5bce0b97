from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Sequence

from loguru import logger
from pytoniq_core import Address, Builder, Cell, HashMap, StateInit
from pytoniq_core.tlb.transaction import ExternalMsgInfo, MessageAny

from walletv5.core.crypto import sign
from walletv5.core.exceptions import (
    ActionsNotProvided,
    ConfigurationError,
    FieldOverflow,
    InvalidPublicKey,
    TransfersOutOfRange,
)
from walletv5.core.settings import Settings, settings as default_settings
from walletv5.core.utils import cell_from_boc, check_int, check_uint
from walletv5.messages.actions import (
    ActionsOrCell,
    ExtendedAction,
    WalletActions,
    WalletTransfer,
    extended_actions_to_cell,
    is_action_sequence,
)
from walletv5.messages.out_list import pack_out_list
from walletv5.messages.wallet_id import ClientContext, WalletId, serialize_wallet_id

SIGNED_INTERNAL_PREFIX = 0x73696E74
SIGNED_EXTERNAL_PREFIX = 0x7369676E

EXTENSIONS_KEY_SIZE = 256
EXTENSIONS_VALUE_SIZE = 256
MAX_TRANSFERS = 255


@dataclass(frozen=True)
class WalletV5Options:
    public_key: bytes
    signature_allowed: bool = True
    seqno: int = 0
    workchain: int = 0
    wallet_id: WalletId = field(default_factory=WalletId)
    # extension address hash -> 32-byte value
    extensions: Mapping[int, bytes] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, public_key: bytes, settings: Optional[Settings] = None, **kwargs) -> WalletV5Options:
        """
        Fills workchain and wallet id from ``settings``.

        Only option fields come from here; timeout and code are read by
        ``WalletV5``, so use ``WalletV5.from_settings`` to build both from the
        same settings.
        """
        if settings is None:
            settings = default_settings
        kwargs.setdefault('workchain', settings.workchain)
        kwargs.setdefault('wallet_id', WalletId(
            network_global_id=settings.network_global_id,
            context=ClientContext(subwallet_id=settings.subwallet_id),
        ))
        return cls(public_key=public_key, **kwargs)


def _store_extension_value(src: bytes, dest: Builder):
    dest.store_bytes(src)


def _check_extension_value(key: int, value: bytes) -> bytes:
    if len(value) * 8 != EXTENSIONS_VALUE_SIZE:
        raise FieldOverflow(f'extension value for key {key}', f'{len(value)} bytes', EXTENSIONS_VALUE_SIZE)
    return value


def build_extensions_dict(extensions: Mapping[int, bytes]) -> Optional[Cell]:
    if not extensions:
        return None
    hashmap = HashMap(key_size=EXTENSIONS_KEY_SIZE, value_serializer=_store_extension_value)
    for key in sorted(extensions):
        check_uint('extension key', key, EXTENSIONS_KEY_SIZE)
        hashmap.set_int_key(key, _check_extension_value(key, extensions[key]))
    return hashmap.serialize()


class WalletV5:
    """
    Wallet v5r1 contract: persistent data, deploy and request bodies.

    Instances never change after construction. The seqno stored in the options
    only goes into the initial data cell; request bodies take the seqno to use
    as an argument.
    """

    def __init__(self,
                 options: WalletV5Options,
                 code: Optional[Cell] = None,
                 clock: Callable[[], float] = time.time,
                 settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        if code is None:
            if not self.settings.code_boc:
                raise ConfigurationError("WalletV5: contract code is not configured")
            code = cell_from_boc(self.settings.code_boc)
        self.options = options
        self.code = code
        self.clock = clock
        self.public_key = options.public_key
        self.state_init = StateInit(code=self.code, data=self.build_data())
        self.address = Address((options.workchain, self.state_init.serialize().hash))

    @classmethod
    def from_settings(cls,
                      public_key: bytes,
                      settings: Optional[Settings] = None,
                      code: Optional[Cell] = None,
                      clock: Callable[[], float] = time.time,
                      **kwargs) -> WalletV5:
        settings = settings or default_settings
        options = WalletV5Options.from_settings(public_key, settings, **kwargs)
        return cls(options, code=code, clock=clock, settings=settings)

    @property
    def wallet_id(self) -> int:
        return serialize_wallet_id(self.options.wallet_id, self.options.workchain)

    def build_data(self) -> Cell:
        # contract_state$_ is_signature_allowed:(## 1) seqno:# wallet_id:(## 32)
        #                  public_key:(## 256) extensions_dict:(HashmapE 256 bits256) = ContractState;
        options = self.options
        if len(options.public_key) != 32:
            raise InvalidPublicKey(len(options.public_key))
        check_int('workchain', options.workchain, 8)
        return Builder() \
            .store_bit(1 if options.signature_allowed else 0) \
            .store_uint(check_uint('seqno', options.seqno, 32), 32) \
            .store_int(self.wallet_id, 32) \
            .store_bytes(options.public_key) \
            .store_dict(build_extensions_dict(options.extensions)) \
            .end_cell()

    def _store_wallet_actions(self, body: Builder, actions: Optional[ActionsOrCell]):
        if actions is None:
            body.store_bit(0)  # empty out_list
        elif isinstance(actions, Cell):
            body.store_maybe_ref(actions)
        elif is_action_sequence(actions):
            body.store_maybe_ref(pack_out_list(actions))
        else:
            raise ActionsNotProvided()

    def _store_extended_actions(self, body: Builder, actions: Optional[ActionsOrCell]):
        if actions is None:
            body.store_bit(0)
            return
        body.store_bit(1)
        body.store_cell(extended_actions_to_cell(actions))

    def pack_message(self,
                     is_internal: bool,
                     timeout: Optional[int] = None,
                     actions: Optional[WalletActions] = None,
                     seqno: int = 0,
                     private_key: Optional[bytes] = None) -> Cell:
        # signed_request$_ wallet_id:(## 32) valid_until:(## 32) msg_seqno:(## 32)
        #                  inner:InnerRequest signature:bits512 = SignedRequest;
        if timeout is None:
            timeout = self.settings.timeout
        if actions is None:
            actions = WalletActions()
        prefix = SIGNED_INTERNAL_PREFIX if is_internal else SIGNED_EXTERNAL_PREFIX
        valid_until = int(self.clock()) + timeout

        body = Builder() \
            .store_uint(prefix, 32) \
            .store_int(self.wallet_id, 32) \
            .store_uint(check_uint('valid_until', valid_until, 32), 32) \
            .store_uint(check_uint('seqno', seqno, 32), 32)
        self._store_wallet_actions(body, actions.wallet)
        self._store_extended_actions(body, actions.extended)
        unsigned = body.end_cell()

        logger.debug(f"Packed wallet v5 request: prefix={prefix:#x} seqno={seqno} "
                     f"valid_until={valid_until} signed={private_key is not None}")
        if private_key is None:
            return unsigned

        signature = sign(unsigned.hash, private_key)
        return Builder() \
            .store_cell(unsigned) \
            .store_bytes(signature) \
            .end_cell()

    def create_external_message(self, body: Cell) -> MessageAny:
        info = ExternalMsgInfo(None, self.address, 0)
        return MessageAny(info=info, init=self.state_init, body=body)

    def create_deploy_message(self,
                              private_key: Optional[bytes] = None,
                              seqno: int = 0,
                              timeout: Optional[int] = None) -> MessageAny:
        body = self.pack_message(False, timeout, seqno=seqno, private_key=private_key)
        if private_key is None:
            logger.warning(f"Deploy message for {self.address.to_str()} is not signed")
        logger.debug(f"Created wallet v5 deploy message for {self.address.to_str()}")
        return self.create_external_message(body)

    def create_transfer_message(self,
                                transfers: Sequence[WalletTransfer],
                                seqno: int,
                                private_key: Optional[bytes] = None,
                                timeout: Optional[int] = None) -> MessageAny:
        if len(transfers) == 0 or len(transfers) > MAX_TRANSFERS:
            raise TransfersOutOfRange(count=len(transfers))

        actions = [transfer.to_action() for transfer in transfers]
        body = self.pack_message(False, timeout, WalletActions(wallet=actions), seqno, private_key)
        if private_key is None:
            logger.warning(f"Transfer message for {self.address.to_str()} is not signed")
        logger.debug(f"Created wallet v5 transfer message: {len(transfers)} transfers, seqno={seqno}")
        return self.create_external_message(body)

    def create_extension_message(self,
                                 actions: Sequence[ExtendedAction] | Cell,
                                 seqno: int,
                                 private_key: Optional[bytes] = None,
                                 timeout: Optional[int] = None) -> MessageAny:
        body = self.pack_message(False, timeout, WalletActions(extended=actions), seqno, private_key)
        if private_key is None:
            logger.warning(f"Extension message for {self.address.to_str()} is not signed")
        return self.create_external_message(body)

    def create_internal_request_body(self,
                                     actions: WalletActions,
                                     seqno: int,
                                     private_key: Optional[bytes] = None,
                                     timeout: Optional[int] = None) -> Cell:
        return self.pack_message(True, timeout, actions, seqno, private_key)
