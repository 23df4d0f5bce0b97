from __future__ import annotations

from pytoniq_core import Builder, Cell, Slice

from walletv5.core.crypto import SIGNATURE_LENGTH, verify
from walletv5.core.exceptions import WalletV5Error
from walletv5.messages.actions import load_extended_actions
from walletv5.messages.out_list import load_out_list

SIGNATURE_BITS = SIGNATURE_LENGTH * 8


class WalletV5R1Data:
    # contract_state$_ is_signature_allowed:(## 1) seqno:# wallet_id:(## 32)
    #                  public_key:(## 256) extensions_dict:(HashmapE 256 int1) = ContractState;
    signature_allowed: bool
    seqno: int
    wallet_id: int
    public_key: bytes
    extensions: Cell | None

    def __init__(self, slice: Slice):
        self.signature_allowed = slice.load_bool()
        self.seqno = slice.load_uint(32)
        self.wallet_id = slice.load_int(32)
        self.public_key = slice.load_bytes(32)
        self.extensions = slice.load_maybe_ref()


class WalletV5R1Request:
    signed_internal_opcode = 0x73696E74
    signed_external_opcode = 0x7369676E

    opcode: int
    wallet_id: int
    valid_until: int
    seqno: int
    out_actions: list
    extended_actions: list
    signature: bytes | None

    def __init__(self, slice: Slice, signed: bool = True):
        self.opcode = slice.load_uint(32)
        if self.opcode not in (self.signed_internal_opcode, self.signed_external_opcode):
            raise WalletV5Error(f"Unknown wallet v5 request prefix: {self.opcode:#x}")
        self.wallet_id = slice.load_int(32)
        self.valid_until = slice.load_uint(32)
        self.seqno = slice.load_uint(32)
        reserved = SIGNATURE_BITS if signed else 0

        out_list = slice.load_maybe_ref()
        self.out_actions = load_out_list(out_list) if out_list is not None else []
        self.has_extended_actions = slice.load_bool()
        if self.has_extended_actions:
            self.extended_actions = load_extended_actions(slice, reserved)
        else:
            self.extended_actions = []
        self.signature = slice.load_bytes(SIGNATURE_LENGTH) if signed else None

    @property
    def is_internal(self) -> bool:
        return self.opcode == self.signed_internal_opcode


def unsigned_body(body: Cell) -> Cell:
    if len(body.bits) < SIGNATURE_BITS:
        raise WalletV5Error("Wallet v5 request body is too short to carry a signature")
    builder = Builder().store_bits(body.bits[:-SIGNATURE_BITS])
    for ref in body.refs:
        builder.store_ref(ref)
    return builder.end_cell()


def verify_body_signature(body: Cell, public_key: bytes) -> bool:
    unsigned = unsigned_body(body)
    signature = body.bits[-SIGNATURE_BITS:].tobytes()
    return verify(unsigned.hash, signature, public_key)


def parse_wallet_v5_request(body: bytes, signed: bool = True) -> WalletV5R1Request:
    return WalletV5R1Request(Slice.one_from_boc(body), signed)
