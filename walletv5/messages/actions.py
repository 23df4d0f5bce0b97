from __future__ import annotations

from collections.abc import Sequence as SequenceABC
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from pytoniq_core import Address, Builder, Cell, Slice

from walletv5.core.exceptions import ActionsNotProvided, InvalidActionType
from walletv5.messages.out_list import ActionSendMsg, OutAction


@dataclass(frozen=True)
class ExtensionAdd:
    # action_add_ext#02 addr:MsgAddressInt = ExtendedAction;
    tag = 2

    address: Address


@dataclass(frozen=True)
class ExtensionRemove:
    # action_delete_ext#03 addr:MsgAddressInt = ExtendedAction;
    tag = 3

    address: Address


@dataclass(frozen=True)
class SetSignatureAuth:
    # action_set_signature_auth_allowed#04 allowed:(## 1) = ExtendedAction;
    tag = 4

    allowed: bool


ExtendedAction = Union[ExtensionAdd, ExtensionRemove, SetSignatureAuth]

# Either a list of actions or a cell that already holds them
ActionsOrCell = Union[Sequence[Any], Cell]


@dataclass(frozen=True)
class WalletActions:
    wallet: Optional[ActionsOrCell] = None
    extended: Optional[ActionsOrCell] = None


@dataclass(frozen=True)
class WalletTransfer:
    message: Any
    mode: int = 3

    def to_action(self) -> OutAction:
        return ActionSendMsg(self.mode, self.message)


def store_extended_action(builder: Builder, action: ExtendedAction) -> Builder:
    if isinstance(action, ExtensionAdd):
        return builder.store_uint(ExtensionAdd.tag, 8).store_address(action.address)
    elif isinstance(action, ExtensionRemove):
        return builder.store_uint(ExtensionRemove.tag, 8).store_address(action.address)
    elif isinstance(action, SetSignatureAuth):
        return builder.store_uint(SetSignatureAuth.tag, 8).store_bit(1 if action.allowed else 0)
    raise InvalidActionType(action)


def pack_extended_actions(actions: Sequence[ExtendedAction]) -> Cell:
    """
    Builds the linked chain of extended actions.

    Each cell can only reference cells built before it, so the chain is folded
    from the last action to the first: the first action ends up in the root and
    reading the chain front to back yields the order the caller gave.
    """
    cell = Builder().end_cell()
    for action in reversed(actions):
        builder = store_extended_action(Builder(), action)
        cell = builder.store_ref(cell).end_cell()
    return cell


def is_action_sequence(actions: Any) -> bool:
    return isinstance(actions, SequenceABC) and not isinstance(actions, (str, bytes, bytearray))


def extended_actions_to_cell(actions: Optional[ActionsOrCell]) -> Cell:
    if isinstance(actions, Cell):
        return actions
    if is_action_sequence(actions):
        return pack_extended_actions(actions)
    raise ActionsNotProvided()


def load_extended_action(slice: Slice) -> ExtendedAction:
    tag = slice.load_uint(8)
    if tag == ExtensionAdd.tag:
        return ExtensionAdd(slice.load_address())
    elif tag == ExtensionRemove.tag:
        return ExtensionRemove(slice.load_address())
    elif tag == SetSignatureAuth.tag:
        return SetSignatureAuth(slice.load_bool())
    raise InvalidActionType(tag)


def load_extended_actions(slice: Slice, reserved_bits: int = 0) -> list[ExtendedAction]:
    """
    Walks a chain front to back starting at ``slice``.

    ``reserved_bits`` trailing bits of the first slice are not part of the
    chain (a signature appended after an inline chain).
    """
    actions = []
    while slice.remaining_bits > reserved_bits:
        actions.append(load_extended_action(slice))
        slice = slice.load_ref().begin_parse()
        reserved_bits = 0
    return actions
