from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from pytoniq_core import Builder, Cell

from walletv5.core.exceptions import InvalidActionType
from walletv5.core.utils import check_uint


@dataclass(frozen=True)
class ActionSendMsg:
    # action_send_msg#0ec3c86d mode:(## 8) out_msg:^(MessageRelaxed Any) = OutAction;
    opcode = 0x0EC3C86D

    mode: int
    out_msg: Cell

    def __post_init__(self):
        check_uint('send_mode', self.mode, 8)
        object.__setattr__(self, 'out_msg', message_to_cell(self.out_msg))


OutAction = ActionSendMsg


def message_to_cell(message: Any) -> Cell:
    if isinstance(message, Cell):
        return message
    # pytoniq_core tlb schemes (MessageAny and friends)
    return message.serialize()


def pack_out_list(actions: Sequence[OutAction]) -> Cell:
    # out_list_empty$_ = OutList 0;
    # out_list$_ {n:#} prev:^(OutList n) action:OutAction = OutList (n + 1);
    cell = Builder().end_cell()
    for action in actions:
        if not isinstance(action, ActionSendMsg):
            raise InvalidActionType(action)
        cell = Builder() \
            .store_ref(cell) \
            .store_uint(ActionSendMsg.opcode, 32) \
            .store_uint(action.mode, 8) \
            .store_ref(action.out_msg) \
            .end_cell()
    return cell


def load_out_list(cell: Cell) -> list[OutAction]:
    actions = []
    current = cell
    while True:
        s = current.begin_parse()
        if s.remaining_bits == 0 and s.remaining_refs == 0:
            break
        current = s.load_ref()
        opcode = s.load_uint(32)
        if opcode != ActionSendMsg.opcode:
            raise InvalidActionType(opcode)
        actions.append(ActionSendMsg(s.load_uint(8), s.load_ref()))
    actions.reverse()
    return actions
