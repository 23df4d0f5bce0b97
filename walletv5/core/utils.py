from __future__ import annotations

from base64 import (
    b64decode,
    urlsafe_b64decode,
)

from pytoniq_core import Cell

from walletv5.core.exceptions import FieldOverflow


def hex_to_bytes(value: str):
    return bytes.fromhex(value)


def b64_to_bytes(value: str):
    return b64decode(value)


def b64url_to_bytes(value: str):
    return urlsafe_b64decode(value)


def boc_to_bytes(value: str) -> bytes:
    value = value.strip()
    try:
        return hex_to_bytes(value)
    except ValueError:
        pass
    if '-' in value or '_' in value:
        return b64url_to_bytes(value)
    return b64_to_bytes(value)


def cell_from_boc(value: str | bytes) -> Cell:
    if isinstance(value, str):
        value = boc_to_bytes(value)
    return Cell.one_from_boc(value)


def check_uint(field: str, value: int, bits: int) -> int:
    if not 0 <= value < 1 << bits:
        raise FieldOverflow(field, value, bits)
    return value


def check_int(field: str, value: int, bits: int) -> int:
    if not -(1 << (bits - 1)) <= value < 1 << (bits - 1):
        raise FieldOverflow(field, value, bits)
    return value
