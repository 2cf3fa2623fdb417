"""Typed message buffers that pipes carry between sessions."""

from __future__ import annotations

import datetime
from collections import deque
from dataclasses import dataclass
from decimal import Decimal
from enum import IntEnum
from typing import Any, Deque, Optional, Tuple, Union

LOCALMSGSZ = 8 * 1024
SHMEMMSGSZ = 30 * 1024
MAX_PIPES = 30
MAX_EVENTS = 30
MAX_LOCKS = 256

HEADER_SIZE = 16
ITEM_HEADER_SIZE = 16


def _align(size: int) -> int:
    return (size + 7) & ~7


class ItemType(IntEnum):
    """Type codes of the items in a message."""

    NO_MORE_ITEMS = 0
    NUMBER = 9
    VARCHAR = 11
    DATE = 12
    TIMESTAMPTZ = 13
    BYTEA = 23
    RECORD = 24


@dataclass(frozen=True)
class _Item:
    type: ItemType
    value: Any
    size: int


def _numeric_size(value: Decimal) -> int:
    """Size of the stored decimal: a header plus one word per 4 digits."""
    if not value.is_finite():
        return 2
    _, digits, exponent = value.as_tuple()
    text = "".join(map(str, digits))
    if exponent >= 0:
        int_digits, frac_digits = text + "0" * exponent, ""
    else:
        padded = text.rjust(-exponent + 1, "0")
        int_digits, frac_digits = padded[:exponent], padded[exponent:]
    int_digits = int_digits.lstrip("0")
    frac_digits = frac_digits.rstrip("0")
    int_groups = -(-len(int_digits) // 4)
    frac_groups = -(-len(frac_digits) // 4)
    whole = int_digits.rjust(int_groups * 4, "0") + frac_digits.ljust(
        frac_groups * 4, "0"
    )
    chunks = [whole[start:start + 4] for start in range(0, len(whole), 4)]
    leading = 0
    while chunks and chunks[0] == "0000":
        chunks.pop(0)
        leading += 1
    while chunks and chunks[-1] == "0000":
        chunks.pop()
    if not chunks:
        return 2
    weight = int_groups - 1 - leading
    dscale = max(0, -exponent)
    short = dscale <= 63 and -64 <= weight <= 63
    return (2 if short else 4) + 2 * len(chunks)


def _classify(value: Any) -> Tuple[ItemType, Any, int]:
    if isinstance(value, bool):
        raise TypeError("cannot pack a boolean value")
    if isinstance(value, str):
        return ItemType.VARCHAR, value, len(value.encode("utf-8"))
    if isinstance(value, (bytes, bytearray, memoryview)):
        data = bytes(value)
        return ItemType.BYTEA, data, len(data)
    if isinstance(value, datetime.datetime):
        return ItemType.TIMESTAMPTZ, value, 8
    if isinstance(value, datetime.date):
        return ItemType.DATE, value, 4
    if isinstance(value, (int, float, Decimal)):
        number = value if isinstance(value, Decimal) else Decimal(
            value if isinstance(value, int) else str(value)
        )
        return ItemType.NUMBER, number, _numeric_size(number)
    if isinstance(value, tuple):
        # Column count, then per column a type id, a length and the data.
        size = 4
        for column in value:
            if column is not None:
                size += _classify(column)[2]
            size += 8
        return ItemType.RECORD, value, size + 4
    raise TypeError(f"cannot pack a value of type {type(value).__name__}")


class MessageBuffer:
    """A FIFO of typed items with the size limit of a local message."""

    def __init__(self) -> None:
        self._items: Deque[_Item] = deque()
        self.size = HEADER_SIZE

    def __len__(self) -> int:
        return len(self._items)

    def __copy__(self) -> "MessageBuffer":
        clone = MessageBuffer()
        clone._items = deque(self._items)
        clone.size = self.size
        return clone

    def pack(self, value: Any) -> None:
        """Append ``value``; its Python type decides the item type.

        None is ignored. Strings, bytes, dates, datetimes, numbers and
        tuples (records) are accepted.
        """
        if value is None:
            return
        item_type, stored, size = _classify(value)
        length = _align(size) + ITEM_HEADER_SIZE
        if _align(self.size) + length > LOCALMSGSZ - HEADER_SIZE:
            raise OverflowError(
                "out of memory: Packed message is bigger than local buffer."
            )
        self._items.append(_Item(item_type, stored, size))
        self.size += length

    def next_item_type(self) -> ItemType:
        """Return the type of the next item, or NO_MORE_ITEMS."""
        if not self._items:
            return ItemType.NO_MORE_ITEMS
        return self._items[0].type

    def unpack(self, item_type: Union[ItemType, int]) -> Optional[Any]:
        """Remove and return the next item, which must be of ``item_type``.

        Returns None when the buffer is empty.
        """
        if not self._items:
            return None
        expected = ItemType(item_type)
        head = self._items[0]
        if head.type is not expected:
            raise TypeError(
                f"datatype mismatch: unpack unexpected type: {int(head.type)}"
            )
        self._items.popleft()
        return head.value