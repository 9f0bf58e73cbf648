# ipcount/processing/dedup.py

from __future__ import annotations

from array import array
from typing import Dict, Iterator, List, Tuple

POINT_BITS = 8
POINT_MASK = (1 << POINT_BITS) - 1
WORD_BITS = 64
SEGMENTS_PER_NODE = (1 << POINT_BITS) // WORD_BITS   # 4 words = 256 bits
SEGMENT_BYTES = SEGMENTS_PER_NODE * WORD_BITS // 8   # 32 bytes per node

Words = Tuple[int, int, int, int]


class InvariantError(AssertionError):
    """Internal contract broken between the normalizer and the dedup table."""


def split_address(value: int) -> Tuple[int, int]:
    """Split an address value into (node, point): everything but the last 8 bits, and the last 8 bits."""
    if value < 0:
        raise InvariantError(f"address value must be unsigned, got {value}")
    return value >> POINT_BITS, value & POINT_MASK


class DedupTable:
    """
    Presence index keyed by node, with a 256-bit bitmap of points per node.

    For IPv4 a node is the top three octets and a point is the last octet,
    so the table never holds more than 2**24 nodes. The bitmaps live in one
    contiguous array of unsigned 64-bit words, four per node, and ``_slots``
    maps a node to the index of its first word. Storage therefore grows
    with the number of distinct nodes touched, never with the number of
    addresses.
    """

    def __init__(self) -> None:
        self._slots: Dict[int, int] = {}
        self._words = array("Q")
        self._count = 0

    def __len__(self) -> int:
        return len(self._slots)

    @property
    def count(self) -> int:
        """Number of distinct addresses recorded."""
        return self._count

    @property
    def segment_bytes(self) -> int:
        return self._words.itemsize * len(self._words)

    def _locate(self, point: int) -> Tuple[int, int]:
        if not 0 <= point <= POINT_MASK:
            raise InvariantError(f"point out of range: {point}")
        segment, offset = divmod(point, WORD_BITS)
        if segment >= SEGMENTS_PER_NODE:
            raise InvariantError(f"segment index out of range: {segment}")
        return segment, offset

    def record_if_new(self, value: int) -> bool:
        """
        Record an address value. Returns True if it was not seen before.
        """
        node, point = split_address(value)
        segment, offset = self._locate(point)

        slot = self._slots.get(node)
        if slot is None:
            slot = len(self._words)
            self._words.extend([0] * SEGMENTS_PER_NODE)
            self._slots[node] = slot

        index = slot + segment
        old_word = self._words[index]
        new_word = old_word | (1 << offset)
        if new_word == old_word:
            return False

        self._words[index] = new_word
        self._count += 1
        return True

    def contains(self, value: int) -> bool:
        node, point = split_address(value)
        segment, offset = self._locate(point)
        slot = self._slots.get(node)
        if slot is None:
            return False
        return bool(self._words[slot + segment] >> offset & 1)

    def words(self, node: int) -> Words:
        slot = self._slots.get(node)
        if slot is None:
            return (0, 0, 0, 0)
        w = self._words
        return (w[slot], w[slot + 1], w[slot + 2], w[slot + 3])

    def points(self, node: int) -> List[int]:
        """Sorted list of points set for ``node``."""
        found = []
        for segment, word in enumerate(self.words(node)):
            base = segment * WORD_BITS
            while word:
                low = word & -word
                found.append(base + low.bit_length() - 1)
                word ^= low
        return found

    def items(self) -> Iterator[Tuple[int, Words]]:
        """Yield (node, words) pairs. Order is not guaranteed."""
        for node in self._slots:
            yield node, self.words(node)
