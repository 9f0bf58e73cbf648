# ipcount/models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AddressFamily(str, Enum):
    IPV4 = "IPv4"
    IPV6 = "IPv6"

    @property
    def bits(self) -> int:
        return 32 if self is AddressFamily.IPV4 else 128


@dataclass(frozen=True)
class CanonicalAddress:
    value: int                   # 32-bit for IPv4, 128-bit for IPv6
    family: AddressFamily
    port: Optional[int] = None   # None means "not specified"


@dataclass(frozen=True)
class TableKey:
    """Partition of the dedup index: one table per family/port pair."""
    family: AddressFamily
    port: Optional[int] = None
