# ipcount/processing/counter.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Optional, Tuple

from ipcount.config import CountConfig
from ipcount.models import AddressFamily, CanonicalAddress, TableKey
from ipcount.processing.dedup import DedupTable, Words
from ipcount.processing.normalize import format_address, normalize_address
from ipcount.utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class CountStats:
    lines: int = 0
    rejected: int = 0
    duplicates: int = 0
    by_family: Dict[AddressFamily, int] = field(
        default_factory=lambda: {AddressFamily.IPV4: 0, AddressFamily.IPV6: 0}
    )


class AddressCounter:
    """
    Running count of unique addresses for one pass over the input.

    Every (family, port) pair gets its own DedupTable, so IPv4, IPv6 and
    IPv4-mapped IPv6 all go through the same node/point bitmaps. With
    ``track_ports`` disabled the port is dropped from the key and
    ``10.0.0.1`` / ``10.0.0.1:80`` count once.
    """

    def __init__(self, config: Optional[CountConfig] = None) -> None:
        self.config = config or CountConfig()
        self.stats = CountStats()
        self._tables: Dict[TableKey, DedupTable] = {}
        self._unique = 0
        self._echoed = 0
        self._echo = self.config.verbose

    @property
    def unique_count(self) -> int:
        return self._unique

    def table_key(self, address: CanonicalAddress) -> TableKey:
        port = address.port if self.config.track_ports else None
        return TableKey(address.family, port)

    def record_if_new(self, address: CanonicalAddress) -> bool:
        key = self.table_key(address)
        table = self._tables.get(key)
        if table is None:
            table = self._tables[key] = DedupTable()

        if not table.record_if_new(address.value):
            self.stats.duplicates += 1
            return False

        self._unique += 1
        self.stats.by_family[address.family] += 1
        return True

    def process_line(self, text: str) -> bool:
        """
        Normalize one raw line and count it. Returns True if the line added
        a new unique address.
        """
        self.stats.lines += 1
        address = normalize_address(text)
        if address is None:
            self.stats.rejected += 1
            log.debug("Skipping line %d, not an address: %r", self.stats.lines, text)
            return False

        added = self.record_if_new(address)
        if added and self._echo:
            self._echo_new(text, address)
        return added

    def process_lines(self, lines: Iterable[str]) -> int:
        for line in lines:
            self.process_line(line)
        return self._unique

    def _echo_new(self, text: str, address: CanonicalAddress) -> None:
        self._echoed += 1
        log.info("%s => %s (%s)", text, format_address(address), address.family.value)
        limit = self.config.verbose_limit
        if limit and self._echoed >= limit:
            self._echo = False
            log.info("Verbose output limit reached after %d addresses", limit)

    def tables(self) -> Iterator[Tuple[TableKey, DedupTable]]:
        return iter(self._tables.items())

    def table(self, family: AddressFamily, port: Optional[int] = None) -> Optional[DedupTable]:
        return self._tables.get(TableKey(family, port))

    def snapshot(self) -> Iterator[Tuple[TableKey, int, Words]]:
        """Walk every (key, node, words) triple. Order is not guaranteed."""
        for key, table in self._tables.items():
            for node, words in table.items():
                yield key, node, words

    @property
    def nodes(self) -> int:
        return sum(len(table) for table in self._tables.values())
