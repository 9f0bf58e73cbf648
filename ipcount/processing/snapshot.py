# ipcount/processing/snapshot.py

from __future__ import annotations

import ipaddress

import pandas as pd

from ipcount.models import AddressFamily, TableKey
from ipcount.processing.counter import AddressCounter
from ipcount.processing.dedup import POINT_BITS

SNAPSHOT_COLUMNS = [
    "family",
    "port",
    "node",
    "prefix",
    "seg0",
    "seg1",
    "seg2",
    "seg3",
    "points",
]


def node_prefix(key: TableKey, node: int) -> str:
    """
    CIDR text for the 256 addresses sharing ``node``, e.g. ``1.2.3.0/24``.
    """
    base = node << POINT_BITS
    if key.family is AddressFamily.IPV4:
        return f"{ipaddress.IPv4Address(base)}/24"
    return f"{ipaddress.IPv6Address(base)}/120"


def snapshot_dataframe(counter: AddressCounter) -> pd.DataFrame:
    """
    Flatten the dedup tables of ``counter`` into a DataFrame, one row per node.

    Segment words are rendered as 16-digit hex strings. Rows are sorted by
    family, port and node so dumps are stable between runs.
    """
    rows = []
    for key, node, words in counter.snapshot():
        rows.append({
            "family": key.family.value,
            "port": key.port,
            "node": node,
            "prefix": node_prefix(key, node),
            "seg0": f"{words[0]:016x}",
            "seg1": f"{words[1]:016x}",
            "seg2": f"{words[2]:016x}",
            "seg3": f"{words[3]:016x}",
            "points": sum(bin(w).count("1") for w in words),
        })

    df = pd.DataFrame(rows, columns=SNAPSHOT_COLUMNS)
    if df.empty:
        return df

    # port is None for addresses given without one; keep it nullable
    df["port"] = pd.array([row["port"] for row in rows], dtype="Int64")
    df["points"] = df["points"].astype(int)
    df = df.sort_values(["family", "port", "node"], na_position="first", kind="stable")
    return df.reset_index(drop=True)
