# ipcount/viz/heatmap.py

from __future__ import annotations

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from ipcount.models import AddressFamily
from ipcount.utils.logging import get_logger

log = get_logger(__name__)


def bucket_16(df: pd.DataFrame) -> pd.DataFrame:
    """
    Aggregate a snapshot DataFrame into IPv4 /16 blocks.

    Returns one row per touched /16 with ``bucket_y`` (first octet),
    ``bucket_x`` (second octet), ``unique`` (addresses counted) and ``nodes``
    (/24 blocks touched). Rows for every port are summed together.
    """
    v4 = df[df["family"] == AddressFamily.IPV4.value]
    if v4.empty:
        return pd.DataFrame(columns=["bucket_y", "bucket_x", "unique", "nodes"])

    block = v4["node"].astype("int64") // 256
    grouped = (
        v4.assign(bucket_y=block // 256, bucket_x=block % 256)
        .groupby(["bucket_y", "bucket_x"], as_index=False)
        .agg(unique=("points", "sum"), nodes=("node", "nunique"))
    )
    return grouped


def build_16_heatmap(df: pd.DataFrame, title: str = "Unique IPv4 addresses per /16") -> go.Figure:
    """
    Build a 256x256 heatmap of the IPv4 space, one cell per /16.

    Empty /16 blocks are left blank rather than drawn as zero.
    """
    buckets = bucket_16(df)
    z = np.full((256, 256), np.nan)
    for row in buckets.itertuples(index=False):
        z[int(row.bucket_y), int(row.bucket_x)] = row.unique
    log.info("Heatmap covers %d /16 blocks", len(buckets))

    fig = go.Figure(
        data=go.Heatmap(
            z=z,
            x=list(range(256)),
            y=list(range(256)),
            colorscale="Viridis",
            colorbar=dict(title="unique"),
            hovertemplate="%{y}.%{x}.0.0/16<br>unique: %{z}<extra></extra>",
        )
    )
    fig.update_layout(
        title=title,
        xaxis=dict(title="second octet", constrain="domain"),
        yaxis=dict(title="first octet", autorange="reversed", scaleanchor="x"),
        width=900,
        height=900,
    )
    return fig
