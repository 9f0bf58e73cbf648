# ipcount/datasources/text_lines.py

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from ipcount.utils.logging import get_logger

log = get_logger(__name__)


def iter_lines(path: Path, encoding: str = "utf-8") -> Iterator[str]:
    """
    Yield the lines of ``path`` with line terminators removed.

    Nothing else is stripped: surrounding whitespace is part of the line and
    is judged by the normalizer.
    """
    path = Path(path)
    log.info("Reading %s (encoding=%s)", path, encoding)
    with path.open("r", encoding=encoding, newline="") as fin:
        for line in fin:
            yield line.rstrip("\r\n")
