# ipcount/config.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_INPUT_FILENAME = "ips-list.txt"


@dataclass
class CountConfig:
    """Settings for one counting run."""

    input_path: Path = Path(DEFAULT_INPUT_FILENAME)

    # Same address with different ports counts twice when enabled
    track_ports: bool = True

    # Echo newly counted lines to the log, stopping after verbose_limit (0 = no limit)
    verbose: bool = False
    verbose_limit: int = 10

    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        self.input_path = Path(self.input_path)
        if self.verbose_limit < 0:
            raise ValueError(f"verbose_limit must be >= 0, got {self.verbose_limit}")
