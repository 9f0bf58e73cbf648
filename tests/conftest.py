from __future__ import annotations

import logging
from pathlib import Path

import pytest

SAMPLE_LINES = [
    "127.0.0.1",
    "127.0.0.1:80",
    "::1",
    "[::1]:80",
    "2000:2500:0:1::4500:93e3",
    "[2000:2500:0:1::4500:93e3]:80",
    "::ffff:192.168.1.16",
    "[::ffff:192.168.1.16]:80",
    "1::",
    "::",
    "256.0.0.0",
    "::ffff:127.0.0.0.1",
    "spam text",
    "",
    "1000.1.1.1",
    "127.0.0.1",
]


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "ips-list.txt"
    path.write_text("\n".join(SAMPLE_LINES) + "\n", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers the CLI installs so later tests start clean."""
    yield
    logger = logging.getLogger("ipcount")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
