from __future__ import annotations

import pytest

from ipcount.models import AddressFamily, CanonicalAddress
from ipcount.processing.normalize import format_address, normalize_address, parse_port

V4 = AddressFamily.IPV4
V6 = AddressFamily.IPV6


@pytest.mark.parametrize(
    "text, expected",
    [
        ("127.0.0.1", CanonicalAddress(0x7F000001, V4)),
        ("127.0.0.1:80", CanonicalAddress(0x7F000001, V4, 80)),
        ("0.0.0.0:0", CanonicalAddress(0, V4, 0)),
        ("255.255.255.255:65535", CanonicalAddress(0xFFFFFFFF, V4, 65535)),
        ("::1", CanonicalAddress(1, V6)),
        ("::", CanonicalAddress(0, V6)),
        ("1::", CanonicalAddress(1 << 112, V6)),
        ("[::1]:80", CanonicalAddress(1, V6, 80)),
        (
            "2000:2500:0:1::4500:93e3",
            CanonicalAddress(0x2000_2500_0000_0001_0000_0000_4500_93E3, V6),
        ),
        (
            "[2000:2500:0:1::4500:93e3]:80",
            CanonicalAddress(0x2000_2500_0000_0001_0000_0000_4500_93E3, V6, 80),
        ),
        ("1:2:3:4:5:6:7:8", CanonicalAddress(0x0001_0002_0003_0004_0005_0006_0007_0008, V6)),
        ("::ffff:192.168.1.16", CanonicalAddress(0xFFFF_C0A8_0110, V6)),
        ("[::ffff:192.168.1.16]:80", CanonicalAddress(0xFFFF_C0A8_0110, V6, 80)),
        ("FE80::ABCD", CanonicalAddress(0xFE80 << 112 | 0xABCD, V6)),
    ],
)
def test_normalize_accepts(text, expected):
    assert normalize_address(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        "",
        "spam text",
        "not-an-ip",
        "256.0.0.0",
        "1000.1.1.1",
        "::ffff:127.0.0.0.1",
        "1.2.3",
        "1.2.3.4.5",
        "1.2.3.-4",
        "1.2..4",
        " 1.2.3.4",
        "1.2.3.4:",
        "1.2.3.4:65536",
        "1.2.3.4:80:81",
        "1.2.3.4:http",
        "1:2:3:4:5:6:7:8:9",
        "1::2:3:4:5:6:7:8",
        "1::2::3",
        ":::",
        ":1:2:3:4:5:6:7",
        "1:2:3",
        "12345::",
        "g::1",
        "[::1]",
        "[::1]:",
        "[::1]:70000",
        "[::1]:80]:81",
        "١.2.3.4",
        "1.2.3." + "9" * 5000,
        "1.1.1.1:" + "9" * 5000,
        "[::1]:" + "1" * 5000,
        "[::ffff:1.2.3." + "7" * 5000 + "]:80",
        "1:2:3:4:5:6:7:" + "f" * 5000,
        "[::ffff:1.2.3.4]5",
        "[::ffff:1.2.3.4",
        "[::ffff:1.2.3.4:80]",
        "[::ffff:1.2.3.4]]:80",
        "[::ffff:1.2.3.4]:",
    ],
)
def test_normalize_rejects(text):
    assert normalize_address(text) is None


def test_mapped_forms_agree():
    dotted = normalize_address("::ffff:127.0.0.1")
    hexed = normalize_address("::ffff:7f00:1")
    assert dotted == hexed
    assert dotted.family is V6


def test_mapped_and_plain_ipv4_are_distinct():
    assert normalize_address("127.0.0.1") != normalize_address("::ffff:127.0.0.1")


def test_zero_run_expands_to_eight_groups():
    # 2000:2500:0:1:0:0:4500:93e3, the "::" stands for two zero groups
    assert normalize_address("2000:2500:0:1::4500:93e3") == normalize_address(
        "2000:2500:0:1:0:0:4500:93e3"
    )


@pytest.mark.parametrize("text, expected", [("0", 0), ("80", 80), ("65535", 65535)])
def test_parse_port(text, expected):
    assert parse_port(text) == expected


@pytest.mark.parametrize("text", ["", "-1", "65536", "+80", "8o"])
def test_parse_port_rejects(text):
    assert parse_port(text) is None


@pytest.mark.parametrize(
    "text, rendered",
    [
        ("127.0.0.1", "127.0.0.1"),
        ("127.0.0.1:80", "127.0.0.1:80"),
        ("2000:2500:0:1::4500:93E3", "2000:2500:0:1::4500:93e3"),
        ("[::1]:443", "[::1]:443"),
        ("::ffff:192.168.1.16", "::ffff:192.168.1.16"),
        ("[::ffff:192.168.1.16]:80", "[::ffff:192.168.1.16]:80"),
    ],
)
def test_format_address(text, rendered):
    assert format_address(normalize_address(text)) == rendered


def test_zero_padding_is_accepted_at_any_length():
    assert normalize_address("1.1.1.1:" + "0" * 5000) == CanonicalAddress(0x01010101, V4, 0)
    assert normalize_address("010.000.000.0001:00080") == CanonicalAddress(0x0A000001, V4, 80)


def test_bracketed_mapped_without_port():
    assert normalize_address("[::ffff:1.2.3.4]") == CanonicalAddress(0xFFFF_0102_0304, V6)
