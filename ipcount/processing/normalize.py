# ipcount/processing/normalize.py

from __future__ import annotations

import ipaddress
import string
from typing import List, Optional

from ipcount.models import AddressFamily, CanonicalAddress

MAPPED_PREFIX = "::ffff:"
MAPPED_PREFIX_BRACKETED = "[::ffff:"
MAPPED_BITS = 0xFFFF00000000

MAX_PORT = 0xFFFF
IPV6_GROUPS = 8

_HEXDIGITS = frozenset(string.hexdigits)


def _parse_decimal(text: str, upper: int) -> Optional[int]:
    # ASCII digits only: str.isdigit() also accepts things like superscripts
    if not text or not text.isascii() or not text.isdigit():
        return None
    # bound the length before int() so huge digit runs cannot raise
    digits = text.lstrip("0") or "0"
    if len(digits) > len(str(upper)):
        return None
    num = int(digits)
    if num > upper:
        return None
    return num


def parse_port(text: str) -> Optional[int]:
    """Parse a decimal port in 0..65535, or return None."""
    return _parse_decimal(text, MAX_PORT)


def _parse_hextet(text: str) -> Optional[int]:
    if not text or any(ch not in _HEXDIGITS for ch in text):
        return None
    num = int(text, 16)
    if num > 0xFFFF:
        return None
    return num


def _parse_dotted_quad(text: str) -> Optional[tuple[int, Optional[int]]]:
    """
    Parse ``a.b.c.d`` or ``a.b.c.d:port``.

    Returns (value, port) with port None when absent, or None if the text
    is not a valid dotted quad.
    """
    octets = text.split(".")
    if len(octets) != 4:
        return None

    port = None
    if ":" in octets[3]:
        pieces = octets[3].split(":")
        if len(pieces) != 2:
            return None
        port = parse_port(pieces[1])
        if port is None:
            return None
        octets[3] = pieces[0]

    value = 0
    for position, octet in enumerate(reversed(octets)):
        num = _parse_decimal(octet, 0xFF)
        if num is None:
            return None
        value |= num << (8 * position)
    return value, port


def _unbracket_mapped(text: str) -> Optional[str]:
    """
    Turn ``a.b.c.d]`` or ``a.b.c.d]:port`` (the part after ``[::ffff:``)
    into ``a.b.c.d`` / ``a.b.c.d:port``.
    """
    quad, sep, rest = text.partition("]")
    if not sep or ":" in quad:
        return None
    if rest and not rest.startswith(":"):
        return None
    return quad + rest


def _expand_groups(text: str) -> Optional[List[str]]:
    """
    Split colon-hex text into exactly eight groups, expanding a single ``::``.
    """
    if "::" in text:
        if text.count("::") > 1:
            return None
        head_text, tail_text = text.split("::", 1)
        head = head_text.split(":") if head_text else []
        tail = tail_text.split(":") if tail_text else []
        if "" in head or "" in tail:
            return None
        missing = IPV6_GROUPS - len(head) - len(tail)
        # "::" always stands for at least one zero group
        if missing < 1:
            return None
        return head + ["0"] * missing + tail

    groups = text.split(":")
    if len(groups) != IPV6_GROUPS or "" in groups:
        return None
    return groups


def _parse_ipv6(text: str) -> Optional[tuple[int, Optional[int]]]:
    port = None
    if text.startswith("["):
        pieces = text[1:].split("]:")
        if len(pieces) != 2:
            return None
        port = parse_port(pieces[1])
        if port is None:
            return None
        text = pieces[0]

    groups = _expand_groups(text)
    if groups is None:
        return None

    value = 0
    for position, group in enumerate(reversed(groups)):
        num = _parse_hextet(group)
        if num is None:
            return None
        value |= num << (16 * position)
    return value, port


def normalize_address(text: str) -> Optional[CanonicalAddress]:
    """
    Turn one line of text into a CanonicalAddress.

    Accepted forms, checked in this order:

        ::ffff:192.168.1.16        [::ffff:192.168.1.16]:80
        127.0.0.1                  127.0.0.1:80
        2000:2500:0:1::4500:93e3   [2000:2500:0:1::4500:93e3]:80

    Anything else (empty lines, free text, out-of-range octets or groups,
    wrong number of parts) returns None. Malformed input never raises.
    """
    text = text.lower()
    if not text:
        return None

    mapped = False
    if text.startswith(MAPPED_PREFIX) and "." in text:
        mapped = True
        text = text[len(MAPPED_PREFIX):]
    elif text.startswith(MAPPED_PREFIX_BRACKETED) and "." in text:
        mapped = True
        text = _unbracket_mapped(text[len(MAPPED_PREFIX_BRACKETED):])
        if text is None:
            return None

    if "." in text:
        parsed = _parse_dotted_quad(text)
        if parsed is None:
            return None
        value, port = parsed
        if mapped:
            return CanonicalAddress(value | MAPPED_BITS, AddressFamily.IPV6, port)
        return CanonicalAddress(value, AddressFamily.IPV4, port)

    parsed = _parse_ipv6(text)
    if parsed is None:
        return None
    value, port = parsed
    return CanonicalAddress(value, AddressFamily.IPV6, port)


def format_address(address: CanonicalAddress) -> str:
    """Render a canonical address back to text (for logs and table dumps)."""
    if address.family is AddressFamily.IPV4:
        host = str(ipaddress.IPv4Address(address.value))
        return host if address.port is None else f"{host}:{address.port}"

    ip6 = ipaddress.IPv6Address(address.value)
    host = f"::ffff:{ip6.ipv4_mapped}" if ip6.ipv4_mapped is not None else ip6.compressed
    return host if address.port is None else f"[{host}]:{address.port}"
