"""
Canonical byte encoding and derived identifiers.

Everything the engine hashes goes through here: pair reserve accounts, LP
asset ids, module accounts and the storage state root. Encodings are
length-prefixed so concatenated fields can never be ambiguous.
"""

from __future__ import annotations

import hashlib
from typing import Optional


def sha256_hex(data: bytes) -> str:
    return "0x" + hashlib.sha256(data).hexdigest()


def domain_sep_bytes(label: str, version: int = 1) -> bytes:
    """`bootswap:<label>:v<version>` followed by NUL (ASCII labels only)."""
    if not isinstance(label, str) or not label:
        raise TypeError("label must be a non-empty str")
    if "\x00" in label or not label.isascii():
        raise ValueError(f"label must be ASCII without NUL: {label!r}")
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    return f"bootswap:{label}:v{version}".encode("ascii") + b"\x00"


def encode_uvarint(value: int) -> bytes:
    """Unsigned LEB128."""
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"uvarint must be a non-negative int, got {value!r}")
    out = bytearray()
    while value > 0x7F:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def encode_bytes(value: bytes) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError("value must be bytes")
    return encode_uvarint(len(value)) + bytes(value)


def encode_str(value: str) -> bytes:
    if not isinstance(value, str):
        raise TypeError(f"value must be a str, got {type(value).__name__}")
    return encode_bytes(value.encode("utf-8"))


def encode_optional_str(value: Optional[str]) -> bytes:
    if value is None:
        return b"\x00"
    return b"\x01" + encode_str(value)


def derive_id(label: str, *parts: str) -> str:
    """0x-hex sha256 of the domain tag followed by each part, length-prefixed."""
    payload = domain_sep_bytes(label) + b"".join(encode_str(p) for p in parts)
    return sha256_hex(payload)
