"""
Hex parsing utilities for transactions and scripts given on the command line or as JSON
"""
from bitcointx.core import CTransaction
from bitcointx.core.script import CScript

HEX_DIGITS = frozenset("0123456789abcdef")


def parse_hex_str(s: str) -> str:
    if not isinstance(s, str):
        raise TypeError(f"Expected string, got {type(s)}")
    ret = s.strip().lower().removeprefix("0x")
    if len(ret) % 2 or not HEX_DIGITS.issuperset(ret):
        raise ValueError(f"Invalid hex string: {s!r}")
    return ret


def parse_hex_bytes(s: str) -> bytes:
    return bytes.fromhex(parse_hex_str(s))


def serialize_hex(b: bytes | str) -> str:
    if isinstance(b, str):
        return parse_hex_str(b)
    if not isinstance(b, bytes):
        raise TypeError(f"Expected bytes or str, got {type(b)}")
    return b.hex()


def parse_transaction(s: str) -> CTransaction:
    raw = parse_hex_bytes(s)
    try:
        return CTransaction.deserialize(raw)
    except Exception as e:
        raise ValueError(f"Cannot deserialize transaction: {e}") from e


def parse_script(s: str) -> CScript:
    return CScript(parse_hex_bytes(s))
