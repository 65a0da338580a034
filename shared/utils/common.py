from __future__ import annotations

from typing import List, Sequence, Tuple


def to_hex(value: int) -> str:
    """Operand form used for addresses and sizes: uppercase hex, no prefix."""
    # usb2snes servers parse these operands as hex; decimal strings would be misread.
    if value < 0:
        raise ValueError(f"Negative value {value} cannot be sent as an operand")
    return f"{value:X}"


def parse_hex(text: str) -> int:
    """Inverse of `to_hex`; tolerates an optional 0x prefix."""
    text = text.strip()
    if text.lower().startswith("0x"):
        text = text[2:]
    return int(text, 16)


def split_pairs(values: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Split [a1, b1, a2, b2, ...] into ([a1, a2, ...], [b1, b2, ...])."""
    if len(values) % 2:
        raise ValueError(f"Expected an even number of values, got {len(values)}")
    return list(values[0::2]), list(values[1::2])


__all__ = ["to_hex", "parse_hex", "split_pairs"]
