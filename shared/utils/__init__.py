from .common import parse_hex, split_pairs, to_hex

__all__ = ["to_hex", "parse_hex", "split_pairs"]
