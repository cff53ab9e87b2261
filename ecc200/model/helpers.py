# ecc200/model/helpers.py
# common helper functions used across the pipeline, visualiser and vector scripts
# provides bit/byte conversion and dump formatting

from typing import Iterable, List, Sequence


def bits_from_bytes(data: Iterable[int]) -> List[int]:
    # MSB first
    out: List[int] = []
    for b in data:
        for i in range(8):
            out.append((b >> (7 - i)) & 1)
    return out


def hex_line(data: Sequence[int]) -> str:
    return " ".join(f"{b:02X}" for b in data)


def parse_hex(s: str) -> bytes:
    return bytes.fromhex(s.replace(" ", "").replace("\n", ""))
