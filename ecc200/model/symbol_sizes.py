# ecc200/model/symbol_sizes.py
# Square ECC200 symbol catalog, largest capacity first
# capacity: data codewords, ecc: ecc codewords per block,
# edge_length: data region edge (modules), tiling: regions per axis,
# blocks: interleaved RS blocks
#
# 144x144 is not listed: its ten blocks are not all the same length, so the
# catalog stops at 132x132 (1304 data codewords)

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class SymbolInfo:
    capacity: int
    ecc: int
    edge_length: int
    tiling: int
    blocks: int

    @property
    def block_size(self) -> int:
        # one interleaved block, its own ecc tail included
        return self.capacity // self.blocks + self.ecc

    @property
    def block_capacity(self) -> int:
        return self.capacity // self.blocks

    @property
    def mapping_size(self) -> int:
        # edge of the mapping matrix (all regions, no finder/clock border)
        return self.edge_length * self.tiling

    @property
    def symbol_size(self) -> int:
        return self.tiling * (self.edge_length + 2)

    @property
    def total_codewords(self) -> int:
        return self.capacity + self.ecc * self.blocks

    def __str__(self) -> str:
        return f"{self.symbol_size}x{self.symbol_size}"


SYMBOL_SIZES: Tuple[SymbolInfo, ...] = (
    SymbolInfo(1304, 62, 20, 6, 8),     # 132x132
    SymbolInfo(1050, 68, 18, 6, 6),     # 120x120
    SymbolInfo(816, 56, 24, 4, 6),      # 104x104
    SymbolInfo(696, 68, 22, 4, 4),      # 96x96
    SymbolInfo(576, 56, 20, 4, 4),      # 88x88
    SymbolInfo(456, 48, 18, 4, 4),      # 80x80
    SymbolInfo(368, 36, 16, 4, 4),      # 72x72
    SymbolInfo(280, 56, 14, 4, 2),      # 64x64
    SymbolInfo(204, 42, 24, 2, 2),      # 52x52

    SymbolInfo(174, 68, 22, 2, 1),      # 48x48
    SymbolInfo(144, 56, 20, 2, 1),      # 44x44
    SymbolInfo(114, 48, 18, 2, 1),      # 40x40
    SymbolInfo(86, 42, 16, 2, 1),       # 36x36
    SymbolInfo(62, 36, 14, 2, 1),       # 32x32
    SymbolInfo(44, 28, 24, 1, 1),       # 26x26
    SymbolInfo(36, 24, 22, 1, 1),       # 24x24
    SymbolInfo(30, 20, 20, 1, 1),       # 22x22
    SymbolInfo(22, 18, 18, 1, 1),       # 20x20
    SymbolInfo(18, 14, 16, 1, 1),       # 18x18
    SymbolInfo(12, 12, 14, 1, 1),       # 16x16
    SymbolInfo(8, 10, 12, 1, 1),        # 14x14
    SymbolInfo(5, 7, 10, 1, 1),         # 12x12
    SymbolInfo(3, 5, 8, 1, 1),          # 10x10
)

MAX_CAPACITY = SYMBOL_SIZES[0].capacity


def smallest_fitting(length: int) -> Optional[SymbolInfo]:
    # scan from the smallest entry upwards
    for info in reversed(SYMBOL_SIZES):
        if length <= info.capacity:
            return info
    return None


def by_symbol_size(size: int) -> SymbolInfo:
    for info in SYMBOL_SIZES:
        if info.symbol_size == size:
            return info
    raise ValueError(f"no square ECC200 symbol of {size}x{size} in catalog")
