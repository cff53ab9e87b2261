# ecc200/model/symbol.py
# Assemble the module matrix of a finished symbol
# Each of the tiling x tiling regions is an edge_length square of data
# modules framed by the alignment pattern:
#   left column + bottom row  -> solid (finder "L")
#   top row + right column    -> alternating (clock track)
# 1 = dark module, 0 = light module. Row 0 is the top of the symbol.

from typing import Optional, Sequence

import numpy as np

from ecc200.model.placement import DEFAULT_LAYOUT_CACHE, LayoutCache
from ecc200.model.symbol_sizes import SymbolInfo


def draw_borders(matrix: np.ndarray, symbol: SymbolInfo) -> np.ndarray:
    span = symbol.edge_length + 2
    for ty in range(symbol.tiling):
        for tx in range(symbol.tiling):
            top = ty * span
            left = tx * span
            bottom = top + span - 1
            right = left + span - 1
            matrix[top:bottom + 1, left] = 1
            matrix[bottom, left:right + 1] = 1
            matrix[top, left:right + 1:2] = 1
            matrix[top + 1:bottom + 1:2, right] = 1
    return matrix


def mapping_to_symbol(row: int, col: int, edge_length: int):
    # skip the two border modules of every region passed
    return row + 2 * (row // edge_length) + 1, col + 2 * (col // edge_length) + 1


def build_matrix(
    codewords: Sequence[int],
    symbol: SymbolInfo,
    layout_cache: Optional[LayoutCache] = None,
) -> np.ndarray:
    if len(codewords) != symbol.total_codewords:
        raise ValueError(
            f"{symbol} symbol needs {symbol.total_codewords} codewords, got {len(codewords)}"
        )
    layout_cache = layout_cache if layout_cache is not None else DEFAULT_LAYOUT_CACHE
    layout = layout_cache.get(symbol.mapping_size)
    if layout.codeword_count < len(codewords):
        raise ValueError(
            f"placement for {symbol.mapping_size}x{symbol.mapping_size} holds "
            f"{layout.codeword_count} codewords, got {len(codewords)}"
        )

    size = symbol.symbol_size
    edge = symbol.edge_length
    matrix = np.zeros((size, size), dtype=np.uint8)
    draw_borders(matrix, symbol)

    for i, cw in enumerate(codewords):
        for j in range(8):
            if (cw >> j) & 1:
                r, c = layout.positions[i * 8 + j]
                matrix[mapping_to_symbol(r, c, edge)] = 1

    if layout.has_unused_corner:
        n = layout.size
        matrix[mapping_to_symbol(n - 1, n - 1, edge)] = 1
        matrix[mapping_to_symbol(n - 2, n - 2, edge)] = 1

    return matrix
