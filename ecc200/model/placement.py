# ecc200/model/placement.py
# ECC200 module placement: which mapping-matrix module holds each codeword bit
#
# The mapping matrix is the symbol with the finder/clock borders of every
# region removed (size = edge_length * tiling). Codewords are laid out as the
# 8-module "utah" shape along diagonal sweeps, with four special shapes at the
# corners; modules that fall off one edge wrap to the opposite one.
#
# positions[c*8 + j] is the (row, col) of bit j (0 = LSB) of codeword c.
# When the sweep leaves the bottom-right 2x2 uncovered, two of those modules
# are fixed dark (has_unused_corner).

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


@dataclass(frozen=True)
class ModuleLayout:
    size: int
    positions: Tuple[Coord, ...]
    has_unused_corner: bool

    @property
    def codeword_count(self) -> int:
        return len(self.positions) // 8

    def bit_position(self, codeword: int, bit: int) -> Coord:
        return self.positions[codeword * 8 + bit]


class _Walker:
    # one pass over a size x size mapping matrix

    def __init__(self, size: int):
        self.nrow = size
        self.ncol = size
        self.used = [[False] * size for _ in range(size)]
        self.positions: List[Coord] = []
        self._current: List[Coord] = []

    def module(self, row: int, col: int, bit: int) -> None:
        # bit counts 1 (MSB) .. 8 (LSB)
        if row < 0:
            row += self.nrow
            col += 4 - ((self.nrow + 4) % 8)
        if col < 0:
            col += self.ncol
            row += 4 - ((self.ncol + 4) % 8)
        self.used[row][col] = True
        self._current[8 - bit] = (row, col)

    def _begin(self) -> None:
        self._current = [(0, 0)] * 8

    def _end(self) -> None:
        self.positions.extend(self._current)

    def utah(self, row: int, col: int) -> None:
        self._begin()
        self.module(row - 2, col - 2, 1)
        self.module(row - 2, col - 1, 2)
        self.module(row - 1, col - 2, 3)
        self.module(row - 1, col - 1, 4)
        self.module(row - 1, col, 5)
        self.module(row, col - 2, 6)
        self.module(row, col - 1, 7)
        self.module(row, col, 8)
        self._end()

    def corner1(self) -> None:
        n, m = self.nrow, self.ncol
        self._begin()
        self.module(n - 1, 0, 1)
        self.module(n - 1, 1, 2)
        self.module(n - 1, 2, 3)
        self.module(0, m - 2, 4)
        self.module(0, m - 1, 5)
        self.module(1, m - 1, 6)
        self.module(2, m - 1, 7)
        self.module(3, m - 1, 8)
        self._end()

    def corner2(self) -> None:
        n, m = self.nrow, self.ncol
        self._begin()
        self.module(n - 3, 0, 1)
        self.module(n - 2, 0, 2)
        self.module(n - 1, 0, 3)
        self.module(0, m - 4, 4)
        self.module(0, m - 3, 5)
        self.module(0, m - 2, 6)
        self.module(0, m - 1, 7)
        self.module(1, m - 1, 8)
        self._end()

    def corner3(self) -> None:
        n, m = self.nrow, self.ncol
        self._begin()
        self.module(n - 3, 0, 1)
        self.module(n - 2, 0, 2)
        self.module(n - 1, 0, 3)
        self.module(0, m - 2, 4)
        self.module(0, m - 1, 5)
        self.module(1, m - 1, 6)
        self.module(2, m - 1, 7)
        self.module(3, m - 1, 8)
        self._end()

    def corner4(self) -> None:
        n, m = self.nrow, self.ncol
        self._begin()
        self.module(n - 1, 0, 1)
        self.module(n - 1, m - 1, 2)
        self.module(0, m - 3, 3)
        self.module(0, m - 2, 4)
        self.module(0, m - 1, 5)
        self.module(1, m - 3, 6)
        self.module(1, m - 2, 7)
        self.module(1, m - 1, 8)
        self._end()

    def run(self) -> bool:
        nrow, ncol = self.nrow, self.ncol
        row, col = 4, 0
        while True:
            if row == nrow and col == 0:
                self.corner1()
            if row == nrow - 2 and col == 0 and ncol % 4:
                self.corner2()
            if row == nrow - 2 and col == 0 and ncol % 8 == 4:
                self.corner3()
            if row == nrow + 4 and col == 2 and not ncol % 8:
                self.corner4()

            # sweep upward diagonally
            while True:
                if 0 <= row < nrow and 0 <= col < ncol and not self.used[row][col]:
                    self.utah(row, col)
                row -= 2
                col += 2
                if not (row >= 0 and col < ncol):
                    break
            row += 1
            col += 3

            # sweep downward diagonally
            while True:
                if 0 <= row < nrow and 0 <= col < ncol and not self.used[row][col]:
                    self.utah(row, col)
                row += 2
                col -= 2
                if not (row < nrow and col >= 0):
                    break
            row += 3
            col += 1

            if not (row < nrow or col < ncol):
                break

        # unused corner
        return not self.used[nrow - 1][ncol - 1]


def build_layout(size: int) -> ModuleLayout:
    if size < 6 or size % 2:
        raise ValueError(f"mapping matrix size must be an even number >= 6 (got {size})")
    walker = _Walker(size)
    unused_corner = walker.run()
    return ModuleLayout(size=size, positions=tuple(walker.positions), has_unused_corner=unused_corner)


class LayoutCache:
    """Placement layouts keyed by mapping matrix size, built on first request."""

    def __init__(self):
        self._layouts: Dict[int, ModuleLayout] = {}

    def get(self, size: int) -> ModuleLayout:
        layout = self._layouts.get(size)
        if layout is None:
            logger.debug("building placement layout for %dx%d mapping matrix", size, size)
            layout = build_layout(size)
            self._layouts[size] = layout
        return layout

    def __contains__(self, size: int) -> bool:
        return size in self._layouts

    def __len__(self) -> int:
        return len(self._layouts)


DEFAULT_LAYOUT_CACHE = LayoutCache()
