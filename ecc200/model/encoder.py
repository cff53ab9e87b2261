# ecc200/model/encoder.py
# DataMatrix ECC200 codeword builder
#
#   encode_* calls -> select_symbol_dimensions() -> generate_ecc() -> to_matrix()
#
# The caller picks the compaction mode for each segment; the builder only
# tracks the current mode and emits latch/unlatch codewords on changes.
# One builder per symbol: once generate_ecc() has run it is finalized.

import logging
from enum import IntEnum
from typing import List, Optional, Union

import numpy as np

from ecc200.model.errors import (
    CapacityExceededError,
    DataMatrixEncodingError,
    DataMatrixStateError,
    X12EncodingError,
)
from ecc200.model.interleaver import interleave_ecc
from ecc200.model.placement import LayoutCache
from ecc200.model.randomizer import UNLATCH, pad_codewords
from ecc200.model.reed_solomon import DEFAULT_RS_CACHE, RSEncoderCache
from ecc200.model.symbol import build_matrix
from ecc200.model.symbol_sizes import SYMBOL_SIZES, SymbolInfo, smallest_fitting

logger = logging.getLogger(__name__)

TextInput = Union[str, bytes, bytearray]


class Encoding(IntEnum):
    ASCII = 0
    X12 = 1
    C40 = 2
    TEXT = 3


LATCH = {
    Encoding.C40: 0xE6,
    Encoding.TEXT: 0xEF,
    Encoding.X12: 0xEE,
}

# bytes >= 0x80 are escaped with Upper Shift instead of the plain byte + 1 rule
ASCII_UPPER_SHIFT = 235     # next ASCII codeword is (byte - 128) + 1
TRIPLE_UPPER_SHIFT = 30     # in the C40/Text shift-2 set

# C40/Text shift values
SHIFT1 = 0
SHIFT2 = 1
SHIFT3 = 2


def _as_bytes(data: TextInput) -> bytes:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    try:
        # one codeword unit per character, U+0000..U+00FF
        return data.encode("latin-1")
    except UnicodeEncodeError as e:
        raise DataMatrixEncodingError(
            f"character {data[e.start]!r} at offset {e.start} is outside the 8-bit range"
        ) from e


def _triple_values(byte: int, text_mode: bool) -> List[int]:
    # map one byte to its C40 (text_mode=False) or Text small values, each in [0, 39]
    if byte >= 0x80:
        return [SHIFT2, TRIPLE_UPPER_SHIFT] + _triple_values(byte - 0x80, text_mode)
    if byte == 0x20:
        return [3]
    if 0x30 <= byte <= 0x39:
        return [byte - 0x30 + 4]            # 0x30 - 0x39 begin at 4
    basic = 0x61 if text_mode else 0x41
    if basic <= byte <= basic + 25:
        return [byte - basic + 14]          # basic set letters begin at 14
    if byte < 0x20:
        return [SHIFT1, byte]
    if byte <= 0x2F:
        return [SHIFT2, byte - 0x21]        # 0x21 - 0x2f begin at 0
    if byte <= 0x40:
        return [SHIFT2, byte - 0x3A + 15]   # 0x3a - 0x40 begin at 15
    if 0x5B <= byte <= 0x5F:
        return [SHIFT2, byte - 0x5B + 22]   # 0x5b - 0x5f begin at 22
    if text_mode and byte <= 0x5A:
        return [SHIFT3, byte - 0x40]        # 'A' - 'Z' begin at 1
    return [SHIFT3, byte - 0x60]            # 0x60 - 0x7f begin at 0


def c40_values(data: bytes) -> List[int]:
    out: List[int] = []
    for b in data:
        out.extend(_triple_values(b, text_mode=False))
    return out


def text_values(data: bytes) -> List[int]:
    out: List[int] = []
    for b in data:
        out.extend(_triple_values(b, text_mode=True))
    return out


def to_x12(byte: int) -> int:
    if 0x30 <= byte <= 0x39:
        return byte - 0x2C
    if 0x41 <= byte <= 0x5A:
        return byte - 0x33
    if byte == 0x2A:    # '*'
        return 0x01
    if byte == 0x3E:    # '>'
        return 0x02
    if byte == 0x20:
        return 0x03
    if byte == 0x0D:    # CR
        return 0x00
    raise X12EncodingError(byte)


def x12_values(data: bytes) -> List[int]:
    out: List[int] = []
    for pos, b in enumerate(data):
        try:
            out.append(to_x12(b))
        except X12EncodingError as e:
            raise X12EncodingError(e.byte, pos) from None
    return out


def pack_triples(values: List[int]) -> List[int]:
    # v = 1600*c1 + 40*c2 + c3 + 1 as two big-endian codewords
    # a trailing group of 1 or 2 values is packed with the missing terms as 0
    out: List[int] = []
    for i in range(0, len(values), 3):
        v = 1600 * values[i] + 1
        if i + 1 < len(values):
            v += 40 * values[i + 1]
        if i + 2 < len(values):
            v += values[i + 2]
        out.append((v >> 8) & 0xFF)
        out.append(v & 0xFF)
    return out


class DataMatrixEncoder:
    """Single-use builder for one ECC200 symbol.

    Encode methods append codewords and return ``self`` so calls chain::

        enc = DataMatrixEncoder().encode_c40("ABC").encode_ascii("x")
        enc.select_symbol_dimensions().generate_ecc()
        matrix = enc.to_matrix()
    """

    def __init__(
        self,
        rs_cache: Optional[RSEncoderCache] = None,
        layout_cache: Optional[LayoutCache] = None,
    ):
        self.codewords: List[int] = []
        self.mode = Encoding.ASCII
        self.symbol: Optional[SymbolInfo] = None
        self.finalized = False
        self.truncated = 0
        self.rs_cache = rs_cache if rs_cache is not None else DEFAULT_RS_CACHE
        self.layout_cache = layout_cache

    def _check_open(self) -> None:
        if self.finalized:
            raise DataMatrixStateError("symbol already finalized; use a new encoder")

    def _switch_to(self, target: Encoding) -> None:
        if self.mode != target and self.mode != Encoding.ASCII:
            self.codewords.append(UNLATCH)
            self.mode = Encoding.ASCII
        if self.mode != target:
            self.codewords.append(LATCH[target])
            self.mode = target

    def encode_ascii(self, data: TextInput) -> "DataMatrixEncoder":
        self._check_open()
        raw = _as_bytes(data)
        if self.mode != Encoding.ASCII:
            self.codewords.append(UNLATCH)
            self.mode = Encoding.ASCII
        for b in raw:
            if b >= 0x80:
                self.codewords.append(ASCII_UPPER_SHIFT)
                b -= 0x80
            self.codewords.append(b + 1)
        return self

    def encode_c40(self, data: TextInput) -> "DataMatrixEncoder":
        self._check_open()
        values = c40_values(_as_bytes(data))
        self._switch_to(Encoding.C40)
        self.codewords.extend(pack_triples(values))
        return self

    def encode_text(self, data: TextInput) -> "DataMatrixEncoder":
        self._check_open()
        values = text_values(_as_bytes(data))
        self._switch_to(Encoding.TEXT)
        self.codewords.extend(pack_triples(values))
        return self

    def encode_x12(self, data: TextInput) -> "DataMatrixEncoder":
        self._check_open()
        # validate everything before touching state
        values = x12_values(_as_bytes(data))
        self._switch_to(Encoding.X12)
        self.codewords.extend(pack_triples(values))
        return self

    def encode(self, mode: Union[str, Encoding], data: TextInput) -> "DataMatrixEncoder":
        if isinstance(mode, str):
            try:
                mode = Encoding[mode.upper()]
            except KeyError:
                raise ValueError(f"unknown encoding mode {mode!r}") from None
        dispatch = {
            Encoding.ASCII: self.encode_ascii,
            Encoding.C40: self.encode_c40,
            Encoding.TEXT: self.encode_text,
            Encoding.X12: self.encode_x12,
        }
        return dispatch[mode](data)

    def select_symbol_dimensions(self, truncate: bool = True) -> "DataMatrixEncoder":
        self._check_open()
        self.truncated = 0
        length = len(self.codewords)
        info = smallest_fitting(length)
        if info is None:
            info = SYMBOL_SIZES[0]
            if not truncate:
                raise CapacityExceededError(length, info.capacity)
            # keep the trailing codewords that fit the largest symbol
            self.truncated = length - info.capacity
            del self.codewords[:self.truncated]
            logger.warning(
                "payload of %d codewords exceeds %d; dropped the first %d",
                length, info.capacity, self.truncated,
            )
        self.symbol = info
        logger.debug("selected %s symbol (capacity %d) for %d codewords", info, info.capacity, length)
        return self

    @property
    def remaining(self) -> Optional[int]:
        if self.symbol is None:
            return None
        return max(self.symbol.capacity - len(self.codewords), 0)

    def generate_ecc(self, rs_cache: Optional[RSEncoderCache] = None) -> "DataMatrixEncoder":
        self._check_open()
        if self.symbol is None:
            raise DataMatrixStateError("select_symbol_dimensions() must run before generate_ecc()")
        symbol = self.symbol
        if len(self.codewords) > symbol.capacity:
            raise DataMatrixStateError(
                f"{len(self.codewords)} codewords no longer fit the selected {symbol} symbol; "
                "select the symbol after the last encode call"
            )
        cache = rs_cache if rs_cache is not None else self.rs_cache

        pad_codewords(self.codewords, symbol.capacity, unlatch=self.mode != Encoding.ASCII)

        if symbol.blocks == 1:
            self.codewords = self.codewords + cache.get(symbol.ecc).encode(self.codewords)
        else:
            self.codewords = interleave_ecc(self.codewords, symbol.ecc, symbol.blocks, cache)

        self.finalized = True
        return self

    def to_matrix(self) -> np.ndarray:
        if not self.finalized:
            raise DataMatrixStateError("generate_ecc() must run before the symbol can be laid out")
        return build_matrix(self.codewords, self.symbol, self.layout_cache)

    def to_bytes(self) -> bytes:
        return bytes(self.codewords)

    def __repr__(self) -> str:
        size = str(self.symbol) if self.symbol else "unsized"
        return f"DataMatrixEncoder(mode={self.mode.name}, codewords={len(self.codewords)}, symbol={size})"


def encode_datamatrix(data: TextInput, mode: Union[str, Encoding] = "ascii", truncate: bool = True) -> DataMatrixEncoder:
    return DataMatrixEncoder().encode(mode, data).select_symbol_dimensions(truncate).generate_ecc()
