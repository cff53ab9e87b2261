# ecc200/model/interleaver.py
# Codeword interleaving for multi-block ECC200 symbols
# Data codeword d belongs to block d % blocks; block b reads positions
# b, b+blocks, b+2*blocks, ... ECC codeword j of block b is written to
# capacity + b + j*blocks, so each block is protected on its own and bursts
# are spread across all of them.
#
# For blocks=1 it's a nop: data || ecc.

from typing import List, Optional, Sequence

from ecc200.model.reed_solomon import DEFAULT_RS_CACHE, RSEncoderCache


def split_blocks(data: Sequence[int], blocks: int) -> List[List[int]]:
    if blocks < 1:
        raise ValueError(f"block count must be >= 1 (got {blocks})")
    if len(data) % blocks != 0:
        raise ValueError(f"Data length {len(data)} is not a multiple of block count {blocks}")
    return [list(data[b::blocks]) for b in range(blocks)]


def merge_blocks(block_data: Sequence[Sequence[int]]) -> List[int]:
    # inverse of split_blocks
    blocks = len(block_data)
    if blocks == 0:
        return []
    length = len(block_data[0])
    if any(len(blk) != length for blk in block_data):
        raise ValueError("all blocks must have the same length")
    out = [0] * (blocks * length)
    for b, blk in enumerate(block_data):
        out[b::blocks] = blk
    return out


def interleave_ecc(
    data: Sequence[int],
    nsym: int,
    blocks: int,
    cache: Optional[RSEncoderCache] = None,
) -> List[int]:
    # data must already be padded to the symbol capacity
    cache = cache if cache is not None else DEFAULT_RS_CACHE
    encoder = cache.get(nsym)
    capacity = len(data)

    out = list(data) + [0] * (nsym * blocks)
    for b, blk in enumerate(split_blocks(data, blocks)):
        ecc = encoder.encode(blk)
        out[capacity + b::blocks] = ecc
    return out


def block_codewords(codewords: Sequence[int], capacity: int, blocks: int) -> List[List[int]]:
    # rebuild each block's own data || ecc from a finished stream
    data = split_blocks(codewords[:capacity], blocks)
    ecc = split_blocks(codewords[capacity:], blocks)
    return [d + e for d, e in zip(data, ecc)]


if __name__ == "__main__":
    buf = list(range(204))
    blocks = split_blocks(buf, 2)
    assert merge_blocks(blocks) == buf, "round-trip failed"
    out = interleave_ecc(buf, 42, 2)
    print(f"interleaved length = {len(out)}")
    print("interleaver.py: self-test OK")
