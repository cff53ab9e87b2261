# ecc200/model/randomizer.py
# 253-state pad randomiser
# The first pad codeword is a plain 0x81, every following one is whitened by
# its 1-based position so long runs of padding don't form repeating patterns:
#   r = (149 * pos) mod 253 + 1
#   t = 0x81 + r -> t if t <= 254 else t - 254
# Deterministic, not a source of randomness.

from typing import List

PAD = 0x81
UNLATCH = 0xFE

RAND_MULT = 149
RAND_MOD = 253


def randomize_253(position: int) -> int:
    pseudo_random = ((RAND_MULT * position) % RAND_MOD) + 1
    tmp = PAD + pseudo_random
    return tmp if tmp <= 254 else tmp - 254


def pad_codewords(codewords: List[int], capacity: int, unlatch: bool = False) -> List[int]:
    # fills codewords in place up to capacity and returns it
    # unlatch: the encoder is left in a non-ASCII mode, so return to ASCII first
    if unlatch and len(codewords) < capacity:
        codewords.append(UNLATCH)
    if len(codewords) < capacity:
        codewords.append(PAD)
    while len(codewords) < capacity:
        codewords.append(randomize_253(len(codewords) + 1))
    return codewords


if __name__ == "__main__":
    print(" ".join(f"{randomize_253(p):02X}" for p in range(1, 33)))
