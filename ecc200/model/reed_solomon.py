# ecc200/model/reed_solomon.py
# Systematic Reed-Solomon encoder over GF(256) for DataMatrix ECC200
# Field: p(x) = 0x12D, alpha = 2
# Consecutive roots: alpha^(B+i), i=0..(nsym-1) with B=1
# Systematic codeword: [data] || [ecc (nsym bytes)]
#
# Unlike the fixed RS(255,223) codes of a telemetry link, DataMatrix needs a
# different nsym per symbol size (5..68), so encoders are built per nsym and
# kept in an explicit cache.

import logging
from typing import Dict, List, Optional, Sequence

from ecc200.model.galois import DATAMATRIX_FIELD, GF256

logger = logging.getLogger(__name__)

first_consec_root = 1       # B = 1
max_codeword_len = 255      # n <= 2^m - 1


class ReedSolomonEncoder:
    """Maps a data codeword sequence to its ``nsym`` ECC codewords.

    The generator polynomial g(x) = prod_{i=1..nsym} (x - alpha^i) is built on
    first use and reused for every later call.
    """

    def __init__(self, field: GF256, nsym: int, first_root: int = first_consec_root):
        if not 1 <= nsym < max_codeword_len:
            raise ValueError(f"nsym must be in [1, {max_codeword_len - 1}], got {nsym}")
        self.field = field
        self.nsym = nsym
        self.first_root = first_root
        self._gen: Optional[List[int]] = None

    @property
    def generator(self) -> List[int]:
        # highest-order first, leading coefficient 1
        if self._gen is None:
            g = [1]
            for i in range(self.nsym):
                root = self.field.pow_alpha(self.first_root + i)
                # (x - root) == (x + root) in GF(2^m)
                g = self.field.poly_mul(g, [1, root])
            self._gen = g
        return self._gen

    def encode(self, data: Sequence[int]) -> List[int]:
        # remainder of x^nsym * m(x) mod g(x), via LFSR
        # parity[0] is the highest-order term, parity[-1] the x^0 term
        if len(data) + self.nsym > max_codeword_len:
            raise ValueError(
                f"{len(data)} data + {self.nsym} ecc codewords exceed RS block length {max_codeword_len}"
            )
        gen = self.generator
        gf = self.field
        nsym = self.nsym
        parity = [0] * nsym
        for b in data:
            feedback = b ^ parity[0]
            parity = parity[1:] + [0]
            if feedback != 0:
                for i in range(nsym):
                    coef = gen[i + 1]
                    if coef:
                        parity[i] ^= gf.mul(coef, feedback)
        return parity

    def syndromes(self, codeword: Sequence[int]) -> List[int]:
        # S_j = c(alpha^(B+j)); all zeros for an uncorrupted codeword
        return [
            self.field.poly_eval(list(codeword), self.field.pow_alpha(self.first_root + j))
            for j in range(self.nsym)
        ]

    def __repr__(self) -> str:
        return f"ReedSolomonEncoder(nsym={self.nsym}, field={self.field!r})"


class RSEncoderCache:
    """Encoders for one field, keyed by ECC length and populated lazily.

    Not synchronised: share an instance between threads only behind a lock.
    """

    def __init__(self, field: GF256 = DATAMATRIX_FIELD):
        self.field = field
        self._encoders: Dict[int, ReedSolomonEncoder] = {}

    def get(self, nsym: int) -> ReedSolomonEncoder:
        enc = self._encoders.get(nsym)
        if enc is None:
            logger.debug("building RS generator for nsym=%d", nsym)
            enc = ReedSolomonEncoder(self.field, nsym)
            self._encoders[nsym] = enc
        return enc

    def __contains__(self, nsym: int) -> bool:
        return nsym in self._encoders

    def __len__(self) -> int:
        return len(self._encoders)


DEFAULT_RS_CACHE = RSEncoderCache(DATAMATRIX_FIELD)


def rs_encode(data: Sequence[int], nsym: int, cache: Optional[RSEncoderCache] = None) -> List[int]:
    # convenience: data || ecc as a new list
    cache = cache if cache is not None else DEFAULT_RS_CACHE
    return list(data) + cache.get(nsym).encode(data)


if __name__ == "__main__":
    import random
    import reedsolo  # pip install reedsolo

    random.seed(69)
    total = 0
    bad = 0
    for nsym in (5, 7, 10, 12, 14, 18, 20, 24, 28, 36, 42, 48, 56, 62, 68):
        RS = reedsolo.RSCodec(
            nsym,
            nsize=max_codeword_len,
            c_exp=8,
            generator=DATAMATRIX_FIELD.generator,
            fcr=first_consec_root,
            prim=DATAMATRIX_FIELD.prim_poly,
        )
        for _ in range(50):
            msg = [random.randrange(256) for _ in range(random.randint(1, 255 - nsym))]
            total += 1
            want = list(RS.encode(bytes(msg)))
            got = rs_encode(msg, nsym)
            if want != got:
                bad += 1
                print(f"[FAIL] nsym={nsym} len={len(msg)}")

    print("\n=== SUMMARY ===")
    print(f"Total oracle equality checks: {total}, mismatches: {bad}")
