# ecc200/model/galois.py
# GF(2^8) arithmetic for DataMatrix ECC200
# Field: p(x) = x^8 + x^5 + x^3 + x^2 + 1 -> 0x12D (301), generator element alpha = 2
# Note: QR codes use 0x11D and CCSDS uses 0x187, so the tables are not interchangeable
#
# All Reed-Solomon math in the package goes through an instance of GF256.
# Tables are built once in the constructor and never written afterwards.

from typing import List

from ecc200.model.errors import GaloisFieldError

FIELD_SIZE = 256
DATAMATRIX_PRIM_POLY = 0x12D
DATAMATRIX_GENERATOR = 2


def _carryless_mul(a: int, b: int, prim_poly: int) -> int:
    # shift-and-add multiplication, reduced mod prim_poly
    # only used while the tables are being built
    out = 0
    while b:
        if b & 1:
            out ^= a
        b >>= 1
        a <<= 1
        if a & FIELD_SIZE:
            a ^= prim_poly
    return out


class GF256:
    """Finite field with 256 elements, backed by log/antilog tables.

    ``prim_poly`` is the reduction polynomial including the x^8 term and
    ``generator`` the element whose powers enumerate the 255 nonzero values.
    """

    def __init__(self, prim_poly: int = DATAMATRIX_PRIM_POLY, generator: int = DATAMATRIX_GENERATOR):
        if not FIELD_SIZE <= prim_poly < 2 * FIELD_SIZE:
            raise GaloisFieldError(f"primitive polynomial 0x{prim_poly:X} must have degree 8")
        if not 1 < generator < FIELD_SIZE:
            raise GaloisFieldError(f"generator {generator} outside field")
        self.prim_poly = prim_poly
        self.generator = generator
        self.order = FIELD_SIZE - 1
        self.exp = [0] * (2 * self.order)   # duplicated to avoid mod 255 in mul
        self.log = [0] * FIELD_SIZE         # log(0) undefined, kept at 0
        self._build_tables()

    def _build_tables(self) -> None:
        x = 1
        seen = set()
        for i in range(self.order):
            if x in seen:
                raise GaloisFieldError(
                    f"generator {self.generator} has order {i} under 0x{self.prim_poly:X}, not {self.order}"
                )
            seen.add(x)
            self.exp[i] = x
            self.log[x] = i
            x = _carryless_mul(x, self.generator, self.prim_poly)
        for i in range(self.order, 2 * self.order):
            self.exp[i] = self.exp[i - self.order]

    def add(self, a: int, b: int) -> int:
        return a ^ b

    def mul(self, a: int, b: int) -> int:
        if a == 0 or b == 0:
            return 0
        return self.exp[self.log[a] + self.log[b]]

    def div(self, a: int, b: int) -> int:
        if b == 0:
            raise ZeroDivisionError("GF256 div by 0")
        if a == 0:
            return 0
        return self.exp[(self.log[a] - self.log[b]) % self.order]

    def inverse(self, a: int) -> int:
        return self.div(1, a)

    def log_of(self, a: int) -> int:
        if a == 0:
            raise ValueError("log(0) is undefined in GF256")
        return self.log[a]

    def antilog(self, i: int) -> int:
        return self.exp[i % self.order]

    def pow_alpha(self, i: int) -> int:
        # generator^i
        return self.antilog(i)

    def poly_mul(self, p: List[int], q: List[int]) -> List[int]:
        # coefficients highest-order first
        out = [0] * (len(p) + len(q) - 1)
        for i, a in enumerate(p):
            if a == 0:
                continue
            for j, b in enumerate(q):
                if b == 0:
                    continue
                out[i + j] ^= self.mul(a, b)
        return out

    def poly_mod(self, dividend: List[int], divisor: List[int]) -> List[int]:
        # remainder of synthetic division, both highest-order first
        # returns len(divisor) - 1 coefficients
        if not divisor or divisor[0] == 0:
            raise ValueError("divisor must have a nonzero leading coefficient")
        out = list(dividend)
        lead = divisor[0]
        for i in range(len(dividend) - len(divisor) + 1):
            coef = out[i]
            if coef == 0:
                continue
            coef = self.div(coef, lead)
            for j in range(1, len(divisor)):
                if divisor[j] != 0:
                    out[i + j] ^= self.mul(divisor[j], coef)
            out[i] = 0
        return out[len(out) - (len(divisor) - 1):] if len(divisor) > 1 else []

    def poly_eval(self, p: List[int], x: int) -> int:
        # horner, highest-order first
        y = 0
        for coef in p:
            y = self.mul(y, x) ^ coef
        return y

    def __repr__(self) -> str:
        return f"GF256(prim_poly=0x{self.prim_poly:X}, generator={self.generator})"


DATAMATRIX_FIELD = GF256(DATAMATRIX_PRIM_POLY, DATAMATRIX_GENERATOR)
