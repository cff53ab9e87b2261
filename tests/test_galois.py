import pytest

from ecc200.model.errors import GaloisFieldError
from ecc200.model.galois import DATAMATRIX_FIELD, GF256


def test_tables_are_inverse():
    gf = DATAMATRIX_FIELD
    for x in range(1, 256):
        assert gf.antilog(gf.log_of(x)) == x
    assert sorted(gf.exp[:255]) == list(range(1, 256))


def test_mul_by_inverse_is_one():
    gf = DATAMATRIX_FIELD
    for x in range(1, 256):
        assert gf.mul(x, gf.div(1, x)) == 1
        assert gf.inverse(x) == gf.div(1, x)


def test_reduction_uses_0x12d():
    gf = DATAMATRIX_FIELD
    # alpha^8 = x^8 mod (x^8 + x^5 + x^3 + x^2 + 1) = x^5 + x^3 + x^2 + 1
    assert gf.pow_alpha(8) == 0x2D
    assert gf.pow_alpha(255) == 1
    assert gf.mul(0x80, 2) == 0x2D


def test_mul_commutes_and_distributes():
    gf = DATAMATRIX_FIELD
    for a, b, c in [(3, 7, 200), (0x53, 0xCA, 0x11), (255, 254, 1)]:
        assert gf.mul(a, b) == gf.mul(b, a)
        assert gf.mul(a, b ^ c) == gf.mul(a, b) ^ gf.mul(a, c)


def test_zero_handling():
    gf = DATAMATRIX_FIELD
    assert gf.mul(0, 77) == 0
    assert gf.div(0, 77) == 0
    with pytest.raises(ZeroDivisionError):
        gf.div(5, 0)
    with pytest.raises(ValueError):
        gf.log_of(0)


def test_rejects_non_primitive_generator():
    # alpha^3 only has order 85
    with pytest.raises(GaloisFieldError):
        GF256(0x12D, 8)
    with pytest.raises(GaloisFieldError):
        GF256(0x2D, 2)


def test_other_fields_differ():
    qr = GF256(0x11D, 2)
    assert qr.pow_alpha(8) == 0x1D
    assert qr.pow_alpha(8) != DATAMATRIX_FIELD.pow_alpha(8)


def test_poly_helpers():
    gf = DATAMATRIX_FIELD
    # (x + 1)(x + 2) = x^2 + 3x + 2
    assert gf.poly_mul([1, 1], [1, 2]) == [1, 3, 2]
    assert gf.poly_eval([1, 3, 2], 1) == 0
    assert gf.poly_eval([1, 3, 2], 2) == 0
    assert gf.poly_mod([1, 3, 2], [1, 1]) == [0]
