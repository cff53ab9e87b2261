import random

import pytest
import reedsolo

from ecc200.model.galois import DATAMATRIX_FIELD
from ecc200.model.reed_solomon import (
    DEFAULT_RS_CACHE,
    RSEncoderCache,
    ReedSolomonEncoder,
    rs_encode,
)
from ecc200.model.symbol_sizes import SYMBOL_SIZES


def _oracle(nsym: int) -> reedsolo.RSCodec:
    return reedsolo.RSCodec(nsym, nsize=255, c_exp=8, generator=2, fcr=1, prim=0x12D)


def test_iso_example_123456():
    # "123456" in a 10x10 symbol: data 142 164 186 -> ecc 114 25 5 88 102
    enc = ReedSolomonEncoder(DATAMATRIX_FIELD, 5)
    assert enc.encode([142, 164, 186]) == [114, 25, 5, 88, 102]


@pytest.mark.parametrize("nsym", sorted({info.ecc for info in SYMBOL_SIZES}))
def test_matches_reedsolo_oracle(nsym):
    rng = random.Random(nsym)
    rs = _oracle(nsym)
    enc = RSEncoderCache().get(nsym)
    for length in (1, 3, 17, 255 - nsym):
        msg = [rng.randrange(256) for _ in range(length)]
        assert msg + enc.encode(msg) == list(rs.encode(bytes(msg)))


def test_output_length_is_nsym():
    enc = ReedSolomonEncoder(DATAMATRIX_FIELD, 12)
    assert len(enc.encode([])) == 12
    assert enc.encode([]) == [0] * 12
    assert len(enc.encode([1] * 100)) == 12


def test_systematic_remainder_is_zero():
    gf = DATAMATRIX_FIELD
    rng = random.Random(7)
    for nsym in (5, 28, 68):
        enc = ReedSolomonEncoder(gf, nsym)
        data = [rng.randrange(256) for _ in range(40)]
        codeword = data + enc.encode(data)
        assert gf.poly_mod(codeword, enc.generator) == [0] * nsym
        assert enc.syndromes(codeword) == [0] * nsym


def test_corruption_shows_in_syndromes():
    enc = ReedSolomonEncoder(DATAMATRIX_FIELD, 10)
    data = list(b"DataMatrix")
    codeword = data + enc.encode(data)
    codeword[3] ^= 0x40
    assert any(enc.syndromes(codeword))


def test_generator_roots_start_at_alpha_1():
    gf = DATAMATRIX_FIELD
    enc = ReedSolomonEncoder(gf, 7)
    gen = enc.generator
    assert len(gen) == 8
    assert gen[0] == 1
    for i in range(1, 8):
        assert gf.poly_eval(gen, gf.pow_alpha(i)) == 0
    assert gf.poly_eval(gen, gf.pow_alpha(0)) != 0


def test_generator_built_once():
    enc = ReedSolomonEncoder(DATAMATRIX_FIELD, 18)
    assert enc.generator is enc.generator


def test_cache_reuses_encoders():
    cache = RSEncoderCache()
    assert 36 not in cache
    first = cache.get(36)
    assert cache.get(36) is first
    assert 36 in cache
    assert len(cache) == 1
    assert cache.get(42) is not first


def test_rs_encode_uses_default_cache():
    out = rs_encode([142, 164, 186], 5)
    assert out == [142, 164, 186, 114, 25, 5, 88, 102]
    assert 5 in DEFAULT_RS_CACHE


def test_rejects_bad_parameters():
    with pytest.raises(ValueError):
        ReedSolomonEncoder(DATAMATRIX_FIELD, 0)
    with pytest.raises(ValueError):
        ReedSolomonEncoder(DATAMATRIX_FIELD, 255)
    with pytest.raises(ValueError, match="exceed"):
        ReedSolomonEncoder(DATAMATRIX_FIELD, 10).encode([0] * 246)
