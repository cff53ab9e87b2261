import numpy as np
import pytest

from ecc200.model.encoder import DataMatrixEncoder, encode_datamatrix
from ecc200.model.placement import DEFAULT_LAYOUT_CACHE, LayoutCache, build_layout
from ecc200.model.render import save_png, to_pixels, to_text
from ecc200.model.symbol import build_matrix, mapping_to_symbol
from ecc200.model.symbol_sizes import SYMBOL_SIZES, by_symbol_size


@pytest.mark.parametrize("info", SYMBOL_SIZES, ids=str)
def test_layout_covers_every_codeword_bit(info):
    n = info.mapping_size
    layout = build_layout(n)
    assert layout.codeword_count == info.total_codewords
    assert len(layout.positions) == 8 * info.total_codewords
    assert len(set(layout.positions)) == len(layout.positions)
    assert all(0 <= r < n and 0 <= c < n for r, c in layout.positions)


@pytest.mark.parametrize("info", SYMBOL_SIZES, ids=str)
def test_unused_corner(info):
    n = info.mapping_size
    layout = build_layout(n)
    spare = n * n - 8 * info.total_codewords
    assert spare in (0, 4)
    assert layout.has_unused_corner == (spare == 4)
    if layout.has_unused_corner:
        covered = set(layout.positions)
        uncovered = {(r, c) for r in range(n) for c in range(n) if (r, c) not in covered}
        assert uncovered == {(n - 2, n - 2), (n - 2, n - 1), (n - 1, n - 2), (n - 1, n - 1)}


def test_bit_order_within_codeword():
    # codeword 0 in an 8x8 matrix: utah at (4, 0), bit 7 (MSB) at the top-left
    layout = build_layout(8)
    assert layout.bit_position(0, 0) == (4, 0)
    assert layout.bit_position(0, 7) == (2, 6)


def test_rejects_odd_or_tiny_sizes():
    with pytest.raises(ValueError):
        build_layout(7)
    with pytest.raises(ValueError):
        build_layout(4)


def test_layout_cache():
    cache = LayoutCache()
    assert 10 not in cache
    first = cache.get(10)
    assert cache.get(10) is first
    assert 10 in cache
    assert len(cache) == 1


class TestMatrix:

    def test_single_region_border(self):
        enc = encode_datamatrix("A")
        m = enc.to_matrix()
        assert m.shape == (10, 10)
        assert m.dtype == np.uint8
        assert m[:, 0].all()
        assert m[-1, :].all()
        np.testing.assert_array_equal(m[0, 0::2], 1)
        np.testing.assert_array_equal(m[0, 1::2], 0)
        np.testing.assert_array_equal(m[1::2, -1], 1)
        np.testing.assert_array_equal(m[0:-1:2, -1], 0)

    def test_tiled_borders(self):
        info = by_symbol_size(32)
        enc = encode_datamatrix(bytes(range(48, 48 + info.capacity)))
        assert enc.symbol == info
        m = enc.to_matrix()
        span = info.edge_length + 2
        for t in range(info.tiling):
            np.testing.assert_array_equal(m[:, t * span], 1)
            np.testing.assert_array_equal(m[t * span + span - 1, :], 1)
            np.testing.assert_array_equal(m[t * span, 1::2], 0)

    @pytest.mark.parametrize("text", ["HELLO", "DataMatrix ECC200 " * 4])
    def test_modules_carry_codeword_bits(self, text):
        enc = encode_datamatrix(text)
        m = enc.to_matrix()
        layout = DEFAULT_LAYOUT_CACHE.get(enc.symbol.mapping_size)
        edge = enc.symbol.edge_length
        for i, cw in enumerate(enc.codewords):
            for j in range(8):
                r, c = layout.bit_position(i, j)
                assert m[mapping_to_symbol(r, c, edge)] == (cw >> j) & 1

    def test_unused_corner_pattern(self):
        # 12x12 has a 10x10 mapping matrix with 4 spare modules
        enc = encode_datamatrix("HELLO")
        assert str(enc.symbol) == "12x12"
        m = enc.to_matrix()
        assert m[10, 10] == 1
        assert m[9, 9] == 1
        assert m[9, 10] == 0
        assert m[10, 9] == 0

    def test_rejects_wrong_codeword_count(self):
        with pytest.raises(ValueError):
            build_matrix([0] * 7, by_symbol_size(10))

    def test_custom_layout_cache(self):
        cache = LayoutCache()
        enc = encode_datamatrix("A")
        enc.layout_cache = cache
        enc.to_matrix()
        assert 8 in cache

    def test_encoder_uses_its_own_layout_cache(self):
        cache = LayoutCache()
        enc = DataMatrixEncoder(layout_cache=cache).encode_ascii("HELLO")
        enc.select_symbol_dimensions().generate_ecc()
        m = enc.to_matrix()
        assert enc.symbol.mapping_size in cache
        assert len(cache) == 1
        np.testing.assert_array_equal(m, build_matrix(enc.codewords, enc.symbol, cache))


class TestRender:

    def test_to_pixels(self):
        m = np.array([[1, 0], [0, 1]], dtype=np.uint8)
        px = to_pixels(m, scale=3, quiet_zone=1)
        assert px.shape == (12, 12)
        assert px[:3, :].sum() == 0
        assert px[3:6, 3:6].all()
        assert not px[3:6, 6:9].any()
        with pytest.raises(ValueError):
            to_pixels(m, scale=0)

    def test_save_png(self, tmp_path):
        import matplotlib.image as mpimg

        m = encode_datamatrix("A").to_matrix()
        path = save_png(m, tmp_path / "sub" / "a.png", scale=4, quiet_zone=2)
        assert path.exists()
        img = mpimg.imread(str(path))
        assert img.shape[:2] == ((10 + 4) * 4, (10 + 4) * 4)

    def test_to_text(self):
        m = np.array([[1, 0], [0, 1]], dtype=np.uint8)
        assert to_text(m, dark="#", light=".") == "#.\n.#"
