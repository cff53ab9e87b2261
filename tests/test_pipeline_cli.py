import json

import pytest

from ecc200.model import pipeline
from ecc200.model.pipeline import run_pipeline, verify_blocks
from ecc200.model.pipeline_visualizer import generate_visualizations
from ecc200.scripts import gen_vectors


def test_text_end_to_end(tmp_path, capsys):
    out = tmp_path / "hello.bin"
    png = tmp_path / "hello.png"
    rc = pipeline.main(["--text", "HELLO", "--out", str(out), "--png", str(png), "--verify"])
    assert rc == 0
    assert out.read_bytes()[:5] == bytes([0x49, 0x46, 0x4D, 0x4D, 0x50])
    assert len(out.read_bytes()) == 12
    assert png.exists()
    captured = capsys.readouterr().out
    assert "selected symbol 12x12" in captured
    assert "[PASS] RS block 0" in captured


def test_segments_switch_modes(capsys):
    rc = pipeline.main(["--segment", "c40:AIM", "--segment", "ascii:x", "--show"])
    assert rc == 0
    captured = capsys.readouterr().out
    assert "E6 5B 0B FE 79" in captured


def test_hex_input_multi_block_verify(capsys):
    payload = " ".join("41" for _ in range(300))
    rc = pipeline.main(["--hex", payload, "--verify"])
    assert rc == 0
    captured = capsys.readouterr().out
    assert "selected symbol 72x72" in captured
    assert captured.count("[PASS]") == 4


def test_x12_error_exit_code(capsys):
    assert pipeline.main(["--segment", "x12:AB!"]) == 2
    assert "0x21" in capsys.readouterr().err


def test_strict_overflow_exit_code(capsys):
    assert pipeline.main(["--text", "a" * 1305, "--strict"]) == 2
    assert "1305" in capsys.readouterr().err


def test_wide_character_exit_code(capsys):
    assert pipeline.main(["--text", "€"]) == 2


def test_bad_hex_exits():
    with pytest.raises(SystemExit) as exc:
        pipeline.main(["--hex", "zz"])
    assert exc.value.code == 2


def test_bad_segment_rejected():
    with pytest.raises(SystemExit):
        pipeline.main(["--segment", "base256:abc"])


def test_run_pipeline_stages():
    enc, stages = run_pipeline([("ascii", b"A")])
    assert stages["packed"] == [0x42]
    assert stages["sized"] == [0x42]
    assert stages["padded"] == [0x42, 0x81, 0x46]
    assert stages["final"] == enc.codewords
    assert stages["truncated"] == 0
    assert verify_blocks(enc.codewords, enc.symbol) == [True]

    broken = list(enc.codewords)
    broken[-1] ^= 1
    assert verify_blocks(broken, enc.symbol) == [False]


def test_save_figs(tmp_path, capsys):
    prefix = str(tmp_path / "dm")
    assert pipeline.main(["--text", "figures", "--save-figs", prefix]) == 0
    assert (tmp_path / "dm_1_codewords.png").exists()
    assert (tmp_path / "dm_2_symbol.png").exists()


def test_generate_visualizations_returns_names(tmp_path):
    enc, stages = run_pipeline([("text", b"plots")])
    names = generate_visualizations(stages, enc.symbol, enc.to_matrix(), str(tmp_path / "v"), dpi=50)
    assert names == [str(tmp_path / "v_1_codewords.png"), str(tmp_path / "v_2_symbol.png")]


def test_gen_vectors(tmp_path):
    out_dir = tmp_path / "vectors"
    rc = gen_vectors.main(["--text", "123456", "--stage", "padded", "--stage", "ecc",
                           "--stage", "matrix", "--out-dir", str(out_dir)])
    assert rc == 0

    ecc_out = [int(h, 16) for h in (out_dir / "ecc" / "output.hex").read_text().split()]
    assert len(ecc_out) == 8 + 10
    assert ecc_out[:6] == [b + 1 for b in b"123456"]

    meta = json.loads((out_dir / "ecc" / "metadata.json").read_text())
    assert meta["ecc_per_block"] == 10
    assert meta["blocks"] == 1

    matrix_lines = (out_dir / "matrix" / "output.hex").read_text().splitlines()
    assert len(matrix_lines) == 14
    assert all(len(line.split()) == 14 for line in matrix_lines)

    summary = json.loads((out_dir / "vector_summary.json").read_text())
    assert summary["symbol"] == "14x14"
    assert summary["stages"] == ["padded", "ecc", "matrix"]
    assert (out_dir / "padded" / "input.hex").exists()
