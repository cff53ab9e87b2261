#!/usr/bin/env python3
"""Generate stage-by-stage reference vectors from the Python golden model.

Vectors let other DataMatrix implementations (firmware, other languages) be
checked stage by stage: codeword packing, padding, Reed-Solomon/interleaving
and the final module matrix, using exactly the configuration of the pipeline.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable, Sequence

from ecc200.model.helpers import parse_hex
from ecc200.model.pipeline import MODE_CHOICES, run_pipeline

STAGES = ["packed", "padded", "ecc", "matrix"]


def _read_input(args: argparse.Namespace) -> bytes:
    if args.text is not None:
        return args.text.encode("latin-1")
    if args.hex is not None:
        return parse_hex(args.hex)
    if args.infile is not None:
        return Path(args.infile).read_bytes()
    raise SystemExit("Provide --text/--hex/--infile for vector generation")


def _write_hex_file(path: Path, data: Sequence[int], per_line: int = 16) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        for idx in range(0, len(data), per_line):
            chunk = data[idx : idx + per_line]
            f.write(" ".join(f"{b:02X}" for b in chunk))
            f.write("\n")


def _emit_stage(out_dir: Path, stage: str, stage_in: Sequence[int], stage_out: Sequence[int],
                meta: dict, per_line: int = 16) -> None:
    stage_dir = out_dir / stage
    stage_dir.mkdir(parents=True, exist_ok=True)
    _write_hex_file(stage_dir / "input.hex", stage_in)
    _write_hex_file(stage_dir / "output.hex", stage_out, per_line)
    with (stage_dir / "metadata.json").open("w", encoding="utf-8") as f:
        json.dump(meta, f, indent=2)


def generate_vectors(args: argparse.Namespace) -> int:
    data = _read_input(args)
    enc, stages = run_pipeline([(args.mode, data)], truncate=not args.strict)
    symbol = enc.symbol
    matrix = enc.to_matrix()

    # one row of modules per line, 00 = light, 01 = dark
    matrix_flat = [int(v) for v in matrix.flatten()]

    stage_map: dict[str, tuple[Sequence[int], Sequence[int], dict, int]] = {
        "packed": (list(data), stages["packed"], {"mode": args.mode}, 16),
        "padded": (stages["sized"], stages["padded"],
                   {"capacity": symbol.capacity, "truncated": stages["truncated"]}, 16),
        "ecc": (stages["padded"], stages["final"],
                {"ecc_per_block": symbol.ecc, "blocks": symbol.blocks,
                 "block_size": symbol.block_size, "prim_poly": "0x12D", "fcr": 1}, 16),
        "matrix": (stages["final"], matrix_flat,
                   {"symbol_size": symbol.symbol_size, "region": symbol.edge_length,
                    "tiling": symbol.tiling}, symbol.symbol_size),
    }

    out_dir = Path(args.out_dir)
    stages_wanted = args.stage or ["ecc"]
    for stage in stages_wanted:
        if stage not in stage_map:
            raise SystemExit(f"Unknown stage '{stage}'. Choices: {sorted(stage_map)}")
        stage_in, stage_out, meta, per_line = stage_map[stage]
        _emit_stage(out_dir, stage, stage_in, stage_out, meta, per_line)
        print(f"[OK] Wrote {stage} vectors to {out_dir / stage}")

    summary = {
        "input_len": len(data),
        "mode": args.mode,
        "codewords": len(stages["packed"]),
        "symbol": str(symbol),
        "capacity": symbol.capacity,
        "total_codewords": symbol.total_codewords,
        "stages": stages_wanted,
    }
    out_dir.mkdir(parents=True, exist_ok=True)
    with (out_dir / "vector_summary.json").open("w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2)
    print(f"[OK] Summary written to {out_dir / 'vector_summary.json'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Generate DataMatrix reference vectors from the golden model")
    src = p.add_mutually_exclusive_group()
    src.add_argument("--text", help="Text input (characters U+0000..U+00FF)")
    src.add_argument("--hex", help="Hex string input (spaces allowed)")
    src.add_argument("--infile", help="Binary input file")
    p.add_argument("--mode", default="ascii", choices=MODE_CHOICES, help="Compaction mode")
    p.add_argument("--strict", action="store_true", help="Fail on payloads above the largest symbol")
    p.add_argument("--stage", action="append", choices=STAGES,
                   help="Which pipeline stage(s) to emit (may be specified multiple times). Default: ecc")
    p.add_argument("--out-dir", default="vectors", help="Destination directory for generated files")
    return p


def main(argv: Iterable[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return generate_vectors(args)


if __name__ == "__main__":
    raise SystemExit(main())
