#!/usr/bin/env python3

# Golden model pipeline runner:
# input -> codeword packing (ASCII/C40/Text/X12) -> symbol sizing
#       -> padding -> RS ECC (+ block interleaving) -> module matrix -> output

# examples:
#   python -m ecc200.model.pipeline --text "HELLO WORLD" --mode c40
#   python -m ecc200.model.pipeline --segment c40:ABC --segment ascii:xyz --png out.png
#   python -m ecc200.model.pipeline --infile input.bin --out out.bin --verify


# Notes:
# - payloads above 1304 codewords keep only their trailing 1304 codewords
#   unless --strict is given
# - --verify re-encodes every RS block with the reedsolo oracle


import argparse
import logging
import sys
from typing import List, Optional, Sequence, Tuple

from ecc200.model.encoder import DataMatrixEncoder, Encoding
from ecc200.model.errors import DataMatrixError
from ecc200.model.galois import DATAMATRIX_FIELD
from ecc200.model.helpers import hex_line, parse_hex
from ecc200.model.interleaver import block_codewords
from ecc200.model.reed_solomon import first_consec_root, max_codeword_len
from ecc200.model.render import QUIET_ZONE_DEFAULT, SCALE_DEFAULT, save_png, to_text
from ecc200.model.symbol_sizes import SymbolInfo

MODE_CHOICES = [m.name.lower() for m in Encoding]


def _read_input(args: argparse.Namespace) -> bytes:
    if args.text is not None:
        return args.text.encode("latin-1", errors="strict")
    if args.hex is not None:
        try:
            return parse_hex(args.hex)
        except ValueError:
            print("Error: --hex contains non-hex characters.", file=sys.stderr)
            sys.exit(2)
    if args.infile is not None:
        with open(args.infile, "rb") as f:
            return f.read()
    # Fallback: read from stdin as text
    data = sys.stdin.read()
    if not data:
        print("No input provided. Use --text/--hex/--infile/--segment or pipe data via stdin.", file=sys.stderr)
        sys.exit(2)
    return data.encode("latin-1")


def _parse_segment(value: str) -> Tuple[str, str]:
    """Parse 'MODE:TEXT' into (mode, text); TEXT may contain further colons."""
    mode, sep, text = value.partition(":")
    mode = mode.strip().lower()
    if not sep or mode not in MODE_CHOICES:
        raise argparse.ArgumentTypeError(
            f"segment must look like MODE:TEXT with MODE in {MODE_CHOICES} (got {value!r})"
        )
    return mode, text


def verify_blocks(codewords: Sequence[int], symbol: SymbolInfo) -> List[bool]:
    # independent check of each interleaved block against the reedsolo oracle
    import reedsolo

    RS = reedsolo.RSCodec(
        symbol.ecc,
        nsize=max_codeword_len,
        c_exp=8,
        generator=DATAMATRIX_FIELD.generator,
        fcr=first_consec_root,
        prim=DATAMATRIX_FIELD.prim_poly,
    )
    results = []
    for blk in block_codewords(codewords, symbol.capacity, symbol.blocks):
        data = bytes(blk[:symbol.block_capacity])
        results.append(list(RS.encode(data)) == list(blk))
    return results


def run_pipeline(
    segments: Sequence[Tuple[str, bytes]],
    truncate: bool = True,
) -> Tuple[DataMatrixEncoder, dict]:
    # returns the finished encoder and intermediate stages for printing/plots
    enc = DataMatrixEncoder()
    for mode, data in segments:
        enc.encode(mode, data)
    packed = list(enc.codewords)

    enc.select_symbol_dimensions(truncate=truncate)
    sized = list(enc.codewords)
    symbol = enc.symbol

    enc.generate_ecc()
    stages = {
        "packed": packed,
        "sized": sized,
        "padded": enc.codewords[:symbol.capacity],
        "final": list(enc.codewords),
        "truncated": enc.truncated,
    }
    return enc, stages


def main(argv: Optional[list] = None) -> int:
    p = argparse.ArgumentParser(description="Run the DataMatrix ECC200 golden pipeline.")
    src = p.add_mutually_exclusive_group()
    src.add_argument("--text", help="Text input (characters U+0000..U+00FF).")
    src.add_argument("--hex", help="Hex string input (spaces allowed).")
    src.add_argument("--infile", help="Binary input file.")
    src.add_argument("--segment", action="append", type=_parse_segment, metavar="MODE:TEXT",
                     help="Encode TEXT in MODE; repeat to switch modes within one symbol.")
    p.add_argument("--mode", default="ascii", choices=MODE_CHOICES,
                   help="Compaction mode for --text/--hex/--infile input (default: ascii).")
    p.add_argument("--strict", action="store_true",
                   help="Fail instead of dropping leading codewords when the payload exceeds 1304 codewords.")
    p.add_argument("--out", help="Write the final codeword stream (binary) to this file.")
    p.add_argument("--png", help="Write the symbol image to this PNG file.")
    p.add_argument("--scale", type=int, default=SCALE_DEFAULT,
                   help=f"Pixels per module for --png (default: {SCALE_DEFAULT}).")
    p.add_argument("--quiet-zone", type=int, default=QUIET_ZONE_DEFAULT,
                   help=f"Light modules around the symbol for --png (default: {QUIET_ZONE_DEFAULT}).")
    p.add_argument("--show", action="store_true", help="Print the module matrix as text.")
    p.add_argument("--verify", action="store_true",
                   help="Check every RS block against the reedsolo oracle.")
    p.add_argument("--save-figs", metavar="PREFIX",
                   help="Save visualization figures with this prefix (e.g., 'dm' -> 'dm_1_codewords.png').")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.segment:
            segments = [(mode, text.encode("latin-1")) for mode, text in args.segment]
        else:
            segments = [(args.mode, _read_input(args))]
    except UnicodeEncodeError as e:
        print(f"Error: input character outside the 8-bit range: {e}", file=sys.stderr)
        return 2

    try:
        enc, stages = run_pipeline(segments, truncate=not args.strict)
    except DataMatrixError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    symbol = enc.symbol
    for mode, data in segments:
        print(f"segment {mode} (size = {len(data)}) = {data.decode('latin-1')!r}")
    print()
    print(f"packed codewords (size = {len(stages['packed'])}) =")
    print(hex_line(stages["packed"]))
    print()
    print(f"selected symbol {symbol}: capacity={symbol.capacity} ecc={symbol.ecc} "
          f"region={symbol.edge_length} tiling={symbol.tiling} blocks={symbol.blocks}")
    if stages["truncated"]:
        print(f"Warning: dropped the first {stages['truncated']} codewords to fit the largest symbol.")
    print()
    print(f"padded data codewords (size = {len(stages['padded'])}) =")
    print(hex_line(stages["padded"]))
    print()
    print(f"final codeword stream (size = {len(stages['final'])}) =")
    print(hex_line(stages["final"]))
    print()

    matrix = enc.to_matrix()
    if args.show:
        print(to_text(matrix))
        print()

    if args.out:
        with open(args.out, "wb") as f:
            f.write(enc.to_bytes())

    if args.png:
        path = save_png(matrix, args.png, scale=args.scale, quiet_zone=args.quiet_zone)
        print(f"[OK] Wrote symbol image to {path}")

    status = 0
    if args.verify:
        try:
            results = verify_blocks(enc.codewords, symbol)
        except ImportError as e:
            print(f"\nWarning: verifier unavailable - {e}", file=sys.stderr)
            print("Install reedsolo to enable oracle verification.", file=sys.stderr)
        else:
            for b, ok in enumerate(results):
                print(f"[{'PASS' if ok else 'FAIL'}] RS block {b}")
            if not all(results):
                status = 1

    if args.save_figs:
        try:
            from ecc200.model.pipeline_visualizer import generate_visualizations
            generate_visualizations(stages, symbol, matrix, args.save_figs)
        except ImportError as e:
            print(f"\nWarning: visualizer unavailable - {e}", file=sys.stderr)

    return status


if __name__ == "__main__":
    raise SystemExit(main())
