#!/usr/bin/env python3
"""
Visualization tool for the DataMatrix pipeline
Generates separate focused figures for each processing stage
"""

import argparse
import sys
from typing import List, Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.gridspec import GridSpec

from ecc200.model.helpers import bits_from_bytes
from ecc200.model.placement import DEFAULT_LAYOUT_CACHE
from ecc200.model.symbol import mapping_to_symbol
from ecc200.model.symbol_sizes import SymbolInfo


def plot_byte_histogram(ax, data, title: str, color='steelblue'):
    """Plot histogram of codeword values"""
    values = np.asarray(data, dtype=np.uint8)
    ax.hist(values, bins=256, range=(0, 256), alpha=0.7, edgecolor='black', color=color)
    ax.set_xlabel('Codeword Value')
    ax.set_ylabel('Count')
    ax.set_title(title)
    ax.grid(True, alpha=0.3)

    if len(values):
        ax.text(0.98, 0.98, f'μ={np.mean(values):.1f}\nσ={np.std(values):.1f}',
                transform=ax.transAxes, ha='right', va='top',
                bbox=dict(boxstyle='round', facecolor='wheat', alpha=0.5))


def plot_bit_transitions(ax, bits: List[int], title: str, max_bits: int = 2000):
    """Plot bit transitions over the codeword stream"""
    plot_bits = np.asarray(bits[:min(len(bits), max_bits)])
    ax.step(range(len(plot_bits)), plot_bits, where='post', linewidth=0.8)
    ax.set_xlabel('Bit Index')
    ax.set_ylabel('Bit Value')
    ax.set_title(title)
    ax.set_ylim(-0.1, 1.1)
    ax.grid(True, alpha=0.3)

    transitions = int(np.sum(np.abs(np.diff(plot_bits)))) if len(plot_bits) > 1 else 0
    ax.text(0.98, 0.98, f'Transitions: {transitions}',
            transform=ax.transAxes, ha='right', va='top',
            bbox=dict(boxstyle='round', facecolor='wheat', alpha=0.5))


def plot_stream_layout(ax, final: List[int], packed_len: int, symbol: SymbolInfo):
    """Codeword values coloured by role: payload, padding, ecc"""
    idx = np.arange(len(final))
    values = np.asarray(final)
    payload = idx < min(packed_len, symbol.capacity)
    padding = (idx >= packed_len) & (idx < symbol.capacity)
    ecc = idx >= symbol.capacity
    ax.bar(idx[payload], values[payload], width=1.0, color='steelblue', label='payload')
    ax.bar(idx[padding], values[padding], width=1.0, color='orange', label='padding')
    ax.bar(idx[ecc], values[ecc], width=1.0, color='crimson', label='ecc')
    ax.set_xlabel('Codeword Index')
    ax.set_ylabel('Value')
    ax.set_title(f'Codeword Stream ({symbol.capacity} data + {symbol.ecc * symbol.blocks} ecc)')
    ax.legend(loc='upper right')
    ax.grid(True, alpha=0.3)


def plot_block_map(ax, symbol: SymbolInfo):
    """Which RS block owns each position of the interleaved stream"""
    idx = np.arange(symbol.total_codewords)
    block = np.where(idx < symbol.capacity, idx % symbol.blocks, (idx - symbol.capacity) % symbol.blocks)
    cols = 64
    rows = (len(idx) + cols - 1) // cols
    grid = np.full(rows * cols, np.nan)
    grid[:len(idx)] = block
    im = ax.imshow(grid.reshape(rows, cols), aspect='auto', cmap='tab10', interpolation='nearest')
    ax.set_title(f'Interleaved Block Ownership ({symbol.blocks} blocks)')
    ax.set_xlabel('Position % 64')
    ax.set_ylabel('Position // 64')
    plt.colorbar(im, ax=ax, label='Block')


def plot_symbol(ax, matrix: np.ndarray, symbol: SymbolInfo):
    ax.imshow(matrix, cmap='gray_r', interpolation='nearest')
    span = symbol.edge_length + 2
    for t in range(1, symbol.tiling):
        ax.axhline(t * span - 0.5, color='red', linewidth=0.8, alpha=0.6)
        ax.axvline(t * span - 0.5, color='red', linewidth=0.8, alpha=0.6)
    ax.set_title(f'{symbol} Symbol ({symbol.tiling}x{symbol.tiling} regions)')
    ax.set_xticks([])
    ax.set_yticks([])


def plot_placement(ax, matrix: np.ndarray, symbol: SymbolInfo):
    """Codeword index of every data module"""
    layout = DEFAULT_LAYOUT_CACHE.get(symbol.mapping_size)
    owner = np.full(matrix.shape, np.nan)
    for key, (r, c) in enumerate(layout.positions[:symbol.total_codewords * 8]):
        owner[mapping_to_symbol(r, c, symbol.edge_length)] = key // 8
    im = ax.imshow(owner, cmap='viridis', interpolation='nearest')
    ax.set_title('Module Placement (codeword index)')
    ax.set_xticks([])
    ax.set_yticks([])
    plt.colorbar(im, ax=ax, label='Codeword')


def create_codeword_figure(stages: dict, symbol: SymbolInfo):
    """Figure 1: packing, padding and ECC"""
    fig = plt.figure(figsize=(16, 10))
    gs = GridSpec(2, 2, figure=fig, hspace=0.3, wspace=0.3)

    ax = fig.add_subplot(gs[0, 0])
    plot_byte_histogram(ax, stages["padded"], 'Padded Data Codewords', 'steelblue')

    ax = fig.add_subplot(gs[0, 1])
    plot_byte_histogram(ax, stages["final"][symbol.capacity:], 'ECC Codewords', 'crimson')

    ax = fig.add_subplot(gs[1, 0])
    plot_bit_transitions(ax, bits_from_bytes(stages["final"]), 'Final Stream Bit Pattern')

    ax = fig.add_subplot(gs[1, 1])
    plot_stream_layout(ax, stages["final"], len(stages["sized"]), symbol)

    fig.suptitle('Stage 1: Codeword Packing, Padding & Reed-Solomon', fontsize=14, fontweight='bold')
    return fig


def create_symbol_figure(matrix: np.ndarray, symbol: SymbolInfo):
    """Figure 2: interleaving and module placement"""
    fig = plt.figure(figsize=(18, 6))
    gs = GridSpec(1, 3, figure=fig, wspace=0.3)

    plot_block_map(fig.add_subplot(gs[0, 0]), symbol)
    plot_placement(fig.add_subplot(gs[0, 1]), matrix, symbol)
    plot_symbol(fig.add_subplot(gs[0, 2]), matrix, symbol)

    fig.suptitle('Stage 2: Interleaving & Module Placement', fontsize=14, fontweight='bold')
    return fig


def generate_visualizations(
    stages: dict,
    symbol: SymbolInfo,
    matrix: np.ndarray,
    save_prefix: str,
    dpi: int = 150,
) -> List[str]:
    """Generate and save the stage figures, returns the file names written."""
    print("\nGenerating visualizations...")
    figures = [
        ("1_codewords", create_codeword_figure(stages, symbol)),
        ("2_symbol", create_symbol_figure(matrix, symbol)),
    ]

    written = []
    print(f"\nSaving figures with prefix '{save_prefix}'...")
    for name, fig in figures:
        filename = f"{save_prefix}_{name}.png"
        fig.savefig(filename, dpi=dpi, bbox_inches="tight")
        plt.close(fig)
        written.append(filename)
        print(f"  Saved: {filename}")
    print("\nVisualization complete!")
    return written


def main(argv: Optional[list] = None) -> int:
    from ecc200.model.pipeline import run_pipeline

    p = argparse.ArgumentParser(description="Plot DataMatrix pipeline stages.")
    p.add_argument("--text", required=True, help="Text input (characters U+0000..U+00FF).")
    p.add_argument("--mode", default="ascii", choices=["ascii", "c40", "text", "x12"])
    p.add_argument("--prefix", default="datamatrix", help="Output file prefix.")
    p.add_argument("--dpi", type=int, default=150)
    args = p.parse_args(argv)

    enc, stages = run_pipeline([(args.mode, args.text.encode("latin-1"))])
    generate_visualizations(stages, enc.symbol, enc.to_matrix(), args.prefix, dpi=args.dpi)
    return 0


if __name__ == "__main__":
    sys.exit(main())
