# ecc200/model/render.py
# Raster output for a module matrix
# PNG goes through matplotlib (same stack as the visualiser), one dark module
# becomes a scale x scale block of black pixels, surrounded by a light quiet zone.

from pathlib import Path
from typing import Union

import numpy as np

QUIET_ZONE_DEFAULT = 1
SCALE_DEFAULT = 8


def to_pixels(matrix: np.ndarray, scale: int = SCALE_DEFAULT, quiet_zone: int = QUIET_ZONE_DEFAULT) -> np.ndarray:
    if scale < 1:
        raise ValueError(f"scale must be >= 1 (got {scale})")
    if quiet_zone < 0:
        raise ValueError(f"quiet zone must be >= 0 (got {quiet_zone})")
    padded = np.pad(matrix.astype(np.uint8), quiet_zone, mode="constant", constant_values=0)
    return np.kron(padded, np.ones((scale, scale), dtype=np.uint8))


def save_png(
    matrix: np.ndarray,
    path: Union[str, Path],
    scale: int = SCALE_DEFAULT,
    quiet_zone: int = QUIET_ZONE_DEFAULT,
) -> Path:
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pixels = to_pixels(matrix, scale, quiet_zone)
    # dark module -> black pixel
    plt.imsave(str(path), pixels, cmap="gray_r", vmin=0, vmax=1, format="png")
    return path


def to_text(matrix: np.ndarray, dark: str = "##", light: str = "  ") -> str:
    return "\n".join("".join(dark if v else light for v in row) for row in matrix)
