# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Source Mesh Maps
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Per-cell yields on an (R,Z) mesh, mesh quality estimates and normalized
source maps for Monte Carlo source definitions (MCNP SDEF cards).
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .integration import CubatureSettings, SourceFunction, toroidal_segment_yield

logger = logging.getLogger(__name__)


def _check_bins(name: str, bins: ArrayLike) -> NDArray[np.float64]:
    arr = np.asarray(bins, dtype=np.float64)
    if arr.ndim != 1 or arr.size < 2:
        raise ValueError(f"{name} must be a 1-D array of at least 2 edges.")
    if np.any(np.diff(arr) <= 0.0):
        raise ValueError(f"{name} must be strictly increasing.")
    return arr


def segment_yield_matrix(
    func: SourceFunction,
    r_bins: ArrayLike,
    z_bins: ArrayLike,
    settings: CubatureSettings | None = None,
) -> NDArray[np.float64]:
    """
    Yield of every mesh cell.

    Entry ``[i, j]`` holds the yield of ``[r_i, r_{i+1}] × [z_j, z_{j+1}]``.
    The array is shaped ``(len(r_bins), len(z_bins))``; its last row and
    column have no cell and stay zero.
    """
    r = _check_bins("r_bins", r_bins)
    z = _check_bins("z_bins", z_bins)
    matrix = np.zeros((r.size, z.size))
    failed = 0
    for i in range(r.size - 1):
        for j in range(z.size - 1):
            res = toroidal_segment_yield(func, r[i:i + 2], z[j:j + 2], settings)
            matrix[i, j] = res.value
            failed += res.fail
    if failed:
        logger.warning("%d of %d mesh cells did not converge", failed, (r.size - 1) * (z.size - 1))
    return matrix


def cell_relative_variance(matrix: NDArray[np.float64], i: int, j: int) -> float:
    """
    Relative spread of the 2×2 block ``matrix[i:i+2, j:j+2]``.

    ``min(1, 4·(max - min) / sum)``; a non-positive sum gives 1.
    """
    block = matrix[i:i + 2, j:j + 2]
    lo, hi = float(np.min(block)), float(np.max(block))
    total = float(np.sum(block))
    if total <= 0.0:
        return 1.0
    return min(1.0, 4.0 * (hi - lo) / total)


def variance_on_mesh(
    func: SourceFunction,
    r_bins: ArrayLike,
    z_bins: ArrayLike,
    settings: CubatureSettings | None = None,
) -> NDArray[np.float64]:
    """
    Relative variance of cell yields, shape ``(len(r_bins)-1, len(z_bins)-1)``.

    Values close to 1 flag the places where the mesh needs refinement.
    """
    matrix = segment_yield_matrix(func, r_bins, z_bins, settings)
    nr, nz = matrix.shape
    out = np.empty((nr - 1, nz - 1))
    for i in range(nr - 1):
        for j in range(nz - 1):
            out[i, j] = cell_relative_variance(matrix, i, j)
    return out


def source_probability_map(
    distribution,
    nr: int,
    nz: int,
    settings: CubatureSettings | None = None,
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    """
    Cell yields over the plasma domain normalized to unit sum.

    Returns
    -------
    (r_bins, z_bins, probabilities)
        ``nr`` and ``nz`` equidistant bin edges and the
        ``(nr, nz)`` probability array laid out as in
        :func:`segment_yield_matrix`.
    """
    if nr < 2 or nz < 2:
        raise ValueError("nr and nz must be >= 2.")
    rmin, rmax, zmin, zmax = distribution.domain()
    r_bins = np.linspace(rmin, rmax, int(nr))
    z_bins = np.linspace(zmin, zmax, int(nz))
    src = segment_yield_matrix(distribution.intensity_at, r_bins, z_bins, settings)
    total = float(np.sum(src))
    if total <= 0.0:
        raise ValueError("Distribution has no neutron source on the mesh.")
    logger.info("Source map %dx%d, total yield %.6e n/s", nr, nz, total)
    return r_bins, z_bins, src / total


def peak_cell(r_bins: Sequence[float], z_bins: Sequence[float], src: NDArray[np.float64]) -> tuple[float, float]:
    """Lower-left corner ``(r, z)`` of the cell with the largest value."""
    i, j = np.unravel_index(int(np.argmax(src)), src.shape)
    return float(r_bins[i]), float(z_bins[j])
