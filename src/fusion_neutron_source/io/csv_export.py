# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — CSV Export
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Plain comma-separated dumps of meshes and source arrays, no header."""

from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

_FMT = "%.10e"


def write_array_csv(path: Union[str, Path], values: ArrayLike) -> Path:
    """Write a 1-D or 2-D array row-major, one value per cell."""
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim > 2:
        raise ValueError(f"Only 1-D or 2-D arrays can be written, got shape {arr.shape}.")
    path = Path(path)
    np.savetxt(path, np.atleast_2d(arr), delimiter=",", fmt=_FMT)
    return path


def write_mesh_csv(path: Union[str, Path], r: ArrayLike, z: ArrayLike) -> Path:
    """Write mesh coordinates: first row R, second row Z."""
    path = Path(path)
    r = np.asarray(r, dtype=np.float64).ravel()
    z = np.asarray(z, dtype=np.float64).ravel()
    with open(path, "w") as f:
        np.savetxt(f, r[np.newaxis, :], delimiter=",", fmt=_FMT)
        np.savetxt(f, z[np.newaxis, :], delimiter=",", fmt=_FMT)
    return path


def read_array_csv(path: Union[str, Path]) -> NDArray[np.float64]:
    """Read an array written by :func:`write_array_csv` as 2-D."""
    return np.loadtxt(Path(path), delimiter=",", ndmin=2)


def read_mesh_csv(path: Union[str, Path]) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    with open(Path(path), "r") as f:
        lines = [line for line in f if line.strip()]
    if len(lines) != 2:
        raise ValueError(f"{Path(path).name}: expected 2 rows (R, Z), found {len(lines)}.")
    r = np.array([float(v) for v in lines[0].split(",")])
    z = np.array([float(v) for v in lines[1].split(",")])
    return r, z
