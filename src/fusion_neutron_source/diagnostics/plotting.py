# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Source Maps Plotting
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
from __future__ import annotations

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
from numpy.typing import ArrayLike, NDArray

from fusion_neutron_source.core.eqdsk import GEqdsk


def _overlay_equilibrium(ax, eq: GEqdsk) -> None:
    ax.plot(eq.rmaxis, eq.zmaxis, "+", color="0.6", markersize=10, label="Magnetic axis")
    if eq.rbdry.size:
        ax.plot(eq.rbdry, eq.zbdry, "-", color="k", linewidth=1.2, label="Plasma boundary")
    if eq.rlim.size:
        ax.plot(eq.rlim, eq.zlim, "-", color="tab:gray", linewidth=1.2, label="Limiter")
    ax.legend(loc="upper right", fontsize=8)


def plot_neutron_source(
    distribution,
    r: ArrayLike,
    z: ArrayLike,
    eq: Optional[GEqdsk] = None,
    ax=None,
    levels: int = 14,
    title: str = "Neutron source intensity",
):
    """Filled contours of I(R,Z) on the grid ``r × z``; returns the figure."""
    r = np.asarray(r, dtype=np.float64)
    z = np.asarray(z, dtype=np.float64)
    values = distribution.intensity_on_mesh(r, z)
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 8))
    else:
        fig = ax.figure
    cntr = ax.contourf(r, z, values.T, levels=levels, cmap="viridis")
    fig.colorbar(cntr, ax=ax, label=r"$I(R,Z)$, cm$^{-3}$s$^{-1}$")
    if eq is not None:
        _overlay_equilibrium(ax, eq)
    ax.set_xlabel("R, m")
    ax.set_ylabel("Z, m")
    ax.set_aspect("equal")
    ax.set_title(title)
    return fig


def plot_variance_map(
    variance: NDArray[np.float64],
    r_bins: ArrayLike,
    z_bins: ArrayLike,
    ax=None,
    title: str = "Cell relative variance",
):
    """Variance of :func:`~fusion_neutron_source.core.mesh.variance_on_mesh` at cell midpoints."""
    r_bins = np.asarray(r_bins, dtype=np.float64)
    z_bins = np.asarray(z_bins, dtype=np.float64)
    rmids = 0.5 * (r_bins[:-1] + r_bins[1:])
    zmids = 0.5 * (z_bins[:-1] + z_bins[1:])
    if variance.shape != (rmids.size, zmids.size):
        raise ValueError(f"variance shape {variance.shape} does not match bins {(rmids.size, zmids.size)}.")
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 8))
    else:
        fig = ax.figure
    cntr = ax.contourf(rmids, zmids, variance.T, levels=np.linspace(0.0, 1.0, 11), cmap="viridis")
    fig.colorbar(cntr, ax=ax, label="Variance")
    ax.set_xlabel("R, m")
    ax.set_ylabel("Z, m")
    ax.set_aspect("equal")
    ax.set_title(title)
    return fig
