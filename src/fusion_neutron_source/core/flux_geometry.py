# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Flux Geometry Adapter
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Normalized flux coordinate ψ(R,Z) and plasma bounding box."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.interpolate import RectBivariateSpline

from .eqdsk import GEqdsk, read_geqdsk

logger = logging.getLogger(__name__)

PsiFunction = Callable[[ArrayLike, ArrayLike], Union[float, NDArray[np.float64]]]


@dataclass(frozen=True)
class FluxGeometry:
    """
    Plasma bounding box (m) and normalized flux ψ(r, z).

    ψ is 0 on the magnetic axis and 1 on the last closed flux surface; it
    is finite over the whole box and may exceed 1 outside the plasma.
    """

    rmin: float
    rmax: float
    zmin: float
    zmax: float
    psi: PsiFunction
    magnetic_axis: Optional[tuple[float, float]] = None

    def __post_init__(self) -> None:
        box = (self.rmin, self.rmax, self.zmin, self.zmax)
        if not all(math.isfinite(float(v)) for v in box):
            raise ValueError(f"Bounding box must be finite, got {box}.")
        if self.rmin >= self.rmax:
            raise ValueError(f"rmin ({self.rmin}) must be smaller than rmax ({self.rmax}).")
        if self.zmin >= self.zmax:
            raise ValueError(f"zmin ({self.zmin}) must be smaller than zmax ({self.zmax}).")

    def domain(self) -> tuple[float, float, float, float]:
        return (self.rmin, self.rmax, self.zmin, self.zmax)

    def contains(self, r: ArrayLike, z: ArrayLike) -> NDArray[np.bool_]:
        """Elementwise membership of (r, z) in the closed bounding box."""
        r = np.asarray(r, dtype=np.float64)
        z = np.asarray(z, dtype=np.float64)
        return (r >= self.rmin) & (r <= self.rmax) & (z >= self.zmin) & (z <= self.zmax)


class NormalizedFluxMap:
    """
    Bicubic interpolant of the G-EQDSK flux map, normalized to ψ_N.

    Interpolation noise may push ψ_N slightly below zero next to the
    magnetic axis; such values are clipped to 0.
    """

    def __init__(self, eq: GEqdsk) -> None:
        if eq.sibry == eq.simag:
            raise ValueError("Degenerate psi normalization: sibry equals simag.")
        psirz = np.asarray(eq.psirz, dtype=np.float64)
        if psirz.shape != (eq.nh, eq.nw):
            raise ValueError(f"psirz has shape {psirz.shape}, expected {(eq.nh, eq.nw)}.")
        self.simag = float(eq.simag)
        self.sibry = float(eq.sibry)
        # psirz is stored (Z, R); the spline is indexed (R, Z).
        self._spline = RectBivariateSpline(eq.r, eq.z, psirz.T, kx=3, ky=3)

    def __call__(self, r: ArrayLike, z: ArrayLike) -> Union[float, NDArray[np.float64]]:
        rb, zb = np.broadcast_arrays(np.asarray(r, dtype=np.float64), np.asarray(z, dtype=np.float64))
        raw = self._spline.ev(rb.ravel(), zb.ravel())
        psi_n = np.maximum((raw - self.simag) / (self.sibry - self.simag), 0.0)
        if rb.ndim == 0:
            return float(psi_n[0])
        return psi_n.reshape(rb.shape)


def flux_geometry_from_geqdsk(eq: GEqdsk) -> FluxGeometry:
    """Flux geometry bounded by the extrema of the plasma boundary contour."""
    rmin, rmax, zmin, zmax = eq.boundary_box()
    geometry = FluxGeometry(
        rmin=rmin,
        rmax=rmax,
        zmin=zmin,
        zmax=zmax,
        psi=NormalizedFluxMap(eq),
        magnetic_axis=eq.magnetic_axis,
    )
    logger.debug(
        "Flux geometry: R=[%.4f, %.4f] m, Z=[%.4f, %.4f] m, axis=(%.4f, %.4f)",
        rmin, rmax, zmin, zmax, eq.rmaxis, eq.zmaxis,
    )
    return geometry


def load_flux_geometry(path: Union[str, Path]) -> FluxGeometry:
    """Read a G-EQDSK file and build its flux geometry."""
    return flux_geometry_from_geqdsk(read_geqdsk(path))
