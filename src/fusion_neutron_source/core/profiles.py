# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Plasma Profile Tables
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Tabulated ion temperature / density profiles versus normalized flux ψ and
their shape-preserving interpolants.

Profiles are interpolated with a monotone piecewise cubic (PCHIP), which
never overshoots between samples, so a monotone decreasing density cannot
turn negative.  Outside the tabulated ψ range an interpolant evaluates to
exactly zero: no profile means vacuum.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.interpolate import PchipInterpolator


PROFILE_COLUMNS = ("psi", "temperature", "density")


class ProfileTableError(ValueError):
    """Raised when a profile table violates its construction preconditions."""


def _as_column(name: str, values: ArrayLike) -> NDArray[np.float64]:
    arr = np.array(values, dtype=np.float64)
    if arr.ndim != 1:
        raise ProfileTableError(f"{name} must be a 1-D sequence, got shape {arr.shape}.")
    if not np.all(np.isfinite(arr)):
        raise ProfileTableError(f"{name} contains non-finite values.")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class ProfileTable:
    """Samples (ψ_i, T_i, n_i); T in keV, n in cm⁻³."""

    psi: NDArray[np.float64]
    temperature: NDArray[np.float64]
    density: NDArray[np.float64]

    def __post_init__(self) -> None:
        psi = _as_column("psi", self.psi)
        temperature = _as_column("temperature", self.temperature)
        density = _as_column("density", self.density)
        if not (psi.size == temperature.size == density.size):
            raise ProfileTableError(
                "psi, temperature and density must have equal lengths "
                f"({psi.size}, {temperature.size}, {density.size})."
            )
        if psi.size < 2:
            raise ProfileTableError("profile table needs at least 2 rows.")
        if psi[0] != 0.0:
            raise ProfileTableError(
                f"profile table must start with a psi=0 row (first psi is {psi[0]!r})."
            )
        steps = np.diff(psi)
        if np.any(steps <= 0.0):
            bad = int(np.argmax(steps <= 0.0)) + 1
            raise ProfileTableError(
                f"psi must be strictly increasing (row {bad}: {psi[bad - 1]!r} -> {psi[bad]!r})."
            )
        object.__setattr__(self, "psi", psi)
        object.__setattr__(self, "temperature", temperature)
        object.__setattr__(self, "density", density)

    @classmethod
    def from_samples(
        cls,
        psi: ArrayLike,
        temperature: ArrayLike,
        density: ArrayLike,
        *,
        density_scale: float = 1.0,
    ) -> "ProfileTable":
        """
        Build a table from raw samples.

        A ψ=0 row copied from the first sample is prepended when the samples
        do not start on the magnetic axis, and density is multiplied by
        *density_scale*.
        """
        psi_arr = np.asarray(psi, dtype=np.float64).ravel()
        t_arr = np.asarray(temperature, dtype=np.float64).ravel()
        n_arr = np.asarray(density, dtype=np.float64).ravel() * float(density_scale)
        if psi_arr.size and psi_arr[0] != 0.0:
            psi_arr = np.concatenate(([0.0], psi_arr))
            t_arr = np.concatenate((t_arr[:1], t_arr))
            n_arr = np.concatenate((n_arr[:1], n_arr))
        return cls(psi=psi_arr, temperature=t_arr, density=n_arr)

    def column(self, name: str) -> NDArray[np.float64]:
        if name not in PROFILE_COLUMNS:
            raise KeyError(f"Unknown profile column {name!r}; expected one of {PROFILE_COLUMNS}.")
        return getattr(self, name)

    def __len__(self) -> int:
        return int(self.psi.size)


class MonotoneInterpolant:
    """Monotone cubic ψ → value, identically zero outside the sampled range."""

    def __init__(self, psi: NDArray[np.float64], values: NDArray[np.float64]) -> None:
        self.psi_min = float(psi[0])
        self.psi_max = float(psi[-1])
        self._spline = PchipInterpolator(psi, values, extrapolate=False)

    def __call__(self, psi: ArrayLike) -> Union[float, NDArray[np.float64]]:
        x = np.asarray(psi, dtype=np.float64)
        flat = np.atleast_1d(x).ravel()
        out = np.zeros_like(flat)
        inside = (flat >= self.psi_min) & (flat <= self.psi_max)
        if np.any(inside):
            out[inside] = self._spline(flat[inside])
        if x.ndim == 0:
            return float(out[0])
        return out.reshape(x.shape)


def build_interpolator(table: ProfileTable, column: str) -> MonotoneInterpolant:
    """Interpolant of *column* (``"temperature"`` or ``"density"``) over ψ."""
    return MonotoneInterpolant(table.psi, table.column(column))
