# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Neutron Source Distributions
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Local neutron emission intensity I(R,Z) of a thermal plasma, cm⁻³·s⁻¹.

A distribution combines a flux geometry ψ(R,Z) with temperature and
density interpolants T(ψ), n(ψ) and a Bosch-Hale reactivity:

- DD plasma:  I = ½ n² ⟨σv⟩_DD(T)
- DT mixture: I = n_d n_t ⟨σv⟩_DT with n_t = η n, n_d = (1 - η) n

Intensity is zero outside the plasma bounding box and for ψ > 1.
Distributions are immutable and evaluate on demand; nothing is cached.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

from fusion_neutron_source.nuclear.reaction_rates import Channel, reactivity_function

from .flux_geometry import FluxGeometry
from .profiles import MonotoneInterpolant, ProfileTable, build_interpolator

logger = logging.getLogger(__name__)

FloatOrArray = Union[float, NDArray[np.float64]]
FuelRatio = Union[float, Callable[[NDArray[np.float64]], ArrayLike]]


def _finish(values: NDArray[np.float64], shape: tuple[int, ...]) -> FloatOrArray:
    if shape == ():
        return float(values.reshape(-1)[0])
    return values.reshape(shape)


class Distribution(ABC):
    """Neutron source over the poloidal cross-section of a torus."""

    def __init__(self, geometry: FluxGeometry) -> None:
        self._geometry = geometry

    @property
    def geometry(self) -> FluxGeometry:
        return self._geometry

    def domain(self) -> tuple[float, float, float, float]:
        """``(rmin, rmax, zmin, zmax)`` of the plasma bounding box, m."""
        return self._geometry.domain()

    @abstractmethod
    def _intensity(self, psi: NDArray[np.float64]) -> NDArray[np.float64]:
        """I for a 1-D array of ψ."""

    def intensity(self, psi: ArrayLike) -> FloatOrArray:
        """Neutron source intensity at normalized flux *psi*, cm⁻³·s⁻¹."""
        x = np.asarray(psi, dtype=np.float64)
        return _finish(self._intensity(np.atleast_1d(x).ravel()), x.shape)

    def intensity_at(self, r: ArrayLike, z: ArrayLike) -> FloatOrArray:
        """
        Intensity at points (r, z) with numpy broadcasting.

        Points outside the bounding box give 0 and ψ is not evaluated there.
        """
        rb, zb = np.broadcast_arrays(np.asarray(r, dtype=np.float64), np.asarray(z, dtype=np.float64))
        rf, zf = rb.ravel(), zb.ravel()
        out = np.zeros(rf.shape, dtype=np.float64)
        inside = self._geometry.contains(rf, zf)
        if np.any(inside):
            psi = np.asarray(self._geometry.psi(rf[inside], zf[inside]), dtype=np.float64)
            out[inside] = self._intensity(np.atleast_1d(psi))
        return _finish(out, rb.shape)

    def intensity_on_mesh(self, r: ArrayLike, z: ArrayLike) -> NDArray[np.float64]:
        """Intensity on the tensor grid ``r × z``, shape ``(len(r), len(z))``."""
        rr, zz = np.meshgrid(np.asarray(r, dtype=np.float64), np.asarray(z, dtype=np.float64), indexing="ij")
        return np.asarray(self.intensity_at(rr, zz))

    def __call__(self, r: ArrayLike, z: ArrayLike) -> FloatOrArray:
        return self.intensity_at(r, z)


class PlasmaDistribution(Distribution):
    """Distribution backed by tabulated T(ψ) and n(ψ) profiles."""

    def __init__(
        self,
        geometry: FluxGeometry,
        temperature: MonotoneInterpolant,
        density: MonotoneInterpolant,
    ) -> None:
        super().__init__(geometry)
        self._temperature = temperature
        self._density = density

    @classmethod
    def from_profiles(cls, geometry: FluxGeometry, table: ProfileTable, **kwargs):
        """Build the distribution from a profile table."""
        distr = cls(
            geometry,
            build_interpolator(table, "temperature"),
            build_interpolator(table, "density"),
            **kwargs,
        )
        logger.debug(
            "%s built from %d profile rows (T0=%.3f keV, n0=%.4e cm^-3)",
            cls.__name__, len(table), table.temperature[0], table.density[0],
        )
        return distr

    def temperature(self, psi: ArrayLike) -> FloatOrArray:
        """Ion temperature, keV."""
        return self._temperature(psi)

    def density(self, psi: ArrayLike) -> FloatOrArray:
        """Ion density, cm⁻³."""
        return self._density(psi)

    def temperature_at(self, r: ArrayLike, z: ArrayLike) -> FloatOrArray:
        return self._temperature(self._geometry.psi(r, z))

    def density_at(self, r: ArrayLike, z: ArrayLike) -> FloatOrArray:
        return self._density(self._geometry.psi(r, z))


class DDDistribution(PlasmaDistribution):
    """Pure deuterium plasma, D(d,n)3He neutrons."""

    def __init__(
        self,
        geometry: FluxGeometry,
        temperature: MonotoneInterpolant,
        density: MonotoneInterpolant,
    ) -> None:
        super().__init__(geometry, temperature, density)
        self._sigmav = reactivity_function(Channel.DDN)

    def _intensity(self, psi: NDArray[np.float64]) -> NDArray[np.float64]:
        out = np.zeros_like(psi)
        core = psi <= 1.0
        if np.any(core):
            p = psi[core]
            n = self._density(p)
            out[core] = 0.5 * n * n * self._sigmav(self._temperature(p))
        return out


class DTDistribution(PlasmaDistribution):
    """
    Deuterium-tritium mixture, T(d,n)4He neutrons.

    *fuel_ratio* is the tritium fraction η of the ion density, either a
    constant in [0, 1] or a callable η(ψ).
    """

    def __init__(
        self,
        geometry: FluxGeometry,
        temperature: MonotoneInterpolant,
        density: MonotoneInterpolant,
        fuel_ratio: FuelRatio = 0.5,
    ) -> None:
        super().__init__(geometry, temperature, density)
        if not callable(fuel_ratio):
            fuel_ratio = float(fuel_ratio)
            if not 0.0 <= fuel_ratio <= 1.0:
                raise ValueError(f"fuel_ratio must lie in [0, 1], got {fuel_ratio}.")
        self._fuel_ratio = fuel_ratio
        self._sigmav = reactivity_function(Channel.DT)

    def fuel_ratio(self, psi: ArrayLike) -> FloatOrArray:
        """Tritium fraction η at *psi*."""
        x = np.asarray(psi, dtype=np.float64)
        if callable(self._fuel_ratio):
            eta = np.broadcast_to(np.asarray(self._fuel_ratio(x), dtype=np.float64), x.shape)
        else:
            eta = np.full(x.shape, self._fuel_ratio)
        if not np.all(np.isfinite(eta) & (eta >= 0.0) & (eta <= 1.0)):
            raise ValueError(
                f"fuel_ratio must lie in [0, 1], got values in "
                f"[{np.min(eta)}, {np.max(eta)}]."
            )
        return _finish(np.array(eta), x.shape)

    def concentrations(self, psi: ArrayLike) -> tuple[FloatOrArray, FloatOrArray]:
        """Deuterium and tritium densities ``(n_d, n_t)``, cm⁻³."""
        n = self._density(psi)
        eta = self.fuel_ratio(psi)
        return (1.0 - eta) * n, eta * n

    def _intensity(self, psi: NDArray[np.float64]) -> NDArray[np.float64]:
        out = np.zeros_like(psi)
        core = psi <= 1.0
        if np.any(core):
            p = psi[core]
            nd, nt = self.concentrations(p)
            out[core] = nd * nt * self._sigmav(self._temperature(p))
        return out
