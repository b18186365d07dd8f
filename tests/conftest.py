# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Shared Test Fixtures
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Synthetic equilibria and sources with closed-form yields.

The circular equilibrium has ψ = ((R-R0)² + Z²)/a², which a bicubic
spline reproduces exactly, bounded by a circle of radius a.
"""

from __future__ import annotations

from types import SimpleNamespace

import numpy as np
import pytest

from fusion_neutron_source.core.distribution import DDDistribution, Distribution, DTDistribution
from fusion_neutron_source.core.eqdsk import GEqdsk
from fusion_neutron_source.core.flux_geometry import FluxGeometry, flux_geometry_from_geqdsk
from fusion_neutron_source.core.profiles import ProfileTable

R0 = 2.0
A_MINOR = 0.5
T0_KEV = 10.0
N0_CM3 = 1.0e14


def make_circular_eqdsk(nw: int = 33, nh: int = 33) -> GEqdsk:
    r = np.linspace(R0 - 1.6 * A_MINOR, R0 + 1.6 * A_MINOR, nw)
    z = np.linspace(-1.6 * A_MINOR, 1.6 * A_MINOR, nh)
    rr, zz = np.meshgrid(r, z)
    theta = np.linspace(0.0, 2.0 * np.pi, 65)
    return GEqdsk(
        description="circular test plasma",
        nw=nw,
        nh=nh,
        rdim=3.2 * A_MINOR,
        zdim=3.2 * A_MINOR,
        rcentr=R0,
        rleft=R0 - 1.6 * A_MINOR,
        zmid=0.0,
        rmaxis=R0,
        zmaxis=0.0,
        simag=0.0,
        sibry=1.0,
        bcentr=5.0,
        current=1.0e6,
        fpol=np.full(nw, 10.0),
        pres=np.linspace(1.0e5, 0.0, nw),
        ffprime=np.zeros(nw),
        pprime=np.linspace(-1.0e4, 0.0, nw),
        qpsi=np.linspace(1.0, 4.0, nw),
        psirz=((rr - R0) ** 2 + zz ** 2) / A_MINOR ** 2,
        rbdry=R0 + A_MINOR * np.cos(theta),
        zbdry=A_MINOR * np.sin(theta),
        rlim=np.array([R0 - 1.5 * A_MINOR, R0 + 1.5 * A_MINOR, R0 + 1.5 * A_MINOR, R0 - 1.5 * A_MINOR]),
        zlim=np.array([-1.5 * A_MINOR, -1.5 * A_MINOR, 1.5 * A_MINOR, 1.5 * A_MINOR]),
    )


def make_profile_table(npts: int = 21) -> ProfileTable:
    """Flat T0 and linear n0·(1 - ψ)."""
    psi = np.linspace(0.0, 1.0, npts)
    return ProfileTable(psi=psi, temperature=np.full(npts, T0_KEV), density=N0_CM3 * (1.0 - psi))


def circular_volume_factor() -> float:
    """2π·∫∫ (1-ψ)² R dR dZ over the plasma, cm³."""
    return 2.0 * np.pi * R0 * np.pi * A_MINOR ** 2 / 3.0 * 1.0e6


class RingDistribution(Distribution):
    """I = 1 on [1.5, 2.5] × [-0.5, 0.5] inside the box [1, 3] × [-1, 1]."""

    def __init__(self) -> None:
        super().__init__(FluxGeometry(1.0, 3.0, -1.0, 1.0, psi=self._indicator))

    @staticmethod
    def _indicator(r, z):
        r = np.asarray(r, dtype=np.float64)
        z = np.asarray(z, dtype=np.float64)
        inside = (r >= 1.5) & (r <= 2.5) & (np.abs(z) <= 0.5)
        return np.where(inside, 0.0, 1.0)

    def _intensity(self, psi):
        return 1.0 - psi


@pytest.fixture
def plasma() -> SimpleNamespace:
    """Parameters of the circular test plasma."""
    return SimpleNamespace(r0=R0, a=A_MINOR, t0=T0_KEV, n0=N0_CM3, volume_factor=circular_volume_factor())


@pytest.fixture
def circular_eqdsk() -> GEqdsk:
    return make_circular_eqdsk()


@pytest.fixture
def circular_geometry(circular_eqdsk) -> FluxGeometry:
    return flux_geometry_from_geqdsk(circular_eqdsk)


@pytest.fixture
def profile_table() -> ProfileTable:
    return make_profile_table()


@pytest.fixture
def dd_source(circular_geometry, profile_table) -> DDDistribution:
    return DDDistribution.from_profiles(circular_geometry, profile_table)


@pytest.fixture
def dt_source(circular_geometry, profile_table) -> DTDistribution:
    return DTDistribution.from_profiles(circular_geometry, profile_table, fuel_ratio=0.5)


@pytest.fixture
def ring_source() -> RingDistribution:
    return RingDistribution()
