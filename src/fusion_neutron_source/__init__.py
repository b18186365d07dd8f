# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Package Init
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Neutron emission of thermal tokamak plasmas from equilibrium and profiles."""

__version__ = "0.1.0"

from .nuclear.reaction_rates import Channel, reactivity
from .core import (
    CubatureResult,
    CubatureSettings,
    DDDistribution,
    DTDistribution,
    FluxGeometry,
    ProfileTable,
    build_interpolator,
    toroidal_segment_moment_1,
    toroidal_segment_yield,
    total_yield,
    variance_on_mesh,
)

__all__ = [
    "__version__",
    "Channel",
    "reactivity",
    "CubatureResult",
    "CubatureSettings",
    "DDDistribution",
    "DTDistribution",
    "FluxGeometry",
    "ProfileTable",
    "build_interpolator",
    "toroidal_segment_moment_1",
    "toroidal_segment_yield",
    "total_yield",
    "variance_on_mesh",
]
