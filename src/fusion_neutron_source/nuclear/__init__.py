# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Nuclear Package Init
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
from .reaction_rates import (
    COEFFICIENTS,
    BoschHaleCoefficients,
    Channel,
    reactivity,
    reactivity_function,
    sigmav_d3he,
    sigmav_ddn,
    sigmav_ddp,
    sigmav_dt,
)

__all__ = [
    "COEFFICIENTS",
    "BoschHaleCoefficients",
    "Channel",
    "reactivity",
    "reactivity_function",
    "sigmav_d3he",
    "sigmav_ddn",
    "sigmav_ddp",
    "sigmav_dt",
]
