# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Diagnostics Package Init
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
from .plotting import plot_neutron_source, plot_variance_map

__all__ = ["plot_neutron_source", "plot_variance_map"]
