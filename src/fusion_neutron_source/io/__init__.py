# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — IO Package Init
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""File adapters: profile tables, CSV dumps and logging setup."""

from .csv_export import read_array_csv, read_mesh_csv, write_array_csv, write_mesh_csv
from .loaders import (
    build_distribution,
    load_distribution,
    load_profile_table,
    profile_table_from_frame,
    read_profile_frame,
)
from .logging_config import SourceJSONFormatter, setup_source_logging
