# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Core Package Init
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
from .eqdsk import GEqdsk, read_geqdsk, write_geqdsk
from .profiles import MonotoneInterpolant, ProfileTable, ProfileTableError, build_interpolator
from .flux_geometry import FluxGeometry, NormalizedFluxMap, flux_geometry_from_geqdsk, load_flux_geometry
from .distribution import DDDistribution, DTDistribution, Distribution, PlasmaDistribution
from .integration import (
    DEFAULT_SETTINGS,
    CubatureConvergenceError,
    CubatureResult,
    CubatureSettings,
    MomentResult,
    centroid,
    toroidal_segment_moment_0,
    toroidal_segment_moment_1,
    toroidal_segment_yield,
    total_yield,
)
from .mesh import (
    cell_relative_variance,
    peak_cell,
    segment_yield_matrix,
    source_probability_map,
    variance_on_mesh,
)
from .config_schema import SourceConfig, load_config, validate_config
