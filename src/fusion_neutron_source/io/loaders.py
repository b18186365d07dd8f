# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Input Loaders
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Profile spreadsheets, equilibria and distributions from a run config."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import numpy as np
import pandas as pd

from fusion_neutron_source.core.config_schema import SourceConfig
from fusion_neutron_source.core.distribution import DDDistribution, DTDistribution, PlasmaDistribution
from fusion_neutron_source.core.flux_geometry import FluxGeometry, load_flux_geometry
from fusion_neutron_source.core.profiles import ProfileTable

logger = logging.getLogger(__name__)

ColumnRef = Union[str, int]

_EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


def read_profile_frame(path: Union[str, Path], sheet_name: ColumnRef = 0) -> pd.DataFrame:
    """Read a profile spreadsheet (Excel) or delimited text file (CSV)."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Profile table not found: {path}")
    if path.suffix.lower() in _EXCEL_SUFFIXES:
        return pd.read_excel(path, sheet_name=sheet_name)
    return pd.read_csv(path, sep=None, engine="python")


def _select(frame: pd.DataFrame, ref: ColumnRef) -> pd.Series:
    if isinstance(ref, int):
        if ref >= frame.shape[1]:
            raise KeyError(f"Column position {ref} out of range ({frame.shape[1]} columns).")
        return frame.iloc[:, ref]
    if ref not in frame.columns:
        raise KeyError(f"Column {ref!r} not found; available: {list(frame.columns)}")
    return frame[ref]


def profile_table_from_frame(
    frame: pd.DataFrame,
    *,
    psi_column: ColumnRef = 0,
    temperature_column: ColumnRef = 1,
    density_column: ColumnRef = 2,
    density_scale: float = 1.0e13,
) -> ProfileTable:
    """
    Select (ψ, T, n) columns, drop incomplete rows and sort by ψ.

    Density is scaled by *density_scale* and a ψ=0 row is prepended when
    the data do not start on the axis.
    """
    data = pd.DataFrame({
        "psi": pd.to_numeric(_select(frame, psi_column), errors="coerce"),
        "temperature": pd.to_numeric(_select(frame, temperature_column), errors="coerce"),
        "density": pd.to_numeric(_select(frame, density_column), errors="coerce"),
    })
    dropped = int(data.isna().any(axis=1).sum())
    data = data.dropna().sort_values("psi", kind="mergesort")
    if dropped:
        logger.debug("Dropped %d incomplete profile rows", dropped)
    return ProfileTable.from_samples(
        data["psi"].to_numpy(dtype=np.float64),
        data["temperature"].to_numpy(dtype=np.float64),
        data["density"].to_numpy(dtype=np.float64),
        density_scale=density_scale,
    )


def load_profile_table(
    path: Union[str, Path],
    *,
    sheet_name: ColumnRef = 0,
    psi_column: ColumnRef = 0,
    temperature_column: ColumnRef = 1,
    density_column: ColumnRef = 2,
    density_scale: float = 1.0e13,
) -> ProfileTable:
    """Read and validate a (ψ, T, n) profile table from *path*."""
    table = profile_table_from_frame(
        read_profile_frame(path, sheet_name=sheet_name),
        psi_column=psi_column,
        temperature_column=temperature_column,
        density_column=density_column,
        density_scale=density_scale,
    )
    logger.info(
        "Loaded %d profile rows from %s (psi %.3f..%.3f)",
        len(table), Path(path).name, table.psi[0], table.psi[-1],
    )
    return table


def build_distribution(
    geometry: FluxGeometry,
    table: ProfileTable,
    reaction: str = "DD",
    fuel_ratio: float = 0.5,
) -> PlasmaDistribution:
    """DD or DT distribution for *reaction*."""
    reaction = reaction.strip().upper()
    if reaction == "DD":
        return DDDistribution.from_profiles(geometry, table)
    if reaction == "DT":
        return DTDistribution.from_profiles(geometry, table, fuel_ratio=fuel_ratio)
    raise ValueError(f"Unsupported reaction {reaction!r}; expected 'DD' or 'DT'.")


def load_distribution(config: SourceConfig) -> PlasmaDistribution:
    """Equilibrium + profiles named by *config*, assembled into a distribution."""
    geometry = load_flux_geometry(config.equilibrium_path)
    src = config.profiles
    table = load_profile_table(
        src.path,
        sheet_name=src.sheet_name,
        psi_column=src.psi_column,
        temperature_column=src.temperature_column,
        density_column=src.density_column,
        density_scale=src.density_scale,
    )
    return build_distribution(geometry, table, config.reaction, config.fuel_ratio)
