# ─────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Configuration Schema
# © 1998–2026 Miroslav Šotek. All rights reserved.
# ─────────────────────────────────────────────────────────────────────
"""
Strict schema validation for neutron source runs using Pydantic.
Catches malformed configs before any file is read or integral computed.
"""

import json
from pathlib import Path
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .integration import CubatureSettings

ColumnRef = Union[str, int]


class ProfileSource(BaseModel):
    model_config = ConfigDict(extra='forbid')
    path: Path
    sheet_name: ColumnRef = 0
    psi_column: ColumnRef = 0
    temperature_column: ColumnRef = 1
    density_column: ColumnRef = 2
    # Source tables give density in units of 1e13 cm^-3.
    density_scale: float = Field(default=1.0e13, gt=0)

    @field_validator("psi_column", "temperature_column", "density_column")
    @classmethod
    def check_position(cls, v: ColumnRef):
        if isinstance(v, int) and v < 0:
            raise ValueError("column positions must be >= 0")
        return v


class IntegrationParams(BaseModel):
    model_config = ConfigDict(extra='forbid')
    rtol: float = Field(default=1.0e-4, gt=0)
    atol: float = Field(default=1.0e-12, ge=0)
    max_subdivisions: int = Field(default=10_000, gt=0)
    rule: Literal["genz-malik", "gk21", "gk15"] = "genz-malik"

    def to_settings(self) -> CubatureSettings:
        return CubatureSettings(
            rtol=self.rtol,
            atol=self.atol,
            max_subdivisions=self.max_subdivisions,
            rule=self.rule,
        )


class MeshParams(BaseModel):
    model_config = ConfigDict(extra='forbid')
    nr: int = Field(default=65, ge=3)
    nz: int = Field(default=129, ge=3)


class SourceConfig(BaseModel):
    model_config = ConfigDict(extra='forbid')

    name: str = "neutron-source"
    equilibrium_path: Path
    profiles: ProfileSource
    reaction: Literal["DD", "DT"] = "DD"
    fuel_ratio: float = Field(default=0.5, ge=0, le=1)
    integration: IntegrationParams = Field(default_factory=IntegrationParams)
    mesh: MeshParams = Field(default_factory=MeshParams)

    @field_validator("reaction", mode="before")
    @classmethod
    def normalize_reaction(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


def validate_config(config_dict: dict) -> SourceConfig:
    """Validate a raw configuration dictionary and return a SourceConfig."""
    return SourceConfig.model_validate(config_dict)


def load_config(path: Union[str, Path]) -> SourceConfig:
    """
    Load a JSON configuration file.

    Relative paths inside the file are resolved against the directory of
    the configuration file.
    """
    path = Path(path)
    with open(path, "r") as f:
        cfg = validate_config(json.load(f))
    base = path.resolve().parent
    if not cfg.equilibrium_path.is_absolute():
        cfg.equilibrium_path = base / cfg.equilibrium_path
    if not cfg.profiles.path.is_absolute():
        cfg.profiles.path = base / cfg.profiles.path
    return cfg
