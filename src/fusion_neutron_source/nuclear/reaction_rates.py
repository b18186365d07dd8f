# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Bosch-Hale Reaction Rates
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Thermal fusion reactivities ⟨σv⟩(T) from the Bosch & Hale parametrization.

References
----------
- H.-S. Bosch and G.M. Hale, *Improved formulas for fusion cross-sections
  and thermal reactivities*, Nucl. Fusion 32 (1992) 611.

The fit reads

    θ = T / (1 - T(C2 + T(C4 + T C6)) / (1 + T(C3 + T(C5 + T C7))))
    ξ = (B_G² / 4θ)^(1/3)
    ⟨σv⟩ = C1 θ sqrt(ξ / (m_r c² T³)) exp(-3ξ)

with T in keV and ⟨σv⟩ in cm³/s.  Below the lower validity limit of a
channel the reactivity is exactly zero; the fit is never extrapolated
downwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Callable, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray


class Channel(str, Enum):
    """Fusion reaction channels covered by the Bosch-Hale fit."""

    DT = "DT"        # T(d,n)4He
    DDN = "DDN"      # D(d,n)3He
    DDP = "DDP"      # D(d,p)T
    D3HE = "D3HE"    # 3He(d,p)4He


@dataclass(frozen=True)
class BoschHaleCoefficients:
    bg_sq: float     # Gamow constant squared, keV
    mrc2: float      # reduced mass energy, keV
    c1: float
    c2: float
    c3: float
    c4: float
    c5: float
    c6: float
    c7: float
    t_min: float     # lower validity limit, keV


# Table VII of Bosch & Hale (1992).
COEFFICIENTS: dict[Channel, BoschHaleCoefficients] = {
    Channel.DT: BoschHaleCoefficients(
        bg_sq=34.3827**2,
        mrc2=1124656.0,
        c1=1.17302e-9,
        c2=1.51361e-2,
        c3=7.51886e-2,
        c4=4.60643e-3,
        c5=1.35000e-2,
        c6=-1.06750e-4,
        c7=1.36600e-5,
        t_min=0.2,
    ),
    Channel.DDN: BoschHaleCoefficients(
        bg_sq=31.3970**2,
        mrc2=937814.0,
        c1=5.43360e-12,
        c2=5.85778e-3,
        c3=7.68222e-3,
        c4=0.0,
        c5=-2.96400e-6,
        c6=0.0,
        c7=0.0,
        t_min=0.2,
    ),
    Channel.DDP: BoschHaleCoefficients(
        bg_sq=31.3970**2,
        mrc2=937814.0,
        c1=5.65718e-12,
        c2=3.41267e-3,
        c3=1.99167e-3,
        c4=0.0,
        c5=1.05060e-5,
        c6=0.0,
        c7=0.0,
        t_min=0.2,
    ),
    Channel.D3HE: BoschHaleCoefficients(
        bg_sq=68.7508**2,
        mrc2=1124572.0,
        c1=5.51036e-10,
        c2=6.41918e-3,
        c3=-2.02896e-3,
        c4=-1.91080e-5,
        c5=1.35776e-4,
        c6=0.0,
        c7=0.0,
        t_min=0.5,
    ),
}


def _resolve_channel(channel: Union[Channel, str]) -> Channel:
    if isinstance(channel, Channel):
        return channel
    try:
        return Channel(str(channel).strip().upper())
    except ValueError:
        known = ", ".join(c.value for c in Channel)
        raise KeyError(f"Unknown reaction channel {channel!r}; expected one of: {known}") from None


def reactivity(channel: Union[Channel, str], t_kev: ArrayLike) -> Union[float, NDArray[np.float64]]:
    """
    Thermal reactivity ⟨σv⟩ of *channel* at ion temperature *t_kev*.

    Parameters
    ----------
    channel : Channel or str
        Reaction channel, e.g. ``Channel.DT`` or ``"DDN"``.
    t_kev : float or array_like
        Ion temperature in keV.

    Returns
    -------
    float or ndarray
        ⟨σv⟩ in cm³/s; a float for scalar input, otherwise an array of the
        input shape.
    """
    c = COEFFICIENTS[_resolve_channel(channel)]
    t = np.asarray(t_kev, dtype=np.float64)
    flat = np.atleast_1d(t).ravel()
    out = np.zeros_like(flat)

    valid = flat >= c.t_min
    if np.any(valid):
        tv = flat[valid]
        numer = tv * (c.c2 + tv * (c.c4 + tv * c.c6))
        denom = 1.0 + tv * (c.c3 + tv * (c.c5 + tv * c.c7))
        theta = tv / (1.0 - numer / denom)
        xi = np.cbrt(c.bg_sq / (4.0 * theta))
        out[valid] = c.c1 * theta * np.sqrt(xi / (c.mrc2 * tv**3)) * np.exp(-3.0 * xi)

    if t.ndim == 0:
        return float(out[0])
    return out.reshape(t.shape)


def reactivity_function(channel: Union[Channel, str]) -> Callable[[ArrayLike], Union[float, NDArray[np.float64]]]:
    """Return ⟨σv⟩(T) of *channel* as a one-argument callable."""
    return partial(reactivity, _resolve_channel(channel))


sigmav_dt = reactivity_function(Channel.DT)
sigmav_ddn = reactivity_function(Channel.DDN)
sigmav_ddp = reactivity_function(Channel.DDP)
sigmav_d3he = reactivity_function(Channel.D3HE)
