# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Toroidal Volume Integration
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Neutron yield and spatial moments of an axisymmetric source.

For a source intensity I(R,Z) in cm⁻³·s⁻¹ the yield of the toroidal
segment [r0, r1] × [z0, z1] is

    Y = ∫₀^{2π} dφ ∫∫ I(R,Z) R dR dZ .

The rectangle is mapped affinely onto the unit square and integrated with
the adaptive, error-controlled cubature of :func:`scipy.integrate.cubature`
(Genz-Malik rule by default).  The result is scaled by 2π·ΔR·ΔZ·1e6, the
factor 1e6 converting the m³ domain measure to cm³.

Non-convergence is reported through the ``fail`` flag of the result and
never raised, except where an unconverged zeroth moment would be used as
a normalizer (:func:`toroidal_segment_moment_1`).

The segment routines are spelled ``toroidal_*``; the misspelled
``torroidal_*`` names are not aliased.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, NamedTuple, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.integrate import cubature

logger = logging.getLogger(__name__)

CUBIC_CM_PER_CUBIC_M = 1.0e6

SourceFunction = Callable[[NDArray[np.float64], NDArray[np.float64]], ArrayLike]

_RULES = ("genz-malik", "gk21", "gk15")


class CubatureConvergenceError(RuntimeError):
    """Raised when an unconverged integral would be used as a normalizer."""


class CubatureResult(NamedTuple):
    value: float
    error: float
    neval: int
    fail: int          # 0 when the requested tolerance was reached

    @property
    def converged(self) -> bool:
        return self.fail == 0

    @property
    def relative_error(self) -> float:
        return self.error / abs(self.value) if self.value != 0.0 else math.inf


class MomentResult(NamedTuple):
    centroid: tuple[float, float]
    error: tuple[float, float]
    neval: int
    fail: int

    @property
    def converged(self) -> bool:
        return self.fail == 0


@dataclass(frozen=True)
class CubatureSettings:
    """Tolerances and budget of the adaptive cubature."""

    rtol: float = 1.0e-4
    atol: float = 1.0e-12
    max_subdivisions: int = 10_000
    rule: str = "genz-malik"

    def __post_init__(self) -> None:
        if not (math.isfinite(self.rtol) and self.rtol > 0.0):
            raise ValueError("rtol must be finite and > 0.")
        if not (math.isfinite(self.atol) and self.atol >= 0.0):
            raise ValueError("atol must be finite and >= 0.")
        if int(self.max_subdivisions) < 1:
            raise ValueError("max_subdivisions must be >= 1.")
        if self.rule not in _RULES:
            raise ValueError(f"rule must be one of {_RULES}, got {self.rule!r}.")


DEFAULT_SETTINGS = CubatureSettings()


def _check_bin(name: str, bounds: Sequence[float]) -> tuple[float, float]:
    if len(bounds) != 2:
        raise ValueError(f"{name} must be a (low, high) pair.")
    lo, hi = float(bounds[0]), float(bounds[1])
    if not (math.isfinite(lo) and math.isfinite(hi)) or lo >= hi:
        raise ValueError(f"{name} must be finite with low < high, got ({lo}, {hi}).")
    return lo, hi


class _UnitSquareIntegrand:
    """R·I(R,Z)·weights(R,Z) on the unit square, counting evaluations."""

    def __init__(
        self,
        func: SourceFunction,
        r_bin: tuple[float, float],
        z_bin: tuple[float, float],
        first_moment: bool = False,
    ) -> None:
        self.func = func
        self.r0, self.dr = r_bin[0], r_bin[1] - r_bin[0]
        self.z0, self.dz = z_bin[0], z_bin[1] - z_bin[0]
        self.first_moment = first_moment
        self.neval = 0

    def __call__(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        r = self.r0 + self.dr * x[:, 0]
        z = self.z0 + self.dz * x[:, 1]
        self.neval += x.shape[0]
        weighted = r * np.broadcast_to(np.asarray(self.func(r, z), dtype=np.float64), r.shape)
        if self.first_moment:
            return np.stack((r * weighted, z * weighted), axis=-1)
        return weighted


def _integrate(
    func: SourceFunction,
    r_bin: Sequence[float],
    z_bin: Sequence[float],
    settings: CubatureSettings | None,
    first_moment: bool,
    atol: float | None = None,
):
    settings = settings or DEFAULT_SETTINGS
    rb = _check_bin("r_bin", r_bin)
    zb = _check_bin("z_bin", z_bin)
    integrand = _UnitSquareIntegrand(func, rb, zb, first_moment=first_moment)
    res = cubature(
        integrand,
        np.zeros(2),
        np.ones(2),
        rule=settings.rule,
        rtol=settings.rtol,
        atol=settings.atol if atol is None else max(settings.atol, atol),
        max_subdivisions=int(settings.max_subdivisions),
    )
    norm = 2.0 * math.pi * (rb[1] - rb[0]) * (zb[1] - zb[0]) * CUBIC_CM_PER_CUBIC_M
    fail = 0 if res.status == "converged" else 1
    return norm * np.asarray(res.estimate), norm * np.asarray(res.error), integrand.neval, fail


def toroidal_segment_yield(
    func: SourceFunction,
    r_bin: Sequence[float],
    z_bin: Sequence[float],
    settings: CubatureSettings | None = None,
) -> CubatureResult:
    """
    Neutron yield (s⁻¹) of the toroidal segment ``r_bin × z_bin``.

    Parameters
    ----------
    func : callable
        Vectorized source intensity ``func(r, z)`` in cm⁻³·s⁻¹, r and z in m.
    r_bin, z_bin : (float, float)
        Segment bounds, m.
    settings : CubatureSettings, optional
        Cubature tolerances; :data:`DEFAULT_SETTINGS` when omitted.

    Returns
    -------
    CubatureResult
        Yield, absolute error estimate, number of integrand evaluations and
        the failure flag (0 = converged).
    """
    value, error, neval, fail = _integrate(func, r_bin, z_bin, settings, first_moment=False)
    result = CubatureResult(float(value), float(error), int(neval), fail)
    if not result.converged:
        logger.warning(
            "Segment yield did not converge: R=%s Z=%s value=%.6e error=%.3e",
            tuple(r_bin), tuple(z_bin), result.value, result.error,
            extra={"physics_context": {"neval": result.neval}},
        )
    return result


def toroidal_segment_moment_0(
    func: SourceFunction,
    r_bin: Sequence[float],
    z_bin: Sequence[float],
    settings: CubatureSettings | None = None,
) -> CubatureResult:
    """Zeroth spatial moment of the segment, i.e. its yield."""
    return toroidal_segment_yield(func, r_bin, z_bin, settings)


def toroidal_segment_moment_1(
    func: SourceFunction,
    r_bin: Sequence[float],
    z_bin: Sequence[float],
    settings: CubatureSettings | None = None,
) -> MomentResult:
    """
    Yield-weighted centroid ``(r̄, z̄)`` of the segment, m.

    Raises
    ------
    CubatureConvergenceError
        If the zeroth moment used for normalization did not converge.
    """
    m0 = toroidal_segment_moment_0(func, r_bin, z_bin, settings)
    if not m0.converged:
        raise CubatureConvergenceError(
            f"Zeroth moment did not converge (value={m0.value:.6e}, error={m0.error:.3e}); "
            "first moment normalization is undefined."
        )
    if m0.value == 0.0:
        raise CubatureConvergenceError("Zeroth moment is zero; the segment has no source.")
    # Components vanishing by symmetry need an absolute tolerance: rtol·|M0|·L
    # on the unit square bounds the centroid error by rtol·L.
    settings = settings or DEFAULT_SETTINGS
    rb, zb = _check_bin("r_bin", r_bin), _check_bin("z_bin", z_bin)
    norm = 2.0 * math.pi * (rb[1] - rb[0]) * (zb[1] - zb[0]) * CUBIC_CM_PER_CUBIC_M
    length = max(abs(rb[0]), abs(rb[1]), abs(zb[0]), abs(zb[1]))
    atol = settings.rtol * abs(m0.value) / norm * length
    values, errors, neval, fail = _integrate(func, rb, zb, settings, first_moment=True, atol=atol)
    result = MomentResult(
        centroid=(float(values[0] / m0.value), float(values[1] / m0.value)),
        error=(float(errors[0] / m0.value), float(errors[1] / m0.value)),
        neval=int(m0.neval + neval),
        fail=fail,
    )
    if not result.converged:
        logger.warning(
            "First moment did not converge: centroid=%s error=%s",
            result.centroid, result.error,
        )
    return result


def total_yield(distribution, settings: CubatureSettings | None = None) -> CubatureResult:
    """Total neutron yield (s⁻¹) of *distribution* over its whole domain."""
    rmin, rmax, zmin, zmax = distribution.domain()
    result = toroidal_segment_yield(distribution.intensity_at, (rmin, rmax), (zmin, zmax), settings)
    logger.info(
        "Total yield %.6e n/s (relative error %.2e, %d evaluations, fail=%d)",
        result.value, result.relative_error, result.neval, result.fail,
        extra={"physics_context": {"source": type(distribution).__name__}},
    )
    return result


def centroid(distribution, settings: CubatureSettings | None = None) -> MomentResult:
    """First spatial moment of *distribution* over its whole domain."""
    rmin, rmax, zmin, zmax = distribution.domain()
    return toroidal_segment_moment_1(distribution.intensity_at, (rmin, rmax), (zmin, zmax), settings)
