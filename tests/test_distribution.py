# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Distribution Tests
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Local DD and DT neutron source intensities."""

import numpy as np
import pytest

from fusion_neutron_source.core.distribution import DDDistribution, DTDistribution
from fusion_neutron_source.nuclear.reaction_rates import sigmav_ddn, sigmav_dt


# ── DD ────────────────────────────────────────────────────────────────

class TestDDDistribution:

    def test_axis_intensity(self, dd_source, plasma):
        expected = 0.5 * plasma.n0 ** 2 * sigmav_ddn(plasma.t0)
        assert dd_source.intensity(0.0) == pytest.approx(expected, rel=1e-12)
        assert dd_source.intensity_at(plasma.r0, 0.0) == pytest.approx(expected, rel=1e-9)

    def test_intensity_profile(self, dd_source, plasma):
        psi = np.array([0.0, 0.25, 0.5, 0.9])
        expected = 0.5 * (plasma.n0 * (1.0 - psi)) ** 2 * sigmav_ddn(plasma.t0)
        np.testing.assert_allclose(dd_source.intensity(psi), expected, rtol=1e-10)

    def test_zero_outside_last_closed_surface(self, dd_source):
        np.testing.assert_array_equal(dd_source.intensity(np.array([1.001, 1.01, 3.0])), np.zeros(3))

    def test_zero_outside_bounding_box(self, dd_source, plasma):
        r = np.array([plasma.r0 - plasma.a - 0.01, plasma.r0 + plasma.a + 0.01, plasma.r0, -1.0])
        z = np.array([0.0, 0.0, plasma.a + 0.01, np.nan])
        np.testing.assert_array_equal(dd_source.intensity_at(r, z), np.zeros(4))

    def test_box_corner_is_outside_plasma(self, dd_source, plasma):
        assert dd_source(plasma.r0 + plasma.a, plasma.a) == 0.0

    def test_profiles_at_points(self, dd_source, plasma):
        assert dd_source.temperature_at(plasma.r0, 0.0) == pytest.approx(plasma.t0)
        assert dd_source.density_at(plasma.r0 + 0.5 * plasma.a, 0.0) == pytest.approx(0.75 * plasma.n0, rel=1e-8)
        assert dd_source.temperature(1.5) == 0.0

    def test_domain_is_geometry_box(self, dd_source, circular_geometry):
        assert dd_source.domain() == circular_geometry.domain()
        assert dd_source.geometry is circular_geometry


# ── Shapes ────────────────────────────────────────────────────────────

class TestEvaluationShapes:

    def test_scalar_returns_float(self, dd_source, plasma):
        assert isinstance(dd_source.intensity_at(plasma.r0, 0.1), float)
        assert isinstance(dd_source.intensity(0.3), float)

    def test_broadcasting(self, dd_source):
        r = np.linspace(1.5, 2.5, 4)[:, np.newaxis]
        z = np.linspace(-0.5, 0.5, 6)
        out = dd_source.intensity_at(r, z)
        assert out.shape == (4, 6)
        np.testing.assert_allclose(out[2, 3], dd_source.intensity_at(r[2, 0], z[3]))

    def test_mesh_orientation(self, dd_source, plasma):
        r = np.array([plasma.r0, plasma.r0 + 0.9 * plasma.a])
        z = np.array([0.0, 0.5 * plasma.a])
        grid = dd_source.intensity_on_mesh(r, z)
        assert grid.shape == (2, 2)
        assert grid[0, 0] > grid[0, 1] > grid[1, 0] > 0.0
        assert grid[1, 1] == 0.0

    def test_call_matches_intensity_at(self, dd_source):
        r = np.linspace(1.6, 2.4, 9)
        np.testing.assert_array_equal(dd_source(r, 0.1), dd_source.intensity_at(r, 0.1))

    def test_repeated_evaluation_is_identical(self, dd_source):
        r = np.linspace(1.5, 2.5, 17)
        z = np.linspace(-0.5, 0.5, 13)
        np.testing.assert_array_equal(dd_source.intensity_on_mesh(r, z), dd_source.intensity_on_mesh(r, z))


# ── DT ────────────────────────────────────────────────────────────────

class TestDTDistribution:

    def test_axis_intensity_equal_mix(self, dt_source, plasma):
        expected = 0.25 * plasma.n0 ** 2 * sigmav_dt(plasma.t0)
        assert dt_source.intensity(0.0) == pytest.approx(expected, rel=1e-12)

    def test_concentrations(self, dt_source, plasma):
        nd, nt = dt_source.concentrations(0.0)
        assert nd == pytest.approx(0.5 * plasma.n0)
        assert nt == pytest.approx(0.5 * plasma.n0)

    def test_lean_tritium_mix(self, circular_geometry, profile_table, plasma):
        dt = DTDistribution.from_profiles(circular_geometry, profile_table, fuel_ratio=0.1)
        expected = 0.9 * 0.1 * plasma.n0 ** 2 * sigmav_dt(plasma.t0)
        assert dt.intensity(0.0) == pytest.approx(expected, rel=1e-12)

    @pytest.mark.parametrize("eta", [0.0, 1.0])
    def test_pure_fuel_has_no_dt_source(self, circular_geometry, profile_table, eta):
        dt = DTDistribution.from_profiles(circular_geometry, profile_table, fuel_ratio=eta)
        assert dt.intensity(0.0) == 0.0

    @pytest.mark.parametrize("eta", [-0.1, 1.5])
    def test_fuel_ratio_out_of_range(self, circular_geometry, profile_table, eta):
        with pytest.raises(ValueError, match="fuel_ratio"):
            DTDistribution.from_profiles(circular_geometry, profile_table, fuel_ratio=eta)

    @pytest.mark.parametrize("eta", [lambda psi: 1.5, lambda psi: psi - 0.5, lambda psi: np.full_like(psi, np.nan)])
    def test_fuel_ratio_profile_out_of_range(self, circular_geometry, profile_table, eta):
        dt = DTDistribution.from_profiles(circular_geometry, profile_table, fuel_ratio=eta)
        with pytest.raises(ValueError, match=r"fuel_ratio must lie in \[0, 1\]"):
            dt.intensity(0.0)
        with pytest.raises(ValueError, match="fuel_ratio"):
            dt.concentrations(np.array([0.0, 0.5]))

    def test_fuel_ratio_profile(self, circular_geometry, profile_table, plasma):
        dt = DTDistribution.from_profiles(circular_geometry, profile_table, fuel_ratio=lambda psi: 0.5 * (1.0 - psi))
        np.testing.assert_allclose(dt.fuel_ratio(np.array([0.0, 0.5])), [0.5, 0.25])
        n = 0.5 * plasma.n0
        expected = 0.75 * n * 0.25 * n * sigmav_dt(plasma.t0)
        assert dt.intensity(0.5) == pytest.approx(expected, rel=1e-10)

    def test_zero_outside_last_closed_surface(self, dt_source):
        assert dt_source.intensity(1.2) == 0.0

    def test_dt_exceeds_dd(self, dd_source, dt_source):
        psi = np.linspace(0.0, 0.9, 10)
        assert np.all(dt_source.intensity(psi) > 50.0 * dd_source.intensity(psi))


def test_from_profiles_builds_interpolants(circular_geometry, profile_table):
    dd = DDDistribution.from_profiles(circular_geometry, profile_table)
    np.testing.assert_allclose(dd.density(profile_table.psi), profile_table.density, rtol=1e-12, atol=1.0)
    np.testing.assert_allclose(dd.temperature(profile_table.psi), profile_table.temperature)
