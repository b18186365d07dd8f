# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — G-EQDSK Parser Tests
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Tests for the G-EQDSK reader/writer round-trip and malformed files."""

from pathlib import Path

import numpy as np
import pytest

from fusion_neutron_source.core.eqdsk import GEqdsk, read_geqdsk, write_geqdsk

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture
def roundtrip(circular_eqdsk, tmp_path):
    path = tmp_path / "circular.geqdsk"
    write_geqdsk(circular_eqdsk, path)
    return circular_eqdsk, read_geqdsk(path)


# ── Round-trip tests ──────────────────────────────────────────────────

class TestEqdskRoundTrip:
    """Write then read a synthetic G-EQDSK; values must survive the trip."""

    def test_header(self, roundtrip):
        eq, eq2 = roundtrip
        assert eq2.description == eq.description
        assert eq2.nw == eq.nw
        assert eq2.nh == eq.nh

    def test_scalars(self, roundtrip):
        eq, eq2 = roundtrip
        for name in ("rdim", "zdim", "rleft", "zmid", "rmaxis", "zmaxis", "simag", "sibry", "bcentr"):
            assert getattr(eq2, name) == pytest.approx(getattr(eq, name), abs=1e-8), name
        assert eq2.current == pytest.approx(eq.current, abs=1.0)

    def test_profiles(self, roundtrip):
        eq, eq2 = roundtrip
        np.testing.assert_allclose(eq2.fpol, eq.fpol, atol=1e-6)
        np.testing.assert_allclose(eq2.pres, eq.pres, rtol=1e-5)
        np.testing.assert_allclose(eq2.qpsi, eq.qpsi, atol=1e-6)

    def test_flux_map(self, roundtrip):
        eq, eq2 = roundtrip
        assert eq2.psirz.shape == (eq.nh, eq.nw)
        np.testing.assert_allclose(eq2.psirz, eq.psirz, rtol=1e-8, atol=1e-12)

    def test_boundary_limiter(self, roundtrip):
        eq, eq2 = roundtrip
        np.testing.assert_allclose(eq2.rbdry, eq.rbdry, atol=1e-8)
        np.testing.assert_allclose(eq2.zbdry, eq.zbdry, atol=1e-8)
        np.testing.assert_allclose(eq2.rlim, eq.rlim, atol=1e-8)
        np.testing.assert_allclose(eq2.zlim, eq.zlim, atol=1e-8)

    def test_rectangular_grid(self, tmp_path):
        nw, nh = 7, 11
        eq = GEqdsk(
            description="rect",
            nw=nw,
            nh=nh,
            rdim=1.0,
            zdim=2.0,
            rleft=1.0,
            sibry=1.0,
            fpol=np.ones(nw),
            pres=np.ones(nw),
            ffprime=np.ones(nw),
            pprime=np.ones(nw),
            qpsi=np.ones(nw),
            psirz=np.arange(nh * nw, dtype=float).reshape(nh, nw),
        )
        path = tmp_path / "rect.geqdsk"
        write_geqdsk(eq, path)
        eq2 = read_geqdsk(path)
        np.testing.assert_array_equal(eq2.psirz, eq.psirz)
        assert eq2.rbdry.size == 0
        assert eq2.rlim.size == 0


class TestMalformedFiles:

    def test_truncated_file(self, circular_eqdsk, tmp_path):
        path = tmp_path / "cut.geqdsk"
        write_geqdsk(circular_eqdsk, path)
        lines = path.read_text().splitlines()
        path.write_text("\n".join(lines[: len(lines) // 2]) + "\n")
        with pytest.raises(ValueError, match="cut.geqdsk"):
            read_geqdsk(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.geqdsk"
        path.write_text("")
        with pytest.raises(ValueError, match="empty"):
            read_geqdsk(path)

    def test_bad_header(self, tmp_path):
        path = tmp_path / "bad.geqdsk"
        path.write_text("EFIT\n")
        with pytest.raises(ValueError, match="header"):
            read_geqdsk(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_geqdsk(tmp_path / "nope.geqdsk")

    def test_fused_fortran_numbers(self, tmp_path):
        nw = nh = 2
        scalars = [1.0, 2.0, 0.0, 1.0, 0.0, 1.5, 0.0, -1.0, 1.0, 5.0] + [0.0] * 10
        body = "".join(f"{v:16.9e}" for v in scalars)
        block = "".join(f"{v:16.9e}" for v in [0.0] * (4 * nw) + [-1.0, -0.5, 0.5, 1.0] + [1.0] * nw)
        path = tmp_path / "fused.geqdsk"
        path.write_text(f"fused   0    {nw}    {nh}\n{body}\n{block}\n    0    0\n")
        eq = read_geqdsk(path)
        assert eq.simag == -1.0
        np.testing.assert_array_equal(eq.psirz, [[-1.0, -0.5], [0.5, 1.0]])


# ── Derived properties ────────────────────────────────────────────────

class TestGEqdskProperties:
    """Derived grid, normalisation and boundary box."""

    def test_r_grid(self, circular_eqdsk):
        r = circular_eqdsk.r
        assert len(r) == circular_eqdsk.nw
        assert r[0] == pytest.approx(circular_eqdsk.rleft)
        assert r[-1] == pytest.approx(circular_eqdsk.rleft + circular_eqdsk.rdim)

    def test_z_grid(self, circular_eqdsk):
        z = circular_eqdsk.z
        assert len(z) == circular_eqdsk.nh
        assert z[0] == pytest.approx(circular_eqdsk.zmid - circular_eqdsk.zdim / 2)

    def test_psi_to_norm(self, circular_eqdsk):
        eq = circular_eqdsk
        eq.simag, eq.sibry = -2.0, 3.0
        np.testing.assert_allclose(eq.psi_to_norm(np.array([-2.0, 0.5, 3.0])), [0.0, 0.5, 1.0])

    def test_boundary_box(self, circular_eqdsk, plasma):
        rmin, rmax, zmin, zmax = circular_eqdsk.boundary_box()
        assert rmin == pytest.approx(plasma.r0 - plasma.a)
        assert rmax == pytest.approx(plasma.r0 + plasma.a)
        assert zmin == pytest.approx(-plasma.a)
        assert zmax == pytest.approx(plasma.a)

    def test_boundary_box_requires_contour(self):
        with pytest.raises(ValueError, match="boundary"):
            GEqdsk().boundary_box()


@pytest.mark.skipif(
    not (DATA_DIR / "beforeTQ.eqdsk").exists(),
    reason="reference equilibrium not available",
)
def test_reference_equilibrium_parses():
    eq = read_geqdsk(DATA_DIR / "beforeTQ.eqdsk")
    assert eq.psirz.shape == (eq.nh, eq.nw)
    assert eq.rbdry.size > 10
    assert eq.sibry != eq.simag
