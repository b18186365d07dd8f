# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — G-EQDSK Equilibrium File Parser
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Reader and writer for the G-EQDSK (EFIT) equilibrium file format.

Only the parts of the file the neutron source needs are interpreted
semantically (flux map, axis, boundary and limiter contours); the 1-D
profile arrays are kept so that files survive a read/write round trip.

Format specification
--------------------
- Fortran fixed-width: 5 values per line, ``(5e16.9)``
- Header line: 48-char description, 3 ints (idum, nw, nh)
- Scalars block (20 values): rdim, zdim, rcentr, rleft, zmid,
  rmaxis, zmaxis, simag, sibry, bcentr, current, …
- 1-D arrays (each nw values): fpol, pres, ffprime, pprime
- 2-D array: psirz (nh × nw values, row-major), then qpsi
- Boundary & limiter point counts + interleaved (R,Z) pairs
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Union

import numpy as np
from numpy.typing import NDArray


def _empty() -> NDArray:
    return np.array([])


@dataclass
class GEqdsk:
    """Container for the data of a G-EQDSK file."""

    description: str = ""
    nw: int = 0              # R grid points
    nh: int = 0              # Z grid points

    rdim: float = 0.0        # horizontal extent of the grid (m)
    zdim: float = 0.0        # vertical extent of the grid (m)
    rcentr: float = 0.0
    rleft: float = 0.0       # R at left edge of the grid (m)
    zmid: float = 0.0        # Z at grid centre (m)
    rmaxis: float = 0.0
    zmaxis: float = 0.0
    simag: float = 0.0       # ψ at magnetic axis (Wb/rad)
    sibry: float = 0.0       # ψ at plasma boundary (Wb/rad)
    bcentr: float = 0.0
    current: float = 0.0

    fpol: NDArray = field(default_factory=_empty)
    pres: NDArray = field(default_factory=_empty)
    ffprime: NDArray = field(default_factory=_empty)
    pprime: NDArray = field(default_factory=_empty)
    qpsi: NDArray = field(default_factory=_empty)

    psirz: NDArray = field(default_factory=_empty)   # (nh, nw)

    rbdry: NDArray = field(default_factory=_empty)
    zbdry: NDArray = field(default_factory=_empty)
    rlim: NDArray = field(default_factory=_empty)
    zlim: NDArray = field(default_factory=_empty)

    @property
    def r(self) -> NDArray:
        """1-D array of R grid values."""
        return np.linspace(self.rleft, self.rleft + self.rdim, self.nw)

    @property
    def z(self) -> NDArray:
        """1-D array of Z grid values."""
        return np.linspace(self.zmid - self.zdim / 2, self.zmid + self.zdim / 2, self.nh)

    @property
    def magnetic_axis(self) -> tuple[float, float]:
        return float(self.rmaxis), float(self.zmaxis)

    def psi_to_norm(self, psi: NDArray) -> NDArray:
        """Map raw ψ to normalised ψ_N (axis=0, boundary=1)."""
        return (psi - self.simag) / (self.sibry - self.simag)

    def boundary_box(self) -> tuple[float, float, float, float]:
        """``(rmin, rmax, zmin, zmax)`` of the plasma boundary contour."""
        if self.rbdry.size == 0 or self.zbdry.size == 0:
            raise ValueError("G-EQDSK has no plasma boundary contour.")
        return (
            float(np.min(self.rbdry)),
            float(np.max(self.rbdry)),
            float(np.min(self.zbdry)),
            float(np.max(self.zbdry)),
        )


# ── Reader ────────────────────────────────────────────────────────────

# Fortran floats may run together without whitespace, e.g.
# "2.385E+00-1.216E+01".
_FORTRAN_FLOAT_RE = re.compile(r"[+-]?\d*\.?\d+(?:[eEdD][+-]?\d+)?")

_SCALAR_NAMES = (
    "rdim", "zdim", "rcentr", "rleft", "zmid",
    "rmaxis", "zmaxis", "simag", "sibry", "bcentr",
    "current",
)
_SCALAR_BLOCK = 20


def _tokens(lines: list[str]) -> Iterator[float]:
    for line in lines:
        for tok in _FORTRAN_FLOAT_RE.findall(line):
            yield float(tok.replace("D", "E").replace("d", "e"))


def _parse_header(line: str) -> tuple[str, int, int]:
    parts = line.split()
    if len(parts) < 3:
        raise ValueError(f"Malformed G-EQDSK header: {line.strip()!r}")
    nw, nh = int(parts[-2]), int(parts[-1])
    return " ".join(parts[:-3]), nw, nh


def read_geqdsk(path: Union[str, Path]) -> GEqdsk:
    """
    Read a G-EQDSK file.

    Parameters
    ----------
    path : str or Path
        Path to the G-EQDSK file.

    Returns
    -------
    GEqdsk
        Parsed equilibrium data.

    Raises
    ------
    ValueError
        If the header is malformed or the file ends before all blocks are read.
    """
    path = Path(path)
    lines = path.read_text().splitlines()
    if not lines:
        raise ValueError(f"{path.name}: empty G-EQDSK file.")
    desc, nw, nh = _parse_header(lines[0])
    stream = _tokens(lines[1:])

    def take(n: int) -> NDArray:
        if n == 0:
            return np.array([])
        return np.fromiter(stream, dtype=np.float64, count=n)

    try:
        scalars = take(_SCALAR_BLOCK)
        fpol = take(nw)
        pres = take(nw)
        ffprime = take(nw)
        pprime = take(nw)
        psirz = take(nh * nw).reshape(nh, nw)
        qpsi = take(nw)
        nbdry, nlim = (int(v) for v in take(2))
        bdry = take(2 * nbdry).reshape(nbdry, 2)
        lim = take(2 * nlim).reshape(nlim, 2)
    except ValueError as exc:
        raise ValueError(f"{path.name}: truncated G-EQDSK data ({exc}).") from exc

    eq = GEqdsk(
        description=desc,
        nw=nw,
        nh=nh,
        fpol=fpol,
        pres=pres,
        ffprime=ffprime,
        pprime=pprime,
        qpsi=qpsi,
        psirz=psirz,
        rbdry=bdry[:, 0].copy(),
        zbdry=bdry[:, 1].copy(),
        rlim=lim[:, 0].copy(),
        zlim=lim[:, 1].copy(),
    )
    for name, value in zip(_SCALAR_NAMES, scalars):
        setattr(eq, name, float(value))
    return eq


# ── Writer ────────────────────────────────────────────────────────────

def _write_block(f, values: NDArray) -> None:
    flat = np.asarray(values, dtype=np.float64).ravel()
    for start in range(0, flat.size, 5):
        f.write("".join(f"{v:16.9e}" for v in flat[start:start + 5]) + "\n")


def write_geqdsk(eq: GEqdsk, path: Union[str, Path]) -> None:
    """Write *eq* to *path* in G-EQDSK format."""
    scalars = [
        eq.rdim, eq.zdim, eq.rcentr, eq.rleft, eq.zmid,
        eq.rmaxis, eq.zmaxis, eq.simag, eq.sibry, eq.bcentr,
        eq.current, eq.simag, 0.0, eq.rmaxis, 0.0,
        eq.zmaxis, 0.0, eq.sibry, 0.0, 0.0,
    ]
    with open(Path(path), "w") as f:
        f.write(f"{eq.description[:48].ljust(48)}   0 {eq.nw:4d} {eq.nh:4d}\n")
        _write_block(f, np.array(scalars))
        for arr in (eq.fpol, eq.pres, eq.ffprime, eq.pprime, eq.psirz, eq.qpsi):
            _write_block(f, arr)
        f.write(f"{len(eq.rbdry):5d}{len(eq.rlim):5d}\n")
        _write_block(f, np.column_stack((eq.rbdry, eq.zbdry)))
        _write_block(f, np.column_stack((eq.rlim, eq.zlim)))
