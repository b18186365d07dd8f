# ──────────────────────────────────────────────────────────────────────
# Fusion Neutron Source — Command Line Interface
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
import numpy as np
from pydantic import ValidationError

from fusion_neutron_source.core.config_schema import SourceConfig, load_config
from fusion_neutron_source.core.integration import CubatureConvergenceError, centroid, total_yield
from fusion_neutron_source.core.mesh import peak_cell, source_probability_map, variance_on_mesh
from fusion_neutron_source.io.csv_export import write_array_csv, write_mesh_csv
from fusion_neutron_source.io.loaders import load_distribution
from fusion_neutron_source.io.logging_config import setup_source_logging


LOGGER = logging.getLogger("fusion_neutron_source.cli")


class _Session:
    """Config plus lazily loaded distribution shared by the subcommands."""

    def __init__(self, config: SourceConfig) -> None:
        self.config = config
        self._distribution = None

    @property
    def settings(self):
        return self.config.integration.to_settings()

    @property
    def distribution(self):
        if self._distribution is None:
            try:
                self._distribution = load_distribution(self.config)
            except (OSError, ValueError, KeyError) as exc:
                raise click.ClickException(f"Cannot build neutron source: {exc}") from exc
        return self._distribution

    def mesh(self) -> tuple[np.ndarray, np.ndarray]:
        rmin, rmax, zmin, zmax = self.distribution.domain()
        return (
            np.linspace(rmin, rmax, self.config.mesh.nr),
            np.linspace(zmin, zmax, self.config.mesh.nz),
        )


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--log-level",
    default="INFO",
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level.",
)
@click.option("--json-logs", is_flag=True, help="Emit structured JSON log lines.")
@click.pass_context
def cli(ctx: click.Context, config_path: Path, log_level: str, json_logs: bool) -> None:
    """Neutron source of a tokamak plasma described by CONFIG_PATH (JSON)."""
    setup_source_logging(level=getattr(logging, log_level.upper()), json_output=json_logs)
    try:
        config = load_config(config_path)
    except (ValidationError, json.JSONDecodeError) as exc:
        raise click.ClickException(f"Invalid configuration {config_path}: {exc}") from exc
    LOGGER.debug("Configuration %s loaded from %s", config.name, config_path)
    ctx.obj = _Session(config)


@cli.command("yield")
@click.pass_obj
def yield_cmd(session: _Session) -> None:
    """Total neutron yield over the plasma volume."""
    res = total_yield(session.distribution, session.settings)
    click.echo(f"yield [n/s]     : {res.value:.6e}")
    click.echo(f"abs. error      : {res.error:.3e}")
    click.echo(f"rel. error      : {res.relative_error:.3e}")
    click.echo(f"evaluations     : {res.neval}")
    click.echo(f"converged       : {'yes' if res.converged else 'no'}")


@cli.command("centroid")
@click.pass_obj
def centroid_cmd(session: _Session) -> None:
    """Yield-weighted centroid (first moment) of the source."""
    try:
        res = centroid(session.distribution, session.settings)
    except CubatureConvergenceError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"R [m]           : {res.centroid[0]:.6f} ± {res.error[0]:.2e}")
    click.echo(f"Z [m]           : {res.centroid[1]:.6f} ± {res.error[1]:.2e}")
    click.echo(f"converged       : {'yes' if res.converged else 'no'}")


@cli.command("map")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
)
@click.pass_obj
def map_cmd(session: _Session, output_dir: Path) -> None:
    """Write mesh.csv and intensity.csv on the configured mesh."""
    r, z = session.mesh()
    intensity = session.distribution.intensity_on_mesh(r, z)
    output_dir.mkdir(parents=True, exist_ok=True)
    mesh_path = write_mesh_csv(output_dir / "mesh.csv", r, z)
    values_path = write_array_csv(output_dir / "intensity.csv", intensity)
    LOGGER.info("Intensity map %s written to %s", intensity.shape, values_path)
    click.echo(f"{mesh_path}\n{values_path}")


@cli.command("variance")
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), required=True)
@click.pass_obj
def variance_cmd(session: _Session, output: Path) -> None:
    """Write the per-cell relative variance of the configured mesh."""
    r, z = session.mesh()
    vom = variance_on_mesh(session.distribution.intensity_at, r, z, session.settings)
    write_array_csv(output, vom)
    flagged = int(np.count_nonzero(vom >= 1.0))
    click.echo(f"{output} ({flagged} of {vom.size} cells flagged)")


@cli.command("sdef")
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), required=True)
@click.pass_obj
def sdef_cmd(session: _Session, output: Path) -> None:
    """Write normalized cell source probabilities on the configured mesh."""
    mesh = session.config.mesh
    r_bins, z_bins, src = source_probability_map(session.distribution, mesh.nr, mesh.nz, session.settings)
    write_array_csv(output, src)
    write_mesh_csv(output.with_name(output.stem + "_mesh.csv"), r_bins, z_bins)
    r_peak, z_peak = peak_cell(r_bins, z_bins, src)
    click.echo(f"{output} (peak cell at R={r_peak:.4f} m, Z={z_peak:.4f} m)")


@cli.command("plot")
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), required=True)
@click.pass_obj
def plot_cmd(session: _Session, output: Path) -> None:
    """Save a contour plot of the source intensity."""
    from fusion_neutron_source.core.eqdsk import read_geqdsk
    from fusion_neutron_source.diagnostics.plotting import plot_neutron_source

    r, z = session.mesh()
    eq = read_geqdsk(session.config.equilibrium_path)
    fig = plot_neutron_source(session.distribution, r, z, eq=eq)
    fig.savefig(output, dpi=150)
    click.echo(str(output))


def main() -> int:
    try:
        cli.main(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.exceptions.Abort:
        return 1
    except SystemExit as exc:
        code = exc.code if isinstance(exc.code, int) else 1
        return code
    return 0


if __name__ == "__main__":
    sys.exit(main())
