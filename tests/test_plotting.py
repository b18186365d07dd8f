from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest

from fusion_neutron_source.diagnostics.plotting import plot_neutron_source, plot_variance_map


def test_plot_neutron_source_with_equilibrium(dd_source, circular_eqdsk, tmp_path) -> None:
    r = np.linspace(1.5, 2.5, 21)
    z = np.linspace(-0.5, 0.5, 21)
    fig = plot_neutron_source(dd_source, r, z, eq=circular_eqdsk)
    try:
        ax = fig.axes[0]
        assert ax.get_xlabel() == "R, m"
        assert len(ax.get_legend().get_texts()) == 3
        fig.savefig(tmp_path / "source.png")
        assert (tmp_path / "source.png").stat().st_size > 0
    finally:
        plt.close(fig)


def test_plot_on_existing_axes(ring_source) -> None:
    fig, ax = plt.subplots()
    try:
        out = plot_neutron_source(ring_source, np.linspace(1.0, 3.0, 11), np.linspace(-1.0, 1.0, 11), ax=ax)
        assert out is fig
    finally:
        plt.close(fig)


def test_plot_variance_map() -> None:
    r_bins = np.linspace(1.0, 2.0, 5)
    z_bins = np.linspace(-1.0, 1.0, 6)
    fig = plot_variance_map(np.random.default_rng(0).uniform(size=(4, 5)), r_bins, z_bins)
    try:
        assert fig.axes[0].get_title() == "Cell relative variance"
    finally:
        plt.close(fig)


def test_plot_variance_map_rejects_bad_shape() -> None:
    with pytest.raises(ValueError, match="does not match"):
        plot_variance_map(np.zeros((3, 3)), np.linspace(0.0, 1.0, 5), np.linspace(0.0, 1.0, 5))
