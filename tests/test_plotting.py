"""Tests for plotting results."""

import matplotlib
import numpy as np
import pytest
from matplotlib import pyplot as plt

from pycomod.utils import ResultsComodulogram
from pycomod.utils._plot import _PlotDiagnostics
from pycomod.utils._utils import _generate_data

# interactive backends can fail seemingly randomly when using pytest, even if plt.show()
# not called, so stick to non-interactive backend
matplotlib.use("Agg")


def _get_results(n_chans: int = 9) -> ResultsComodulogram:
    """Get comodulogram results to plot."""
    f1s = np.arange(4, 23, dtype=np.float64)
    f2s = np.arange(30, 81, 2, dtype=np.float64)
    data = _generate_data(n_chans, f2s.size, f1s.size)
    return ResultsComodulogram(
        data=data, indices=tuple(range(n_chans)), f1s=f1s, f2s=f2s, name="test"
    )


def test_plotting_comodulogram_error_catch() -> None:
    """Test plotting in `ResultsComodulogram` catches errors."""
    n_chans = 9
    results = _get_results(n_chans)

    with pytest.raises(TypeError, match="`nodes` must be an int or tuple."):
        results.plot(nodes=[0])
    with pytest.raises(TypeError, match="`nodes` must be an int or tuple."):
        results.plot(nodes=0.5)
    with pytest.raises(TypeError, match="Entries of `nodes` must be ints."):
        results.plot(nodes=(0.5,))
    with pytest.raises(
        ValueError, match="The requested node is not present in the results."
    ):
        results.plot(nodes=n_chans + 1)
    with pytest.raises(
        ValueError, match="The requested node is not present in the results."
    ):
        results.plot(nodes=(-1,))

    with pytest.raises(TypeError, match="`n_rows` and `n_cols` must be integers."):
        results.plot(n_rows=0.5)
    with pytest.raises(TypeError, match="`n_rows` and `n_cols` must be integers."):
        results.plot(n_cols=0.5)
    with pytest.raises(ValueError, match="`n_rows` and `n_cols` must be >= 1."):
        results.plot(n_rows=0)
    with pytest.raises(ValueError, match="`n_rows` and `n_cols` must be >= 1."):
        results.plot(n_cols=0)

    with pytest.raises(TypeError, match="`f1s` and `f2s` must be tuples."):
        results.plot(f1s=0)
    with pytest.raises(TypeError, match="`f1s` and `f2s` must be tuples."):
        results.plot(f2s=0)
    with pytest.raises(ValueError, match="`f1s` and `f2s` must have lengths of 2."):
        results.plot(f1s=(4, 5, 6))
    with pytest.raises(ValueError, match="`f1s` and `f2s` must have lengths of 2."):
        results.plot(f2s=(30, 32, 34))
    with pytest.raises(
        ValueError,
        match="No frequencies are present in the data for the range in `f1s`.",
    ):
        results.plot(f1s=(10, 5))
    with pytest.raises(
        ValueError,
        match="No frequencies are present in the data for the range in `f1s`.",
    ):
        results.plot(f1s=(10.1, 10.2))
    with pytest.raises(
        ValueError,
        match="No frequencies are present in the data for the range in `f2s`.",
    ):
        results.plot(f2s=(40, 30))
    with pytest.raises(
        ValueError,
        match="No frequencies are present in the data for the range in `f2s`.",
    ):
        results.plot(f2s=(30.5, 31.5))

    with pytest.raises(
        TypeError,
        match=(
            "`major_tick_intervals` and `minor_tick_intervals` should be ints or "
            "floats."
        ),
    ):
        results.plot(major_tick_intervals="5")
    with pytest.raises(
        ValueError,
        match=(r"`major_tick_intervals` and `minor_tick_intervals` should be \> 0."),
    ):
        results.plot(minor_tick_intervals=0)
    with pytest.raises(
        ValueError, match=r"`major_tick_intervals` should be \> `minor_tick_intervals`."
    ):
        results.plot(major_tick_intervals=5, minor_tick_intervals=7)

    with pytest.raises(TypeError, match="`cbar_range` must be a list, tuple, or None."):
        results.plot(cbar_range=np.array([0, 1]))
    with pytest.raises(
        ValueError,
        match=(
            "If `cbar_range` is a list, one entry must be provided for each node being "
            "plotted."
        ),
    ):
        results.plot(cbar_range=[None])
    with pytest.raises(
        ValueError, match="Limits in `cbar_range` must have length of 2."
    ):
        results.plot(cbar_range=(0, 1, 2))
    with pytest.raises(
        ValueError, match="Limits in `cbar_range` must have length of 2."
    ):
        results.plot(cbar_range=[(0, 1, 2) for _ in range(n_chans)])


@pytest.mark.filterwarnings(
    r"ignore:Adding colorbar to a different Figure.*than.*which fig.colorbar is "
    "called on"
)
def test_plotting_comodulogram_runs() -> None:
    """Test plotting in `ResultsComodulogram` runs with correct inputs."""
    n_chans = 9
    results = _get_results(n_chans)

    figs, axes = results.plot(show=False)
    assert len(figs) == n_chans
    assert len(axes) == n_chans
    assert axes[0][0].get_xlabel() == "Phase frequency (Hz)"
    assert axes[0][0].get_ylabel() == "Amplitude frequency (Hz)"
    assert axes[0][0].get_title() == "Channel: 0"
    plt.close("all")

    # check it works with nodes and row * cols matching
    figs, axes = results.plot(n_rows=3, n_cols=3, show=False)
    assert len(figs) == 1
    assert len(axes) == 1
    assert axes[0].size == n_chans
    plt.close("all")

    # check it works with nodes and row * cols not matching
    figs, axes = results.plot(nodes=(0, 1, 2), n_rows=2, n_cols=2, show=False)
    assert len(figs) == 1
    assert len(axes) == 1
    assert axes[0].size == 3
    plt.close("all")

    figs, axes = results.plot(nodes=4, show=False)
    assert axes[0][0].get_title() == "Channel: 4"
    plt.close("all")

    # check it works with subsets of (non-exact) frequencies
    figs, axes = results.plot(f1s=(4.5, 10.5), f2s=(31, 51), show=False)
    mesh = axes[0][0].collections[0]
    assert mesh.get_array().size == 6 * 10
    plt.close("all")

    # check it works with colourbar ranges
    figs, axes = results.plot(cbar_range=(0, 1), show=False)
    assert axes[0][0].collections[0].get_clim() == (0, 1)
    plt.close("all")
    figs, axes = results.plot(
        nodes=(0, 1), cbar_range=[(0, 1), (0.2, 0.8)], show=False
    )
    assert axes[1][0].collections[0].get_clim() == (0.2, 0.8)
    plt.close("all")


def test_plotting_diagnostics() -> None:
    """Test diagnostic plotting of intermediate results."""
    f1s = np.arange(4, 7, dtype=np.float64)
    f2s = np.arange(30, 35, 2, dtype=np.float64)
    n_bins = 18

    plotter = _PlotDiagnostics(f1s, f2s, n_bins)

    # profile is drawn over two cycles and normalised to sum to 1 per cycle
    profile = np.arange(n_bins, dtype=np.float64) + 1
    plotter.plot_profile(profile, phase_freq=4.0, amp_freq=30.0, epoch_i=2)
    axis = plotter.profile_figure.axes[0]
    heights = np.array([patch.get_height() for patch in axis.patches])
    assert heights.size == 2 * n_bins
    assert np.allclose(heights[:n_bins], profile / profile.sum())
    assert np.allclose(heights[:n_bins], heights[n_bins:])
    assert axis.get_xlim() == (0, 720)
    assert axis.get_title() == "Phase: 4.0 Hz | Amplitude: 30.0 Hz | Epoch: 2"

    plotter.plot_profile(profile, 4.0, 30.0, 7, surrogate=True)
    axis = plotter.profile_figure.axes[0]
    assert len(axis.patches) == 2 * n_bins
    assert axis.get_title() == "Phase: 4.0 Hz | Amplitude: 30.0 Hz | Surrogate: 7"

    # comodulogram can be drawn before and after values are computed
    comodulogram = np.full((f2s.size, f1s.size), fill_value=np.nan)
    plotter.plot_comodulogram(comodulogram, channel=0)
    assert plotter.comodulogram_figure.axes[0].collections[0].get_clim() == (0, 1)

    comodulogram[0, 0] = 0.2
    comodulogram[1, 2] = 0.6
    plotter.plot_comodulogram(comodulogram, channel=0)
    axis = plotter.comodulogram_figure.axes[0]
    assert axis.collections[0].get_clim() == (0.2, 0.6)
    assert axis.get_title() == "Channel: 0"
    # previous colourbar is replaced
    assert len(plotter.comodulogram_figure.axes) == 2

    plt.close("all")
