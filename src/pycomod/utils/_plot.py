"""Private helper tools for plotting results."""

from abc import ABC, abstractmethod

import numpy as np
from matplotlib import pyplot as plt
from matplotlib.figure import Figure

from pycomod.utils._utils import _int_like, _number_like


class _PlotBase(ABC):
    """Base class for plotting results.

    Notes
    -----
    Does not check initialisation inputs, assuming these have been checked by the
    publicly-avaiable class/function.
    """

    f1s: np.ndarray = None
    f2s: np.ndarray = None

    def __init__(self, data: np.ndarray, indices: tuple[int], name: str) -> None:
        self._data = data
        self._indices = indices
        self.n_nodes = len(indices)
        self.name = name

    @abstractmethod
    def plot(self) -> None:
        """Plot the results."""

    def _sort_plot_inputs(
        self,
        nodes: int | tuple[int] | None,
        n_rows: int,
        n_cols: int,
        major_tick_intervals: int | float,
        minor_tick_intervals: int | float,
    ) -> tuple[int]:
        """Sort the plotting inputs.

        Returns
        -------
        nodes : tuple of int
        """
        if nodes is None:
            nodes = tuple(range(self.n_nodes))
        if not isinstance(nodes, _int_like + (tuple,)):
            raise TypeError("`nodes` must be an int or tuple.")
        if isinstance(nodes, _int_like):
            nodes = (nodes,)
        if not all(isinstance(node, _int_like) for node in nodes):
            raise TypeError("Entries of `nodes` must be ints.")
        if any(node >= self.n_nodes for node in nodes) or any(
            node < 0 for node in nodes
        ):
            raise ValueError("The requested node is not present in the results.")

        if not isinstance(n_rows, _int_like) or not isinstance(n_cols, _int_like):
            raise TypeError("`n_rows` and `n_cols` must be integers.")
        if n_rows < 1 or n_cols < 1:
            raise ValueError("`n_rows` and `n_cols` must be >= 1.")

        if not isinstance(major_tick_intervals, _number_like) or not isinstance(
            minor_tick_intervals, _number_like
        ):
            raise TypeError(
                "`major_tick_intervals` and `minor_tick_intervals` should be ints or "
                "floats."
            )
        if major_tick_intervals <= 0 or minor_tick_intervals <= 0:
            raise ValueError(
                "`major_tick_intervals` and `minor_tick_intervals` should be > 0."
            )
        if minor_tick_intervals >= major_tick_intervals:
            raise ValueError(
                "`major_tick_intervals` should be > `minor_tick_intervals`."
            )

        return nodes

    def _sort_freq_inputs(
        self, f1s: tuple[int | float] | None, f2s: tuple[int | float] | None
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Sort ``f1s`` and ``f2s`` inputs.

        Returns
        -------
        f1s : numpy.ndarray of float
            Phase frequencies in the results to plot.

        f2s : numpy.ndarray of float
            Amplitude frequencies in the results to plot.

        f1_idcs : numpy.ndarray of int
            Indices of ``f1s`` in the results.

        f2_idcs : numpy.ndarray of int
            Indices of ``f2s`` in the results.
        """
        for freqs in (f1s, f2s):
            if freqs is not None:
                if not isinstance(freqs, tuple):
                    raise TypeError("`f1s` and `f2s` must be tuples.")
                if len(freqs) != 2:
                    raise ValueError("`f1s` and `f2s` must have lengths of 2.")

        if f1s is None:
            f1_idcs = np.arange(self.f1s.size, dtype=np.int32)
        else:
            f1_idcs = np.argwhere((self.f1s >= f1s[0]) & (self.f1s <= f1s[1])).T[0]
            if f1_idcs.size == 0:
                raise ValueError(
                    "No frequencies are present in the data for the range in `f1s`."
                )
        if f2s is None:
            f2_idcs = np.arange(self.f2s.size, dtype=np.int32)
        else:
            f2_idcs = np.argwhere((self.f2s >= f2s[0]) & (self.f2s <= f2s[1])).T[0]
            if f2_idcs.size == 0:
                raise ValueError(
                    "No frequencies are present in the data for the range in `f2s`."
                )

        return self.f1s[f1_idcs].copy(), self.f2s[f2_idcs].copy(), f1_idcs, f2_idcs

    def _create_plots(
        self,
        nodes: tuple[int],
        n_rows: int,
        n_cols: int,
    ) -> tuple[list[Figure], list[np.ndarray]]:
        """Create figures and subplots to fill with results.

        Returns
        -------
        figures : list of matplotlib Figure
            Figures for the results in a list of length ``ceil(n_nodes / (n_rows *
            n_cols))``.

        axes : list of numpy.ndarray of matplotlib pyplot Axes
            Subplot axes for the results in a list of length ``ceil(n_nodes / (n_rows *
            n_cols))`` where each entry is a 1D ``numpy.ndarray`` of length ``(n_rows *
            n_cols)``.
        """
        figures = []
        axes = []

        plot_n = 0
        for node_i in range(len(nodes)):
            if node_i == plot_n:
                fig, axs = plt.subplots(n_rows, n_cols, layout="constrained")
                figures.append(fig)
                if n_rows * n_cols > 1:
                    axs = np.ravel(axs)
                else:
                    axs = np.array([axs])
                axes.append(axs)
                plot_n += n_rows * n_cols
            if plot_n >= len(nodes):
                break

        return figures, axes

    @abstractmethod
    def _plot_results(self) -> None:
        """Plot results on the relevant figures/subplots."""

    def _set_axis_ticks(
        self,
        axis: plt.Axes,
        major_tick_intervals: int | float,
        minor_tick_intervals: int | float,
    ) -> None:
        """Set major and minor tick intervals of x- and y-axes."""
        axis.xaxis.set_major_locator(plt.MultipleLocator(major_tick_intervals))
        axis.xaxis.set_minor_locator(plt.MultipleLocator(minor_tick_intervals))
        axis.yaxis.set_major_locator(plt.MultipleLocator(major_tick_intervals))
        axis.yaxis.set_minor_locator(plt.MultipleLocator(minor_tick_intervals))


class _PlotComodulogram(_PlotBase):
    """Class for plotting comodulogram results."""

    def __init__(
        self,
        data: np.ndarray,
        indices: tuple[int],
        f1s: np.ndarray,
        f2s: np.ndarray,
        name: str,
    ) -> None:  # noqa: D107
        super().__init__(data, indices, name)

        self.f1s = f1s.copy()
        self.f2s = f2s.copy()

    def plot(
        self,
        nodes: int | tuple[int] | None = None,
        f1s: tuple[int | float] | None = None,
        f2s: tuple[int | float] | None = None,
        n_rows: int = 1,
        n_cols: int = 1,
        major_tick_intervals: int | float = 5.0,
        minor_tick_intervals: int | float = 1.0,
        cbar_range: tuple[float] | list[tuple[float]] | None = None,
        show: bool = True,
    ) -> tuple[list[Figure], list[np.ndarray]]:
        """Plot the results.

        See :meth:`pycomod.utils.ResultsComodulogram.plot` for the parameters.
        """
        nodes, f1s, f2s, f1_idcs, f2_idcs, cbar_range = self._sort_plot_inputs(
            nodes,
            f1s,
            f2s,
            n_rows,
            n_cols,
            major_tick_intervals,
            minor_tick_intervals,
            cbar_range,
        )
        figures, axes = self._create_plots(nodes, n_rows, n_cols)
        figures, axes = self._plot_results(
            figures,
            axes,
            nodes,
            f1s,
            f2s,
            f1_idcs,
            f2_idcs,
            n_rows,
            n_cols,
            major_tick_intervals,
            minor_tick_intervals,
            cbar_range,
        )

        if show:  # pragma: no cover
            plt.show()

        return figures, axes

    def _sort_plot_inputs(
        self,
        nodes: int | tuple[int] | None,
        f1s: tuple[int | float] | None,
        f2s: tuple[int | float] | None,
        n_rows: int,
        n_cols: int,
        major_tick_intervals: int | float,
        minor_tick_intervals: int | float,
        cbar_range: tuple[float] | list[tuple[float]] | None,
    ) -> tuple[
        tuple[int],
        np.ndarray,
        np.ndarray,
        np.ndarray,
        np.ndarray,
        list[tuple[float | None]],
    ]:
        """Sort the plotting inputs.

        Returns
        -------
        nodes : tuple of int

        f1s : numpy.ndarray of float
            Phase frequencies in the results to plot.

        f2s : numpy.ndarray of float
            Amplitude frequencies in the results to plot.

        f1_idcs : numpy.ndarray of int
            Indices of ``f1s`` in the results.

        f2_idcs : numpy.ndarray of int
            Indices of ``f2s`` in the results.

        cbar_range : list of tuple of float or None
        """
        nodes = super()._sort_plot_inputs(
            nodes, n_rows, n_cols, major_tick_intervals, minor_tick_intervals
        )
        f1s, f2s, f1_idcs, f2_idcs = super()._sort_freq_inputs(f1s, f2s)

        if not isinstance(cbar_range, (list, tuple, type(None))):
            raise TypeError("`cbar_range` must be a list, tuple, or None.")
        if isinstance(cbar_range, list):
            if len(cbar_range) != len(nodes):
                raise ValueError(
                    "If `cbar_range` is a list, one entry must be provided for each "
                    "node being plotted."
                )
        else:
            fill = cbar_range if cbar_range is not None else [None, None]
            cbar_range = [fill for _ in range(len(nodes))]
        for entry in cbar_range:
            if len(entry) != 2:
                raise ValueError("Limits in `cbar_range` must have length of 2.")

        return nodes, f1s, f2s, f1_idcs, f2_idcs, cbar_range

    def _plot_results(
        self,
        figures: list[Figure],
        axes: list[np.ndarray],
        nodes: tuple[int],
        f1s: np.ndarray,
        f2s: np.ndarray,
        f1_idcs: np.ndarray,
        f2_idcs: np.ndarray,
        n_rows: int,
        n_cols: int,
        major_tick_intervals: int | float,
        minor_tick_intervals: int | float,
        cbar_range: list[tuple[float | None]],
    ) -> tuple[list[Figure], list[np.ndarray]]:
        """Plot results on the relevant figures/subplots."""
        fig_i = 0
        fig_plot_n = 0
        for plot_n, node_i in enumerate(nodes):
            axis = axes[fig_i][fig_plot_n]

            data = self._data[node_i][np.ix_(f2_idcs, f1_idcs)]
            assert data.ndim == 2, (
                "PyComod Internal Error: data to plot for a given node should be 2D. "
                "Please contact the PyComod developers."
            )

            mesh = axis.pcolormesh(
                f1s,
                f2s,
                data,
                vmin=cbar_range[plot_n][0],
                vmax=cbar_range[plot_n][1],
            )

            plt.colorbar(mesh, ax=axis, label="Modulation index (A.U.)", shrink=0.3)

            self._set_axis_ticks(axis, major_tick_intervals, minor_tick_intervals)
            axis.grid(
                which="major",
                axis="both",
                linestyle="--",
                color=[0.7, 0.7, 0.7],
                alpha=0.7,
            )
            axis.set_xlabel("Phase frequency (Hz)")
            axis.set_ylabel("Amplitude frequency (Hz)")
            axis.set_title(f"Channel: {self._indices[node_i]}")

            fig_plot_n += 1
            last_plot = plot_n == len(nodes) - 1
            if fig_plot_n >= n_rows * n_cols or last_plot:
                figures[fig_i].suptitle(self.name)
            if last_plot:
                # remove excess axes from current figure
                for excess_axis in axes[fig_i][fig_plot_n:]:
                    excess_axis.remove()
                axes[fig_i] = axes[fig_i][:fig_plot_n]
            elif fig_plot_n >= n_rows * n_cols:
                # move to next figure
                fig_plot_n = 0
                fig_i += 1

        return figures, axes


class _PlotDiagnostics:
    """Class for plotting the intermediate steps of a comodulogram computation.

    Draws the normalised phase-binned amplitude profile of each epoch over two cycles,
    and the comodulogram as it is being filled.

    Notes
    -----
    Plotting has no effect on the computed values.
    """

    def __init__(self, f1s: np.ndarray, f2s: np.ndarray, n_bins: int) -> None:
        self.f1s = f1s.copy()
        self.f2s = f2s.copy()

        bin_width = 360 / n_bins
        self._bin_centres = np.arange(bin_width / 2, 720, bin_width)
        self._bin_width = bin_width

        self.profile_figure, self._profile_axis = plt.subplots(
            1, 1, layout="constrained"
        )
        self.comodulogram_figure, self._comodulogram_axis = plt.subplots(
            1, 1, layout="constrained"
        )
        self._colorbar = None

    def plot_profile(
        self,
        profile: np.ndarray,
        phase_freq: float,
        amp_freq: float,
        epoch_i: int,
        surrogate: bool = False,
    ) -> None:
        """Plot the phase-binned amplitude profile of a single epoch or surrogate."""
        axis = self._profile_axis
        axis.cla()
        axis.bar(
            self._bin_centres,
            np.tile(profile, 2) / np.sum(profile),
            width=self._bin_width,
            color="k",
        )
        axis.set_xlim(0, 720)
        axis.set_xticks([0, 360, 720])
        axis.set_xlabel("Phase (deg)")
        axis.set_ylabel("Amplitude")
        label = "Surrogate" if surrogate else "Epoch"
        axis.set_title(
            f"Phase: {phase_freq} Hz | Amplitude: {amp_freq} Hz | {label}: {epoch_i}"
        )
        self._refresh(self.profile_figure)

    def plot_comodulogram(self, data: np.ndarray, channel: int) -> None:
        """Plot the (partially filled) comodulogram of a single channel.

        Parameters
        ----------
        data : numpy.ndarray of float, shape of [amplitude frequencies, phase frequencies]
            Comodulogram, where entries not yet computed are NaN.

        channel : int
            Index of the channel being plotted.
        """  # noqa: E501
        if self._colorbar is not None:
            self._colorbar.remove()
        axis = self._comodulogram_axis
        axis.cla()
        if np.any(np.isfinite(data)):
            vmin, vmax = np.nanmin(data), np.nanmax(data)
        else:  # nothing to scale the colours to yet
            vmin, vmax = 0.0, 1.0
        mesh = axis.pcolormesh(
            self.f1s, self.f2s, data, cmap="jet", vmin=vmin, vmax=vmax
        )
        self._colorbar = self.comodulogram_figure.colorbar(
            mesh, ax=axis, label="Modulation index (A.U.)"
        )
        axis.set_xlabel("Phase frequency (Hz)")
        axis.set_ylabel("Amplitude frequency (Hz)")
        axis.set_title(f"Channel: {channel}")
        self._refresh(self.comodulogram_figure)

    def _refresh(self, figure: Figure) -> None:
        """Redraw a figure without blocking."""
        figure.canvas.draw_idle()
        figure.canvas.flush_events()
