"""Helper tools for storing results."""

from abc import ABC, abstractmethod

import numpy as np
from matplotlib.figure import Figure

from pycomod.utils._plot import _PlotComodulogram
from pycomod.utils._utils import _int_like


class _ResultsBase(ABC):
    """Base class for storing results."""

    f1s: np.ndarray = None
    f2s: np.ndarray = None

    indices: tuple[int] = None
    n_nodes: int = None

    def __init__(
        self,
        data: np.ndarray,
        data_ndim: tuple[int],
        name: str,
    ) -> None:
        if not isinstance(data, np.ndarray):
            raise TypeError("`data` must be a NumPy array.")
        if data.ndim not in data_ndim:
            raise ValueError(
                "`data` must be a "
                f"{' or '.join([(str(dim) + 'D') for dim in data_ndim])} array."
            )
        self._data = data
        self.shape = data.shape

        if not isinstance(name, str):
            raise TypeError("`name` must be a string.")
        self.name = name

    @abstractmethod
    def _sort_init_inputs(self) -> None:
        """Sort inputs to the object."""

    def _sort_freq_inputs(self, f1s: np.ndarray, f2s: np.ndarray) -> None:
        """Sort ``f1s`` and ``f2s`` inputs."""
        if not isinstance(f1s, np.ndarray) or not isinstance(f2s, np.ndarray):
            raise TypeError("`f1s` and `f2s` must be NumPy arrays.")
        if f1s.ndim != 1 or f2s.ndim != 1:
            raise ValueError("`f1s` and `f2s` must be 1D arrays.")
        if np.any(np.diff(f1s) <= 0) or np.any(np.diff(f2s) <= 0):
            raise ValueError("Entries of `f1s` and `f2s` must be strictly increasing.")
        self.f1s = f1s
        self.f2s = f2s

    def _sort_indices_channels(self, indices: tuple[int]) -> None:
        """Sort ``indices`` with inputs format [channels]."""
        if not isinstance(indices, tuple):
            raise TypeError("`indices` must be a tuple.")
        if not all(isinstance(idx, _int_like) for idx in indices):
            raise TypeError("Entries of `indices` must be ints.")
        if any(idx < 0 for idx in indices):
            raise ValueError("Entries of `indices` must be >= 0.")
        self.n_nodes = len(indices)
        self.indices = indices

    @abstractmethod
    def _check_data_shape(self) -> None:
        """Check that ``data`` has the expected shape."""

    @abstractmethod
    def get_results(self) -> np.ndarray:
        """Return the results."""


class ResultsComodulogram(_ResultsBase):
    """Class for storing comodulogram results.

    Parameters
    ----------
    data : ~numpy.ndarray, shape of [nodes, amplitude frequencies, phase frequencies]
        Results to store.

    indices : tuple of int
        Indices of the channels for each node of the results.

    f1s : ~numpy.ndarray, shape of [phase frequencies]
        Centre frequencies (in Hz) of the phase bands in the results.

    f2s : ~numpy.ndarray, shape of [amplitude frequencies]
        Centre frequencies (in Hz) of the amplitude bands in the results.

    surrogate_corrected : bool (default False)
        Whether the mean modulation index of surrogate data has been subtracted from
        the results.

    name : str (default ``"Comodulogram"``)
        Name of the results being stored.

    Methods
    -------
    get_results :
        Return the results.

    plot :
        Plot the results.

    Attributes
    ----------
    name : str
        Name of the results.

    indices : tuple of int
        Indices of the channels for each node of the results.

    shape : tuple of int
        Shape of the results i.e. ``[nodes, amplitude frequencies, phase
        frequencies]``.

    n_nodes : int
        Number of channels in the results.

    f1s : ~numpy.ndarray, shape of [phase frequencies]
        Centre frequencies (in Hz) of the phase bands in the results.

    f2s : ~numpy.ndarray, shape of [amplitude frequencies]
        Centre frequencies (in Hz) of the amplitude bands in the results.

    surrogate_corrected : bool
        Whether the mean modulation index of surrogate data has been subtracted from
        the results.
    """

    def __repr__(self) -> str:
        """Return printable representation of the object."""
        repr_ = (
            f"<Result: {self.name} | [{self.n_nodes} nodes, {self.f2s.size} f2s, "
            f"{self.f1s.size} f1s]"
        )
        if self.surrogate_corrected:
            repr_ += " | surrogate-corrected"
        repr_ += ">"

        return repr_

    def __init__(
        self,
        data: np.ndarray,
        indices: tuple[int],
        f1s: np.ndarray,
        f2s: np.ndarray,
        surrogate_corrected: bool = False,
        name: str = "Comodulogram",
    ) -> None:  # noqa: D107
        super().__init__(data, (3,), name)
        self._sort_init_inputs(indices, f1s, f2s, surrogate_corrected)

        self._plotting = _PlotComodulogram(
            data=self._data,
            indices=self.indices,
            f1s=self.f1s,
            f2s=self.f2s,
            name=self.name,
        )

    def _sort_init_inputs(
        self,
        indices: tuple[int],
        f1s: np.ndarray,
        f2s: np.ndarray,
        surrogate_corrected: bool,
    ) -> None:
        """Sort inputs to the object."""
        super()._sort_indices_channels(indices)
        super()._sort_freq_inputs(f1s, f2s)
        self._check_data_shape()

        if not isinstance(surrogate_corrected, bool):
            raise TypeError("`surrogate_corrected` must be a bool.")
        self.surrogate_corrected = surrogate_corrected

    def _check_data_shape(self) -> None:
        """Check that ``data`` has the expected shape."""
        if self._data.shape != (self.n_nodes, self.f2s.size, self.f1s.size):
            raise ValueError("`data` must have shape [nodes, f2s, f1s].")

    def get_results(self, copy: bool = True) -> np.ndarray:
        """Return the results.

        Parameters
        ----------
        copy : bool (default True)
            Whether or not to return a copy of the results.

        Returns
        -------
        results : ~numpy.ndarray, shape of [nodes, amplitude frequencies, phase frequencies]
            The results.
        """  # noqa: E501
        if not isinstance(copy, bool):
            raise TypeError("`copy` must be a bool.")

        if copy:
            return self._data.copy()
        return self._data

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

        Parameters
        ----------
        nodes : int | tuple of int | None (default None)
            Indices of nodes to plot. If :obj:`None`, plot all nodes.

        f1s : tuple of int or float | None (default None)
            Start and end phase frequencies of the results to plot, respectively. If
            :obj:`None`, all phase frequencies are plotted.

        f2s : tuple of int or float | None (default None)
            Start and end amplitude frequencies of the results to plot, respectively. If
            :obj:`None`, all amplitude frequencies are plotted.

        n_rows : int (default ``1``)
            Number of rows of subplots per figure.

        n_cols : int (default ``1``)
            Number of columns of subplots per figure.

        major_tick_intervals : int | float (default ``5.0``)
            Intervals (in Hz) at which the major ticks of the x- and y-axes should
            occur.

        minor_tick_intervals : int | float (default ``1.0``)
            Intervals (in Hz) at which the minor ticks of the x- and y-axes should
            occur.

        cbar_range : tuple of float | list of tuple of float | None (default None)
            Range (in units of the data) for the colourbars, consisting of the lower and
            upper limits, respectively. If :obj:`None`, the range is computed
            automatically. If a tuple of float, this range is used for all plots. If a
            list of tuple of float, the ranges are used for each individual plot.

        show : bool (default True)
            Whether or not to show the plotted results.

        Returns
        -------
        figures : list of matplotlib Figure
            Figures of the results in a list of length ``ceil(n_nodes / (n_rows *
            n_cols))``.

        axes : list of ~numpy.ndarray of matplotlib pyplot Axes
            Subplot axes for the results in a list of length ``ceil(n_nodes / (n_rows *
            n_cols))`` where each entry is a 1D ``~numpy.ndarray`` of length ``(n_rows *
            n_cols)``.

        Notes
        -----
        ``n_rows`` and ``n_cols`` of ``1`` will plot the results for each node on a new
        figure.
        """
        figures, axes = self._plotting.plot(
            nodes=nodes,
            f1s=f1s,
            f2s=f2s,
            n_rows=n_rows,
            n_cols=n_cols,
            major_tick_intervals=major_tick_intervals,
            minor_tick_intervals=minor_tick_intervals,
            cbar_range=cbar_range,
            show=show,
        )

        return figures, axes
