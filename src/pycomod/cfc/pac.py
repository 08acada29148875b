"""Tools for handling PAC analysis."""

from collections.abc import Callable
from warnings import warn

import numpy as np

from pycomod.utils import (
    ResultsComodulogram,
    compute_band_transform,
    get_amplitude_band,
    get_frequency_centres,
    get_phase_band,
    get_phase_bin_edges,
)
from pycomod.utils._defaults import (
    AMP_FREQ_STEP,
    N_BINS,
    N_SURROGATES,
    PHASE_FREQ_STEP,
    _precision,
)
from pycomod.utils._plot import _PlotDiagnostics
from pycomod.utils._process import _compute_mi_cell, _ProcessBase
from pycomod.utils._utils import (
    _check_cancelled,
    _compute_in_parallel,
    _int_like,
    _number_like,
)

np.seterr(divide="ignore", invalid="ignore")  # no warning for NaN division


class PAC(_ProcessBase):
    """Class for computing phase-amplitude coupling (PAC) using the modulation index.

    Parameters
    ----------
    data : ~numpy.ndarray, shape of [epochs, channels, times]
        Real-valued timeseries data.

    sampling_freq : int | float
        Sampling frequency (in Hz) of ``data``.

    times : ~numpy.ndarray, shape of [times] | None (default None)
        Timepoints (in seconds) in ``data``. If :obj:`None`, the time of the first
        sample in ``data`` is assumed to be 0 seconds.

    verbose : bool (default True)
        Whether or not to report the progress of the processing.

    Methods
    -------
    compute :
        Compute the PAC comodulogram, averaged over epochs.

    copy :
        Return a copy of the object.

    Attributes
    ----------
    results : ~pycomod.utils.ResultsComodulogram
        PAC comodulogram results.

    data : ~numpy.ndarray of float, shape of [epochs, channels, times]
        Timeseries data.

    sampling_freq : int | float
        Sampling frequency (in Hz) of ``data``.

    times : ~numpy.ndarray, shape of [times]
        Timepoints (in seconds) in ``data``.

    verbose : bool
        Whether or not to report the progress of the processing.
    """

    _f1s: np.ndarray = None
    _f2s: np.ndarray = None

    _n_bins: int = None
    _bin_edges: np.ndarray = None

    _surrogates: bool = None
    _n_surrogates: int = None
    _random_seed: int | None = None

    _transform_func: Callable = None
    _diagnostics: bool = None
    _cancel_event = None

    _mi: np.ndarray = None

    def compute(
        self,
        indices: tuple[int] | None = None,
        f1s: tuple[int | float] = (4, 22),
        f2s: tuple[int | float] = (30, 80),
        times: tuple[int | float] | None = None,
        n_bins: int = N_BINS,
        surrogates: bool = False,
        n_surrogates: int = N_SURROGATES,
        random_seed: int | None = None,
        transform_func: Callable | None = None,
        diagnostics: bool = False,
        cancel_event=None,
        n_jobs: int = 1,
    ) -> None:
        r"""Compute the PAC comodulogram, averaged over epochs.

        Parameters
        ----------
        indices : tuple of int | None (default None)
            Indices of the channels to compute PAC within. If :obj:`None`, PAC is
            computed within all channels.

        f1s : tuple of int or float, length of 2 (default ``(4, 22)``)
            Start and end centre frequencies (in Hz) of the phase bands, respectively.
            Centre frequencies are spaced 1 Hz apart, and both ends are inclusive.

        f2s : tuple of int or float, length of 2 (default ``(30, 80)``)
            Start and end centre frequencies (in Hz) of the amplitude bands,
            respectively. Centre frequencies are spaced 2 Hz apart, and both ends are
            inclusive.

        times : tuple of int or float, length of 2 | None (default None)
            Start and end times (in seconds) of the window to compute PAC in,
            respectively. If :obj:`None`, all timepoints are used. The data is filtered
            before the window is extracted.

        n_bins : int (default ``18``)
            Number of equally-sized phase bins.

        surrogates : bool (default False)
            Whether or not to subtract the mean PAC of surrogate data from the results.

        n_surrogates : int (default ``1000``)
            Number of surrogates to generate for each frequency pair. Only used if
            ``surrogates=True``.

        random_seed : int | None (default None)
            Seed of the random number generator used to generate the surrogates. If
            :obj:`None`, a random seed is used.

        transform_func : callable | None (default None)
            Function used to obtain the phase and amplitude of band-limited data. Must
            accept the keyword arguments ``data`` (array of shape ``[epochs, times]``),
            ``sampling_freq``, ``band`` (tuple of the lower and upper frequencies), and
            ``output`` (``"angle"`` or ``"abs"``), and return an array with the same
            shape as ``data``. If :obj:`None`,
            :func:`~pycomod.utils.compute_band_transform` is used.

        diagnostics : bool (default False)
            Whether or not to plot the phase-binned amplitude profile of each epoch and
            the comodulogram as it is computed. If ``surrogates=True``, the profiles of
            the first ``10`` surrogates of each frequency pair are also plotted. If
            :obj:`True`, the computation is performed serially.

        cancel_event : threading.Event | None (default None)
            Event which can be set from another thread to stop the computation. Checked
            between frequency pairs.

        n_jobs : int (default ``1``)
            The number of jobs to run in parallel. If ``-1``, all available CPUs are
            used.

        Notes
        -----
        PAC is computed with the modulation index (MI) of :footcite:`Tort2010`. For
        each phase centre frequency, :math:`f_1`, the data is band-pass filtered at
        :math:`f_1 \pm 1` Hz and the instantaneous phase extracted; for each amplitude
        centre frequency, :math:`f_2`, the data is band-pass filtered at
        :math:`f_2 \pm f_2/2.5` Hz (rounded to the nearest integer) and the amplitude
        envelope extracted. For each epoch, the phases are divided into :math:`N` bins,
        the mean amplitude in each bin, :math:`\bar{A}`, is normalised to a
        probability distribution

        :math:`p_j=\Large\frac{\bar{A}_j}{\sum_{k=1}^{N}\bar{A}_k}` ,

        and the MI is computed from its Shannon entropy, :math:`H`

        :math:`\textrm{MI}=\Large\frac{\ln(N)-H}{\ln(N)}` .

        MI values are averaged over epochs. If ``surrogates=True``, the mean MI of
        surrogate data is subtracted. Each surrogate pairs the phase of one epoch, with
        its timepoints shuffled, with the amplitude of another epoch.

        .. warning::
            If a phase bin receives no samples in an epoch, or if fewer than two epochs
            are available when generating surrogates, the corresponding result is
            :obj:`numpy.nan`. These values are not discarded when averaging over epochs.

        References
        ----------
        .. footbibliography::
        """
        self._reset_attrs()

        self._sort_indices(indices)
        self._sort_freqs(f1s, f2s)
        self._sort_tmin_tmax(times)
        self._sort_bins(n_bins)
        self._sort_surrogates(surrogates, n_surrogates, random_seed)
        self._sort_transform_func(transform_func)
        self._sort_diagnostics(diagnostics, cancel_event)
        self._sort_parallelisation(n_jobs)

        if self.verbose:
            print("Computing PAC...\n")

        self._compute_mi()
        self._store_results()

        if self.verbose:
            print("    ... PAC computation finished\n")

    def _reset_attrs(self) -> None:
        """Reset attrs. of the object to prevent interference."""
        super()._reset_attrs()

        self._f1s = None
        self._f2s = None

        self._n_bins = None
        self._bin_edges = None

        self._surrogates = None
        self._n_surrogates = None
        self._random_seed = None

        self._transform_func = None
        self._diagnostics = None
        self._cancel_event = None

        self._mi = None

    def _sort_freqs(self, f1s: tuple[int | float], f2s: tuple[int | float]) -> None:
        """Sort frequency inputs."""
        for freqs in (f1s, f2s):
            if not isinstance(freqs, tuple):
                raise TypeError("`f1s` and `f2s` must be tuples.")
            if len(freqs) != 2:
                raise ValueError("`f1s` and `f2s` must have lengths of 2.")
            if any(not isinstance(freq, _number_like) for freq in freqs):
                raise TypeError("Entries of `f1s` and `f2s` must be ints or floats.")
            if any(freq <= 0 for freq in freqs):
                raise ValueError("Entries of `f1s` and `f2s` must be > 0.")
            if any(freq > self.sampling_freq / 2 for freq in freqs):
                raise ValueError(
                    "Entries of `f1s` and `f2s` must be <= the Nyquist frequency."
                )
            if freqs[0] > freqs[1]:
                raise ValueError(
                    "The start of `f1s` and `f2s` must be <= the end of `f1s` and "
                    "`f2s`, respectively."
                )

        self._f1s = get_frequency_centres(f1s, PHASE_FREQ_STEP)
        self._f2s = get_frequency_centres(f2s, AMP_FREQ_STEP)

        if self.verbose:
            if self._f1s.max() >= self._f2s.min():
                warn(
                    "At least one value in `f1s` is >= a value in `f2s`. The phase and "
                    "amplitude bands of the corresponding result(s) overlap.",
                    UserWarning,
                )

    def _sort_bins(self, n_bins: int) -> None:
        """Sort number of phase bins input."""
        if not isinstance(n_bins, _int_like):
            raise TypeError("`n_bins` must be an int.")
        if n_bins < 2:
            raise ValueError("`n_bins` must be >= 2.")

        self._n_bins = n_bins
        self._bin_edges = get_phase_bin_edges(n_bins)

    def _sort_surrogates(
        self, surrogates: bool, n_surrogates: int, random_seed: int | None
    ) -> None:
        """Sort surrogate inputs."""
        if not isinstance(surrogates, bool):
            raise TypeError("`surrogates` must be a bool.")
        if not isinstance(n_surrogates, _int_like):
            raise TypeError("`n_surrogates` must be an int.")
        if n_surrogates < 1:
            raise ValueError("`n_surrogates` must be >= 1.")
        if random_seed is not None and not isinstance(random_seed, _int_like):
            raise TypeError("`random_seed` must be an int or None.")

        if surrogates and self.verbose and self._n_epochs < 2:
            warn(
                "Fewer than 2 epochs are present in the data, so surrogates cannot be "
                "generated. The results will be NaN-valued.",
                UserWarning,
            )

        self._surrogates = surrogates
        self._n_surrogates = n_surrogates
        self._random_seed = random_seed

    def _sort_transform_func(self, transform_func: Callable | None) -> None:
        """Sort signal conditioning function input."""
        if transform_func is None:
            transform_func = compute_band_transform
        if not callable(transform_func):
            raise TypeError("`transform_func` must be callable or None.")

        if transform_func is compute_band_transform:
            nyquist = self.sampling_freq / 2
            if get_phase_band(self._f1s[0])[0] <= 0:
                raise ValueError(
                    "The lowest phase band must be > 0 Hz. Increase the start of "
                    "`f1s`."
                )
            for lower, upper in (get_amplitude_band(f2) for f2 in self._f2s):
                if lower <= 0 or lower >= upper:
                    raise ValueError(
                        "The amplitude bands must have a lower frequency > 0 Hz and < "
                        "their upper frequency. Increase the start of `f2s`."
                    )
            if (
                get_phase_band(self._f1s[-1])[1] >= nyquist
                or get_amplitude_band(self._f2s[-1])[1] >= nyquist
            ):
                raise ValueError(
                    "The highest phase and amplitude bands must be < the Nyquist "
                    "frequency. Decrease the end of `f1s` or `f2s`."
                )

        self._transform_func = transform_func

    def _sort_diagnostics(self, diagnostics: bool, cancel_event) -> None:
        """Sort diagnostic plotting and cancellation inputs."""
        if not isinstance(diagnostics, bool):
            raise TypeError("`diagnostics` must be a bool.")
        if cancel_event is not None and not callable(
            getattr(cancel_event, "is_set", None)
        ):
            raise TypeError("`cancel_event` must have an `is_set` method or be None.")

        self._diagnostics = diagnostics
        self._cancel_event = cancel_event

    def _compute_mi(self) -> None:
        """Compute the MI for each channel and phase-amplitude frequency pair."""
        if self.verbose:
            print("    Computing modulation index...")

        cells = [
            (chan, f1, f2)
            for chan in self._indices
            for f1 in self._f1s
            for f2 in self._f2s
        ]
        # seeds drawn up front so results do not depend on the order of computation
        seeds = np.random.RandomState(self._random_seed).randint(
            np.iinfo(np.int32).max, size=len(cells)
        )

        loop_kwargs = [
            {
                "data": self._data[:, chan],
                "phase_freq": f1,
                "amp_freq": f2,
                "phase_band": get_phase_band(f1),
                "amp_band": get_amplitude_band(f2),
                "seed": seed,
            }
            for (chan, f1, f2), seed in zip(cells, seeds)
        ]
        static_kwargs = {
            "sampling_freq": self.sampling_freq,
            "time_idcs": self._time_idcs,
            "bin_edges": self._bin_edges,
            "surrogates": self._surrogates,
            "n_surrogates": self._n_surrogates,
            "transform_func": self._transform_func,
            "precision": _precision.real,
        }
        try:
            output = np.full(len(cells), fill_value=np.nan, dtype=_precision.real)
        except MemoryError as error:  # pragma: no cover
            raise MemoryError(
                "Memory allocation for the modulation index computation failed. Try "
                "reducing the number of frequencies, or reduce the precision of the "
                "computation with `pycomod.set_precision('single')`."
            ) from error

        if self._diagnostics:
            output = self._compute_mi_serial_diagnostics(
                loop_kwargs, static_kwargs, output
            )
        else:
            output = _compute_in_parallel(
                func=_compute_mi_cell,
                loop_kwargs=loop_kwargs,
                static_kwargs=static_kwargs,
                output=output,
                message="Processing frequency pairs...",
                n_jobs=self._n_jobs,
                verbose=self.verbose,
                prefer="processes",
                cancel_event=self._cancel_event,
            )

        # [channels, phase freqs, amp freqs] -> [channels, amp freqs, phase freqs]
        self._mi = output.reshape(
            (self._n_nodes, self._f1s.size, self._f2s.size)
        ).transpose(0, 2, 1)

        if self.verbose:
            n_nan = np.count_nonzero(np.isnan(self._mi))
            if n_nan > 0:
                warn(
                    f"{n_nan} of {self._mi.size} result(s) are NaN-valued. This occurs "
                    "when a phase bin receives no samples in an epoch, or when fewer "
                    "than 2 epochs are available to generate surrogates.",
                    UserWarning,
                )
            print("        ... Modulation index computation finished\n")

    def _compute_mi_serial_diagnostics(
        self, loop_kwargs: list[dict], static_kwargs: dict, output: np.ndarray
    ) -> np.ndarray:
        """Compute the MI for each frequency pair in turn, plotting the progress."""
        plotter = _PlotDiagnostics(self._f1s, self._f2s, self._n_bins)
        grid_shape = (self._n_nodes, self._f1s.size, self._f2s.size)

        for cell_i, kwargs in enumerate(loop_kwargs):
            _check_cancelled(self._cancel_event)
            output[cell_i], profiles, surrogate_profiles = _compute_mi_cell(
                **kwargs, **static_kwargs, return_profiles=True
            )

            for epoch_i, profile in enumerate(profiles):
                plotter.plot_profile(
                    profile, kwargs["phase_freq"], kwargs["amp_freq"], epoch_i
                )
            for surrogate_i, profile in enumerate(surrogate_profiles):
                plotter.plot_profile(
                    profile,
                    kwargs["phase_freq"],
                    kwargs["amp_freq"],
                    surrogate_i,
                    surrogate=True,
                )
            node_i = np.unravel_index(cell_i, grid_shape)[0]
            plotter.plot_comodulogram(
                output.reshape(grid_shape)[node_i].T, self._indices[node_i]
            )

            if self.verbose:
                print(
                    f"        Phase: {kwargs['phase_freq']} Hz | Amplitude: "
                    f"{kwargs['amp_freq']} Hz | MI: {output[cell_i]:.6f}"
                )

        return output

    def _store_results(self) -> None:
        """Store computed results in an object."""
        self._results = ResultsComodulogram(
            data=self._mi,
            indices=self._indices,
            f1s=self._f1s,
            f2s=self._f2s,
            surrogate_corrected=self._surrogates,
            name=(
                "PAC | Modulation index (surrogate-corrected)"
                if self._surrogates
                else "PAC | Modulation index"
            ),
        )

    @property
    def results(self) -> ResultsComodulogram:
        return self._results
