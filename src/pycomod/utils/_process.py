"""Tools for processing and handling modulation index results."""

from abc import ABC, abstractmethod
from copy import deepcopy
from multiprocessing import cpu_count

import numpy as np
from numba import njit

from pycomod.utils._defaults import N_DIAGNOSTIC_SURROGATES, _precision
from pycomod.utils._utils import _int_like, _number_like
from pycomod.utils.results import ResultsComodulogram


class _ProcessBase(ABC):
    """Base class for processing epoched timeseries data."""

    _indices: tuple = None
    _n_nodes: int = None

    sampling_freq: float = None
    _times: np.ndarray = None
    _time_idcs: np.ndarray = None

    _n_jobs: int = None

    _results: ResultsComodulogram = None

    def __init__(
        self,
        data: np.ndarray,
        sampling_freq: int | float,
        times: np.ndarray | None = None,
        verbose: bool = True,
    ) -> None:
        self._sort_init_inputs(data, sampling_freq, times, verbose)

    def _sort_init_inputs(
        self,
        data: np.ndarray,
        sampling_freq: int | float,
        times: np.ndarray | None,
        verbose: bool,
    ) -> None:
        """Check init. inputs are appropriate."""
        if not isinstance(data, np.ndarray):
            raise TypeError("`data` must be a NumPy array.")
        if data.ndim != 3:
            raise ValueError("`data` must be a 3D array.")
        if not np.isrealobj(data):
            raise ValueError("`data` must be real-valued.")

        self._n_epochs, self._n_chans, self._n_times = data.shape

        if not isinstance(sampling_freq, _number_like):
            raise TypeError("`sampling_freq` must be an int or a float.")
        if sampling_freq <= 0:
            raise ValueError("`sampling_freq` must be > 0.")

        if times is None:
            times = np.arange(self._n_times) / sampling_freq
        else:
            if not isinstance(times, np.ndarray):
                raise TypeError("`times` must be a NumPy array.")
            if times.ndim != 1:
                raise ValueError("`times` must be a 1D array.")
            if self._n_times != len(times):
                raise ValueError(
                    "`data` and `times` must contain the same number of timepoints."
                )

        if not isinstance(verbose, bool):
            raise TypeError("`verbose` must be a bool.")

        self._data = np.asarray(data, dtype=_precision.real)
        self.times = np.asarray(times, dtype=_precision.real)
        self.sampling_freq = sampling_freq
        self.verbose = verbose

    def _sort_indices(self, indices: tuple[int] | None) -> None:
        """Sort channel indices inputs."""
        if indices is None:
            indices = tuple(range(self._n_chans))
        if not isinstance(indices, tuple):
            raise TypeError("`indices` must be a tuple.")
        if len(indices) == 0:
            raise ValueError("`indices` must contain at least one channel.")
        if any(not isinstance(idx, _int_like) for idx in indices):
            raise TypeError("Entries of `indices` must be ints.")
        if any(idx < 0 or idx >= self._n_chans for idx in indices):
            raise ValueError(
                "`indices` contains indices for channels not present in the data."
            )

        self._indices = indices
        self._n_nodes = len(indices)

    def _sort_tmin_tmax(self, times: tuple[int | float] | None) -> None:
        """Sort time window inputs."""
        if times is None:
            times = (self.times[0], self.times[-1])

        if not isinstance(times, tuple):
            raise TypeError("`times` must be a tuple or None.")
        if len(times) != 2:
            raise ValueError("`times` must have length of 2.")
        for time in times:
            if not isinstance(time, _number_like):
                raise TypeError("Entries of `times` must be int or float.")
        if times[0] >= times[1]:
            raise ValueError("The start of `times` must be < the end of `times`.")
        if times[0] < self.times[0] or times[1] > self.times[-1]:
            raise ValueError("`times` must lie within the timepoints of the data.")

        self._time_idcs = np.argwhere(
            (self.times >= times[0]) & (self.times <= times[1])
        ).T[0]
        if self._time_idcs.size == 0:
            raise ValueError(
                "No timepoints are present in the data for the range in `times`."
            )
        self._times = self.times[self._time_idcs]

    def _sort_parallelisation(self, n_jobs: int) -> None:
        """Sort parallelisation inputs."""
        if not isinstance(n_jobs, _int_like):
            raise TypeError("`n_jobs` must be an integer.")
        if n_jobs < 1 and n_jobs != -1:
            raise ValueError("`n_jobs` must be >= 1 or -1.")
        if n_jobs == -1:
            n_jobs = cpu_count()

        self._n_jobs = n_jobs

    @abstractmethod
    def compute(self):
        """Compute results."""

    def _reset_attrs(self) -> None:
        """Reset attrs. of the object to prevent interference."""
        self._indices = None
        self._n_nodes = None

        self._times = None
        self._time_idcs = None

        self._n_jobs = None

        self._results = None

    @abstractmethod
    def _store_results(self) -> None:
        """Store computed results in an object."""

    @property
    @abstractmethod
    def results(self) -> None:  # pragma: no cover
        pass

    @property
    def data(self) -> np.ndarray:
        return self._data

    def copy(self):
        """Return a copy of the object."""
        return deepcopy(self)


@njit
def _compute_phase_bin_profile(
    phase: np.ndarray, amplitude: np.ndarray, bin_edges: np.ndarray, precision: type
) -> np.ndarray:  # pragma: no cover
    """Compute the mean amplitude in each phase bin.

    Parameters
    ----------
    phase : numpy.ndarray of float, shape of [times]
        Instantaneous phase (in radians) in the range [-pi, pi).

    amplitude : numpy.ndarray of float, shape of [times]
        Amplitude envelope aligned sample-for-sample with ``phase``.

    bin_edges : numpy.ndarray of float, shape of [bins + 1]
        Edges of the phase bins, from -pi to pi. Bin ``j`` contains the samples with
        ``bin_edges[j] <= phase < bin_edges[j + 1]``.

    precision : type
        Precision to use for the computation. Either ``numpy.float32`` (single) or
        ``numpy.float64`` (double).

    Returns
    -------
    profile : numpy.ndarray of float, shape of [bins]
        Mean amplitude in each phase bin. Bins without any samples are NaN.

    Notes
    -----
    No checks on the input data are performed for speed.
    """
    n_bins = bin_edges.size - 1
    profile = np.full(n_bins, fill_value=np.nan, dtype=precision)
    for bin_i in range(n_bins):
        in_bin = (phase >= bin_edges[bin_i]) & (phase < bin_edges[bin_i + 1])
        if np.any(in_bin):
            profile[bin_i] = np.mean(amplitude[in_bin])

    return profile


@njit
def _compute_modulation_index(profile: np.ndarray) -> float:  # pragma: no cover
    """Compute the modulation index of a phase-binned amplitude profile.

    Parameters
    ----------
    profile : numpy.ndarray of float, shape of [bins]
        Mean amplitude in each phase bin.

    Returns
    -------
    mi : float
        Deviation of the entropy of the normalised profile from the entropy of a
        uniform distribution, normalised by the latter.

    Notes
    -----
    Bins with a probability of exactly 0 contribute nothing to the entropy. NaN entries
    of ``profile`` make the result NaN. No checks on the input data are performed for
    speed.
    """
    probs = np.divide(profile, np.sum(profile))
    entropy = 0.0
    for prob in probs:
        if prob != 0:
            entropy -= prob * np.log(prob)
    max_entropy = np.log(float(profile.size))

    return (max_entropy - entropy) / max_entropy


@njit
def _compute_trial_profiles(
    phase: np.ndarray, amplitude: np.ndarray, bin_edges: np.ndarray, precision: type
) -> np.ndarray:  # pragma: no cover
    """Compute phase-binned amplitude profiles for each epoch.

    Parameters
    ----------
    phase : numpy.ndarray of float, shape of [epochs, times]
        Instantaneous phase (in radians).

    amplitude : numpy.ndarray of float, shape of [epochs, times]
        Amplitude envelope.

    bin_edges : numpy.ndarray of float, shape of [bins + 1]
        Edges of the phase bins.

    precision : type
        Precision to use for the computation.

    Returns
    -------
    profiles : numpy.ndarray of float, shape of [epochs, bins]
        Mean amplitude in each phase bin for each epoch.

    Notes
    -----
    No checks on the input data are performed for speed.
    """
    profiles = np.full(
        (phase.shape[0], bin_edges.size - 1), fill_value=np.nan, dtype=precision
    )
    for epoch_i in range(phase.shape[0]):
        profiles[epoch_i] = _compute_phase_bin_profile(
            phase[epoch_i], amplitude[epoch_i], bin_edges, precision
        )

    return profiles


def _compute_trial_mi(profiles: np.ndarray, precision: type) -> np.ndarray:
    """Compute the modulation index of each epoch's profile."""
    return np.array(
        [_compute_modulation_index(profile) for profile in profiles], dtype=precision
    )


def _compute_surrogate_mi(
    phase: np.ndarray,
    amplitude: np.ndarray,
    bin_edges: np.ndarray,
    n_surrogates: int,
    seed: int | None,
    precision: type,
    n_return_profiles: int = 0,
) -> np.ndarray | tuple[np.ndarray, np.ndarray]:
    """Compute modulation indices of surrogate phase-amplitude pairings.

    Parameters
    ----------
    phase : numpy.ndarray of float, shape of [epochs, times]
        Instantaneous phase (in radians).

    amplitude : numpy.ndarray of float, shape of [epochs, times]
        Amplitude envelope.

    bin_edges : numpy.ndarray of float, shape of [bins + 1]
        Edges of the phase bins.

    n_surrogates : int
        Number of surrogates to generate.

    seed : int | None
        Seed of the random number generator.

    precision : type
        Precision to use for the computation.

    n_return_profiles : int (default ``0``)
        Number of phase-binned amplitude profiles of the first surrogates to also
        return.

    Returns
    -------
    surrogates : numpy.ndarray of float, shape of [surrogates]
        Modulation index of each surrogate. All entries are NaN if fewer than two epochs
        are present.

    profiles : numpy.ndarray of float, shape of [profiles, bins]
        Phase-binned amplitude profiles of the first surrogates. Only returned if
        ``n_return_profiles > 0``. Empty if fewer than two epochs are present.

    Notes
    -----
    For each surrogate, two different epochs are drawn without replacement. The phase
    of the first epoch, with its timepoints randomly permuted, is paired with the
    unpermuted amplitude of the second epoch.
    """
    n_epochs, n_times = phase.shape
    n_profiles = min(n_return_profiles, n_surrogates) if n_epochs >= 2 else 0
    try:
        surrogates = np.full(n_surrogates, fill_value=np.nan, dtype=precision)
        profiles = np.full(
            (n_profiles, bin_edges.size - 1), fill_value=np.nan, dtype=precision
        )
    except MemoryError as error:
        raise MemoryError(
            "Memory allocation for the surrogate modulation indices failed. Try "
            "reducing `n_surrogates`, or reduce the precision of the computation with "
            "`pycomod.set_precision('single')`."
        ) from error

    if n_epochs >= 2:
        random = np.random.RandomState(seed)
        for surrogate_i in range(n_surrogates):
            phase_epoch, amp_epoch = random.choice(n_epochs, size=2, replace=False)
            surrogate_phase = phase[phase_epoch][random.permutation(n_times)]
            profile = _compute_phase_bin_profile(
                surrogate_phase, amplitude[amp_epoch], bin_edges, precision
            )
            surrogates[surrogate_i] = _compute_modulation_index(profile)
            if surrogate_i < n_profiles:
                profiles[surrogate_i] = profile

    if n_return_profiles > 0:
        return surrogates, profiles
    return surrogates


def _get_cell_signals(
    data: np.ndarray,
    sampling_freq: int | float,
    phase_freq: int | float,
    amp_freq: int | float,
    phase_band: tuple[float],
    amp_band: tuple[float],
    time_idcs: np.ndarray,
    transform_func: callable,
) -> tuple[np.ndarray, np.ndarray]:
    """Get phase and amplitude of the data for a single frequency pair.

    Returns
    -------
    phase : numpy.ndarray of float, shape of [epochs, times]
        Phase in ``phase_band`` restricted to ``time_idcs``.

    amplitude : numpy.ndarray of float, shape of [epochs, times]
        Amplitude envelope in ``amp_band`` restricted to ``time_idcs``.
    """
    try:
        phase = np.asarray(
            transform_func(
                data=data, sampling_freq=sampling_freq, band=phase_band, output="angle"
            )
        )
        amplitude = np.asarray(
            transform_func(
                data=data, sampling_freq=sampling_freq, band=amp_band, output="abs"
            )
        )
        if phase.shape != data.shape or amplitude.shape != data.shape:
            raise ValueError(
                "The phase and amplitude returned by `transform_func` must have the "
                "same shape as the data."
            )
    except Exception as error:
        raise RuntimeError(
            f"Signal conditioning failed for phase frequency {phase_freq} Hz (band "
            f"{phase_band[0]}-{phase_band[1]} Hz) and amplitude frequency {amp_freq} "
            f"Hz (band {amp_band[0]}-{amp_band[1]} Hz): {error}"
        ) from error

    return phase[:, time_idcs], amplitude[:, time_idcs]


def _compute_mi_cell(
    data: np.ndarray,
    sampling_freq: int | float,
    phase_freq: int | float,
    amp_freq: int | float,
    phase_band: tuple[float],
    amp_band: tuple[float],
    time_idcs: np.ndarray,
    bin_edges: np.ndarray,
    surrogates: bool,
    n_surrogates: int,
    seed: int | None,
    transform_func: callable,
    precision: type,
    return_profiles: bool = False,
) -> float | tuple[float, np.ndarray, np.ndarray]:
    """Compute the modulation index for a single frequency pair, averaged over epochs.

    Parameters
    ----------
    data : numpy.ndarray of float, shape of [epochs, times]
        Timeseries of a single channel.

    sampling_freq : int | float
        Sampling frequency (in Hz) of ``data``.

    phase_freq : int | float
        Centre frequency (in Hz) of the phase band.

    amp_freq : int | float
        Centre frequency (in Hz) of the amplitude band.

    phase_band : tuple of float, length of 2
        Lower and upper frequencies (in Hz) of the phase band.

    amp_band : tuple of float, length of 2
        Lower and upper frequencies (in Hz) of the amplitude band.

    time_idcs : numpy.ndarray of int
        Indices of the timepoints to compute the modulation index on.

    bin_edges : numpy.ndarray of float, shape of [bins + 1]
        Edges of the phase bins.

    surrogates : bool
        Whether or not to subtract the mean modulation index of surrogate data.

    n_surrogates : int
        Number of surrogates to generate.

    seed : int | None
        Seed of the random number generator used for the surrogates.

    transform_func : callable
        Function returning the phase or amplitude of band-limited data.

    precision : type
        Precision to use for the computation.

    return_profiles : bool (default False)
        Whether or not to also return the phase-binned amplitude profile of each epoch
        and of the first surrogates.

    Returns
    -------
    mi : float
        Modulation index averaged over epochs (minus the mean of the surrogates if
        ``surrogates=True``). NaN values of individual epochs are not discarded.

    profiles : numpy.ndarray of float, shape of [epochs, bins]
        Phase-binned amplitude profile of each epoch. Only returned if
        ``return_profiles=True``.

    surrogate_profiles : numpy.ndarray of float, shape of [surrogates, bins]
        Phase-binned amplitude profiles of up to ``10`` surrogates. Empty if
        ``surrogates=False``. Only returned if ``return_profiles=True``.
    """
    phase, amplitude = _get_cell_signals(
        data,
        sampling_freq,
        phase_freq,
        amp_freq,
        phase_band,
        amp_band,
        time_idcs,
        transform_func,
    )

    profiles = _compute_trial_profiles(phase, amplitude, bin_edges, precision)
    mi = np.mean(_compute_trial_mi(profiles, precision))
    surrogate_profiles = np.empty((0, bin_edges.size - 1), dtype=precision)
    if surrogates:
        if return_profiles:
            surrogate_mi, surrogate_profiles = _compute_surrogate_mi(
                phase,
                amplitude,
                bin_edges,
                n_surrogates,
                seed,
                precision,
                n_return_profiles=N_DIAGNOSTIC_SURROGATES,
            )
        else:
            surrogate_mi = _compute_surrogate_mi(
                phase, amplitude, bin_edges, n_surrogates, seed, precision
            )
        mi -= np.mean(surrogate_mi)

    if return_profiles:
        return mi, profiles, surrogate_profiles
    return mi
