"""Public tools for handling data and processing results."""

from multiprocessing import cpu_count

import numpy as np
import scipy as sp
from mne.filter import filter_data

from pycomod.utils._defaults import (
    AMP_BANDWIDTH_DIVISOR,
    FILTER_ORDER,
    N_BINS,
    PHASE_HALF_BANDWIDTH,
    _precision,
)
from pycomod.utils._process import (
    _compute_modulation_index,
    _compute_phase_bin_profile,
)
from pycomod.utils._utils import _int_like, _number_like


def compute_band_transform(
    data: np.ndarray,
    sampling_freq: int | float,
    band: tuple[int | float],
    output: str = "angle",
    filter_order: int = FILTER_ORDER,
    n_jobs: int = 1,
    verbose: bool = False,
) -> np.ndarray:
    """Compute the instantaneous phase or amplitude of band-limited data.

    Parameters
    ----------
    data : ~numpy.ndarray, shape of [..., times]
        Real-valued timeseries data.

    sampling_freq : int | float
        Sampling frequency (in Hz) of ``data``.

    band : tuple of int or float, length of 2
        Lower and upper frequencies (in Hz) of the band to filter the data in,
        respectively.

    output : ``"angle"`` | ``"abs"`` (default ``"angle"``)
        Whether to return the phase angle (in radians) or the amplitude envelope of the
        analytic signal of the band-limited data.

    filter_order : int (default ``4``)
        Order of the Butterworth filter.

    n_jobs : int (default ``1``)
        Number of jobs to run in parallel. If ``-1``, all available CPUs are used.

    verbose : bool (default False)
        Whether or not to report the status of the processing.

    Returns
    -------
    transformed : ~numpy.ndarray of float, shape of [..., times]
        Phase (in the range [-pi, pi)) or amplitude envelope of the band-limited data.

    Notes
    -----
    The data is filtered forwards and backwards with an IIR Butterworth band-pass filter
    using :func:`mne.filter.filter_data`, and the analytic signal is computed with
    :func:`scipy.signal.hilbert`.
    """
    n_jobs = _compute_band_transform_input_checks(
        data, sampling_freq, band, output, filter_order, n_jobs, verbose
    )

    filtered = filter_data(
        np.asarray(data, dtype=np.float64),
        sampling_freq,
        l_freq=band[0],
        h_freq=band[1],
        method="iir",
        iir_params={"order": filter_order, "ftype": "butter", "output": "sos"},
        phase="zero",
        n_jobs=n_jobs,
        verbose=verbose,
    )
    analytic = sp.signal.hilbert(filtered, axis=-1)

    if output == "abs":
        return np.abs(analytic)

    phase = np.angle(analytic)
    phase[phase >= np.pi] -= 2 * np.pi  # angle of a negative real number is +pi

    return phase


def _compute_band_transform_input_checks(
    data: np.ndarray,
    sampling_freq: int | float,
    band: tuple[int | float],
    output: str,
    filter_order: int,
    n_jobs: int,
    verbose: bool,
) -> int:
    """Check inputs for computing the band-limited phase/amplitude.

    Returns
    -------
    n_jobs : int
    """
    if not isinstance(data, np.ndarray):
        raise TypeError("`data` must be a NumPy array.")
    if not np.isrealobj(data):
        raise ValueError("`data` must be real-valued.")

    if not isinstance(sampling_freq, _number_like):
        raise TypeError("`sampling_freq` must be an int or a float.")

    if not isinstance(band, tuple):
        raise TypeError("`band` must be a tuple.")
    if len(band) != 2:
        raise ValueError("`band` must have length of 2.")
    if any(not isinstance(freq, _number_like) for freq in band):
        raise TypeError("Entries of `band` must be ints or floats.")
    if band[0] <= 0 or band[1] >= sampling_freq / 2:
        raise ValueError(
            "Entries of `band` must lie in the range (0, Nyquist frequency)."
        )
    if band[0] >= band[1]:
        raise ValueError("The lower frequency of `band` must be < the upper frequency.")

    if output not in ["angle", "abs"]:
        raise ValueError("`output` must be one of ['angle', 'abs'].")

    if not isinstance(filter_order, _int_like):
        raise TypeError("`filter_order` must be an int.")
    if filter_order < 1:
        raise ValueError("`filter_order` must be >= 1.")

    if not isinstance(n_jobs, _int_like):
        raise TypeError("`n_jobs` must be an integer.")
    if n_jobs < 1 and n_jobs != -1:
        raise ValueError("`n_jobs` must be >= 1 or -1.")
    if n_jobs == -1:
        n_jobs = cpu_count()

    if not isinstance(verbose, bool):
        raise TypeError("`verbose` must be a bool.")

    return n_jobs


def get_phase_bin_edges(n_bins: int = N_BINS) -> np.ndarray:
    """Return the edges of phase bins spanning one cycle.

    Parameters
    ----------
    n_bins : int (default ``18``)
        Number of equally-sized phase bins.

    Returns
    -------
    bin_edges : ~numpy.ndarray of float, shape of [n_bins + 1]
        Edges (in radians) of the phase bins, from -pi to pi. Bin ``j`` covers
        ``[bin_edges[j], bin_edges[j + 1])``.
    """
    if not isinstance(n_bins, _int_like):
        raise TypeError("`n_bins` must be an int.")
    if n_bins < 2:
        raise ValueError("`n_bins` must be >= 2.")

    return np.linspace(-np.pi, np.pi, n_bins + 1)


def compute_phase_bin_profile(
    phase: np.ndarray, amplitude: np.ndarray, n_bins: int = N_BINS
) -> tuple[np.ndarray, np.ndarray]:
    """Compute the mean amplitude of a signal in bins of phase.

    Parameters
    ----------
    phase : ~numpy.ndarray, shape of [times]
        Instantaneous phase (in radians) in the range [-pi, pi).

    amplitude : ~numpy.ndarray, shape of [times]
        Amplitude envelope aligned sample-for-sample with ``phase``.

    n_bins : int (default ``18``)
        Number of equally-sized phase bins.

    Returns
    -------
    profile : ~numpy.ndarray of float, shape of [n_bins]
        Mean amplitude in each phase bin.

    bin_starts : ~numpy.ndarray of float, shape of [n_bins]
        Lower edge (in radians) of each phase bin.

    Notes
    -----
    Bins which do not contain any samples have a mean amplitude of :obj:`numpy.nan`.
    These values are kept so that any modulation index computed from the profile is
    also :obj:`numpy.nan`, flagging that the data did not cover every phase bin.
    """
    for name, values in (("phase", phase), ("amplitude", amplitude)):
        if not isinstance(values, np.ndarray):
            raise TypeError(f"`{name}` must be a NumPy array.")
        if values.ndim != 1:
            raise ValueError(f"`{name}` must be a 1D array.")
    if phase.size != amplitude.size:
        raise ValueError("`phase` and `amplitude` must have the same length.")

    bin_edges = get_phase_bin_edges(n_bins)
    profile = _compute_phase_bin_profile(
        phase.astype(np.float64),
        amplitude.astype(np.float64),
        bin_edges,
        _precision.real,
    )

    return profile, bin_edges[:-1]


def compute_modulation_index(profile: np.ndarray) -> float:
    r"""Compute the modulation index of a phase-binned amplitude profile.

    Parameters
    ----------
    profile : ~numpy.ndarray, shape of [bins]
        Mean amplitude in each phase bin, e.g. from
        :func:`~pycomod.utils.compute_phase_bin_profile`.

    Returns
    -------
    mi : float
        Modulation index in the range [0, 1].

    Notes
    -----
    The modulation index is computed according to :footcite:`Tort2010`. The profile is
    normalised to a probability distribution, :math:`p`, over the :math:`N` bins, and
    its Shannon entropy compared to that of the uniform distribution

    :math:`H=-\sum_{j=1}^{N}p_j\ln(p_j)` ,

    :math:`\textrm{MI}=\Large\frac{\ln(N)-H}{\ln(N)}` .

    A uniform profile gives 0, and a profile with all amplitude in one bin gives 1.
    Bins with a probability of exactly 0 contribute nothing to the entropy, however
    :obj:`numpy.nan` entries in ``profile`` give a modulation index of
    :obj:`numpy.nan`.

    References
    ----------
    .. footbibliography::
    """
    if not isinstance(profile, np.ndarray):
        raise TypeError("`profile` must be a NumPy array.")
    if profile.ndim != 1:
        raise ValueError("`profile` must be a 1D array.")
    if profile.size < 2:
        raise ValueError("`profile` must contain at least 2 bins.")

    return float(_compute_modulation_index(profile.astype(np.float64)))


def get_frequency_centres(
    freq_range: tuple[int | float], step: int | float
) -> np.ndarray:
    """Return evenly-spaced centre frequencies within a range.

    Parameters
    ----------
    freq_range : tuple of int or float, length of 2
        Start and end frequencies (in Hz) of the range, respectively. Both are
        inclusive.

    step : int | float
        Spacing (in Hz) between centre frequencies.

    Returns
    -------
    freqs : ~numpy.ndarray of float
        Centre frequencies ``start, start + step, ...`` up to and including ``end``.
    """
    if not isinstance(freq_range, tuple):
        raise TypeError("`freq_range` must be a tuple.")
    if len(freq_range) != 2:
        raise ValueError("`freq_range` must have length of 2.")
    if any(not isinstance(freq, _number_like) for freq in freq_range):
        raise TypeError("Entries of `freq_range` must be ints or floats.")
    if not isinstance(step, _number_like):
        raise TypeError("`step` must be an int or a float.")
    if step <= 0:
        raise ValueError("`step` must be > 0.")
    if freq_range[0] > freq_range[1]:
        raise ValueError("The start of `freq_range` must be <= the end.")

    n_freqs = int(np.floor((freq_range[1] - freq_range[0]) / step)) + 1

    return (freq_range[0] + step * np.arange(n_freqs)).astype(_precision.real)


def get_phase_band(
    centre: int | float, half_width: int | float = PHASE_HALF_BANDWIDTH
) -> tuple[float, float]:
    """Return the band used to extract the phase at a centre frequency.

    Parameters
    ----------
    centre : int | float
        Centre frequency (in Hz).

    half_width : int | float (default ``1.0``)
        Distance (in Hz) of the band edges from ``centre``.

    Returns
    -------
    band : tuple of float, length of 2
        Lower and upper frequencies (in Hz) of the band.
    """
    return (float(centre - half_width), float(centre + half_width))


def get_amplitude_band(
    centre: int | float, bandwidth_divisor: int | float = AMP_BANDWIDTH_DIVISOR
) -> tuple[float, float]:
    """Return the band used to extract the amplitude at a centre frequency.

    Parameters
    ----------
    centre : int | float
        Centre frequency (in Hz).

    bandwidth_divisor : int | float (default ``2.5``)
        The band edges lie ``centre / bandwidth_divisor`` from ``centre``.

    Returns
    -------
    band : tuple of float, length of 2
        Lower and upper frequencies (in Hz) of the band, rounded to the nearest integer
        (halves rounded up).
    """
    half_width = centre / bandwidth_divisor

    return (
        float(np.floor(centre - half_width + 0.5)),
        float(np.floor(centre + half_width + 0.5)),
    )


def set_precision(precision: str) -> None:
    """Set the precision of the outputs of PyComod classes and functions.

    Parameters
    ----------
    precision : ``"single"`` | ``"double"``
        Precision to use. Accepts ``"single"`` (real values are :obj:`numpy.float32`)
        and ``"double"`` (real values are :obj:`numpy.float64`).

    Notes
    -----
    By default, PyComod uses double precision. Single precision may be desired to
    reduce the memory needed to handle large datasets.
    """
    _precision.set_precision(precision)
