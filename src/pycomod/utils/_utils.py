"""Private helper tools for processing results."""

import numpy as np
from mne.parallel import parallel_func
from mne.utils import ProgressBar, set_log_level

from pycomod.utils._defaults import _precision


# Aliases for type checking
_int_like = (int, np.integer)
_float_like = (float, np.floating)
_number_like = _int_like + _float_like


def _compute_in_parallel(
    func: callable,
    loop_kwargs: list[dict],
    static_kwargs: dict,
    output: np.ndarray,
    message: str,
    n_jobs: int,
    verbose: bool,
    prefer: str = "processes",
    cancel_event=None,
) -> np.ndarray:
    """Parallelise a function with a progress bar.

    Parameters
    ----------
    func : callable
        Function to parallelise.

    loop_kwargs : list of dict
        List of keyword arguments to pass to the function that change for each iteration
        of the parallelisation.

    static_kwargs : dict
        Dictionary of keyword arguments to pass to the function that do not change
        across iterations.

    output : numpy.ndarray
        Array to store the output of the computation. Values for each iteration of the
        parallelisation are stored in the first dimension, which must be at least as
        large as the length of the values in ``loop_kwargs``.

    message : str
        Message to display in the progress bar.

    n_jobs : int
        Number of jobs to run in parallel.

    verbose : bool
        Whether or not to report the progress of the processing.

    prefer : str (default "processes")
        Whether to use "threads" or "processes" for parallelisation.

    cancel_event : threading.Event | None (default None)
        Event checked before each block of the computation. If it is set, the
        computation is stopped and a :obj:`RuntimeError` is raised.

    Returns
    -------
    output : numpy.ndarray
        Array with the output of the computation.

    Notes
    -----
    Relies on the MNE progress bar and parallel implementations. Does not perform checks
    on inputs for speed.
    """
    n_steps = len(loop_kwargs)
    n_blocks = int(np.ceil(n_steps / n_jobs))
    parallel, my_parallel_func, _ = parallel_func(
        func, n_jobs, prefer=prefer, verbose=verbose
    )
    old_log_level = set_log_level(
        verbose="INFO" if verbose else "WARNING", return_old_level=True
    )  # need to set log level that is passed to tqdm
    try:
        for block_i in ProgressBar(range(n_blocks), mesg=message):
            _check_cancelled(cancel_event)
            idcs = _get_block_indices(block_i, n_steps, n_jobs)
            output[idcs] = parallel(
                my_parallel_func(**loop_kwargs[idx], **static_kwargs) for idx in idcs
            )
    finally:
        set_log_level(verbose=old_log_level)  # reset log level

    return output


def _get_block_indices(block_i: int, limit: int, n_jobs: int) -> np.ndarray:
    """Get the indices for a block of parallel computation, capped by a limit.

    Parameters
    ----------
    block_i : int
        Index of the block to get indices for.

    limit : int
        Maximum index to return.

    n_jobs : int
        Number of jobs to run in parallel.

    Returns
    -------
    indices : numpy.ndarray of int
        Indices for the block of parallel computation.
    """
    return np.arange(block_i * n_jobs, np.min([(block_i + 1) * n_jobs, limit]))


def _check_cancelled(cancel_event) -> None:
    """Raise an error if the computation has been cancelled."""
    if cancel_event is not None and cancel_event.is_set():
        raise RuntimeError("The computation was cancelled.")


def _generate_data(
    n_epochs: int, n_chans: int, n_times: int, seed: int = 44
) -> np.ndarray:
    """Generate random data of the specified shape."""
    random = np.random.RandomState(seed)
    return random.rand(n_epochs, n_chans, n_times).astype(_precision.real)


def _generate_pac_data(
    n_epochs: int,
    n_chans: int,
    n_times: int,
    sampling_freq: int | float,
    phase_freq: int | float = 5.0,
    amp_freq: int | float = 32.0,
    coupling: float = 0.8,
    noise: float = 0.1,
    seed: int = 44,
) -> np.ndarray:
    """Generate data with the amplitude of one oscillation locked to another's phase.

    Parameters
    ----------
    n_epochs : int
        Number of epochs to generate.

    n_chans : int
        Number of channels to generate.

    n_times : int
        Number of timepoints in each epoch.

    sampling_freq : int | float
        Sampling frequency (in Hz) of the data.

    phase_freq : int | float (default ``5.0``)
        Frequency (in Hz) of the slow oscillation providing the phase.

    amp_freq : int | float (default ``32.0``)
        Frequency (in Hz) of the fast oscillation whose amplitude is modulated.

    coupling : float (default ``0.8``)
        Depth of the amplitude modulation, between 0 (no coupling) and 1.

    noise : float (default ``0.1``)
        Standard deviation of the white noise added to the signals.

    seed : int (default ``44``)
        Seed of the random number generator.

    Returns
    -------
    data : numpy.ndarray of float, shape of [epochs, channels, times]
        Simulated data.

    Notes
    -----
    The starting phases of both oscillations are drawn at random for every epoch and
    channel, so the coupling is not phase-locked to the start of the epochs.
    """
    random = np.random.RandomState(seed)
    times = np.arange(n_times) / sampling_freq

    data = np.empty((n_epochs, n_chans, n_times), dtype=_precision.real)
    for epoch_i in range(n_epochs):
        for chan_i in range(n_chans):
            slow_offset, fast_offset = random.uniform(0, 2 * np.pi, 2)
            slow = np.sin(2 * np.pi * phase_freq * times + slow_offset)
            fast = np.sin(2 * np.pi * amp_freq * times + fast_offset)
            data[epoch_i, chan_i] = (
                slow
                + 0.5 * (1 + coupling * slow) * fast
                + noise * random.randn(n_times)
            )

    return data
