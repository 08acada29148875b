"""Pytest fixtures for unit tests."""

import matplotlib
import numpy as np
import pytest

from pycomod.utils._utils import _generate_data, _generate_pac_data

# interactive backends can fail when using pytest, even if plt.show() not called, so
# stick to non-interactive backend
matplotlib.use("Agg")


@pytest.fixture(scope="session")
def data_sfreq() -> float:
    """Sampling frequency of example data for tests."""
    return 250.0


@pytest.fixture(scope="session")
def epochs(data_sfreq: float) -> np.ndarray:
    """Random real-valued epoched timeseries data."""
    n_epochs, n_chans, n_times = 4, 2, int(data_sfreq * 4)
    return _generate_data(n_epochs, n_chans, n_times)


@pytest.fixture(scope="session")
def coupled_epochs() -> tuple[np.ndarray, float]:
    """Epoched data where the amplitude of 32 Hz activity is locked to 5 Hz phase."""
    sampling_freq = 500.0
    data = _generate_pac_data(
        n_epochs=5,
        n_chans=1,
        n_times=2000,
        sampling_freq=sampling_freq,
        phase_freq=5.0,
        amp_freq=32.0,
    )
    return data, sampling_freq
