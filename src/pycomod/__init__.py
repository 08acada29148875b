"""Initialisation of the PyComod package."""

__version__ = "0.1.0+dev"

from .cfc import PAC
from .utils import (
    ResultsComodulogram,
    compute_band_transform,
    compute_modulation_index,
    compute_phase_bin_profile,
    get_amplitude_band,
    get_frequency_centres,
    get_phase_band,
    get_phase_bin_edges,
    set_precision,
)
