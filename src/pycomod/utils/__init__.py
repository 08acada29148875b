"""Helper tools for processing and storing results."""

from .results import ResultsComodulogram
from .utils import (
    compute_band_transform,
    compute_modulation_index,
    compute_phase_bin_profile,
    get_amplitude_band,
    get_frequency_centres,
    get_phase_band,
    get_phase_bin_edges,
    set_precision,
)
