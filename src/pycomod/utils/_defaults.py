"""Default values for the PyComod package."""

import numpy as np

# Phase binning (Tort et al., 2010): 18 bins of 20 degrees
N_BINS = 18

# Surrogate null distribution
N_SURROGATES = 1000
# Surrogate profiles drawn per frequency pair when plotting diagnostics
N_DIAGNOSTIC_SURROGATES = 10

# Frequency grid steps (Hz)
PHASE_FREQ_STEP = 1
AMP_FREQ_STEP = 2

# Sub-band widths around each centre frequency
PHASE_HALF_BANDWIDTH = 1.0  # centre +/- 1 Hz
AMP_BANDWIDTH_DIVISOR = 2.5  # centre +/- centre / 2.5

# Order of the two-pass Butterworth filter used for signal conditioning
FILTER_ORDER = 4


class _Precision:
    """Class specifying precision of data/results.

    Double precision (i.e. float64) used by default.
    """

    def __init__(self) -> None:  # noqa: D107
        self.type = "double"
        self.real = np.float64

    def set_precision(self, precision: str) -> None:
        """Set precision of data/results.

        Parameters
        ----------
        precision : str
            Precision of data/results. Must be one of "single" or "double".
        """
        if precision not in ["single", "double"]:
            raise ValueError("precision must be either 'single' or 'double'.")

        if precision == "single":
            self.type = "single"
            self.real = np.float32
        else:
            self.type = "double"
            self.real = np.float64


_precision = _Precision()
