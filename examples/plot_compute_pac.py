"""
========================================
Compute a phase-amplitude comodulogram
========================================

This example demonstrates how phase-amplitude coupling (PAC) can be computed
with PyComod.
"""

# %%

import numpy as np

from pycomod import PAC

###############################################################################
# Background
# ----------
# PAC quantifies the relationship between the phase of a lower frequency,
# :math:`f_1`, and the amplitude of a higher frequency, :math:`f_2`, within a
# signal.
#
# PyComod measures PAC with the modulation index (MI) :footcite:`Tort2010`. The
# signal is band-pass filtered around :math:`f_1` to extract its instantaneous
# phase, and around :math:`f_2` to extract its amplitude envelope. The phases
# are divided into 18 bins of 20 degrees, and the mean amplitude in each bin is
# normalised to a probability distribution, :math:`p`. The MI measures how far
# this distribution is from uniform using its Shannon entropy, :math:`H`:
#
# :math:`\large \textrm{MI}=\Large\frac{\ln(N)-H(p)}{\ln(N)}`,
#
# where :math:`N` is the number of phase bins. MI values lie in the range
# :math:`[0, 1]`, where 0 indicates that the amplitude is the same at every
# phase, and 1 that all of the amplitude occurs in a single phase bin.
#
# Repeating this for a grid of phase and amplitude frequencies gives a
# comodulogram.

###############################################################################
# Simulating data
# ---------------
# We will start by simulating some data containing coupling between the 6 Hz
# phase and the 40 Hz amplitude of a signal.

# %%

sampling_freq = 500  # sampling frequency in Hz
n_epochs, n_chans, n_times = 20, 1, 2000
times = np.arange(n_times) / sampling_freq

random = np.random.RandomState(44)
data = np.empty((n_epochs, n_chans, n_times))
for epoch_i in range(n_epochs):
    slow = np.sin(2 * np.pi * 6 * times + random.uniform(0, 2 * np.pi))
    fast = np.sin(2 * np.pi * 40 * times + random.uniform(0, 2 * np.pi))
    data[epoch_i, 0] = (
        slow + 0.5 * (1 + 0.8 * slow) * fast + 0.2 * random.randn(n_times)
    )

print(
    f"Data: [{data.shape[0]} epochs x {data.shape[1]} channels x "
    f"{data.shape[2]} times]"
)

###############################################################################
# Computing PAC
# -------------
# To compute PAC, we start by initialising the :class:`~pycomod.cfc.PAC` class
# object with the data and the sampling frequency. We then call the
# :meth:`~pycomod.cfc.PAC.compute` method, specifying the phase frequencies,
# ``f1s``, and amplitude frequencies, ``f2s``, of interest. Phase frequencies
# are spaced 1 Hz apart, and amplitude frequencies 2 Hz apart.
#
# Filtering introduces artefacts at the edges of the data, so we restrict the
# computation to a window away from the edges with ``times``.

# %%

pac = PAC(data=data, sampling_freq=sampling_freq, verbose=False)
pac.compute(f1s=(4, 12), f2s=(30, 60), times=(0.5, 3.5))

pac_results = pac.results.get_results()  # return results as array

print(
    f"PAC results: [{pac_results.shape[0]} channels x "
    f"{pac_results.shape[1]} f2s x {pac_results.shape[2]} f1s]"
)

###############################################################################
# Correcting for chance coupling
# ------------------------------
# Even signals without any coupling have MI values above 0, as a finite number
# of samples never fills the phase bins perfectly evenly. To account for this,
# the mean MI of surrogate data can be subtracted from the results. Each
# surrogate pairs the phase of one epoch, with its timepoints shuffled, with the
# amplitude of a different epoch, destroying any genuine coupling.

# %%

pac.compute(
    f1s=(4, 12),
    f2s=(30, 60),
    times=(0.5, 3.5),
    surrogates=True,
    n_surrogates=200,
    random_seed=44,
)

###############################################################################
# Plotting PAC
# ------------
# Let us now inspect the results. Note that the
# :class:`~matplotlib.figure.Figure` and :class:`~matplotlib.axes.Axes` objects
# can also be returned for any desired manual adjustments of the plots. In this
# simulated data example, we can see that the MI indeed identifies the
# occurrence of 6-40 Hz PAC.

# %%

fig, axes = pac.results.plot(major_tick_intervals=4, minor_tick_intervals=2)

###############################################################################
# References
# ----------
# .. footbibliography::

# %%
