"""Tests for results classes (plotting tested separately)."""

import numpy as np
import pytest

from pycomod.utils import ResultsComodulogram
from pycomod.utils._utils import _generate_data


def test_results_comodulogram_error_catch() -> None:
    """Test `ResultsComodulogram` catches errors."""
    n_chans = 3
    n_f1 = 19
    n_f2 = 26
    data = _generate_data(n_chans, n_f2, n_f1)
    f1s = np.arange(4, 4 + n_f1)
    f2s = np.arange(30, 30 + 2 * n_f2, 2)
    indices = tuple(range(n_chans))

    with pytest.raises(TypeError, match="`data` must be a NumPy array."):
        ResultsComodulogram(data=data.tolist(), indices=indices, f1s=f1s, f2s=f2s)
    with pytest.raises(ValueError, match="`data` must be a 3D array."):
        ResultsComodulogram(data=data[..., 0], indices=indices, f1s=f1s, f2s=f2s)

    with pytest.raises(TypeError, match="`indices` must be a tuple."):
        ResultsComodulogram(data=data, indices=list(indices), f1s=f1s, f2s=f2s)
    with pytest.raises(TypeError, match="Entries of `indices` must be ints."):
        ResultsComodulogram(data=data, indices=(0.5, 1, 2), f1s=f1s, f2s=f2s)
    with pytest.raises(ValueError, match="Entries of `indices` must be >= 0."):
        ResultsComodulogram(data=data, indices=(-1, 1, 2), f1s=f1s, f2s=f2s)

    with pytest.raises(TypeError, match="`f1s` and `f2s` must be NumPy arrays."):
        ResultsComodulogram(data=data, indices=indices, f1s=f1s.tolist(), f2s=f2s)
    with pytest.raises(TypeError, match="`f1s` and `f2s` must be NumPy arrays."):
        ResultsComodulogram(data=data, indices=indices, f1s=f1s, f2s=f2s.tolist())
    with pytest.raises(ValueError, match="`f1s` and `f2s` must be 1D arrays."):
        ResultsComodulogram(
            data=data, indices=indices, f1s=np.vstack((f1s, f1s)), f2s=f2s
        )
    with pytest.raises(
        ValueError, match="Entries of `f1s` and `f2s` must be strictly increasing."
    ):
        ResultsComodulogram(data=data, indices=indices, f1s=f1s[::-1], f2s=f2s)

    with pytest.raises(
        ValueError, match=r"`data` must have shape \[nodes, f2s, f1s\]."
    ):
        ResultsComodulogram(data=data, indices=indices, f1s=f2s, f2s=f1s)
    with pytest.raises(
        ValueError, match=r"`data` must have shape \[nodes, f2s, f1s\]."
    ):
        ResultsComodulogram(data=data, indices=(0, 1), f1s=f1s, f2s=f2s)

    with pytest.raises(TypeError, match="`surrogate_corrected` must be a bool."):
        ResultsComodulogram(
            data=data, indices=indices, f1s=f1s, f2s=f2s, surrogate_corrected="no"
        )
    with pytest.raises(TypeError, match="`name` must be a string."):
        ResultsComodulogram(data=data, indices=indices, f1s=f1s, f2s=f2s, name=1)

    results = ResultsComodulogram(data=data, indices=indices, f1s=f1s, f2s=f2s)
    with pytest.raises(TypeError, match="`copy` must be a bool."):
        results.get_results(copy="True")


def test_results_comodulogram_runs() -> None:
    """Test `ResultsComodulogram` runs with correct inputs."""
    n_chans = 3
    n_f1 = 19
    n_f2 = 26
    data = _generate_data(n_chans, n_f2, n_f1)
    f1s = np.arange(4, 4 + n_f1)
    f2s = np.arange(30, 30 + 2 * n_f2, 2)
    indices = (2, 0, 5)
    name = "test"

    results = ResultsComodulogram(
        data=data, indices=indices, f1s=f1s, f2s=f2s, name=name
    )

    assert repr(results) == (
        f"<Result: {name} | [{n_chans} nodes, {n_f2} f2s, {n_f1} f1s]>"
    )
    assert results.indices == indices
    assert results.n_nodes == n_chans
    assert results.shape == (n_chans, n_f2, n_f1)
    assert not results.surrogate_corrected

    results_array = results.get_results()
    assert isinstance(results_array, np.ndarray)
    assert results_array.shape == (n_chans, n_f2, n_f1)
    assert np.array_equal(results_array, data)

    # check copies are independent of the stored results
    results_array[0, 0, 0] = -1
    assert results.get_results()[0, 0, 0] != -1
    assert results.get_results(copy=False) is results.get_results(copy=False)

    results = ResultsComodulogram(
        data=data, indices=indices, f1s=f1s, f2s=f2s, surrogate_corrected=True
    )
    assert results.surrogate_corrected
    assert repr(results) == (
        f"<Result: Comodulogram | [{n_chans} nodes, {n_f2} f2s, {n_f1} f1s] | "
        "surrogate-corrected>"
    )
