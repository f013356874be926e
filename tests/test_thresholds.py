import math

import numpy as np
import pytest

from lokipsr.thresholds import (
    FoldVector,
    State,
    compute_threshold_survival,
    find_bin_index,
    gen_next_state,
    prune_folds,
    simulate_folds,
)
from lokipsr.utils import ThreadSafeRNG


def _rng(seed=7):
    return ThreadSafeRNG(base_seed=seed, nstreams=1)


def test_fold_vector_shape():
    folds = FoldVector(np.ones((3, 5)), 2.0)
    assert folds.ntrials == 3
    assert folds.nbins == 5
    assert not folds.is_empty()


def test_fold_vector_rejects_1d():
    with pytest.raises(ValueError):
        FoldVector([1.0, 2.0], 1.0)


def test_normalized_round_trip():
    data = np.arange(12, dtype=np.float32).reshape(3, 4)
    folds = FoldVector(data, 4.0)
    np.testing.assert_allclose(folds.normalized() * math.sqrt(4.0), data, rtol=1e-6)


@pytest.mark.parametrize(
    "value, expected",
    [(0.05, -1), (0.1, 0), (0.7, 1), (1.0, 2), (2.0, 2)],
)
def test_find_bin_index(value, expected):
    assert find_bin_index([0.1, 0.5, 1.0], value) == expected


def test_simulate_folds_without_noise_repeats_and_adds_profile():
    data = np.arange(6, dtype=np.float32).reshape(3, 2)
    profile = [1.0, -1.0]
    out = simulate_folds(FoldVector(data, 0.5), profile, _rng(), bias_snr=2.0, var_add=0.0, ntrials_min=8)
    assert out.ntrials % 3 == 0 and out.ntrials >= 8
    assert out.variance == pytest.approx(0.5)
    expected = np.tile(data, (out.ntrials // 3, 1)) + np.float32(2.0) * np.asarray(profile, dtype=np.float32)
    np.testing.assert_allclose(out.data, expected)


def test_simulate_folds_adds_variance_and_noise():
    folds = FoldVector(np.zeros((4, 16)), 1.0)
    out = simulate_folds(folds, np.zeros(16), _rng(), bias_snr=0.0, var_add=1.0, ntrials_min=256)
    assert out.ntrials == 256
    assert out.variance == pytest.approx(2.0)
    assert abs(float(out.data.std()) - 1.0) < 0.1


def test_simulate_folds_is_reproducible_with_seed():
    folds = FoldVector(np.zeros((2, 4)), 0.0)
    a = simulate_folds(folds, np.zeros(4), _rng(3), ntrials_min=4)
    b = simulate_folds(folds, np.zeros(4), _rng(3), ntrials_min=4)
    np.testing.assert_array_equal(a.data, b.data)


def test_simulate_folds_no_trials():
    with pytest.raises(ValueError):
        simulate_folds(FoldVector(np.zeros((0, 4)), 0.0), np.zeros(4), _rng())


def test_threshold_survival_half():
    assert compute_threshold_survival([1.0, 5.0, 3.0, 2.0], 0.5) == 3.0


def test_threshold_survival_keeps_at_least_one():
    assert compute_threshold_survival([1.0, 5.0, 3.0, 2.0], 0.0) == 5.0


def test_threshold_survival_all():
    assert compute_threshold_survival([1.0, 5.0, 3.0, 2.0], 1.0) == 1.0


def test_threshold_survival_empty():
    with pytest.raises(ValueError):
        compute_threshold_survival([], 0.5)


def test_prune_folds_strictly_above():
    data = np.arange(8, dtype=np.float32).reshape(4, 2)
    out = prune_folds(FoldVector(data, 3.0), [1.0, 2.0, 3.0, 0.5], 2.0)
    np.testing.assert_array_equal(out.data, data[[2]])
    assert out.variance == 3.0


def test_prune_folds_none_survive_keeps_nbins():
    out = prune_folds(FoldVector(np.ones((3, 5)), 1.0), [0.0, 0.0, 0.0], 1.0)
    assert out.ntrials == 0
    assert out.nbins == 5
    assert out.is_empty()


def test_prune_folds_size_mismatch():
    with pytest.raises(ValueError):
        prune_folds(FoldVector(np.ones((3, 2)), 1.0), [1.0, 2.0], 0.0)


def test_gen_next_state():
    cur = State(complexity=2.0, complexity_cumul=3.0, success_h1_cumul=0.5, threshold=1.5, is_empty=False)
    nxt = gen_next_state(cur, 2.0, 0.25, 0.5, 4.0)
    assert nxt.complexity_cumul == 11.0
    assert nxt.cost == pytest.approx(nxt.complexity_cumul / nxt.success_h1_cumul)
    assert nxt.threshold == 2.0
    assert nxt.threshold_prev == 1.5
    assert nxt.success_h1_cumul_prev == 0.5
    assert nxt.success_h0 == 0.25
    assert nxt.nbranches == 4.0
    assert nxt.is_empty is False


def test_gen_next_state_cumulative_probability_decreases():
    state = State(is_empty=False)
    for _ in range(3):
        new = gen_next_state(state, 1.0, 0.5, 0.8, 2.0)
        assert new.success_h1_cumul < state.success_h1_cumul
        assert new.complexity_cumul > state.complexity_cumul
        state = new