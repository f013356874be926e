# lokipsr

Building blocks for pulsar searching, written with NumPy and SciPy. This is a library. It has no command-line tool.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `lokipsr.schemes`: threshold and probability grids

- `compute_thresholds(snr_start, snr_final, nthresholds)` returns evenly spaced float32 thresholds. It needs at least two thresholds.
- `compute_probs(nprobs, prob_min)` returns log-spaced probabilities from `prob_min` up to 1.
- `compute_probs_linear(nprobs, prob_min)` returns linearly spaced probabilities from `prob_min` up to 1.
- There are three functions for initial threshold guesses per stage:
  - `bound_scheme(nstages, snr_bound)`;
  - `trials_scheme(branching_pattern, trials_start, min_trials)`, which uses the normal tail for the cumulative number of trials;
  - `guess_scheme(...)`, which takes their element-wise minimum.
- `current_threshold_indices(thresholds, guess, beam_width)` returns the indices of the thresholds within `beam_width` of `guess`. The window is clipped below at 0 and above at the last threshold.

### `lokipsr.thresholds`: Monte-Carlo pruning steps

- `FoldVector(data, variance)` holds a `(ntrials, nbins)` float32 batch of folded profiles. It has the properties `ntrials` and `nbins`, and the methods `is_empty()` and `normalized()`.
- `simulate_folds(folds_in, profile, rng, bias_snr, var_add, ntrials_min)` builds a new batch:
  - it repeats the input trials until there are at least `ntrials_min` of them;
  - it adds Gaussian noise of variance `var_add`;
  - it adds `bias_snr * profile`.

  `rng` is any object with a `normal(loc, scale, size)` method, such as `ThreadSafeRNG`.
- `prune_folds(folds_in, scores, threshold)` keeps the trials whose score is strictly above the threshold.
- `compute_threshold_survival(scores, survive_prob)` returns the score that lets the top fraction survive. At least one trial always survives.
- `State` and `gen_next_state(...)` carry the complexity, success rates and cost from one stage to the next.
- `find_bin_index(bins, value)` returns the index of the last edge that is `<= value`. It returns -1 if `value` is below all edges.

### `lokipsr.suggestions`: candidate buffer

`SuggestionStruct(param_sets, folds, scores, backtracks)` is a fixed-capacity store. Real or complex folds are both accepted. Only the first `valid_size` entries are live.

- Adding entries:
  - `add()` appends a single entry;
  - `add_batch()` adds every entry scoring at least the threshold. When the store is full it trims at the median score and returns the threshold in effect.
- Trimming:
  - `trim_threshold()` keeps entries scoring at least the median;
  - `trim_repeats()` keeps the best-scoring entry for each repeated key;
  - `trim_repeats_threshold()` does both.
- Inspecting:
  - `score_max`, `score_min`, `score_median` and `size_lb`;
  - `get_best()`, which returns the best entry.
- New stores:
  - `get_new(max_sugg)` returns an empty store with the same entry shapes;
  - `trim_empty()` returns a compact copy holding only the live entries.
- `get_transformed(delta_t)` returns the live parameter sets without their last two parameters. It does not shift them in time.
- `get_unique_indices` and `get_unique_indices_scores` find repeated parameter sets. The key is the relevant parameter values rounded at 1e-9.

### `lokipsr.stats`: distribution helpers

- `norm_isf(p)`, `exact_norm_isf(minus_logsf)` and `exact_chi_sq_minus_logsf(chi_sq_score, df)` compute the tail functions exactly.
- `StatLookupTables` gives the same values by interpolating in precomputed float32 tables:
  - the normal table covers `minus_logsf` up to 400;
  - the chi-squared table covers scores up to 300 and 1 to 64 degrees of freedom.
- `factorial(n)` returns an exact integer factorial for integer input, and gamma(n + 1) for float input.
- `is_power_of_two(n)` tests whether `n` is a power of two.

### `lokipsr.utils`: numeric helpers

- `next_power_of_two`, `diff_max` and `circular_prefix_sum` are small array helpers.
- `find_nearest_sorted_idx` and `find_neighbouring_indices` search sorted sequences.
- `ThreadSafeRNG(base_seed, nstreams)` gives each calling thread its own MT19937 stream derived from one seed. It has the methods `engine()`, `integers()` and `normal()`. It raises `IndexError` when more threads ask for a stream than were created.

### `lokipsr.cartesian`

`cartesian_product_view(params, max_dims)` iterates over tuples drawn from each grid, with the last grid varying fastest. Iterating raises `ValueError` if there are more than `max_dims` grids.

### `lokipsr.timing`

`ScopeTimer(label)` is a context manager. It logs the start of the block and how many milliseconds it took through the `logging` module, and stores the time in `elapsed_ms`. `set_timing_enabled()` and `timing_enabled()` switch this logging on and off for all timers.

### `lokipsr.errors`

`DetailedException` is a `RuntimeError` whose message names the calling function, file and line. The checks `check`, `check_equal`, `check_not_null` and `check_range` raise it.

## Examples

```python
from lokipsr.schemes import compute_thresholds, guess_scheme, current_threshold_indices

thresholds = compute_thresholds(0.1, 8.0, 100)
guess = guess_scheme(4, 8.0, [2.0, 2.0, 2.0, 2.0], 1, 1e10)
beam = current_threshold_indices(thresholds, guess[0], 0.7)
```

```python
import numpy as np
from lokipsr.thresholds import FoldVector, State, simulate_folds, prune_folds, gen_next_state
from lokipsr.utils import ThreadSafeRNG

rng = ThreadSafeRNG(base_seed=42, nstreams=1)
folds = simulate_folds(FoldVector(np.zeros((8, 16)), 0.0), np.ones(16), rng, 1.0, 1.0, 16)
scores = folds.normalized().max(axis=1)
survivors = prune_folds(folds, scores, 1.5)
state = gen_next_state(State(), 1.5, survivors.ntrials / folds.ntrials, 1.0, 2.0)
```

```python
from lokipsr.cartesian import cartesian_product_view

for combo in cartesian_product_view([[1.0, 2.0], [10.0, 20.0, 30.0]], 5):
    print(combo)
```

## What the package does not do

- It does not score folded profiles. You supply the scores that `prune_folds` and `compute_threshold_survival` use.
- It has no driver that runs a whole multi-stage threshold search over a beam of thresholds and probabilities. The pieces above can be combined for that.
- It does not save results to files.
- It does not fold time series or compute FFA transforms.