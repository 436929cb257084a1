"""
viterbihmm HMM module

Provides:
1. An immutable discrete HMM container holding log-space parameters
2. Viterbi decoding in log space with NaN-aware max/argmax reductions
3. A Numba JIT-compiled forward pass and an equivalent vectorized numpy pass

Model I/O (load/save) lives in viterbihmm.core.model_io.
"""

import numpy as np
from typing import Optional, Sequence, Tuple, Dict, Any
from numba import jit


BACKENDS = ('numba', 'numpy')
DEFAULT_BACKEND = 'numba'


# =============================================================================
# Numba JIT-compiled forward pass
# =============================================================================

@jit(nopython=True, cache=False)
def _viterbi_forward_numba(obs_cols, log_startprob, log_transmat, log_emissionprob):
    """
    Numba-compiled Viterbi forward pass for an N-state HMM.

    Args:
        obs_cols: 0-based emission columns (int array, length T)
        log_startprob: (N,) log start probabilities
        log_transmat: (N, N) log transition matrix, indexed [dst, src]
        log_emissionprob: (N, M) log emission probabilities

    Returns:
        score: (N, T) best log probability of a path ending in each state
        backpointer: (N, T) predecessor achieving that score (column 0 unused)
    """
    n_states = log_startprob.shape[0]
    T = obs_cols.shape[0]

    score = np.empty((n_states, T))
    backpointer = np.zeros((n_states, T), dtype=np.int64)

    o = obs_cols[0]
    for s in range(n_states):
        score[s, 0] = log_emissionprob[s, o] + log_startprob[s]

    for t in range(1, T):
        o = obs_cols[t]
        for s in range(n_states):
            best = -1
            best_value = 0.0
            for r in range(n_states):
                value = score[r, t - 1] + log_transmat[s, r]
                if np.isnan(value):
                    continue
                # Strict comparison keeps the lowest index on ties
                if best < 0 or value > best_value:
                    best = r
                    best_value = value
            if best < 0:
                raise ValueError("All candidate scores are NaN; no usable path exists")
            score[s, t] = log_emissionprob[s, o] + best_value
            backpointer[s, t] = best

    return score, backpointer


def _viterbi_forward_numpy(obs_cols: np.ndarray, log_startprob: np.ndarray,
                           log_transmat: np.ndarray,
                           log_emissionprob: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Vectorized forward pass; same results as the Numba kernel."""
    n_states = log_startprob.shape[0]
    T = len(obs_cols)

    score = np.empty((n_states, T))
    backpointer = np.zeros((n_states, T), dtype=np.int64)

    score[:, 0] = log_emissionprob[:, obs_cols[0]] + log_startprob

    for t in range(1, T):
        # candidates[s, r] = score[r, t-1] + transitions[s, r]
        candidates = score[:, t - 1][np.newaxis, :] + log_transmat
        backpointer[:, t] = argmax_skipnan(candidates, axis=1)
        score[:, t] = log_emissionprob[:, obs_cols[t]] + max_skipnan(candidates, axis=1)

    return score, backpointer


_FORWARD_PASSES = {
    'numba': _viterbi_forward_numba,
    'numpy': _viterbi_forward_numpy,
}


# =============================================================================
# Model
# =============================================================================

class HMM:
    """
    Discrete-state, discrete-observation HMM with log-space parameters.

    Parameters are validated once and stored as read-only arrays:
        transitions: (N, N) log transition probabilities
        emissions: (N, M) log emission probabilities, one row per state
        initial_state: (N,) log initial-state probabilities

    The model never applies log itself; use from_probabilities() for that.
    """

    def __init__(self, transitions, emissions, initial_state,
                 state_labels: Optional[Sequence[str]] = None):
        initial_state = _frozen(initial_state)
        transitions = _frozen(transitions)
        emissions = _frozen(emissions)

        if initial_state.ndim != 1 or len(initial_state) == 0:
            raise ValueError(
                f"initial_state should be a non-empty 1-D vector, got shape {initial_state.shape}"
            )
        n_states = len(initial_state)

        if transitions.shape != (n_states, n_states):
            raise ValueError(
                f"Transitions should be an NxN matrix where N is the number of states "
                f"(N={n_states} from initial_state), got shape {transitions.shape}"
            )
        if emissions.ndim != 2 or emissions.shape[0] != n_states:
            raise ValueError(
                f"Emissions should have one row per state (N={n_states}), "
                f"got shape {emissions.shape}"
            )
        if emissions.shape[1] == 0:
            raise ValueError("Emissions should have at least one symbol column")

        if state_labels is None:
            state_labels = [str(i) for i in range(n_states)]
        elif len(state_labels) != n_states:
            raise ValueError(
                f"Expected {n_states} state labels, got {len(state_labels)}"
            )

        self._transitions = transitions
        self._emissions = emissions
        self._initial_state = initial_state
        self._state_labels = tuple(str(label) for label in state_labels)

    @property
    def transitions(self) -> np.ndarray:
        return self._transitions

    @property
    def emissions(self) -> np.ndarray:
        return self._emissions

    @property
    def initial_state(self) -> np.ndarray:
        return self._initial_state

    @property
    def state_labels(self) -> Tuple[str, ...]:
        return self._state_labels

    @property
    def n_states(self) -> int:
        return self._initial_state.shape[0]

    @property
    def n_symbols(self) -> int:
        """Size of the emission alphabet (M)."""
        return self._emissions.shape[1]

    @classmethod
    def from_probabilities(cls, transitions, emissions, initial_state,
                           state_labels: Optional[Sequence[str]] = None) -> 'HMM':
        """Build a model from plain probabilities (zeros become -inf)."""
        with np.errstate(divide='ignore'):
            return cls(
                np.log(np.asarray(transitions, dtype=np.float64)),
                np.log(np.asarray(emissions, dtype=np.float64)),
                np.log(np.asarray(initial_state, dtype=np.float64)),
                state_labels=state_labels,
            )

    def decode(self, observations, backend: Optional[str] = None) -> Tuple[np.ndarray, float]:
        """
        Most likely state path and its joint log probability.

        Args:
            observations: 1-based symbol IDs
            backend: 'numba' (default) or 'numpy'

        Returns:
            path: 0-based state indices, shape (T,)
            log_prob: log P(path, observations)
        """
        return viterbi_with_score(self, observations, backend=backend)

    def predict(self, observations, backend: Optional[str] = None) -> np.ndarray:
        """Most likely state path for 1-based observations."""
        return viterbi(self, observations, backend=backend)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize model to dictionary (log space)."""
        return {
            'n_states': self.n_states,
            'n_symbols': self.n_symbols,
            'transitions': self._transitions.tolist(),
            'emissions': self._emissions.tolist(),
            'initial_state': self._initial_state.tolist(),
            'state_labels': list(self._state_labels),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'HMM':
        """Deserialize model from dictionary (log space)."""
        return cls(
            np.array(d['transitions'], dtype=np.float64),
            np.array(d['emissions'], dtype=np.float64),
            np.array(d['initial_state'], dtype=np.float64),
            state_labels=d.get('state_labels'),
        )

    def __repr__(self) -> str:
        return f"HMM(n_states={self.n_states}, n_symbols={self.n_symbols})"


def _frozen(values) -> np.ndarray:
    """Private float64 copy that cannot be written to."""
    arr = np.array(values, dtype=np.float64)
    arr.setflags(write=False)
    return arr


# =============================================================================
# Viterbi decoding
# =============================================================================

def observation_columns(hmm: HMM, observations) -> np.ndarray:
    """
    Convert 1-based symbol IDs to 0-based emission columns.

    Raises:
        ValueError: If the sequence is empty or not integer-valued
        IndexError: If any symbol falls outside [1, n_symbols]
    """
    obs = np.asarray(observations).flatten()
    if obs.size == 0:
        raise ValueError("Cannot decode an empty observation sequence")

    if not np.issubdtype(obs.dtype, np.integer):
        if (not np.issubdtype(obs.dtype, np.floating)
                or not np.all(np.isfinite(obs))
                or not np.all(obs == np.round(obs))):
            raise ValueError(f"Observations must be integer symbol IDs, got dtype {obs.dtype}")
    obs = obs.astype(np.int64)

    bad = np.flatnonzero((obs < 1) | (obs > hmm.n_symbols))
    if bad.size:
        i = int(bad[0])
        raise IndexError(
            f"Observation {obs[i]} at position {i} is outside the emission "
            f"alphabet [1, {hmm.n_symbols}]"
        )

    return obs - 1


def terminal_log_prior(n_states: int) -> np.ndarray:
    """Flat log(1/N) prior used to pick the final state."""
    return np.log(np.full(n_states, 1.0 / n_states))


def viterbi_forward(hmm: HMM, observations,
                    backend: Optional[str] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Run the forward pass and return the (score, backpointer) workspace.

    Both arrays have shape (n_states, T). backpointer[:, 0] is unused.
    """
    forward = _resolve_backend(backend)
    obs_cols = observation_columns(hmm, observations)
    return forward(obs_cols, hmm.initial_state, hmm.transitions, hmm.emissions)


def viterbi_with_score(hmm: HMM, observations,
                       backend: Optional[str] = None) -> Tuple[np.ndarray, float]:
    """
    Viterbi algorithm for the most likely state sequence.

    The final state is chosen under a flat prior over states, independent of
    the model's initial_state; earlier states come from the backpointers.

    Returns:
        path: Most likely state sequence (0-based), shape (T,)
        log_prob: Log probability of the path ending in the chosen state
    """
    score, backpointer = viterbi_forward(hmm, observations, backend=backend)
    n_states, T = score.shape

    end_state = int(argmax_skipnan(score[:, T - 1] + terminal_log_prior(n_states)))

    path = np.empty(T, dtype=np.int64)
    path[T - 1] = end_state
    for t in range(T - 1, 0, -1):
        path[t - 1] = backpointer[path[t], t]

    return path, float(score[end_state, T - 1])


def viterbi(hmm: HMM, observations, backend: Optional[str] = None) -> np.ndarray:
    """Most likely state path (0-based) for 1-based observations."""
    path, _ = viterbi_with_score(hmm, observations, backend=backend)
    return path


def _resolve_backend(backend: Optional[str]):
    if backend is None:
        backend = DEFAULT_BACKEND
    try:
        return _FORWARD_PASSES[backend]
    except KeyError:
        raise ValueError(
            f"Unknown backend {backend!r}; expected one of {', '.join(BACKENDS)}"
        ) from None


# =============================================================================
# NaN-aware reductions
# =============================================================================

def max_skipnan(a, axis: Optional[int] = None):
    """
    Maximum ignoring NaN.

    Raises ValueError if every candidate along the reduced axis is NaN.
    """
    a = np.asarray(a, dtype=np.float64)
    if np.any(np.all(np.isnan(a), axis=axis)):
        raise ValueError("All candidate scores are NaN; no usable path exists")
    return np.nanmax(a, axis=axis)


def argmax_skipnan(a, axis: Optional[int] = None):
    """
    Index of the maximum ignoring NaN; exact ties go to the lowest index.

    Raises ValueError if every candidate along the reduced axis is NaN.
    """
    a = np.asarray(a, dtype=np.float64)
    best = max_skipnan(a, axis=axis)
    if axis is None:
        return int(np.argmax(a == best))
    # NaN never compares equal, so the first finite/inf match wins
    return np.argmax(a == np.expand_dims(best, axis), axis=axis)
