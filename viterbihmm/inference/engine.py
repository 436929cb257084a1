"""viterbihmm decoding engine: decode a sequence and interpret the path."""

import numpy as np
from typing import Optional, Sequence, Tuple, Dict, Any, List

from viterbihmm.core.hmm import HMM, viterbi_with_score


UNKNOWN_LABEL = '?'


def decode_sequence(model: HMM, observations,
                    backend: Optional[str] = None) -> Dict[str, Any]:
    """
    Run Viterbi decoding and attach state labels.

    Args:
        model: HMM with log-space parameters
        observations: 1-based symbol IDs
        backend: 'numba' (default) or 'numpy'

    Returns:
        dict with 'path' (0-based states), 'log_prob' (joint log probability
        of path and observations) and 'labels' (model.state_labels along path)
    """
    path, log_prob = viterbi_with_score(model, observations, backend=backend)
    return {
        'path': path,
        'log_prob': log_prob,
        'labels': label_path(path, model.state_labels),
    }


def label_path(path, labels: Sequence[str]) -> List[str]:
    """Map state indices to labels; indices without a label become '?'."""
    n_labels = len(labels)
    return [labels[s] if 0 <= s < n_labels else UNKNOWN_LABEL for s in np.asarray(path).tolist()]


def format_observations(observations) -> str:
    """Observation symbols concatenated into a single line."""
    return ''.join(str(o) for o in np.asarray(observations).flatten().tolist())


def state_runs(path) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Split a state path into runs of the same state.

    Returns:
        (starts, sizes, states) - one entry per run, in path order
    """
    path = np.asarray(path)
    if len(path) == 0:
        return np.array([], dtype=np.int64), np.array([], dtype=np.int64), np.array([], dtype=np.int64)

    # A run starts at 0 and wherever the state changes
    change = np.flatnonzero(np.diff(path) != 0) + 1
    starts = np.concatenate([[0], change]).astype(np.int64)
    ends = np.concatenate([change, [len(path)]]).astype(np.int64)

    return starts, ends - starts, path[starts].astype(np.int64)
