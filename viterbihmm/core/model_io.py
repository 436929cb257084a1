"""
viterbihmm model I/O module

Handles loading and saving HMM models:
- .json: Human-readable, fully portable (the only format used for saving)
- .npz: Numpy archive (supported for loading)

Models are written in log space. Files may declare "space": "prob" to supply
plain probabilities instead; those are converted with HMM.from_probabilities.

Also reads observation sequences from plain text files.
"""

import json
import os
import re
import warnings
from typing import List

import numpy as np

from viterbihmm.core.hmm import HMM


MODEL_TYPE = 'viterbihmm'
FORMAT_VERSION = '1.0'
SPACES = ('log', 'prob')
REQUIRED_KEYS = ('transitions', 'emissions', 'initial_state')


# =============================================================================
# Loading functions
# =============================================================================

def load_model(filepath: str) -> HMM:
    """
    Load a model from file.

    Supports (auto-detected by extension):
    - .json: JSON format
    - .npz: Numpy archive with transitions, emissions, initial_state arrays

    Args:
        filepath: Path to model file

    Returns:
        HMM model instance

    Raises:
        ValueError: For unknown extensions, unknown parameter spaces or
            inconsistent matrix shapes
    """
    if filepath.endswith('.json'):
        return _load_json(filepath)
    if filepath.endswith('.npz'):
        return _load_npz(filepath)
    raise ValueError(f"Unsupported model file extension: {filepath} (expected .json or .npz)")


def _load_json(filepath: str) -> HMM:
    """Load model from JSON format."""
    with open(filepath, 'r') as f:
        data = json.load(f)

    _check_required(data, filepath)

    return _build_model(
        data['transitions'], data['emissions'], data['initial_state'],
        space=data.get('space', 'log'),
        state_labels=data.get('state_labels'),
    )


def _load_npz(filepath: str) -> HMM:
    """Load model from NPZ format."""
    data = np.load(filepath, allow_pickle=False)
    _check_required(data, filepath)

    labels = None
    if 'state_labels' in data:
        labels = [str(label) for label in data['state_labels']]
    space = str(data['space']) if 'space' in data else 'log'

    return _build_model(
        data['transitions'], data['emissions'], data['initial_state'],
        space=space, state_labels=labels,
    )


def _check_required(data, filepath: str):
    """Raise ValueError naming any parameter arrays absent from a model file."""
    missing = [k for k in REQUIRED_KEYS if k not in data]
    if missing:
        raise ValueError(f"Model file {filepath} is missing: {', '.join(missing)}")


def _build_model(transitions, emissions, initial_state, space: str, state_labels) -> HMM:
    if space not in SPACES:
        raise ValueError(f"Unknown parameter space {space!r}; expected one of {', '.join(SPACES)}")

    if space == 'log':
        return HMM(transitions, emissions, initial_state, state_labels=state_labels)

    model = HMM.from_probabilities(transitions, emissions, initial_state,
                                   state_labels=state_labels)
    _warn_if_not_stochastic(np.asarray(transitions, dtype=np.float64), 'transitions')
    _warn_if_not_stochastic(np.asarray(emissions, dtype=np.float64), 'emissions')
    _warn_if_not_stochastic(np.asarray(initial_state, dtype=np.float64)[np.newaxis, :],
                            'initial_state')
    return model


def _warn_if_not_stochastic(probs: np.ndarray, name: str, tol: float = 1e-6):
    """Probability rows are decoded as given, but flag ones that do not sum to 1."""
    row_sums = probs.sum(axis=1)
    if not np.allclose(row_sums, 1.0, atol=tol):
        warnings.warn(f"{name} rows do not sum to 1.0: {row_sums}")


def load_observations(filepath: str) -> List[int]:
    """
    Read 1-based observation symbols from a text file.

    Symbols may be separated by commas and/or whitespace; '#' starts a comment.
    """
    symbols = []
    with open(filepath, 'r') as f:
        for line in f:
            line = line.split('#', 1)[0]
            symbols.extend(parse_observations(line))
    return symbols


def parse_observations(text: str) -> List[int]:
    """Parse a comma/whitespace separated list of integer symbols."""
    tokens = [tok for tok in re.split(r'[,\s]+', text.strip()) if tok]
    try:
        return [int(tok) for tok in tokens]
    except ValueError:
        raise ValueError(f"Observations must be integers, got: {text.strip()!r}") from None


# =============================================================================
# Saving functions (JSON only)
# =============================================================================

def save_model(model: HMM, filepath: str) -> str:
    """
    Save model to file in JSON format (log space).

    If the filepath does not end in .json, the extension is replaced with .json
    and a warning is issued. Impossible events are written as -Infinity.

    Returns:
        The path actually written
    """
    if not filepath.endswith('.json'):
        old_path = filepath
        base, _ = os.path.splitext(filepath)
        filepath = base + '.json'
        warnings.warn(
            f"Only JSON format is supported for saving. "
            f"Saving to '{filepath}' instead of '{old_path}'."
        )

    data = {
        'model_type': MODEL_TYPE,
        'version': FORMAT_VERSION,
        'space': 'log',
    }
    data.update(model.to_dict())

    with open(filepath, 'w') as f:
        json.dump(data, f, indent=2)

    return filepath
