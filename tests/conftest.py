"""
Shared pytest fixtures for viterbihmm tests.
"""
import pytest
import numpy as np

from viterbihmm.core.hmm import HMM


CASINO_PATH = (
    "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF"
    "LLLLLLLLLLLLLLLLLL"
    "FFFFFFFFFFF"
)


@pytest.fixture
def simple_probs():
    """
    Simple 2-state, 4-symbol model in probability space.
    State 0 prefers high symbols, state 1 prefers low symbols.
    """
    return {
        'transitions': np.array([[0.9, 0.1], [0.1, 0.9]]),
        'emissions': np.array([
            [0.1, 0.2, 0.3, 0.4],
            [0.4, 0.3, 0.2, 0.1],
        ]),
        'initial_state': np.array([0.5, 0.5]),
    }


@pytest.fixture
def simple_model(simple_probs):
    """Log-space model built from simple_probs."""
    return HMM.from_probabilities(**simple_probs)


@pytest.fixture
def simple_observations():
    """1-based observations: low symbols, then high, then low again."""
    return np.array([1, 1, 1, 2, 2, 2, 4, 4, 4, 4, 4, 4, 2, 2, 1, 1, 1])


@pytest.fixture
def casino():
    """Dishonest casino model and its 77 rolls."""
    from viterbihmm.examples import dishonest_casino
    return dishonest_casino()


@pytest.fixture
def three_state_model():
    """3-state, 5-symbol model with an impossible transition."""
    return HMM.from_probabilities(
        transitions=np.array([
            [0.8, 0.2, 0.0],
            [0.1, 0.7, 0.2],
            [0.3, 0.0, 0.7],
        ]),
        emissions=np.array([
            [0.5, 0.2, 0.1, 0.1, 0.1],
            [0.1, 0.1, 0.6, 0.1, 0.1],
            [0.05, 0.05, 0.1, 0.3, 0.5],
        ]),
        initial_state=np.array([0.6, 0.3, 0.1]),
        state_labels=['A', 'B', 'C'],
    )
