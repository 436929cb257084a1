"""
Bundled example models.

dishonest_casino: a casino switches between a fair die (F) and a loaded die
(L) that rolls a six half of the time. Rolls are 1-based symbols 1..6.
"""

from typing import List, Tuple

import numpy as np

from viterbihmm.core.hmm import HMM


CASINO_ROLLS = [
    3, 1, 5, 1, 1, 6, 2, 4, 6, 4, 4, 6, 6, 4, 4, 2, 4, 5, 3, 1, 1, 3, 2, 1, 6, 3, 1, 1, 6, 4, 1,
    5, 2, 1, 3, 3, 6, 2, 5, 1, 4, 4, 5, 4, 3, 6, 3, 1, 6, 5, 6, 6, 2, 6, 5, 6, 6, 6, 6, 6, 6, 5,
    1, 1, 6, 6, 4, 5, 3, 1, 3, 2, 6, 5, 1, 2, 4,
]


def casino_model() -> HMM:
    """Two-state fair/loaded die model."""
    return HMM.from_probabilities(
        transitions=np.array([[0.95, 0.05], [0.1, 0.9]]),
        emissions=np.array([
            [1 / 6, 1 / 6, 1 / 6, 1 / 6, 1 / 6, 1 / 6],
            [0.1, 0.1, 0.1, 0.1, 0.1, 0.5],
        ]),
        initial_state=np.array([0.5, 0.5]),
        state_labels=['F', 'L'],
    )


def dishonest_casino() -> Tuple[HMM, List[int]]:
    return casino_model(), list(CASINO_ROLLS)


EXAMPLES = {
    'casino': dishonest_casino,
}
