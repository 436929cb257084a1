"""
viterbihmm - most likely hidden-state paths for discrete HMMs,
decoded with the Viterbi algorithm in log space.
"""

__version__ = "1.0.0"

from viterbihmm.core.hmm import HMM, viterbi, viterbi_with_score
from viterbihmm.core.model_io import load_model, save_model, load_observations
