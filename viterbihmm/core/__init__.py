"""Core HMM container, Viterbi decoding and model I/O."""

from viterbihmm.core.hmm import HMM, viterbi, viterbi_with_score, viterbi_forward
from viterbihmm.core.model_io import load_model, save_model, load_observations
