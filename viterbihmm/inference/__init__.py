"""Decoding engine and path interpretation."""

from viterbihmm.inference.engine import (
    decode_sequence,
    label_path,
    format_observations,
    state_runs,
)

__all__ = [
    'decode_sequence',
    'label_path',
    'format_observations',
    'state_runs',
]
