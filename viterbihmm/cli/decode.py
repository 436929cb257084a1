#!/usr/bin/env python3
"""
viterbihmm decode CLI entry point.
Decodes the most likely hidden-state path for a sequence of observed symbols.
"""

import sys
import argparse

from viterbihmm.core.model_io import load_model, load_observations, parse_observations
from viterbihmm.examples import EXAMPLES
from viterbihmm.inference.engine import decode_sequence, format_observations, state_runs
from viterbihmm.cli.common import (
    add_model_args, add_observation_args, add_backend_args,
    add_verbose_args, add_version_args,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Decode the most likely hidden-state path of a discrete HMM (Viterbi)',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Output:
  The observation sequence on one line, the decoded state labels on the next.

Examples:
  # Bundled dishonest-casino demo
  viterbihmm-decode --example casino

  # Own model, inline observations
  viterbihmm-decode -m model.json -s "3,1,5,6,6,6"

  # Observations from a file, with state runs
  viterbihmm-decode -m model.json -f rolls.txt --runs
'''
    )

    add_version_args(parser)
    add_model_args(parser)
    add_observation_args(parser)
    add_backend_args(parser)

    parser.add_argument('--runs', action='store_true',
                        help='Also print runs of consecutive states (start, length, label)')
    add_verbose_args(parser)

    return parser


def _load_inputs(args, parser):
    """Resolve the model and observation sequence from parsed arguments."""
    observations = None
    if args.example:
        model, observations = EXAMPLES[args.example]()
    else:
        model = load_model(args.model)

    if args.observations is not None:
        observations = parse_observations(args.observations)
    elif args.observations_file is not None:
        observations = load_observations(args.observations_file)

    if observations is None:
        parser.error("observations are required with --model (use -s or -f)")

    return model, observations


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        model, observations = _load_inputs(args, parser)

        if args.verbose:
            print(f"Model: {model.n_states} states, {model.n_symbols} symbols")
            print(f"  State labels: {', '.join(model.state_labels)}")
            print(f"  Observations: {len(observations)}")
            print(f"  Backend: {args.backend}")

        result = decode_sequence(model, observations, backend=args.backend)
    except (OSError, ValueError, IndexError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_observations(observations))
    print(''.join(result['labels']))

    if args.verbose:
        print(f"Path log probability: {result['log_prob']:.6f}")

    if args.runs:
        starts, sizes, states = state_runs(result['path'])
        for start, size, state in zip(starts, sizes, states):
            print(f"{start}\t{size}\t{model.state_labels[state]}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
