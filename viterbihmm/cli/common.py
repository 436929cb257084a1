"""Shared argparse argument factories for viterbihmm CLI tools.

Each function adds a group of related arguments to an ArgumentParser.
Default values can be overridden per-script where needed.
"""

import argparse

from viterbihmm.core.hmm import BACKENDS, DEFAULT_BACKEND
from viterbihmm.examples import EXAMPLES


def add_model_args(parser: argparse.ArgumentParser) -> None:
    """Add model source arguments (-m/--model or --example)."""
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        '-m', '--model',
        help="Path to HMM model (.json or .npz)"
    )
    group.add_argument(
        '--example', choices=sorted(EXAMPLES),
        help="Use a bundled example model and observation sequence"
    )


def add_observation_args(parser: argparse.ArgumentParser) -> None:
    """Add observation source arguments (-s/--observations, -f/--observations-file)."""
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        '-s', '--observations',
        help="1-based observation symbols, comma or space separated (e.g. '3,1,5,6')"
    )
    group.add_argument(
        '-f', '--observations-file',
        help="Text file of 1-based observation symbols"
    )


def add_backend_args(parser: argparse.ArgumentParser,
                     default: str = DEFAULT_BACKEND) -> None:
    """Add --backend argument."""
    parser.add_argument(
        '--backend', choices=list(BACKENDS), default=default,
        help=f"Forward-pass implementation (default: {default})"
    )


def add_verbose_args(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag."""
    parser.add_argument(
        '-v', '--verbose', action='store_true',
        help="Verbose output"
    )


def add_version_args(parser: argparse.ArgumentParser) -> None:
    """Add --version flag."""
    from viterbihmm import __version__
    parser.add_argument(
        '--version', action='version',
        version=f'%(prog)s {__version__}'
    )
