"""Fingering Planner — command-line entry point.

Reads a JSON note file, plans the fingering and prints one row per note::

    fingering-planner piece.json --difficulty beginner --output-dir out/
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

import pandas as pd

from .annotate import annotate, annotations_frame
from .config import Difficulty, load_config


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fingering-planner",
        description="Assign piano fingers to a note sequence.",
    )
    parser.add_argument("input", help="JSON file with 'notes' and optional 'patterns'")
    parser.add_argument(
        "--difficulty",
        choices=[level.value for level in Difficulty],
        help="Override the difficulty level from the config",
    )
    parser.add_argument("--config", help="Planner config YAML")
    parser.add_argument("--output-dir", help="Write <stem>_fingering.json here")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the planner on one input file.

    Returns:
        Process exit code: 0 on success, 1 on bad input or config.
    """
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        if args.difficulty:
            config = config.with_difficulty(args.difficulty)
        notes, solution = annotate(args.input, output_dir=args.output_dir, config=config)
    except (FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    with pd.option_context("display.max_rows", None, "display.max_colwidth", 80):
        print(annotations_frame(notes, solution).to_string(index=False))
    print(f"Total cost ({config.difficulty.value}): {solution.total_cost:.1f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
