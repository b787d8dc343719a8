#!/usr/bin/env python3
"""Interactive solver: suggests a guess, reads the tile colours, repeats.

Feedback is typed one symbol per letter:
  r = grey (letter not in the word)
  y = yellow (letter elsewhere in the word)
  g = green (letter in this position)

Usage:
    python3 solve.py
    python3 solve.py --answers data/answers.txt --guesses data/guesses.txt
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Iterator, TextIO

from candidate_filter import CandidateFilter
from lexicon import DEFAULT_ANSWERS, DEFAULT_GUESSES, load_vocabulary
from selector import GuessSelector, Selection
from wordle_env import GuessFeedback, NoPossibleAnswers, WordleError


def _stdin_lines() -> Iterator[str]:
    while True:
        try:
            yield input()
        except EOFError:
            return


def _read_feedback(guess, lines: Iterator[str], out: TextIO) -> GuessFeedback | None:
    """Prompt until a line parses as feedback for *guess*; None at end of input."""
    while True:
        print("feedback: ", end="", file=out, flush=True)
        line = next(lines, None)
        if line is None:
            return None
        try:
            return GuessFeedback.parse(guess, line)
        except WordleError:
            print("Invalid feedback!", file=out)


def _show(selection: Selection, candidate_filter: CandidateFilter, threshold: int, out: TextIO) -> None:
    if len(candidate_filter) and len(selection.remaining) < threshold:
        print("POSSIBLE SOLUTIONS:", file=out)
        for word in selection.remaining:
            print(word, file=out)
    print(f"guess: {selection.guess}", file=out)


def play(
    selector: GuessSelector,
    lines: Iterable[str],
    out: TextIO | None = None,
    candidate_filter: CandidateFilter | None = None,
) -> int | None:
    """Run one game against a human reporting feedback through *lines*.

    Returns the number of guesses once all-green feedback is entered, or
    None if input runs out first.  Feedback that rules out every answer
    word is dropped again and the same guess is re-prompted.
    """
    if out is None:
        out = sys.stdout
    if candidate_filter is None:
        candidate_filter = CandidateFilter()
    lines = iter(lines)

    selection = selector.select(candidate_filter)
    _show(selection, candidate_filter, selector.report_threshold, out)
    while True:
        constraint = _read_feedback(selection.guess, lines, out)
        if constraint is None:
            return None
        candidate_filter.push(constraint)
        if constraint.is_solved:
            print(f"Solved in {len(candidate_filter)} guesses.", file=out)
            return len(candidate_filter)

        try:
            selection = selector.select(candidate_filter)
        except NoPossibleAnswers:
            candidate_filter.pop()
            print("No answer fits that feedback!", file=out)
            continue
        _show(selection, candidate_filter, selector.report_threshold, out)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Interactive Wordle solver")
    parser.add_argument("--answers", type=str, default=str(DEFAULT_ANSWERS),
                        help=f"Answer word list (default: {DEFAULT_ANSWERS})")
    parser.add_argument("--guesses", type=str, default=str(DEFAULT_GUESSES),
                        help=f"Extra guess word list (default: {DEFAULT_GUESSES})")
    parser.add_argument("--verbose", action="store_true", help="Log search progress")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        vocab = load_vocabulary(args.answers, args.guesses)
    except (OSError, ValueError) as exc:
        print(f"Unable to read word lists: {exc}", file=sys.stderr)
        return 1

    selector = GuessSelector(vocab.guess_words, vocab.answer_words)
    try:
        solved_in = play(selector, _stdin_lines())
    except KeyboardInterrupt:
        print(file=sys.stderr)
        return 1
    return 0 if solved_in is not None else 1


if __name__ == "__main__":
    sys.exit(main())
