"""Guess selection: pick the guess that leaves the fewest answers behind.

For every word in the guess vocabulary, the remaining possible answers are
partitioned by the feedback they would produce.  Each non-empty cell is
then replayed as a hypothetical constraint, and the guess is charged
``cell size * answers still possible under that constraint``.  The guess
with the smallest total wins; ties go to the earliest guess in vocabulary
order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from candidate_filter import CandidateFilter
from wordle_env import (
    MAX_FEEDBACK_ID,
    GuessFeedback,
    NoPossibleAnswers,
    Word,
    WordTable,
)

log = logging.getLogger(__name__)

# Precomputed offline with the same scoring rule over the full answer list.
OPENING_GUESS = Word("roate")

# Below this many remaining answers, they are logged and reported.
REPORT_THRESHOLD = 100


@dataclass(frozen=True)
class Selection:
    """Outcome of one selection round.

    Attributes
    ----------
    guess : Word
        The word to play next.
    remaining : tuple[Word, ...]
        Answer words still possible before playing *guess*.
    score : int or None
        Total remaining-count cost of *guess*; None when no search ran
        (opening guess, or at most two answers left).
    """

    guess: Word
    remaining: tuple[Word, ...]
    score: int | None = None


class GuessSelector:
    """Search the guess vocabulary for the cheapest next guess.

    Parameters
    ----------
    guess_words : sequence of Word
        Every word that may be played, answers included.
    answer_words : sequence of Word
        Every word that may be the secret.
    opening_guess : Word
        Played whenever no feedback has been accepted yet.
    report_threshold : int
        Remaining answers are reported when fewer than this many are left.
    """

    def __init__(
        self,
        guess_words: Sequence[Word],
        answer_words: Sequence[Word],
        opening_guess: Word = OPENING_GUESS,
        report_threshold: int = REPORT_THRESHOLD,
    ) -> None:
        self.guess_words = tuple(guess_words)
        self.answer_words = tuple(answer_words)
        self._answer_table = WordTable(self.answer_words)
        self.opening_guess = opening_guess
        self.report_threshold = report_threshold

    def score_guess(
        self,
        guess: Word,
        remaining: Sequence[Word] | WordTable,
        candidate_filter: CandidateFilter,
    ) -> int:
        """Total cost of *guess* when *remaining* are the possible answers."""
        table = remaining if isinstance(remaining, WordTable) else WordTable(remaining)
        counts = np.bincount(table.feedback_ids(guess), minlength=MAX_FEEDBACK_ID + 1)

        total = 0
        for feedback_id in np.flatnonzero(counts):
            constraint = GuessFeedback.from_id(guess, int(feedback_id))
            with candidate_filter.hypothesis(constraint):
                still_possible = int(candidate_filter.possible_mask(table).sum())
            total += int(counts[feedback_id]) * still_possible
        return total

    def select(self, candidate_filter: CandidateFilter) -> Selection:
        """Choose the next guess under the feedback in *candidate_filter*.

        The filter is only modified inside balanced hypothesis blocks, so
        its contents are unchanged on return.

        Raises
        ------
        NoPossibleAnswers
            If the accepted feedback rules out every answer word.
        """
        if len(candidate_filter) == 0:
            return Selection(self.opening_guess, self.answer_words)

        remaining = self._answer_table.select(
            candidate_filter.possible_mask(self._answer_table))
        if not remaining:
            raise NoPossibleAnswers(
                "No answer word is consistent with the feedback: "
                + ", ".join(str(c) for c in candidate_filter.constraints)
            )
        if len(remaining) < self.report_threshold:
            log.info(f"{len(remaining)} possible solutions: "
                     + " ".join(w.text for w in remaining))
        else:
            log.info(f"{len(remaining)} possible solutions")

        if len(remaining) <= 2:
            return Selection(remaining[0], tuple(remaining))

        table = WordTable(remaining)
        best_guess = self.guess_words[0]
        least = -1
        for guess in self.guess_words:
            score = self.score_guess(guess, table, candidate_filter)
            if score < least or least < 0:
                least = score
                best_guess = guess
                log.debug(f"New best guess {guess.text} (score {score})")

        log.info(f"Selected {best_guess.text} (score {least})")
        return Selection(best_guess, tuple(remaining), least)

    def select_guess(self, candidate_filter: CandidateFilter) -> Word:
        return self.select(candidate_filter).guess


def select_guess(
    candidate_filter: CandidateFilter,
    guess_words: Sequence[Word],
    answer_words: Sequence[Word],
) -> Word:
    """One-shot form of :meth:`GuessSelector.select_guess`."""
    return GuessSelector(guess_words, answer_words).select_guess(candidate_filter)
