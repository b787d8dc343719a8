"""Stack of accepted feedback constraints and the possible-answer test."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator

import numpy as np

from wordle_env import GuessFeedback, Word, WordTable


class CandidateFilter:
    """Feedback received so far, applied in stack order.

    A word is a possible answer iff every constraint on the stack is
    consistent with it.  The selector pushes hypothetical constraints
    through :meth:`hypothesis`, which always pops them again.
    """

    def __init__(self, constraints: Iterable[GuessFeedback] = ()) -> None:
        self._constraints: list[GuessFeedback] = list(constraints)

    def push(self, constraint: GuessFeedback) -> None:
        self._constraints.append(constraint)

    def pop(self) -> GuessFeedback:
        if not self._constraints:
            raise IndexError("pop from empty constraint stack")
        return self._constraints.pop()

    @contextmanager
    def hypothesis(self, constraint: GuessFeedback) -> Iterator[CandidateFilter]:
        """Push *constraint* for the duration of a ``with`` block."""
        depth = len(self._constraints)
        self.push(constraint)
        try:
            yield self
        finally:
            del self._constraints[depth:]

    def is_possible(self, word: Word) -> bool:
        for constraint in self._constraints:
            if not constraint.is_consistent_with(word):
                return False
        return True

    def possible_answers(self, words: Iterable[Word]) -> list[Word]:
        """Words still possible, in their original order."""
        return [w for w in words if self.is_possible(w)]

    def count_possible(self, words: Iterable[Word]) -> int:
        return sum(1 for w in words if self.is_possible(w))

    def possible_mask(self, table: WordTable) -> np.ndarray:
        """Row mask of *table* words that satisfy every constraint."""
        mask = np.ones(len(table), dtype=bool)
        for constraint in self._constraints:
            mask &= constraint.consistent_mask(table)
        return mask

    @property
    def constraints(self) -> tuple[GuessFeedback, ...]:
        return tuple(self._constraints)

    def __len__(self) -> int:
        return len(self._constraints)
