"""Wordle environment: words, feedback codes and a simulated game."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Sequence

import numpy as np


WORD_LENGTH = 5
ALPHABET = "abcdefghijklmnopqrstuvwxyz"


class Feedback(IntEnum):
    """Per-position tile colour, stored in two bits."""
    ABSENT = 0    # letter not in the solution
    PRESENT = 1   # letter in the solution, elsewhere
    EXACT = 2     # letter in this position


# Every position EXACT; bounds the partition table used by the selector.
MAX_FEEDBACK_ID = sum(Feedback.EXACT << (2 * i) for i in range(WORD_LENGTH))

FEEDBACK_TOKENS = {
    "r": Feedback.ABSENT,
    "y": Feedback.PRESENT,
    "g": Feedback.EXACT,
}
_TOKEN_FOR = {v: k for k, v in FEEDBACK_TOKENS.items()}


# ------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------

class WordleError(ValueError):
    """Base class for input conversion errors."""


class InvalidLength(WordleError):
    pass


class InvalidLetter(WordleError):
    pass


class InvalidFeedbackLength(WordleError):
    pass


class InvalidFeedbackSymbol(WordleError):
    pass


class NoPossibleAnswers(WordleError):
    """Accepted feedback rules out every answer word."""


def index_for_letter(letter: str) -> int:
    if len(letter) != 1 or not ("a" <= letter <= "z"):
        raise InvalidLetter(f"Invalid letter {letter!r}")
    return ord(letter) - ord("a")


# ------------------------------------------------------------------
# Word
# ------------------------------------------------------------------

@dataclass(frozen=True, order=True)
class Word:
    """An immutable five-letter word.

    Alongside the letters it keeps, per alphabet letter, a bitmap of the
    positions where that letter occurs, so ``contains_letter`` is a single
    lookup.
    """

    text: str
    _positions: tuple[int, ...] = field(
        init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        if len(self.text) != WORD_LENGTH:
            raise InvalidLength(
                f"Word length ({len(self.text)}) != {WORD_LENGTH}: {self.text!r}"
            )
        positions = [0] * len(ALPHABET)
        for i, letter in enumerate(self.text):
            positions[index_for_letter(letter)] |= 1 << i
        object.__setattr__(self, "_positions", tuple(positions))

    def letter_at(self, position: int) -> str:
        return self.text[position]

    def letter_positions(self, letter: str) -> int:
        """Bitmap of positions holding *letter* (bit i = position i)."""
        return self._positions[index_for_letter(letter)]

    def contains_letter(self, letter: str) -> bool:
        return self._positions[index_for_letter(letter)] != 0

    def __getitem__(self, position: int) -> str:
        return self.text[position]

    def __len__(self) -> int:
        return WORD_LENGTH

    def __str__(self) -> str:
        return self.text


def as_word(word: Word | str) -> Word:
    return word if isinstance(word, Word) else Word(word)


# ------------------------------------------------------------------
# Feedback codes
# ------------------------------------------------------------------

def compute_feedback_id(guess: Word, solution: Word) -> int:
    """Pack the feedback for *guess* against *solution* into one integer.

    Position i occupies bits ``2*i`` and ``2*i + 1``.  A letter that is
    not an exact match is PRESENT whenever the solution contains it
    anywhere; repeated letters are not counted off against each other,
    so a guess with a doubled letter can show more PRESENT tiles than
    the official game would.
    """
    result = 0
    for i in range(WORD_LENGTH):
        letter = guess.text[i]
        if solution.text[i] == letter:
            code = Feedback.EXACT
        elif solution.contains_letter(letter):
            code = Feedback.PRESENT
        else:
            code = Feedback.ABSENT
        result |= code << (2 * i)
    return result


def unpack_feedback_id(feedback_id: int) -> tuple[Feedback, ...]:
    return tuple(
        Feedback((feedback_id >> (2 * i)) & 0x3) for i in range(WORD_LENGTH)
    )


def pack_feedback(feedback: Iterable[Feedback]) -> int:
    result = 0
    for i, code in enumerate(feedback):
        result |= int(code) << (2 * i)
    return result


@dataclass(frozen=True)
class GuessFeedback:
    """An observed guess together with its per-position feedback."""

    guess: Word
    feedback: tuple[Feedback, ...]

    @classmethod
    def from_id(cls, guess: Word | str, feedback_id: int) -> GuessFeedback:
        return cls(as_word(guess), unpack_feedback_id(feedback_id))

    @classmethod
    def parse(cls, guess: Word | str, tokens: str) -> GuessFeedback:
        """Build a constraint from user-entered tokens such as ``"rygrr"``.

        Raises
        ------
        InvalidLength, InvalidLetter
            If *guess* is not a valid word.
        InvalidFeedbackLength
            If *tokens* does not hold exactly one symbol per position.
        InvalidFeedbackSymbol
            If a symbol is not one of ``r``, ``y``, ``g``.
        """
        guess = as_word(guess)
        tokens = tokens.strip().lower()
        if len(tokens) != WORD_LENGTH:
            raise InvalidFeedbackLength(
                f"Feedback length ({len(tokens)}) != {WORD_LENGTH}: {tokens!r}"
            )
        feedback = []
        for token in tokens:
            try:
                feedback.append(FEEDBACK_TOKENS[token])
            except KeyError:
                raise InvalidFeedbackSymbol(
                    f"Invalid feedback symbol {token!r} "
                    f"(expected one of {''.join(FEEDBACK_TOKENS)})"
                ) from None
        return cls(guess, tuple(feedback))

    @property
    def feedback_id(self) -> int:
        return pack_feedback(self.feedback)

    @property
    def is_solved(self) -> bool:
        return all(code == Feedback.EXACT for code in self.feedback)

    def to_tokens(self) -> str:
        return "".join(_TOKEN_FOR[code] for code in self.feedback)

    def is_consistent_with(self, word: Word) -> bool:
        """Could *word* have produced this feedback for this guess?"""
        guess = self.guess.text
        for i, code in enumerate(self.feedback):
            letter = guess[i]
            if code == Feedback.ABSENT:
                if word.contains_letter(letter):
                    return False
            elif code == Feedback.PRESENT:
                if not word.contains_letter(letter) or word.text[i] == letter:
                    return False
            elif word.text[i] != letter:
                return False
        return True

    def consistent_mask(self, table: WordTable) -> np.ndarray:
        """Vectorised :meth:`is_consistent_with` over every row of *table*."""
        mask = np.ones(len(table), dtype=bool)
        for i, code in enumerate(self.feedback):
            idx = index_for_letter(self.guess.text[i])
            has = table.presence[:, idx]
            if code == Feedback.ABSENT:
                mask &= ~has
            elif code == Feedback.PRESENT:
                mask &= has & (table.letters[:, i] != idx)
            else:
                mask &= table.letters[:, i] == idx
        return mask

    def __str__(self) -> str:
        return f"{self.guess} {self.to_tokens()}"


def compute_feedback(guess: Word, solution: Word) -> GuessFeedback:
    return GuessFeedback.from_id(guess, compute_feedback_id(guess, solution))


class WordTable:
    """Column layout of a word list for numpy feedback queries.

    ``letters[r, i]`` is the alphabet index of letter i of word r, and
    ``presence[r, k]`` is true when word r contains alphabet letter k.
    """

    def __init__(self, words: Sequence[Word]) -> None:
        self.words = tuple(words)
        n = len(self.words)
        self.letters = np.array(
            [[index_for_letter(c) for c in w.text] for w in self.words],
            dtype=np.int64,
        ).reshape(n, WORD_LENGTH)
        self.presence = np.zeros((n, len(ALPHABET)), dtype=bool)
        rows = np.repeat(np.arange(n), WORD_LENGTH)
        self.presence[rows, self.letters.ravel()] = True

    def feedback_ids(self, guess: Word) -> np.ndarray:
        """``compute_feedback_id(guess, w)`` for every word w in the table."""
        ids = np.zeros(len(self.words), dtype=np.int64)
        for i, letter in enumerate(guess.text):
            idx = index_for_letter(letter)
            code = np.where(
                self.letters[:, i] == idx,
                int(Feedback.EXACT),
                np.where(self.presence[:, idx], int(Feedback.PRESENT), int(Feedback.ABSENT)),
            ).astype(np.int64)
            ids |= code << (2 * i)
        return ids

    def select(self, mask: np.ndarray) -> list[Word]:
        return [w for w, keep in zip(self.words, mask) if keep]

    def __len__(self) -> int:
        return len(self.words)


# ------------------------------------------------------------------
# Simulated game
# ------------------------------------------------------------------

class WordleEnv:
    """A single simulated game, scored with ``compute_feedback_id``.

    Parameters
    ----------
    answers : list[Word]
        Words the secret may be drawn from.
    max_guesses : int
        Maximum allowed guesses before the game is lost.
    """

    def __init__(self, answers: list[Word], max_guesses: int = 10) -> None:
        if not answers:
            raise ValueError("answers must not be empty")
        self._answers = list(answers)
        self._answer_set = set(self._answers)
        self._max_guesses = max_guesses

        # Game state (set by reset)
        self._secret: Word | None = None
        self._history: list[GuessFeedback] = []
        self._solved = False

    def reset(self, secret: Word | str | None = None) -> None:
        """Start a new game. Random secret if *secret* is None."""
        if secret is not None:
            secret = as_word(secret)
            if secret not in self._answer_set:
                raise ValueError(f"secret {secret.text!r} is not an answer word")
        self._secret = secret if secret is not None else random.choice(self._answers)
        self._history = []
        self._solved = False

    def guess(self, word: Word | str) -> GuessFeedback:
        """Submit a guess and receive its feedback.

        Raises
        ------
        RuntimeError
            If no game is running or the game is over.
        """
        if self._secret is None:
            raise RuntimeError("Call reset() before guessing")
        if self.game_over():
            raise RuntimeError("Game is already over")
        word = as_word(word)
        result = compute_feedback(word, self._secret)
        self._history.append(result)
        if word == self._secret:
            self._solved = True
        return result

    def is_solved(self) -> bool:
        return self._solved

    def remaining_guesses(self) -> int:
        return self._max_guesses - len(self._history)

    def game_over(self) -> bool:
        return self._solved or len(self._history) >= self._max_guesses

    @property
    def history(self) -> list[GuessFeedback]:
        return list(self._history)

    @property
    def secret(self) -> Word:
        """Reveal the secret word (only after game over)."""
        if self._secret is None:
            raise RuntimeError("No game in progress")
        if not self.game_over():
            raise RuntimeError("Game is still in progress")
        return self._secret
