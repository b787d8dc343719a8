"""Word-list loading.

Two plain-text lists are read, one word per line:
  - ``answers.txt``: words that may be the secret
  - ``guesses.txt``: additional words accepted as guesses

Answers are always legal guesses, so the guess vocabulary is the guess
list followed by the answer list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from wordle_env import Word, WordleError

log = logging.getLogger(__name__)

DEFAULT_ANSWERS = Path("answers.txt")
DEFAULT_GUESSES = Path("guesses.txt")


@dataclass(frozen=True)
class Vocabulary:
    """The two word lists a solver works from."""
    guesses: tuple[Word, ...]
    answers: tuple[Word, ...]

    @property
    def guess_words(self) -> tuple[Word, ...]:
        return self.guesses + self.answers

    @property
    def answer_words(self) -> tuple[Word, ...]:
        return self.answers


def load_word_list(path: str | Path) -> list[Word]:
    """Load one word per line, skipping blank lines.

    Lines are stripped and lowercased.  Any invalid line fails the whole
    load with the same error type the :class:`Word` constructor raised,
    prefixed with ``path:line``.
    """
    src = Path(path)
    if not src.exists():
        raise FileNotFoundError(f"Word list not found: {src}")

    words: list[Word] = []
    for lineno, raw in enumerate(src.read_text(encoding="utf-8").splitlines(), 1):
        text = raw.strip().lower()
        if not text:
            continue
        try:
            words.append(Word(text))
        except WordleError as exc:
            raise type(exc)(f"{src}:{lineno}: {exc}") from exc
    log.info(f"Read {len(words)} words from {src}")
    return words


def load_vocabulary(
    answers_path: str | Path = DEFAULT_ANSWERS,
    guesses_path: str | Path = DEFAULT_GUESSES,
) -> Vocabulary:
    answers = load_word_list(answers_path)
    if not answers:
        raise ValueError(f"No answer words found in {answers_path}")
    guesses = load_word_list(guesses_path)
    return Vocabulary(guesses=tuple(guesses), answers=tuple(answers))
