from itertools import product

import pytest

from wordle_env import (
    MAX_FEEDBACK_ID,
    Feedback,
    GuessFeedback,
    InvalidFeedbackLength,
    InvalidFeedbackSymbol,
    InvalidLength,
    InvalidLetter,
    Word,
    WordleEnv,
    WordTable,
    compute_feedback,
    compute_feedback_id,
)

WORDS = [Word(w) for w in ["apple", "angle", "ample", "sheep", "speed", "eerie", "crane", "llama"]]


# ------------------------------------------------------------------
# Word
# ------------------------------------------------------------------

def test_word_letters_and_presence():
    w = Word("apple")
    assert w.letter_at(0) == "a"
    assert w[4] == "e"
    assert str(w) == "apple"
    assert len(w) == 5
    assert w.contains_letter("p")
    assert not w.contains_letter("z")
    assert w.letter_positions("p") == 0b00110


@pytest.mark.parametrize("text", ["", "appl", "apples"])
def test_word_rejects_wrong_length(text):
    with pytest.raises(InvalidLength):
        Word(text)


@pytest.mark.parametrize("text", ["appl3", "Apple", "ap le"])
def test_word_rejects_letters_outside_alphabet(text):
    with pytest.raises(InvalidLetter):
        Word(text)


def test_contains_letter_rejects_non_letters():
    with pytest.raises(InvalidLetter):
        Word("apple").contains_letter("A")
    with pytest.raises(InvalidLetter):
        Word("apple").contains_letter("?")


def test_word_equality_and_ordering_follow_letters():
    assert Word("apple") == Word("apple")
    assert hash(Word("apple")) == hash(Word("apple"))
    assert Word("angle") < Word("apple")
    assert sorted([Word("crane"), Word("ample")]) == [Word("ample"), Word("crane")]
    assert len({Word("apple"), Word("apple"), Word("ample")}) == 2


# ------------------------------------------------------------------
# Feedback codes
# ------------------------------------------------------------------

def test_max_feedback_id_is_all_exact():
    assert MAX_FEEDBACK_ID == 682
    assert GuessFeedback.from_id("apple", MAX_FEEDBACK_ID).is_solved


@pytest.mark.parametrize("word", WORDS, ids=str)
def test_word_against_itself_is_all_exact(word):
    assert compute_feedback_id(word, word) == MAX_FEEDBACK_ID


def test_positions_are_packed_two_bits_each():
    # only position 0 (PRESENT) or position 4 (EXACT) is non-zero
    assert compute_feedback_id(Word("pzzzz"), Word("apple")) == Feedback.PRESENT
    assert compute_feedback_id(Word("zzzze"), Word("apple")) == Feedback.EXACT << 8


def test_repeated_letters_use_naive_presence_check():
    # s=EXACT h=ABSENT e=EXACT e=EXACT p=PRESENT
    code = compute_feedback_id(Word("sheep"), Word("speed"))
    assert code == 0b01_10_10_00_10 == 418
    assert GuessFeedback.from_id("sheep", code).to_tokens() == "grggy"


def test_repeated_guess_letter_is_reported_present_each_time():
    # "crane" has one e; both leading e's still come back PRESENT
    code = compute_feedback_id(Word("eerie"), Word("crane"))
    assert code == 533
    assert compute_feedback(Word("eerie"), Word("crane")).to_tokens() == "yyyrg"


def test_feedback_is_self_consistent():
    for guess, solution in product(WORDS, repeat=2):
        result = compute_feedback(guess, solution)
        assert result.is_consistent_with(solution), (guess, solution)


def test_from_id_round_trips_packed_code():
    for guess, solution in product(WORDS, repeat=2):
        code = compute_feedback_id(guess, solution)
        assert GuessFeedback.from_id(guess, code).feedback_id == code


@pytest.mark.parametrize("tokens", ["rrrrr", "ggggg", "yyyyy", "ygryg", "grggy"])
def test_parse_round_trips_tokens(tokens):
    assert GuessFeedback.parse("crane", tokens).to_tokens() == tokens


def test_parse_ignores_case_and_surrounding_whitespace():
    result = GuessFeedback.parse(Word("crane"), " GYrrG\n")
    assert result.to_tokens() == "gyrrg"
    assert result.feedback == (
        Feedback.EXACT, Feedback.PRESENT, Feedback.ABSENT, Feedback.ABSENT, Feedback.EXACT,
    )


def test_parse_rejects_bad_input():
    with pytest.raises(InvalidFeedbackLength):
        GuessFeedback.parse("crane", "ryg")
    with pytest.raises(InvalidFeedbackLength):
        GuessFeedback.parse("crane", "rygrgg")
    with pytest.raises(InvalidFeedbackSymbol):
        GuessFeedback.parse("crane", "rygxg")
    with pytest.raises(InvalidLength):
        GuessFeedback.parse("cran", "ryggg")


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        GuessFeedback.parse("crane", "?????")


def test_is_consistent_with_checks_each_branch():
    absent = GuessFeedback.parse("crane", "grrrr")
    assert absent.is_consistent_with(Word("cloud"))
    assert not absent.is_consistent_with(Word("chore"))  # contains r, e

    present = GuessFeedback.parse("apple", "yrrrr")
    assert not present.is_consistent_with(Word("avoid"))  # a in the same spot
    assert not present.is_consistent_with(Word("fizzy"))  # no a at all
    assert not present.is_consistent_with(Word("koala"))  # contains l

    exact = GuessFeedback.parse("apple", "rrrrg")
    assert exact.is_consistent_with(Word("horse"))
    assert not exact.is_consistent_with(Word("hoist"))


# ------------------------------------------------------------------
# WordTable
# ------------------------------------------------------------------

def test_word_table_feedback_ids_match_scalar_code():
    table = WordTable(WORDS)
    for guess in WORDS:
        expected = [compute_feedback_id(guess, solution) for solution in WORDS]
        assert table.feedback_ids(guess).tolist() == expected


def test_word_table_consistency_mask_matches_scalar_check():
    table = WordTable(WORDS)
    for guess, solution in product(WORDS, repeat=2):
        constraint = compute_feedback(guess, solution)
        expected = [constraint.is_consistent_with(w) for w in WORDS]
        assert constraint.consistent_mask(table).tolist() == expected
    assert table.select([w == Word("sheep") for w in WORDS]) == [Word("sheep")]


def test_empty_word_table():
    table = WordTable([])
    assert len(table) == 0
    assert table.feedback_ids(Word("apple")).tolist() == []
    assert GuessFeedback.parse("apple", "rrrrr").consistent_mask(table).tolist() == []


# ------------------------------------------------------------------
# WordleEnv
# ------------------------------------------------------------------

def test_env_plays_a_game():
    env = WordleEnv([Word("apple"), Word("angle")], max_guesses=3)
    env.reset(secret="apple")
    first = env.guess("angle")
    assert first.to_tokens() == "grrgg"
    assert not env.game_over()
    assert env.guess(Word("apple")).is_solved
    assert env.is_solved()
    assert env.secret == Word("apple")
    assert [str(h) for h in env.history] == ["angle grrgg", "apple ggggg"]


def test_env_enforces_rules():
    env = WordleEnv([Word("apple")], max_guesses=1)
    with pytest.raises(RuntimeError):
        env.guess("apple")
    with pytest.raises(ValueError):
        env.reset(secret="crane")
    env.reset()
    with pytest.raises(RuntimeError):
        env.secret
    env.guess("crane")
    assert env.game_over()
    assert env.remaining_guesses() == 0
    with pytest.raises(RuntimeError):
        env.guess("apple")
