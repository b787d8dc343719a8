#!/usr/bin/env python3
"""Play the solver against answer words and report guess counts."""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path

from candidate_filter import CandidateFilter
from lexicon import DEFAULT_ANSWERS, DEFAULT_GUESSES, load_vocabulary
from selector import GuessSelector
from wordle_env import NoPossibleAnswers, Word, WordleEnv

RESULTS_DIR = Path(__file__).resolve().parent / "results"

# Same guess allowance the interactive solver budgets for.
MAX_GUESSES = 10

log = logging.getLogger(__name__)


def play_game(
    selector: GuessSelector,
    secret: Word,
    max_guesses: int = MAX_GUESSES,
    verbose: bool = False,
) -> dict:
    """Let *selector* play one game against *secret*."""
    env = WordleEnv(list(selector.answer_words), max_guesses=max_guesses)
    env.reset(secret=secret)
    candidate_filter = CandidateFilter()
    steps: list[dict] = []

    if verbose:
        print(f"\n--- Secret: {secret} ---")

    while not env.game_over():
        try:
            selection = selector.select(candidate_filter)
        except NoPossibleAnswers:
            log.warning(f"Abandoning {secret}: no consistent answers left")
            break
        result = env.guess(selection.guess)
        candidate_filter.push(result)
        steps.append({
            "guess": selection.guess.text,
            "feedback": result.to_tokens(),
            "remaining": len(selection.remaining),
        })
        if verbose:
            print(f"  Guess {len(steps)}: {selection.guess}  {result.to_tokens()}  "
                  f"remaining={len(selection.remaining)}")

    if verbose:
        status = "SOLVED" if env.is_solved() else "FAILED"
        print(f"  -> {status} in {len(steps)} guesses")

    return {
        "secret": secret.text,
        "solved": env.is_solved(),
        "num_guesses": len(steps),
        "steps": steps,
    }


def _play_chunk(args) -> list[dict]:
    """Worker: play a chunk of secrets. Module-level for pickling."""
    selector, secrets, max_guesses = args
    return [play_game(selector, s, max_guesses) for s in secrets]


def run_experiment(
    selector: GuessSelector,
    secrets: list[Word],
    max_guesses: int = MAX_GUESSES,
    verbose: bool = False,
    workers: int = 1,
) -> list[dict]:
    """Play every secret; results come back in *secrets* order."""
    if workers <= 1:
        logs = [play_game(selector, s, max_guesses, verbose) for s in secrets]
    else:
        chunks = [secrets[i::workers] for i in range(workers)]
        with ProcessPoolExecutor(max_workers=workers) as pool:
            chunk_logs = list(pool.map(
                _play_chunk, [(selector, c, max_guesses) for c in chunks]))
        # game k went to chunk k % workers, at position k // workers
        logs = [chunk_logs[k % workers][k // workers] for k in range(len(secrets))]

    for i, game in enumerate(logs, 1):
        game["game"] = i
    return logs


def print_experiment_summary(logs: list[dict]) -> None:
    n = len(logs)
    if n == 0:
        print("No games played.")
        return
    solved = sum(1 for g in logs if g["solved"])
    guesses = sorted(g["num_guesses"] for g in logs)
    mean = sum(guesses) / n
    median = (
        guesses[n // 2]
        if n % 2 == 1
        else (guesses[n // 2 - 1] + guesses[n // 2]) / 2
    )
    print(f"\n=== {n} games ===")
    print(f"  Solved: {solved}/{n} ({100 * solved / n:.1f}%)")
    print(f"  Guesses: mean {mean:.2f}, median {median:.1f}, max {guesses[-1]}")


def plot_distribution(logs: list[dict], path: Path | None = None) -> None:
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError:
        print("matplotlib not installed, skipping plot", file=sys.stderr)
        return

    guesses = [g["num_guesses"] for g in logs]
    mx = max(guesses) if guesses else MAX_GUESSES
    bins = list(range(1, mx + 2))

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.hist(guesses, bins=bins, edgecolor="black", align="left")
    ax.set_title("Guess distribution")
    ax.set_xlabel("Guesses")
    ax.set_ylabel("Count")
    fig.tight_layout()

    dest = path or RESULTS_DIR / "experiment.png"
    dest.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(dest, dpi=150)
    plt.close(fig)
    print(f"Plot saved to {dest}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Wordle solver self-play experiment")
    parser.add_argument("--answers", type=str, default=str(DEFAULT_ANSWERS),
                        help="Answer word list")
    parser.add_argument("--guesses", type=str, default=str(DEFAULT_GUESSES),
                        help="Extra guess word list")
    parser.add_argument("--max-guesses", type=int, default=MAX_GUESSES,
                        help=f"Max guesses per game (default: {MAX_GUESSES})")
    parser.add_argument("--num-games", type=int, default=10,
                        help="Number of secrets to play (0 = all answers)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--workers", type=int, default=1, help="Parallel worker processes")
    parser.add_argument("--verbose", action="store_true", help="Print per-game details")
    parser.add_argument("--plot", type=str, default=None, help="Save plot to this path")
    parser.add_argument("--json", type=str, default=None, help="Save results as JSON")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING,
                        format="%(name)s %(levelname)s: %(message)s")

    try:
        vocab = load_vocabulary(args.answers, args.guesses)
    except (OSError, ValueError) as exc:
        print(f"Unable to read word lists: {exc}", file=sys.stderr)
        sys.exit(1)
    print(f"Vocabulary: {len(vocab.answers)} answers, {len(vocab.guess_words)} guesses")

    answers = list(vocab.answer_words)
    if args.num_games and args.num_games < len(answers):
        secrets = random.Random(args.seed).sample(answers, args.num_games)
    else:
        secrets = answers

    selector = GuessSelector(vocab.guess_words, vocab.answer_words)
    logs = run_experiment(
        selector,
        secrets,
        max_guesses=args.max_guesses,
        verbose=args.verbose,
        workers=args.workers,
    )
    print_experiment_summary(logs)

    RESULTS_DIR.mkdir(parents=True, exist_ok=True)
    plot_path = Path(args.plot) if args.plot else RESULTS_DIR / "experiment.png"
    plot_distribution(logs, plot_path)

    json_path = Path(args.json) if args.json else RESULTS_DIR / "experiment.json"
    json_path.parent.mkdir(parents=True, exist_ok=True)
    output = {
        "config": {
            "max_guesses": args.max_guesses,
            "num_games": len(secrets),
            "seed": args.seed,
        },
        "summary": {
            "games": len(logs),
            "solved": sum(1 for g in logs if g["solved"]),
            "solve_rate": round(sum(1 for g in logs if g["solved"]) / len(logs), 4) if logs else 0,
            "mean_guesses": round(sum(g["num_guesses"] for g in logs) / len(logs), 3) if logs else 0,
        },
        "games": logs,
    }
    json_path.write_text(json.dumps(output, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"JSON saved to {json_path}")


if __name__ == "__main__":
    main()
