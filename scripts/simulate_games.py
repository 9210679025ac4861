#!/usr/bin/env python3
"""Play seeded games with the greedy baseline and report how they end."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from random import Random
from statistics import mean

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from klondike.autoplay import play_out
from klondike.deck import shuffled_deck
from klondike.game import initialize_game
from klondike.state import GameStatus


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate Klondike games with the greedy baseline.")
    parser.add_argument("--games", type=int, default=100, help="Number of games to play.")
    parser.add_argument("--seed", type=int, default=0, help="Seed for the shuffles.")
    parser.add_argument("--draw-count", type=int, default=1, choices=[1, 3])
    parser.add_argument("--max-steps", type=int, default=5000, help="Safety cap on actions per game.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    rng = Random(args.seed)
    results = []
    for index in range(args.games):
        state = initialize_game(f"sim-{index}", shuffled_deck(rng))
        results.append(play_out(state, draw_count=args.draw_count, max_steps=args.max_steps))

    won = sum(1 for result in results if result.status is GameStatus.WON)
    lost = sum(1 for result in results if result.status is GameStatus.LOST)
    stuck = sum(1 for result in results if result.stuck)
    win_rate = won / len(results) * 100 if results else 0.0
    print(f"Games played: {len(results)}")
    print(f"Won: {won} ({win_rate:.2f}%)  Lost: {lost}  Stalled: {stuck}")
    if results:
        print(f"Average score: {mean(result.score for result in results):.1f}")
        print(f"Average actions: {mean(result.steps for result in results):.1f}")


if __name__ == "__main__":
    main()
