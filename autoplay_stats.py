# Headless autopilot benchmark with an optional matplotlib score chart.
from __future__ import annotations

import argparse
from collections import Counter
from dataclasses import replace
import logging
import os

# Keep matplotlib cache local for environments without writable home config.
LOCAL_MPLCONFIG = os.path.join(os.path.dirname(os.path.abspath(__file__)), ".mplconfig")
os.makedirs(LOCAL_MPLCONFIG, exist_ok=True)
os.environ.setdefault("MPLCONFIGDIR", LOCAL_MPLCONFIG)

import matplotlib.pyplot as plt
import numpy as np

try:
    from .autoplayer import AutoPlayer
    from .game_logic import SnakeConfig
    from .utils import EpisodeResult, chunked_mean, run_episode, summarize_scores
except ImportError:
    from autoplayer import AutoPlayer
    from game_logic import SnakeConfig
    from utils import EpisodeResult, chunked_mean, run_episode, summarize_scores


def run_games(cfg: SnakeConfig, games: int, max_ticks: int) -> list[EpisodeResult]:
    """Play `games` autopilot games; seeds are derived from cfg.seed when set."""
    if games <= 0:
        raise ValueError("games must be > 0")

    results: list[EpisodeResult] = []
    autoplayer = AutoPlayer(cfg.autoplay_ms)
    for index in range(games):
        seed = None if cfg.seed is None else cfg.seed + index
        game_cfg = replace(cfg, seed=seed)
        autoplayer.reset()
        results.append(run_episode(game_cfg, max_ticks=max_ticks, autoplayer=autoplayer))
        if (index + 1) % 10 == 0 or index + 1 == games:
            print(f"Game {index + 1}/{games}", end="\r", flush=True)
    print()
    return results


def _print_report(results: list[EpisodeResult]) -> None:
    scores = [float(result.score) for result in results]
    lengths = [float(result.length) for result in results]
    score_stats = summarize_scores(scores)
    length_stats = summarize_scores(lengths)

    print("=" * 52)
    print("AUTOPILOT RESULTS")
    print("=" * 52)
    print(f"{'Metric':<20} {'Score':>15} {'Length':>15}")
    print("-" * 52)
    for key, label in (
        ("mean", "Mean"),
        ("median", "Median"),
        ("max", "Max"),
        ("min", "Min"),
        ("std", "Std dev"),
        ("p25", "25th percentile"),
        ("p75", "75th percentile"),
    ):
        print(f"{label:<20} {score_stats[key]:>15.2f} {length_stats[key]:>15.2f}")
    print("=" * 52)

    reasons = Counter(result.end_reason for result in results)
    specials = sum(result.special_eaten for result in results)
    print("End reasons: " + ", ".join(f"{reason} {count}" for reason, count in sorted(reasons.items())))
    print(f"Special food eaten: {specials} across {len(results)} games")


def plot_scores(scores: list[float], save_path: str | None = None, show: bool = True) -> None:
    fig, (ax_trend, ax_hist) = plt.subplots(1, 2, figsize=(12, 4.5))

    ax_trend.set_title("Score Trend (Average per 10 Games)")
    ax_trend.set_xlabel("Game")
    ax_trend.set_ylabel("Score")
    ax_trend.grid(alpha=0.25)
    x10, mean10 = chunked_mean(scores, chunk_size=10)
    if x10.size > 0:
        ax_trend.plot(x10, mean10, color="#1f77b4", linewidth=2.2, marker="o", markersize=3)

    ax_hist.set_title("Score Distribution")
    ax_hist.set_xlabel("Score")
    ax_hist.set_ylabel("Count")
    ax_hist.grid(alpha=0.2)
    if scores:
        ax_hist.hist(scores, bins=min(30, max(1, len(set(scores)))), color="#44b5a4", alpha=0.85, edgecolor="#17323a")
        mean_all = float(np.mean(scores))
        median_all = float(np.median(scores))
        ax_hist.axvline(mean_all, color="#1f77b4", linestyle="--", linewidth=1.6, label=f"Mean: {mean_all:.1f}")
        ax_hist.axvline(median_all, color="#ff7f0e", linestyle="-", linewidth=1.6, label=f"Median: {median_all:.1f}")
        ax_hist.legend(loc="upper right")

    fig.tight_layout()
    if save_path:
        fig.savefig(save_path)
        print(f"Saved plot to {save_path}")
    if show:
        plt.show()
    plt.close(fig)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Benchmark the Snake autopilot headlessly")
    parser.add_argument("--games", type=int, default=50, help="Number of games to play")
    parser.add_argument("--tile-count", type=int, default=20, help="Board side in tiles")
    parser.add_argument("--max-ticks", type=int, default=5000, help="Tick cap per game")
    parser.add_argument("--lifetime", type=int, default=50, help="Special food lifetime in ticks")
    parser.add_argument("--seed", type=int, default=None, help="Base seed for reproducible runs")
    parser.add_argument("--plot", action="store_true", help="Show a score chart when done")
    parser.add_argument("--save-plot", default=None, help="Write the score chart to this path")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = SnakeConfig(tile_count=args.tile_count, special_food_lifetime=args.lifetime, seed=args.seed)
    except ValueError as exc:
        parser.error(str(exc))

    print(f"Running {args.games} games on a {cfg.tile_count}x{cfg.tile_count} board...")
    results = run_games(cfg, args.games, args.max_ticks)
    _print_report(results)

    if args.plot or args.save_plot:
        plot_scores([float(result.score) for result in results], save_path=args.save_plot, show=args.plot)


if __name__ == "__main__":
    main()
