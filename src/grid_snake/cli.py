"""Command-line tools for Grid Snake."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

import numpy as np

from grid_snake.config import GameConfig
from grid_snake.direction import Direction
from grid_snake.engine import GameEngine, GameOver, Phase
from grid_snake.leaderboard import LeaderboardClient

logger = logging.getLogger(__name__)

_TURN_PROBABILITY = 0.2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grid-snake",
        description="Grid Snake simulation and leaderboard tools.",
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play a headless game with random turns.",
    )
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument("--board-size", type=int, default=None)
    sim_p.add_argument("--max-steps", type=int, default=1_000)
    sim_p.add_argument("--name", type=str, default="sim")

    # --- leaderboard ---
    lb_p = sub.add_parser("leaderboard", help="Print the remote leaderboard.")
    lb_p.add_argument("--url", type=str, default=None)

    # --- submit ---
    submit_p = sub.add_parser("submit", help="Submit a score.")
    submit_p.add_argument("name")
    submit_p.add_argument("score", type=int)
    submit_p.add_argument("--url", type=str, default=None)

    # --- config ---
    cfg_p = sub.add_parser("config", help="Print the effective configuration.")
    cfg_p.add_argument(
        "--output", type=str, default=None,
        help="Also write the configuration to this JSON file.",
    )

    return parser


def _load_config(args: argparse.Namespace) -> GameConfig:
    config = GameConfig.load(args.config) if args.config else GameConfig()
    return GameConfig.from_env(config)


def simulate(
    config: GameConfig, max_steps: int = 1_000, name: str = "sim",
) -> dict:
    """Run one game under a seeded random policy and summarize it."""
    engine = GameEngine(config)
    policy_rng = np.random.default_rng(config.seed)
    directions = list(Direction)
    engine.start(name)

    reason = "max_steps"
    for _ in range(max_steps):
        if policy_rng.random() < _TURN_PROBABILITY:
            engine.change_direction(directions[policy_rng.integers(len(directions))])
        events = engine.step()
        over = [e for e in events if isinstance(e, GameOver)]
        if over:
            reason = over[0].reason
            break

    state = engine.state
    return {
        "player_name": state.player_name,
        "score": state.score,
        "length": len(state.snake),
        "ticks": state.tick,
        "speed_tier": state.speed_tier,
        "interval_ms": state.interval_ms,
        "finished": state.phase == Phase.GAME_OVER,
        "reason": reason,
    }


def _run_simulate(args: argparse.Namespace) -> int:
    config = _load_config(args)
    overrides: dict = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.board_size is not None:
        overrides["board_size"] = args.board_size
    if overrides:
        config = config.with_overrides(**overrides)

    summary = simulate(config, max_steps=args.max_steps, name=args.name)
    print(json.dumps(summary, indent=2))  # noqa: T201
    return 0


def _client(args: argparse.Namespace) -> LeaderboardClient:
    config = _load_config(args)
    url = args.url or config.leaderboard_url
    return LeaderboardClient(url, timeout=config.leaderboard_timeout)


async def _print_leaderboard(client: LeaderboardClient) -> int:
    async with client:
        await client.fetch_leaderboard()
    if not client.entries:
        print("Leaderboard is empty or unavailable.")  # noqa: T201
        return 1
    for rank, entry in client.ranked():
        print(f"{rank:>3}  {entry.player_name:<12} {entry.score}")  # noqa: T201
    return 0


def _run_leaderboard(args: argparse.Namespace) -> int:
    return asyncio.run(_print_leaderboard(_client(args)))


async def _submit(client: LeaderboardClient, name: str, score: int) -> bool:
    async with client:
        return await client.submit_score(name, score)


def _run_submit(args: argparse.Namespace) -> int:
    ok = asyncio.run(_submit(_client(args), args.name, args.score))
    return 0 if ok else 1


def _run_config(args: argparse.Namespace) -> int:
    config = _load_config(args)
    if args.output:
        config.save(args.output)
    print(json.dumps(config.to_dict(), indent=2))  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``grid-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "leaderboard": _run_leaderboard,
        "submit": _run_submit,
        "config": _run_config,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
