from __future__ import annotations
import argparse
import logging
from typing import List, Optional

from .config import LevelConfig
from .errors import ConfigurationError


def build_config(args: argparse.Namespace) -> LevelConfig:
    config = LevelConfig(
        width=args.width,
        height=args.height,
        win_condition=args.win,
        travel_time=args.travel_time,
        skip_spawn_on_noop=args.skip_noop_spawn,
    )
    config.validate()
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tilemerge")
    parser.add_argument("--width", type=int, default=4)
    parser.add_argument("--height", type=int, default=4)
    parser.add_argument("--win", type=int, default=2048, help="tile value that wins the game")
    parser.add_argument("--travel-time", type=float, default=0.2, help="seconds a slide animation lasts")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--skip-noop-spawn", action="store_true",
                        help="do not spawn a tile after a move that changed nothing")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    sub = parser.add_subparsers(dest="command")
    play = sub.add_parser("play", help="open the pygame window (default)")
    play.add_argument("--auto", action="store_true", help="start with the random auto-player enabled")

    sim = sub.add_parser("simulate", help="play random games headlessly and print a summary")
    sim.add_argument("--games", type=int, default=100)
    sim.add_argument("--max-steps", type=int, default=10_000)
    sim.add_argument("--no-progress", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        config = build_config(args)
    except ConfigurationError as e:
        parser.error(str(e))

    if args.command == "simulate":
        from .simulate import run_simulation

        seed = args.seed if args.seed is not None else 42
        summary = run_simulation(args.games, config=config, seed=seed,
                                 max_steps=args.max_steps, progress=not args.no_progress)
        print(summary)
        return summary

    # pygame is only imported when a window is wanted
    from .gui_pygame import run_gui
    from .simulate import random_policy

    agent = random_policy(args.seed) if getattr(args, "auto", False) else None
    run_gui(config=config, seed=args.seed, agent=agent)


if __name__ == "__main__":
    main()
