"""Command line launcher for headless worm games."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys

from worm_arcade.config import GameConfig
from worm_arcade.log import configure_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="worm-arcade",
        description="Worm Arcade headless simulation and configuration tools.",
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        help="TRACE, DEBUG, INFO, WARNING or ERROR.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Run a game on a virtual clock and print the result.",
    )
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file.",
    )
    sim_p.add_argument("--seconds", type=float, default=5.0)
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument("--fps", type=float, default=None)
    sim_p.add_argument(
        "--keys", type=str, default="0:Space",
        help=(
            "Comma separated FRAME:SYMBOL pairs; each symbol is delivered "
            "after logic frame FRAME (0 means before the first frame)."
        ),
    )

    # --- config ---
    cfg_p = sub.add_parser("config", help="Write a config file.")
    cfg_p.add_argument("output", help="Path of the JSON file to write.")
    cfg_p.add_argument("--scale", type=int, default=None)
    cfg_p.add_argument("--canvas-width", type=int, default=None)
    cfg_p.add_argument("--canvas-height", type=int, default=None)
    cfg_p.add_argument("--fps", type=float, default=None)
    cfg_p.add_argument("--seed", type=int, default=None)

    return parser


def parse_keys(script: str) -> dict[int, list[str]]:
    """Parse ``"0:Space,3:ArrowUp"`` into ``{0: ["Space"], 3: ["ArrowUp"]}``."""
    schedule: dict[int, list[str]] = {}
    for item in filter(None, (part.strip() for part in script.split(","))):
        frame, sep, symbol = item.partition(":")
        if not sep or not symbol:
            raise ValueError(f"Malformed key entry {item!r}; expected FRAME:SYMBOL.")
        schedule.setdefault(int(frame), []).append(symbol)
    return schedule


def _with_overrides(config: GameConfig, overrides: dict) -> GameConfig:
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return dataclasses.replace(config, **overrides) if overrides else config


def _run_simulate(args: argparse.Namespace) -> int:
    from worm_arcade.game import WormGame
    from worm_arcade.scheduler import ManualScheduler
    from worm_arcade.surface import RecordingSurface

    config = GameConfig.load(args.config) if args.config else GameConfig()
    config = _with_overrides(config, {"seed": args.seed, "base_fps": args.fps})
    schedule = parse_keys(args.keys)

    scheduler = ManualScheduler(config.refresh_rate)
    surface = RecordingSurface()
    game = WormGame(surface, config=config, scheduler=scheduler)

    def deliver_keys() -> None:
        for symbol in schedule.pop(game.frame_count, []):
            game.handle_key(symbol)

    deliver_keys()
    game.add_frame_listener(deliver_keys)
    game.start()
    scheduler.advance(args.seconds)
    game.stop()

    result = game.snapshot()
    result["rendered_frames"] = surface.presented
    result["virtual_seconds"] = scheduler.now
    print(json.dumps(result, indent=2))  # noqa: T201
    return 0


def _run_config(args: argparse.Namespace) -> int:
    config = _with_overrides(GameConfig(), {
        "scale": args.scale,
        "canvas_width": args.canvas_width,
        "canvas_height": args.canvas_height,
        "base_fps": args.fps,
        "seed": args.seed,
    })
    config.save(args.output)
    print(f"Wrote config to {args.output}")  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``worm-arcade`` CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "config": _run_config,
    }
    try:
        return handlers[args.command](args)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
