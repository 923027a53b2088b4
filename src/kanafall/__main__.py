"""Entry point for `python -m kanafall` or the `kanafall` console script."""

import argparse
import logging
from dataclasses import replace

from kanafall.settings_store import load_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="KanaFall: falling kana typing practice")
    parser.add_argument("--speed", type=int, help="Fall speed, 1 (slow) to 5 (fast)")
    parser.add_argument("--stages", help="Comma-separated stage IDs, e.g. 2,3,4")
    parser.add_argument("--random", action="store_true", default=None, help="Draw stages at random")
    parser.add_argument("--num-stages", type=int, help="Stages per round in random mode")
    parser.add_argument("--no-hands", action="store_true", help="Hide the finger guide")
    parser.add_argument("--scale", type=float, help="Window scale, 0.5 to 2.0")
    parser.add_argument("--soundfont", help="SoundFont (.sf2) used for cue sounds")
    parser.add_argument("--debug", action="store_true", help="Log engine transitions")
    return parser


def settings_from_args(args: argparse.Namespace):
    """Overlay command-line options on the saved settings."""
    settings = load_settings()
    overrides = {}
    if args.speed is not None:
        overrides["speed"] = args.speed
    if args.stages:
        overrides["selected_stages"] = tuple(
            int(s) for s in args.stages.split(",") if s.strip().isdigit()
        )
    if args.random is not None:
        overrides["is_random_mode"] = args.random
    if args.num_stages is not None:
        overrides["num_stages"] = args.num_stages
    if args.no_hands:
        overrides["show_hands"] = False
    if args.scale is not None:
        overrides["window_scale"] = args.scale
    return replace(settings, **overrides).normalized()


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    from kanafall.app import App

    app = App(settings=settings_from_args(args), soundfont=args.soundfont)
    app.run()


if __name__ == "__main__":
    main()
