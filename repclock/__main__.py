"""Run a workout in the terminal: python -m repclock [plan.json]."""

import argparse
import logging
import signal
import sys

from PyQt6.QtCore import QCoreApplication

from .settings import load_settings
from .log import setup_logging


log = logging.getLogger("repclock")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repclock",
        description="Workout session timer with exercise and rest tracking.",
    )
    parser.add_argument("plan", nargs="?", help="workout plan JSON file (default: demo circuit)")
    parser.add_argument("--rest", type=int, default=None,
                        help="rest seconds for the demo circuit")
    parser.add_argument("--no-sound", action="store_true", help="disable audio cues")
    parser.add_argument("--no-db", action="store_true", help="do not save workout history")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    return parser


def plan_banner(plan) -> str:
    """One-line summary printed before the workout starts."""
    from .timer.engine import format_time

    return (
        f"RepClock: {plan.name}  ({len(plan)} exercises, {plan.total_sets} sets, "
        f"about {format_time(plan.estimated_duration)})"
    )


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    setup_logging((args.log_level or settings.log_level).upper())

    from .session.plan import PlanError, demo_plan, load_plan

    try:
        if args.plan:
            plan = load_plan(args.plan)
        else:
            plan = demo_plan(args.rest if args.rest is not None else settings.default_rest_seconds)
    except PlanError as exc:
        print(f"repclock: {exc}", file=sys.stderr)
        sys.exit(2)

    app = QCoreApplication(sys.argv)
    app.setApplicationName("RepClock")

    db_enabled = settings.save_history and not args.no_db
    if db_enabled:
        from .database.db import init_db
        init_db()

    sounds = None
    if settings.sound_enabled and not args.no_sound:
        from .audio.sounds import SoundManager
        sounds = SoundManager(volume=settings.sound_volume)

    from .session.controller import WorkoutSessionController
    from .app import TerminalSessionView

    controller = WorkoutSessionController(
        plan,
        sounds=sounds,
        db_enabled=db_enabled,
        rest_warning_seconds=settings.rest_warning_seconds,
    )
    TerminalSessionView(controller, parent=controller)

    # Ctrl+C abandons the workout but still records it
    signal.signal(signal.SIGINT, lambda *_: controller.stop())

    log.info("starting workout %r (%d exercises)", plan.name, len(plan))
    print(plan_banner(plan))
    controller.begin()
    code = app.exec()
    controller.close()
    sys.exit(code)


if __name__ == "__main__":
    main()
