from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from .config import get_conflict_scope, get_gesture_config, get_view_config, load_board_config
from .conflicts import ConflictScope, conflicting_pairs
from .logging_utils import configure_logging, pretty
from .projection import project_events
from .scenario import Scenario, load_scenario, replay


def _resolve_project_dir(project_dir: Optional[str]) -> Path:
    return Path(project_dir).expanduser().resolve() if project_dir else Path.cwd().resolve()


def _load(args: argparse.Namespace) -> tuple[Optional[Scenario], dict]:
    config, _ = load_board_config(_resolve_project_dir(args.project_dir))
    scenario, err = load_scenario(Path(args.scenario).expanduser())
    if err or scenario is None:
        sys.stderr.write(f"Invalid scenario: {err}\n")
        return None, config
    return scenario, config


def _scope(args: argparse.Namespace, config: dict) -> ConflictScope:
    if args.scope:
        return ConflictScope(args.scope)
    return get_conflict_scope(config)


def _conflicts(args: argparse.Namespace) -> int:
    scenario, config = _load(args)
    if scenario is None:
        return 1
    column_id = args.column or scenario.column_id
    events = project_events(
        scenario.tasks,
        column_id,
        is_mobile=bool(args.mobile or scenario.mobile),
        scope=_scope(args, config),
    )
    payload = {
        "column": column_id,
        "events": [e.to_dict() for e in events],
        "conflicting_pairs": [list(pair) for pair in conflicting_pairs(scenario.tasks)],
    }
    sys.stdout.write(pretty(payload) + "\n")
    return 0


def _replay(args: argparse.Namespace) -> int:
    scenario, config = _load(args)
    if scenario is None:
        return 1
    result = replay(
        scenario,
        gesture_config=get_gesture_config(config),
        view_config=get_view_config(config),
        scope=_scope(args, config),
    )
    sys.stdout.write(pretty(result) + "\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="schedule-board", description="Inspect calendar conflicts and touch gestures")
    parser.add_argument('--project-dir', default=None, help='Directory holding .schedule_board/config.yaml (default: cwd)')
    parser.add_argument('--log-level', default='WARNING', help='Loguru level for stderr output')
    subparsers = parser.add_subparsers(dest='command', required=True)

    conflicts = subparsers.add_parser('conflicts', help='Project a column and report participant conflicts')
    conflicts.add_argument('scenario')
    conflicts.add_argument('--column', default=None)
    conflicts.add_argument('--scope', default=None, choices=[s.value for s in ConflictScope])
    conflicts.add_argument('--mobile', action='store_true')
    conflicts.set_defaults(func=_conflicts)

    rep = subparsers.add_parser('replay', help='Replay a touch trace through the gesture recognizer')
    rep.add_argument('scenario')
    rep.add_argument('--scope', default=None, choices=[s.value for s in ConflictScope])
    rep.set_defaults(func=_replay)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    handler = getattr(args, 'func', None)
    if handler is None:
        parser.print_help()
        return 1
    return int(handler(args) or 0)


if __name__ == "__main__":
    raise SystemExit(main())
