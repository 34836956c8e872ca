"""CLI entrypoints for cdd hooks and project tooling."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from .context import HookContext
from .events import EVENTS
from .hooks import on_notification, on_stop, scope_guard, session_start, statusline
from .hooks.base import load_project
from .io import HOOK_INPUT_TIMEOUT, read_json_input
from .logging import configure_logging, get_logger
from .notify.dispatcher import dispatch
from .progress import PLANNING
from .simple_yaml import parse_scalar
from .stores.project_files import find_cdd_root

logger = get_logger("cli")

HookRunner = Callable[[Optional[Mapping[str, Any]], bool], Any]

_HOOKS: Dict[str, HookRunner] = {
    "session-start": lambda data, verbose: session_start.run(data, verbose=verbose),
    "stop": lambda data, verbose: on_stop.run(data, verbose=verbose),
    "notification": lambda data, verbose: on_notification.run(data, verbose=verbose),
    "scope-guard": lambda data, verbose: scope_guard.run(data, verbose=verbose),
    "statusline": lambda data, verbose: statusline.run(data),
}


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Log diagnostics to stderr.",
    )


def _add_path_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--path",
        default=".",
        help="Project directory containing .cdd/ (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cdd-hooks",
        description="Lifecycle hooks, notifications and status for CDD projects.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("session-start", "SessionStart hook: print project status and announce the session."),
        ("stop", "Stop hook: record the stop and alert notifiers."),
        ("notification", "Notification hook: forward permission and input prompts."),
        ("scope-guard", "PreToolUse hook: warn about writes outside the active module."),
        ("statusline", "Render the status bar line."),
    ):
        hook_parser = subparsers.add_parser(name, help=help_text)
        _add_verbose_option(hook_parser, suppress_default=True)

    dispatch_parser = subparsers.add_parser(
        "dispatch",
        help="Record an event and launch subscribed notifiers.",
    )
    _add_verbose_option(dispatch_parser, suppress_default=True)
    _add_path_option(dispatch_parser)
    dispatch_parser.add_argument(
        "event",
        help=f"Event name ({', '.join(EVENTS)}) or any custom name.",
    )
    dispatch_parser.add_argument(
        "--set",
        dest="fields",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Payload field; may be repeated.",
    )

    status_parser = subparsers.add_parser(
        "status",
        help="Show derived phase, module progress and the last recorded event.",
    )
    _add_verbose_option(status_parser, suppress_default=True)
    _add_path_option(status_parser)
    status_parser.add_argument("--json", action="store_true", help="Emit JSON.")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP status service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_path_option(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address.")
    serve_parser.add_argument("--port", type=int, default=8765, help="Bind port.")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for cdd-hooks commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    verbose = bool(args.verbose)

    if args.command in _HOOKS:
        return _run_hook(args.command, verbose=verbose)

    configure_logging(verbose=verbose)

    if args.command == "dispatch":
        return _dispatch(parser, args)
    if args.command == "status":
        return _status(args)
    if args.command == "serve":  # pragma: no cover - integration path
        from .service.app import run_service

        run_service(args.path, host=args.host, port=args.port)
        return 0
    parser.exit(1, "Unknown command\n")  # pragma: no cover - argparse enforces choices
    return 1


def _run_hook(name: str, *, verbose: bool) -> int:
    """Hooks always succeed so the host tool is never interrupted."""
    try:
        hook_input = read_json_input(timeout=HOOK_INPUT_TIMEOUT)
        _HOOKS[name](hook_input, verbose)
    except Exception:
        logger.exception("%s hook failed", name)
    return 0


def _dispatch(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    cdd_root = find_cdd_root(Path(args.path))
    if cdd_root is None:
        print(f"No .cdd project found in {args.path}", file=sys.stderr)
        return 1
    try:
        payload = _parse_fields(args.fields)
        result = dispatch(args.event, payload, cdd_root)
    except ValueError as exc:
        parser.exit(2, f"cdd-hooks dispatch: {exc}\n")
    written = "snapshot written" if result.snapshot_written else "snapshot NOT written"
    print(
        f"{result.event}: {written}, {len(result.launched)} notifier(s) launched"
        + (f", {len(result.failed)} failed" if result.failed else "")
    )
    return 0


def _status(args: argparse.Namespace) -> int:
    cwd = Path(args.path).resolve()
    view = load_project(HookContext.for_root(find_cdd_root(cwd), cwd=cwd))
    if view is None:
        print(f"No .cdd project found in {args.path}", file=sys.stderr)
        return 1
    report = view.report()
    if args.json:
        print(json.dumps(report, indent=2, default=str))
        return 0

    print(f"Project: {report['project']}")
    print(f"Phase:   {report['phase_label']}")
    if report["modules_total"]:
        active = report["active_module"] or "-"
        print(f"Modules: {report['modules_complete']}/{report['modules_total']} (active: {active})")
    if report["next_command"] and view.state.phase_key == PLANNING:
        print(f"Next:    {report['next_command']}")
    snapshot = report["snapshot"]
    if snapshot:
        print(f"Last:    {snapshot.get('event')} at {snapshot.get('updated_at')}")
    return 0


def _parse_fields(fields: List[str]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for item in fields:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"expected KEY=VALUE, got {item!r}")
        payload[key.strip()] = parse_scalar(value.strip())
    return payload


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
