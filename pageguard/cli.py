"""Command-line interface for pageguard."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .adapters import JsonFileSettingsStore
from .editor import EditResult, RuleEditor, protected_pages
from .exceptions import ConfigurationError, PageGuardError, StorageError
from .guard import PageGuard
from .policies import Session
from .providers import MemoryTree


def _split_roles(raw: str | None) -> list[str] | None:
    if not raw:
        return None
    return [role.strip() for role in raw.split(",") if role.strip()]


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--settings",
        required=True,
        type=Path,
        help="JSON settings document holding rules and site config.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output.")


def _load_tree(path: Path) -> MemoryTree:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise StorageError(f"Cannot read tree file {path}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Tree file {path} is not valid JSON") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Tree file {path} must hold a JSON object")
    return MemoryTree.from_mapping(data)


def _run_check(args: argparse.Namespace) -> int:
    tree = _load_tree(args.tree)
    guard = PageGuard(JsonFileSettingsStore(args.settings), tree)
    if args.guest:
        session = Session.guest()
    else:
        session = Session(authenticated=True, roles=_split_roles(args.roles) or ())
    decision = guard.check(tree.get(args.node), session, args.locale)
    protecting = decision.verdict.protecting_id
    sys.stdout.write(f"{decision.action} (protected by: {protecting if protecting else '-'})\n")
    if decision.message:
        sys.stdout.write(decision.message + "\n")
    return 0 if decision.allowed else 1


def _run_list(args: argparse.Namespace) -> int:
    snapshot = JsonFileSettingsStore(args.settings).load()
    rows = protected_pages(snapshot.rules)
    if not rows:
        sys.stdout.write("Currently no individual pages are protected.\n")
        return 0
    header = ("ID", "Children", "Allowed Roles")
    table = [header] + [row.cells() for row in rows]
    widths = [max(len(line[idx]) for line in table) for idx in range(len(header))]
    for line in table:
        sys.stdout.write("  ".join(cell.ljust(width) for cell, width in zip(line, widths)).rstrip())
        sys.stdout.write("\n")
    return 0


def _report(result: EditResult) -> int:
    for warning in result.warnings:
        sys.stderr.write(f"warning: {warning}\n")
    state = "updated" if result.changed else "unchanged"
    sys.stdout.write(f"node {result.node_id}: {state}\n")
    return 0


def _run_protect(args: argparse.Namespace) -> int:
    editor = RuleEditor(JsonFileSettingsStore(args.settings))
    options = {
        "children": args.children,
        "roles": _split_roles(args.roles),
        "message_override": args.message or "",
    }
    return _report(editor.protect(args.node, options))


def _run_unprotect(args: argparse.Namespace) -> int:
    editor = RuleEditor(JsonFileSettingsStore(args.settings))
    return _report(editor.submit(args.node, {"page_protected": False}))


def _run_protect_site(args: argparse.Namespace) -> int:
    editor = RuleEditor(JsonFileSettingsStore(args.settings))
    return _report(editor.protect_site())


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="pageguard")
    subparsers = parser.add_subparsers(dest="command_name", required=True)

    check_parser = subparsers.add_parser("check", help="Resolve access to a node")
    _add_common_flags(check_parser)
    check_parser.add_argument("--tree", required=True, type=Path, help="JSON content tree.")
    check_parser.add_argument("node", type=int)
    check_parser.add_argument("--roles", help="Comma separated roles of a logged in visitor.")
    check_parser.add_argument("--guest", action="store_true", help="Check as a guest.")
    check_parser.add_argument("--locale", default="", help="Locale id; empty for default.")
    check_parser.set_defaults(func=_run_check)

    list_parser = subparsers.add_parser("list", help="List protected pages")
    _add_common_flags(list_parser)
    list_parser.set_defaults(func=_run_list)

    protect_parser = subparsers.add_parser("protect", help="Protect a node")
    _add_common_flags(protect_parser)
    protect_parser.add_argument("node", type=int)
    protect_parser.add_argument("--children", action="store_true", help="Protect descendants.")
    protect_parser.add_argument("--roles", help="Comma separated roles allowed to view.")
    protect_parser.add_argument("--message", help="Message shown on the login challenge.")
    protect_parser.set_defaults(func=_run_protect)

    unprotect_parser = subparsers.add_parser("unprotect", help="Remove protection from a node")
    _add_common_flags(unprotect_parser)
    unprotect_parser.add_argument("node", type=int)
    unprotect_parser.set_defaults(func=_run_unprotect)

    site_parser = subparsers.add_parser("protect-site", help="Protect the whole site")
    _add_common_flags(site_parser)
    site_parser.set_defaults(func=_run_protect_site)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        exit_code = args.func(args)
    except PageGuardError as exc:
        sys.stderr.write(f"error: {exc}\n")
        exit_code = 2
    raise SystemExit(exit_code)


__all__ = ["main"]
