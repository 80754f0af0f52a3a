"""CLI entrypoint for the plasmid browser."""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from plasmid_browser.auth.id_token import identity_from_token
from plasmid_browser.browser import PlasmidBrowser
from plasmid_browser.config.loader import load_config
from plasmid_browser.output.table import (
    format_updated_at,
    render_json,
    render_pager,
    render_summary,
    render_table,
)
from plasmid_browser.query.engine import ALL
from plasmid_browser.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

TOKEN_ENV = "PLASMID_BROWSER_TOKEN"
SIGN_IN_HINT = (
    "Sign in first: pass --token or set PLASMID_BROWSER_TOKEN to the ID token "
    "from your Google account (Workspace or allow-listed Gmail)."
)


class CommandError(Exception):
    """Error reported to the user with an exit code."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


def _resolve_token(args: argparse.Namespace) -> str:
    token = args.token or os.environ.get(TOKEN_ENV, "")
    if not token:
        raise CommandError(SIGN_IN_HINT)
    return token


def _open_browser(args: argparse.Namespace) -> PlasmidBrowser:
    """Load config, sign in and fetch the dataset once."""
    try:
        config = load_config(Path(args.config) if args.config else None)
        browser = PlasmidBrowser.from_config(config)
    except (FileNotFoundError, ValueError) as e:
        raise CommandError(f"Config error: {e}", exit_code=2) from e

    browser.sign_in(_resolve_token(args))
    status = browser.status
    if status.error:
        raise CommandError(status.error)
    return browser


def cmd_search(args: argparse.Namespace) -> None:
    """Search the inventory and print one page."""
    browser = _open_browser(args)
    if args.member:
        browser.set_member(args.member)
    if args.worksheet:
        browser.set_worksheet(args.worksheet)
    browser.set_search(" ".join(args.query or []))
    if args.sort:
        try:
            browser.set_sort_option(args.sort)
        except ValueError as e:
            raise CommandError(str(e), exit_code=2) from e
    browser.set_page(args.page)

    result = browser.query()
    if args.format == "json":
        print(render_json(result))
        return

    updated = format_updated_at(browser.dataset.updated_at)
    if updated:
        print(f"Updated: {updated}")
    print(render_summary(result, browser.status))
    print(render_table(result))
    print(render_pager(result))


def cmd_members(args: argparse.Namespace) -> None:
    """List members in natural order."""
    browser = _open_browser(args)
    dataset = browser.dataset
    options = [m for m in browser.member_options() if m != ALL]
    if not options:
        print("No members.")
        return
    print(f"{'Member':<30} {'Worksheets':<10}")
    print("-" * 41)
    for key in options:
        member = dataset.find_member(key)
        count = len(member.worksheets) if member else 0
        print(f"{key:<30} {count:<10}")


def cmd_worksheets(args: argparse.Namespace) -> None:
    """List worksheet filter options, optionally for one member."""
    browser = _open_browser(args)
    if args.member:
        browser.set_member(args.member)
    for option in browser.worksheet_options():
        print(option)


def cmd_whoami(args: argparse.Namespace) -> None:
    """Show the identity carried by the token."""
    label = identity_from_token(_resolve_token(args))
    print(f"Signed in: {label}" if label else "Signed in: (no email claim in token)")


def _add_token_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--token",
        type=str,
        help=f"ID token from the identity provider (default: ${TOKEN_ENV})",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plasmid-browser",
        description="Search the lab plasmid inventory",
    )
    parser.add_argument("--config", type=str, help="Path to config YAML (default: plasmid_browser.config.yaml)")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level, e.g. INFO or DEBUG (default: warnings only)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # search command
    search_parser = subparsers.add_parser("search", help="Search, filter and sort records")
    search_parser.add_argument("query", nargs="*", help="Search words (all must match)")
    _add_token_argument(search_parser)
    search_parser.add_argument("--member", type=str, help="Member id or name (default: all)")
    search_parser.add_argument("--worksheet", type=str, help="Worksheet name (default: all)")
    search_parser.add_argument(
        "--sort",
        type=str,
        help="Sort option FIELD[:asc|desc] (default: Plasmid_Name:asc)",
    )
    search_parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    search_parser.add_argument(
        "--format",
        type=str,
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )
    search_parser.set_defaults(func=cmd_search)

    # members command
    members_parser = subparsers.add_parser("members", help="List members")
    _add_token_argument(members_parser)
    members_parser.set_defaults(func=cmd_members)

    # worksheets command
    worksheets_parser = subparsers.add_parser("worksheets", help="List worksheet options")
    _add_token_argument(worksheets_parser)
    worksheets_parser.add_argument("--member", type=str, help="Member id or name (default: all)")
    worksheets_parser.set_defaults(func=cmd_worksheets)

    # whoami command
    whoami_parser = subparsers.add_parser("whoami", help="Show the signed-in identity")
    _add_token_argument(whoami_parser)
    whoami_parser.set_defaults(func=cmd_whoami)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.log_level:
        configure_logging(args.log_level)

    try:
        args.func(args)
    except CommandError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except Exception as e:
        logger.error(f"Error running command '{args.command}': {e}", exc_info=True)
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
