"""
Terminal front end for the leaderboard API.

Usage:
    leaderboard-cli [--base-url URL] list [--filter TEXT] [--asc] [--limit N]
    leaderboard-cli submit SCORE [--name NAME]
    leaderboard-cli edit ID [--name NAME] [--score SCORE] [--yes]
    leaderboard-cli delete ID [--yes]
    leaderboard-cli export [--output FILE] [--filter TEXT] [--asc]
    leaderboard-cli summary
    leaderboard-cli health
"""
import argparse
import asyncio
import sys
from typing import List, Optional

import aiofiles

from ..config import client as client_config
from .api import LeaderboardClient
from .prefs import Preferences
from .session import LeaderboardSession
from .view import export_csv, filter_and_sort, format_table, toggle_sort, top_summary

DB_LABELS = {"mongo": "MongoDB", "memory": "Memory (temp)"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="leaderboard-cli", description="Leaderboard client")
    parser.add_argument("--base-url", default=client_config.API_BASE_URL, help="API base URL")
    parser.add_argument("--prefs", default=None, help="Preferences file path")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="Show the ranked leaderboard")
    p_list.add_argument("--filter", default="", help="Case-insensitive name filter")
    p_list.add_argument("--asc", action="store_true", help="Lowest score first")
    p_list.add_argument("--limit", type=int, default=client_config.LIST_LIMIT)

    p_submit = sub.add_parser("submit", help="Submit a score")
    p_submit.add_argument("score")
    p_submit.add_argument("--name", default=None, help="Display name (defaults to the last one used)")

    p_edit = sub.add_parser("edit", help="Edit an entry")
    p_edit.add_argument("id")
    p_edit.add_argument("--name", default=None)
    p_edit.add_argument("--score", default=None)
    p_edit.add_argument("--yes", action="store_true", help="Skip confirmation")

    p_delete = sub.add_parser("delete", help="Delete an entry")
    p_delete.add_argument("id")
    p_delete.add_argument("--yes", action="store_true", help="Skip confirmation")

    p_export = sub.add_parser("export", help="Export the current view as CSV")
    p_export.add_argument("--output", "-o", default=None, help="File to write (stdout if omitted)")
    p_export.add_argument("--filter", default="")
    p_export.add_argument("--asc", action="store_true")

    sub.add_parser("summary", help="Print the top 3")
    sub.add_parser("health", help="Show which store backs the API")
    return parser


def sort_dir(args: argparse.Namespace, default: str = "desc") -> str:
    return toggle_sort(default) if getattr(args, "asc", False) else default


def prompt_confirm(message: str) -> bool:
    answer = input(f"{message} [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def celebrate(record: dict):
    print(f"*** New top score! {record.get('name')} leads with {record.get('score')} ***")


async def run(args: argparse.Namespace) -> int:
    prefs = Preferences(args.prefs)
    confirm = (lambda _msg: True) if getattr(args, "yes", False) else prompt_confirm
    limit = getattr(args, "limit", None)

    async with LeaderboardClient(args.base_url) as api:
        session = LeaderboardSession(api, on_celebrate=celebrate, on_notice=print, confirm=confirm, limit=limit)
        async with session:
            if args.command == "list":
                print(f"Database: {DB_LABELS.get(session.db_mode, 'unknown')}")
                print(format_table(filter_and_sort(session.scores, args.filter, sort_dir(args))))
            elif args.command == "submit":
                name = args.name or await prefs.get_name()
                if not await session.submit(name, args.score):
                    print(session.error, file=sys.stderr)
                    return 1
                await prefs.set_name(name.strip())
            elif args.command == "edit":
                if not session.start_edit(args.id):
                    print(f"No entry {args.id} in the current top {session.limit}", file=sys.stderr)
                    return 1
                if args.name is not None:
                    session.edit.name = args.name
                if args.score is not None:
                    session.edit.score = args.score
                if not await session.save_edit():
                    if session.error:
                        print(session.error, file=sys.stderr)
                    return 1
            elif args.command == "delete":
                if not await session.delete(args.id):
                    if session.error:
                        print(session.error, file=sys.stderr)
                    return 1
            elif args.command == "export":
                csv_text = export_csv(filter_and_sort(session.scores, args.filter, sort_dir(args)))
                if args.output:
                    async with aiofiles.open(args.output, "w", encoding="utf-8", newline="") as f:
                        await f.write(csv_text)
                    print("Exported CSV")
                else:
                    print(csv_text)
            elif args.command == "summary":
                print(top_summary(session.scores) or "No data")
            elif args.command == "health":
                print(f"Database: {DB_LABELS.get(session.db_mode, 'unknown')}")

            if session.error:
                print(session.error, file=sys.stderr)
                return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
