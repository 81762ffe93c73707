"""Command-line interface for rollbar-tools.

Usage:
    # Items
    rollbar-tools item show 1234 --project backend
    rollbar-tools item resolve 1234
    rollbar-tools items active --limit 10 --env production
    rollbar-tools items recent --since 2024-01-01T00:00:00Z --min-occurrences 5
    rollbar-tools items list --status resolved

    # Configuration
    rollbar-tools config show
    rollbar-tools config setup
    rollbar-tools config use backend
    rollbar-tools config delete backend
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from rollbar_tools.core.exceptions import RollbarError, ValidationError
from rollbar_tools.core.filters import IssueFilters, parse_filter_time
from rollbar_tools.core.models import Item, parse_counter


def _format_timestamp(value: int | None) -> str:
    if value is None:
        return "Unknown"
    return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def _print_json(value: Any) -> None:
    print(json.dumps(value, indent=2, default=str))


def _print_item_row(item: Item) -> None:
    occurrences = item.total_occurrences if item.total_occurrences is not None else "?"
    print(f"  #{item.counter}: {item.title}")
    print(
        f"    Status: {item.status} | Env: {item.environment or '-'} | "
        f"Occurrences: {occurrences} | Last: {_format_timestamp(item.last_occurrence_timestamp)}"
    )


def _filters_from_args(args: argparse.Namespace) -> IssueFilters:
    try:
        return IssueFilters(
            environment=args.env or "",
            status=args.status or "",
            since=parse_filter_time(args.since, "since"),
            until=parse_filter_time(args.until, "until"),
            min_occurrences=args.min_occurrences,
            max_occurrences=args.max_occurrences,
        )
    except PydanticValidationError as e:
        error = e.errors()[0]
        message = error["msg"].removeprefix("Value error, ")
        if error["loc"]:
            field = str(error["loc"][0])
            raise ValidationError(
                f"Invalid --{field.replace('_', '-')}: {message}", field=field
            ) from None
        raise ValidationError(message) from None


def _print_items(items: list[Item], label: str, empty: str) -> None:
    if not items:
        print(empty)
        return

    print(f"Found {len(items)} {label}(s):\n")
    for item in items:
        _print_item_row(item)


# =============================================================================
# Item Commands
# =============================================================================


def cmd_item_show(args: argparse.Namespace) -> int:
    """Show an item with its latest occurrence."""
    from rollbar_tools.rollbar import RollbarItems

    counter = parse_counter(args.counter)

    with RollbarItems(project=args.project) as rollbar:
        detail = rollbar.show(counter)

        if args.json:
            _print_json(rollbar.redact(detail))
            return 0

        item = detail.item
        print(f"Counter:     #{item.counter}")
        print(f"Item ID:     {item.id}")
        print(f"Title:       {item.title}")
        print(f"Status:      {item.status}")
        print(f"Level:       {item.level or 'Unknown'}")
        print(f"Environment: {item.environment or 'Unknown'}")
        if item.total_occurrences is not None:
            print(f"Occurrences: {item.total_occurrences}")
        print(f"Last seen:   {_format_timestamp(item.last_occurrence_timestamp)}")
        print(f"Main error:  {detail.main_error}")
        if detail.instance is None:
            print("Latest:      No occurrences recorded")
        else:
            print(
                f"Latest:      {detail.instance.id} "
                f"at {_format_timestamp(detail.instance.timestamp)}"
            )

    return 0


def cmd_item_resolve(args: argparse.Namespace) -> int:
    """Resolve a counter to an item id."""
    from rollbar_tools.rollbar import RollbarItems

    counter = parse_counter(args.counter)

    with RollbarItems(project=args.project) as rollbar:
        print(rollbar.resolve_item_id(counter))

    return 0


def cmd_items_active(args: argparse.Namespace) -> int:
    """List top active items."""
    from rollbar_tools.rollbar import RollbarItems

    filters = _filters_from_args(args)

    with RollbarItems(project=args.project) as rollbar:
        items = rollbar.list_active_items(limit=args.limit, filters=filters)

        if args.json:
            _print_json(rollbar.redact(items))
            return 0

        _print_items(items, "active item", "No active items")

    return 0


def cmd_items_recent(args: argparse.Namespace) -> int:
    """List the most recently seen active items."""
    from rollbar_tools.rollbar import RollbarItems

    filters = _filters_from_args(args)

    with RollbarItems(project=args.project) as rollbar:
        items = rollbar.recent(limit=args.limit, filters=filters)

        if args.json:
            _print_json(rollbar.redact(items))
            return 0

        _print_items(items, "recent item", "No recent items")

    return 0


def cmd_items_list(args: argparse.Namespace) -> int:
    """List items (first page)."""
    from rollbar_tools.rollbar import RollbarItems

    with RollbarItems(project=args.project) as rollbar:
        items = rollbar.list_items(status=args.status, page=args.page)

        if args.json:
            _print_json(rollbar.redact(items))
            return 0

        _print_items(items, "item", "No items found")

    return 0


# =============================================================================
# Config Commands
# =============================================================================


def cmd_config_show(args: argparse.Namespace) -> int:
    """Show current configuration."""
    from rollbar_tools.rollbar.credentials import get_active_project, get_credentials

    print("Rollbar Tools Configuration")
    print("=" * 40)

    print(f"\nActive project: {get_active_project() or '(not set)'}")
    try:
        creds = get_credentials()
        token = creds.access_token
        print(f"  Token: {'****' + token[-4:] if len(token) > 4 else '****'}")
    except ValueError:
        print("  Token: Not configured")
        print("  Set ROLLBAR_ACCESS_TOKEN or use: rollbar-tools config setup")

    return 0


def cmd_config_setup(args: argparse.Namespace) -> int:
    """Interactive access token setup."""
    import getpass

    from rollbar_tools.rollbar import RollbarItems
    from rollbar_tools.rollbar.credentials import save_credentials

    print("Rollbar Tools - Project Configuration")
    print("=" * 40)
    print("\nYou'll need a project access token with 'read' scope from:")
    print("Rollbar -> Project Settings -> Project Access Tokens\n")

    project = input("Project name: ").strip()
    if not project:
        print("Project name is required", file=sys.stderr)
        return 1

    access_token = getpass.getpass("Access token (hidden): ").strip()
    if not access_token:
        print("Access token is required", file=sys.stderr)
        return 1

    print("\nTesting access token...")
    try:
        with RollbarItems(project=project, access_token=access_token) as rollbar:
            rollbar.list_items(page=1)
        print("Connection successful!")
    except RollbarError as e:
        print(f"Connection failed: {e}", file=sys.stderr)
        return 1

    save_credentials(project, access_token)
    print(f"\nAccess token for '{project}' saved to system keyring.")

    return 0


def cmd_config_use(args: argparse.Namespace) -> int:
    """Switch the active project."""
    from rollbar_tools.rollbar.credentials import get_credentials, set_active_project

    # Fails with ValueError when no token is stored for the project
    get_credentials(project=args.project)
    set_active_project(args.project)
    print(f"Active project: {args.project}")
    return 0


def cmd_config_delete(args: argparse.Namespace) -> int:
    """Remove a project's stored access token."""
    from rollbar_tools.rollbar.credentials import delete_credentials

    delete_credentials(args.project)
    print(f"Removed access token for '{args.project}'")
    return 0


# =============================================================================
# Main Entry Point
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="rollbar-tools",
        description="Read-only Rollbar API tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rollbar-tools item show 1234 --project backend
  rollbar-tools item resolve 1234
  rollbar-tools items active --limit 10
  rollbar-tools items recent --env production --since 1700000000

  rollbar-tools config setup
  rollbar-tools config use backend
        """,
    )
    parser.add_argument("--version", action="version", version="rollbar-tools 0.1.0")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # =========================================================================
    # Item subcommands
    # =========================================================================
    item_parser = subparsers.add_parser("item", help="Single item commands")
    item_sub = item_parser.add_subparsers(dest="item_command", required=True)

    # item show
    item_show = item_sub.add_parser("show", help="Show an item and its latest occurrence")
    item_show.add_argument("counter", help="Item counter (e.g., 1234 or #1234)")
    item_show.add_argument("-p", "--project", help="Project name")
    item_show.add_argument("--json", action="store_true", help="Output JSON")

    # item resolve
    item_resolve = item_sub.add_parser("resolve", help="Resolve a counter to an item id")
    item_resolve.add_argument("counter", help="Item counter")
    item_resolve.add_argument("-p", "--project", help="Project name")

    # =========================================================================
    # Items subcommands
    # =========================================================================
    items_parser = subparsers.add_parser("items", help="Item listing commands")
    items_sub = items_parser.add_subparsers(dest="items_command", required=True)

    # items active / items recent
    items_active = items_sub.add_parser("active", help="Top active items")
    items_recent = items_sub.add_parser("recent", help="Most recently seen active items")
    for listing in (items_active, items_recent):
        listing.add_argument("--limit", type=int, default=10, help="Max results")
        listing.add_argument("-p", "--project", help="Project name")
        listing.add_argument("--json", action="store_true", help="Output JSON")
        listing.add_argument("--env", help="Filter by environment")
        listing.add_argument("--status", help="Filter by status")
        listing.add_argument("--since", help="Last seen at or after (unix seconds or RFC 3339)")
        listing.add_argument("--until", help="Last seen at or before (unix seconds or RFC 3339)")
        listing.add_argument("--min-occurrences", type=int, help="Minimum total occurrences")
        listing.add_argument("--max-occurrences", type=int, help="Maximum total occurrences")

    # items list
    items_list = items_sub.add_parser("list", help="List items (one page)")
    items_list.add_argument("--status", help="Filter by status")
    items_list.add_argument("--page", type=int, default=1, help="Page number")
    items_list.add_argument("-p", "--project", help="Project name")
    items_list.add_argument("--json", action="store_true", help="Output JSON")

    # =========================================================================
    # Config subcommands
    # =========================================================================
    config_parser = subparsers.add_parser("config", help="Configuration commands")
    config_sub = config_parser.add_subparsers(dest="config_command", required=True)

    config_sub.add_parser("show", help="Show current configuration")
    config_sub.add_parser("setup", help="Interactive access token setup")
    config_use = config_sub.add_parser("use", help="Switch the active project")
    config_use.add_argument("project", help="Project name")
    config_delete = config_sub.add_parser("delete", help="Remove a stored access token")
    config_delete.add_argument("project", help="Project name")

    # Parse and dispatch
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "item":
            commands = {
                "show": cmd_item_show,
                "resolve": cmd_item_resolve,
            }
            return commands[args.item_command](args)

        if args.command == "items":
            commands = {
                "active": cmd_items_active,
                "recent": cmd_items_recent,
                "list": cmd_items_list,
            }
            return commands[args.items_command](args)

        if args.command == "config":
            commands = {
                "show": cmd_config_show,
                "setup": cmd_config_setup,
                "use": cmd_config_use,
                "delete": cmd_config_delete,
            }
            return commands[args.config_command](args)

    except RollbarError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
