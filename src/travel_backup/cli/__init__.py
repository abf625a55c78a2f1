"""CLI for exporting and restoring travel journal backups.

Usage:
    travel-backup profiles
    travel-backup info
    travel-backup --profile local init-db
    travel-backup --profile local export --user-id 1
    travel-backup --profile local export --user-id 1 -o backups/me.json
    travel-backup --profile local restore backups/me.json --user-id 2 --clear --yes
    travel-backup validate backups/me.json

Commands:
    profiles  - List available profiles
    info      - Show backup format information
    init-db   - Create missing tables
    export    - Export one user's data to a JSON backup file
    restore   - Restore a backup file into a user's account
    validate  - Check a backup file without touching the database
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Confirm
from rich.table import Table

from travel_backup.backup import (
    BackupError,
    RestoreOptions,
    create_backup,
    get_backup_info,
    restore_from_backup,
    validate_backup,
    verify_backup,
    write_backup,
)
from travel_backup.backup.export import backup_filename
from travel_backup.backup.versions import CURRENT_VERSION, SUPPORTED_VERSIONS
from travel_backup.config import get_settings, load_db_config
from travel_backup.factory import ProfileNotFoundError, get_adapter
from travel_backup.schema import metadata

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


def _default_output_path() -> str:
    try:
        backup_dir = load_db_config().backup_dir
    except FileNotFoundError:
        backup_dir = "backups"
    return str(Path(backup_dir) / backup_filename())


# ============================================================================
# Async command implementations
# ============================================================================


async def _async_init_db(args: argparse.Namespace) -> int:
    """Create missing tables on the selected database.

    Returns:
        0 on success, 1 on failure.
    """
    adapter = await get_adapter(profile_name=args.profile)
    try:
        await adapter.create_schema(metadata)
    finally:
        await adapter.close()

    console.print(
        f"[bold green]v[/bold green] Schema ready ({len(metadata.tables)} tables)"
    )
    return 0


async def _async_export(args: argparse.Namespace) -> int:
    """Export a user's data to a backup file.

    Returns:
        0 on success, 1 on failure.
    """
    adapter = await get_adapter(profile_name=args.profile)
    try:
        document = await create_backup(adapter, args.user_id)
    finally:
        await adapter.close()

    output_path = args.output or _default_output_path()
    path = write_backup(document, output_path, secret=get_settings().secret)

    table = Table(title="Backup Created", show_header=False)
    table.add_column("Key", style="dim")
    table.add_column("Value")
    table.add_row("File", f"[cyan]{path}[/cyan]")
    table.add_row("Version", document.version)
    table.add_row("Trips", str(len(document.trips)))
    table.add_row("Tags", str(len(document.tags)))
    table.add_row("Companions", str(len(document.companions)))
    table.add_row("Signed", "yes" if get_settings().secret else "no")
    console.print(table)
    return 0


async def _async_restore(args: argparse.Namespace) -> int:
    """Restore a backup file into a user's account.

    Returns:
        0 on success, 1 on failure.
    """
    with open(args.backup_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    secret = get_settings().secret
    if secret:
        data, verified = verify_backup(data, secret)
        if verified:
            console.print("[green]Signature verified[/green]")
    elif data.pop("integrity", None) is not None:
        console.print(
            "[yellow]Backup is signed but TRAVEL_BACKUP_SECRET is not set; "
            "signature not checked.[/yellow]"
        )

    options = RestoreOptions(
        clear_existing_data=args.clear,
        import_photos=not args.no_photos,
    )

    if not args.yes:
        console.print(f"This will restore data from: [cyan]{args.backup_path}[/cyan]")
        console.print(f"  Target user: {args.user_id}")
        if options.clear_existing_data:
            console.print("  [bold red]WARNING: existing data will be deleted![/bold red]")
        if not Confirm.ask("Continue?", console=console, default=False):
            console.print("Cancelled.")
            return 0

    adapter = await get_adapter(profile_name=args.profile)
    try:
        result = await restore_from_backup(adapter, args.user_id, data, options)
    finally:
        await adapter.close()

    table = Table(title=result.message, show_header=True, header_style="bold")
    table.add_column("Category", style="dim")
    table.add_column("Count", justify="right")
    for name, count in result.stats.model_dump().items():
        table.add_row(name.replace("_", " "), str(count) if count else "-")
    console.print(table)
    return 0


# ============================================================================
# Sync command wrappers
# ============================================================================


def cmd_profiles(args: argparse.Namespace) -> int:
    """List available profiles from travel-backup.toml.

    Reads only local TOML config -- no database calls.

    Returns:
        0 on success, 1 if the config file is not found.
    """
    try:
        config = load_db_config()
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    current = args.profile or get_settings().db_profile

    table = Table(title="Database Profiles", show_header=True, header_style="bold")
    table.add_column("", width=2)
    table.add_column("Profile")
    table.add_column("Provider")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        marker = "[bold green]*[/bold green]" if name == current else " "
        name_style = "bold cyan" if name == current else ""
        table.add_row(
            marker,
            f"[{name_style}]{name}[/{name_style}]" if name_style else name,
            profile.provider,
            profile.description or "",
        )

    console.print(table)

    if current:
        console.print("\n[bold green]*[/bold green] = current profile")

    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Show backup format information."""
    info = get_backup_info()

    table = Table(title="Backup Format", show_header=False)
    table.add_column("Key", style="dim")
    table.add_column("Value")
    table.add_row("Feature version", info["version"])
    table.add_row("Formats", ", ".join(info["supportedFormats"]))
    table.add_row("Document version", CURRENT_VERSION)
    table.add_row("Restorable versions", ", ".join(SUPPORTED_VERSIONS))
    console.print(table)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a backup file.

    Returns:
        0 when the file is valid, 1 otherwise.
    """
    report = validate_backup(args.backup_path)

    for error in report["errors"]:
        console.print(f"  [red]x[/red] {error}")
    for warning in report["warnings"]:
        console.print(f"  [yellow]![/yellow] {warning}")

    if report["valid"]:
        console.print(
            f"[bold green]v[/bold green] Backup is valid "
            f"({len(report['warnings'])} warnings)"
        )
        return 0

    console.print(f"[bold red]x[/bold red] Backup is invalid ({len(report['errors'])} errors)")
    return 1


def _run(coro_fn):
    """Wrap an async command with ``asyncio.run()`` and error reporting."""

    def command(args: argparse.Namespace) -> int:
        try:
            return asyncio.run(coro_fn(args))
        except (
            BackupError,
            ProfileNotFoundError,
            FileNotFoundError,
            json.JSONDecodeError,
            ValueError,
        ) as e:
            console.print(f"[bold red]x[/bold red] {e}")
            return 1

    command.__doc__ = coro_fn.__doc__
    return command


cmd_init_db = _run(_async_init_db)
cmd_export = _run(_async_export)
cmd_restore = _run(_async_restore)


# ============================================================================
# Main entry point
# ============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Parses command line arguments and dispatches to appropriate handler.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="travel-backup",
        description="Export and restore travel journal backups",
    )
    parser.add_argument(
        "--profile",
        default=None,
        help="Database profile from travel-backup.toml (default: TRAVEL_BACKUP_DB_PROFILE)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show progress logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # profiles command
    p_profiles = subparsers.add_parser("profiles", help="List available profiles")
    p_profiles.set_defaults(func=cmd_profiles)

    # info command
    p_info = subparsers.add_parser("info", help="Show backup format information")
    p_info.set_defaults(func=cmd_info)

    # init-db command
    p_init = subparsers.add_parser("init-db", help="Create missing tables")
    p_init.set_defaults(func=cmd_init_db)

    # export command
    p_export = subparsers.add_parser("export", help="Export a user's data")
    p_export.add_argument("--user-id", type=int, required=True, help="User to export")
    p_export.add_argument(
        "--output",
        "-o",
        default=None,
        help="Output file (default: <backup dir>/travel-life-backup-<date>.json)",
    )
    p_export.set_defaults(func=cmd_export)

    # restore command
    p_restore = subparsers.add_parser("restore", help="Restore a backup file")
    p_restore.add_argument("backup_path", help="Path to backup JSON file")
    p_restore.add_argument(
        "--user-id", type=int, required=True, help="User that receives the data"
    )
    p_restore.add_argument(
        "--clear",
        action="store_true",
        help="Delete the user's existing trips and collections first",
    )
    p_restore.add_argument(
        "--no-photos",
        action="store_true",
        help="Skip photos (and album assignments that need them)",
    )
    p_restore.add_argument(
        "--yes", "-y", action="store_true", help="Skip confirmation prompt"
    )
    p_restore.set_defaults(func=cmd_restore)

    # validate command
    p_validate = subparsers.add_parser("validate", help="Validate a backup file")
    p_validate.add_argument("backup_path", help="Path to backup JSON file")
    p_validate.set_defaults(func=cmd_validate)

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
