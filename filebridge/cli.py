"""
FileBridge CLI — database bootstrap and command-line access to the operations.

Commands:
- filebridge init           — Create content tables and record tables
- filebridge related-files  — Files related to a parent record (JSON)
- filebridge describe       — Describe a record type (JSON)
- filebridge types          — List registered record types

Record types are discovered by importing ``apps.<name>.records`` for every app
listed in filebridge.yaml.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from filebridge.engine.config import CONFIG_FILE_NAME, PlatformConfig
from filebridge.engine.errors import FileBridgeConfigError, FileBridgeError

logger = logging.getLogger("filebridge.cli")


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="filebridge",
        description="FileBridge — related files and record describe helpers",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config", default=CONFIG_FILE_NAME,
        help=f"Path to {CONFIG_FILE_NAME} (default: {CONFIG_FILE_NAME})",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # filebridge init
    subparsers.add_parser("init", help="Create database tables", parents=[common])

    # filebridge related-files
    rf_parser = subparsers.add_parser(
        "related-files", help="List files related to a parent record", parents=[common]
    )
    rf_parser.add_argument("object_name", help="Record type to filter (e.g., Contact)")
    rf_parser.add_argument("field_name", help="Filter field (e.g., account_id)")
    rf_parser.add_argument("field_value", help="Filter value (e.g., the parent record id)")
    _add_caller_args(rf_parser)

    # filebridge describe
    describe_parser = subparsers.add_parser("describe", help="Describe a record type", parents=[common])
    describe_parser.add_argument("object_name", help="Record type name (e.g., Account)")
    _add_caller_args(describe_parser)

    # filebridge types
    subparsers.add_parser("types", help="List registered record types", parents=[common])

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "init":
        return cmd_init(args)
    elif args.command == "related-files":
        return cmd_related_files(args)
    elif args.command == "describe":
        return cmd_describe(args)
    elif args.command == "types":
        return cmd_types(args)
    else:
        parser.print_help()
        return 0


def _add_caller_args(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("--user", default="cli", help="Username recorded in logs (default: cli)")
    sub.add_argument(
        "--groups",
        help="Comma-separated groups to run as (default: run as system admin)",
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_config(config_path: str) -> PlatformConfig:
    """Load the config and put its directory on sys.path so ``apps.*`` imports."""
    from filebridge.engine.config import load_platform_config

    config = load_platform_config(config_path)
    project_root = str(Path(config_path).resolve().parent)
    if project_root not in sys.path:
        sys.path.insert(0, project_root)
    return config


def _start_runtime(args: argparse.Namespace, create_tables: bool = False):
    from filebridge.engine.runtime import init_runtime

    config = _load_config(args.config)
    runtime = init_runtime(config=config, create_tables=create_tables)
    runtime.startup()
    return runtime


def _caller(args: argparse.Namespace):
    """System admin unless --groups narrows the caller to a basic user."""
    from filebridge.engine.context import ExecutionContext

    if args.groups:
        return ExecutionContext.for_groups(args.user, (g.strip() for g in args.groups.split(",")))
    return ExecutionContext.system(args.user)


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_init(args: argparse.Namespace) -> int:
    """
    Bootstrap the database:
    1. Load config from filebridge.yaml
    2. Import the configured apps' records
    3. Create content tables and one table per record type
    """
    try:
        runtime = _start_runtime(args, create_tables=True)
    except FileBridgeConfigError as e:
        print(f"[ERROR] Failed to load config: {e.message}")
        return 1
    except (FileBridgeError, ImportError) as e:
        print(f"[ERROR] Initialization failed: {e}")
        return 1

    try:
        print(f"[OK] Database ready: {runtime.config.database.url}")
        print(f"[OK] Record tables: {', '.join(sorted(t.name for t in runtime.tables.values())) or '(none)'}")
    finally:
        runtime.shutdown()
    return 0


def cmd_related_files(args: argparse.Namespace) -> int:
    from filebridge.api import get_related_files
    from filebridge.engine.context import caller

    try:
        runtime = _start_runtime(args)
    except (FileBridgeError, ImportError) as e:
        print(f"[ERROR] {e}")
        return 1

    try:
        with caller(_caller(args)):
            _print_json(get_related_files(args.object_name, args.field_name, args.field_value))
    except FileBridgeError as e:
        print(f"[ERROR] {e.error_type}: {e.message}")
        return 1
    finally:
        runtime.shutdown()
    return 0


def cmd_describe(args: argparse.Namespace) -> int:
    from filebridge.api import get_object_describe
    from filebridge.engine.context import caller

    try:
        runtime = _start_runtime(args)
    except (FileBridgeError, ImportError) as e:
        print(f"[ERROR] {e}")
        return 1

    try:
        with caller(_caller(args)):
            _print_json(get_object_describe(args.object_name))
    except FileBridgeError as e:
        print(f"[ERROR] {e.error_type}: {e.message}")
        return 1
    finally:
        runtime.shutdown()
    return 0


def cmd_types(args: argparse.Namespace) -> int:
    from filebridge.engine.registry import object_registry

    try:
        config = _load_config(args.config)
        for app_name in config.apps:
            object_registry.load_app(app_name)
    except (FileBridgeError, ImportError) as e:
        print(f"[ERROR] {e}")
        return 1

    records = sorted(object_registry.get_by_type("record"), key=lambda o: o.object_ref)
    if not records:
        print("No record types registered")
        return 0
    for obj in records:
        meta = obj.metadata
        files = "files" if meta.get("files_enabled") else "-"
        print(f"  {meta.get('name', obj.name):<28} {meta.get('key_prefix') or '---':<4} {files:<6} {obj.object_ref}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
