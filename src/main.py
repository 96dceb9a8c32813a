# src/main.py — v1
"""CLI entry point — list, find, resolve and cache commands.

Usage:
    scaffoldkit list [--root DIR ...] [--conflict-strategy fail|skip|override]
    scaffoldkit find <generator> <action> [--root DIR ...]
    scaffoldkit resolve <url> [--base-path DIR]
    scaffoldkit cache info|clear|validate
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from scaffoldkit.config.settings import ConfigurationError, Settings, load_settings
from scaffoldkit.logging.context import set_action_context, set_url_context
from scaffoldkit.logging.logger import setup_logging
from scaffoldkit.namespace.loader import available_actions, load_generators
from scaffoldkit.namespace.models import ConflictStrategy
from scaffoldkit.namespace.template_store import TemplateStore
from scaffoldkit.resolution.manager_factory import create_url_manager
from scaffoldkit.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = load_settings()
    except (ConfigurationError, ValidationError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="scaffoldkit",
        description=f"scaffoldkit v{__version__} - template discovery and resolution",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- list ---
    p_list = subparsers.add_parser("list", help="List generators and their actions")
    _add_namespace_arguments(p_list)
    p_list.set_defaults(func=_cmd_list)

    # --- find ---
    p_find = subparsers.add_parser("find", help="Print the path of an action")
    p_find.add_argument("generator", help="Generator name")
    p_find.add_argument("action", help="Action name")
    _add_namespace_arguments(p_find)
    p_find.set_defaults(func=_cmd_find)

    # --- resolve ---
    p_resolve = subparsers.add_parser("resolve", help="Resolve a template URL")
    p_resolve.add_argument("url", help="Local path, file:// URI or GitHub URL")
    p_resolve.add_argument(
        "--base-path", default=None,
        help="Directory relative local paths are resolved against (default: cwd)",
    )
    p_resolve.set_defaults(func=_cmd_resolve)

    # --- cache ---
    p_cache = subparsers.add_parser("cache", help="Inspect or clear the URL cache")
    p_cache.add_argument("operation", choices=["info", "clear", "validate"])
    p_cache.set_defaults(func=_cmd_cache)

    return parser


def _add_namespace_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-r", "--root", dest="roots", action="append", default=None,
        help="Template root, repeatable, in priority order (default: TEMPLATE_ROOTS)",
    )
    parser.add_argument(
        "--conflict-strategy", choices=[s.value for s in ConflictStrategy], default=None,
        help="How to handle actions defined by several roots (default: CONFLICT_STRATEGY)",
    )


def _load_namespace(args: argparse.Namespace, settings: Settings) -> TemplateStore:
    roots = args.roots or settings.template_roots_list
    strategy = ConflictStrategy(args.conflict_strategy or settings.conflict_strategy)
    return load_generators(roots, strategy)


async def _cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    """Print every generator with its actions."""
    store = _load_namespace(args, settings)
    actions_by_generator = available_actions(store)
    if not actions_by_generator:
        print("No generators found.")
        return 0
    for generator_name, action_names in actions_by_generator.items():
        print(f"{generator_name}: {', '.join(action_names)}")
    return 0


async def _cmd_find(args: argparse.Namespace, settings: Settings) -> int:
    """Print the path of one action."""
    set_action_context(args.generator, args.action)
    store = _load_namespace(args, settings)
    action = store.find_action(args.generator, args.action)
    if action is None:
        logger.error("Unknown action: %s %s", args.generator, args.action)
        return 1
    print(action.path)
    return 0


async def _cmd_resolve(args: argparse.Namespace, settings: Settings) -> int:
    """Resolve a template URL and print where it lives."""
    set_url_context(args.url)
    manager = create_url_manager(settings)
    resolved = await manager.resolve_url(args.url, args.base_path)
    print(f"Resolved {resolved.metadata.url}")
    print(f"  Type:       {resolved.metadata.type}")
    print(f"  Base path:  {resolved.base_path}")
    print(f"  Checksum:   {resolved.metadata.checksum}")
    if resolved.metadata.version:
        print(f"  Version:    {resolved.metadata.version}")
    return 0


async def _cmd_cache(args: argparse.Namespace, settings: Settings) -> int:
    """Administrative cache operations."""
    manager = create_url_manager(settings)

    if args.operation == "clear":
        await manager.clear_cache()
        print(f"Cache cleared: {manager.cache.cache_dir}")
        return 0

    if args.operation == "info":
        info = await manager.get_cache_info()
        print(f"Cache at {manager.cache.cache_dir}:")
        print(f"  Entries:     {info.entry_count}")
        print(f"  Total size:  {info.total_size} bytes")
        print(f"  Oldest:      {info.oldest_entry or '-'}")
        print(f"  Newest:      {info.newest_entry or '-'}")
        return 0

    result = await manager.validate_cache()
    for error in result.errors:
        print(f"ERROR    {error}")
    for warning in result.warnings:
        print(f"WARNING  {warning}")
    print("Cache is valid." if result.valid else "Cache has errors.")
    return 0 if result.valid else 1


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
