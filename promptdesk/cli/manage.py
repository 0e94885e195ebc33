"""
Management CLI for PromptDesk.

Usage:
    promptdesk serve
    promptdesk serve --host 127.0.0.1 --port 3456 --reload
    promptdesk init-db
    promptdesk seed
    promptdesk fix-image-paths

Also available as ``python -m promptdesk.cli``.
"""
import argparse
import asyncio
import logging
import sys
from typing import Awaitable, Callable, List, Optional, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.core.config import Settings, get_settings
from promptdesk.core.logging import setup_logging
from promptdesk.database.session import build_engine, build_session_factory, create_schema, unit_of_work
from promptdesk.services.file_storage import FileStorage
from promptdesk.services.image_service import ImageService
from promptdesk.cli.seed import seed_database

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _run_in_session(settings: Settings, work: Callable[[AsyncSession], Awaitable[T]]) -> T:
    """Create the schema if needed, then run ``work`` in one committed transaction."""
    engine = build_engine(settings)
    try:
        await create_schema(engine)
        async with unit_of_work(build_session_factory(engine)) as session:
            return await work(session)
    finally:
        await engine.dispose()


def serve(settings: Settings, host: Optional[str], port: Optional[int], reload: bool) -> None:
    """Run the API with uvicorn on the loopback interface."""
    import uvicorn

    uvicorn.run(
        "promptdesk.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


def init_db(settings: Settings) -> None:
    async def _init() -> None:
        engine = build_engine(settings)
        try:
            await create_schema(engine)
        finally:
            await engine.dispose()

    asyncio.run(_init())
    print(f"Database ready: {settings.database_url}")


def seed(settings: Settings) -> None:
    """Load sample tags, prompts and default settings (safe to repeat)."""
    report = asyncio.run(_run_in_session(settings, seed_database))
    print(
        f"Seeded {report.tags} tag(s), {report.prompts} prompt(s), "
        f"{report.executions} execution(s), {report.settings} setting(s)"
    )


def fix_image_paths(settings: Settings) -> None:
    """Rewrite stored image paths that use backslashes to forward slashes."""
    storage = FileStorage(settings.uploads_dir)
    updated = asyncio.run(
        _run_in_session(settings, lambda session: ImageService(session, storage).fix_paths())
    )
    print(f"Updated {updated} image record(s)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="promptdesk",
        description="Manage the PromptDesk API server and database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start the API on the configured loopback address
  promptdesk serve

  # Create tables and load sample data
  promptdesk init-db
  promptdesk seed

  # Repair image paths written with Windows separators
  promptdesk fix-image-paths
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", help="Bind address (default from settings)")
    serve_parser.add_argument("--port", type=int, help="Port (default from settings)")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    subparsers.add_parser("init-db", help="Create the database schema")
    subparsers.add_parser("seed", help="Load default tags, sample prompts and settings")
    subparsers.add_parser("fix-image-paths", help="Normalize stored image paths to forward slashes")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    settings = get_settings()
    setup_logging(log_level=settings.log_level, log_dir=settings.log_dir, console=False)

    try:
        if args.command == "serve":
            serve(settings, args.host, args.port, args.reload)
        elif args.command == "init-db":
            init_db(settings)
        elif args.command == "seed":
            seed(settings)
        elif args.command == "fix-image-paths":
            fix_image_paths(settings)
        else:
            parser.print_help()
            return 1
    except Exception as e:
        logger.error(f"Command '{args.command}' failed: {e}", exc_info=True)
        print(f"\nError: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
