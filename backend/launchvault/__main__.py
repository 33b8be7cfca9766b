"""launchvault CLI entry point."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

env_file = Path(__file__).parent.parent / ".env"
load_dotenv(env_file)

from launchvault import __version__
from launchvault.config import get_settings
from launchvault.exceptions import StoreConnectionError
from launchvault.services.spacetrack import SpaceTrackAPIError
from launchvault.storage import sanitize_mongo_url
from launchvault.sync import run_orbit_sync

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


def _init_logfire() -> None:
    """Initialize Logfire if available, without failing commands."""
    try:
        from launchvault.observability import initialize_logfire

        initialize_logfire(get_settings())
    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")


def cmd_config(args: argparse.Namespace) -> int:
    """Display merged configuration."""
    try:
        settings = get_settings()

        print("\n=== launchvault Configuration ===\n")
        print(f"Data Directory: {settings.data_dir}\n")

        print("MongoDB:")
        print(f"  URL: {sanitize_mongo_url(settings.mongo_url)}")
        print(f"  Database: {settings.mongo_database}")
        print(f"  Collection: {settings.mongo_collection}\n")

        print("Query:")
        print(f"  Default Limit: {settings.query.default_limit}")
        print(f"  Max Limit: {settings.query.max_limit}")
        print(f"  Default Sort: {settings.query.default_sort}\n")

        print("Space-Track:")
        print(f"  Base URL: {settings.spacetrack.base_url}")
        print(f"  Epoch Window: {settings.spacetrack.epoch_days} days")
        print(f"  Credentials: {'✓ Set' if settings.has_spacetrack_credentials else '✗ Not set'}\n")

        print("Server:")
        print(f"  Bind: {settings.server.host}:{settings.server.port}\n")

        print(f"Logfire: {'✓ Set' if settings.logfire_token else '✗ Not set'}\n")

        return 0

    except ValidationError as e:
        print("\n❌ Configuration Error:\n")
        for error in e.errors():
            print(f"  • {'.'.join(str(x) for x in error['loc'])}: {error['msg']}")
        print()
        return 1


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the read API under uvicorn."""
    import uvicorn

    _init_logfire()

    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    uvicorn.run(
        "launchvault.api.server:create_app",
        factory=True,
        host=args.host or settings.server.host,
        port=args.port or settings.server.port,
        reload=settings.server.reload,
    )
    return 0


def cmd_sync_orbits(args: argparse.Namespace) -> int:
    """Copy the latest Space-Track elements onto launch payloads."""
    _init_logfire()

    try:
        result = asyncio.run(run_orbit_sync(get_settings()))
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    except StoreConnectionError:
        logger.exception("Failed to connect to MongoDB")
        return 1
    except SpaceTrackAPIError:
        logger.exception("Space-Track login broken")
        return 1

    print(f"{result.identifiers} launch orbits updated!")
    return 0


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="launchvault: launch catalog API and orbit sync",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"launchvault {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_config = subparsers.add_parser(
        "config",
        help="Display merged configuration",
    )
    parser_config.set_defaults(func=cmd_config)

    parser_serve = subparsers.add_parser(
        "serve",
        help="Run the launch read API",
    )
    parser_serve.add_argument("--host", help="Bind address (default from settings)")
    parser_serve.add_argument("--port", type=int, help="Port (default from settings)")
    parser_serve.set_defaults(func=cmd_serve)

    parser_sync = subparsers.add_parser(
        "sync-orbits",
        help="Update payload orbit_params from Space-Track",
    )
    parser_sync.set_defaults(func=cmd_sync_orbits)

    args = parser.parse_args()

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
