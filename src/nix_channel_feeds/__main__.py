# ABOUTME: CLI entry point for nix-channel-feeds.
# ABOUTME: Provides subcommands: generate (batch files + index) and serve (on-demand HTTP).

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import structlog

from nix_channel_feeds.config import Settings, get_settings


def configure_logging(settings: Settings) -> None:
    """Configure structlog for console or JSON output."""
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
        )
    else:
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
                structlog.processors.add_log_level,
                structlog.dev.ConsoleRenderer(colors=True),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
        )


def cmd_generate(args: argparse.Namespace, settings: Settings) -> int:
    """Write feeds for every configured channel plus index.html.

    Returns 0 only when every channel was written successfully.
    """
    from nix_channel_feeds.generator import FeedSiteGenerator

    log = structlog.get_logger()

    settings = settings.model_copy(
        update={
            "out_dir": (Path(args.out_dir) if args.out_dir else settings.out_dir).resolve(),
            "dump_feeds": args.dump_feeds or settings.dump_feeds,
        }
    )

    async def _run():
        async with FeedSiteGenerator(settings) as generator:
            return await generator.run(write_index=not args.no_index)

    try:
        results = asyncio.run(_run())
    except OSError:
        log.exception("cmd_generate_failed")
        return 1

    failed = [r for r in results if not r.ok]
    for result in failed:
        print(f"{result.channel}: {result.error}", file=sys.stderr)
    return 1 if failed else 0


def cmd_serve(args: argparse.Namespace, settings: Settings) -> int:
    """Serve feeds on demand over HTTP."""
    import uvicorn

    from nix_channel_feeds.web.app import create_app

    uvicorn.run(create_app(settings), host=args.host, port=args.port)
    return 0


def _add_generate_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-d",
        "--out-dir",
        dest="out_dir",
        default=None,
        help="Where to save the channel feed files (default: ./feeds)",
    )
    parser.add_argument(
        "-dumpFeedDatastructures",
        "--dump-feeds",
        dest="dump_feeds",
        action="store_true",
        help="Log the full feed data structure after each channel is built",
    )
    parser.add_argument(
        "--no-index",
        action="store_true",
        help="Do not write index.html",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="nix-channel-feeds",
        description="RSS, Atom and JSON feeds of nixpkgs channel builds",
    )

    # Flags without a subcommand run generate
    _add_generate_arguments(parser)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Write feeds for all channels and an index page",
    )
    _add_generate_arguments(generate_parser)

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve feeds on demand: /?channel=<name>&format=<rss|atom|json>",
    )
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=6969, help="Port (default: 6969)")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    settings = get_settings()
    configure_logging(settings)

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        return cmd_generate(args, settings)

    commands = {
        "generate": cmd_generate,
        "serve": cmd_serve,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args, settings)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
