# src/main.py — v2
"""CLI entry point: build, watch and verify commands.

Usage:
    lingosite build [--production] [--root DIR] [-v]
    lingosite watch [--production] [--root DIR] [-v]
    lingosite verify [--production] [--root DIR]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from lingosite.config.settings import ConfigurationError, Settings, load_settings
from lingosite.core.errors import WatchSessionError
from lingosite.logging.logger import setup_logging
from lingosite.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    setup_logging(level="DEBUG" if args.verbose else "INFO")
    try:
        settings = _load_settings(args)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    setup_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )

    try:
        return asyncio.run(args.func(args, settings))
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="lingosite",
        description=f"lingosite v{__version__}: multi-locale static site builder",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS,
        help="Enable debug logging",
    )
    common.add_argument(
        "--production", action="store_true", default=None,
        help="Hash, minify and recompress assets into OUTPUT_DIR",
    )
    common.add_argument(
        "--root", type=Path, default=None,
        help="Project root (default: PROJECT_ROOT or the current directory)",
    )

    subparsers = parser.add_subparsers(dest="command")

    p_build = subparsers.add_parser(
        "build", parents=[common], help="Run a one-shot full build",
    )
    p_build.set_defaults(func=_cmd_build)

    p_watch = subparsers.add_parser(
        "watch", parents=[common], help="Build, then rebuild on every change",
    )
    p_watch.set_defaults(func=_cmd_watch)

    p_verify = subparsers.add_parser(
        "verify", parents=[common], help="Check the manifest against the output tree",
    )
    p_verify.set_defaults(func=_cmd_verify)

    return parser


def _load_settings(args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if args.production is not None:
        overrides["production"] = args.production
    if args.root is not None:
        overrides["project_root"] = args.root
    return load_settings(**overrides)


async def _cmd_build(args: argparse.Namespace, settings: Settings) -> int:
    """Execute a full build."""
    from lingosite.pipeline.site_builder import SiteBuilder

    builder = SiteBuilder(settings)
    report = await builder.build()

    print("\nBuild complete:")
    print(f"  Output:    {builder.layout.output}")
    print(f"  Pages:     {len(report.pages_rendered)} rendered, {len(report.pages_skipped)} skipped, {len(report.pages_failed)} failed")
    if report.assets is not None:
        print(f"  Assets:    {report.assets.summary()}")
    print(f"  Issues:    {report.issues.warnings} warnings, {report.issues.errors} errors")
    print(f"  Duration:  {report.duration_ms} ms")
    return 0


async def _cmd_watch(args: argparse.Namespace, settings: Settings) -> int:
    """Execute an initial build, then watch for changes."""
    from lingosite.pipeline.site_builder import SiteBuilder
    from lingosite.watch.orchestrator import WatchOrchestrator
    from lingosite.watch.session import WatchSession

    builder = SiteBuilder(settings)
    report = await builder.build()
    logger.info("Initial build: %s", report.summary())

    orchestrator = WatchOrchestrator(builder)
    session = WatchSession(orchestrator)
    logger.info("Watching for changes... (Ctrl+C to stop)")
    try:
        await session.run()
    except WatchSessionError as exc:
        logger.error("Watch session failed: %s", exc)
        return 1
    return 0


async def _cmd_verify(args: argparse.Namespace, settings: Settings) -> int:
    """Check that every manifest entry exists in the output tree."""
    from lingosite.assets.manifest import load_manifest, missing_outputs

    out = settings.active_output_dir
    manifest_path = out / settings.manifest_file
    try:
        manifest = load_manifest(manifest_path)
    except (OSError, ValueError) as exc:
        logger.error("Cannot read manifest %s: %s", manifest_path, exc)
        return 1

    missing = missing_outputs(manifest, out)
    print(f"\nManifest {manifest_path}: {len(manifest)} entries, {len(missing)} missing")
    for physical in missing:
        print(f"  missing: {physical}")
    return 1 if missing else 0


if __name__ == "__main__":
    sys.exit(main())
