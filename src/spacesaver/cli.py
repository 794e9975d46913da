#!/usr/bin/env python3
"""
space-saver CLI — find duplicate files and replace them with copy-on-write clones.
Cloning keeps every path in place; only the underlying storage is shared.
Nothing is modified unless `clone-duplicates --real` or `clone-file` is used.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import sys
import time
from typing import List, NoReturn, Optional

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

from spacesaver import __version__
from spacesaver.commands import DeduplicationCommand
from spacesaver.core.errors import InvalidArgumentsError, SpaceSaverError
from spacesaver.core.identity import IdentityCheck, assert_same_file
from spacesaver.core.models import (
    DEFAULT_MIN_SIZE, CloneAction, CloneResult, DedupParams, DedupSummary)
from spacesaver.services.clone_service import CloneService, CopyCloneBackend
from spacesaver.utils.size_spec import SizeSpec, SizeSpecError

logger = logging.getLogger(__name__)

EPILOG_TEXT = """
Examples:
  Report duplicates of 5MiB or more (default) under ~/Photos
  %(prog)s find ~/Photos

  Smaller files too, hashing on 4 threads
  %(prog)s find ~/Photos --min-size 500kb --workers 4

  Show what clone-duplicates would do, then do it
  %(prog)s clone-duplicates ~/Photos
  %(prog)s clone-duplicates ~/Photos --real

  Check whether two paths are the same file on disk
  %(prog)s same-file a.jpg b.jpg
"""

MIN_SIZE_HELP = "Minimum file size, e.g. 4500MiB, 1.5gb, 5mb10kb. Default: %(default)s"


class CLIApplication:
    """Main CLI application controller."""

    REPORT_PATH_WIDTH = 32
    CLONE_PATH_WIDTH = 64

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: int = 0
        self.quiet: bool = False
        self.full_paths: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            reconfigure = getattr(stream, "reconfigure", None)
            if reconfigure:
                reconfigure(encoding="utf-8")

    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="space-saver",
            description="space-saver — find duplicate files and save disk space by cloning them",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )
        parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
        parser.add_argument(
            "--verbose", "-v",
            action="count",
            default=0,
            help="Show statistics and progress (-vv for debug logging)"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Only print the total savings and errors"
        )
        parser.add_argument(
            "--full-paths",
            action="store_true",
            help="Do not shorten long paths in the output"
        )

        subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

        find = subparsers.add_parser(
            "find",
            help="Find duplicate files by comparing sha256 hashes",
            description="Find duplicate files by comparing sha256 hashes. Read-only."
        )
        CLIApplication._add_scan_arguments(find)

        clone_dups = subparsers.add_parser(
            "clone-duplicates",
            help="Replace duplicate files with clones of the oldest copy",
            description="Replace duplicate files with copy-on-write clones of the oldest copy.\n"
                        "Dry run unless --real is given.",
            formatter_class=argparse.RawTextHelpFormatter
        )
        CLIApplication._add_scan_arguments(clone_dups)
        clone_dups.add_argument(
            "--real",
            action="store_true",
            help="Actually replace duplicate files with cloned files"
        )

        clone_file = subparsers.add_parser(
            "clone-file",
            help="Clone an individual file (creates or overwrites DEST_FILE)"
        )
        clone_file.add_argument("source", metavar="SOURCE_FILE")
        clone_file.add_argument("dest", metavar="DEST_FILE")
        clone_file.add_argument(
            "--copy-fallback",
            action="store_true",
            help="Make a plain copy when the filesystem cannot clone"
        )

        same_file = subparsers.add_parser(
            "same-file",
            help="Test if two paths are the same file on disk"
        )
        same_file.add_argument("source", metavar="SOURCE_FILE")
        same_file.add_argument("dest", metavar="DEST_FILE")

        return parser

    @staticmethod
    def _add_scan_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("target_dir", metavar="TARGET_DIR", help="Directory to scan")
        parser.add_argument(
            "--min-size", "-m",
            default=DEFAULT_MIN_SIZE,
            type=str,
            help=MIN_SIZE_HELP
        )
        parser.add_argument(
            "--workers", "-j",
            default=1,
            type=int,
            help="Number of threads used for hashing. Default: %(default)s"
        )
        parser.add_argument(
            "--no-quick-check",
            dest="quick_check",
            action="store_false",
            help="Hash every candidate fully instead of pre-filtering on the first 64KiB"
        )

    @classmethod
    def parse_args(cls, args: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command-line arguments."""
        return cls.build_parser().parse_args(args)

    def create_params(self, args: argparse.Namespace) -> DedupParams:
        """Create DedupParams from CLI arguments."""
        try:
            return DedupParams.from_human_readable(
                root_dir=args.target_dir,
                min_size_str=args.min_size,
                quick_check=args.quick_check,
                workers=args.workers,
            )
        except SizeSpecError as e:
            self.error_exit(f"Invalid size format: {e}")
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def shorten(self, path: str, width: int) -> str:
        """Keep the tail of long paths: the file name is the useful part."""
        if self.full_paths or len(path) <= width:
            return path
        return "..." + path[-(width - 3):]

    def info(self, message: str) -> None:
        if not self.quiet:
            print(message)

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    # =============================
    # Commands
    # =============================

    def cmd_find(self, args: argparse.Namespace) -> None:
        params = self.create_params(args)
        self.info(f"Using min size: {args.min_size}")

        command = DeduplicationCommand()
        groups, stats = command.find_duplicates(
            params,
            progress_callback=self.progress_callback if self.verbose else None
        )
        self._print_stats(stats)

        width = self.REPORT_PATH_WIDTH

        def on_action(action: CloneAction, _result: Optional[CloneResult]) -> None:
            self.info(
                f"{self.shorten(action.target.path, width)} is a duplicate of "
                f"{self.shorten(action.source.path, width)} ({SizeSpec.format(action.target.size)})"
            )

        summary = command.report(groups, on_action=on_action)
        self._print_total(summary)

    def cmd_clone_duplicates(self, args: argparse.Namespace) -> None:
        params = self.create_params(args)
        self.info(f"Using min size: {args.min_size}")

        command = DeduplicationCommand()
        width = self.CLONE_PATH_WIDTH

        def on_action(action: CloneAction, result: Optional[CloneResult]) -> None:
            source = self.shorten(action.source.path, width)
            target = self.shorten(action.target.path, width)
            if result is None:
                self.info(f"[DRY-RUN] Would clone {source} to {target}")
            elif result is CloneResult.SKIPPED:
                self.info(f"Skipped {target} (cloning not supported)")
            else:
                self.info(f"Cloned {source} to {target}")

        summary = command.clone_duplicates(
            params,
            real=args.real,
            on_action=on_action,
            progress_callback=self.progress_callback if self.verbose else None
        )
        self._print_stats(command.stats)
        self._print_total(summary)

    def cmd_clone_file(self, args: argparse.Namespace) -> None:
        if os.path.abspath(args.source) == os.path.abspath(args.dest):
            raise InvalidArgumentsError("SOURCE_FILE and DEST_FILE are the same path")

        width = self.REPORT_PATH_WIDTH
        source = self.shorten(args.source, width)
        dest = self.shorten(args.dest, width)
        fallback = CopyCloneBackend() if args.copy_fallback else None

        self.info(f"Cloning {source} to {dest}")
        result = CloneService(fallback=fallback).clone_file(args.source, args.dest)
        if result is CloneResult.SKIPPED:
            self.warning(f"Cloning {source} to {dest} skipped: not supported by the filesystem")
        elif result is CloneResult.COPIED:
            self.info(f"Cloning {source} to {dest} not supported, copied instead")
        else:
            self.info(f"Cloning {source} to {dest} done!")

    def cmd_same_file(self, args: argparse.Namespace) -> None:
        outcome = assert_same_file(args.source, args.dest)
        if outcome is IdentityCheck.SOURCE_MISSING:
            print("[SOURCE_FILE] is missing")
        elif outcome is IdentityCheck.TARGET_MISSING:
            print("[DEST_FILE] is missing")
        else:
            print("Files are the same!")

    def _print_stats(self, stats) -> None:
        if self.verbose and stats is not None:
            sys.stderr.write("\n")
            print(stats.print_summary(), file=sys.stderr)

    @staticmethod
    def _print_total(summary: DedupSummary) -> None:
        print(f"Total savings: {SizeSpec.format_fraction(summary.possible_bytes)}")
        if summary.real and (summary.skipped or summary.copied):
            print(
                f"Actually reclaimed: {SizeSpec.format_fraction(summary.reclaimed_bytes)} "
                f"({summary.cloned} cloned, {summary.skipped} skipped)"
            )

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point: dispatch to the selected subcommand."""
        parser = self.build_parser()
        args = parser.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.full_paths = args.full_paths

        if self.verbose:
            logging.getLogger().setLevel(logging.DEBUG if self.verbose > 1 else logging.INFO)

        handlers = {
            "find": self.cmd_find,
            "clone-duplicates": self.cmd_clone_duplicates,
            "clone-file": self.cmd_clone_file,
            "same-file": self.cmd_same_file,
        }
        handler = handlers.get(args.command)
        if handler is None:
            parser.print_help()
            return

        try:
            handler(args)
        except SpaceSaverError as e:
            self.error_exit(str(e))

        if self.verbose:
            print(f"\n✅ Completed in {time.time() - self.start_time:.2f} seconds", file=sys.stderr)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
