#!/usr/bin/env python3
"""
treesize CLI — Command line interface for apparent disk usage.
Uses the same core engine as the GUI; prints the size tree down to a given
depth followed by the total, counting hard-linked files once.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from typing import Optional, NoReturn, List, Tuple
import logging

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"

logging.basicConfig(
    level=logging.ERROR,
    format=LOG_FORMAT
)

from treesize.core.errors import TraversalError
from treesize.core.models import SizeTree, TraversalParams, TraversalStats
from treesize.commands import SizeTreeCommand
from treesize.utils.convert_utils import ConvertUtils

EPILOG_TEXT = """
Examples:
  Total size of the Downloads folder and its immediate children
  %(prog)s ~/Downloads

  Three levels deep, hiding everything smaller than 10MB
  %(prog)s ~/Downloads -d 3 -m 10MB

  Exact byte counts using 4 worker threads
  %(prog)s /var/lib --bytes -w 4

Hard-linked files are counted once: the first entry visited carries the bytes,
further links to the same file show 0.
"""


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.raw_bytes: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        sys.stdout.reconfigure(encoding='utf-8')
        sys.stderr.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            description="treesize — apparent disk usage with hard links counted once",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "path",
            type=str,
            help="File or directory to measure"
        )

        # Display options
        parser.add_argument(
            "--depth", "-d",
            default=1,
            type=int,
            metavar='',
            help="How many levels below the root to print. Default: 1"
        )
        parser.add_argument(
            "--min-size", "-m",
            default="0",
            type=str,
            metavar='',
            help="Hide entries smaller than this (e.g., 500KB, 1MB). Default: 0"
        )
        parser.add_argument(
            "--bytes", "-b",
            action="store_true",
            dest="raw_bytes",
            help="Print exact byte counts instead of human-readable sizes"
        )

        # Traversal options
        parser.add_argument(
            "--workers", "-w",
            default=None,
            type=int,
            metavar='',
            help="Worker threads for the traversal. Default: number of CPU cores"
        )

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Print only the total"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show traversal statistics, progress and debug logs"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.quiet and args.verbose:
            self.error_exit("--quiet and --verbose cannot be used together")

        if args.depth < 0:
            self.error_exit("Depth cannot be negative")

        if args.workers is not None and args.workers < 1:
            self.error_exit("Worker count must be at least 1")

        try:
            ConvertUtils.human_to_bytes(args.min_size)
        except ValueError as e:
            self.error_exit(f"Invalid size format: {e}")

    def create_params(self, args: argparse.Namespace) -> TraversalParams:
        """Create TraversalParams from CLI arguments."""
        try:
            return TraversalParams(root_dir=args.path, max_workers=args.workers)
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
            sys.stderr.write(f"\r  [{stage}] {current} entries processed...")
        sys.stderr.flush()

    def run_computation(self, params: TraversalParams) -> Tuple[SizeTree, TraversalStats]:
        """Execute the size tree computation."""
        command = SizeTreeCommand()
        try:
            tree, stats = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None
            )
        except TraversalError as e:
            self.error_exit(str(e))

        if self.verbose:
            sys.stderr.write("\n")
            print(stats.print_summary())
            if stats.degraded_paths:
                print(f"\nUnreadable entries ({len(stats.degraded_paths)}):")
                for path in stats.degraded_paths[:10]:
                    print(f"  • {path}")
                if len(stats.degraded_paths) > 10:
                    print(f"  ...and {len(stats.degraded_paths) - 10} more")
            print()

        return tree, stats

    def format_size(self, size: int) -> str:
        if self.raw_bytes:
            return str(size)
        return ConvertUtils.bytes_to_human(size)

    def render_lines(self, tree: SizeTree, max_depth: int, min_size: int) -> List[str]:
        """
        Render the tree as indented lines, children in listing order.
        The root is always shown; deeper nodes only up to max_depth and when
        at least min_size bytes.
        """
        lines = []
        stack = [(tree, 0)]
        while stack:
            node, depth = stack.pop()
            lines.append(f"{self.format_size(node.size):>12}  {'  ' * depth}{node.name}")

            if depth >= max_depth:
                continue
            visible = [child for child in node.children if child.size >= min_size]
            stack.extend((child, depth + 1) for child in reversed(visible))
        return lines

    def output_results(self, tree: SizeTree, args: argparse.Namespace) -> None:
        """Print the tree (unless quiet) and the total line."""
        if not self.quiet:
            min_size = ConvertUtils.human_to_bytes(args.min_size)
            for line in self.render_lines(tree, args.depth, min_size):
                print(line)
            print()

        print(f"Total size of '{args.path}': {tree.size} bytes")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.raw_bytes = args.raw_bytes

        if self.verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        self.validate_args(args)
        params = self.create_params(args)

        tree, stats = self.run_computation(params)
        if stats.entries_degraded:
            self.warning(f"{stats.entries_degraded} entries could not be read and were counted as 0 bytes")

        self.output_results(tree, args)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
