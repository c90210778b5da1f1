#!/usr/bin/env python3
"""
phashsort CLI — group perceptually identical images into numbered folders.
Scans one directory (non-recursive), copies every duplicate set into its own
folder for manual review. Originals are never moved or deleted.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from pathlib import Path
from typing import Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import PIL
except ImportError:
    _MISSING_DEPS.append("Pillow")

try:
    import imagehash
except ImportError:
    _MISSING_DEPS.append("ImageHash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from phashsort import __version__
from phashsort.core.models import ScanParams, ScanStats, HashAlgorithm, DEFAULT_DB_PATH, DEFAULT_HASH_SIZE
from phashsort.commands import ScanCommand
from phashsort.services.file_service import FileService
from phashsort.exceptions import GroupCopyError, StoreError
from phashsort.aliases import HASH_ALIASES, HASH_CHOICES, HASH_HELP_TEXT, EPILOG_TEXT


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding='utf-8')
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="phashsort",
            description="phashsort — copy perceptually identical images into numbered folders",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "input",
            metavar="PATH",
            type=str,
            help="Directory to scan (only its immediate files are checked)"
        )

        parser.add_argument(
            "--persist", "-p",
            action="store_true",
            help="Keep the fingerprint database between runs and skip files it already knows.\n"
                 "Without it the database is dropped before and after the run."
        )
        parser.add_argument(
            "--output", "-o",
            default=None,
            type=str,
            metavar="PATH",
            help="Directory in which numbered group folders are created. Default: the scanned directory"
        )
        parser.add_argument(
            "--db",
            default=DEFAULT_DB_PATH,
            type=str,
            metavar="PATH",
            dest="db_path",
            help=f"SQLite database file for fingerprints. Default: {DEFAULT_DB_PATH}"
        )

        parser.add_argument(
            "--hash",
            choices=HASH_CHOICES,
            default=HashAlgorithm.DIFFERENCE.value,
            type=str,
            dest="algorithm",
            help=HASH_HELP_TEXT
        )
        parser.add_argument(
            "--hash-size",
            default=DEFAULT_HASH_SIZE,
            type=int,
            metavar="N",
            help=f"Hash grid size; the fingerprint has N*N bits. Default: {DEFAULT_HASH_SIZE}"
        )
        parser.add_argument(
            "--extensions", "-x",
            nargs="+",
            default=[],
            type=str,
            metavar='',
            help="Only try files with these extensions (space separated, e.g. .jpg .png)"
        )

        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics and progress"
        )
        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {__version__}"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.quiet and args.verbose:
            self.error_exit("--quiet and --verbose cannot be used together")

        root_path = Path(args.input)
        if not root_path.exists():
            self.error_exit(f"Directory not found: {args.input}")
        if not root_path.is_dir():
            self.error_exit(f"Path is not a directory: {args.input}")

        if args.hash_size < 2:
            self.error_exit("Hash size must be at least 2")

        if HASH_ALIASES[args.algorithm] == HashAlgorithm.WAVELET and args.hash_size & (args.hash_size - 1):
            self.error_exit("Wavelet hash size must be a power of 2")

        if args.output:
            try:
                FileService.ensure_directory(args.output)
            except RuntimeError as e:
                self.error_exit(str(e))

        db_file = Path(args.db_path).resolve()
        if not db_file.parent.is_dir():
            self.error_exit(f"Database directory not found: {db_file.parent}")
        if not args.persist and db_file.exists():
            self.warning(f"Existing database {args.db_path} will be dropped (use --persist to keep it)")

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Create ScanParams from CLI arguments."""
        try:
            return ScanParams(
                input_dir=str(Path(args.input)),
                output_dir=str(Path(args.output)) if args.output else None,
                persist=args.persist,
                db_path=args.db_path,
                algorithm=HASH_ALIASES.get(args.algorithm, HashAlgorithm.DIFFERENCE),
                hash_size=args.hash_size,
                extensions=args.extensions,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def message_callback(self, message: str) -> None:
        """Console notices from the scan (group created, files copied)."""
        if not self.quiet:
            print(message)

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
            sys.stderr.flush()
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
            sys.stderr.flush()

    def run_scan(self, params: ScanParams) -> ScanStats:
        """Execute the scan workflow. Copy and store failures abort the run."""
        command = ScanCommand()
        if self.verbose:
            print(f"Fingerprinting with {params.algorithm.display_name} (size {params.hash_size})...")

        try:
            stats = command.execute(
                params,
                message_callback=self.message_callback,
                progress_callback=self.progress_callback if self.verbose else None
            )
        except GroupCopyError as e:
            self.error_exit(f"Copy failed, aborting: {e}")
        except StoreError as e:
            self.error_exit(f"Fingerprint database error: {e}")
        except RuntimeError as e:
            self.error_exit(f"Scan failed: {e}")

        if self.verbose:
            sys.stderr.write("\n")
            print(stats.print_summary())
        return stats

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> ScanStats:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        if self.verbose:
            logging.getLogger("phashsort").setLevel(logging.INFO)

        self.validate_args(args)
        params = self.create_params(args)

        if self.verbose:
            print(f"Scanning directory: {params.input_dir}")

        stats = self.run_scan(params)

        # The summary line is the one output kept under --quiet
        print(stats.summary_line())

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")
        return stats


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
