#!/usr/bin/env python3
"""
crossdedup CLI — replaces copies of files spread over several disks with
hardlinks to the copy kept under a torrent directory.
Runs in dry-run mode unless --real-run is given.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import sys
import time
from typing import Optional, NoReturn

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    from send2trash import send2trash
except ImportError:
    _MISSING_DEPS.append("send2trash")

try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from crossdedup.core.models import RelinkParams, ConfigurationError, ActionStatus, DEFAULT_PRIORITY_NAMES
from crossdedup.core.events import RunReport
from crossdedup.commands import RelinkCommand
from crossdedup.config import load_config, expand_volume_roots
from crossdedup.utils.convert_utils import ConvertUtils
from crossdedup.utils.logging_setup import configure_logging, LogEventListener, DEFAULT_KEEP_LOGS
from crossdedup.aliases import (
    LOG_LEVEL_CHOICES, VOLUME_HELP_TEXT, EXCLUDE_HELP_TEXT, PRIORITY_HELP_TEXT, EPILOG_TEXT
)

logger = logging.getLogger("crossdedup")


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            description="crossdedup — replace cross-disk duplicates with hardlinks to the torrent copy",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "--volume", "-V",
            action="append",
            default=[],
            dest="volumes",
            metavar="PATH",
            help=VOLUME_HELP_TEXT
        )
        parser.add_argument(
            "--exclude", "-e",
            action="append",
            default=[],
            dest="excludes",
            metavar="PATTERN",
            help=EXCLUDE_HELP_TEXT
        )
        parser.add_argument(
            "--priority-names",
            nargs="+",
            default=None,
            metavar="NAME",
            help=PRIORITY_HELP_TEXT
        )
        parser.add_argument(
            "--config", "-c",
            type=str,
            default=None,
            help="TOML config file (volumes, exclude, priority_names, workers, use_trash, log_dir, keep_logs)"
        )
        parser.add_argument(
            "--process-file", "-p",
            type=str,
            default=None,
            dest="process_file",
            metavar="FILE",
            help="Read file paths (one per line) from FILE instead of scanning the volumes"
        )

        # Run mode
        mode = parser.add_mutually_exclusive_group()
        mode.add_argument(
            "--real-run", "-r",
            action="store_true",
            help="Delete duplicates and create hardlinks. USE WITH CAUTION."
        )
        mode.add_argument(
            "--dry-run", "-d",
            action="store_true",
            help="Only report what would be done (default)"
        )

        parser.add_argument(
            "--trash",
            action="store_true",
            default=None,
            help="Move replaced duplicates to the system trash instead of unlinking them"
        )
        parser.add_argument(
            "--workers", "-w",
            type=int,
            default=None,
            help="Number of threads used for hashing. Default: 1"
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompt when used with --real-run (for automation/scripts)"
        )

        # Output options
        parser.add_argument(
            "--log-level", "-v",
            choices=LOG_LEVEL_CHOICES,
            default="INFO",
            type=str.upper,
            help="Minimum log level for console and log file. Default: INFO"
        )
        parser.add_argument(
            "--log-dir",
            type=str,
            default=None,
            help="Write a timestamped log file to this directory"
        )
        parser.add_argument(
            "--keep-logs",
            type=int,
            default=None,
            help=f"Number of log files to retain in --log-dir. Default: {DEFAULT_KEEP_LOGS}"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress the summary output"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.force and not args.real_run:
            self.error_exit("--force can only be used with --real-run")

        # Prevent interactive confirmation in non-TTY environments
        if args.real_run and not args.force:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag to proceed without confirmation when piping output or running in scripts."
                )

        if args.workers is not None and args.workers < 1:
            self.error_exit("--workers must be at least 1")
        if args.keep_logs is not None and args.keep_logs < 1:
            self.error_exit("--keep-logs must be at least 1")
        if args.process_file and not os.path.isfile(args.process_file):
            self.error_exit(f"Input file not found: {args.process_file}")

    def create_params(self, args: argparse.Namespace, config: dict) -> RelinkParams:
        """Create RelinkParams from CLI arguments, falling back to the config file."""
        volumes = expand_volume_roots(args.volumes or config.get("volumes", []))
        if not volumes:
            self.error_exit("No volumes given. Use --volume or a config file with 'volumes'.")

        priority_names = args.priority_names or config.get("priority_names") or list(DEFAULT_PRIORITY_NAMES)
        use_trash = args.trash if args.trash is not None else config.get("use_trash", False)
        workers = args.workers if args.workers is not None else config.get("workers", 1)

        try:
            return RelinkParams(
                volume_roots=volumes,
                exclusion_patterns=list(config.get("exclude", [])) + list(args.excludes),
                priority_names=tuple(priority_names),
                dry_run=not args.real_run,
                use_trash=use_trash,
                workers=workers,
                input_file=args.process_file,
            )
        except ConfigurationError as e:
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

    @staticmethod
    def stopped_flag() -> bool:
        """Check if operation should stop (placeholder for signal handling)."""
        return False

    def confirm_real_run(self, params: RelinkParams, force: bool) -> bool:
        """Ask before touching any file. --force skips the question."""
        if force:
            logger.warning("--force flag skips confirmation. Proceeding with real run...")
            return True

        if not sys.stdin.isatty() or not sys.stdout.isatty():
            self.error_exit(
                "Lost interactive terminal during operation. "
                "Use --force to proceed in non-interactive environments."
            )

        print("Volumes:")
        for root in params.volume_roots:
            print(f"   {root}")
        response = input("Duplicates will be DELETED and replaced with hardlinks. Continue? [y/N]: ")
        if response.strip().lower() not in ("y", "yes"):
            print("Operation cancelled by user.")
            return False
        return True

    def output_results(self, report: RunReport) -> None:
        """Print the run summary."""
        if self.quiet:
            return

        mode = "DRY RUN" if report.dry_run else "REAL RUN"
        verb = "would be" if report.dry_run else "were"
        print()
        print("=" * 60)
        print(f"Summary ({mode})")
        print(f"Cross-volume duplicate groups : {len(report.groups)}")
        print(f"Groups without priority copy  : {sum(1 for r in report.resolved if not r.has_canonical)}")
        print(f"Relink actions planned        : {len(report.actions)}")
        for status in ActionStatus:
            print(f"{status.display_name:<30}: {len(report.results_with(status))}")
        print(f"Space that {verb} reclaimed    : {ConvertUtils.bytes_to_human(report.bytes_reclaimed)}")

        if report.failed:
            print(f"\n⚠️  {len(report.failed)} action(s) failed:")
            for result in report.failed[:5]:
                print(f"  • {result.action.source_path}: {result.reason}")
            if len(report.failed) > 5:
                print(f"  ...and {len(report.failed) - 5} more")

        if report.data_loss:
            print(f"\n❌ {len(report.data_loss)} file(s) were removed without a confirmed replacement link!")

        if self.verbose:
            print()
            print(report.stats.print_summary())

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> int:
        """Main entry point. Returns the process exit code."""
        args = self.parse_args(argv)
        self.quiet = args.quiet
        self.verbose = args.log_level == "DEBUG"

        config = {}
        if args.config:
            try:
                config = load_config(args.config)
            except ConfigurationError as e:
                self.error_exit(str(e))

        self.validate_args(args)

        keep_logs = args.keep_logs or config.get("keep_logs", DEFAULT_KEEP_LOGS)
        log_file = configure_logging(
            args.log_level, args.log_dir or config.get("log_dir"), keep_logs, dry_run=not args.real_run
        )
        if log_file:
            logger.info(f"Logging to {log_file}")

        params = self.create_params(args, config)

        logger.info("--- Starting cross-volume deduplication ---")
        if params.dry_run:
            logger.info("Dry run mode enabled. No files will be deleted or hardlinks created.")
        else:
            logger.warning("Real run mode enabled. Files WILL BE DELETED and hardlinks created.")
            if hasattr(os, "geteuid") and os.geteuid() != 0:
                logger.warning("Not running as root; files owned by other users may fail to relink.")
            if not self.confirm_real_run(params, args.force):
                return 0

        report = RunReport()
        report.add_listener(LogEventListener())
        try:
            RelinkCommand().execute(
                params,
                report=report,
                progress_callback=self.progress_callback if self.verbose else None,
                stopped_flag=self.stopped_flag
            )
        except ConfigurationError as e:
            self.error_exit(str(e))

        if self.verbose:
            sys.stderr.write("\n")
        self.output_results(report)

        elapsed = ConvertUtils.seconds_to_human(time.time() - self.start_time)
        logger.info(f"--- Finished in {elapsed} ---")
        return 1 if report.has_failures else 0


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        sys.exit(app.run())
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
