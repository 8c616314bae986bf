import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .core import DuplicateHandlerApp, validate_paths
from .exceptions import ConfigurationError

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """
    Console shows warnings and errors unless verbose; the log file, when
    given, receives every event.
    """
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handlers = [console]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)
    logging.getLogger("PIL").setLevel(logging.WARNING)


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Duplicate File Handler: keep the best copy, quarantine the rest",
        epilog="Example: media-dedupe -s ~/organized -n -v",
    )

    p.add_argument("-s", "--source", type=Path, required=True, help="Source directory containing files with duplicates")
    p.add_argument("-o", "--output", type=Path, default=None, help="Duplicates output directory (default: SOURCE/duplicates)")
    p.add_argument("-n", "--dry-run", action="store_true", help="Show what would be done without moving files")
    p.add_argument("-v", "--verbose", action="store_true", help="Print detailed information")
    p.add_argument("-l", "--log", type=Path, default=None, help="Write log to specified file")
    p.add_argument("--no-hash", action="store_true", help="Skip hash-based exact duplicate detection (faster)")
    p.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation before moving files")
    p.add_argument("-j", "--workers", type=int, default=1, help="Worker threads for reading metadata (default: 1)")
    p.add_argument("--report-csv", type=Path, default=None, help="Write a per-file decision report to this CSV")

    return p.parse_args(argv)


def confirm(prompt: str = "Proceed with duplicate handling? (y/N) ") -> bool:
    try:
        reply = input(prompt)
    except EOFError:
        return False
    return reply.strip().lower() in ("y", "yes")


def main(argv=None) -> int:
    args = parse_args(argv)

    # 1. Validate before anything touches the disk
    try:
        src_root, quarantine_root = validate_paths(args.source, args.output)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    log_file = args.log.expanduser().resolve() if args.log else None
    setup_logging(args.verbose, log_file)

    logging.info("=== Duplicate File Handler Started ===")
    logging.info(f"Source:      {src_root}")
    logging.info(f"Duplicates:  {quarantine_root}")
    logging.info(f"Dry Run:     {args.dry_run}")
    logging.info(f"Use Hash:    {not args.no_hash}")

    print("=" * 50)
    print("      Duplicate File Handler")
    print("=" * 50)
    print(f"Source:      {src_root}")
    print(f"Duplicates:  {quarantine_root}")
    print(f"Dry Run:     {args.dry_run}")
    print(f"Verbose:     {args.verbose}")
    print(f"Use Hash:    {not args.no_hash}")
    print(f"Log File:    {log_file or 'None'}")
    print("=" * 50)

    # 2. Confirm (real runs only)
    if not args.dry_run and not args.yes and not confirm():
        print("Operation cancelled.")
        return 0

    # 3. Execution
    app = DuplicateHandlerApp(
        use_hash=not args.no_hash,
        max_workers=max(1, args.workers),
        progress=True,
    )

    try:
        stats = app.run(src_root, quarantine_root, simulate=args.dry_run)
    except ConfigurationError as e:
        logging.error(str(e))
        return 1
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        return 1
    except Exception:
        logging.exception("Fatal error during duplicate handling.")
        return 1

    if args.report_csv:
        try:
            app.report.write_csv(args.report_csv)
        except OSError as e:
            logging.error(f"Failed to write report {args.report_csv}: {e}")

    print(app.report.format_summary(stats))
    return 0


if __name__ == "__main__":
    sys.exit(main())
