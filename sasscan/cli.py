import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .core.config import DEFAULT_MAX_BYTES, ScanConfig
from .core.errors import NotFoundError, ScanError
from .core.loader import scanner_names
from .core.reporting import Reporter
from .core.scanner import DirectoryScanner, configure_logging
from .core.utils import read_text


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sasscan",
        description="Analyze a directory of SAS/text files and write summary and detail CSV reports.",
    )
    p.add_argument("-i", "--input", type=Path, required=True, help="Directory to analyze recursively.")
    p.add_argument("-o", "--output", type=Path, required=True, help="Existing directory for the CSV reports.")
    p.add_argument(
        "--scanners",
        default="all",
        help=f"Comma-delimited scanners to run or 'all' (available: {', '.join(scanner_names())}).",
    )
    p.add_argument("--names-file", type=Path, default=None, help="File of known file names (one per line) for find_file_name; defaults to the names of the scanned files.")
    p.add_argument("--detect-encoding", action="store_true", help="Try a detected encoding when a file is not valid UTF-8.")
    p.add_argument("--max-bytes", type=int, default=DEFAULT_MAX_BYTES, help="Files larger than this are recorded as read errors instead of scanned (default 50MB).")
    p.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging output.")
    return p


def load_names_file(path: Path) -> List[str]:
    if not path.is_file():
        raise NotFoundError("names file does not exist", path=path)
    names = []
    for line in read_text(path).splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            names.append(line)
    return names


def check_directories(args: argparse.Namespace) -> None:
    if not args.input.is_dir():
        raise NotFoundError("Input directory does not exist", path=args.input)
    if not args.output.is_dir():
        raise NotFoundError("Output directory does not exist", path=args.output)


def run(args: argparse.Namespace) -> int:
    check_directories(args)
    known_names = load_names_file(args.names_file) if args.names_file else None
    config = ScanConfig(
        detect_encoding=args.detect_encoding,
        show_progress=not args.no_progress,
        verbose=args.verbose,
        max_bytes=args.max_bytes,
    )
    try:
        scanner = DirectoryScanner(
            root=args.input,
            selector=args.scanners,
            known_names=known_names,
            config=config,
            logger=configure_logging(verbose=args.verbose),
        )
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    result = scanner.scan()
    paths = Reporter(args.output).write_all(result)

    print(f"Summary written to {paths.summary}")
    print(f"Detail written to {paths.detail}")
    if result.stats.errors:
        print(f"{result.stats.errors} scanner error(s) recorded in the detail report", file=sys.stderr)
    print(f"Total time elapsed: {result.stats.elapsed:.3f}s")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        return run(args)
    except NotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except ScanError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
