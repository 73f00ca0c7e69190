"""Command-line interface for the drawkit report and demo workflows."""
from __future__ import annotations

import argparse
import csv
import json
import os
import sys
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from .drawing import Element
from .hoffy import Record
from .report import build_chart, demo_chart, load_records, top_actors
from .sfmovies import TITLE, actor_counts, longest_fun_fact, titles_by_year


@dataclass
class CliError(Exception):
    code: str
    message: str
    hint: Optional[str] = None
    exit_code: int = 1
    file: Optional[str] = None


class UsageError(Exception):
    pass


class FriendlyArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # pragma: no cover - argparse callback
        raise UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = FriendlyArgumentParser(
        prog="drawkit",
        description="Summarise film-location CSV data and draw it as SVG.",
    )
    parser.add_argument("--error-format", choices=["text", "json"], default="text")
    parser.add_argument("--debug", action="store_true")

    subparsers = parser.add_subparsers(dest="command")

    report_parser = subparsers.add_parser("report", help="Draw the most frequent actors as SVG bars")
    report_parser.add_argument("input", help="Input .csv file")
    report_parser.add_argument("-o", "--output", default="report.svg", help="Output .svg path")
    report_parser.add_argument("--top", type=int, default=3, help="Number of actors to draw")

    stats_parser = subparsers.add_parser("stats", help="Print summary statistics as JSON")
    stats_parser.add_argument("input", help="Input .csv file")
    stats_parser.add_argument("--year", help="Also list titles released in this year")

    demo_parser = subparsers.add_parser("demo", help="Write the sample SVG document")
    demo_parser.add_argument("-o", "--output", help="Output .svg path (default: test.svg)")
    demo_parser.add_argument("--stdout", action="store_true", help="Write SVG to stdout")

    return parser


def _read_records(path: str) -> List[Record]:
    input_path = Path(path)
    if not input_path.exists():
        raise CliError(
            "E_IO_READ",
            f"input file not found: {input_path}",
            exit_code=2,
            file=str(input_path),
        )
    try:
        return load_records(input_path)
    except OSError as exc:
        raise CliError(
            "E_IO_READ",
            f"failed to read input file: {input_path}",
            hint=str(exc),
            exit_code=2,
            file=str(input_path),
        )
    except (csv.Error, UnicodeDecodeError) as exc:
        raise CliError(
            "E_CSV",
            f"failed to parse CSV: {input_path}",
            hint=str(exc),
            exit_code=2,
            file=str(input_path),
        )


def _write_svg(root: Element, path: Path) -> None:
    try:
        root.write(path).result()
    except OSError as exc:
        raise CliError(
            "E_IO_WRITE",
            f"failed to write output file: {path}",
            hint=str(exc),
            exit_code=4,
            file=str(path),
        )


def _error_from_exception(exc: Exception) -> CliError:
    if isinstance(exc, CliError):
        return exc
    return CliError(
        "E_INTERNAL",
        str(exc) or exc.__class__.__name__,
        hint="Re-run with --debug to see traceback.",
        exit_code=1,
    )


def _emit_error(err: CliError, *, error_format: str) -> None:
    if error_format == "json":
        payload = {
            "ok": False,
            "code": err.code,
            "message": err.message,
            "file": err.file,
            "hint": err.hint,
        }
        sys.stderr.write(json.dumps(payload) + "\n")
        return

    sys.stderr.write(f"error[{err.code}]: {err.message}\n")
    if err.hint:
        sys.stderr.write(f"hint: {err.hint}\n")


def _handle_report(args: argparse.Namespace) -> int:
    if args.top <= 0:
        raise CliError(
            "E_ARGS",
            "--top must be > 0",
            hint="Use a positive count like 3.",
            exit_code=2,
        )
    records = _read_records(args.input)
    chart = build_chart(top_actors(actor_counts(records), args.top))
    output_path = Path(args.output)
    _write_svg(chart, output_path)
    print(f"Wrote {output_path}")
    return 0


def _handle_stats(args: argparse.Namespace) -> int:
    records = _read_records(args.input)
    longest = longest_fun_fact(records)
    counts = actor_counts(records)
    summary = {
        "records": len(records),
        "actor_counts": dict(top_actors(counts, len(counts))),
        "longest_fun_fact": longest.get(TITLE) if longest else None,
    }
    if args.year is not None:
        summary["titles"] = titles_by_year(records, args.year)
    print(json.dumps(summary, indent=2, ensure_ascii=False))
    return 0


def _handle_demo(args: argparse.Namespace) -> int:
    if args.stdout and args.output:
        raise CliError(
            "E_ARGS",
            "--stdout and --output are mutually exclusive",
            hint="Choose either --stdout or --output.",
            exit_code=2,
        )

    root = demo_chart()
    if args.stdout:
        sys.stdout.write(root.serialize() + "\n")
        return 0
    output_path = Path(args.output or "test.svg")
    _write_svg(root, output_path)
    print(f"Wrote {output_path}")
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    raw_argv = list(argv) if argv is not None else sys.argv[1:]
    parser = _build_parser()

    if not raw_argv:
        err = CliError(
            "E_ARGS",
            "missing subcommand",
            hint="Use one of: report, stats, demo.",
            exit_code=2,
        )
        _emit_error(err, error_format="text")
        return err.exit_code

    debug_enabled = "--debug" in raw_argv or os.getenv("DRAWKIT_DEBUG") == "1"
    error_format = "text"
    if "--error-format" in raw_argv:
        idx = raw_argv.index("--error-format")
        if idx + 1 < len(raw_argv):
            error_format = raw_argv[idx + 1]

    try:
        args = parser.parse_args(raw_argv)
        error_format = args.error_format

        if args.command == "report":
            return _handle_report(args)
        if args.command == "stats":
            return _handle_stats(args)
        if args.command == "demo":
            return _handle_demo(args)

        raise CliError(
            "E_ARGS",
            "missing subcommand",
            hint="Use one of: report, stats, demo.",
            exit_code=2,
        )
    except UsageError as exc:
        err = CliError(
            "E_ARGS",
            str(exc),
            hint="Use subcommands: report, stats, demo.",
            exit_code=2,
        )
        _emit_error(err, error_format=error_format)
        return err.exit_code
    except Exception as exc:  # pragma: no cover - exercised in integration tests
        err = _error_from_exception(exc)
        _emit_error(err, error_format=error_format)
        if debug_enabled:
            traceback.print_exc(file=sys.stderr)
        return err.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
