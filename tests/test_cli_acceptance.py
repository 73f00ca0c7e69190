from __future__ import annotations

import io
import json
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

TESTS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = TESTS_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from drawkit import cli

FILMS_CSV = """Title,Release Year,Fun Facts,Actor 1,Actor 2,Actor 3
Vertigo,1958,Hitchcock shot the tower scenes in a studio,James Stewart,Kim Novak,Barbara Bel Geddes
Vertigo,1958,,James Stewart,Kim Novak,
Bullitt,1968,The chase took weeks to film,Steve McQueen,Jacqueline Bisset,
Dirty Harry,1971,,Clint Eastwood,,
Escape from Alcatraz,1979,,Clint Eastwood,Patrick McGoohan,
Magnum Force,1973,,Clint Eastwood,,
"""


class CLIAcceptanceTests(unittest.TestCase):
    def run_cli(self, argv: list[str]) -> tuple[int, str, str]:
        stdout = io.StringIO()
        stderr = io.StringIO()
        with mock.patch("sys.stdout", stdout), mock.patch("sys.stderr", stderr):
            code = cli.main(argv)
        return code, stdout.getvalue(), stderr.getvalue()

    def _films(self, td: str) -> Path:
        path = Path(td) / "films.csv"
        path.write_text(FILMS_CSV, encoding="utf-8")
        return path

    def test_requires_subcommand(self) -> None:
        code, _out, err = self.run_cli([])
        self.assertEqual(code, 2)
        self.assertIn("E_ARGS", err)
        self.assertIn("subcommand", err)

    def test_report_writes_top_three_bars(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            films = self._films(td)
            target = Path(td) / "report.svg"
            code, out, err = self.run_cli(["report", str(films), "-o", str(target)])
            self.assertEqual(code, 0, err)
            self.assertIn("Wrote", out)
            svg = target.read_text(encoding="utf-8")
        self.assertTrue(svg.startswith('<?xml version="1.0" encoding="utf-8"?>\n'))
        self.assertEqual(svg.count("<rect "), 3)
        self.assertIn("Clint Eastwood (3)", svg)
        self.assertIn("James Stewart (2)", svg)
        self.assertIn("Kim Novak (2)", svg)
        self.assertLess(svg.index("Clint Eastwood"), svg.index("James Stewart"))
        self.assertNotIn("Steve McQueen", svg)

    def test_report_top_must_be_positive(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            films = self._films(td)
            code, _out, err = self.run_cli(["report", str(films), "--top", "0"])
        self.assertEqual(code, 2)
        self.assertIn("E_ARGS", err)

    def test_missing_input_errors(self) -> None:
        code, _out, err = self.run_cli(["report", "/nonexistent/films.csv"])
        self.assertEqual(code, 2)
        self.assertIn("error[E_IO_READ]", err)

    def test_missing_input_json_error(self) -> None:
        code, _out, err = self.run_cli(["--error-format", "json", "stats", "/nonexistent/films.csv"])
        self.assertEqual(code, 2)
        payload = json.loads(err)
        self.assertFalse(payload["ok"])
        self.assertEqual(payload["code"], "E_IO_READ")
        self.assertEqual(payload["file"], "/nonexistent/films.csv")

    def test_unwritable_output_errors(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            films = self._films(td)
            target = Path(td) / "missing-dir" / "report.svg"
            code, _out, err = self.run_cli(["report", str(films), "-o", str(target)])
        self.assertEqual(code, 4)
        self.assertIn("E_IO_WRITE", err)

    def test_stats_json(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            films = self._films(td)
            code, out, err = self.run_cli(["stats", str(films), "--year", "1958"])
        self.assertEqual(code, 0, err)
        summary = json.loads(out)
        self.assertEqual(summary["records"], 6)
        self.assertEqual(list(summary["actor_counts"])[0], "Clint Eastwood")
        self.assertEqual(summary["actor_counts"]["Kim Novak"], 2)
        self.assertEqual(summary["longest_fun_fact"], "Vertigo")
        self.assertEqual(summary["titles"], ["VERTIGO (1958)"])

    def test_demo_stdout(self) -> None:
        code, out, err = self.run_cli(["demo", "--stdout"])
        self.assertEqual(code, 0, err)
        self.assertIn('<svg xmlns="http://www.w3.org/2000/svg" width="800" height="170">', out)
        self.assertIn('    <circle r="75" fill="yellow" cx="200" cy="80"></circle>', out)
        self.assertTrue(out.rstrip("\n").endswith("</svg>"))

    def test_demo_writes_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            target = Path(td) / "test.svg"
            code, out, err = self.run_cli(["demo", "-o", str(target)])
            self.assertEqual(code, 0, err)
            self.assertIn(f"Wrote {target}", out)
            self.assertIn("wat is a prototype?", target.read_text(encoding="utf-8"))

    def test_unclosed_quote_is_csv_error(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            broken = Path(td) / "broken.csv"
            broken.write_text('Title,Actor 1\n"Vertigo,James\n', encoding="utf-8")
            code, out, err = self.run_cli(["stats", str(broken)])
        self.assertEqual(code, 2)
        self.assertEqual(out, "")
        self.assertIn("error[E_CSV]", err)

    def test_invalid_utf8_is_csv_error(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            broken = Path(td) / "latin1.csv"
            broken.write_bytes(b"Title,Actor 1\nVertigo,Jos\xe9\xff\n")
            code, _out, err = self.run_cli(["report", str(broken), "-o", str(Path(td) / "out.svg")])
        self.assertEqual(code, 2)
        self.assertIn("error[E_CSV]", err)

    def test_debug_flag_prints_traceback(self) -> None:
        with mock.patch.dict(os.environ):
            os.environ.pop("DRAWKIT_DEBUG", None)
            code, _out, err = self.run_cli(["report", "/nonexistent/films.csv"])
        self.assertEqual(code, 2)
        self.assertNotIn("Traceback", err)

        code, _out, err = self.run_cli(["--debug", "report", "/nonexistent/films.csv"])
        self.assertEqual(code, 2)
        self.assertIn("error[E_IO_READ]", err)
        self.assertIn("Traceback", err)

    def test_debug_env_prints_traceback(self) -> None:
        with mock.patch.dict(os.environ, {"DRAWKIT_DEBUG": "1"}):
            code, _out, err = self.run_cli(["report", "/nonexistent/films.csv"])
        self.assertEqual(code, 2)
        self.assertIn("Traceback", err)

    def test_demo_stdout_and_output_are_exclusive(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            target = Path(td) / "x.svg"
            code, out, err = self.run_cli(["demo", "--stdout", "-o", str(target)])
            self.assertFalse(target.exists())
        self.assertEqual(code, 2)
        self.assertEqual(out, "")
        self.assertIn("E_ARGS", err)
        self.assertIn("mutually exclusive", err)

    def test_unknown_option_is_usage_error(self) -> None:
        code, _out, err = self.run_cli(["report", "--bogus"])
        self.assertEqual(code, 2)
        self.assertIn("E_ARGS", err)


if __name__ == "__main__":
    unittest.main()
