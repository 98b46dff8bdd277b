import json
import tempfile
import unittest
from pathlib import Path

from main import build_parser, main


class CliTests(unittest.TestCase):
    def test_defaults(self) -> None:
        args = build_parser().parse_args([])
        self.assertEqual(args.mode, "puzzle")
        self.assertEqual(args.difficulty, "easy")
        self.assertEqual(args.level, 1)

    def test_puzzle_from_template_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            template = Path(tmp) / "open.txt"
            template.write_text("#####\n#...#\n#...#\n#...#\n#####\n", encoding="utf-8")
            output = Path(tmp) / "puzzle.json"
            main(
                [
                    "puzzle",
                    "--template",
                    str(template),
                    "--seed",
                    "3",
                    "--check-unique",
                    "--output",
                    str(output),
                    "--log-level",
                    "WARNING",
                ]
            )
            payload = json.loads(output.read_text(encoding="utf-8"))
        self.assertEqual(len(payload["grid"]), 5)
        self.assertEqual(len(payload["runs"]), 6)
        self.assertEqual(len(payload["solution"]), 9)
        self.assertGreaterEqual(payload["solution_count"]["count"], 1)

    def test_templates_mode(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            output = Path(tmp) / "templates.json"
            main(
                [
                    "templates",
                    "--rows",
                    "8",
                    "--cols",
                    "8",
                    "--count",
                    "2",
                    "--seed",
                    "5",
                    "--output",
                    str(output),
                    "--log-level",
                    "WARNING",
                ]
            )
            payload = json.loads(output.read_text(encoding="utf-8"))
        self.assertEqual((payload["rows"], payload["cols"]), (8, 8))
        for rows in payload["templates"]:
            self.assertEqual(len(rows), 8)

    def test_invalid_template_file_exits(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            template = Path(tmp) / "bad.txt"
            template.write_text("####\n#.##\n####\n", encoding="utf-8")
            with self.assertRaises(SystemExit) as raised:
                main(["--template", str(template), "--log-level", "ERROR"])
        self.assertEqual(raised.exception.code, 1)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
