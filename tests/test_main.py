import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr
from pathlib import Path

import main
from sample_words import SAMPLE_WORDS


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmpdir = Path(self._tmp.name)
        self.words = self.tmpdir / "words.txt"
        self.words.write_text("\n".join(SAMPLE_WORDS) + "\n", encoding="utf-8")

    def _run(self, *extra: str) -> int:
        argv = [
            "--seed", "2026-10-19",
            "--dictionary", str(self.words),
            "--turns", "1",
            "--beam-width", "3",
            "--fan-out", "3",
            "--max-attempts", "2",
            "--log-level", "WARNING",
            *extra,
        ]
        return main.main(argv)

    def test_writes_json_puzzle(self) -> None:
        output = self.tmpdir / "puzzle.json"
        self.assertEqual(self._run("--output", str(output)), 0)
        payload = json.loads(output.read_text(encoding="utf-8"))
        self.assertEqual(payload["board"]["size"], 9)
        self.assertEqual(len(payload["letters"]), 14)
        self.assertIn("thresholds", payload)

    def test_pretty_prints_board_to_stderr(self) -> None:
        output = self.tmpdir / "puzzle.json"
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            self.assertEqual(self._run("--output", str(output), "--pretty"), 0)
        self.assertIn("--- Scores ---", stderr.getvalue())

    def test_missing_dictionary_reports_error(self) -> None:
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            code = main.main(["--dictionary", str(self.tmpdir / "absent.txt"), "--log-level", "ERROR"])
        self.assertEqual(code, 1)
        self.assertIn("error: Missing word list", stderr.getvalue())

    def test_inverted_band_reports_error(self) -> None:
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            code = self._run("--min-estimate", "90", "--max-estimate", "10")
        self.assertEqual(code, 1)
        self.assertIn("Estimate band is inverted", stderr.getvalue())


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
