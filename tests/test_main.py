import io
import json
import os
import sys
import unittest
from contextlib import redirect_stderr, redirect_stdout

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from readerview.main import cli_main


class CliTests(unittest.TestCase):
    def test_read_demo_as_json(self) -> None:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = cli_main(["read", "--url", "https://www.example.com/story", "--json"])
        self.assertEqual(code, 0)
        doc = json.loads(out.getvalue())
        self.assertEqual(doc["title"], "Demo Article: The Art of Reading")
        self.assertEqual(len(doc["chapters"]), 3)
        self.assertNotIn("<pre>", doc["content"])

    def test_read_rejects_private_target(self) -> None:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = cli_main(["read", "--url", "http://10.0.0.1/"])
        self.assertEqual(code, 1)
        self.assertIn("target not allowed", err.getvalue())
        self.assertEqual(out.getvalue(), "")


if __name__ == "__main__":
    unittest.main()
