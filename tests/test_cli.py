import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from treechunk import cli
from treechunk.config import ChunkingConfig
from treechunk.language_registry import LanguageEntry, LanguageRegistry

from tests.fixtures import FailingProvider, LineProvider, numbered_lines


class ChunkPathsTests(unittest.TestCase):
    def test_results_follow_input_order_and_report_failures(self):
        registry = LanguageRegistry((LanguageEntry("lines", LineProvider(), frozenset({"py"})),))
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            paths = []
            for i in range(6):
                p = tmp / f"f{i}.py"
                p.write_bytes(numbered_lines(10 + i))
                paths.append(str(p))
            paths.insert(3, str(tmp / "missing.py"))

            with self.assertLogs("treechunk", level="ERROR"):
                results = cli.chunk_paths(paths, ChunkingConfig(), registry, max_workers=3)

        self.assertEqual([r[0] for r in results], paths)
        missing = results[3]
        self.assertIsNone(missing[1])
        self.assertTrue(missing[2])
        for path, chunks, error in results[:3] + results[4:]:
            self.assertIsNone(error)
            self.assertEqual(chunks[0].path, path)

    def test_empty_input(self):
        self.assertEqual(cli.chunk_paths([]), [])


class MainTests(unittest.TestCase):
    def _run(self, argv, registry):
        out = io.StringIO()
        with mock.patch.object(cli, "default_registry", return_value=registry), \
                mock.patch.dict("os.environ", {}, clear=True), redirect_stdout(out):
            code = cli.main(argv)
        return code, json.loads(out.getvalue())

    def test_summary_with_chunks(self):
        registry = LanguageRegistry((LanguageEntry("text-grammar", FailingProvider()),))
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "notes.txt"
            path.write_bytes(numbered_lines(100))
            code, summary = self._run([str(path), "--chunks", "--window-lines", "50", "--overlap-lines", "10"],
                                      registry)

        self.assertEqual(code, 0)
        self.assertEqual(summary["processed_files"], 1)
        self.assertEqual(summary["failed_files"], 0)
        entry = summary["files"][0]
        self.assertEqual(entry["strategy"], "fallback")
        self.assertEqual(entry["chunks"], 3)
        self.assertEqual([item["start_rc"][0] for item in entry["items"]], [0, 40, 80])
        self.assertEqual(summary["total_chunks"], 3)

    def test_missing_file_sets_exit_status(self):
        registry = LanguageRegistry((LanguageEntry("lines", LineProvider()),))
        code, summary = self._run(["/nonexistent/a.py"], registry)
        self.assertEqual(code, 1)
        self.assertEqual(summary["failed_files"], 1)
        self.assertIn("error", summary["files"][0])

    def test_invalid_configuration(self):
        with mock.patch.dict("os.environ", {}, clear=True):
            code = cli.main(["x.py", "--window-lines", "5", "--overlap-lines", "5"])
        self.assertEqual(code, 2)


if __name__ == "__main__":
    unittest.main()
