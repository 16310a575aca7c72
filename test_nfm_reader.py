# test_nfm_reader.py
#
# Run:
#   python -m unittest -v

import io
import tempfile
import unittest
from pathlib import Path

import nfm_reader as m


class TestSafeInputPath(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    # ---------- helpers ----------
    def write(self, rel: str, content: str) -> Path:
        """
        Write `content` to a file relative to the temporary test directory.

        Returns:
            The absolute Path to the written file.
        """
        p = self.root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")
        return p

    def test_existing_file_resolves(self):
        p = self.write("doc.md", "# hi")
        self.assertEqual(m.safe_input_path(str(p)), p.resolve())

    def test_relative_path_is_resolved_against_root(self):
        p = self.write("sub/doc.md", "")
        self.assertEqual(m.safe_input_path("sub/doc.md", root=self.root), p.resolve())

    def test_empty_path_rejected(self):
        with self.assertRaises(ValueError):
            m.safe_input_path("   ")

    def test_nul_byte_rejected(self):
        with self.assertRaises(ValueError):
            m.safe_input_path("doc\x00.md")

    def test_traversal_rejected(self):
        with self.assertRaises(ValueError):
            m.safe_input_path("../doc.md", root=self.root)

    def test_absolute_path_outside_root_rejected(self):
        outside = tempfile.TemporaryDirectory()
        self.addCleanup(outside.cleanup)
        p = Path(outside.name) / "doc.md"
        p.write_text("", encoding="utf-8")
        with self.assertRaises(ValueError):
            m.safe_input_path(str(p), root=self.root)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            m.safe_input_path("missing.md", root=self.root)

    def test_directory_rejected(self):
        (self.root / "dir").mkdir()
        with self.assertRaises(IsADirectoryError):
            m.safe_input_path("dir", root=self.root)


class TestReadStdin(unittest.TestCase):
    def test_reads_whole_stream(self):
        self.assertEqual(m.read_stdin(io.StringIO("# a\n\nb\n")), "# a\n\nb\n")

    def test_empty_stream_is_an_error(self):
        with self.assertRaises(ValueError):
            m.read_stdin(io.StringIO(""))


if __name__ == "__main__":
    unittest.main()
