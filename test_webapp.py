# test_webapp.py
#
# Run:
#   python -m unittest -v

import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import webapp


class TestWebapp(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)

        self.write("notes.md", "# Hello\n\nSome **text**.\n")
        self.write("sub/deep.nfm", "- item\n")
        self.write("skip.txt", "not a document\n")
        self.write(".hidden/secret.md", "# secret\n")
        (self.root / "img.png").write_bytes(b"\x89PNG fake")

        patcher = patch.object(webapp, "DOC_DIR", self.root)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.client = webapp.app.test_client()

    def tearDown(self) -> None:
        self.tmp.cleanup()

    # ---------- helpers ----------
    def write(self, rel: str, content: str) -> Path:
        p = self.root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")
        return p

    # ---------- index ----------
    def test_index_lists_documents_only(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        body = response.get_data(as_text=True)
        self.assertIn('href="/view/notes.md"', body)
        self.assertIn('href="/view/sub/deep.nfm"', body)
        self.assertNotIn("skip.txt", body)
        self.assertNotIn("secret.md", body)

    # ---------- view ----------
    def test_view_renders_document(self):
        response = self.client.get("/view/notes.md")
        self.assertEqual(response.status_code, 200)
        body = response.get_data(as_text=True)
        self.assertIn("<h1>Hello</h1>", body)
        self.assertIn("<p>Some <strong>text</strong>.</p>", body)
        self.assertIn('<div class="fm-file active"><a href="/view/notes.md">', body)

    def test_view_opens_parent_directories(self):
        response = self.client.get("/view/sub/deep.nfm")
        self.assertEqual(response.status_code, 200)
        body = response.get_data(as_text=True)
        self.assertIn("<ul><li>item</li></ul>", body)
        self.assertIn('<details class="fm-dir" open>', body)

    def test_view_rejects_non_documents(self):
        self.assertEqual(self.client.get("/view/skip.txt").status_code, 404)

    def test_view_missing_document(self):
        self.assertEqual(self.client.get("/view/missing.md").status_code, 404)

    # ---------- assets ----------
    def test_assets_served_from_doc_dir(self):
        response = self.client.get("/assets/img.png")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, b"\x89PNG fake")
        response.close()

    def test_missing_asset(self):
        self.assertEqual(self.client.get("/assets/none.png").status_code, 404)


class TestTreeHelpers(unittest.TestCase):
    def test_ancestor_dirs(self):
        self.assertEqual(webapp.ancestor_dirs("a/b/c.md"), {"a", "a/b"})
        self.assertEqual(webapp.ancestor_dirs("c.md"), set())


if __name__ == "__main__":
    unittest.main()
