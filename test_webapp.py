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
        self.articles = Path(self.tmp.name).resolve()
        self.patcher = patch.object(webapp, "ARTICLE_DIR", self.articles)
        self.patcher.start()
        self.client = webapp.app.test_client()

    def tearDown(self) -> None:
        self.patcher.stop()
        self.tmp.cleanup()

    def write(self, rel: str, content: str) -> Path:
        p = self.articles / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")
        return p

    # ---------- index ----------
    def test_index_shows_editor_and_articles(self):
        self.write("first.md", "# First")
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, 200)
        body = resp.get_data(as_text=True)
        self.assertIn("<textarea", body)
        self.assertIn("/view/first.md", body)

    # ---------- preview ----------
    def test_preview_json(self):
        resp = self.client.post("/preview", json={"text": "# Hi\n- a"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json(), {"html": "<h1>Hi</h1>\n<ul><li>a</li></ul>"})

    def test_preview_form(self):
        resp = self.client.post("/preview", data={"text": "**b**"})
        self.assertEqual(resp.get_json()["html"], "<p><strong>b</strong></p>")

    def test_preview_missing_text(self):
        self.assertEqual(self.client.post("/preview").get_json(), {"html": ""})
        self.assertEqual(self.client.post("/preview", json={"text": 5}).get_json(), {"html": ""})

    def test_preview_escapes_html(self):
        resp = self.client.post("/preview", json={"text": "<img src=x onerror=y>"})
        self.assertEqual(resp.get_json()["html"], "<p>&lt;img src=x onerror=y&gt;</p>")

    # ---------- view ----------
    def test_view_article(self):
        self.write("sub/post.md", "# Post\n\nbody")
        resp = self.client.get("/view/sub/post.md")
        self.assertEqual(resp.status_code, 200)
        body = resp.get_data(as_text=True)
        self.assertIn("<h1>Post</h1>\n<p>body</p>", body)
        self.assertIn("<title>sub/post.md</title>", body)

    def test_view_missing_article(self):
        self.assertEqual(self.client.get("/view/missing.md").status_code, 404)

    def test_view_rejects_other_suffixes(self):
        self.write("notes.yml", "a: 1")
        self.assertEqual(self.client.get("/view/notes.yml").status_code, 404)

    def test_view_undecodable_article_is_not_found(self):
        (self.articles / "bad.md").write_bytes(b"\xff\xfe bad \x80")
        self.assertEqual(self.client.get("/view/bad.md").status_code, 404)

    def test_view_rejects_traversal(self):
        self.assertEqual(self.client.get("/view/..%2Fsecret.md").status_code, 404)


if __name__ == "__main__":
    unittest.main()
