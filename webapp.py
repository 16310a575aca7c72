#!/usr/bin/env python3
"""
webapp.py

Small Flask preview server for a directory of NFM documents.

- "/"              sidebar with every document under doc_dir
- "/view/<path>"   the document converted with nfm_parser.parse_file()
- "/assets/<path>" any other file below doc_dir (images referenced by documents)
"""
from __future__ import annotations
from pathlib import Path

from dataclasses import dataclass, field
from typing import Iterator
from urllib.parse import quote
import html as _html

from flask import Flask, abort, render_template_string, send_from_directory

from config_loader import load_config_if_present
from nfm_parser import parse_file
from nfm_reader import safe_input_path

BASE_DIR = Path.cwd()
CONFIG_PATH = BASE_DIR / "config.yml"

app = Flask(__name__)
cfg = load_config_if_present(CONFIG_PATH)
DOC_DIR = BASE_DIR / cfg.doc_dir


PAGE_TEMPLATE = """
<!doctype html>
<html lang="{{ lang }}">
<head>
  <meta charset="utf-8">
  <title>{{ page_title }}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
  {% if stylesheet %}<link rel="stylesheet" href="{{ stylesheet }}">{% endif %}
</head>
<body class="with-sidebar">
  <nav class="sidebar">
    <a class="sidebar-title" href="/">{{ site_title }}</a>
    <div class="sidebar-label">{{ doc_label }}/</div>
    {{ file_tree|safe }}
  </nav>
  <main class="content">
    {% if current_file %}<p class="doc-path">{{ current_file }}</p>{% endif %}
    {{ content|safe }}
  </main>
</body>
</html>
"""


@dataclass
class FileTreeNode:
    dirs: dict[str, "FileTreeNode"] = field(default_factory=dict)
    files: list[str] = field(default_factory=list)

    def add(self, parts: tuple[str, ...]) -> None:
        *dirnames, filename = parts
        node = self
        for name in dirnames:
            node = node.dirs.setdefault(name, FileTreeNode())
        node.files.append(filename)


def is_document(path: Path) -> bool:
    return path.suffix.lower() in cfg.extensions


def iter_documents(doc_dir: Path) -> Iterator[tuple[str, ...]]:
    """Yield the relative path parts of every visible document below doc_dir."""
    if not doc_dir.is_dir():
        return
    for p in sorted(doc_dir.rglob("*")):
        rel = p.relative_to(doc_dir)
        if any(seg.startswith(".") for seg in rel.parts):
            continue
        if p.is_file() and is_document(p):
            yield rel.parts


def build_doc_tree(doc_dir: Path) -> FileTreeNode:
    root = FileTreeNode()
    for parts in iter_documents(doc_dir):
        root.add(parts)
    return root


def ancestor_dirs(current_rel: str) -> set[str]:
    """
    '2025/notes/foo.md' -> {'2025', '2025/notes'}

    These are the <details> elements left open in the sidebar.
    """
    parts = [p for p in current_rel.split("/") if p][:-1]
    return {"/".join(parts[:i]) for i in range(1, len(parts) + 1)}


def render_tree_html(node: FileTreeNode, current_file: str, prefix: str = "") -> str:
    open_dirs = ancestor_dirs(current_file)
    out: list[str] = []

    for dirname, child in sorted(node.dirs.items()):
        child_prefix = f"{prefix}{dirname}/"
        open_attr = " open" if child_prefix.rstrip("/") in open_dirs else ""
        out.append(
            f'<details class="fm-dir"{open_attr}>'
            f"<summary>{_html.escape(dirname)}/</summary>"
            f'<div class="fm-children">{render_tree_html(child, current_file, child_prefix)}</div>'
            "</details>"
        )

    for fname in sorted(node.files):
        rel = prefix + fname
        active = " active" if rel == current_file else ""
        out.append(
            f'<div class="fm-file{active}">'
            f'<a href="/view/{quote(rel)}">{_html.escape(fname)}</a></div>'
        )

    return "".join(out)


def _render_page(*, page_title: str, content: str, current_file: str = "") -> str:
    return render_template_string(
        PAGE_TEMPLATE,
        lang=cfg.lang,
        stylesheet=cfg.stylesheet,
        site_title=cfg.title,
        doc_label=DOC_DIR.name,
        page_title=page_title,
        current_file=current_file,
        file_tree=render_tree_html(build_doc_tree(DOC_DIR), current_file),
        content=content,
    )


def _resolve_in_doc_dir(rel: str) -> Path:
    try:
        return safe_input_path(rel, root=DOC_DIR)
    except (ValueError, OSError):
        abort(404)


@app.route("/")
def index():
    content = f"<h1>{_html.escape(cfg.title)}</h1>\n<p>Pick a document on the left.</p>\n"
    return _render_page(page_title=cfg.title, content=content)


@app.route("/view/<path:filename>")
def view_file(filename: str):
    doc_path = _resolve_in_doc_dir(filename)
    if not is_document(doc_path):
        abort(404)

    body_html = parse_file(doc_path, encoding=cfg.encoding)
    current_rel = doc_path.relative_to(DOC_DIR.resolve()).as_posix()
    return _render_page(page_title=current_rel, content=body_html, current_file=current_rel)


@app.route("/assets/<path:subpath>")
def assets(subpath: str):
    asset_path = _resolve_in_doc_dir(subpath)
    root = DOC_DIR.resolve()
    return send_from_directory(root, asset_path.relative_to(root).as_posix())


if __name__ == "__main__":
    app.run(debug=False)
