#!/usr/bin/env python3
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from urllib.parse import quote

from flask import Flask, abort, jsonify, render_template_string, request

from config_loader import DEFAULT_CONFIG, load_config
from md_reader import ARTICLE_SUFFIXES, list_articles, read_source, safe_input_path
from md_to_html import render

logger = logging.getLogger(__name__)

BASE_DIR = Path.cwd()
CONFIG_PATH = BASE_DIR / "config.yml"
ARTICLE_DIR = BASE_DIR / "articles"

app = Flask(__name__)
cfg = load_config(CONFIG_PATH) if CONFIG_PATH.is_file() else DEFAULT_CONFIG


LAYOUT_TEMPLATE = """
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ page_title }}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <style>
    .layout { display: flex; gap: 1.5rem; }
    .sidebar { min-width: 12rem; }
    .editor, .preview { flex: 1; }
    .editor textarea { width: 100%; min-height: 30rem; font-family: monospace; }
    .fm-file.active a { font-weight: bold; }
  </style>
</head>
<body>
  <div class="layout">
    <aside class="sidebar">
      <div class="sidebar-title"><a href="/">Article Preview</a></div>
      <div class="sidebar-section">
        <div class="sidebar-label">articles/</div>
        {% for name in articles %}
        <div class="fm-file {{ 'active' if name == current_file else '' }}">
          <a href="/view/{{ name|urlencode }}">{{ name }}</a>
        </div>
        {% else %}
        <div class="fm-empty">No articles.</div>
        {% endfor %}
      </div>
    </aside>
    {{ content|safe }}
  </div>
</body>
</html>
"""

EDITOR_CONTENT = """
<main class="editor">
  <textarea id="source" name="text" spellcheck="false"></textarea>
</main>
<section class="preview" id="preview"></section>
<script>
  const source = document.getElementById("source");
  const preview = document.getElementById("preview");
  let timer = null;
  source.addEventListener("input", () => {
    clearTimeout(timer);
    timer = setTimeout(async () => {
      const resp = await fetch("/preview", {
        method: "POST",
        headers: {"Content-Type": "application/json"},
        body: JSON.stringify({text: source.value}),
      });
      if (resp.ok) {
        preview.innerHTML = (await resp.json()).html;
      }
    }, 150);
  });
</script>
"""


def _article_names() -> list[str]:
    return [p.relative_to(ARTICLE_DIR).as_posix() for p in list_articles(ARTICLE_DIR)]


def _text_from_request() -> str:
    payload: Any = request.get_json(silent=True)
    if isinstance(payload, dict):
        text = payload.get("text")
    else:
        text = request.form.get("text")
    return text if isinstance(text, str) else ""


@app.route("/")
def index():
    return render_template_string(
        LAYOUT_TEMPLATE,
        page_title="Article Preview",
        articles=_article_names(),
        content=EDITOR_CONTENT,
        current_file="",
    )


@app.route("/preview", methods=["POST"])
def preview():
    return jsonify(html=render(_text_from_request(), cfg))


@app.route("/view/<path:filename>")
def view_file(filename: str):
    try:
        article_path = safe_input_path(filename, root=ARTICLE_DIR)
    except (ValueError, OSError):
        abort(404)

    if article_path.suffix.lower() not in ARTICLE_SUFFIXES:
        abort(404)

    current_rel = article_path.relative_to(ARTICLE_DIR.resolve()).as_posix()
    logger.info("Rendering article %s", current_rel)

    try:
        source = read_source(article_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read article %s: %s", current_rel, e)
        abort(404)

    body_html = render(source, cfg)
    content = f'<main class="preview" data-source="{quote(current_rel)}">\n{body_html}\n</main>'

    return render_template_string(
        LAYOUT_TEMPLATE,
        page_title=current_rel,
        articles=_article_names(),
        content=content,
        current_file=current_rel,
    )


if __name__ == "__main__":
    # Run in dev mode
    logging.basicConfig(level=logging.INFO)
    app.run(debug=False)
