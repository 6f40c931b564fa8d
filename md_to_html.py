#!/usr/bin/env python3
"""
md_to_html.py

Article markup -> HTML fragment, for the editor preview.

Pipeline (one synchronous pass per call, nothing kept between calls):

- md_lexer.classify_lines()   raw text -> classified lines
- md_blocks.parse_blocks()    lines -> raw blocks (lists merged, paragraphs joined)
- md_inline.build_document()  raw blocks -> typed blocks with inline nodes
- render_blocks()             typed blocks -> HTML fragment

Scope (intentionally small):
- Headings -> <h1>..<h3>
- Paragraphs -> <p>...</p>, soft line breaks -> <br/>
- "- " items -> <ul>, "N. " items -> <ol> (renumbered from 1)
- "---" -> <hr/>
- **bold**, [text](http://...), ![alt](url)

Any other text, HTML included, is escaped and shown literally.
"""
from __future__ import annotations

import argparse
import html
import logging
import re
import sys
from pathlib import Path
from typing import Optional

from config_loader import DEFAULT_CONFIG, DialectConfig, load_config
from md_blocks import parse_blocks
from md_inline import build_document
from md_lexer import classify_lines
from md_nodes import (
    LINE_BREAK,
    Block,
    Bold,
    Document,
    Heading,
    HorizontalRule,
    Image,
    Inline,
    Link,
    OrderedList,
    Paragraph,
    Text,
    UnorderedList,
    plain_text,
)
from md_reader import read_source, safe_input_path

logger = logging.getLogger(__name__)

_SLUG_DROP_RE = re.compile(r"[^\w\s-]")
_SLUG_SPACE_RE = re.compile(r"\s+")


def escape_text(text: str) -> str:
    """Escape literal text: &, < and > only."""
    return html.escape(text, quote=False)


def escape_attr(value: str) -> str:
    """Escape an attribute value, quotes included."""
    return html.escape(value, quote=True)


def heading_tag_for_level(level: int, max_level: int = 3) -> str:
    """Map a heading level to an HTML heading tag."""
    safe_level = max(1, min(max_level, level))
    return f"h{safe_level}"


def slugify(text: str) -> str:
    """
    Turn heading text into an anchor id.

    'Skin Care: Basics!' -> 'skin-care-basics'
    """
    slug = _SLUG_DROP_RE.sub("", text.strip().lower())
    return _SLUG_SPACE_RE.sub("-", slug).strip("-")


def assign_heading_ids(blocks: Document) -> dict[int, str]:
    """
    Return {block index: id} for every heading, unique within the document.

    An explicit {#id} anchor is used as given. Repeated ids get -2, -3, ... ;
    headings with no usable text become 'section', 'section-2', ...
    """
    ids: dict[int, str] = {}
    used: set[str] = set()
    counters: dict[str, int] = {}
    for idx, block in enumerate(blocks):
        if not isinstance(block, Heading):
            continue
        base = block.anchor or slugify(plain_text(block.content)) or "section"
        n = counters.get(base, 0)
        candidate = base if n == 0 else f"{base}-{n + 1}"
        while candidate in used:
            n += 1
            candidate = f"{base}-{n + 1}"
        counters[base] = n + 1
        used.add(candidate)
        ids[idx] = candidate
    return ids


def render_inline(nodes: tuple[Inline, ...], cfg: DialectConfig = DEFAULT_CONFIG) -> str:
    """
    Render inline nodes to HTML.

    node types:
      - Text   -> escaped text, line breaks as <br/>
      - Bold   -> <strong>
      - Link   -> <a href="..." target=... rel=...>
      - Image  -> <img src="..." alt="..." />
    """
    out: list[str] = []
    for node in nodes:
        if isinstance(node, Text):
            out.append(escape_text(node.text).replace(LINE_BREAK, "<br/>"))

        elif isinstance(node, Bold):
            out.append(f"<strong>{render_inline(node.children, cfg)}</strong>")

        elif isinstance(node, Link):
            attrs = [f'href="{escape_attr(node.href)}"']
            if cfg.link_target:
                attrs.append(f'target="{escape_attr(cfg.link_target)}"')
            if cfg.link_rel:
                attrs.append(f'rel="{escape_attr(cfg.link_rel)}"')
            out.append(f"<a {' '.join(attrs)}>{render_inline(node.children, cfg)}</a>")

        elif isinstance(node, Image):
            out.append(f'<img src="{escape_attr(node.src)}" alt="{escape_attr(node.alt)}" />')

    return "".join(out)


def render_block(
    block: Block,
    cfg: DialectConfig = DEFAULT_CONFIG,
    *,
    anchor: Optional[str] = None,
) -> str:
    """Render one block. `anchor` becomes the id of a heading."""
    if isinstance(block, Heading):
        tag = heading_tag_for_level(block.level, cfg.max_heading_level)
        id_attr = f' id="{escape_attr(anchor)}"' if anchor else ""
        return f"<{tag}{id_attr}>{render_inline(block.content, cfg)}</{tag}>"

    if isinstance(block, Paragraph):
        return f"<p>{render_inline(block.content, cfg)}</p>"

    if isinstance(block, (UnorderedList, OrderedList)):
        # ordered lists ignore the author's digits; the browser numbers from 1
        tag = "ul" if isinstance(block, UnorderedList) else "ol"
        items = "".join(f"<li>{render_inline(item, cfg)}</li>" for item in block.items)
        return f"<{tag}>{items}</{tag}>"

    if isinstance(block, HorizontalRule):
        return "<hr/>"

    return ""


def render_toc(blocks: Document, ids: dict[int, str]) -> str:
    """Render a table of contents linking to each heading's id."""
    items: list[str] = []
    for idx, block in enumerate(blocks):
        if not isinstance(block, Heading) or idx not in ids:
            continue
        label = escape_text(plain_text(block.content))
        items.append(
            f'<li class="toc-level-{block.level}">'
            f'<a href="#{escape_attr(ids[idx])}">{label}</a></li>'
        )
    return f'<nav class="toc"><ul>{"".join(items)}</ul></nav>'


def render_blocks(blocks: Document, cfg: DialectConfig = DEFAULT_CONFIG) -> str:
    """Render a whole document as an HTML fragment, one block per line."""
    ids = assign_heading_ids(blocks) if cfg.heading_ids else {}
    want_toc = cfg.toc and len(ids) >= cfg.toc_min_headings

    out: list[str] = []
    for idx, block in enumerate(blocks):
        if want_toc and idx == min(ids):
            out.append(render_toc(blocks, ids))
        out.append(render_block(block, cfg, anchor=ids.get(idx)))
    return "\n".join(out)


def parse_document(raw_text: str, cfg: DialectConfig = DEFAULT_CONFIG) -> Document:
    """Run the parsing stages only: text -> typed blocks."""
    lines = classify_lines(raw_text or "", cfg)
    raw_blocks = parse_blocks(lines)
    return build_document(raw_blocks, cfg)


def render(raw_text: str, cfg: DialectConfig = DEFAULT_CONFIG) -> str:
    """
    Render article markup to an HTML fragment.

    Total over all strings: unrecognized markup is shown as escaped text.
    """
    blocks = parse_document(raw_text, cfg)
    logger.debug("Rendering %d blocks from %d chars", len(blocks), len(raw_text or ""))
    return render_blocks(blocks, cfg)


def open_html_document(title: str) -> str:
    """Return the HTML prolog for a standalone preview page."""
    return (
        "<!doctype html>\n"
        "<html lang=\"en\">\n"
        "<head>\n"
        "  <meta charset=\"utf-8\" />\n"
        f"  <title>{escape_text(title)}</title>\n"
        "  <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />\n"
        "</head>\n"
        "<body>\n"
        "<article class=\"preview\">\n"
    )


def close_html_document() -> str:
    """Return the HTML epilog."""
    return "\n</article>\n</body>\n</html>\n"


def render_document(
    raw_text: str,
    cfg: DialectConfig = DEFAULT_CONFIG,
    *,
    title: Optional[str] = None,
) -> str:
    """
    Render markup into a complete HTML document.

    Without an explicit title, the first heading's text is used.
    """
    blocks = parse_document(raw_text, cfg)
    if title is None:
        first = next((b for b in blocks if isinstance(b, Heading)), None)
        title = plain_text(first.content) if first is not None else "Article Preview"
    return open_html_document(title) + render_blocks(blocks, cfg) + close_html_document()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="md_to_html.py",
        description="Render article markup to HTML.",
    )
    parser.add_argument("input", help="Input file, or '-' to read stdin")
    parser.add_argument("-o", "--output", default=None, help="Output HTML file (default: stdout)")
    parser.add_argument("-c", "--config", default=None, help="Config YAML file (default: built-in settings)")
    parser.add_argument("--fragment", action="store_true", help="Emit only the HTML fragment, no document wrapper")
    parser.add_argument("--title", default=None, help="Document title (default: first heading)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline details to stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    cfg = DEFAULT_CONFIG
    if args.config:
        try:
            cfg = load_config(Path(args.config))
        except Exception as e:
            print(f"[md_to_html] Failed to load config: {e}", file=sys.stderr)
            return 2

    if args.input == "-":
        raw_text = sys.stdin.read()
    else:
        try:
            input_path = safe_input_path(args.input)
        except (ValueError, OSError) as e:
            print(f"[md_to_html] Invalid input path: {e}", file=sys.stderr)
            return 2
        try:
            raw_text = read_source(input_path)
        except (OSError, UnicodeDecodeError) as e:
            print(f"[md_to_html] Error while reading: {e}", file=sys.stderr)
            return 1

    if args.fragment:
        result = render(raw_text, cfg) + "\n"
    else:
        result = render_document(raw_text, cfg, title=args.title)

    if args.output:
        try:
            Path(args.output).write_text(result, encoding="utf-8")
        except OSError as e:
            print(f"[md_to_html] Error while writing: {e}", file=sys.stderr)
            return 1
    else:
        sys.stdout.write(result)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
