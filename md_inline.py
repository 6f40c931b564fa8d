#!/usr/bin/env python3
from __future__ import annotations

import re
from typing import Callable, Iterable, Iterator, Optional, Union

from config_loader import DEFAULT_CONFIG, DialectConfig
from md_blocks import (
    HEADING_BLOCK,
    HR_BLOCK,
    ORDERED_LIST_BLOCK,
    PARAGRAPH_BLOCK,
    UNORDERED_LIST_BLOCK,
    RawBlock,
)
from md_nodes import (
    Block,
    Bold,
    Document,
    Heading,
    HorizontalRule,
    Image,
    Inline,
    InlineContent,
    Link,
    OrderedList,
    Paragraph,
    Text,
    UnorderedList,
)

# Text still waiting for later passes is kept as plain str between nodes.
_Segment = Union[str, Inline]
_Maker = Callable[[re.Match], Optional[Inline]]


def _make_image(match: re.Match) -> Optional[Inline]:
    src = match.group(2).strip()
    if not src:
        return None
    return Image(alt=match.group(1), src=src)


def _make_link(match: re.Match) -> Optional[Inline]:
    return Link(children=(Text(match.group(1)),), href=match.group(2))


def _make_bold(match: re.Match) -> Optional[Inline]:
    return Bold(children=(Text(match.group(1)),))


def _match_spans(seg: str, pattern: re.Pattern, closer: Optional[str]) -> Iterator[re.Match]:
    """
    Yield pattern matches in seg, leftmost-first.

    With a closer, each line is only searched up to its last closer. Past
    that point no candidate can close, so the regex never rescans the tail
    of a line once per candidate.
    """
    if closer is None:
        yield from pattern.finditer(seg)
        return

    start = 0
    while True:
        nl = seg.find("\n", start)
        line_end = len(seg) if nl == -1 else nl
        last = seg.rfind(closer, start, line_end)
        if last != -1:
            yield from pattern.finditer(seg, start, last + len(closer))
        if nl == -1:
            return
        start = nl + 1


def _resolve(
    segments: list[_Segment],
    pattern: re.Pattern,
    make: _Maker,
    closer: Optional[str] = None,
) -> list[_Segment]:
    """
    Run one pattern over every unresolved text segment, leftmost-first.

    Resolved nodes are never revisited; matches that `make` rejects stay text.
    """
    out: list[_Segment] = []
    for seg in segments:
        if not isinstance(seg, str):
            out.append(seg)
            continue

        pos = 0
        for match in _match_spans(seg, pattern, closer):
            node = make(match)
            if node is None:
                continue
            if match.start() > pos:
                out.append(seg[pos : match.start()])
            out.append(node)
            pos = match.end()
        if pos < len(seg):
            out.append(seg[pos:])
    return _merge_text(out)


def _merge_text(segments: list[_Segment]) -> list[_Segment]:
    merged: list[_Segment] = []
    for seg in segments:
        if isinstance(seg, str) and merged and isinstance(merged[-1], str):
            merged[-1] += seg
        elif seg != "":
            merged.append(seg)
    return merged


def parse_inline(text: str, cfg: DialectConfig = DEFAULT_CONFIG) -> InlineContent:
    """
    Resolve inline markup in a block's raw text.

    Priority: images over the whole text, then links on what is left, then
    bold on what is left after that. So bold never resolves inside a link or
    image, and a link never resolves inside bold.
    """
    segments: list[_Segment] = [text] if text else []
    segments = _resolve(segments, cfg.image_re, _make_image, ")")
    segments = _resolve(segments, cfg.link_re, _make_link, ")")
    segments = _resolve(segments, cfg.bold_re, _make_bold)
    return tuple(Text(seg) if isinstance(seg, str) else seg for seg in segments)


def split_custom_anchor(text: str) -> tuple[str, Optional[str]]:
    """
    Split a trailing `{#id}` off heading text.

    Returns (title, anchor); anchor is None when the text carries none. The
    title must be non-empty and the id non-blank without a closing brace.
    """
    if not text.endswith("}"):
        return text, None
    idx = text.rfind("{#")
    if idx <= 0:
        return text, None
    anchor = text[idx + 2 : -1]
    title = text[:idx].rstrip()
    if not anchor.strip() or "}" in anchor or not title:
        return text, None
    return title, anchor.strip()


def build_block(raw: RawBlock, cfg: DialectConfig = DEFAULT_CONFIG) -> Block:
    """Parse the inline text of a RawBlock into a typed Block."""
    if raw.kind == HEADING_BLOCK:
        text, anchor = raw.texts[0], None
        if cfg.heading_ids:
            text, anchor = split_custom_anchor(text)
        return Heading(level=raw.level, content=parse_inline(text, cfg), anchor=anchor)
    if raw.kind == UNORDERED_LIST_BLOCK:
        return UnorderedList(items=tuple(parse_inline(t, cfg) for t in raw.texts))
    if raw.kind == ORDERED_LIST_BLOCK:
        return OrderedList(items=tuple(parse_inline(t, cfg) for t in raw.texts))
    if raw.kind == HR_BLOCK:
        return HorizontalRule()
    if raw.kind != PARAGRAPH_BLOCK:
        raise ValueError(f"Unknown block kind: {raw.kind!r}")
    return Paragraph(content=parse_inline("".join(raw.texts), cfg))


def build_document(raw_blocks: Iterable[RawBlock], cfg: DialectConfig = DEFAULT_CONFIG) -> Document:
    return [build_block(raw, cfg) for raw in raw_blocks]
