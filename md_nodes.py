#!/usr/bin/env python3
"""
Value types for a parsed article.

Blocks:
  Heading(level, content, anchor), Paragraph(content), UnorderedList(items),
  OrderedList(items), HorizontalRule()

Inlines:
  Text(text), Bold(children), Link(children, href), Image(alt, src)

All nodes are frozen and hold tuples, so a Document built for one render
call can be handed around without anyone mutating it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

# Marks a soft line break inside a paragraph's raw text.
LINE_BREAK = "\n"


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Bold:
    children: tuple["Inline", ...]


@dataclass(frozen=True)
class Link:
    children: tuple["Inline", ...]
    href: str


@dataclass(frozen=True)
class Image:
    alt: str
    src: str


Inline = Union[Text, Bold, Link, Image]
InlineContent = tuple[Inline, ...]


@dataclass(frozen=True)
class Heading:
    level: int
    content: InlineContent
    # Explicit `{#id}` from the source, only parsed when heading ids are on.
    anchor: Optional[str] = None


@dataclass(frozen=True)
class Paragraph:
    content: InlineContent


@dataclass(frozen=True)
class UnorderedList:
    items: tuple[InlineContent, ...]


@dataclass(frozen=True)
class OrderedList:
    items: tuple[InlineContent, ...]


@dataclass(frozen=True)
class HorizontalRule:
    pass


Block = Union[Heading, Paragraph, UnorderedList, OrderedList, HorizontalRule]
Document = list[Block]


def plain_text(content: InlineContent) -> str:
    """Flatten inline content to its visible text (images contribute their alt)."""
    parts: list[str] = []
    for node in content:
        if isinstance(node, Text):
            parts.append(node.text)
        elif isinstance(node, (Bold, Link)):
            parts.append(plain_text(node.children))
        elif isinstance(node, Image):
            parts.append(node.alt)
    return "".join(parts)
