#!/usr/bin/env python3
from __future__ import annotations

from dataclasses import dataclass

from config_loader import DEFAULT_CONFIG, DialectConfig

# Line kinds, in classification precedence order.
HR = "hr"
HEADING = "heading"
UNORDERED_ITEM = "unordered_item"
ORDERED_ITEM = "ordered_item"
BLANK = "blank"
TEXT = "text"

LINE_KINDS = (HR, HEADING, UNORDERED_ITEM, ORDERED_ITEM, BLANK, TEXT)


@dataclass(frozen=True)
class ClassifiedLine:
    """
    One source line after classification.

    kind:
      - "hr"              -> text == ""
      - "heading"         -> level 1..max, text is the heading text
      - "unordered_item"  -> text after "- "
      - "ordered_item"    -> text after "N. "
      - "blank"           -> text == ""
      - "text"            -> text is the line verbatim
    """
    kind: str
    text: str = ""
    level: int = 0
    raw: str = ""


def split_lines(text: str) -> list[str]:
    """Split on \\n, \\r\\n or \\r. Always returns at least one line."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def classify_line(line: str, cfg: DialectConfig = DEFAULT_CONFIG) -> ClassifiedLine:
    """
    Classify a single physical line. First match wins:
    rule, heading, unordered item, ordered item, blank, text.
    """
    if line == cfg.hr_line:
        return ClassifiedLine(kind=HR, raw=line)

    # "#### x" fails here (level bound) and falls through to text
    match = cfg.heading_re.match(line)
    if match:
        return ClassifiedLine(
            kind=HEADING,
            text=match.group(2).rstrip(),
            level=len(match.group(1)),
            raw=line,
        )

    match = cfg.unordered_list_re.match(line)
    if match:
        return ClassifiedLine(kind=UNORDERED_ITEM, text=match.group(1).strip(), raw=line)

    match = cfg.ordered_list_re.match(line)
    if match:
        return ClassifiedLine(kind=ORDERED_ITEM, text=match.group(1).strip(), raw=line)

    if line.strip() == "":
        return ClassifiedLine(kind=BLANK, raw=line)

    return ClassifiedLine(kind=TEXT, text=line, raw=line)


def classify_lines(text: str, cfg: DialectConfig = DEFAULT_CONFIG) -> list[ClassifiedLine]:
    return [classify_line(line, cfg) for line in split_lines(text or "")]
