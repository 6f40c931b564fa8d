#!/usr/bin/env python3
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from md_lexer import BLANK, HEADING, HR, ORDERED_ITEM, TEXT, UNORDERED_ITEM, ClassifiedLine
from md_nodes import LINE_BREAK

# Raw block kinds
HEADING_BLOCK = "heading"
PARAGRAPH_BLOCK = "paragraph"
UNORDERED_LIST_BLOCK = "unordered_list"
ORDERED_LIST_BLOCK = "ordered_list"
HR_BLOCK = "hr"

# Accumulator states
NONE = "none"
LIST = "list"
PARAGRAPH = "paragraph"

_LIST_BLOCK_FOR_ITEM = {
    UNORDERED_ITEM: UNORDERED_LIST_BLOCK,
    ORDERED_ITEM: ORDERED_LIST_BLOCK,
}


@dataclass(frozen=True)
class RawBlock:
    """
    A block whose inline text has not been parsed yet.

    texts holds one entry per list item; headings and paragraphs have exactly
    one entry (a paragraph's lines joined with LINE_BREAK); rules have none.
    """
    kind: str
    level: int = 0
    texts: tuple[str, ...] = ()


@dataclass
class BlockState:
    """
    Accumulator for the block pass.

    mode:
      - "none"       nothing open
      - "list"       list_kind is "unordered_list" | "ordered_list", parts are items
      - "paragraph"  parts are the paragraph's lines
    """
    mode: str = NONE
    list_kind: Optional[str] = None
    parts: list[str] = field(default_factory=list)

    def close(self) -> Optional[RawBlock]:
        """Turn the open accumulator into a block and reset to "none"."""
        block: Optional[RawBlock] = None
        if self.mode == LIST:
            block = RawBlock(kind=self.list_kind or UNORDERED_LIST_BLOCK, texts=tuple(self.parts))
        elif self.mode == PARAGRAPH:
            block = RawBlock(kind=PARAGRAPH_BLOCK, texts=(LINE_BREAK.join(self.parts),))

        self.mode = NONE
        self.list_kind = None
        self.parts = []
        return block


def parse_blocks(lines: Iterable[ClassifiedLine]) -> list[RawBlock]:
    """
    Group classified lines into blocks in one left-to-right pass.

    - heading / rule: close what is open, emit immediately
    - list item: extend an open list of the same kind, else start a new one
    - text: ends any list; opens or extends a paragraph
    - blank: closes whatever is open, emits nothing
    """
    blocks: list[RawBlock] = []
    state = BlockState()

    def close_open() -> None:
        block = state.close()
        if block is not None:
            blocks.append(block)

    for line in lines:
        if line.kind == HEADING:
            close_open()
            blocks.append(RawBlock(kind=HEADING_BLOCK, level=line.level, texts=(line.text,)))

        elif line.kind == HR:
            close_open()
            blocks.append(RawBlock(kind=HR_BLOCK))

        elif line.kind in _LIST_BLOCK_FOR_ITEM:
            list_kind = _LIST_BLOCK_FOR_ITEM[line.kind]
            if not (state.mode == LIST and state.list_kind == list_kind):
                close_open()
                state.mode = LIST
                state.list_kind = list_kind
            state.parts.append(line.text)

        elif line.kind == TEXT:
            if state.mode == LIST:
                close_open()
            state.mode = PARAGRAPH
            state.parts.append(line.text)

        elif line.kind == BLANK:
            close_open()

    close_open()
    return blocks
