from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, List, Optional, Sequence

from .model import (
    Bold,
    BulletPoint,
    Code,
    Codeblock,
    Header,
    Italics,
    Line,
    Link,
    Node,
    Quotes,
    Spoiler,
    StrikeThrough,
    Text,
    Underline,
)

logger = logging.getLogger(__name__)

BLANKS = (" ", "\t")
MAX_HEADER_LEVEL = 6

# Checked in order: a doubled opener shadows its single form.
_EMPHASIS = (
    ("**", Bold, ""),
    ("*", Italics, "**"),
    ("__", Underline, ""),
    ("_", Italics, "__"),
    ("~~", StrikeThrough, ""),
    ("||", Spoiler, ""),
)


def find_closing(
    text: str, closing: str, excluded: str = "", stop_at_newline: bool = True, start: int = 0
) -> str | None:
    """Return the part of ``text`` from ``start`` up to the first acceptable ``closing`` delimiter.

    ``excluded`` names a longer delimiter that must not be mistaken for
    ``closing`` (``**`` for ``*``), except when the position starts with
    ``closing + excluded`` (``***``). A multi-character delimiter closes at
    the end of a longer run of its own character. Returns ``None`` when no
    position qualifies, or when a line break comes first and
    ``stop_at_newline`` is set. Nothing is copied until a match is found.
    """
    merged = closing + excluded
    for i in range(start, len(text)):
        if stop_at_newline and text[i] == "\n":
            return None
        if not text.startswith(closing, i):
            continue
        if excluded and text.startswith(excluded, i) and not text.startswith(merged, i):
            continue
        if len(closing) > 1 and text.startswith(closing, i + 1):
            continue
        return text[start:i]
    return None


def parse_inline(text: str) -> List[Node]:
    """Parse inline constructs only; everything else becomes ``Text`` runs."""
    nodes: List[Node] = []
    start = pos = 0
    while pos < len(text):
        parsed = parse_inline_at(text, pos)
        if parsed is None:
            pos += 1
            continue
        node, consumed = parsed
        if start < pos:
            nodes.append(Text(text[start:pos]))
        nodes.append(node)
        pos += consumed
        start = pos
    if start < len(text):
        nodes.append(Text(text[start:]))
    return nodes


def parse_inline_at(text: str, pos: int) -> tuple[Node, int] | None:
    """Recognize one inline construct at ``pos``.

    Returns the node and the number of characters it spans, delimiters
    included, or ``None`` when the text at ``pos`` is literal.
    """
    if text.startswith("```", pos):
        return _parse_codeblock(text, pos)
    if text.startswith("`", pos):
        return _parse_code(text, pos)
    if text.startswith("[", pos):
        return _parse_link(text, pos)
    for opener, node_type, excluded in _EMPHASIS:
        if text.startswith(opener, pos):
            return _parse_emphasis(text, pos, opener, node_type, excluded)
    return None


def _parse_emphasis(
    text: str, pos: int, delimiter: str, node_type: Callable[[Sequence[Node]], Node], excluded: str
) -> tuple[Node, int] | None:
    inner = find_closing(text, delimiter, excluded, start=pos + len(delimiter))
    if inner is None:
        return None
    return node_type(parse_inline(inner)), len(inner) + 2 * len(delimiter)


def _parse_code(text: str, pos: int) -> tuple[Node, int] | None:
    inner = find_closing(text, "`", start=pos + 1)
    if inner is None:
        return None
    return Code(inner), len(inner) + 2


def _parse_codeblock(text: str, pos: int) -> tuple[Node, int] | None:
    inner = find_closing(text, "```", stop_at_newline=False, start=pos + 3)
    if inner is None:
        return None
    language, newline, body = inner.partition("\n")
    if not newline:
        language, body = "", inner
    return Codeblock(language, body), len(inner) + 6


def _parse_link(text: str, pos: int) -> tuple[Node, int] | None:
    label = find_closing(text, "]", stop_at_newline=False, start=pos + 1)
    if label is None:
        return None
    paren = pos + len(label) + 2
    if not text.startswith("(", paren):
        return None
    href = find_closing(text, ")", stop_at_newline=False, start=paren + 1)
    if href is None:
        return None
    return Link(parse_inline(label), href), len(label) + len(href) + 4


class _State(enum.Enum):
    AT_LINE_START = "at_line_start"
    IN_LINE = "in_line"


@dataclass
class _OpenBlock:
    """Block container still accumulating the inline content of its line."""

    factory: Callable[[Sequence[Node]], Node]
    children: List[Node] = field(default_factory=list)

    def close(self) -> Node:
        return self.factory(self.children)


class _BlockDriver:
    def __init__(self, text: str) -> None:
        self.text = text
        self.nodes: List[Node] = []
        self.block: Optional[_OpenBlock] = None
        self.state = _State.AT_LINE_START
        self.pos = 0
        self.start = 0  # first character of the pending literal run
        self.line_start = 0

    def run(self) -> List[Node]:
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]
            if self.state is _State.AT_LINE_START:
                if char in BLANKS:
                    self.pos += 1
                    continue
                if char != "\n" and self._block_prefix(char):
                    continue
                if char != "\n":
                    self.state = _State.IN_LINE
            if char == "\n":
                self._line_break()
            else:
                self._inline_step(char)
        self._flush()
        self._close_block()
        return self.nodes

    def _block_prefix(self, char: str) -> bool:
        text, pos = self.text, self.pos
        if char == "-":
            end = self._horizontal_rule_end()
            if end is not None:
                self._flush(self.line_start)
                self.nodes.append(Line())
                self.pos = self.start = self.line_start = end
                return True
            return self._open_block(partial(BulletPoint, pos - self.line_start), pos + 1)
        if char == "#":
            level = _run_length(text, pos, "#")
            if level > MAX_HEADER_LEVEL:
                return False
            return self._open_block(partial(Header, level), pos + level)
        if char == ">" and text.startswith(BLANKS, pos + 1):
            return self._open_block(Quotes, pos + 1)
        return False

    def _horizontal_rule_end(self) -> int | None:
        text, pos = self.text, self.pos
        run = _run_length(text, pos, "-")
        if run < 3:
            return None
        newline = text.find("\n", pos + run)
        line_end = len(text) if newline == -1 else newline
        if text[pos + run : line_end].strip(" \t\r\f\v"):
            return None
        return line_end if newline == -1 else line_end + 1

    def _open_block(self, factory: Callable[[Sequence[Node]], Node], content_start: int) -> bool:
        # Indentation before the marker is dropped.
        self._flush(self.line_start)
        while content_start < len(self.text) and self.text[content_start] in BLANKS:
            content_start += 1
        self.block = _OpenBlock(factory)
        self.pos = self.start = content_start
        self.state = _State.IN_LINE
        return True

    def _inline_step(self, char: str) -> None:
        parsed = None if ord(char) > 0x7F else parse_inline_at(self.text, self.pos)
        if parsed is None:
            self.pos += 1
            return
        node, consumed = parsed
        self._flush()
        self._emit(node)
        self.pos += consumed
        self.start = self.pos

    def _line_break(self) -> None:
        if self.block is not None:
            self._flush()
            self._close_block()
            self.start = self.pos + 1
        self.pos += 1
        self.line_start = self.pos
        self.state = _State.AT_LINE_START

    def _flush(self, end: int | None = None) -> None:
        end = self.pos if end is None else end
        if self.start < end:
            self._emit(Text(self.text[self.start : end]))
        self.start = end

    def _emit(self, node: Node) -> None:
        if self.block is not None:
            self.block.children.append(node)
        else:
            self.nodes.append(node)

    def _close_block(self) -> None:
        if self.block is not None:
            self.nodes.append(self.block.close())
            self.block = None


def _run_length(text: str, pos: int, char: str) -> int:
    end = pos
    while end < len(text) and text[end] == char:
        end += 1
    return end - pos


def parse_markdown(text: str) -> List[Node]:
    nodes = _BlockDriver(text).run()
    logger.debug("Parsed %d characters into %d top-level nodes", len(text), len(nodes))
    return nodes
