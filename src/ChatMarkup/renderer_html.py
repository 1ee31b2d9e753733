from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from markdown_it.common.utils import escapeHtml

from .config import RenderOptions
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

# Containers rendered as a plain open/close tag pair around their children.
WRAPPING_TAGS = {
    Bold: ("<strong>", "</strong>"),
    Italics: ("<em>", "</em>"),
    Underline: ("<u>", "</u>"),
    StrikeThrough: ("<del>", "</del>"),
    Quotes: ("<blockquote>", "</blockquote>"),
    Spoiler: ("<span data-mx-spoiler>", "</span>"),
}


@dataclass
class RenderState:
    options: RenderOptions
    parts: list[str] = field(default_factory=list)
    # Depths of the currently open <ul> elements, innermost last.
    list_depths: list[int] = field(default_factory=list)

    def emit(self, html: str) -> None:
        self.parts.append(html)

    def escape(self, text: str) -> str:
        return escapeHtml(text) if self.options.escape_html else text


def render_html(nodes: Iterable[Node], options: RenderOptions | None = None) -> str:
    """Serialize a parsed message to an HTML fragment."""
    state = RenderState(options=options or RenderOptions())
    _render_nodes(nodes, state)
    html = "".join(state.parts)
    logger.debug("Rendered %d characters of HTML", len(html))
    return html


def _render_nodes(nodes: Iterable[Node], state: RenderState) -> None:
    outer_depths = state.list_depths
    state.list_depths = []
    for node in nodes:
        if isinstance(node, BulletPoint):
            _open_list_level(node.depth, state)
            state.emit("<li>")
            _render_nodes(node.children, state)
            state.emit("</li>")
        else:
            _close_list_levels(state)
            _dispatch_node(node, state)
    _close_list_levels(state)
    state.list_depths = outer_depths


def _open_list_level(depth: int, state: RenderState) -> None:
    depths = state.list_depths
    while depths and depths[-1] > depth:
        depths.pop()
        state.emit("</ul>")
    if not depths or depths[-1] < depth:
        depths.append(depth)
        state.emit("<ul>")


def _close_list_levels(state: RenderState) -> None:
    while state.list_depths:
        state.list_depths.pop()
        state.emit("</ul>")


def _dispatch_node(node: Node, state: RenderState) -> None:
    if isinstance(node, Text):
        state.emit(state.escape(node.text))
    elif isinstance(node, Code):
        state.emit(f"<code>{state.escape(node.text)}</code>")
    elif isinstance(node, Codeblock):
        _render_codeblock(node, state)
    elif isinstance(node, Line):
        state.emit("<hr>")
    elif isinstance(node, Header):
        state.emit(f"<h{node.level}>")
        _render_nodes(node.children, state)
        state.emit(f"</h{node.level}>")
    elif isinstance(node, Link):
        state.emit(f'<a href="{state.escape(node.href)}">')
        _render_nodes(node.children, state)
        state.emit("</a>")
    elif type(node) in WRAPPING_TAGS:
        opening, closing = WRAPPING_TAGS[type(node)]
        state.emit(opening)
        _render_nodes(node.children, state)
        state.emit(closing)
    else:
        raise TypeError(f"Cannot render node of type {type(node).__name__}")


def _render_codeblock(node: Codeblock, state: RenderState) -> None:
    options = state.options
    language = node.language.strip()
    if options.code_language_class and language:
        language = state.escape(language)
        state.emit(f'<pre><code class="{options.language_prefix}{language}">')
    else:
        state.emit("<pre><code>")
    state.emit(state.escape(node.code))
    state.emit("</code></pre>")
