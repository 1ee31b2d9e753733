from __future__ import annotations

from typing import Any

from .config import RenderOptions
from .markdown_parser import parse_markdown
from .renderer_html import render_html

MSGTYPE_TEXT = "m.text"
HTML_FORMAT = "org.matrix.custom.html"


def build_message_content(text: str, options: RenderOptions | None = None) -> dict[str, Any]:
    """Build the content of an ``m.room.message`` event for ``text``.

    The formatted body is attached only when rendering changed something,
    so plain messages go out as plain text.
    """
    content: dict[str, Any] = {"msgtype": MSGTYPE_TEXT, "body": text}
    html = render_html(parse_markdown(text), options)
    if html != text:
        content["format"] = HTML_FORMAT
        content["formatted_body"] = html
    return content
