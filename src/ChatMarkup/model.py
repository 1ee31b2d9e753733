from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Node:
    """Base class for document tree nodes."""


@dataclass(frozen=True)
class Container(Node):
    """Node holding an ordered sequence of child nodes."""

    def __post_init__(self) -> None:
        # Accept any sequence, store an immutable tuple.
        object.__setattr__(self, "children", tuple(self.children))


@dataclass(frozen=True)
class Text(Node):
    text: str


@dataclass(frozen=True)
class Code(Node):
    text: str


@dataclass(frozen=True)
class Codeblock(Node):
    language: str
    code: str


@dataclass(frozen=True)
class Line(Node):
    """Horizontal rule."""


@dataclass(frozen=True)
class Bold(Container):
    children: Tuple[Node, ...] = ()


@dataclass(frozen=True)
class Italics(Container):
    children: Tuple[Node, ...] = ()


@dataclass(frozen=True)
class Underline(Container):
    children: Tuple[Node, ...] = ()


@dataclass(frozen=True)
class StrikeThrough(Container):
    children: Tuple[Node, ...] = ()


@dataclass(frozen=True)
class Spoiler(Container):
    children: Tuple[Node, ...] = ()


@dataclass(frozen=True)
class Quotes(Container):
    children: Tuple[Node, ...] = ()


@dataclass(frozen=True)
class Header(Container):
    level: int
    children: Tuple[Node, ...] = ()


@dataclass(frozen=True)
class BulletPoint(Container):
    depth: int
    children: Tuple[Node, ...] = ()


@dataclass(frozen=True)
class Link(Container):
    children: Tuple[Node, ...] = ()
    href: str = ""

