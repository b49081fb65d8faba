"""Optional sections and placeholders of filename templates.

A template such as ``%artist - {%composer - }%title`` is made of literal
text, ``%name`` placeholders and ``{...}`` optional sections. A section
collapses to nothing when one of its own placeholders resolves empty, so
separators inside it disappear together with the missing value.

The template is parsed once into a small tree and rendered by recursive
descent; resolved values are inserted as plain text and never scanned
again for markers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from .config import FormatOptions
from .song import Song
from .tags import UNIQUE_TAGS, tag_value

BLOCK_PATTERN = r"\{([^{}]+)\}"
TAG_PATTERN = r"\%([a-zA-Z]*)"

_tag_re = re.compile(TAG_PATTERN)


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Placeholder:
    name: str


@dataclass(frozen=True)
class Section:
    children: tuple["Node", ...]


Node = Union[Literal, Placeholder, Section]


@dataclass
class BlockResult:
    """Rendered text of one level plus the flags the caller needs.

    ``unique`` covers the whole evaluation; ``empty`` only this level's own
    placeholders, nested sections excluded.
    """

    text: str
    unique: bool = False
    empty: bool = False


@dataclass
class _State:
    unique: bool = False


def _match_braces(text: str) -> dict[int, int]:
    """Map each ``{`` that opens a section to its ``}``.

    A pair is a section only when its content is non-empty and holds no
    literal brace; an empty ``{}`` stays literal and so does every pair
    around it.
    """
    pairs: dict[int, int] = {}
    # [start, holds a literal brace]
    stack: list[list] = []
    for i, ch in enumerate(text):
        if ch == "{":
            stack.append([i, False])
        elif ch == "}" and stack:
            start, tainted = stack.pop()
            if i - start > 1 and not tainted:
                pairs[start] = i
            elif stack:
                stack[-1][1] = True
    return pairs


def _parse(text: str, start: int, end: int, pairs: dict[int, int]) -> tuple[Node, ...]:
    nodes: list[Node] = []
    buf: list[str] = []

    def flush() -> None:
        if buf:
            nodes.append(Literal("".join(buf)))
            buf.clear()

    pos = start
    while pos < end:
        ch = text[pos]
        if ch == "{" and pos in pairs:
            flush()
            close = pairs[pos]
            nodes.append(Section(_parse(text, pos + 1, close, pairs)))
            pos = close + 1
        elif ch == "%":
            flush()
            m = _tag_re.match(text, pos, end)
            nodes.append(Placeholder(m.group(1)))
            pos = m.end()
        else:
            buf.append(ch)
            pos += 1
    flush()
    return tuple(nodes)


def parse_template(text: str) -> tuple[Node, ...]:
    """Parse ``text`` into literals, placeholders and sections.

    Unbalanced braces, empty ``{}`` pairs and any pair enclosing one are kept
    as literal text.
    """
    return _parse(text, 0, len(text), _match_braces(text))


def _render(
    nodes: tuple[Node, ...], song: Song, options: FormatOptions, state: _State
) -> BlockResult:
    out: list[str] = []
    empty = False
    for node in nodes:
        if isinstance(node, Literal):
            out.append(node.text)
        elif isinstance(node, Placeholder):
            value = tag_value(node.name, song, options)
            if not value:
                empty = True
            elif node.name in UNIQUE_TAGS:
                state.unique = True
            out.append(value)
        else:
            inner = _render(node.children, song, options, state)
            out.append("" if inner.empty else inner.text)
    return BlockResult("".join(out), state.unique, empty)


def evaluate(text: str, song: Song, options: FormatOptions | None = None) -> BlockResult:
    """Expand sections and placeholders of ``text`` for ``song``."""
    state = _State()
    return _render(parse_template(text), song, options or FormatOptions(), state)


def placeholders(nodes: tuple[Node, ...]) -> list[str]:
    """Names of every placeholder in ``nodes``, depth first."""
    names: list[str] = []
    for node in nodes:
        if isinstance(node, Placeholder):
            names.append(node.name)
        elif isinstance(node, Section):
            names.extend(placeholders(node.children))
    return names
