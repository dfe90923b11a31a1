"""
Selector-based string patching.

Elements are located with BeautifulSoup, but the document is never
re-serialized: every match carries the exact source text it occupies, and
replacements are made on the original string. Markup the transform did not
touch keeps its whitespace, quoting and entities.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import Tag


# https://html.spec.whatwg.org/multipage/syntax.html#void-elements
VOID_ELEMENTS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
}
RAW_TEXT_ELEMENTS = {"script", "style"}

START_TAG_RE = re.compile(r"""<[^\s/>]+(?:[^>"']|"[^"]*"|'[^']*')*>""")
TAG_RE = re.compile(r"""<!--.*?-->|<(/?)([a-zA-Z][\w:.-]*)((?:[^>"']|"[^"]*"|'[^']*')*)>""", re.S)
SELF_CLOSING_RE = re.compile(r"""<([a-zA-Z][\w:.]*-[\w:.-]*)((?:[^>"'/]|"[^"]*"|'[^']*'|/(?!>))*)/>""")
BARE_TAG_SELECTOR_RE = re.compile(r"^[a-zA-Z][\w-]*$")


@dataclass
class Match:
    """A matched element and the source text it occupies."""
    tag: Tag
    start: str
    inner: str
    end: str

    @property
    def outer(self) -> str:
        return f"{self.start}{self.inner}{self.end}"


def parse(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, "html.parser", multi_valued_attributes=None)


def prepare_html(markup: str) -> str:
    """`<sergey-slot ... />` -> `<sergey-slot ...></sergey-slot>`.

    Only custom (hyphenated) tags are expanded; `<br />` or an SVG `<path />`
    stay as written.
    """
    if not markup or not markup.strip():
        return markup or ""

    def expand(m: re.Match) -> str:
        name = m.group(1)
        return f"<{name}{m.group(2).rstrip()}></{name}>"

    return SELF_CLOSING_RE.sub(expand, markup)


def escape_attr(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;")


def render_start_tag(name: str, attrs: Dict[str, str]) -> str:
    parts = [name]
    for key, value in attrs.items():
        parts.append(f'{key}="{escape_attr(value or "")}"')
    return "<" + " ".join(parts) + ">"


def add_attributes(start: str, names: List[str]) -> str:
    """Append presence attributes to a start tag without touching the rest of it."""
    if not names:
        return start
    extra = "".join(f' {name}=""' for name in names)
    if start.endswith("/>"):
        return f"{start[:-2].rstrip()}{extra} />"
    return f"{start[:-1].rstrip()}{extra}>"


def _line_offsets(source: str) -> List[int]:
    offsets = [0]
    offsets.extend(m.end() for m in re.finditer("\n", source))
    return offsets


def _element_region(source: str, offset: int, name: str):
    m = START_TAG_RE.match(source, offset)
    if not m:
        return None
    start_end = m.end()
    if name in VOID_ELEMENTS or m.group(0).endswith("/>"):
        return offset, start_end, start_end, start_end

    if name in RAW_TEXT_ELEMENTS:
        close = re.compile(rf"</{name}\s*>", re.I).search(source, start_end)
        if not close:
            return offset, start_end, len(source), len(source)
        return offset, start_end, close.start(), close.end()

    depth = 1
    for t in TAG_RE.finditer(source, start_end):
        tag_name = t.group(2)
        if not tag_name or tag_name.lower() != name:
            continue
        if t.group(1):
            depth -= 1
            if depth == 0:
                return offset, start_end, t.start(), t.end()
        elif not t.group(3).rstrip().endswith("/"):
            depth += 1
    # never closed: only the start tag is ours
    return offset, start_end, start_end, start_end


def _capture(source: str, offsets: List[int], tag: Tag) -> Match:
    region = None
    if tag.sourceline is not None and tag.sourcepos is not None:
        offset = offsets[tag.sourceline - 1] + tag.sourcepos
        region = _element_region(source, offset, tag.name)
    if region is None:
        end = "" if tag.name in VOID_ELEMENTS else f"</{tag.name}>"
        return Match(tag, render_start_tag(tag.name, tag.attrs), tag.decode_contents(), end)
    a, b, c, d = region
    return Match(tag, source[a:b], source[b:c], source[c:d])


def find_all(markup: str, selector: str, limit: Optional[int] = None) -> List[Match]:
    if not markup or "<" not in markup:
        return []
    try:
        tags = parse(markup).select(selector)
    except ParserRejectedMarkup:
        return []
    if limit is not None:
        tags = tags[:limit]
    offsets = _line_offsets(markup)
    return [_capture(markup, offsets, tag) for tag in tags]


def rewrite(
    markup: str,
    selector: str,
    fn: Callable[[Match], str],
    mode: str = "outer",
    limit: Optional[int] = None,
) -> str:
    """Replace every element matching `selector` with `fn(match)`.

    `mode` picks which part of the source is replaced: the whole element
    (`outer`), its content (`inner`) or its start tag (`start`). Each
    replacement hits the first remaining occurrence of the captured text.
    """
    body = markup or ""

    def apply(source: str) -> None:
        nonlocal body
        for match in find_all(source, selector, limit):
            if mode == "start":
                find = match.start
            elif mode == "inner":
                find = match.inner
            else:
                find = match.outer
            if not find or find not in body:
                continue
            body = body.replace(find, fn(match), 1)

    apply(body)

    # tags inside attribute values of other tags:
    # <meta foo="<sergey-slot></sergey-slot>">
    if (
        mode == "outer"
        and limit is None
        and BARE_TAG_SELECTOR_RE.match(selector)
        and f"</{selector}>" in body
    ):
        tag = re.escape(selector)
        leftovers = re.findall(rf"<{tag}[^<]*>[^<]*</{tag}>", body)
        if leftovers:
            apply("".join(leftovers))

    return body
