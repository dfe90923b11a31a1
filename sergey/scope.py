"""
Scoped stylesheets.

    <style sergey-scoped>          .a {}  ->  [data-sergey-scope-X] .a {}
    <style sergey-scoped="strict"> .a:hover {}  ->  .a[data-sergey-strict-X]:hover {}

Loose markers are stamped on the import's autotag wrapper, strict markers on
every element inside it. Markers are passed down to nested imports as a
ScopeContext so strict rules of a parent keep matching inside its children.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Callable, List, Tuple

from bs4.element import NavigableString, Tag

from .cssrules import Rule, parse_stylesheet, serialize_stylesheet
from .errors import CssSyntaxError
from .rewriter import add_attributes, parse, prepare_html, render_start_tag, rewrite


AUTOTAG = "data-sergey-autotag"
SCOPE_PREFIX = "data-sergey-scope-"
STRICT_PREFIX = "data-sergey-strict-"
SCOPED_ATTR = "sergey-scoped"
IGNORE_FLAG = "sergey-ignore"


@dataclass(frozen=True)
class ScopeContext:
    loose: Tuple[str, ...] = ()
    strict: Tuple[str, ...] = ()

    def extend(self, loose=(), strict=()) -> "ScopeContext":
        return ScopeContext(self.loose + tuple(loose), self.strict + tuple(strict))


EMPTY_SCOPE = ScopeContext()


def new_marker() -> str:
    return uuid.uuid4().hex[:10]


def _pseudo_index(selector: str) -> int:
    depth = 0
    quote = None
    for i, ch in enumerate(selector):
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch in "[(":
            depth += 1
        elif ch in "])":
            depth -= 1
        elif ch == ":" and depth == 0:
            return i
    return len(selector)


def apply_selector_scope(selector: str, marker: str, strict: bool = False) -> str:
    if not strict:
        return f"[{SCOPE_PREFIX}{marker}] {selector}"
    i = _pseudo_index(selector)
    return f"{selector[:i]}[{STRICT_PREFIX}{marker}]{selector[i:]}"


def scope_stylesheet(css: str, marker: str, strict: bool = False) -> str:
    nodes = parse_stylesheet(css)
    for node in nodes:
        if not isinstance(node, Rule):
            continue
        node.selectors = [
            s.replace(IGNORE_FLAG, "").strip() if IGNORE_FLAG in s else apply_selector_scope(s, marker, strict)
            for s in node.selectors
        ]
    return serialize_stylesheet(nodes)


def has_root_wrapper(markup: str) -> bool:
    if "<" not in markup:
        return False
    top = [c for c in parse(markup).contents if not (isinstance(c, NavigableString) and not c.strip())]
    return len(top) == 1 and isinstance(top[0], Tag) and top[0].has_attr(AUTOTAG)


def scope_styles(
    markup: str,
    inherited: ScopeContext = EMPTY_SCOPE,
    marker_factory: Callable[[], str] = new_marker,
) -> Tuple[str, ScopeContext]:
    """Scope the `<style sergey-scoped>` blocks of one import body.

    Returns the wrapped, stamped markup and the scope its nested imports inherit.
    """
    loose: List[str] = []
    strict: List[str] = []

    def scope_block(match):
        is_strict = match.tag.get(SCOPED_ATTR) == "strict"
        attrs = {k: v for k, v in match.tag.attrs.items() if k != SCOPED_ATTR}
        start = render_start_tag(match.tag.name, attrs)
        marker = marker_factory()
        try:
            css = scope_stylesheet(match.inner, marker, is_strict)
        except CssSyntaxError as e:
            print(f"[WARN] Unscoped style left as is: {e}")
            return f"{start}{match.inner}{match.end}"
        (strict if is_strict else loose).append(marker)
        return f"{start}{css}{match.end}"

    body = rewrite(markup or "", f"style[{SCOPED_ATTR}]", scope_block)
    scope = inherited.extend(loose, strict)

    if not has_root_wrapper(body):
        body = f'<div {AUTOTAG}="">{body}</div>'

    scope_names = [f"{SCOPE_PREFIX}{m}" for m in loose]
    if scope_names:
        body = rewrite(
            body,
            f"[{AUTOTAG}]",
            lambda m: add_attributes(m.start, [n for n in scope_names if not m.tag.has_attr(n)]),
            mode="start",
            limit=1,
        )

    strict_names = [f"{STRICT_PREFIX}{m}" for m in scope.strict]
    if strict_names:
        body = rewrite(
            body,
            f"*:not(style):not([{AUTOTAG}])",
            lambda m: add_attributes(m.start, [n for n in strict_names if not m.tag.has_attr(n)]),
            mode="start",
        )

    return body, scope


def clear_autotags(markup: str) -> str:
    def unwrap(match):
        attrs = {k: v for k, v in match.tag.attrs.items() if k != AUTOTAG}
        if not attrs:
            return match.inner
        return f"{render_start_tag(match.tag.name, attrs)}{match.inner}{match.end}"

    return rewrite(prepare_html(markup), f"[{AUTOTAG}]", unwrap)
