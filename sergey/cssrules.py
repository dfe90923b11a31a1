from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from .errors import CssSyntaxError


@dataclass
class Rule:
    selectors: List[str]
    declarations: List[str] = field(default_factory=list)


@dataclass
class Raw:
    """Comment or at-rule, written back exactly as read."""
    text: str


Node = Union[Rule, Raw]

OPENERS = {"(": ")", "[": "]"}


def _skip_string(css: str, i: int) -> int:
    quote = css[i]
    k = i + 1
    n = len(css)
    while k < n:
        if css[k] == "\\":
            k += 2
            continue
        if css[k] == quote:
            return k + 1
        k += 1
    raise CssSyntaxError(f"Unterminated string at {i}")


def _skip_comment(css: str, i: int) -> int:
    end = css.find("*/", i + 2)
    if end == -1:
        raise CssSyntaxError(f"Unterminated comment at {i}")
    return end + 2


def _scan_until(css: str, i: int, stops: str) -> int:
    """Index of the first char in `stops` outside strings and comments, -1 if none."""
    n = len(css)
    while i < n:
        ch = css[i]
        if ch in "\"'":
            i = _skip_string(css, i)
            continue
        if css.startswith("/*", i):
            i = _skip_comment(css, i)
            continue
        if ch in stops:
            return i
        if ch == "}":
            raise CssSyntaxError(f"Unexpected '}}' at {i}")
        i += 1
    return -1


def _match_brace(css: str, j: int) -> int:
    """`css[j]` is '{'; return the index just after its matching '}'."""
    depth = 1
    k = j + 1
    n = len(css)
    while k < n:
        ch = css[k]
        if ch in "\"'":
            k = _skip_string(css, k)
            continue
        if css.startswith("/*", k):
            k = _skip_comment(css, k)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return k + 1
        k += 1
    raise CssSyntaxError(f"Unclosed block at {j}")


def split_top_level(text: str, sep: str) -> List[str]:
    """Split on `sep` outside strings, comments, brackets and parentheses."""
    parts: List[str] = []
    stack: List[str] = []
    last = 0
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in "\"'":
            i = _skip_string(text, i)
            continue
        if text.startswith("/*", i):
            i = _skip_comment(text, i)
            continue
        if ch in OPENERS:
            stack.append(OPENERS[ch])
        elif stack and ch == stack[-1]:
            stack.pop()
        elif ch == sep and not stack:
            parts.append(text[last:i])
            last = i + 1
        i += 1
    parts.append(text[last:])
    return [p.strip() for p in parts if p.strip()]


def parse_stylesheet(css: str) -> List[Node]:
    nodes: List[Node] = []
    i = 0
    n = len(css)
    while i < n:
        if css[i].isspace():
            i += 1
            continue
        if css.startswith("/*", i):
            end = _skip_comment(css, i)
            nodes.append(Raw(css[i:end]))
            i = end
            continue
        if css[i] == "}":
            raise CssSyntaxError(f"Unexpected '}}' at {i}")

        if css[i] == "@":
            j = _scan_until(css, i, "{;")
            if j == -1:
                raise CssSyntaxError(f"Unterminated at-rule at {i}")
            end = j + 1 if css[j] == ";" else _match_brace(css, j)
            nodes.append(Raw(css[i:end].strip()))
            i = end
            continue

        j = _scan_until(css, i, "{")
        if j == -1:
            raise CssSyntaxError(f"Missing '{{' after {css[i:].strip()[:40]!r}")
        end = _match_brace(css, j)
        selectors = split_top_level(css[i:j], ",")
        if not selectors:
            raise CssSyntaxError(f"Missing selector at {i}")
        body = css[j + 1:end - 1]
        if "{" in body:
            # nested rules are not scoped
            nodes.append(Raw(css[i:end].strip()))
        else:
            nodes.append(Rule(selectors, split_top_level(body, ";")))
        i = end
    return nodes


def serialize_stylesheet(nodes: List[Node]) -> str:
    out = []
    for node in nodes:
        if isinstance(node, Rule):
            decls = "".join(f"\n  {d};" for d in node.declarations)
            out.append(",\n".join(node.selectors) + " {" + decls + "\n}")
        else:
            out.append(node.text)
    return "\n\n".join(out)
