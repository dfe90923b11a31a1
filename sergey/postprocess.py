from __future__ import annotations

from typing import List

from .rewriter import rewrite
from .scope import clear_autotags


def hoist_styles(markup: str) -> str:
    """Move every <style> of a compiled page into one block in <head> (or at the end)."""
    body = clear_autotags(markup)

    stylesheet: List[str] = []

    def collect(match):
        stylesheet.append(match.inner)
        return ""

    body = rewrite(body, "style", collect)
    if not stylesheet:
        return body

    stylesheet.reverse()
    style = "<style>" + "\n".join(stylesheet) + "</style>"
    if "</head>" in body:
        return body.replace("</head>", f"{style}</head>", 1)
    return body + style
