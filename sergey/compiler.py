from __future__ import annotations

from typing import Callable, Dict, Optional

import markdown

from .errors import TemplateDepthError
from .fragments import FragmentStore
from .links import activate_links
from .rewriter import prepare_html, rewrite
from .scope import EMPTY_SCOPE, ScopeContext, clear_autotags, new_marker, scope_styles
from .slots import DEFAULT_SLOT, extract_slots, format_content


DEFAULT_MAX_DEPTH = 50


def render_markdown(text: str) -> str:
    return markdown.markdown(text, extensions=["extra"])


def has_imports(body: str) -> bool:
    return "<sergey-import" in body


class Compiler:
    """Expands sergey tags in a page against a populated FragmentStore."""

    def __init__(
        self,
        store: FragmentStore,
        active_class: str = "active",
        render_markdown: Callable[[str], str] = render_markdown,
        max_depth: int = DEFAULT_MAX_DEPTH,
        marker_factory: Callable[[], str] = new_marker,
    ):
        self.store = store
        self.active_class = active_class
        self.render_markdown = render_markdown
        self.max_depth = max_depth
        self.marker_factory = marker_factory

    def prime_fragment(self, key: str, text: str) -> None:
        self.store.put(key, text)

    def compile(self, page: str) -> str:
        return self.compile_template(page)

    def activate_links(self, markup: str, path: str) -> str:
        return activate_links(markup, path, self.active_class)

    def compile_template(
        self,
        body: str,
        slots: Optional[Dict[str, str]] = None,
        scope: ScopeContext = EMPTY_SCOPE,
        depth: int = 0,
    ) -> str:
        if depth > self.max_depth:
            raise TemplateDepthError(f"Imports nested deeper than {self.max_depth} levels (import cycle?)")

        body = prepare_html(body)
        body = self.compile_slots(body, slots or {DEFAULT_SLOT: ""})

        if not has_imports(body):
            return body

        body = self.compile_imports(body, scope, depth)
        return clear_autotags(body)

    def compile_slots(self, body: str, slots: Dict[str, str]) -> str:
        def fill(match):
            name = match.tag.get("name") or DEFAULT_SLOT
            return slots.get(name) or match.inner or ""

        return rewrite(body, "sergey-slot", fill)

    def compile_imports(self, body: str, scope: ScopeContext, depth: int) -> str:
        def resolve(match):
            src = match.tag.get("src") or ""
            if match.tag.get("as") == "markdown":
                text = self.store.resolve(src, markdown=True) or ""
                replace = format_content(self.render_markdown(text))
            else:
                # missing imports render as nothing
                replace = self.store.resolve(src) or ""

            slots = extract_slots(match.inner)
            replace, child_scope = scope_styles(replace, scope, self.marker_factory)
            return self.compile_template(replace, slots, child_scope, depth + 1)

        return rewrite(body, "sergey-import", resolve)
