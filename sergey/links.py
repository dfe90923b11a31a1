from __future__ import annotations

from .rewriter import render_start_tag, rewrite


def clean_path(path: str) -> str:
    return path.replace("index.html", "", 1).split("#")[0]


def is_current_page(ref: str, path: str) -> bool:
    return bool(path) and clean_path(path) == clean_path(ref)


def is_parent_page(ref: str, path: str) -> bool:
    return bool(path) and clean_path(path).startswith(clean_path(ref))


def activate_links(markup: str, path: str, active_class: str = "active") -> str:
    """`<sergey-link to="/blog/">` -> `<a href="/blog/" class="active">` when on /blog/..."""
    if "<sergey-link" not in markup:
        return markup

    def to_anchor(match):
        attrs = dict(match.tag.attrs)
        key = next((k for k in ("to", "href") if k in attrs), None)
        to = attrs.pop(key) if key else ""

        is_current = is_current_page(to, path)
        if is_current or is_parent_page(to, path):
            current_class = attrs.get("class") or ""
            attrs["class"] = f"{active_class} {current_class.lstrip()}".strip()
            if is_current:
                attrs["aria-current"] = "page"

        end = "</a>" if match.end else ""
        attrs = {"href": to, **{k: v for k, v in attrs.items() if k != "href"}}
        return f"{render_start_tag('a', attrs)}{match.inner}{end}"

    return rewrite(markup, "sergey-link", to_anchor)
