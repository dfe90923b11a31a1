from __future__ import annotations

from typing import Dict

from .rewriter import find_all


DEFAULT_SLOT = "default"


def format_content(text: str) -> str:
    return (text or "").strip()


def extract_slots(markup: str) -> Dict[str, str]:
    """Split an import's inner markup into the default slot and named templates."""
    slots = {DEFAULT_SLOT: format_content(markup)}

    for match in find_all(markup, "sergey-template"):
        # an unnamed template is registered under "", not "default"
        name = match.tag.get("name") or ""
        if name != DEFAULT_SLOT:
            slots[DEFAULT_SLOT] = slots[DEFAULT_SLOT].replace(match.outer, "", 1)
        slots[name] = format_content(match.inner)

    slots[DEFAULT_SLOT] = format_content(slots[DEFAULT_SLOT])
    return slots
