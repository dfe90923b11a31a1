from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Dict, Optional


HTML_EXT = ".html"
MARKDOWN_EXT = ".md"


def key_for(ref: str, ext: str = HTML_EXT, base: str = "") -> str:
    """`nav` -> `_imports/nav.html`"""
    file = ref if ref.endswith(ext) else f"{ref}{ext}"
    return posixpath.normpath(posixpath.join(base, file.lstrip("/")))


class FragmentStore:
    """Importable fragments keyed by normalized path, filled once per build."""

    def __init__(self, imports_base: str = "_imports", content_base: Optional[str] = None):
        self.imports_base = imports_base
        self.content_base = content_base or imports_base
        self._fragments: Dict[str, str] = {}

    def put(self, key: str, text: str) -> None:
        self._fragments[posixpath.normpath(key)] = text

    def get(self, key: str) -> Optional[str]:
        return self._fragments.get(posixpath.normpath(key))

    def resolve(self, ref: str, markdown: bool = False) -> Optional[str]:
        if markdown:
            return self.get(key_for(ref, MARKDOWN_EXT, self.content_base))
        return self.get(key_for(ref, HTML_EXT, self.imports_base))

    def load_directory(self, folder: Path, base: str) -> int:
        count = 0
        for path in sorted(folder.rglob("*")):
            if not path.is_file():
                continue
            rel = path.relative_to(folder).as_posix()
            self.put(posixpath.join(base, rel), path.read_text(encoding="utf-8", errors="ignore"))
            count += 1
        return count

    def __contains__(self, key: str) -> bool:
        return posixpath.normpath(key) in self._fragments

    def __len__(self) -> int:
        return len(self._fragments)
