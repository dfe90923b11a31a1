from __future__ import annotations

import posixpath
import shutil
import time
import traceback
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from .compiler import Compiler
from .config import Config
from .errors import ConfigError
from .fragments import FragmentStore
from .postprocess import hoist_styles


DEFAULT_EXCLUDES = [
    ".git",
    ".DS_Store",
    ".prettierrc",
    ".env",
    "node_modules",
    "package.json",
    "package-lock.json",
]


@dataclass
class BuildReport:
    pages: List[str] = field(default_factory=list)
    copied: List[str] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)
    elapsed_ms: int = 0


def read_gitignore(root: Path) -> List[str]:
    path = root / ".gitignore"
    if not path.exists():
        return []
    names = []
    for line in path.read_text(encoding="utf-8", errors="ignore").splitlines():
        line = line.strip().strip("/")
        if line and not line.startswith("#"):
            names.append(line)
    return names


def excluded_names(config: Config) -> List[str]:
    names = list(DEFAULT_EXCLUDES)
    names.extend(config.exclude)
    names.extend(read_gitignore(config.root))
    # keep first occurrence
    return list(dict.fromkeys(names))


def excluded_folders(config: Config) -> List[str]:
    """Imports, content and output folders as paths relative to the root."""
    folders = []
    for folder in (config.imports, config.content, config.output):
        rel = posixpath.normpath(Path(folder).as_posix())
        if rel not in (".", ""):
            folders.append(rel)
    return list(dict.fromkeys(folders))


def iter_site_files(
    folder: Path, excluded: List[str], root: Optional[Path] = None, folders: List[str] = ()
) -> Iterator[Path]:
    root = folder if root is None else root
    for entry in sorted(folder.iterdir()):
        if any(entry.name.startswith(x) for x in excluded):
            continue
        if entry.relative_to(root).as_posix() in folders:
            continue
        if entry.is_dir():
            yield from iter_site_files(entry, excluded, root, folders)
        else:
            yield entry


def load_fragments(config: Config) -> FragmentStore:
    if not config.imports_dir.is_dir():
        raise ConfigError(f"No {config.imports_dir} folder found")

    store = FragmentStore(config.imports, config.content)
    count = store.load_directory(config.imports_dir, config.imports)
    if config.content != config.imports and config.content_dir.is_dir():
        count += store.load_directory(config.content_dir, config.content)
    if config.verbose:
        print(f"[LOG] Loaded {count} fragments")
    return store


def compile_page(compiler: Compiler, source: str, local_path: str) -> str:
    body = compiler.compile(source)
    body = compiler.activate_links(body, local_path)
    return hoist_styles(body)


def _build_page(compiler: Compiler, config: Config, path: Path) -> str:
    rel = path.relative_to(config.root)
    source = path.read_text(encoding="utf-8", errors="ignore")
    body = compile_page(compiler, source, "/" + rel.as_posix())
    dest = config.output_dir / rel
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(body, encoding="utf-8")
    if config.verbose:
        print(f"[LOG] Saved {dest}")
    return rel.as_posix()


def build(config: Config) -> BuildReport:
    """Compile every page under the root into the output folder."""
    config.validate()
    start = time.perf_counter()
    report = BuildReport()

    # fragments first: a broken setup must fail before the output is wiped
    store = load_fragments(config)

    if config.output_dir.exists():
        shutil.rmtree(config.output_dir)
    config.output_dir.mkdir(parents=True)

    compiler = Compiler(store, active_class=config.active_class, max_depth=config.max_depth)

    pages: List[Path] = []
    for path in iter_site_files(config.root, excluded_names(config), folders=excluded_folders(config)):
        if path.suffix == ".html":
            pages.append(path)
            continue
        rel = path.relative_to(config.root)
        dest = config.output_dir / rel
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(path, dest)
        report.copied.append(rel.as_posix())
        if config.verbose:
            print(f"[LOG] Copied {rel}")

    with ThreadPoolExecutor(max_workers=config.workers) as pool:
        futures = {pool.submit(_build_page, compiler, config, path): path for path in pages}
        for future in as_completed(futures):
            rel = futures[future].relative_to(config.root).as_posix()
            try:
                report.pages.append(future.result())
            except Exception as e:
                print(f"[ERROR] {rel}: {e}")
                traceback.print_exc()
                report.failures[rel] = str(e)

    report.pages.sort()
    report.elapsed_ms = int((time.perf_counter() - start) * 1000)
    print(f"[LOG] Compiled {len(report.pages)} pages in {report.elapsed_ms}ms")
    if report.failures:
        print(f"[ERROR] {len(report.failures)} pages failed")
    return report
