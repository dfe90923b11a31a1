#!/usr/bin/env python3
"""
sergey: compile sergey-import / sergey-slot / sergey-link templates into static HTML.

  sergey --root ./site --imports _imports --output public

Every flag can also be set in the environment or a .env file (SERGEY_ROOT,
SERGEY_IMPORTS, SERGEY_CONTENT, SERGEY_OUTPUT, SERGEY_ACTIVE_CLASS,
SERGEY_EXCLUDE, SERGEY_MAX_DEPTH, SERGEY_WORKERS, SERGEY_VERBOSE).
"""
from __future__ import annotations

import argparse
import os

from dotenv import load_dotenv

from .build import build
from .compiler import DEFAULT_MAX_DEPTH
from .config import Config, env_bool
from .errors import ConfigError


def parse_args(argv=None):
    load_dotenv()
    p = argparse.ArgumentParser(description="Compile sergey templates into static HTML.")
    p.add_argument("--root", default=os.getenv("SERGEY_ROOT", "."), help="Site root directory")
    p.add_argument("--imports", default=os.getenv("SERGEY_IMPORTS", "_imports"), help="Imports folder, relative to the root")
    p.add_argument("--content", default=os.getenv("SERGEY_CONTENT", "_imports"), help="Markdown content folder, relative to the root")
    p.add_argument("--output", default=os.getenv("SERGEY_OUTPUT", "public"), help="Output folder, relative to the root (wiped on build)")
    p.add_argument("--active-class", dest="active_class", default=os.getenv("SERGEY_ACTIVE_CLASS", "active"), help="Class added to current/parent links")
    p.add_argument("--exclude", default=os.getenv("SERGEY_EXCLUDE", ""), help="Comma-separated names to skip")
    p.add_argument("--max-depth", dest="max_depth", type=int, default=int(os.getenv("SERGEY_MAX_DEPTH", str(DEFAULT_MAX_DEPTH))), help="Maximum import nesting depth")
    p.add_argument("--workers", type=int, default=int(os.getenv("SERGEY_WORKERS", "1")), help="Pages compiled in parallel")
    p.add_argument("--verbose", action="store_true", default=env_bool("SERGEY_VERBOSE"), help="Log every saved/copied file")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    config = Config.from_args(args)
    try:
        report = build(config)
    except ConfigError as e:
        raise SystemExit(f"[ERROR] {e}")
    return 1 if report.failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
