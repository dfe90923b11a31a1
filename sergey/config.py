from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .compiler import DEFAULT_MAX_DEPTH
from .errors import ConfigError


def env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass
class Config:
    root: Path = Path(".")
    imports: str = "_imports"
    content: str = "_imports"
    output: str = "public"
    active_class: str = "active"
    exclude: List[str] = field(default_factory=list)
    max_depth: int = DEFAULT_MAX_DEPTH
    workers: int = 1
    verbose: bool = False

    @property
    def imports_dir(self) -> Path:
        return self.root / self.imports

    @property
    def content_dir(self) -> Path:
        return self.root / self.content

    @property
    def output_dir(self) -> Path:
        return self.root / self.output

    def validate(self) -> "Config":
        # the output folder is wiped on every build
        root = self.root.resolve()
        output = self.output_dir.resolve()
        if output == root or root not in output.parents:
            raise ConfigError(f"Output folder must be inside the root: {self.output_dir}")
        if self.workers < 1:
            raise ConfigError(f"workers must be at least 1, got {self.workers}")
        return self

    @classmethod
    def from_args(cls, args) -> "Config":
        return cls(
            root=Path(args.root),
            imports=args.imports.strip("/"),
            content=args.content.strip("/"),
            output=args.output.strip("/"),
            active_class=args.active_class,
            exclude=[s.strip() for s in args.exclude.split(",") if s.strip()],
            max_depth=args.max_depth,
            workers=args.workers,
            verbose=args.verbose,
        )
