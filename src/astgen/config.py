"""Emission settings and environment lookup."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple

DEBUG_ENV = "ASTGEN_DEBUG"


@dataclass(frozen=True)
class EmitConfig:
    package: str = "com.craftinginterpreters.lox"
    imports: Tuple[str, ...] = ("java.util.List",)
    indent: str = "  "
    # Constructor parameter lists longer than this are wrapped one per line.
    wrap_width: int = 64
    continuation_indent: str = " " * 10
    extension: str = ".java"


DEFAULT_CONFIG = EmitConfig()


def load_env_debug(env: Optional[dict] = None) -> bool:
    """True when ASTGEN_DEBUG is set to a truthy value."""
    source = os.environ if env is None else env
    return source.get(DEBUG_ENV, "").strip().lower() in ("1", "true", "yes", "on")
