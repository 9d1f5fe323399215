from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from .builder import build
from .config import DEFAULT_CONFIG, EmitConfig, load_env_debug
from .emitter import write
from .errors import AstGenError, IOFailure, UsageError
from .grammar import parse
from .table import GRAMMARS

logger = logging.getLogger("astgen")

USAGE = "Usage: generate_ast <output directory>"

# sysexits.h
EX_USAGE = 64
EX_DATAERR = 65
EX_IOERR = 74


def generate(output_dir: Path, grammars: Mapping[str, Sequence[str]] = GRAMMARS,
             config: EmitConfig = DEFAULT_CONFIG) -> List[Path]:
    """
    Generate one artifact per grammar, in table order.

    Stops at the first error; artifacts written before it are left in place.
    """
    written: List[Path] = []

    for base_name, lines in grammars.items():
        spec = parse(base_name, lines)
        plan = build(spec)
        written.append(write(plan, output_dir, config))

    return written


def _configure_logging(debug: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s [%(name)s] %(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.propagate = False


def _parse_args(argv: Sequence[str]) -> Path:
    if len(argv) != 1:
        raise UsageError(USAGE)
    return Path(argv[0])


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    _configure_logging(load_env_debug())

    try:
        output_dir = _parse_args(args)
    except UsageError as exc:
        print(exc, file=sys.stderr)
        return EX_USAGE

    try:
        generate(output_dir, GRAMMARS)
    except IOFailure as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EX_IOERR
    except AstGenError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EX_DATAERR

    return 0


def console_main() -> None:
    sys.exit(main())


if __name__ == "__main__":
    console_main()
