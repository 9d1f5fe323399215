from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    """Empty directory for generated artifacts."""
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def _reset_astgen_logger() -> Iterator[None]:
    """runner.main() installs a handler on the 'astgen' logger; drop it after each test."""
    yield
    logger = logging.getLogger("astgen")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
