from __future__ import annotations

import logging
from pathlib import Path

import pytest

from typesift.config import SiftConfig


@pytest.fixture
def workspace(tmp_path: Path) -> tuple[Path, Path]:
    """Provide an empty source directory and a not-yet-created output root."""
    source = tmp_path / "Managed"
    source.mkdir()
    return source, tmp_path / "out" / "Decompiled"


@pytest.fixture
def sift_config(tmp_path: Path, workspace: tuple[Path, Path]) -> SiftConfig:
    source, output = workspace
    return SiftConfig(
        root=tmp_path,
        source_dir=source,
        output_dir=output,
        important_prefixes=("Facepunch", "Assembly-CSharp"),
    )


@pytest.fixture(autouse=True)
def _reset_typesift_logger():
    """Drop handlers installed by CLI tests so later tests do not log into closed streams."""
    yield
    logger = logging.getLogger("typesift")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
