from __future__ import annotations

from pathlib import Path

import pytest

from builders import minimal_files, sample_files, write_epub, write_tree
from epub_reader.config import ReaderConfig
from epub_reader.core.epub_parser import EpubParser


@pytest.fixture
def config(tmp_path: Path) -> ReaderConfig:
    return ReaderConfig(scratch_root=tmp_path / "scratch")


@pytest.fixture
def parser(config: ReaderConfig) -> EpubParser:
    return EpubParser(config)


@pytest.fixture
def sample_epub(tmp_path: Path) -> Path:
    return write_epub(tmp_path / "books" / "sample.epub", sample_files())


@pytest.fixture
def sample_dir(tmp_path: Path) -> Path:
    return write_tree(tmp_path / "extracted", sample_files())


@pytest.fixture
def minimal_dir(tmp_path: Path) -> Path:
    return write_tree(tmp_path / "minimal", minimal_files())
