"""Parser configuration."""

import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ReaderConfig(BaseModel):
    """Settings shared by the parser, the reconciler and the reading session."""

    model_config = ConfigDict(frozen=True)

    # Where zip archives are extracted for chapter reading
    scratch_root: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))

    # Placeholders for metadata missing from the package document
    unknown_title: str = "Unknown Title"
    unknown_author: str = "Unknown Author"
    default_language: str = "en"

    # Chapter title fallbacks
    chapter_placeholder: str = "Chapter"
    numbered_chapter_format: str = "Chapter {n}"

    def numbered_chapter(self, n: int) -> str:
        return self.numbered_chapter_format.format(n=n)


DEFAULT_CONFIG = ReaderConfig()
