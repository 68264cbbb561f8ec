"""Data models for EPUB book structure."""

from pydantic import BaseModel, ConfigDict, Field


class BookMetadata(BaseModel):
    """Book-level metadata from the package document."""

    model_config = ConfigDict(frozen=True)

    title: str = "Unknown Title"
    author: str = "Unknown Author"
    language: str = "en"
    publisher: str = ""
    description: str = ""
    publish_date: str = ""
    identifier: str = ""


class ManifestItem(BaseModel):
    """Single manifest entry, as written in the package document."""

    model_config = ConfigDict(frozen=True)

    id: str
    href: str
    media_type: str = ""
    properties: str = ""

    @property
    def property_tokens(self) -> list[str]:
        return self.properties.lower().split()


class SpineItem(BaseModel):
    """Entry in the linear reading order."""

    model_config = ConfigDict(frozen=True)

    id: str
    href: str  # Relative to the book root, not to the package document
    media_type: str
    title: str


class NavPoint(BaseModel):
    """Single node of the table of contents tree."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    play_order: int = 0
    title: str
    href: str = ""
    level: int = 0
    children: list["NavPoint"] = Field(default_factory=list)


class Book(BaseModel):
    """Complete parsed EPUB structure."""

    model_config = ConfigDict(frozen=True)

    metadata: BookMetadata
    spine: list[SpineItem] = Field(default_factory=list)
    toc: list[NavPoint] = Field(default_factory=list)
    cover_image_path: str | None = None
    base_path: str
    package_path: str = ""
    manifest: list[ManifestItem] = Field(default_factory=list)


class TocEntry(BaseModel):
    """Flattened (href, title) pair used while reconciling TOC and spine."""

    model_config = ConfigDict(frozen=True)

    href: str
    title: str


class ReadableChapters(BaseModel):
    """Reconciled reading order: spine indices and their display titles."""

    model_config = ConfigDict(frozen=True)

    indices: list[int] = Field(default_factory=list)
    titles: list[str] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.indices)
