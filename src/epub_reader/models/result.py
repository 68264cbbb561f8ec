"""Parse result types returned by every parser entry point."""

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict

from epub_reader.models.book import Book


class ParseErrorKind(str, Enum):
    """Reason a book could not be parsed."""

    NOT_FOUND = "not_found"
    BAD_ARCHIVE = "bad_archive"
    MISSING_BASE_DIRECTORY = "missing_base_directory"
    MISSING_CONTAINER = "missing_container"
    MISSING_PACKAGE_PATH = "missing_package_path"
    MISSING_PACKAGE = "missing_package"
    MALFORMED_XML = "malformed_xml"
    NO_READABLE_CHAPTERS = "no_readable_chapters"
    UNEXPECTED = "unexpected"


class ParseError(Exception):
    """Raised when a failed parse result is unwrapped."""

    def __init__(
        self,
        kind: ParseErrorKind,
        message: str,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause


class EpubStructureError(ParseError):
    """The book is missing a structural file or reference."""


class ParseSuccess(BaseModel):
    """Successful parse."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    book: Book

    def unwrap(self) -> Book:
        return self.book


class ParseFailure(BaseModel):
    """Failed parse with a human-readable message."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ok: Literal[False] = False
    kind: ParseErrorKind
    message: str
    cause: BaseException | None = None

    def unwrap(self) -> Book:
        raise ParseError(self.kind, self.message, self.cause)

    @classmethod
    def from_error(cls, error: ParseError) -> "ParseFailure":
        return cls(kind=error.kind, message=error.message, cause=error.cause)


ParseResult = Union[ParseSuccess, ParseFailure]
