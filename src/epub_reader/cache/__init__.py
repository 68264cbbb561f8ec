"""Scratch extraction cache."""

from epub_reader.cache.manager import ExtractionCache

__all__ = ["ExtractionCache"]
