"""EPUB parsing core."""
