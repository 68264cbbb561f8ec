"""Scratch directories for extracted EPUB archives."""

import logging
import re
import shutil
from pathlib import Path

log = logging.getLogger(__name__)


class ExtractionCache:
    """Manages per-book extraction directories under a scratch root.

    Directory names are derived from the archive's base file name, so two
    archives with the same name share a directory. Callers must not open the
    same book name concurrently.
    """

    DIR_PREFIX = "epub_"

    def __init__(self, scratch_root: Path):
        self.scratch_root = scratch_root

    def path_for(self, book_name: str) -> Path:
        """Deterministic extraction directory for a book name."""
        return self.scratch_root / f"{self.DIR_PREFIX}{self._clean_name(book_name)}"

    def prepare(self, book_name: str) -> Path:
        """Return a fresh, empty extraction directory, removing stale content."""
        target = self.path_for(book_name)
        if target.exists():
            log.debug("Removing stale extraction: %s", target)
            shutil.rmtree(target)
        target.mkdir(parents=True, exist_ok=True)
        return target

    def list_extracted(self) -> list[Path]:
        """List existing extraction directories."""
        if not self.scratch_root.exists():
            return []
        return sorted(
            p
            for p in self.scratch_root.iterdir()
            if p.is_dir() and p.name.startswith(self.DIR_PREFIX)
        )

    def clear(self) -> int:
        """Remove all extraction directories. Returns number removed."""
        removed = 0
        for path in self.list_extracted():
            shutil.rmtree(path)
            removed += 1
        return removed

    def _clean_name(self, book_name: str) -> str:
        # Keep the name recognizable but never let it leave the scratch root
        clean = re.sub(r"[\\/]+", "_", book_name).strip()
        if clean in ("", ".", ".."):
            return "book"
        return clean
