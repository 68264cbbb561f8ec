"""Uniform read access to zipped and extracted EPUB files."""

import logging
import shutil
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

from epub_reader.cache.manager import ExtractionCache

log = logging.getLogger(__name__)


def _file_name(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def resolve_book_file(base_dir: Path, raw_path: str) -> Path | None:
    """Find a book file under base_dir, tolerating sloppy relative paths.

    Candidates, first existing file wins: the path as given, without a
    leading slash, the bare file name, and the path without a #fragment.
    Every candidate is taken relative to base_dir; anything that resolves
    outside it is ignored.
    """
    if not raw_path or not raw_path.strip():
        return None

    normalized = raw_path.replace("\\", "/").removeprefix("./")
    candidates = dict.fromkeys(
        [
            # Book paths are rooted at base_dir, never at the host root
            normalized.lstrip("/"),
            normalized.removeprefix("/"),
            _file_name(normalized),
            normalized.split("#", 1)[0].lstrip("/"),
        ]
    )

    resolved_root = base_dir.resolve()
    for candidate in candidates:
        if not candidate:
            continue
        path = base_dir / candidate
        if not path.resolve().is_relative_to(resolved_root):
            log.warning("Ignoring path outside book root: %s", raw_path)
            continue
        if path.is_file():
            return path
    return None


class ArchiveAccessor(ABC):
    """Read entries of a book by forward-slash logical path."""

    @abstractmethod
    def resolve(self, entry_path: str) -> str | None:
        """Return the actual entry name for entry_path, or None."""
        pass

    @abstractmethod
    def read(self, entry_path: str) -> bytes:
        """Read an entry. Raises FileNotFoundError when it cannot be resolved."""
        pass

    @abstractmethod
    def prepare(self, cache: ExtractionCache) -> Path:
        """Make the book available as a directory and return its root."""
        pass

    def exists(self, entry_path: str) -> bool:
        return self.resolve(entry_path) is not None

    def close(self) -> None:
        pass

    def __enter__(self) -> "ArchiveAccessor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ZipArchive(ArchiveAccessor):
    """Entries of a zip-format .epub file."""

    def __init__(self, path: Path):
        self.path = path
        # Raises zipfile.BadZipFile for corrupt archives
        self._zip = zipfile.ZipFile(path, "r")
        self._names = set(self._zip.namelist())

    def resolve(self, entry_path: str) -> str | None:
        if not entry_path:
            return None
        if entry_path in self._names:
            return entry_path
        # Flattened archives keep everything at the root
        name = _file_name(entry_path)
        if name in self._names:
            return name
        return None

    def read(self, entry_path: str) -> bytes:
        name = self.resolve(entry_path)
        if name is None:
            raise FileNotFoundError(f"Entry not found in {self.path.name}: {entry_path}")
        return self._zip.read(name)

    def prepare(self, cache: ExtractionCache) -> Path:
        """Extract every file entry into a fresh per-book scratch directory."""
        root = cache.prepare(self.path.stem)
        resolved_root = root.resolve()

        for info in self._zip.infolist():
            if info.is_dir():
                continue
            target = root / PurePosixPath(info.filename)
            if not target.resolve().is_relative_to(resolved_root):
                log.warning("Skipping entry outside extraction root: %s", info.filename)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            with self._zip.open(info) as src, open(target, "wb") as dst:
                shutil.copyfileobj(src, dst)

        log.debug("Extracted %s to %s", self.path.name, root)
        return root

    def close(self) -> None:
        self._zip.close()


class DirectoryArchive(ArchiveAccessor):
    """Entries of an already-extracted EPUB directory."""

    def __init__(self, root: Path):
        self.root = root

    def resolve(self, entry_path: str) -> str | None:
        path = resolve_book_file(self.root, entry_path)
        if path is None:
            return None
        return path.relative_to(self.root).as_posix()

    def read(self, entry_path: str) -> bytes:
        path = resolve_book_file(self.root, entry_path)
        if path is None:
            raise FileNotFoundError(f"File not found under {self.root}: {entry_path}")
        return path.read_bytes()

    def prepare(self, cache: ExtractionCache) -> Path:
        return self.root
