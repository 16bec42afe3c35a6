"""Directory scanning: list the regular files of one folder and fingerprint each of them."""

import fnmatch
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, NamedTuple

from .errors import FileReadError, FolderOpenError
from .utils.hasher import DEFAULT_CHUNK_SIZE, HashAlgorithm, compute_digests, join_digests
from .utils.walker import FileContext, list_directory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileFingerprint:
    """Content fingerprint of one file, produced during a single scan and never mutated.

    Attributes:
        name: File name inside the scanned folder (no path separators)
        path: Full path the file was read from
        algorithm: Digest selector used for this fingerprint
        digests: Hex digests ordered as ``algorithm.digest_names``, or None if hashing failed
        error: Reason hashing failed, None for a valid fingerprint
    """
    name: str
    path: Path
    algorithm: HashAlgorithm
    digests: tuple[str, ...] | None
    error: str | None = None

    @classmethod
    def failed(cls, name: str, path: Path, algorithm: HashAlgorithm, error: str) -> "FileFingerprint":
        return cls(name, path, algorithm, None, error)

    @property
    def valid(self) -> bool:
        return self.digests is not None

    @property
    def fingerprint(self) -> str | None:
        """Single string standing in for the content: one hex digest, or several joined by a delimiter."""
        if self.digests is None:
            return None
        return join_digests(self.digests)

    def matches(self, other: "FileFingerprint") -> bool:
        """Content equality. A failed fingerprint matches nothing, including another failure.

        Under the ``both`` selector every digest has to be equal.
        """
        if self.digests is None or other.digests is None:
            return False
        return self.algorithm == other.algorithm and self.digests == other.digests

    def digest_map(self) -> dict[str, str | None]:
        """Digests keyed by algorithm name; values are None when hashing failed."""
        if self.digests is None:
            return {name: None for name in self.algorithm.digest_names}
        return dict(zip(self.algorithm.digest_names, self.digests))


class ScanOptions(NamedTuple):
    """Options controlling which directory entries a scan includes.

    Attributes:
        include_hidden: Include names starting with a dot
        ignore_patterns: Shell-style patterns; matching names are skipped
        types: File extensions to keep (case-insensitive, leading dot optional); empty keeps all
        chunk_size: Read size used while hashing
        sort_names: Order entries by name instead of directory listing order
    """
    include_hidden: bool = True
    ignore_patterns: tuple[str, ...] = ()
    types: tuple[str, ...] = ()
    chunk_size: int = DEFAULT_CHUNK_SIZE
    sort_names: bool = True

    def accepts(self, name: str) -> bool:
        if not self.include_hidden and name.startswith('.'):
            return False

        for pattern in self.ignore_patterns:
            if fnmatch.fnmatchcase(name, pattern):
                return False

        if self.types:
            extension = os.path.splitext(name)[1].lstrip('.').lower()
            wanted = {t.lstrip('.').lower() for t in self.types}
            if extension not in wanted:
                return False

        return True


class ScanResult:
    """Fingerprints of the regular files in one folder, keyed by name.

    Names are unique within a folder. Iteration follows scan order.
    """

    def __init__(self, folder: Path, algorithm: HashAlgorithm, entries: list[FileFingerprint]):
        self._folder = folder
        self._algorithm = algorithm
        self._entries: tuple[FileFingerprint, ...] = tuple(entries)
        self._by_name: dict[str, FileFingerprint] = {entry.name: entry for entry in self._entries}
        if len(self._by_name) != len(self._entries):
            raise ValueError(f"duplicate file names in scan of {folder}")

    @property
    def folder(self) -> Path:
        return self._folder

    @property
    def algorithm(self) -> HashAlgorithm:
        return self._algorithm

    @property
    def entries(self) -> tuple[FileFingerprint, ...]:
        return self._entries

    @property
    def errors(self) -> list[FileFingerprint]:
        """Entries whose fingerprint could not be computed."""
        return [entry for entry in self._entries if not entry.valid]

    def get(self, name: str) -> FileFingerprint | None:
        return self._by_name.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[FileFingerprint]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ScanResult({str(self._folder)!r}, {self._algorithm.value}, {len(self._entries)} files)"


def scan(folder: str | os.PathLike, algorithm: HashAlgorithm, options: ScanOptions | None = None) -> ScanResult:
    """Fingerprint every regular file directly inside ``folder``.

    Directories, symbolic links and special files are skipped without being reported. A file
    that cannot be hashed stays in the result with a failed fingerprint so that it is still
    counted by the comparison.

    Args:
        folder: Folder to scan
        algorithm: Digest selector
        options: Entry filters and hashing options; defaults include every regular file

    Returns:
        ScanResult in scan order

    Raises:
        FolderOpenError: The folder does not exist, is not a directory, or cannot be listed
    """
    if options is None:
        options = ScanOptions()

    folder = Path(folder)
    logger.info(f"Scanning folder: {folder} (algorithm={algorithm.value})")

    try:
        contexts: list[FileContext] = list(list_directory(folder))
    except OSError as e:
        raise FolderOpenError(folder, e.strerror or str(e)) from e

    if options.sort_names:
        contexts.sort(key=lambda c: c.name)

    entries: list[FileFingerprint] = []
    for context in contexts:
        if not options.accepts(context.name):
            logger.debug(f"Skipping filtered entry: {context.path}")
            continue

        try:
            is_file = context.is_file()
        except OSError as e:
            # Listed but gone or inaccessible before it could be inspected
            error = FileReadError(context.path, e.strerror or str(e))
            logger.warning(str(error))
            entries.append(FileFingerprint.failed(context.name, context.path, algorithm, error.reason))
            continue

        if not is_file:
            logger.debug(f"Skipping non-regular entry: {context.path}")
            continue

        try:
            digests = compute_digests(context.path, algorithm, options.chunk_size)
        except FileReadError as e:
            logger.warning(str(e))
            entries.append(FileFingerprint.failed(context.name, context.path, algorithm, e.reason))
            continue

        entries.append(FileFingerprint(context.name, context.path, algorithm, digests))

    logger.info(f"Completed scan of {folder}: {len(entries)} files")
    return ScanResult(folder, algorithm, entries)
