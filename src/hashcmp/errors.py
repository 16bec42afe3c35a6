"""Error types shared by the hashcmp components."""

import os


class HashcmpError(Exception):
    """Base class for errors reported to the user."""


class ArgumentError(HashcmpError):
    """Missing or invalid command-line or settings input. No scan is performed."""


class FolderOpenError(HashcmpError):
    """A folder to compare does not exist, is not a directory, or cannot be listed.

    Fatal to the whole run: no partial comparison is produced when one side is missing.
    """

    def __init__(self, path: str | os.PathLike, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot open folder {os.fspath(path)}: {reason}")


class FileReadError(HashcmpError):
    """A single file could not be hashed.

    Never propagated out of a scan; the scanner folds it into an invalid fingerprint.
    """

    def __init__(self, path: str | os.PathLike, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot read file {os.fspath(path)}: {reason}")
