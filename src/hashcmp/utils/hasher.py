import hashlib
import logging
import os
import pathlib
import stat
from enum import StrEnum
from typing import Callable

import blake3

from ..errors import FileReadError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4096

# Joins the digests of a multi-algorithm fingerprint. Internal to comparison, never written to reports.
FINGERPRINT_DELIMITER = '|'

MAX_NAME_LENGTH = 1024


class HashAlgorithm(StrEnum):
    SHA256 = 'sha256'
    BLAKE3 = 'blake3'
    BOTH = 'both'

    @property
    def digest_names(self) -> tuple[str, ...]:
        """Names of the concrete digests computed for this selector, in canonical order."""
        if self is HashAlgorithm.BOTH:
            return HashAlgorithm.SHA256.value, HashAlgorithm.BLAKE3.value
        return (self.value,)


_DIGEST_FACTORIES: dict[str, Callable] = {
    HashAlgorithm.SHA256.value: hashlib.sha256,
    HashAlgorithm.BLAKE3.value: blake3.blake3,
}


def compute_digests(
        path: pathlib.Path,
        algorithm: HashAlgorithm,
        chunk_size: int = DEFAULT_CHUNK_SIZE) -> tuple[str, ...]:
    """Hash a file with every digest the selector names.

    The file is read in chunks of ``chunk_size`` bytes and each chunk is fed to all digests, so
    memory use does not depend on file size. The handle is closed on every exit path.

    Args:
        path: File to hash
        algorithm: Digest selector
        chunk_size: Number of bytes read per step

    Returns:
        Hex digests ordered as ``algorithm.digest_names``

    Raises:
        FileReadError: The file cannot be opened or read, or is not a regular file
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk size must be positive: {chunk_size}")

    if len(path.name) > MAX_NAME_LENGTH:
        raise FileReadError(path, f"file name longer than {MAX_NAME_LENGTH} characters")

    hashers = [_DIGEST_FACTORIES[name]() for name in algorithm.digest_names]

    logger.debug(f"Starting hash computation for: {path}")
    try:
        with open(path, 'rb') as f:
            if not stat.S_ISREG(os.fstat(f.fileno()).st_mode):
                raise FileReadError(path, "not a regular file")

            while chunk := f.read(chunk_size):
                for hasher in hashers:
                    hasher.update(chunk)
    except OSError as e:
        raise FileReadError(path, e.strerror or str(e)) from e

    digests = tuple(hasher.hexdigest() for hasher in hashers)
    logger.debug(f"Completed hash computation for: {path}")
    return digests


def join_digests(digests: tuple[str, ...]) -> str:
    return FINGERPRINT_DELIMITER.join(digests)
