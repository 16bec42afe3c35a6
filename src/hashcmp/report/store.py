"""Structured report of a comparison, written as JSON or msgpack."""

import json
import logging
import os
import tempfile
from enum import StrEnum
from pathlib import Path
from typing import Any, Iterable

import msgpack

from ..matcher import Classification, ClassifiedEntry, Tally
from ..utils.hasher import HashAlgorithm
from .path import ensure_report_directory, get_report_path

logger = logging.getLogger(__name__)

REPORT_FILE_MODE = 0o666


class ReportFormat(StrEnum):
    JSON = 'json'
    MSGPACK = 'msgpack'

    @property
    def extension(self) -> str:
        return '.' + self.value


class StructuredReport:
    """Machine-readable comparison result partitioned into matched and unmatched entries.

    Each entry is a dictionary with ``name``, ``status`` and ``hash``. ``hash`` maps algorithm
    names to hex digests, with None for a digest that could not be computed. DIFF entries also
    carry ``hash2``, the digests from folder 2. For EXTRA entries ``hash`` holds folder 2's
    digests, since the file has no folder 1 counterpart.

    A side whose digests could not be computed also records the reason: ``error`` for the
    side ``hash`` describes and ``error2`` for the side ``hash2`` describes. Both keys are
    absent when hashing succeeded.

    Attributes:
        matched: Entries classified MATCH, in classification order
        unmatched: All other entries, in classification order
        summary: Tally counters and the algorithm name
    """

    def __init__(self, matched: list[dict[str, Any]], unmatched: list[dict[str, Any]], summary: dict[str, Any]):
        self.matched = matched
        self.unmatched = unmatched
        self.summary = summary

    @classmethod
    def from_classification(
            cls,
            entries: Iterable[ClassifiedEntry],
            tally: Tally,
            algorithm: HashAlgorithm) -> "StructuredReport":
        matched: list[dict[str, Any]] = []
        unmatched: list[dict[str, Any]] = []

        for entry in entries:
            record: dict[str, Any] = {
                'name': entry.name,
                'status': entry.classification.value,
                'hash': entry.reference.digest_map(),
            }
            if not entry.reference.valid:
                record['error'] = entry.reference.error
            if entry.classification is Classification.DIFF:
                assert entry.second is not None
                record['hash2'] = entry.second.digest_map()
                if not entry.second.valid:
                    record['error2'] = entry.second.error

            if entry.classification is Classification.MATCH:
                matched.append(record)
            else:
                unmatched.append(record)

        summary: dict[str, Any] = {'algorithm': algorithm.value}
        summary.update(tally.to_dict())
        return cls(matched, unmatched, summary)

    def to_dict(self) -> dict[str, Any]:
        return {'matched': self.matched, 'unmatched': self.unmatched, 'summary': self.summary}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StructuredReport":
        return cls(list(data['matched']), list(data['unmatched']), dict(data.get('summary', {})))

    def to_json(self) -> bytes:
        """Serialize to indented JSON. Non-ASCII names are escaped, so the output is plain ASCII."""
        return (json.dumps(self.to_dict(), indent=2) + '\n').encode('utf-8')

    @classmethod
    def from_json(cls, data: bytes | str) -> "StructuredReport":
        return cls.from_dict(json.loads(data))

    def to_msgpack(self) -> bytes:
        """Serialize to msgpack.

        File names that are not valid UTF-8 are kept through the surrogateescape error handler.
        """
        result = msgpack.packb(self.to_dict(), unicode_errors='surrogateescape')
        assert isinstance(result, bytes)
        return result

    @classmethod
    def from_msgpack(cls, data: bytes) -> "StructuredReport":
        decoded = msgpack.unpackb(data, unicode_errors='surrogateescape')
        assert isinstance(decoded, dict)
        return cls.from_dict(decoded)

    def serialize(self, report_format: ReportFormat) -> bytes:
        if report_format is ReportFormat.MSGPACK:
            return self.to_msgpack()
        return self.to_json()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StructuredReport):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"StructuredReport(matched={len(self.matched)}, unmatched={len(self.unmatched)})"


def _creation_mode() -> int:
    """Mode a newly created file gets under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return REPORT_FILE_MODE & ~umask


def write_report(
        report: StructuredReport,
        report_format: ReportFormat = ReportFormat.JSON,
        output_folder: Path | None = None) -> Path:
    """Write the report atomically.

    The whole document is serialized in memory, written to a temporary file next to the
    destination, and moved over the destination in one rename, so readers never see a
    truncated document.

    The report gets the permissions of a freshly created file under the current umask, not the
    owner-only mode of the temporary file.

    Args:
        report: Report to write
        report_format: Serialization format, which also picks the file extension
        output_folder: Destination directory; the current working directory when None

    Returns:
        Path of the written report

    Raises:
        OSError: The destination cannot be created or written
    """
    report_path = get_report_path(report_format.extension, output_folder)
    ensure_report_directory(report_path)

    encoded = report.serialize(report_format)

    fd, temp_path = tempfile.mkstemp(dir=report_path.parent, prefix='.' + report_path.name + '.')
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(encoded)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(temp_path, _creation_mode())
        os.replace(temp_path, report_path)
    except BaseException:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise

    logger.info(f"Report written to {report_path} ({len(encoded)} bytes)")
    return report_path
