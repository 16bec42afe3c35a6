"""Classification of file names across two scanned folders."""

from dataclasses import dataclass, asdict
from enum import StrEnum
from typing import Iterable

from .scanner import FileFingerprint, ScanResult


class Classification(StrEnum):
    """Outcome for one file name. The four values are mutually exclusive."""
    MATCH = 'MATCH'  # In both folders with equal fingerprints
    DIFF = 'DIFF'  # In both folders, fingerprints differ or could not be computed
    MISSING = 'MISSING'  # Only in folder 1
    EXTRA = 'EXTRA'  # Only in folder 2


SUFFIX_MISSING = "not found in Folder2"
SUFFIX_EXTRA = "only in Folder2"
SUFFIX_UNREADABLE = {
    (True, False): "unreadable in Folder1",
    (False, True): "unreadable in Folder2",
    (True, True): "unreadable in both folders",
}


@dataclass(frozen=True)
class ClassifiedEntry:
    """One file name with its classification and the fingerprints it was derived from.

    Attributes:
        name: File name
        classification: MATCH, DIFF, MISSING or EXTRA
        first: Fingerprint from folder 1, None for EXTRA
        second: Fingerprint from folder 2, None for MISSING
        suffix: Human-readable note shown after the name, empty when there is nothing to add
    """
    name: str
    classification: Classification
    first: FileFingerprint | None = None
    second: FileFingerprint | None = None
    suffix: str = ''

    @property
    def failed(self) -> bool:
        """True if the fingerprint on any present side could not be computed."""
        return any(side is not None and not side.valid for side in (self.first, self.second))

    @property
    def reference(self) -> FileFingerprint:
        """Folder 1's fingerprint when present, folder 2's otherwise."""
        side = self.first if self.first is not None else self.second
        assert side is not None
        return side


@dataclass(frozen=True)
class Tally:
    """Counters derived from a classification pass.

    ``total`` counts folder 1's files only, so ``total == matched + diff + missing``. ``extra``
    counts names found only in folder 2. ``errors`` counts names whose fingerprint failed on
    either side; those names are also counted under their classification.
    """
    total: int = 0
    matched: int = 0
    diff: int = 0
    missing: int = 0
    extra: int = 0
    errors: int = 0

    @classmethod
    def from_entries(cls, entries: Iterable[ClassifiedEntry]) -> "Tally":
        counts = {c: 0 for c in Classification}
        errors = 0
        for entry in entries:
            counts[entry.classification] += 1
            if entry.failed:
                errors += 1

        return cls(
            total=counts[Classification.MATCH] + counts[Classification.DIFF] + counts[Classification.MISSING],
            matched=counts[Classification.MATCH],
            diff=counts[Classification.DIFF],
            missing=counts[Classification.MISSING],
            extra=counts[Classification.EXTRA],
            errors=errors,
        )

    @property
    def is_clean(self) -> bool:
        """True when every file of folder 1 matched and folder 2 has nothing extra."""
        return self.diff == 0 and self.missing == 0 and self.extra == 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def classify_pair(first: FileFingerprint | None, second: FileFingerprint | None) -> Classification:
    """Classify a name from its presence and fingerprints on each side.

    Depends only on presence and fingerprint equality, never on scan order.
    """
    if first is None and second is None:
        raise ValueError("a name must be present in at least one folder")
    if second is None:
        return Classification.MISSING
    if first is None:
        return Classification.EXTRA
    if first.matches(second):
        return Classification.MATCH
    return Classification.DIFF


def _suffix(classification: Classification, first: FileFingerprint | None, second: FileFingerprint | None) -> str:
    if classification is Classification.MISSING:
        return SUFFIX_MISSING
    if classification is Classification.EXTRA:
        return SUFFIX_EXTRA
    if classification is Classification.DIFF:
        assert first is not None and second is not None
        return SUFFIX_UNREADABLE.get((not first.valid, not second.valid), '')
    return ''


def classify(scan_a: ScanResult, scan_b: ScanResult) -> tuple[list[ClassifiedEntry], Tally]:
    """Classify every name seen in either folder.

    Folder 1's names come first in its scan order, then names found only in folder 2 in that
    folder's scan order. Names are compared as exact, case-sensitive strings.

    Args:
        scan_a: Scan of folder 1, the reference set
        scan_b: Scan of folder 2

    Returns:
        The classified entries and the tally built from them
    """
    entries: list[ClassifiedEntry] = []

    for first in scan_a:
        second = scan_b.get(first.name)
        classification = classify_pair(first, second)
        entries.append(ClassifiedEntry(first.name, classification, first, second,
                                       _suffix(classification, first, second)))

    for second in scan_b:
        if second.name in scan_a:
            continue
        entries.append(ClassifiedEntry(second.name, Classification.EXTRA, None, second,
                                       _suffix(Classification.EXTRA, None, second)))

    return entries, Tally.from_entries(entries)
