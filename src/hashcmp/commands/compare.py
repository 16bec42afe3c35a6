"""Compare command: scan both folders, classify, and render the result."""

import logging
from pathlib import Path
from typing import NamedTuple, TextIO

from ..matcher import ClassifiedEntry, Tally, classify
from ..report.store import ReportFormat, StructuredReport, write_report
from ..report.text import TextReporter
from ..scanner import ScanOptions, scan
from ..utils.hasher import HashAlgorithm

logger = logging.getLogger(__name__)


class CompareArgs(NamedTuple):
    """Arguments for the compare operation."""
    folder1: Path  # Reference folder
    folder2: Path  # Folder checked against the reference
    algorithm: HashAlgorithm = HashAlgorithm.BOTH
    scan_options: ScanOptions = ScanOptions()
    # Structured report format, None for terminal output only
    report_format: ReportFormat | None = None
    output_folder: Path | None = None  # Report destination, current directory when None


class CompareOutcome(NamedTuple):
    entries: list[ClassifiedEntry]
    tally: Tally
    report_path: Path | None


def do_compare(args: CompareArgs, reporter: TextReporter, output: TextIO) -> CompareOutcome:
    """Run one comparison.

    Folder 1 is scanned completely before folder 2, and classification starts only after both
    scans are complete.

    Args:
        args: Folders, algorithm and output options
        reporter: Terminal renderer
        output: Stream the terminal report is written to

    Returns:
        The classified entries, their tally, and the structured report path if one was written

    Raises:
        FolderOpenError: Either folder cannot be opened; nothing is rendered
        OSError: The structured report cannot be written
    """
    scan_a = scan(args.folder1, args.algorithm, args.scan_options)
    scan_b = scan(args.folder2, args.algorithm, args.scan_options)

    entries, tally = classify(scan_a, scan_b)
    logger.info(f"Compared {args.folder1} with {args.folder2}: {tally}")

    reporter.render(entries, tally, output, args.folder1, args.folder2)

    report_path = None
    if args.report_format is not None:
        report = StructuredReport.from_classification(entries, tally, args.algorithm)
        report_path = write_report(report, args.report_format, args.output_folder)
        output.write(f"Report written to {report_path}\n")
        output.flush()

    return CompareOutcome(entries, tally, report_path)
