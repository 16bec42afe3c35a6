from .errors import HashcmpError, ArgumentError, FolderOpenError, FileReadError
from .utils.hasher import HashAlgorithm
from .scanner import FileFingerprint, ScanOptions, ScanResult, scan
from .matcher import Classification, ClassifiedEntry, Tally, classify
from .report.store import ReportFormat, StructuredReport, write_report
from .report.text import TextReporter
from .settings import Settings
