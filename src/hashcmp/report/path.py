"""Report path utilities for choosing where the structured report is written."""

from pathlib import Path

REPORT_BASENAME = 'report'


def get_report_path(extension: str, output_folder: Path | None = None) -> Path:
    """Generate the structured report path.

    Args:
        extension: File extension including the dot (e.g. ``.json``)
        output_folder: Destination directory; the current working directory when None

    Returns:
        Path to the report file (e.g. /path/to/output/report.json)
    """
    directory = Path.cwd() if output_folder is None else output_folder
    return directory / (REPORT_BASENAME + extension)


def ensure_report_directory(report_path: Path) -> None:
    """Create the directory that will hold the report if it doesn't exist."""
    report_path.parent.mkdir(parents=True, exist_ok=True)
