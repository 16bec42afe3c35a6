"""Terminal rendering of comparison results."""

import os
import shutil
from typing import TextIO

from colorama import Fore, Style

from ..matcher import Classification, ClassifiedEntry, Tally
from ..scanner import FileFingerprint

DEFAULT_WIDTH = 80
STATUS_COLUMN_WIDTH = 11

TITLE = "Folder File Comparison Utility"
RULE = "=" * 47
THIN_RULE = "-" * 47

STATUS_COLORS = {
    Classification.MATCH: Fore.GREEN,
    Classification.DIFF: Fore.RED,
    Classification.MISSING: Fore.YELLOW,
    Classification.EXTRA: Fore.CYAN,
}
ERROR_TAG = "[ERROR]"
ERROR_COLOR = Fore.RED

SUMMARY_LABELS = [
    ('total', "Total files checked"),
    ('matched', "Matches"),
    ('diff', "Differences"),
    ('missing', "Missing in Folder2"),
    ('extra', "Extra in Folder2"),
]


def detect_width() -> int:
    """Width of the attached terminal, or DEFAULT_WIDTH when it cannot be queried."""
    columns = shutil.get_terminal_size((DEFAULT_WIDTH, 24)).columns
    return columns if columns > 0 else DEFAULT_WIDTH


def should_color(stream: TextIO, no_color: bool = False) -> bool:
    """Color only for a terminal, and never when disabled by flag or NO_COLOR."""
    if no_color or os.environ.get('NO_COLOR'):
        return False
    isatty = getattr(stream, 'isatty', None)
    return bool(isatty is not None and isatty())


def display_name(name: str) -> str:
    # Undecodable bytes survive as surrogates; show them escaped instead of failing to print
    return name.encode('utf-8', 'backslashreplace').decode('utf-8')


def center(text: str, width: int) -> str:
    pad = (width - len(text)) // 2
    return ' ' * pad + text if pad > 0 else text


class TextReporter:
    """Renders classified entries as aligned lines for a terminal.

    The output depends only on the entries, the tally and the constructor arguments, so the
    same input renders to the same text. Colors wrap already padded text and never change
    widths or wording.
    """

    def __init__(self, width: int = DEFAULT_WIDTH, color: bool = False, verbose: bool = False):
        """Initialize the reporter.

        Args:
            width: Display width used for centering
            color: Wrap status tags in ANSI color codes
            verbose: Print digests under MATCH and DIFF lines
        """
        self._width = width
        self._color = color
        self._verbose = verbose

    def _paint(self, text: str, color: str) -> str:
        if not self._color:
            return text
        return f"{color}{text}{Style.RESET_ALL}"

    def _center(self, text: str) -> str:
        return center(text, self._width)

    def _digest_lines(self, indent: str, label: str, fingerprint: FileFingerprint) -> list[str]:
        lines = []
        for algorithm, digest in fingerprint.digest_map().items():
            value = digest if digest is not None else f"unavailable ({fingerprint.error})"
            lines.append(f"{indent}    {self._paint(label, Style.DIM)}: {algorithm}:{value}")
        return lines

    def render_lines(
            self,
            entries: list[ClassifiedEntry],
            tally: Tally,
            folder1: str | os.PathLike,
            folder2: str | os.PathLike) -> list[str]:
        """Build every output line, without trailing newlines."""
        names = [display_name(entry.name) for entry in entries]
        name_width = max([len(name) for name in names] + [1])
        suffix_width = max([len(entry.suffix) + 1 for entry in entries if entry.suffix] + [0])
        content_width = STATUS_COLUMN_WIDTH + 1 + name_width + suffix_width
        indent = ' ' * max(0, (self._width - content_width) // 2)

        lines = [
            self._center(RULE),
            self._center(TITLE),
            self._center(RULE),
            '',
            self._center("Comparing files in folders:"),
            self._center(f"Folder 1: {display_name(os.fspath(folder1))}"),
            self._center(f"Folder 2: {display_name(os.fspath(folder2))}"),
            self._center(THIN_RULE),
            '',
        ]

        for entry, name in zip(entries, names):
            for label, side in (('folder1', entry.first), ('folder2', entry.second)):
                if side is not None and not side.valid:
                    tag = self._paint(f"{ERROR_TAG:<{STATUS_COLUMN_WIDTH}}", ERROR_COLOR)
                    path = display_name(os.fspath(side.path))
                    lines.append(f"{indent}{tag} {name} ({label} {path}: {side.error})")

        for entry, name in zip(entries, names):
            tag = self._paint(f"{'[' + entry.classification.value + ']':<{STATUS_COLUMN_WIDTH}}",
                              STATUS_COLORS[entry.classification])
            line = f"{indent}{tag} {name:<{name_width}}"
            if entry.suffix:
                line += ' ' + entry.suffix
            lines.append(line.rstrip())

            if not self._verbose:
                continue
            if entry.classification is Classification.DIFF:
                assert entry.first is not None and entry.second is not None
                lines.extend(self._digest_lines(indent, 'folder1', entry.first))
                lines.extend(self._digest_lines(indent, 'folder2', entry.second))
            elif entry.classification is Classification.MATCH:
                lines.extend(self._digest_lines(indent, 'in_both', entry.reference))

        lines.extend([
            '',
            self._center(THIN_RULE),
            self._center("Summary"),
            self._center(THIN_RULE),
        ])

        summary = list(SUMMARY_LABELS)
        if tally.errors:
            summary.append(('errors', "Errors"))
        label_width = max(len(label) for _, label in summary)
        for field, label in summary:
            lines.append(self._center(f"{label:<{label_width}} : {getattr(tally, field)}"))

        lines.append(self._center(RULE))
        return lines

    def render(
            self,
            entries: list[ClassifiedEntry],
            tally: Tally,
            stream: TextIO,
            folder1: str | os.PathLike,
            folder2: str | os.PathLike) -> None:
        """Write the rendered report to ``stream`` in one call."""
        stream.write('\n'.join(self.render_lines(entries, tally, folder1, folder2)) + '\n')
        stream.flush()
