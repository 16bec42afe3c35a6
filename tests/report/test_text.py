import io
import os
import re
import unittest
from pathlib import Path
from unittest import mock

from hashcmp.matcher import classify
from hashcmp.report.text import (
    DEFAULT_WIDTH,
    STATUS_COLUMN_WIDTH,
    TextReporter,
    center,
    detect_width,
    display_name,
    should_color,
)
from hashcmp.scanner import FileFingerprint, ScanResult
from hashcmp.utils.hasher import HashAlgorithm

ANSI_ESCAPE = re.compile(r'\x1b\[[0-9;]*m')


def fingerprint(name, *digests):
    return FileFingerprint(name, Path(name), HashAlgorithm.SHA256, tuple(digests))


def sample():
    scan_a = ScanResult(Path('one'), HashAlgorithm.SHA256, [
        fingerprint('same.txt', 'aaaa'),
        fingerprint('changed.txt', 'bbbb'),
        fingerprint('gone.txt', 'cccc'),
        FileFingerprint.failed('locked.txt', Path('one', 'locked.txt'), HashAlgorithm.SHA256, 'Permission denied'),
    ])
    scan_b = ScanResult(Path('two'), HashAlgorithm.SHA256, [
        fingerprint('same.txt', 'aaaa'),
        fingerprint('changed.txt', 'dddd'),
        fingerprint('locked.txt', 'eeee'),
        fingerprint('a_much_longer_name.txt', 'ffff'),
    ])
    return classify(scan_a, scan_b)


class TextReporterTest(unittest.TestCase):
    """Test TextReporter line rendering."""

    def render(self, reporter=None, entries_tally=None):
        entries, tally = entries_tally or sample()
        reporter = reporter or TextReporter(width=100)
        return reporter.render_lines(entries, tally, 'one', 'two')

    def test_entry_lines_aligned(self):
        """Test that names and suffixes line up across entries."""
        lines = self.render()

        entry_lines = [line for line in lines if line.lstrip().startswith(('[MATCH]', '[DIFF]', '[MISSING]',
                                                                            '[EXTRA]'))]
        self.assertEqual(5, len(entry_lines))

        # Every name starts in the same column
        name_width = len('a_much_longer_name.txt')
        name_columns = {line.index(name) for line, name in zip(
            entry_lines, ['same.txt', 'changed.txt', 'gone.txt', 'locked.txt', 'a_much_longer_name.txt'])}
        self.assertEqual(1, len(name_columns))

        # Suffixes start after the longest name plus one space
        column = name_columns.pop()
        gone_line = entry_lines[2]
        self.assertEqual(column + name_width + 1, gone_line.index('not found in Folder2'))

    def test_exact_entry_line(self):
        """Test the exact indent and padding of a single entry line."""
        scan_a = ScanResult(Path('one'), HashAlgorithm.SHA256, [fingerprint('a.txt', 'aa')])
        scan_b = ScanResult(Path('two'), HashAlgorithm.SHA256, [fingerprint('a.txt', 'aa')])
        lines = self.render(TextReporter(width=80), classify(scan_a, scan_b))

        # content width: 11 (status) + 1 + 5 (name) = 17, indent (80 - 17) // 2 = 31
        self.assertIn(' ' * 31 + '[MATCH]' + ' ' * (STATUS_COLUMN_WIDTH - 7) + ' a.txt', lines)

    def test_banner_and_summary(self):
        """Test banner text and colon-aligned summary labels."""
        lines = self.render(TextReporter(width=100))
        text = '\n'.join(lines)

        self.assertIn('Folder File Comparison Utility', text)
        self.assertIn('Folder 1: one', text)
        self.assertIn('Folder 2: two', text)
        self.assertIn('Total files checked : 4', text)
        self.assertIn('Matches             : 1', text)
        self.assertIn('Differences         : 2', text)
        self.assertIn('Missing in Folder2  : 1', text)
        self.assertIn('Extra in Folder2    : 1', text)
        self.assertIn('Errors              : 1', text)

    def test_errors_summary_line_omitted_without_errors(self):
        """Test that the Errors line only appears when something failed."""
        scan_a = ScanResult(Path('one'), HashAlgorithm.SHA256, [fingerprint('a.txt', 'aa')])
        scan_b = ScanResult(Path('two'), HashAlgorithm.SHA256, [])
        text = '\n'.join(self.render(TextReporter(width=80), classify(scan_a, scan_b)))

        self.assertNotIn('Errors', text)
        self.assertNotIn('[ERROR]', text)

    def test_error_lines_name_the_failing_side(self):
        """Test that ERROR lines give the folder and full path of the failed file."""
        text = '\n'.join(self.render())

        failed_path = os.path.join('one', 'locked.txt')
        self.assertIn(f'[ERROR]     locked.txt (folder1 {failed_path}: Permission denied)', text)
        self.assertIn('unreadable in Folder1', text)

    def test_centered(self):
        """Test centering of the banner rule."""
        lines = self.render(TextReporter(width=100))
        rule = '=' * 47
        self.assertEqual(' ' * ((100 - 47) // 2) + rule, lines[0])

    def test_narrow_width_does_not_indent(self):
        """Test that a width narrower than the content adds no indent."""
        lines = self.render(TextReporter(width=10))
        self.assertTrue(any(line.startswith('[MATCH]') for line in lines))
        self.assertEqual('=' * 47, lines[0])

    def test_deterministic(self):
        """Test that the same input renders the same lines."""
        self.assertEqual(self.render(), self.render())

    def test_color_does_not_change_text(self):
        """Colors only wrap text; stripping them gives the plain rendering."""
        plain = self.render(TextReporter(width=100, color=False))
        colored = self.render(TextReporter(width=100, color=True))

        self.assertNotEqual(plain, colored)
        self.assertTrue(any('\x1b[32m' in line for line in colored))
        self.assertEqual(plain, [ANSI_ESCAPE.sub('', line) for line in colored])

    def test_no_color_codes_by_default(self):
        """Test that no ANSI codes are emitted without color."""
        self.assertFalse(any('\x1b[' in line for line in self.render()))

    def test_verbose_digests(self):
        """Test digest lines under MATCH and DIFF entries in verbose mode."""
        lines = self.render(TextReporter(width=100, verbose=True))
        text = '\n'.join(lines)

        self.assertIn('in_both: sha256:aaaa', text)
        self.assertIn('folder1: sha256:bbbb', text)
        self.assertIn('folder2: sha256:dddd', text)
        self.assertIn('folder1: sha256:unavailable (Permission denied)', text)

    def test_not_verbose_hides_digests(self):
        """Test that digests are hidden without verbose mode."""
        self.assertNotIn('sha256:', '\n'.join(self.render()))

    def test_render_writes_stream(self):
        """Test that render writes the rendered lines to the stream."""
        entries, tally = sample()
        stream = io.StringIO()

        TextReporter(width=100).render(entries, tally, stream, 'one', 'two')

        self.assertEqual('\n'.join(self.render()) + '\n', stream.getvalue())


class TerminalHelpersTest(unittest.TestCase):
    """Test terminal width, color and name helpers."""

    def test_center(self):
        """Test center with room to pad and without."""
        self.assertEqual('  ab', center('ab', 6))
        self.assertEqual('abcdef', center('abcdef', 4))

    def test_detect_width_fallback(self):
        """Test the 80-column fallback when the terminal reports no width."""
        with mock.patch('shutil.get_terminal_size', return_value=os.terminal_size((0, 0))):
            self.assertEqual(DEFAULT_WIDTH, detect_width())

    def test_detect_width(self):
        """Test that the terminal width is used when available."""
        with mock.patch('shutil.get_terminal_size', return_value=os.terminal_size((132, 50))):
            self.assertEqual(132, detect_width())

    def test_should_color_requires_tty(self):
        """Test that a non-terminal stream is never colored."""
        self.assertFalse(should_color(io.StringIO()))

    def test_should_color_respects_flag_and_environment(self):
        """Test that --no-color and NO_COLOR both disable color."""
        tty = mock.Mock()
        tty.isatty.return_value = True

        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertTrue(should_color(tty))
            self.assertFalse(should_color(tty, no_color=True))

        with mock.patch.dict(os.environ, {'NO_COLOR': '1'}):
            self.assertFalse(should_color(tty))

    def test_display_name_escapes_undecodable_bytes(self):
        """Test that surrogate-escaped bytes are shown as escapes."""
        name = os.fsdecode(b'bad\xffname')
        self.assertEqual('bad\\udcffname', display_name(name))


if __name__ == '__main__':
    unittest.main()
