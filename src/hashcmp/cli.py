import argparse
import logging
import sys
import textwrap
from pathlib import Path

import colorama

from . import ArgumentError, FolderOpenError, HashAlgorithm, ReportFormat, ScanOptions, Settings
from .commands.compare import CompareArgs, do_compare
from .report.text import TextReporter, detect_width, should_color
from .settings import (
    SETTING_ALGORITHM, SETTING_HIDDEN, SETTING_IGNORE, SETTING_LOG_LEVEL, SETTING_LOG_PATH,
    SETTING_OUTPUT_FOLDER, SETTING_REPORT_FORMAT, SETTING_TYPES,
)
from .utils.profiling import profile_main

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_USAGE = 1
EXIT_FOLDER_ERROR = 2
EXIT_DIFFERENCES = 3

MAX_PATH_LENGTH = 4096
LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser reporting usage errors with EXIT_USAGE instead of argparse's default 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog='hashcmp',
        description='Compare the files of two folders by content hash and report which files match, differ, '
                    'are missing from the second folder, or exist only in the second folder.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              hashcmp /path/to/folder1 /path/to/folder2
              hashcmp --algo sha256 --json /path/to/folder1 /path/to/folder2
              hashcmp --report-format msgpack --output-folder /tmp/reports a b

            Exit status:
              0  comparison completed
              1  invalid arguments or settings
              2  a folder could not be opened or the report could not be written
              3  differences found (only with --fail-on-diff)
            ''').strip()
    )
    parser.add_argument(
        'folder1',
        metavar='FOLDER1',
        help='Reference folder')
    parser.add_argument(
        'folder2',
        metavar='FOLDER2',
        help='Folder compared against the reference')
    parser.add_argument(
        '--algo',
        choices=[a.value for a in HashAlgorithm],
        help='Hash algorithm: sha256, blake3, or both (files match only if both digests match). '
             'Defaults to compare.algorithm from settings, or both.')
    parser.add_argument(
        '--json',
        action='store_true',
        help='Also write a structured report (report.json) to the output folder')
    parser.add_argument(
        '--report-format',
        choices=[f.value for f in ReportFormat],
        help='Structured report format; implies --json. Defaults to report.format from settings, or json.')
    parser.add_argument(
        '--output-folder',
        metavar='DIR',
        help='Directory the structured report is written to (default: current working directory)')
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show digests under MATCH and DIFF lines')
    parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored output (also disabled when NO_COLOR is set or output is not a terminal)')
    parser.add_argument(
        '--hidden',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Include files whose names start with a dot (default: included)')
    parser.add_argument(
        '--ignore',
        action='append',
        metavar='PATTERN',
        help='Skip files whose names match this shell-style pattern; may be repeated')
    parser.add_argument(
        '--type',
        action='append',
        dest='types',
        metavar='EXT',
        help='Only compare files with this extension; may be repeated')
    parser.add_argument(
        '--no-sort',
        action='store_true',
        help='Keep directory listing order instead of sorting by name')
    parser.add_argument(
        '--fail-on-diff',
        action='store_true',
        help='Exit with status 3 when any file differs, is missing, or is extra')
    parser.add_argument(
        '--config',
        metavar='PATH',
        help='Path to a TOML settings file. If not provided, uses HASHCMP_CONFIG environment variable or '
             '~/.config/hashcmp/settings.toml.')
    parser.add_argument(
        '--log-file',
        metavar='PATH',
        help='Path to log file for operation logging. If not provided, uses logging.path from settings or no '
             'logging.')
    parser.add_argument(
        '--log-level',
        metavar='LEVEL',
        choices=LOG_LEVELS,
        help='Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to INFO when a log file is used.')
    return parser


def configure_logging(log_file: str | None, log_level: str | None, settings: Settings) -> bool:
    """Configure logging from CLI arguments, falling back to settings.

    Returns:
        True if logging was configured, False otherwise
    """
    if not log_file:
        log_file = settings.get(SETTING_LOG_PATH)
    if not log_file:
        return False

    if log_level is None:
        log_level = str(settings.get(SETTING_LOG_LEVEL, 'INFO')).upper()
    if log_level not in LOG_LEVELS:
        raise ArgumentError(f"invalid log level {log_level!r}, expected one of {', '.join(LOG_LEVELS)}")

    logging.basicConfig(
        filename=str(log_file),
        level=getattr(logging, log_level),
        format=LOG_FORMAT,
        force=True
    )
    return True


def _check_folder_argument(value: str) -> Path:
    if not value:
        raise ArgumentError("folder path must not be empty")
    if len(value) > MAX_PATH_LENGTH:
        raise ArgumentError(f"folder path longer than {MAX_PATH_LENGTH} characters: {value[:64]}...")
    return Path(value)


def build_compare_args(args: argparse.Namespace, settings: Settings) -> CompareArgs:
    """Merge parsed arguments with settings; command-line values take precedence.

    Raises:
        ArgumentError: A folder argument or a setting value is invalid
    """
    folder1 = _check_folder_argument(args.folder1)
    folder2 = _check_folder_argument(args.folder2)

    algorithm_name = args.algo or settings.get(SETTING_ALGORITHM, HashAlgorithm.BOTH.value)
    try:
        algorithm = HashAlgorithm(algorithm_name)
    except ValueError:
        raise ArgumentError(f"unknown hash algorithm {algorithm_name!r}, expected sha256, blake3 or both") from None

    include_hidden = args.hidden if args.hidden is not None else settings.get_bool(SETTING_HIDDEN, True)
    ignore_patterns = args.ignore if args.ignore is not None else settings.get_string_list(SETTING_IGNORE)
    types = args.types if args.types is not None else settings.get_string_list(SETTING_TYPES)

    report_format = None
    if args.json or args.report_format is not None:
        format_name = args.report_format or settings.get(SETTING_REPORT_FORMAT, ReportFormat.JSON.value)
        try:
            report_format = ReportFormat(format_name)
        except ValueError:
            raise ArgumentError(f"unknown report format {format_name!r}, expected json or msgpack") from None

    output_folder = args.output_folder or settings.get(SETTING_OUTPUT_FOLDER)

    return CompareArgs(
        folder1=folder1,
        folder2=folder2,
        algorithm=algorithm,
        scan_options=ScanOptions(
            include_hidden=include_hidden,
            ignore_patterns=tuple(ignore_patterns),
            types=tuple(types),
            sort_names=not args.no_sort,
        ),
        report_format=report_format,
        output_folder=Path(output_folder) if output_folder else None,
    )


@profile_main
def hashcmp_main(argv: list[str] | None = None) -> int:
    """Run the command line and return the process exit status.

    Usage errors detected by argparse exit directly with EXIT_USAGE; ``--help`` exits with 0.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings.locate(args.config)
        configure_logging(args.log_file, args.log_level, settings)
        compare_args = build_compare_args(args, settings)
    except ArgumentError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    output = sys.stdout
    reporter = TextReporter(
        width=detect_width(),
        color=should_color(output, args.no_color),
        verbose=args.verbose
    )

    try:
        outcome = do_compare(compare_args, reporter, output)
    except FolderOpenError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FOLDER_ERROR
    except OSError as e:
        logger.error(f"Failed to write output: {e}")
        print(f"Error: cannot write report: {e}", file=sys.stderr)
        return EXIT_FOLDER_ERROR

    if args.fail_on_diff and not outcome.tally.is_clean:
        return EXIT_DIFFERENCES
    return EXIT_SUCCESS


def main():
    colorama.just_fix_windows_console()
    sys.exit(hashcmp_main())


if __name__ == '__main__':
    main()
