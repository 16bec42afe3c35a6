"""Shared test utilities for hashcmp tests."""
import io
import os
import sys
from pathlib import Path


def make_folder(path: Path, files: dict[str, bytes | str]) -> Path:
    """Create ``path`` and write each file of ``files`` into it."""
    path.mkdir(parents=True, exist_ok=True)
    for name, content in files.items():
        if isinstance(content, str):
            content = content.encode('utf-8')
        (path / name).write_bytes(content)
    return path


def capture_output(func, *args, **kwargs):
    """Capture stdout from a function call. Returns (result, output)."""
    captured_output = io.StringIO()
    old_stdout = sys.stdout
    try:
        sys.stdout = captured_output
        result = func(*args, **kwargs)
    finally:
        sys.stdout = old_stdout
    return result, captured_output.getvalue()


def running_as_root() -> bool:
    """Permission bits do not stop root from reading files."""
    return hasattr(os, 'geteuid') and os.geteuid() == 0
