import os
import stat
from pathlib import Path
from typing import Iterator


class FileContext:
    """Context object for a single directory entry during a scan.

    The stat information is taken with ``follow_symlinks=False`` and cached on first access, so
    a symbolic link is reported as a link and never as the file it points to.
    """
    def __init__(self, name: str, path: Path, st: os.stat_result | None = None):
        self._name: str = name
        self._path: Path = path
        self._stat: os.stat_result | None = st

    @property
    def name(self) -> str:
        return self._name

    @property
    def path(self) -> Path:
        return self._path

    @property
    def stat(self) -> os.stat_result:
        if self._stat is None:
            self._stat = self._path.stat(follow_symlinks=False)
        return self._stat

    def is_file(self) -> bool:
        return stat.S_ISREG(self.stat.st_mode)

    def is_hidden(self) -> bool:
        return self._name.startswith('.')

    def __repr__(self) -> str:
        return f"FileContext({self._name!r})"


def list_directory(path: Path) -> Iterator[FileContext]:
    """Yield a context for each entry directly inside ``path``, without descending.

    Entries come in the order the operating system lists them.

    Raises:
        OSError: The directory cannot be listed
    """
    child: Path
    for child in path.iterdir():
        yield FileContext(child.name, child)
