from __future__ import annotations
import logging
import os
from pathlib import Path
import stat
from typing import Iterator, List, Union

log = logging.getLogger(__name__)


class TraversalError(Exception):
    """Raised when a directory tree cannot be walked"""

    def __init__(self, path: str, error: OSError) -> None:
        super().__init__(path, error)
        self.path = path
        self.error = error

    def __str__(self) -> str:
        return f"Error walking {self.path}: {self.error}"


def iter_files(root: Union[str, Path]) -> Iterator[str]:
    """
    Yield the path of every file under ``root``, depth-first and in sorted
    order within each directory.  Directories are descended into but not
    yielded; symlinks to directories are neither.  Symlinks that don't
    resolve to a directory (including dangling ones) are yielded.  If
    ``root`` is a regular file, it is yielded by itself.

    Raises `TraversalError` if ``root`` cannot be stat'ed or listed, or if an
    entry below it cannot be examined.  A subdirectory that cannot be listed
    is logged and skipped.
    """
    root = os.fspath(root)
    try:
        st = os.stat(root)
    except OSError as e:
        raise TraversalError(root, e)
    if stat.S_ISDIR(st.st_mode):
        try:
            entries = _scan(root)
        except OSError as e:
            raise TraversalError(root, e)
        yield from _walk_entries(entries)
    elif stat.S_ISREG(st.st_mode):
        yield root
    else:
        log.warning("Not digesting %s: not a regular file or directory", root)


def _scan(dirpath: str) -> List[os.DirEntry]:
    with os.scandir(dirpath) as it:
        return sorted(it, key=lambda e: e.name)


def _walk_entries(entries: List[os.DirEntry]) -> Iterator[str]:
    for entry in entries:
        try:
            if entry.is_dir(follow_symlinks=False):
                try:
                    subentries = _scan(entry.path)
                except OSError as e:
                    log.warning("Skipping unreadable directory %s: %s", entry.path, e)
                    continue
                yield from _walk_entries(subentries)
            elif entry.is_symlink():
                if entry.is_dir():
                    log.debug("Skipping symlink to directory %s", entry.path)
                elif entry.is_file() or not os.path.exists(entry.path):
                    yield entry.path
                else:
                    log.debug("Skipping symlink to special file %s", entry.path)
            elif entry.is_file(follow_symlinks=False):
                yield entry.path
            else:
                # FIFOs, sockets, & devices can block a reader indefinitely
                log.debug("Skipping special file %s", entry.path)
        except OSError as e:
            raise TraversalError(entry.path, e)
