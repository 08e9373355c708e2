from __future__ import annotations
from dataclasses import dataclass
import os
from typing import Union


def display_path(path: str) -> str:
    """
    Render ``path`` for output.  Bytes of the filename that are not valid
    UTF-8 (which `os.scandir` hands back as surrogate escapes) are shown as
    ``\\xNN`` escapes so that the line can be written to any UTF-8 stream.
    """
    return os.fsencode(path).decode("utf-8", errors="backslashreplace")


@dataclass(frozen=True)
class DigestResult:
    worker_id: int
    #: Raw SHA-256 digest (32 bytes)
    digest: bytes
    path: str

    @property
    def hexdigest(self) -> str:
        return self.digest.hex()

    def format(self) -> str:
        return f"{self.hexdigest}  {self.worker_id}  {display_path(self.path)}"


@dataclass(frozen=True)
class DigestFailure:
    worker_id: int
    path: str
    #: "open" or "read"
    stage: str
    error: OSError

    def format(self) -> str:
        path = display_path(self.path)
        if self.stage == "open":
            return f"error opening file {path}: {self.error}"
        else:
            return f"error calculating sum of {path}: {self.error}"


Record = Union[DigestResult, DigestFailure]


class SinkError(Exception):
    """Raised when a record could not be written to its sink"""

    def __init__(self, path: str, error: Exception) -> None:
        super().__init__(path, error)
        self.path = path
        self.error = error

    def __str__(self) -> str:
        return f"Error writing result for {display_path(self.path)}: {self.error}"
