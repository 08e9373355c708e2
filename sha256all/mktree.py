"""
Build sample directory trees to run ``sha256all`` against

A layout is either a mapping or a list.  In a mapping, each key is an entry
name; a value of ``null`` or a file spec creates a file, and any other mapping
creates a directory with that sub-layout.  A list gives the number of
subdirectories at each level followed by the number of files in each leaf
directory, optionally followed by a file spec for those files.

A file spec is one of:

- ``null``: an empty file
- ``{"text": "..."}``: a file with exactly the given (UTF-8) content
- ``{"size": N}``: ``N`` random bytes
- ``{"maxsize": N}`` or ``{"minsize": M, "maxsize": N}``: a random number of
  random bytes
"""

from __future__ import annotations
import json
import logging
import os
from pathlib import Path
import random
from typing import Any, List, Optional, TextIO
import click

log = logging.getLogger(__name__)

FILE_BLOCK_SIZE = 1 << 16

FILESPEC_KEYS = {"text", "size", "minsize", "maxsize"}


def is_filespec(layout: Any) -> bool:
    return layout is None or (
        isinstance(layout, dict) and bool(FILESPEC_KEYS & layout.keys())
    )


def mkfile(path: Path, spec: Optional[dict]) -> None:
    if spec is None:
        log.info("Touching file %s", path)
        path.touch()
        return
    if "text" in spec:
        log.info("Writing file %s", path)
        path.write_bytes(spec["text"].encode("utf-8"))
        return
    if "size" in spec:
        size = spec["size"]
    elif "maxsize" in spec:
        size = random.randint(spec.get("minsize", 0), spec["maxsize"])
    else:
        raise ValueError(f"Invalid file spec: {spec!r}")
    log.info("Creating file %s (size: %d)", path, size)
    with path.open("wb") as fp:
        while size > 0:
            n = min(size, FILE_BLOCK_SIZE)
            fp.write(os.urandom(n))
            size -= n


def create_tree(root: Path, layout: Any) -> List[Path]:
    """
    Populate the existing directory ``root`` according to ``layout`` and
    return the paths of all files created
    """
    files: List[Path] = []
    if isinstance(layout, dict):
        for name, sublayout in layout.items():
            p = root / name
            if is_filespec(sublayout):
                mkfile(p, sublayout)
                files.append(p)
            else:
                log.info("Creating directory %s", p)
                p.mkdir()
                files.extend(create_tree(p, sublayout))
        return files
    widths = list(layout)
    if widths and is_filespec(widths[-1]):
        filespec = widths.pop()
    else:
        filespec = None
    if not widths:
        raise ValueError("List layout must contain at least a file count")
    *dirwidths, nfiles = widths
    dirs = [root]
    for width in dirwidths:
        subdirs = []
        for d in dirs:
            for x in range(width):
                d2 = d / f"d{x}"
                log.info("Creating directory %s", d2)
                d2.mkdir()
                subdirs.append(d2)
        dirs = subdirs
    for d in dirs:
        for x in range(nfiles):
            p = d / f"f{x}.dat"
            mkfile(p, filespec)
            files.append(p)
    return files


@click.command()
@click.argument("dirpath", type=click.Path(file_okay=False, path_type=Path))
@click.argument("specfile", type=click.File())
def main(dirpath: Path, specfile: TextIO) -> None:
    """Create a directory tree at DIRPATH as described by the JSON in SPECFILE"""
    logging.basicConfig(
        format="%(asctime)s [%(levelname)-8s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        level=logging.INFO,
    )
    with specfile:
        layout = json.load(specfile)
    log.info("Creating directory %s", dirpath)
    dirpath.mkdir(parents=True, exist_ok=True)
    files = create_tree(dirpath, layout)
    click.echo(f"Created {len(files)} files under {dirpath}")


if __name__ == "__main__":
    main()
