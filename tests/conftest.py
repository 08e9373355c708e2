from __future__ import annotations
from pathlib import Path
import pytest
from sha256all.mktree import create_tree

LAYOUT = {
    "empty.txt": None,
    "hello.txt": {"text": "Hello, world!\n"},
    "a": {
        "b": {
            "deep.dat": {"size": 200_000},
            "c": {},
        },
        "x.dat": {"size": 1},
    },
    "zzz": {"last.txt": {"text": "the end"}},
}


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    root = tmp_path / "tree"
    root.mkdir()
    create_tree(root, LAYOUT)
    return root

