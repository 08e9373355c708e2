from __future__ import annotations
from hashlib import sha256
from pathlib import Path
import threading
from typing import Any, Dict
from sha256all import DigestPipeline


def expected_digests(root: Path) -> Dict[str, str]:
    """Map each regular file under ``root`` to its SHA-256 hex digest"""
    return {
        str(p): sha256(p.read_bytes()).hexdigest()
        for p in root.rglob("*")
        if p.is_file() and not p.is_symlink()
    }


def run_in_thread(pipeline: DigestPipeline, root: Path, timeout: float = 60) -> dict:
    """
    Run ``pipeline`` against ``root`` in a separate thread and fail if it
    hasn't finished within ``timeout`` seconds.  Returns a dict with either a
    ``"summary"`` or an ``"error"`` key.
    """
    outcome: Dict[str, Any] = {}

    def target() -> None:
        try:
            outcome["summary"] = pipeline.run(root)
        except Exception as e:
            outcome["error"] = e

    t = threading.Thread(target=target, daemon=True)
    t.start()
    t.join(timeout)
    assert not t.is_alive(), f"pipeline did not finish within {timeout} seconds"
    return outcome
