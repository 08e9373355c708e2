from __future__ import annotations
import cProfile
from contextlib import contextmanager
import logging
from pathlib import Path
from typing import Iterator, Optional

log = logging.getLogger(__name__)


@contextmanager
def cpu_profile(path: Optional[Path]) -> Iterator[None]:
    """
    Profile the calling thread for the duration of the ``with`` block and
    write the stats to ``path``.  Does nothing if ``path`` is `None`.
    """
    if path is None:
        yield
        return
    prof = cProfile.Profile()
    prof.enable()
    try:
        yield
    finally:
        prof.disable()
        prof.dump_stats(str(path))
        log.info("Wrote CPU profile to %s", path)
