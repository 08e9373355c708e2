from __future__ import annotations
from pathlib import Path
from typing import List
from pydantic import BaseModel


class RunReport(BaseModel):
    root: str
    implementation: str
    workers: int
    queue_size: int
    elapsed: float


def append_report(path: Path, report: RunReport) -> None:
    """Append ``report`` to ``path`` as a line of JSON"""
    with path.open("a") as fp:
        print(report.model_dump_json(), file=fp)


def read_reports(path: Path) -> List[RunReport]:
    with path.open() as fp:
        return [RunReport.model_validate_json(line) for line in fp if line.strip()]
