"""Shared test fixtures: grid builders, fake uploads and temp dirs."""

from __future__ import annotations

import shutil
import tempfile
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
from openpyxl import Workbook as XLWorkbook


DAYS_HEADER = ["Time", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


def make_sheet(rows: Sequence[Sequence[Any]], first_row: int = 0, first_col: int = 0) -> pd.DataFrame:
    """Build a grid DataFrame indexed by absolute (0-based) row/column positions."""
    width = max((len(r) for r in rows), default=0)
    padded = [list(r) + [None] * (width - len(r)) for r in rows]
    return pd.DataFrame(
        padded,
        index=range(first_row, first_row + len(padded)),
        columns=range(first_col, first_col + width),
        dtype=object,
    )


def timetable_rows() -> List[List[Any]]:
    return [
        DAYS_HEADER,
        ["9:00", "Math (L): (Room3) Dr. Smith: (G1,G2)", None, "Physics (P): (Lab 2) Ms. Lee: (G1)", None, None],
        ["10.30", None, "Lunch Break", None, None, "Chemistry (T): (B-12) Prof. Khan: (G3)"],
        ["2 PM", "History", None, None, "Art\nMusic (L): (A1) Mr. Brown: (G2)", None],
    ]


def xlsx_bytes(sheets: Dict[str, Sequence[Sequence[Any]]], origins: Optional[Dict[str, str]] = None) -> bytes:
    """Write sheets (name -> rows) into an in-memory .xlsx; origins maps sheet -> top-left cell."""
    wb = XLWorkbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(title=name)
        start = (origins or {}).get(name, "A1")
        col0 = ord(start[0].upper()) - ord("A") + 1
        row0 = int(start[1:])
        for r, row in enumerate(rows):
            for c, value in enumerate(row):
                if value is not None:
                    ws.cell(row=row0 + r, column=col0 + c, value=value)
    bio = BytesIO()
    wb.save(bio)
    return bio.getvalue()


def csv_bytes(rows: Sequence[Sequence[Any]], sep: str = ",", encoding: str = "utf-8") -> bytes:
    def esc(v: Any) -> str:
        s = "" if v is None else str(v)
        if sep in s or "\n" in s or '"' in s:
            s = '"' + s.replace('"', '""') + '"'
        return s

    text = "\n".join(sep.join(esc(v) for v in row) for row in rows) + "\n"
    return text.encode(encoding)


@dataclass
class FakeUpload:
    """Mimics streamlit's UploadedFile (name + getvalue)."""

    name: str
    data: bytes

    def getvalue(self) -> bytes:
        return self.data


class SequentialIds:
    """Deterministic session id factory; optionally fails on the n-th call."""

    def __init__(self, fail_on: Optional[int] = None):
        self.calls = 0
        self.fail_on = fail_on

    def __call__(self) -> str:
        self.calls += 1
        if self.fail_on is not None and self.calls == self.fail_on:
            raise RuntimeError("id generator failure")
        return f"s{self.calls}"


class TempDirMixin:
    def setUp(self):
        super().setUp()
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)
        super().tearDown()
