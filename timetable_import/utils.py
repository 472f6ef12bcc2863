import os
import re
import json
import datetime as _dt
from pathlib import Path
from typing import Any, Optional, Tuple

import pandas as pd

BASE_DIR = Path(__file__).resolve().parent
DEFAULT_DATA_DIR = BASE_DIR / "data"

APPDATA = os.environ.get("APPDATA")
if APPDATA:
    USER_DATA_DIR = Path(APPDATA) / "TimetableImport" / "data"
else:
    USER_DATA_DIR = DEFAULT_DATA_DIR  # fallback

def load_json(path: Path, default: Any):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        return default

def save_json(path: Path, obj: Any):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)

_NBSP_RE = re.compile(r"[\u00A0\u2007\u202F]")  # NBSP варианты
_WS_RE = re.compile(r"\s+")


def collapse_ws(s: str) -> str:
    return _WS_RE.sub(" ", s or "").strip()


def cell_text(v: Any) -> str:
    """
    Значение ячейки -> текст:
    - None / NaN -> ""
    - 9.0 -> "9" (pandas/Excel любят отдавать целые как float)
    - datetime.time / datetime.datetime -> "HH:MM"
    - остальное str(v)
    """
    if v is None or v is pd.NaT:
        return ""
    if isinstance(v, bool):
        return str(v)
    if isinstance(v, float):
        if v != v:  # NaN
            return ""
        if v.is_integer():
            return str(int(v))
    if isinstance(v, (_dt.time, _dt.datetime)):
        return f"{v.hour:02d}:{v.minute:02d}"
    s = str(v)
    if not s or s.lower() == "nan":
        return ""
    # невидимые символы CSV/Excel
    s = s.replace("\ufeff", "")
    s = _NBSP_RE.sub(" ", s)
    return s


def norm_text(s: Any) -> str:
    # lower + trim, как для поиска заголовков
    return cell_text(s).lower().strip()

# =========================

# Сетка листа: DataFrame с абсолютными (0-based) номерами строк/колонок
# =========================
def sheet_bounds(sheet: pd.DataFrame) -> Tuple[int, int, int, int]:
    """
    Возвращает (first_row, last_row, first_col, last_col).
    Пустой лист ведёт себя как одна пустая ячейка A1.
    """
    if sheet is None or sheet.empty:
        return 0, 0, 0, 0
    return (
        int(sheet.index.min()),
        int(sheet.index.max()),
        int(min(sheet.columns)),
        int(max(sheet.columns)),
    )


def cell_at(sheet: pd.DataFrame, row: int, col: int) -> Optional[Any]:
    if sheet is None or row not in sheet.index or col not in sheet.columns:
        return None
    return sheet.at[row, col]


def rules_path() -> Path:
    return DEFAULT_DATA_DIR / "rules.json"

def timetable_data_path() -> Path:
    USER_DATA_DIR.mkdir(parents=True, exist_ok=True)
    return USER_DATA_DIR / "timetable_data.json"
