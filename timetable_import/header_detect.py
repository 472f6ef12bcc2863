from __future__ import annotations
import logging
from typing import Dict, List, Mapping, Optional, Set
import pandas as pd
from .errors import StructureError
from .model import HeaderLayout
from .utils import cell_at, load_json, norm_text, rules_path, sheet_bounds

logger = logging.getLogger(__name__)

RULES = load_json(rules_path(), {})

WEEKDAYS: List[str] = RULES.get(
    "weekdays",
    ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"],
)
HEADER_KEYWORD: str = str(RULES.get("header_keyword", "time")).lower()
HEADER_SCAN_ROWS: int = int(RULES.get("header_scan_rows", 10))
HEADER_SCAN_COLS: int = int(RULES.get("header_scan_cols", 10))
MIN_DAY_COLUMNS: int = int(RULES.get("min_day_columns", 3))


def _weekday_in(text: str) -> Optional[str]:
    # первый день недели (Mon..Sun), встречающийся в тексте как подстрока
    for day in WEEKDAYS:
        if day.lower() in text:
            return day
    return None


def _sheet_qualifies(sheet: pd.DataFrame) -> bool:
    """
    Лист похож на расписание, если в окне 11x11 от начала есть строка,
    где одновременно есть "time" и хотя бы 3 разных дня недели.
    """
    first_row, last_row, first_col, last_col = sheet_bounds(sheet)

    for row in range(first_row, min(last_row, first_row + HEADER_SCAN_ROWS) + 1):
        has_time = False
        days: Set[str] = set()

        for col in range(first_col, min(last_col, first_col + HEADER_SCAN_COLS) + 1):
            text = norm_text(cell_at(sheet, row, col))
            if not text:
                continue
            if HEADER_KEYWORD in text:
                has_time = True
            day = _weekday_in(text)
            if day:
                days.add(day)

        if has_time and len(days) >= MIN_DAY_COLUMNS:
            return True
    return False


def find_timetable_sheet(workbook: Mapping[str, pd.DataFrame]) -> str:
    """
    Возвращает имя первого листа, похожего на расписание.
    Если ни один не подошёл - первый лист книги (даже если это не расписание).
    """
    names = list(workbook.keys())
    if not names:
        raise StructureError("Could not find timetable structure: the workbook has no sheets.")

    for name in names:
        if _sheet_qualifies(workbook[name]):
            logger.debug("Timetable sheet detected: %r", name)
            return name

    logger.debug("No sheet has a Time/weekday header, falling back to %r", names[0])
    return names[0]


def detect_header_layout(sheet: pd.DataFrame) -> HeaderLayout:
    """
    Ищет строку заголовка, колонку времени и колонки дней в первых 11 строках.

    Внутри окна побеждает последнее совпадение: и для "time", и для каждого дня.
    Сканирование строк останавливается, как только заголовок найден и
    сопоставлено не меньше 3 дней.
    """
    first_row, last_row, first_col, last_col = sheet_bounds(sheet)

    header_row = -1
    time_col = -1
    day_cols: Dict[str, int] = {}

    for row in range(first_row, min(last_row, first_row + HEADER_SCAN_ROWS) + 1):
        for col in range(first_col, last_col + 1):
            text = norm_text(cell_at(sheet, row, col))
            if not text:
                continue
            if HEADER_KEYWORD in text:
                header_row, time_col = row, col
            for day in WEEKDAYS:
                if day.lower() in text:
                    day_cols[day] = col

        if header_row != -1 and len(day_cols) >= MIN_DAY_COLUMNS:
            break

    if header_row == -1 or time_col == -1:
        raise StructureError(
            "Could not find timetable structure: no header row with a \"Time\" column. "
            "Ensure the sheet has a \"Time\" column and weekday headers."
        )

    layout = HeaderLayout(
        header_row=header_row,
        time_col=time_col,
        day_columns=tuple(day_cols.items()),
    )
    logger.debug(
        "Header row %d, time column %d, day columns %s",
        layout.header_row, layout.time_col, dict(layout.day_columns),
    )
    return layout
