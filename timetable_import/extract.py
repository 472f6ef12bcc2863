from __future__ import annotations
import logging
import numbers
import uuid
from typing import Callable, Iterator, List, Tuple
import pandas as pd
from .grammar import parse_session_line, split_cell_lines
from .model import HeaderLayout, RawCell, Session, UnparsedCell
from .times import normalize_time
from .utils import cell_at, cell_text, load_json, rules_path, sheet_bounds

logger = logging.getLogger(__name__)

RULES = load_json(rules_path(), {})
SESSION_DURATION_SLOTS = int(RULES.get("session_duration_slots", 1))

IdFactory = Callable[[], str]


def new_session_id() -> str:
    return str(uuid.uuid4())


def _cell_content(v) -> str:
    # числовой 0 в сетке - пустая ячейка (как и None/NaN)
    if isinstance(v, numbers.Number) and not isinstance(v, bool) and v == 0:
        return ""
    return cell_text(v)


def parse_session_cell(
    content: str,
    day: str,
    start_time: str,
    new_id: IdFactory = new_session_id,
) -> List[Session]:
    """
    Ячейка -> список занятий (по одному на каждую распознанную строку).
    Нераспознанные строки молча пропускаются.
    """
    sessions: List[Session] = []
    for line in split_cell_lines(content):
        parsed = parse_session_line(line)
        if parsed is None:
            continue
        sessions.append(Session(
            id=new_id(),
            day=day,
            start_time=start_time,
            duration_slots=SESSION_DURATION_SLOTS,
            subject_name=parsed.subject_name,
            session_type=parsed.session_type,
            room=parsed.room_or_code,
            lecturer=parsed.lecturer,
            groups=list(parsed.groups),
            notes="",
            attendance_marked=None,
        ))
    return sessions


def iter_raw_cells(sheet: pd.DataFrame, layout: HeaderLayout) -> Iterator[RawCell]:
    """
    Обходит строки под заголовком: время из колонки времени + непустые ячейки дней.
    Строка с нераспознанным временем пропускается целиком (без диагностики).
    """
    _, last_row, _, _ = sheet_bounds(sheet)

    for row in range(layout.header_row + 1, last_row + 1):
        time_text = _cell_content(cell_at(sheet, row, layout.time_col))
        if not time_text:
            continue
        start_time = normalize_time(time_text)
        if not start_time:
            logger.debug("Row %d skipped: unrecognised time %r", row + 1, time_text)
            continue

        for day, col in layout.day_columns:
            content = _cell_content(cell_at(sheet, row, col)).strip()
            if not content:
                continue
            yield RawCell(row=row, col=col, day=day, start_time=start_time, content=content)


def extract_sessions(
    sheet: pd.DataFrame,
    layout: HeaderLayout,
    new_id: IdFactory = new_session_id,
) -> Tuple[List[Session], List[UnparsedCell]]:
    sessions: List[Session] = []
    unparsed: List[UnparsedCell] = []

    for raw in iter_raw_cells(sheet, layout):
        try:
            sessions.extend(parse_session_cell(raw.content, raw.day, raw.start_time, new_id))
        except Exception as e:
            # ячейка отбрасывается целиком, даже если часть строк уже разобрана
            logger.warning("Cell %d:%d could not be parsed: %s", raw.row + 1, raw.col + 1, e)
            unparsed.append(UnparsedCell(row=raw.row + 1, col=raw.col + 1, content=raw.content))

    return sessions, unparsed


def count_total_cells(sheet: pd.DataFrame, layout: HeaderLayout) -> int:
    # строки с нераспознанным временем тоже считаются (как и раньше в отчётах)
    _, last_row, _, _ = sheet_bounds(sheet)
    return (last_row - layout.header_row) * len(layout.day_columns)
