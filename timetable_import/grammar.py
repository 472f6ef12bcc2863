"""
Грамматика содержимого ячейки расписания.

Одна строка ячейки = одно занятие:
    <Subject>[ (<TypeCode>)]: (<RoomCode>) <Lecturer>: (<Group1>,<Group2>,...)

Пример:
    "Python for DataScience (P): (3102B-BL3-FF) Ms. R.Sujitha: (23CSBTB15,23CSBTB16)"

Поля снимаются с конца строки по очереди: группы -> преподаватель -> аудитория -> предмет/тип.
Каждый шаг получает остаток строки и возвращает (поле, новый остаток);
последующие шаги рассчитывают, что предыдущие уже вырезали своё.
"""
from __future__ import annotations
import logging
import re
from typing import List, Optional, Tuple
from .model import ParsedLine
from .scoring import line_confidence
from .utils import collapse_ws

logger = logging.getLogger(__name__)

GROUPS_RE = re.compile(r"\(([^)]+)\)\s*$")
GROUP_SPLIT_RE = re.compile(r"[,\s]+")
# хвост без двоеточий/скобок после ":" или после ": (аудитория)", допускается одно завершающее ":"
LECTURER_RE = re.compile(r"(?::\s*(?P<room>\([^()]*\))|:)\s*(?P<name>[^:()]+?)\s*:?\s*$")
HONORIFIC_RE = re.compile(r"^(Dr\.|Mr\.|Ms\.|Prof\.)\s*", re.I)
ROOM_RE = re.compile(r":\s*\(([^)]+)\)")
ROOM_PREFIX_RE = re.compile(r"^Room\s+", re.I)
SUBJECT_RE = re.compile(r"^(.+?)\s*(?:\(([PLTFR]{1,4})\))?\s*:?$", re.I)


def split_cell_lines(text: str) -> List[str]:
    # несколько занятий в одной ячейке - по строкам
    return [ln.strip() for ln in (text or "").splitlines() if ln.strip()]


def take_groups(rest: str) -> Tuple[List[str], str]:
    m = GROUPS_RE.search(rest)
    if not m:
        return [], rest
    groups = [g for g in GROUP_SPLIT_RE.split(m.group(1)) if g.strip()]
    return groups, rest[:m.start()].strip()


def take_lecturer(rest: str) -> Tuple[str, str]:
    m = LECTURER_RE.search(rest)
    if not m:
        return "", rest
    lecturer = HONORIFIC_RE.sub(lambda t: t.group(1) + " ", m.group("name").strip())
    # сегмент аудитории остаётся в остатке для take_room
    cut = m.start("name") if m.group("room") else m.start()
    return collapse_ws(lecturer), rest[:cut].strip()


def take_room(rest: str) -> Tuple[str, str]:
    m = ROOM_RE.search(rest)
    if not m:
        return "", rest
    room = collapse_ws(ROOM_PREFIX_RE.sub("", m.group(1).strip()))
    return room, (rest[:m.start()] + rest[m.end():]).strip()


def take_subject(rest: str) -> Tuple[str, str]:
    """Возвращает (subject_name, session_type)."""
    m = SUBJECT_RE.match(rest)
    if m:
        return collapse_ws(m.group(1)), (m.group(2) or "").upper()
    # fallback: весь остаток - название предмета
    return collapse_ws(re.sub(r":\s*$", "", rest)), ""


def parse_session_line(line: str) -> Optional[ParsedLine]:
    """
    Разбирает одну строку ячейки.
    None - строку не удалось интерпретировать (пустой предмет или сбой шага);
    такая строка просто пропускается, диагностики нет.
    """
    try:
        groups, rest = take_groups(line.strip())
        lecturer, rest = take_lecturer(rest)
        room, rest = take_room(rest)
        subject, session_type = take_subject(rest)
    except Exception as e:
        # сбой любого шага отбрасывает только эту строку
        logger.debug("Skipping session line %r: %s", str(line)[:50], e)
        return None

    if not subject:
        return None

    return ParsedLine(
        subject_name=subject,
        session_type=session_type,
        room_or_code=room,
        lecturer=lecturer,
        groups=tuple(groups),
        raw_text=rest,
        confidence=line_confidence(subject, session_type, room, lecturer, groups),
    )
