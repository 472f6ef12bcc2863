"""Нормализация времени из ячеек расписания в 24-часовой HH:MM."""
from __future__ import annotations
import re
from typing import Any, Optional
from .utils import cell_text

# Порядок важен: побеждает первая подошедшая форма
TIME_PATTERNS = [
    re.compile(r"^(?P<h>\d{1,2}):(?P<m>\d{2})$"),
    re.compile(r"^(?P<h>\d{1,2})\.(?P<m>\d{2})$"),
    re.compile(r"^(?P<h>\d{1,2}):(?P<m>\d{2})\s*(?P<ampm>AM|PM)$", re.I),
    re.compile(r"^(?P<h>\d{1,2})\s*(?P<ampm>AM|PM)$", re.I),
]

_BARE_HOUR_RE = re.compile(r"^(\d{1,2})$")
_NON_TIME_CHARS_RE = re.compile(r"[^\d:.\sAPM]", re.I)


def _format_hhmm(hours: int, minutes: int) -> Optional[str]:
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None
    return f"{hours:02d}:{minutes:02d}"


def normalize_time(value: Any) -> Optional[str]:
    """
    "2.30" -> "02:30", "2:30 PM" -> "14:30", "2 PM" -> "14:00", "9" -> "09:00".
    Не распознано (или вне 00:00..23:59) -> None.
    """
    text = re.sub(r"\s+", " ", cell_text(value).strip())
    cleaned = _NON_TIME_CHARS_RE.sub("", text)

    for pattern in TIME_PATTERNS:
        m = pattern.match(cleaned)
        if not m:
            continue
        groups = m.groupdict()
        hours = int(groups["h"])
        minutes = int(groups.get("m") or 0)
        ampm = (groups.get("ampm") or "").upper()

        if ampm == "PM" and hours != 12:
            hours += 12
        if ampm == "AM" and hours == 12:
            hours = 0
        return _format_hhmm(hours, minutes)

    # голое число часов: "9" -> "09:00"
    m = _BARE_HOUR_RE.match(cleaned)
    if m:
        return _format_hhmm(int(m.group(1)), 0)

    return None
