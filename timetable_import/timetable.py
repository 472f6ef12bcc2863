from __future__ import annotations
import datetime as _dt
import re
from typing import Any, Dict, List, Optional
from .utils import load_json, rules_path
from .model import ImportPreview

RULES = load_json(rules_path(), {})

DISPLAY_DAYS: List[str] = RULES.get(
    "display_days",
    ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"],
)

DEFAULT_FILENAME = "unknown.xlsx"


def subject_id_for(name: str) -> str:
    return "subject_" + re.sub(r"\s+", "_", name).lower()


def _new_subject(name: str) -> Dict[str, Any]:
    return {
        "subject_id": subject_id_for(name),
        "name": name,
        "attended_classes": 0,
        "missed_classes": 0,
        "total_classes": 0,
        "percentage": 0,
    }


def build_timetable_data(
    preview: ImportPreview,
    filename: Optional[str] = None,
    existing: Optional[Dict[str, Any]] = None,
    merge: bool = False,
    now: Optional[_dt.datetime] = None,
) -> Dict[str, Any]:
    """
    Превью импорта -> документ расписания для хранения.

    merge=True: занятия всё равно берутся из нового импорта, но записи предметов
    (со счётчиками посещаемости) из existing сохраняются для предметов,
    название которых не изменилось.
    """
    sessions = [s.to_dict() for s in preview.sessions]

    subjects: Dict[str, Dict[str, Any]] = {}
    for s in preview.sessions:
        if s.subject_name not in subjects:
            subjects[s.subject_name] = _new_subject(s.subject_name)

    if merge and existing:
        for name, subject in (existing.get("subjects") or {}).items():
            if name in subjects:
                subjects[name] = subject

    now = now or _dt.datetime.now(_dt.timezone.utc)

    return {
        "days": list(DISPLAY_DAYS),
        "timeslots": sorted({s.start_time for s in preview.sessions}),
        "sessions": sessions,
        "subjects": subjects,
        "lastImported": now.isoformat(),
        "importMetadata": {
            "filename": filename or DEFAULT_FILENAME,
            "parsedSessions": len(preview.sessions),
            "unparsedCells": len(preview.unparsed_cells),
            "confidence": preview.metadata.confidence,
        },
    }
