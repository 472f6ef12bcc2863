from __future__ import annotations
import json
import logging
from typing import Any, Dict, Optional
from .utils import save_json, timetable_data_path

logger = logging.getLogger(__name__)


def load_timetable_data() -> Optional[Dict[str, Any]]:
    # Читает сохранённое расписание; нет файла / битый JSON -> None
    path = timetable_data_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            obj = json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.error("Failed to load timetable data from %s: %s", path, e)
        return None

    if not isinstance(obj, dict):
        return None
    # базовая форма документа, чтобы потребителям не проверять каждый ключ
    obj.setdefault("sessions", [])
    obj.setdefault("subjects", {})
    return obj


def save_timetable_data(data: Dict[str, Any]) -> None:
    path = timetable_data_path()
    save_json(path, data)
    logger.info("Saved timetable data (%d sessions) to %s", len(data.get("sessions", [])), path)


def clear_timetable_data() -> None:
    path = timetable_data_path()
    if path.exists():
        path.unlink()
