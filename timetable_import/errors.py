from __future__ import annotations


class TimetableImportError(Exception):
    """Базовая ошибка импорта расписания."""


class StructureError(TimetableImportError):
    # в листе нет строки заголовка с колонкой "Time" - импорт невозможен
    pass
