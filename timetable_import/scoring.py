from __future__ import annotations
from typing import Sequence


def line_confidence(
    subject: str,
    session_type: str,
    room: str,
    lecturer: str,
    groups: Sequence[str],
) -> str:
    # Сколько ожидаемых полей удалось извлечь из строки ячейки
    score = 0
    if subject and len(subject) > 3:
        score += 2
    if session_type:
        score += 1
    if room:
        score += 1
    if lecturer and len(lecturer) > 3:
        score += 1
    if len(groups) > 0:
        score += 1

    if score >= 5:
        return "high"
    if score >= 3:
        return "medium"
    return "low"


def import_confidence(parsed_cells: int, total_cells: int) -> str:
    """
    Итоговая уверенность импорта по доле разобранных ячеек.
    total_cells = 0 -> делим на 1, т.е. "low".
    """
    ratio = parsed_cells / max(total_cells, 1)
    if ratio >= 0.8:
        return "high"
    if ratio >= 0.6:
        return "medium"
    return "low"
