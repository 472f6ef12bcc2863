from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple

# Уровни уверенности (ordinal): low < medium < high
CONFIDENCE_LEVELS = ("low", "medium", "high")


@dataclass
class Session:
    """
    Одно занятие, извлечённое из одной строки ячейки.
    attendance_marked всегда None при импорте - его заполняет учёт посещаемости.
    """
    id: str
    day: str
    start_time: str  # HH:MM (24h)
    subject_name: str
    session_type: Optional[str] = None
    room: Optional[str] = None
    lecturer: Optional[str] = None
    groups: List[str] = field(default_factory=list)
    duration_slots: int = 1
    notes: str = ""
    attendance_marked: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ParsedLine:
    subject_name: str
    session_type: str
    room_or_code: str
    lecturer: str
    groups: Tuple[str, ...]
    raw_text: str
    confidence: str


@dataclass(frozen=True)
class UnparsedCell:
    row: int  # 1-based
    col: int  # 1-based
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"row": self.row, "col": self.col, "content": self.content}


@dataclass(frozen=True)
class HeaderLayout:
    """
    Геометрия шапки: строка заголовка, колонка времени и колонки дней недели.
    day_columns - пары (день, колонка) в порядке первого обнаружения дня.
    """
    header_row: int
    time_col: int
    day_columns: Tuple[Tuple[str, int], ...]


@dataclass(frozen=True)
class RawCell:
    # непустая ячейка дня в строке с распознанным временем (0-based позиция)
    row: int
    col: int
    day: str
    start_time: str
    content: str


@dataclass(frozen=True)
class ImportMetadata:
    total_cells: int
    parsed_cells: int
    confidence: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalCells": self.total_cells,
            "parsedCells": self.parsed_cells,
            "confidence": self.confidence,
        }


@dataclass
class ImportPreview:
    sessions: List[Session]
    unparsed_cells: List[UnparsedCell]
    metadata: ImportMetadata
    sheet_name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        # формат, который ожидают потребители превью
        return {
            "sessions": [s.to_dict() for s in self.sessions],
            "unparsedCells": [c.to_dict() for c in self.unparsed_cells],
            "metadata": self.metadata.to_dict(),
        }
