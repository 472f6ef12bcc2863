"""
Этот пакет содержит:
- загрузку книги расписания (XLSX/XLS/CSV) в сетки листов
- поиск листа с расписанием и геометрии шапки (Time + дни недели)
- разбор содержимого ячеек (предмет/тип/аудитория/преподаватель/группы)
- нормализацию времени и оценку уверенности импорта
- сборку превью импорта, документа расписания и Excel-отчёта
"""
from .errors import StructureError, TimetableImportError
from .model import ImportMetadata, ImportPreview, ParsedLine, Session, UnparsedCell
from .ingest import load_workbook_from_bytes, load_workbook_from_upload
from .header_detect import detect_header_layout, find_timetable_sheet
from .times import normalize_time
from .grammar import parse_session_line
from .extract import extract_sessions, parse_session_cell
from .scoring import import_confidence, line_confidence
from .preview import build_import_preview, parse_timetable_upload, parse_workbook
from .timetable import build_timetable_data
from .export import export_preview_to_excel_bytes

__all__ = [
    "StructureError",
    "TimetableImportError",
    "ImportMetadata",
    "ImportPreview",
    "ParsedLine",
    "Session",
    "UnparsedCell",
    "load_workbook_from_bytes",
    "load_workbook_from_upload",
    "detect_header_layout",
    "find_timetable_sheet",
    "normalize_time",
    "parse_session_line",
    "extract_sessions",
    "parse_session_cell",
    "import_confidence",
    "line_confidence",
    "build_import_preview",
    "parse_timetable_upload",
    "parse_workbook",
    "build_timetable_data",
    "export_preview_to_excel_bytes",
]
