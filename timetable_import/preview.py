from __future__ import annotations
import logging
from typing import List, Mapping
import pandas as pd
from .extract import IdFactory, count_total_cells, extract_sessions, new_session_id
from .header_detect import detect_header_layout, find_timetable_sheet
from .ingest import load_workbook_from_bytes
from .model import ImportMetadata, ImportPreview, Session, UnparsedCell
from .scoring import import_confidence

logger = logging.getLogger(__name__)


def build_import_preview(
    sessions: List[Session],
    unparsed_cells: List[UnparsedCell],
    total_cells: int,
    sheet_name: str = "",
) -> ImportPreview:
    parsed_cells = total_cells - len(unparsed_cells)
    return ImportPreview(
        sessions=sessions,
        unparsed_cells=unparsed_cells,
        metadata=ImportMetadata(
            total_cells=total_cells,
            parsed_cells=parsed_cells,
            confidence=import_confidence(parsed_cells, total_cells),
        ),
        sheet_name=sheet_name,
    )


def parse_workbook(
    workbook: Mapping[str, pd.DataFrame],
    new_id: IdFactory = new_session_id,
) -> ImportPreview:
    """
    Лист -> шапка -> ячейки -> превью импорта.
    StructureError пробрасывается вызывающему без изменений.
    """
    sheet_name = find_timetable_sheet(workbook)
    sheet = workbook[sheet_name]

    layout = detect_header_layout(sheet)
    sessions, unparsed = extract_sessions(sheet, layout, new_id)
    preview = build_import_preview(sessions, unparsed, count_total_cells(sheet, layout), sheet_name)

    logger.info(
        "Parsed sheet %r: %d sessions, %d unparsed cells, confidence %s",
        sheet_name, len(preview.sessions), len(preview.unparsed_cells), preview.metadata.confidence,
    )
    return preview


def parse_timetable_upload(name: str, data: bytes, new_id: IdFactory = new_session_id) -> ImportPreview:
    # байты файла (xlsx/xls/csv) -> превью
    return parse_workbook(load_workbook_from_bytes(name, data), new_id)
