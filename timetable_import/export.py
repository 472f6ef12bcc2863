from __future__ import annotations
import pandas as pd
from io import BytesIO
from .model import ImportPreview

SESSIONS_SHEET = "Sessions"
UNPARSED_SHEET = "Unparsed cells"
SUMMARY_SHEET = "Summary"

SESSION_COLUMNS = ["Day", "Start", "Subject", "Type", "Room", "Lecturer", "Groups", "Slots", "Id"]
UNPARSED_COLUMNS = ["Row", "Column", "Content"]


def sessions_frame(preview: ImportPreview) -> pd.DataFrame:
    rows = []
    for s in preview.sessions:
        rows.append({
            "Day": s.day,
            "Start": s.start_time,
            "Subject": s.subject_name,
            "Type": s.session_type or "",
            "Room": s.room or "",
            "Lecturer": s.lecturer or "",
            "Groups": ", ".join(s.groups),
            "Slots": s.duration_slots,
            "Id": s.id,
        })
    return pd.DataFrame(rows, columns=SESSION_COLUMNS)


def unparsed_frame(preview: ImportPreview) -> pd.DataFrame:
    rows = [{"Row": c.row, "Column": c.col, "Content": c.content} for c in preview.unparsed_cells]
    return pd.DataFrame(rows, columns=UNPARSED_COLUMNS)


def summary_frame(preview: ImportPreview) -> pd.DataFrame:
    md = preview.metadata
    return pd.DataFrame([
        {"Metric": "Sheet", "Value": preview.sheet_name},
        {"Metric": "Total cells", "Value": md.total_cells},
        {"Metric": "Parsed cells", "Value": md.parsed_cells},
        {"Metric": "Sessions", "Value": len(preview.sessions)},
        {"Metric": "Unparsed cells", "Value": len(preview.unparsed_cells)},
        {"Metric": "Confidence", "Value": md.confidence},
    ])


def export_preview_to_excel_bytes(preview: ImportPreview) -> bytes:
    sessions_df = sessions_frame(preview)
    unparsed_df = unparsed_frame(preview)
    summary_df = summary_frame(preview)

    bio = BytesIO()

    with pd.ExcelWriter(bio, engine="xlsxwriter") as writer:
        summary_df.to_excel(writer, index=False, sheet_name=SUMMARY_SHEET)
        sessions_df.to_excel(writer, index=False, sheet_name=SESSIONS_SHEET)
        unparsed_df.to_excel(writer, index=False, sheet_name=UNPARSED_SHEET)

        wb = writer.book

        fmt_header = wb.add_format({"bold": True, "bg_color": "#F2F2F2", "border": 1, "valign": "vcenter"})
        fmt_wrap = wb.add_format({"border": 1, "valign": "top", "text_wrap": True})
        fmt_high = wb.add_format({"border": 1, "bg_color": "#E6F4EA"})
        fmt_medium = wb.add_format({"border": 1, "bg_color": "#FEF7E0"})
        fmt_low = wb.add_format({"border": 1, "bg_color": "#FCE8E6"})

        def format_df_sheet(sheet_name: str, df: pd.DataFrame, default_width: int = 16, max_width: int = 50):
            ws = writer.sheets.get(sheet_name)
            if ws is None:
                return
            ws.freeze_panes(1, 0)
            ws.autofilter(0, 0, max(1, len(df)), max(0, len(df.columns) - 1))
            for col, name in enumerate(df.columns):
                ws.write(0, col, name, fmt_header)
                w = max(10, min(max_width, int(len(str(name)) * 1.2) + 10))
                ws.set_column(col, col, max(default_width, w))

        format_df_sheet(SUMMARY_SHEET, summary_df, default_width=18, max_width=30)
        format_df_sheet(SESSIONS_SHEET, sessions_df, default_width=14, max_width=40)
        format_df_sheet(UNPARSED_SHEET, unparsed_df, default_width=10, max_width=20)

        wss = writer.sheets[SESSIONS_SHEET]
        wss.set_column(SESSION_COLUMNS.index("Subject"), SESSION_COLUMNS.index("Subject"), 36)
        wss.set_column(SESSION_COLUMNS.index("Id"), SESSION_COLUMNS.index("Id"), 38)

        wsu = writer.sheets[UNPARSED_SHEET]
        wsu.set_column(2, 2, 70, fmt_wrap)

        # подсветка итоговой уверенности
        wsm = writer.sheets[SUMMARY_SHEET]
        conf_row = len(summary_df)  # последняя строка данных (шапка - строка 0)
        for value, fmt in (("high", fmt_high), ("medium", fmt_medium), ("low", fmt_low)):
            wsm.conditional_format(conf_row, 1, conf_row, 1, {
                "type": "cell",
                "criteria": "==",
                "value": f'"{value}"',
                "format": fmt,
            })

    return bio.getvalue()
