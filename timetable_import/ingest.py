from __future__ import annotations
import csv
import logging
import zipfile
from io import BytesIO, StringIO
from typing import Dict, List
import pandas as pd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

logger = logging.getLogger(__name__)

Workbook = Dict[str, pd.DataFrame]

CSV_SHEET_NAME = "CSV"
# =========================

# Excel: читаем лист как сетку с реальным началом (min_row/min_col)
# =========================
def _sheet_to_grid(wb_bytes: bytes, sheet_name: str, fill_merged: bool = False) -> pd.DataFrame:
    wb = load_workbook(BytesIO(wb_bytes), read_only=False, data_only=True)
    ws = wb[sheet_name]

    merged_map = {}
    if fill_merged:
        for r in ws.merged_cells.ranges:
            min_col, min_row, max_col, max_row = r.bounds
            top_val = ws.cell(min_row, min_col).value
            for rr in range(min_row, max_row + 1):
                for cc in range(min_col, max_col + 1):
                    merged_map[(rr, cc)] = top_val

    min_r, max_r = ws.min_row, ws.max_row
    min_c, max_c = ws.min_column, ws.max_column

    rows = []
    for r in range(min_r, max_r + 1):
        row_vals = []
        for c in range(min_c, max_c + 1):
            v = ws.cell(r, c).value
            if (r, c) in merged_map and (v is None or str(v).strip() == ""):
                v = merged_map[(r, c)]
            row_vals.append(v)
        rows.append(row_vals)

    # индексы сетки - абсолютные 0-based позиции ячеек в листе
    return pd.DataFrame(
        rows,
        index=range(min_r - 1, max_r),
        columns=range(min_c - 1, max_c),
        dtype=object,
    )
# =========================

# CSV: устойчивое чтение из bytes
# =========================
def _decode_sample(data: bytes, enc: str, limit: int = 65536) -> str:
    try:
        return data[:limit].decode(enc, errors="replace")
    except LookupError:
        return data[:limit].decode("utf-8", errors="replace")


def _guess_delimiter(sample_text: str) -> str:
    # ',' (en-US) или ';' (ru locales), иногда табы; сначала csv.Sniffer
    try:
        dialect = csv.Sniffer().sniff(sample_text, delimiters=";,\t|")
        if dialect.delimiter:
            return dialect.delimiter
    except csv.Error:
        pass

    # fallback по количеству в первых строках
    candidates = [";", ",", "\t", "|"]
    lines = [ln for ln in sample_text.splitlines() if ln.strip()][:20]
    if not lines:
        return ","

    scores = {}
    for d in candidates:
        cnts = [ln.count(d) for ln in lines]
        scores[d] = sum(cnts) / max(1, len(cnts))

    best = max(scores.items(), key=lambda x: x[1])[0]
    return best if scores.get(best, 0) > 0 else ","


def _max_fields(text: str, sep: str) -> int:
    # pandas берёт ширину из первой строки, а над шапкой часто стоит строка-название из 1 ячейки
    return max((len(row) for row in csv.reader(StringIO(text), delimiter=sep)), default=1)


def _read_csv(data: bytes, sep: str, encoding: str) -> pd.DataFrame:
    width = _max_fields(data.decode(encoding), sep)
    # всё как текст: "9.30" не должно превращаться в 9.3
    return pd.read_csv(
        BytesIO(data),
        header=None,
        names=range(width),
        sep=sep,
        engine="python",
        encoding=encoding,
        dtype=str,
        skip_blank_lines=False,  # номера строк должны совпадать с файлом
    )


def _read_csv_bytes(data: bytes) -> pd.DataFrame:
    # CSV читается БЕЗ header: строка заголовков расписания - обычная строка сетки
    encodings = ["utf-8-sig", "utf-8", "cp1251"]
    last_err: Exception | None = None

    for enc in encodings:
        try:
            sample = _decode_sample(data, enc)
            delim = _guess_delimiter(sample)
            df = _read_csv(data, delim, enc)

            # если вдруг прочитался в 1 колонку
            if df.shape[1] == 1:
                for d2 in [";", ",", "\t", "|"]:
                    if d2 == delim:
                        continue
                    df2 = _read_csv(data, d2, enc)
                    if df2.shape[1] > 1:
                        df = df2
                        break
            return df

        except (UnicodeDecodeError, pd.errors.ParserError) as e:
            last_err = e
            logger.debug("CSV read with encoding %s failed: %s", enc, e)
            continue

    if last_err is not None:
        raise last_err
    raise ValueError("Could not read CSV data")


def _excel_sheet_names(data: bytes) -> List[str]:
    with pd.ExcelFile(BytesIO(data)) as xls:
        return [str(s) for s in xls.sheet_names]
# =========================

# Main: bytes -> workbook (имя листа -> сетка)
# =========================
def load_workbook_from_bytes(name: str, data: bytes, fill_merged: bool = False) -> Workbook:
    """
    Возвращает книгу в виде {имя листа: DataFrame} в порядке листов.

    В каждом DataFrame:
      - index = номер строки листа (0-based), columns = номер колонки (0-based)
      - пустые ячейки - None/NaN
      - CSV - один лист с именем "CSV"
    """
    if name.lower().endswith(".csv"):
        df = _read_csv_bytes(data)
        df.index = range(len(df))
        df.columns = range(df.shape[1])
        return {CSV_SHEET_NAME: df}

    workbook: Workbook = {}
    for sheet in _excel_sheet_names(data):
        try:
            workbook[sheet] = _sheet_to_grid(data, sheet, fill_merged=fill_merged)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
            # legacy .xls и прочее, что не читает openpyxl
            logger.debug("openpyxl could not read sheet %r (%s), using pandas", sheet, e)
            df = pd.read_excel(BytesIO(data), sheet_name=sheet, header=None)
            df.index = range(len(df))
            df.columns = range(df.shape[1])
            workbook[sheet] = df

    logger.debug("Loaded %s: sheets %s", name, list(workbook.keys()))
    return workbook


def load_workbook_from_upload(upload) -> Workbook:
    # upload - объект с .name и .getvalue() (например, streamlit UploadedFile)
    return load_workbook_from_bytes(upload.name, upload.getvalue())
