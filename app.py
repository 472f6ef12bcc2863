from __future__ import annotations
import logging
import os
import streamlit as st
import pandas as pd
from timetable_import.errors import TimetableImportError
from timetable_import.preview import parse_timetable_upload
from timetable_import.export import export_preview_to_excel_bytes, sessions_frame, unparsed_frame
from timetable_import.timetable import build_timetable_data
from timetable_import.store import load_timetable_data, save_timetable_data

logging.basicConfig(
    level=os.environ.get("TIMETABLE_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("timetable_import.app")

st.set_page_config(page_title="Timetable import", layout="wide")
st.title("Import timetable from a spreadsheet")
# =========================

# Helpers
# =========================
CONFIDENCE_BADGE = {
    "high": ("🟢", "Most cells were recognised."),
    "medium": ("🟡", "Some cells need a manual check."),
    "low": ("🔴", "Many cells were not recognised. Check the layout of the file."),
}


def _parse_upload(upload):
    try:
        preview = parse_timetable_upload(upload.name, upload.getvalue())
    except TimetableImportError as e:
        logger.error("Import of %s failed: %s", upload.name, e)
        st.error(str(e))
        return None
    except Exception as e:
        # файл не читается декодером (битый/неподдерживаемый формат)
        logger.exception("Could not read %s", upload.name)
        st.error(f"Failed to parse spreadsheet: {e}")
        return None
    return preview


def _perform_import(preview, filename: str, merge: bool) -> None:
    existing = load_timetable_data() if merge else None
    data = build_timetable_data(preview, filename=filename, existing=existing, merge=merge)
    save_timetable_data(data)
    st.session_state["preview"] = None
    st.success(f"Imported {len(preview.sessions)} sessions successfully.")
# =========================

# Upload
# =========================
upload = st.file_uploader(
    "Upload the timetable (Excel or CSV)",
    type=["xlsx", "xls", "csv"],
    accept_multiple_files=False,
)

st.session_state.setdefault("preview", None)
st.session_state.setdefault("upload_key", None)

if upload is not None:
    key = f"{upload.name}:{upload.size}"
    if st.session_state["upload_key"] != key:
        with st.spinner("Parsing..."):
            st.session_state["preview"] = _parse_upload(upload)
        st.session_state["upload_key"] = key

preview = st.session_state.get("preview")

if preview is not None:
    md = preview.metadata
    icon, hint = CONFIDENCE_BADGE.get(md.confidence, ("⚪", ""))

    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.metric("Sessions", len(preview.sessions))
    with c2:
        st.metric("Unparsed cells", len(preview.unparsed_cells))
    with c3:
        st.metric("Parsed cells", f"{md.parsed_cells} / {md.total_cells}")
    with c4:
        st.metric("Confidence", f"{icon} {md.confidence}")
    st.caption(f"Sheet: {preview.sheet_name}. {hint}")

    st.subheader("Sessions")
    sdf = sessions_frame(preview).drop(columns=["Id"])
    days = ["(all)"] + sorted(sdf["Day"].astype(str).unique().tolist())
    dsel = st.selectbox("Day", days, index=0)
    if dsel != "(all)":
        sdf = sdf[sdf["Day"].astype(str) == dsel]
    st.dataframe(sdf.head(500), width="stretch", hide_index=True)

    if preview.unparsed_cells:
        with st.expander(f"Unparsed cells ({len(preview.unparsed_cells)})", expanded=False):
            st.dataframe(unparsed_frame(preview), width="stretch", hide_index=True)

    st.download_button(
        "Download import report (Excel)",
        data=export_preview_to_excel_bytes(preview),
        file_name="timetable_import_report.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

    st.subheader("Confirm import")
    existing = load_timetable_data()
    filename = upload.name if upload is not None else None

    if existing and existing.get("sessions"):
        st.info("You have existing timetable data. Replace it, or merge and keep attendance for unchanged subjects.")
        b1, b2 = st.columns(2)
        with b1:
            if st.button("Replace all", type="primary"):
                _perform_import(preview, filename, merge=False)
        with b2:
            if st.button("Merge"):
                _perform_import(preview, filename, merge=True)
    else:
        if st.button("Import", type="primary"):
            _perform_import(preview, filename, merge=False)

    stored = load_timetable_data()
    if stored and stored.get("subjects"):
        with st.expander("Saved subjects", expanded=False):
            st.dataframe(pd.DataFrame(list(stored["subjects"].values())), width="stretch", hide_index=True)
