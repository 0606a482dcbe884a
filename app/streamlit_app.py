from dotenv import load_dotenv
load_dotenv()

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
import streamlit as st

# Ensure repo root is on sys.path for "core" imports
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from core.config import get_settings
from core.export.flatten import EXPORT_HEADERS, flatten_entries
from core.export.preview import PreviewPublisher
from core.export.writer import export_to_excel_bytes
from core.ir import MergeResult
from core.logger import get_logger, set_level
from core.pipeline import run_merge
from core.roster.aliases import COHORTS
from core.roster.errors import PreviewPublishError, RosterError

logger = get_logger(__name__)

# ============================================================================
# Constants
# ============================================================================
MAX_FILE_SIZE = 50 * 1024 * 1024  # 50MB per file
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# ============================================================================
# Helper Functions
# ============================================================================

def validate_file_size(uploaded_file) -> bool:
    if uploaded_file.size > MAX_FILE_SIZE:
        size_mb = uploaded_file.size / (1024 * 1024)
        st.error(f"❌ File '{uploaded_file.name}' is too large ({size_mb:.1f}MB).")
        logger.warning("File %s rejected: size %d bytes exceeds limit %d",
                       uploaded_file.name, uploaded_file.size, MAX_FILE_SIZE)
        return False
    return True


def preview_frame(result: MergeResult) -> pd.DataFrame:
    """Flattened rows as a DataFrame; separator rows keep their label in the first column."""
    rows = flatten_entries(result.entries, include_header=False)
    width = len(EXPORT_HEADERS)
    padded = [row + [""] * (width - len(row)) for row in rows]
    return pd.DataFrame(padded, columns=EXPORT_HEADERS)


def collect_sources(slots: Dict[str, Any]) -> List[Tuple[str, bytes]]:
    sources: List[Tuple[str, bytes]] = []
    for uploaded in slots.values():
        if uploaded is not None and validate_file_size(uploaded):
            sources.append((uploaded.name, uploaded.getvalue()))
    return sources


def init_session_state() -> None:
    defaults = {
        "merge_result": None,
        "export_bytes": None,
        "preview_url": None,
    }
    for key, default_value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default_value


# ============================================================================
# Page
# ============================================================================

settings = get_settings()
set_level(settings.LOG_LEVEL)

st.set_page_config(page_title=settings.EXPORT_TITLE, layout="wide")
init_session_state()
st.title(settings.EXPORT_TITLE)
st.caption("Upload one workbook per batch. Upload order does not matter; batches are always merged oldest first.")

slots: Dict[str, Optional[Any]] = {}
cols = st.columns(len(COHORTS))
for col, (start, end, year) in zip(cols, COHORTS):
    with col:
        slots[f"{start}-{end}"] = st.file_uploader(
            f"{start}-{end} Batch ({year})",
            type=["xlsx"],
            key=f"upload_{start}_{end}",
        )

if st.button("Combine", type="primary", use_container_width=True):
    sources = collect_sources(slots)
    if not sources:
        st.warning("Please upload at least one .xlsx workbook.")
    else:
        with st.spinner("Merging..."):
            try:
                result = run_merge(sources)
                st.session_state.merge_result = result
                st.session_state.export_bytes = export_to_excel_bytes(
                    result.entries, banner_text=settings.EXPORT_BANNER_TEXT
                )
                st.session_state.preview_url = None
            except RosterError as e:
                st.error(f"Merge failed: {e}")
                logger.error("Merge failed: %s", e, exc_info=True)

result: Optional[MergeResult] = st.session_state.merge_result
if result is not None:
    stats = result.statistics
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Files", stats.total_files)
    m2.metric("Sheets", stats.total_sheets)
    m3.metric("Records", stats.total_records)
    m4.metric("Branches", len(stats.branches))
    st.write("Batches: " + ", ".join(sorted(stats.batches)))

    if result.diagnostics:
        with st.expander(f"Diagnostics ({len(result.diagnostics)})", expanded=False):
            for diag in result.diagnostics:
                st.write(f"`{diag.code}` {diag.message}")

    st.dataframe(preview_frame(result), use_container_width=True, hide_index=True)

    dl_col, pv_col = st.columns(2)
    with dl_col:
        st.download_button(
            label="📥 Download Excel",
            data=st.session_state.export_bytes or b"",
            file_name=settings.EXPORT_FILENAME,
            mime=XLSX_MIME,
            use_container_width=True,
        )
    with pv_col:
        publisher = PreviewPublisher(settings=settings)
        if st.button("Create viewable copy", disabled=not publisher.enabled, use_container_width=True):
            try:
                st.session_state.preview_url = publisher.publish(
                    flatten_entries(result.entries), title=settings.EXPORT_TITLE
                )
            except PreviewPublishError as e:
                st.error(f"Preview failed: {e}")
        if st.session_state.preview_url:
            st.markdown(f"[Open viewable copy]({st.session_state.preview_url})")
