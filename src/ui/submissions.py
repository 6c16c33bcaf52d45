"""Submissions page: list, search, edit and delete registrations."""
import logging

import streamlit as st

from src.models.registration import Registration
from src.services.listing_service import ListingWorkflow
from src.services.navigation import Destination, Navigation
from src.services.record_store import RecordStore
from src.ui.html_utils import escape_markdown, html_block
from src.ui.routing import consume_entry, navigate, take_payload
from src.utils.date_utils import format_timestamp
from src.utils.exceptions import StorageError

logger = logging.getLogger(__name__)

WORKFLOW_KEY = "listing_workflow"
DELETE_ID_KEY = "listing_delete_id"
FEEDBACK_KEY = "listing_feedback"
SEARCH_KEY = "listing_search_term"

COLUMN_WIDTHS = [0.4, 1.4, 1.8, 1.2, 0.8, 1.4, 1.8, 1.4, 1.0]


def _get_workflow(store: RecordStore) -> ListingWorkflow:
    """Return the page workflow, reloading records on page entry."""
    entered = consume_entry()
    workflow = st.session_state.get(WORKFLOW_KEY)

    if entered or workflow is None:
        take_payload()
        workflow = ListingWorkflow(store)
        workflow.load_all()
        st.session_state[WORKFLOW_KEY] = workflow
        st.session_state[SEARCH_KEY] = ""
        st.session_state.pop(DELETE_ID_KEY, None)

    return workflow


def _show_feedback() -> None:
    feedback = st.session_state.pop(FEEDBACK_KEY, None)
    if not feedback:
        return
    level, message = feedback
    if level == "success":
        st.success(message)
    elif level == "error":
        st.error(message)
    else:
        st.info(message)


def _render_row(index: int, record: Registration, workflow: ListingWorkflow) -> None:
    cols = st.columns(COLUMN_WIDTHS, gap="small")
    cols[0].text(str(index))
    cols[1].markdown(f"**{escape_markdown(record.full_name)}**")
    cols[2].text(record.email)
    cols[3].text(record.phone)
    cols[4].text(record.gender_label)
    cols[5].text(record.course_label)
    cols[6].caption(record.address)
    cols[7].caption(format_timestamp(record.submitted_at))

    with cols[8]:
        edit_col, delete_col = st.columns(2, gap="small")
        with edit_col:
            if st.button("✏️", key=f"edit_{record.id}", help="Edit"):
                navigate(workflow.edit_request(record))
        with delete_col:
            if st.button("🗑️", key=f"delete_{record.id}", help="Delete"):
                st.session_state[DELETE_ID_KEY] = record.id


def _render_delete_confirmation(workflow: ListingWorkflow) -> None:
    """Ask before permanently deleting the selected registration."""
    record_id = st.session_state.get(DELETE_ID_KEY)
    record = next((r for r in workflow.records if r.id == record_id), None)

    if record is None:
        st.session_state.pop(DELETE_ID_KEY, None)
        return

    st.error("⚠️ This cannot be undone. Delete this registration?")
    st.markdown(f"**{escape_markdown(record.full_name)}** · {escape_markdown(record.email)}")

    confirm_col, cancel_col = st.columns(2, gap="small")
    with confirm_col:
        if st.button("✅ Delete", type="primary", use_container_width=True, key=f"confirm_delete_{record_id}"):
            try:
                deleted = workflow.delete(record_id)
            except StorageError:
                logger.exception("Failed to delete registration %s", record_id)
                st.session_state[FEEDBACK_KEY] = ("error", "❌ Delete failed, please try again")
            else:
                if deleted:
                    st.session_state[FEEDBACK_KEY] = ("success", f"Deleted registration of {record.full_name}")
                else:
                    st.session_state[FEEDBACK_KEY] = ("info", "This registration was already removed")
            st.session_state.pop(DELETE_ID_KEY, None)
            st.rerun()
    with cancel_col:
        if st.button("❌ Cancel", use_container_width=True, key=f"cancel_delete_{record_id}"):
            st.session_state.pop(DELETE_ID_KEY, None)
            st.rerun()


def render_submissions(store: RecordStore) -> None:
    """Render all submissions with search, edit and delete."""
    workflow = _get_workflow(store)

    header_col, action_col = st.columns([3, 1], gap="small")
    with header_col:
        st.markdown(
            html_block(
                f"""
                <div class="page-header">
                    <h1>All Submissions</h1>
                    <div class="page-subtitle">Total Registrations: {workflow.total}</div>
                </div>
                """
            ),
            unsafe_allow_html=True,
        )
    with action_col:
        if st.button("New Application", use_container_width=True, key="list_new_application"):
            navigate(Navigation(Destination.REGISTRATION))

    _show_feedback()

    term = st.text_input(
        "Search",
        key=SEARCH_KEY,
        placeholder="🔍 Search by name, email, phone, gender, course, or address...",
        label_visibility="collapsed",
    )
    results = workflow.search(term)

    if not results:
        st.info("No results found" if term.strip() else "No submissions yet")
        return

    headers = ["#", "Full Name", "Email", "Phone", "Gender", "Course", "Address", "Submitted At", ""]
    header_cols = st.columns(COLUMN_WIDTHS, gap="small")
    for col, label in zip(header_cols, headers):
        col.markdown(f"**{label}**")

    for index, record in enumerate(results, start=1):
        _render_row(index, record, workflow)

    if st.session_state.get(DELETE_ID_KEY) is not None:
        _render_delete_confirmation(workflow)
