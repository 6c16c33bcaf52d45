"""Confirmation page shown after a successful submit."""
from typing import List, Tuple

import streamlit as st

from src.models.registration import Registration
from src.services.navigation import Destination, Navigation
from src.services.record_store import RecordStore
from src.services.registration_service import take_last_submission
from src.ui.html_utils import detail_row, html_block
from src.ui.routing import consume_entry, navigate, take_payload
from src.utils.date_utils import format_timestamp

RECORD_KEY = "confirmation_record"


def _detail_rows(record: Registration) -> List[Tuple[str, str]]:
    """Label/value pairs for the submission details card."""
    return [
        ("Full Name", record.full_name),
        ("Email", record.email),
        ("Phone", record.phone),
        ("Gender", record.gender_label),
        ("Course", record.course_label),
        ("Address", record.address),
        ("Submitted At", format_timestamp(record.submitted_at)),
    ]


def _details_html(record: Registration) -> str:
    rows = "\n".join(detail_row(label, value) for label, value in _detail_rows(record))
    return html_block(
        f"""
        <div class="detail-card">
            <h2>Submission Details</h2>
            {rows}
        </div>
        """
    )


def render_confirmation(store: RecordStore) -> None:
    """
    Render the last submitted application.

    Raises:
        NavigationPreconditionError: If opened with nothing to confirm
    """
    if consume_entry() or RECORD_KEY not in st.session_state:
        st.session_state[RECORD_KEY] = take_last_submission(store, take_payload())

    record = st.session_state[RECORD_KEY]

    st.markdown(
        html_block(
            """
            <div class="page-header">
                <h1>✅ Application Submitted Successfully!</h1>
                <div class="page-subtitle">Your registration has been received</div>
            </div>
            """
        ),
        unsafe_allow_html=True,
    )
    st.markdown(_details_html(record), unsafe_allow_html=True)

    col1, col2 = st.columns(2, gap="small")
    with col1:
        if st.button("Submit Another Application", type="primary", use_container_width=True):
            st.session_state.pop(RECORD_KEY, None)
            navigate(Navigation(Destination.REGISTRATION))
    with col2:
        if st.button("View All Submissions", use_container_width=True, key="confirm_view_all"):
            st.session_state.pop(RECORD_KEY, None)
            navigate(Navigation(Destination.SUBMISSIONS))
