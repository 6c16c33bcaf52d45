"""Registration form page: create and edit applications."""
import logging
from typing import Iterable, Optional

import streamlit as st
import streamlit.components.v1 as components

from src.models.registration import COURSE_OPTIONS, GENDER_OPTIONS, RegistrationForm
from src.services.navigation import Destination, Navigation
from src.services.record_store import RecordStore
from src.services.registration_service import InvalidPulse, RegistrationWorkflow
from src.ui.html_utils import html_block
from src.ui.routing import consume_entry, navigate, take_payload
from src.utils.exceptions import RecordNotFoundError, StorageError
from src.utils.validation import FIELD_ERROR_MESSAGES

logger = logging.getLogger(__name__)

WORKFLOW_KEY = "registration_workflow"
FAILED_SUBMIT_KEY = "registration_failed_submit"
STALE_EDIT_KEY = "registration_stale_edit"
SCROLL_KEY = "registration_scroll_pending"
RESEED_KEY = "registration_reseed_widgets"

# JSON field name → (widget key, form attribute)
FORM_WIDGETS = {
    "fullName": ("reg_full_name", "full_name"),
    "email": ("reg_email", "email"),
    "phone": ("reg_phone", "phone"),
    "gender": ("reg_gender", "gender"),
    "course": ("reg_course", "course"),
    "address": ("reg_address", "address"),
}


def _widget_selector(field: str) -> str:
    """CSS selector for the element container of a form widget."""
    return f".st-key-{FORM_WIDGETS[field][0]}"


def _invalid_pulse_css(events: Iterable[InvalidPulse]) -> str:
    """
    Build CSS marking invalid fields and shaking them.

    The keyframes name includes the submit attempt, so the browser restarts
    the animation on every failed submit even if the field was already red.
    """
    events = list(events)
    if not events:
        return ""

    attempt = events[0].attempt
    animation = f"invalid-pulse-{attempt}"
    rules = [
        f"@keyframes {animation} {{",
        "0%, 100% { transform: translateX(0); }",
        "20%, 60% { transform: translateX(-6px); }",
        "40%, 80% { transform: translateX(6px); }",
        "}",
    ]
    for event in events:
        selector = _widget_selector(event.field)
        rules.append(
            f"{selector} input, {selector} textarea, {selector} [data-baseweb=\"select\"] > div {{ "
            f"border: 1px solid #ef4444 !important; "
            f"animation: {animation} 0.4s ease-in-out; }}"
        )
    return "<style>\n" + "\n".join(rules) + "\n</style>"


def _scroll_to_field(field: str) -> None:
    """Scroll the first invalid field into view."""
    components.html(
        f"""
        <script>
        const target = parent.document.querySelector('{_widget_selector(field)}');
        if (target) {{
            target.scrollIntoView({{ behavior: 'smooth', block: 'center' }});
        }}
        </script>
        """,
        height=0,
    )


def _seed_widgets(form: RegistrationForm) -> None:
    """Copy form values into widget state before the widgets are created."""
    for widget_key, attribute in FORM_WIDGETS.values():
        value = getattr(form, attribute)
        if attribute in ("gender", "course"):
            value = value or None
        st.session_state[widget_key] = value


def _read_widgets() -> RegistrationForm:
    values = {}
    for widget_key, attribute in FORM_WIDGETS.values():
        values[attribute] = st.session_state.get(widget_key) or ""
    return RegistrationForm(**values)


def _field_error(field: str, failures: Optional[set]) -> None:
    if failures and field in failures:
        st.caption(f":red[{FIELD_ERROR_MESSAGES[field]}]")


def _get_workflow(store: RecordStore) -> RegistrationWorkflow:
    """Return the page workflow, starting a new one on page entry."""
    entered = consume_entry()
    workflow = st.session_state.get(WORKFLOW_KEY)

    if entered or workflow is None:
        workflow = RegistrationWorkflow(store)
        form = workflow.initialize(take_payload())
        _seed_widgets(form)
        st.session_state[WORKFLOW_KEY] = workflow
        st.session_state.pop(FAILED_SUBMIT_KEY, None)
        st.session_state.pop(STALE_EDIT_KEY, None)
    elif st.session_state.pop(RESEED_KEY, False):
        _seed_widgets(workflow.form)

    return workflow


def render_registration_form(store: RecordStore) -> None:
    """Render the application form in Create or Edit mode."""
    workflow = _get_workflow(store)

    title = "Edit Application" if workflow.is_editing else "Online Application Form"
    subtitle = (
        "Update your registration details"
        if workflow.is_editing
        else "Fill out the form below to register"
    )
    st.markdown(
        html_block(
            f"""
            <div class="page-header">
                <h1>{title}</h1>
                <div class="page-subtitle">{subtitle}</div>
            </div>
            """
        ),
        unsafe_allow_html=True,
    )

    failed = st.session_state.get(FAILED_SUBMIT_KEY)
    failures = failed.failures if failed else None

    if st.session_state.get(STALE_EDIT_KEY):
        st.error("❌ This registration no longer exists. It may have been deleted.")
        if st.button("Submit as New Application", key="reg_submit_as_new"):
            workflow.switch_to_create()
            st.session_state.pop(STALE_EDIT_KEY, None)
            st.rerun()

    with st.form("registration_form", clear_on_submit=False):
        st.text_input("Full Name *", key="reg_full_name", placeholder="Enter your full name")
        _field_error("fullName", failures)

        st.text_input("Email Address *", key="reg_email", placeholder="example@email.com")
        _field_error("email", failures)

        st.text_input("Phone Number *", key="reg_phone", placeholder="1234567890")
        _field_error("phone", failures)

        st.selectbox(
            "Gender *",
            options=list(GENDER_OPTIONS),
            format_func=GENDER_OPTIONS.get,
            key="reg_gender",
            placeholder="Select your gender",
        )
        _field_error("gender", failures)

        st.selectbox(
            "Course Applying For *",
            options=list(COURSE_OPTIONS),
            format_func=COURSE_OPTIONS.get,
            key="reg_course",
            placeholder="Select a course",
        )
        _field_error("course", failures)

        st.text_area("Address *", key="reg_address", placeholder="Enter your complete address")
        _field_error("address", failures)

        submit_label = "Update Application" if workflow.is_editing else "Submit Application"
        submit = st.form_submit_button(submit_label, type="primary", use_container_width=True)

    if st.button("View All Submissions", use_container_width=True, key="reg_view_all"):
        navigate(Navigation(Destination.SUBMISSIONS))

    if workflow.is_editing and st.button("Cancel Edit", use_container_width=True, key="reg_cancel_edit"):
        workflow.cancel_edit()
        st.session_state[RESEED_KEY] = True
        st.session_state.pop(FAILED_SUBMIT_KEY, None)
        st.session_state.pop(STALE_EDIT_KEY, None)
        st.rerun()

    if submit:
        try:
            result = workflow.submit(_read_widgets())
        except RecordNotFoundError:
            st.session_state[STALE_EDIT_KEY] = True
            st.rerun()
        except StorageError:
            logger.exception("Failed to save registration")
            st.error("❌ Failed to save your application. Please try again.")
            return

        if result.ok:
            st.session_state.pop(FAILED_SUBMIT_KEY, None)
            navigate(result.navigation)
        else:
            st.session_state[FAILED_SUBMIT_KEY] = result
            st.session_state[SCROLL_KEY] = True
            st.rerun()

    if failed and failed.events:
        st.markdown(_invalid_pulse_css(failed.events), unsafe_allow_html=True)
        if st.session_state.pop(SCROLL_KEY, False):
            _scroll_to_field(failed.first_invalid)
