"""Page routing helpers backed by Streamlit session state."""
from typing import Any, Optional

import streamlit as st

from src.services.navigation import Destination, Navigation

CURRENT_PAGE_KEY = "current_page"
PAYLOAD_KEY = "navigation_payload"
ENTRY_KEY = "page_entry"


def initialize_routing() -> None:
    """Start on the registration page on a fresh browser session."""
    if CURRENT_PAGE_KEY not in st.session_state:
        st.session_state[CURRENT_PAGE_KEY] = Destination.REGISTRATION.value
        st.session_state[ENTRY_KEY] = True


def current_page() -> str:
    return st.session_state.get(CURRENT_PAGE_KEY, Destination.REGISTRATION.value)


def navigate(navigation: Navigation) -> None:
    """Switch page, attach the payload for the target page and rerun."""
    st.session_state[CURRENT_PAGE_KEY] = navigation.destination.value
    st.session_state[PAYLOAD_KEY] = navigation.payload
    st.session_state[ENTRY_KEY] = True
    st.rerun()


def consume_entry() -> bool:
    """Return True once per page visit, on the first render after navigation."""
    return bool(st.session_state.pop(ENTRY_KEY, False))


def take_payload() -> Optional[Any]:
    """Hand the navigation payload to the current page and forget it."""
    return st.session_state.pop(PAYLOAD_KEY, None)
