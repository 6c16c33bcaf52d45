"""
課程報名系統主應用程式
Course Registration Application
"""
import logging
import streamlit as st

from src import config
from src.services.navigation import Destination, Navigation
from src.ui.confirmation import render_confirmation
from src.ui.registration_form import render_registration_form
from src.ui.routing import current_page, initialize_routing, navigate
from src.ui.submissions import render_submissions
from src.utils.exceptions import NavigationPreconditionError

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# Streamlit 頁面配置
st.set_page_config(
    page_title="Online Application Form",
    page_icon="📝",
    layout="wide",
    initial_sidebar_state="collapsed"
)


def apply_custom_css():
    """套用自訂 CSS 樣式。"""
    st.markdown("""
        <style>
        /* 隱藏 Streamlit 預設元素 */
        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}

        [data-testid="stAppViewContainer"] > .main .block-container {
            padding-top: 1.5rem;
            max-width: 1200px;
        }

        /* 頁首 */
        .page-header {
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            color: white;
            padding: 16px 24px;
            border-radius: 12px 12px 0 0;
            margin-bottom: 16px;
        }

        .page-header h1 {
            font-size: 1.6rem;
            margin: 0;
            color: white;
        }

        .page-subtitle {
            font-size: 0.9rem;
            opacity: 0.9;
        }

        /* 報名明細 */
        .detail-card h2 {
            font-size: 1.25rem;
            margin-bottom: 12px;
        }

        .detail-row {
            display: grid;
            grid-template-columns: 1fr 2fr;
            gap: 8px;
            padding: 10px 0;
            border-bottom: 1px solid rgba(148, 163, 184, 0.3);
        }

        .detail-label {
            font-weight: 600;
            opacity: 0.7;
        }

        /* 按鈕樣式 */
        .stButton > button {
            border-radius: 12px;
            font-weight: 600;
        }
        </style>
    """, unsafe_allow_html=True)


def render_current_page():
    """根據當前頁面狀態渲染對應內容。"""
    store = config.get_store()
    page = current_page()

    try:
        if page == Destination.REGISTRATION.value:
            render_registration_form(store)

        elif page == Destination.CONFIRMATION.value:
            render_confirmation(store)

        elif page == Destination.SUBMISSIONS.value:
            render_submissions(store)

        else:
            st.error(f"Unknown page: {page}")
            if st.button("Back to Application Form"):
                navigate(Navigation(Destination.REGISTRATION))

    except NavigationPreconditionError as e:
        logger.info("Redirecting to registration: %s", e)
        navigate(Navigation(Destination.REGISTRATION))

    except Exception as e:
        # 錯誤邊界
        logger.exception("Unhandled exception while rendering page")
        st.error("Something went wrong, please try again")

        with st.expander("🔍 Error details"):
            st.code(str(e))

        if st.button("Back to Application Form"):
            navigate(Navigation(Destination.REGISTRATION))


def main():
    """主應用程式入口。"""
    try:
        initialize_routing()
        apply_custom_css()
        render_current_page()
    except Exception as e:
        logger.exception("Unhandled exception during app execution")
        st.error("The application hit an error, please reload the page")
        st.code(str(e))

        if st.button("🔄 Reload"):
            st.session_state.clear()
            st.rerun()


if __name__ == "__main__":
    main()
