"""Helpers for building HTML snippets rendered with st.markdown."""
import re
from html import escape
from textwrap import dedent


def html_block(template: str) -> str:
    """
    Normalize multi-line HTML so Streamlit doesn't treat it as Markdown code.

    Lines indented by 4+ spaces would become code blocks, so every line is
    dedented and left-stripped.
    """
    lines = dedent(template).splitlines()
    return "\n".join(line.lstrip() for line in lines).strip()


def detail_row(label: str, value: str) -> str:
    """One label/value row of a details card; the value is HTML-escaped."""
    return (
        f'<div class="detail-row"><div class="detail-label">{label}:</div>'
        f'<div class="detail-value">{escape(value)}</div></div>'
    )


MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+\-.!|<>~$:])")


def escape_markdown(text: str) -> str:
    """Backslash-escape Markdown syntax so user text renders literally."""
    return MARKDOWN_SPECIAL.sub(r"\\\1", text)
