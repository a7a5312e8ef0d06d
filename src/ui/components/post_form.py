"""
Post creation form — shared by the Offer and Request pages.

Form values live in ``st.session_state`` under ``{post_type}_form_{field}``
so the voice recorder can pre-fill them before the widgets render.
"""

import streamlit as st

from src.core.models import EXTRACTION_FIELDS, LOCATIONS
from src.ui.api_client import APIError, get_api_client
from src.ui.components.recorder import render_recorder
from src.ui.utils import build_draft, empty_form, merge_extracted_fields, missing_required

FEED_PAGE = "pages/01_feed.py"

_PLACEHOLDERS = {
    "Offer": ("What are you offering?", "Provide details about your offer..."),
    "Request": ("What do you need?", "Provide details about your request..."),
}


def _key(post_type: str, field: str) -> str:
    return f"{post_type}_form_{field}"


def _read_form(post_type: str) -> dict[str, str]:
    return {field: st.session_state.get(_key(post_type, field), "") for field in EXTRACTION_FIELDS}


def _write_form(post_type: str, form: dict[str, str]) -> None:
    for field, value in form.items():
        st.session_state[_key(post_type, field)] = value


def _reset_form(post_type: str) -> None:
    for field in EXTRACTION_FIELDS:
        st.session_state.pop(_key(post_type, field), None)


def render_post_page(post_type: str) -> None:
    """Render the full creation page for an Offer or a Request."""
    defaults = empty_form()
    for field, value in defaults.items():
        st.session_state.setdefault(_key(post_type, field), value)

    def _on_extracted(extracted: dict) -> None:
        _write_form(post_type, merge_extracted_fields(_read_form(post_type), extracted))
        st.session_state[f"{post_type}_flash"] = True

    render_recorder(post_type, _on_extracted)

    flash = st.session_state.pop(f"{post_type}_flash", False)
    if flash:
        st.success("The form has been filled from your recording. Review it before posting.")

    title_hint, description_hint = _PLACEHOLDERS[post_type]
    with st.form(f"{post_type}_form", border=True):
        if flash:
            st.markdown(":green-background[**Filled from your recording**]")
        st.text_input("Title", key=_key(post_type, "title"), placeholder=title_hint)
        st.text_area(
            "Description",
            key=_key(post_type, "description"),
            placeholder=description_hint,
            height=120,
        )
        st.selectbox("Location", options=list(LOCATIONS), key=_key(post_type, "location"))
        st.text_input(
            "Category",
            key=_key(post_type, "category"),
            placeholder="e.g., Education, Services, Events",
        )
        st.text_input("Your Name", key=_key(post_type, "author"), placeholder="Your full name")

        col_cancel, col_submit = st.columns(2)
        with col_cancel:
            cancelled = st.form_submit_button("Cancel", use_container_width=True)
        with col_submit:
            label = "Post Offer" if post_type == "Offer" else "Post Request"
            submitted = st.form_submit_button(label, type="primary", use_container_width=True)

    if cancelled:
        _reset_form(post_type)
        st.switch_page(FEED_PAGE)

    if submitted:
        form = _read_form(post_type)
        missing = missing_required(form)
        if missing:
            st.error(f"Please fill in: {', '.join(missing)}")
            return
        client = get_api_client(st.session_state.get("api_base_url", "http://localhost:8000"))
        try:
            client.create_post(build_draft(form, post_type))
        except APIError as exc:
            st.error(f"Failed to create post: {exc.message}")
            return
        _reset_form(post_type)
        st.switch_page(FEED_PAGE)
