"""
Community feed page — list every post, newest first.

Shows a spinner while posts load and a retry button when the backend
cannot be reached.
"""

# Ensure project root is on sys.path (Streamlit page files need this).
import sys as _sys; from pathlib import Path as _Path; _r = str(_Path(__file__).resolve().parents[3]); _r in _sys.path or _sys.path.insert(0, _r)  # noqa: E702,I001

import streamlit as st  # noqa: E402

from src.ui.api_client import APIError, get_api_client  # noqa: E402
from src.ui.components.post_card import render_post_list  # noqa: E402

st.title("Connect with Your Boston Community")
st.caption("Share, request, and discover local opportunities in Boston and Cambridge")

col_title, col_offer, col_request = st.columns([4, 1, 1])
with col_title:
    st.subheader("Recent Community Posts")
with col_offer:
    st.page_link("pages/02_post_offer.py", label="Post an Offer", icon="\U0001f381")
with col_request:
    st.page_link("pages/03_post_request.py", label="Make a Request", icon="\U0001f91d")

client = get_api_client(st.session_state.get("api_base_url", "http://localhost:8000"))

try:
    with st.spinner("Loading posts..."):
        posts = client.list_posts()
except APIError as exc:
    st.error(exc.message)
    if st.button("Try again"):
        st.rerun()
else:
    render_post_list(posts)
