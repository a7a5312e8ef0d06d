"""
Post card display components.
"""

import streamlit as st

_BADGE_COLORS = {"Offer": "green", "Request": "blue"}


def render_post_card(post: dict) -> None:
    """Render a single post as a bordered card."""
    post_type = post.get("type", "")
    with st.container(border=True):
        color = _BADGE_COLORS.get(post_type, "gray")
        st.markdown(f":{color}-background[{post_type}]")
        st.subheader(post.get("title", ""))
        if post.get("description"):
            st.write(post["description"])
        meta = " • ".join(
            part
            for part in (post.get("author"), post.get("location"), post.get("category"))
            if part
        )
        st.caption(f"{meta}  —  {post.get('date', '')}")


def render_post_list(posts: list[dict]) -> None:
    """Render every post, or an empty-state message."""
    if not posts:
        with st.container(border=True):
            st.write("No posts available at the moment.")
            st.caption("Be the first to share with your community!")
        return
    for post in posts:
        render_post_card(post)
