"""
Voice recorder component — dictate a post and pre-fill the form.

States: idle -> processing -> filled | error
The same clip is never sent twice: the last processed clip's hash is
kept in session state.
"""

import hashlib
import logging

import streamlit as st

from src.ui.api_client import APIError, get_api_client
from src.ui.utils import describe_voice_error

logger = logging.getLogger(__name__)

_MIC_HELP = (
    "If you've denied permission, you may need to reset it in your browser settings:\n"
    "- Chrome: click the lock/info icon in the address bar\n"
    "- Firefox: click the shield icon in the address bar\n"
    "- Safari: Preferences → Websites → Microphone"
)


def _render_error(error: dict, post_type: str) -> None:
    heading, body = describe_voice_error(error.get("type"), error.get("message", ""), post_type)
    if error.get("type") == "INSUFFICIENT_INFO":
        st.warning(f"**{heading}**\n\n{body}")
        if error.get("missing_fields"):
            st.caption(f"I need information about: {', '.join(error['missing_fields'])}")
    elif error.get("type") == "MIC_PERMISSION":
        st.error(f"**{heading}**\n\n{body}")
        st.info(_MIC_HELP)
        if st.button("Try recording again", key=f"{post_type}_mic_retry"):
            st.session_state.pop(f"{post_type}_voice_error", None)
            st.rerun()
    else:
        st.error(f"**{heading}**\n\n{body}")


def render_recorder(post_type: str, on_extracted) -> None:
    """Render the dictation widget for an Offer or Request form.

    Args:
        post_type: "Offer" or "Request".
        on_extracted: Called with the extracted field dict on success.
    """
    error_key = f"{post_type}_voice_error"
    hash_key = f"{post_type}_voice_hash"

    with st.container(border=True):
        st.markdown(f"**Record Your {post_type}**")
        st.caption(
            f"Click the microphone and describe your {post_type.lower()}. "
            "We'll fill out the form for you."
        )
        st.caption("_Note: Speech recognition is optimized for English audio_")

        audio = st.audio_input("Record", key=f"{post_type}_audio", label_visibility="collapsed")

        if audio is not None:
            audio_bytes = audio.getvalue()
            digest = hashlib.sha256(audio_bytes).hexdigest()
            if digest != st.session_state.get(hash_key):
                st.session_state[hash_key] = digest
                st.session_state.pop(error_key, None)
                if not audio_bytes:
                    st.session_state[error_key] = {
                        "type": "MIC_PERMISSION",
                        "message": "No audio was captured. Please allow microphone "
                        "access in your browser settings.",
                    }
                else:
                    _process(audio_bytes, post_type, on_extracted, error_key)

        error = st.session_state.get(error_key)
        if error:
            _render_error(error, post_type)


def _process(audio_bytes: bytes, post_type: str, on_extracted, error_key: str) -> None:
    client = get_api_client(st.session_state.get("api_base_url", "http://localhost:8000"))
    with st.spinner("Processing your recording..."):
        try:
            extracted = client.process_audio(audio_bytes, post_type)
        except APIError as exc:
            logger.warning("Voice extraction failed (%s): %s", exc.error_type, exc.message)
            st.session_state[error_key] = {
                "type": exc.error_type or "SERVER_ERROR",
                "message": exc.message,
                "missing_fields": exc.missing_fields,
            }
            return
    on_extracted(extracted)
