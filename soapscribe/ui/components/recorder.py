"""
Recorder component: drives the ``RecorderSession`` from Streamlit reruns.

States: idle -> recording -> processing -> idle

The browser widget captures the clip; the session assembles it on one
rerun and submits it on the next, so the widget is rendered disabled
while the submission is in flight.
"""

import logging

import streamlit as st

from soapscribe.core.exceptions import MicrophoneAccessError, RecordingAlreadyActiveError
from soapscribe.core.models import SessionStatus
from soapscribe.ui.api_client import DEFAULT_BASE_URL, APIError, get_api_client
from soapscribe.ui.components.note_card import render_results
from soapscribe.ui.session import BrowserClipSource, RecorderSession

logger = logging.getLogger(__name__)

SIZE_HINT = "Note: Maximum file size is 25 MB (~10-15 minutes for WebM audio)"


def get_session() -> RecorderSession:
    """Return the recorder session stored in Streamlit state."""
    if "recorder" not in st.session_state:
        st.session_state.recorder = RecorderSession()
    return st.session_state.recorder


def _widget_key() -> str:
    return f"audio_input_{st.session_state.get('recorder_nonce', 0)}"


def _reset_widget() -> None:
    """Give the audio widget a fresh key so the submitted clip is cleared."""
    st.session_state.recorder_nonce = st.session_state.get("recorder_nonce", 0) + 1


def _capture_clip(session: RecorderSession, clip) -> None:
    """Feed the recorded clip through the session and stash the result."""
    source = BrowserClipSource(clip)
    try:
        session.start(source)
    except (MicrophoneAccessError, RecordingAlreadyActiveError) as exc:
        st.session_state.recorder_error = str(exc)
        _reset_widget()
        return

    try:
        for chunk in source.chunks():
            session.on_data(chunk)
    except Exception:
        session.abort()
        raise
    st.session_state._pending_audio = session.stop()


def _submit_pending(session: RecorderSession) -> None:
    """Send the pending audio to the backend with a spinner."""
    audio = st.session_state.pop("_pending_audio", None)
    if audio is None:
        session.abort()
        return

    client = get_api_client(st.session_state.get("api_base_url", DEFAULT_BASE_URL))
    with st.spinner("Processing audio..."):
        try:
            session.submit(client, audio)
        except APIError as exc:
            logger.warning("Submission failed (%s): %s", exc.category, exc.message)
            st.session_state.recorder_error = f"Error: {exc.message}"
    _reset_widget()


def render_recorder() -> None:
    """Render the recorder widget, status, errors, and last result."""
    session = get_session()

    error = st.session_state.pop("recorder_error", None)
    if error:
        st.error(error)

    clip = st.audio_input(
        "Record audio",
        key=_widget_key(),
        disabled=session.is_busy,
    )
    st.caption(SIZE_HINT)

    if session.status is SessionStatus.processing:
        _submit_pending(session)
        st.rerun()
    elif clip is not None and session.status is SessionStatus.idle:
        _capture_clip(session, clip)
        st.rerun()

    render_results(session.transcript, session.soap_note)
