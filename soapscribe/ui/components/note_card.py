"""
Transcript and SOAP note display components.
"""

import streamlit as st


def render_text_panel(title: str, text: str) -> None:
    """Render one titled, bordered block of preformatted text."""
    st.subheader(title)
    with st.container(border=True):
        st.text(text)


def render_results(transcript: str, soap_note: str) -> None:
    """Render the last successful result; empty fields are skipped."""
    if transcript:
        render_text_panel("Transcript", transcript)
    if soap_note:
        render_text_panel("SOAP Note", soap_note)
