"""
SOAP Scribe Streamlit UI, main entry point.

Run with: ``streamlit run soapscribe/ui/app.py``
"""

# `streamlit run` puts soapscribe/ui/ first on sys.path instead of the repo
# root, so the package would not import without this.
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import streamlit as st  # noqa: E402

from soapscribe.core.config import get_settings  # noqa: E402
from soapscribe.core.logging import configure_logging  # noqa: E402
from soapscribe.ui.api_client import get_api_client  # noqa: E402
from soapscribe.ui.components.recorder import render_recorder  # noqa: E402

st.set_page_config(
    page_title="SOAP Note Generator",
    page_icon="\U0001fa7a",
    layout="centered",
)

_settings = get_settings()
configure_logging(_settings.log_level)

_DEFAULTS = {
    "api_base_url": _settings.api_base_url,
    "recorder_nonce": 0,
}

for key, value in _DEFAULTS.items():
    if key not in st.session_state:
        st.session_state[key] = value

with st.sidebar:
    st.title("\U0001fa7a SOAP Scribe")
    st.caption("Record an encounter, get a SOAP note")
    st.divider()
    st.session_state.api_base_url = st.text_input(
        "Backend API URL",
        value=st.session_state.api_base_url,
        help="URL of the SOAP Scribe FastAPI backend server (default: http://localhost:8000)",
    )

    reachable, status_text = get_api_client(st.session_state.api_base_url).check_connection()
    if reachable:
        st.success(f"Backend: {status_text}")
    else:
        st.error(f"Backend: {status_text}")

st.header("SOAP Note Generator")
render_recorder()
