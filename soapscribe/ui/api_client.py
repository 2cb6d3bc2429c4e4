"""
Backend client used by the Streamlit recorder.

Streamlit reruns the script synchronously, so this wraps a blocking
``httpx.Client``. Every failure surfaces as ``APIError`` whose message can
be shown to the clinician verbatim.
"""

import logging

import httpx
import streamlit as st

from soapscribe.core.models import AudioUpload

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 30.0
GENERIC_ERROR_MESSAGE = "Failed to process audio. Please try again."
# Transcription and note generation each may take up to two minutes.
SUBMIT_TIMEOUT = 300.0


class APIError(Exception):
    """A backend failure with a displayable message.

    ``category`` is one of "connection", "timeout", "http", "network" or
    "unknown" and is only used for logging.
    """

    def __init__(self, message: str, category: str = "unknown") -> None:
        self.message = message
        self.category = category
        super().__init__(message)


def _error_message(response: httpx.Response) -> str:
    """Pull the ``error`` field out of a failed response.

    Bodies that are not a JSON object, such as a proxy error page, get the
    generic message.
    """
    try:
        body = response.json()
    except ValueError:
        logger.warning("Non-JSON error body (HTTP %s)", response.status_code)
        return GENERIC_ERROR_MESSAGE
    if not isinstance(body, dict) or not body.get("error"):
        return GENERIC_ERROR_MESSAGE
    return str(body["error"])


class APIClient:
    """Talks to the SOAP Scribe backend over HTTP."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = httpx.Client(base_url=self._base_url, timeout=DEFAULT_TIMEOUT)

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Issue one request and translate transport and status failures.

        Raises:
            APIError: When the backend is unreachable, slow, or answers
                with a non-2xx status.
        """
        call = self._http.post if method == "post" else self._http.get
        try:
            response = call(path, **kwargs)
            response.raise_for_status()
        except httpx.ConnectError:
            raise APIError(
                f"Cannot reach the backend at {self._base_url}. "
                "Start it with: `soapscribe-api`",
                category="connection",
            ) from None
        except httpx.TimeoutException:
            raise APIError(
                "The backend took too long to answer. Please try again.",
                category="timeout",
            ) from None
        except httpx.HTTPStatusError as exc:
            raise APIError(_error_message(exc.response), category="http") from None
        except httpx.HTTPError as exc:
            raise APIError(f"Network error: {exc}", category="network") from None
        return response

    def health_check(self) -> dict:
        return self._send("get", "/health").json()

    def check_connection(self) -> tuple[bool, str]:
        """Return ``(reachable, status text)`` for the sidebar indicator."""
        try:
            self.health_check()
        except APIError as exc:
            return False, exc.message
        return True, "Connected"

    def create_soap_note(self, audio: AudioUpload) -> dict:
        """Upload one recording and return ``{"transcript", "soapNote"}``.

        Raises:
            APIError: On transport failure, a non-2xx status, or a 2xx body
                that still carries an ``error`` field.
        """
        response = self._send(
            "post",
            "/api/soap-from-audio",
            files={"audio": (audio.filename, audio.data, audio.content_type)},
            timeout=SUBMIT_TIMEOUT,
        )
        try:
            body = response.json()
        except ValueError:
            raise APIError(GENERIC_ERROR_MESSAGE) from None

        if not isinstance(body, dict):
            raise APIError(GENERIC_ERROR_MESSAGE)
        if body.get("error"):
            raise APIError(str(body["error"]), category="http")
        return body


@st.cache_resource
def get_api_client(base_url: str = DEFAULT_BASE_URL) -> APIClient:
    """One client per backend URL, kept across Streamlit reruns."""
    return APIClient(base_url=base_url)
