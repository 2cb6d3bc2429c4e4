"""Fixtures for API-level tests of the SOAP endpoint.

The app's settings and pipeline dependencies are overridden so requests
run end to end through routing, validation and error handling without
touching external services.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from soapscribe.api.app import create_app
from soapscribe.api.deps import get_pipeline
from soapscribe.core.config import get_settings
from soapscribe.services.notes.soap import SoapNoteGenerator
from soapscribe.services.pipeline import SoapPipeline


@pytest.fixture
def stub_pipeline(mock_stt, mock_llm):
    """Pipeline wired to the stub providers."""
    return SoapPipeline(transcriber=mock_stt, note_generator=SoapNoteGenerator(mock_llm))


@pytest.fixture
def app(settings, stub_pipeline):
    """FastAPI app with settings and pipeline overridden."""
    application = create_app()
    application.dependency_overrides[get_settings] = lambda: settings
    application.dependency_overrides[get_pipeline] = lambda: stub_pipeline
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
