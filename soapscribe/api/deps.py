"""FastAPI dependencies shared by the routes."""

from fastapi import Depends

from soapscribe.core.config import Settings, get_settings, validate_api_key
from soapscribe.services.pipeline import SoapPipeline, create_pipeline


def require_api_key(settings: Settings = Depends(get_settings)) -> str:
    """Resolve the service credential, failing fast when misconfigured."""
    return validate_api_key(settings)


def get_pipeline(
    api_key: str = Depends(require_api_key),
    settings: Settings = Depends(get_settings),
) -> SoapPipeline:
    """Build a fresh pipeline for the current request."""
    return create_pipeline(settings, api_key=api_key)
