"""Reusable FastAPI dependencies."""
from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from .config import get_settings

settings = get_settings()
service_api_key_header = APIKeyHeader(name="X-Service-Key", auto_error=False)


def require_service_key(api_key: str = Security(service_api_key_header)) -> None:
    if not api_key or api_key != settings.service_api_key:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid service key")
