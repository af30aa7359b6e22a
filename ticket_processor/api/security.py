import secrets
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ticket_processor.core.config import settings


_http_bearer = HTTPBearer(auto_error=False)


def _extract_bearer_token(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials and credentials.scheme.lower() == "bearer" and credentials.credentials:
        return credentials.credentials
    return None


def require_api_key(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_http_bearer),
) -> None:
    """Reject the request unless it carries the pre-shared webhook secret."""
    expected = settings.API_SECRET_KEY
    token = _extract_bearer_token(credentials)
    if not expected or not token:
        raise HTTPException(status_code=401, detail="Unauthorized")

    if not secrets.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(status_code=401, detail="Unauthorized")
