from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt
from fastapi import HTTPException, Request

from clinic_ledger.core.config import settings
from clinic_ledger.core.context import RequestContext


def create_access_token(username: str, role: str, hours: int = 12) -> str:
    """Issue a bearer token carrying the user name and role."""
    payload = {
        "sub": username,
        "role": role,
        "exp": datetime.now(UTC) + timedelta(hours=hours),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def _decode_user(auth_header: str | None) -> tuple[str | None, str | None]:
    if not auth_header:
        return None, None

    if not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    token = auth_header[7:]
    if not token:
        raise HTTPException(status_code=401, detail="Token is required")

    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired") from None
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token") from None

    return payload.get("sub"), payload.get("role")


def get_request_context(request: Request) -> RequestContext:
    """Build the request context from the bearer token and X-Site-Id header.

    Requests without a token act as an anonymous, non-admin user.
    """
    username, role = _decode_user(request.headers.get("Authorization"))

    site_id: UUID | None = None
    site_header = request.headers.get("X-Site-Id")
    if site_header:
        try:
            site_id = UUID(site_header)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid X-Site-Id header") from None

    return RequestContext(site_id=site_id, username=username, role=role)
