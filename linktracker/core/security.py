"""Access gate: HTTP Basic authentication for the dashboard and admin API."""

import secrets
from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from linktracker.core.config import Settings

logger = structlog.get_logger()

REALM = "Link Tracker"

# auto_error=False so missing credentials get the same challenge as wrong ones
basic_auth = HTTPBasic(realm=REALM, auto_error=False)


def credentials_match(credentials: HTTPBasicCredentials, settings: Settings) -> bool:
    """Compare supplied credentials with the configured ones in constant time."""
    user_ok = secrets.compare_digest(
        credentials.username.encode("utf-8"),
        settings.basic_auth_user.encode("utf-8"),
    )
    pass_ok = secrets.compare_digest(
        credentials.password.encode("utf-8"),
        settings.basic_auth_pass.encode("utf-8"),
    )
    return user_ok and pass_ok


async def require_admin(
    request: Request,
    credentials: Annotated[HTTPBasicCredentials | None, Depends(basic_auth)],
) -> str:
    """Require valid admin credentials.

    Raises HTTPException 401 with a Basic challenge if the credentials are
    missing or wrong, and 503 if no credentials are configured at all.
    Returns the authenticated username.
    """
    settings: Settings = request.app.state.settings
    if not settings.basic_auth_user or not settings.basic_auth_pass:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin access is not configured",
        )

    if credentials is None or not credentials_match(credentials, settings):
        logger.info("Admin authentication failed")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": f'Basic realm="{REALM}"'},
        )

    return credentials.username


# Type alias for dependency injection
AdminUser = Annotated[str, Depends(require_admin)]
