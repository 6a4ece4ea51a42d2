# courtdesk/api/deps.py

from typing import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import jwt

from courtdesk.core.config import Settings
from courtdesk.core.security import decode_access_token
from courtdesk.db.database import get_db
from courtdesk.db.models import User, UserRole
from courtdesk.services.notification_hub import NotificationHub
from courtdesk.services.notification_service import NotificationDispatcher
from courtdesk.utils.exceptions import AuthenticationFailed, PermissionDenied

# auto_error off: a missing header must be a 401, not HTTPBearer's 403
security = HTTPBearer(auto_error=False)


# ============================================================================
# Application state
# ============================================================================

def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_notification_hub(request: Request) -> NotificationHub:
    return request.app.state.notification_hub


def get_dispatcher(hub: NotificationHub = Depends(get_notification_hub)) -> NotificationDispatcher:
    return NotificationDispatcher(hub)


# ============================================================================
# JWT Dependency
# ============================================================================

def resolve_token_user(token: str, db: Session, settings: Settings) -> User:
    """
    Decode ``token`` and load its user. Shared by the bearer dependency and
    the websocket join handshake.
    """
    try:
        payload = decode_access_token(token, settings)
    except jwt.ExpiredSignatureError:
        raise AuthenticationFailed("Token expired")
    except jwt.PyJWTError:
        raise AuthenticationFailed("Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationFailed("Invalid token")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise AuthenticationFailed("User not found")
    return user


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
) -> User:
    """
    Validate the bearer token and return the current user.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationFailed("Authentication required")
    return resolve_token_user(credentials.credentials, db, settings)


def require_roles(*roles: UserRole) -> Callable[..., User]:
    """
    Dependency factory: the current user, or 403 when their role is not one
    of ``roles``.
    """
    allowed = frozenset(roles)

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise PermissionDenied()
        return current_user

    return checker
