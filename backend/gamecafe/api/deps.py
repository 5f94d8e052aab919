"""
Shared route dependencies: current user, admin gate, directory cache.

Sessions are issued by the authentication layer in front of this API; it forwards the
authenticated user id in the X-User-Id header.
"""
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from gamecafe.core.errors import AuthenticationRequiredError, PermissionDeniedError, to_http
from gamecafe.db.session import get_db
from gamecafe.models.user import User
from gamecafe.services.party_finder.cache import TTLCache


def get_cache(request: Request) -> TTLCache:
    return request.app.state.cache


def get_optional_user(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
    db: Session = Depends(get_db),
) -> User | None:
    user_id = (x_user_id or "").strip()
    if not user_id:
        return None
    return db.query(User).filter(User.id == user_id).first()


def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise to_http(AuthenticationRequiredError("Not authenticated"))
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise to_http(PermissionDeniedError("Admin access required"))
    return user
