"""
Session dependencies for protected and public routes.

`get_current_user` rejects the request with 401 when no valid session is
present. `get_optional_user` never rejects: it yields the user when the
token checks out and None otherwise, so public endpoints can still add
viewer-relative fields.
"""
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from database import get_db
from models.User import User
from utils.logger import setup_api_logger
from utils.security import decode_access_token, InvalidTokenError, TokenExpiredError

logger = setup_api_logger()
bearer_scheme = HTTPBearer(auto_error=False)

INVALID_SESSION = "Invalid or expired token."


class SessionError(Exception):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


def _resolve_user(token: str, db: Session) -> User:
    try:
        user_id = decode_access_token(token)
    except TokenExpiredError:
        raise SessionError("token expired")
    except InvalidTokenError as exc:
        raise SessionError(f"invalid token ({exc})")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise SessionError(f"user {user_id} not found")
    return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. No token provided.",
        )
    try:
        return _resolve_user(credentials.credentials, db)
    except SessionError as exc:
        logger.info("Rejected session: %s", exc.reason)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_SESSION)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    if credentials is None:
        return None
    try:
        return _resolve_user(credentials.credentials, db)
    except SessionError as exc:
        logger.debug("Continuing anonymously: %s", exc.reason)
        return None


def require_owner(owner_id: int, user: User, detail: str) -> None:
    """Raise 403 unless `user` owns the resource."""
    if owner_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
