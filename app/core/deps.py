import logging
from datetime import datetime, timezone

from fastapi import Request, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.auth.models import User
from app.core.security import decode_access_token
from app.streaks.rollover import process_rollover

logger = logging.getLogger(__name__)


def _extract_token(request: Request):
    """Bearer header first, then the access_token cookie."""
    auth_header = request.headers.get("authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip()

    token = request.cookies.get("access_token")
    # Support both "Bearer <token>" and raw token values in the cookie.
    if isinstance(token, str) and token.lower().startswith("bearer "):
        token = token[7:].strip()
    return token


def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> User:
    token = _extract_token(request)
    if not token:
        logger.debug("reject reason=missing_token path=%s", request.url.path)
        raise HTTPException(status_code=401, detail="No token, authorization denied")

    payload = decode_access_token(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Token is not valid")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Token is not valid (user ID missing)")

    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        logger.debug("reject reason=user_not_found user=%s path=%s", user_id, request.url.path)
        raise HTTPException(status_code=401, detail="User not found")

    # Update last_active timestamp
    try:
        user.last_active = datetime.now(timezone.utc)
        db.commit()
    except SQLAlchemyError:
        db.rollback()

    return user


def get_rolled_over_user(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> User:
    """
    Dependency for every user-scoped endpoint that reads or changes stats:
    settles today's streak rollover before the endpoint runs.
    """
    process_rollover(db, user.user_id)
    return user
