import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, Cookie, Response, status, Depends
from sqlalchemy.orm import Session

from api.config import get_db, settings
from api.models.models import User as DbUser
from api.schemas.auth_schemas import AuthTokenPayload
from api.schemas.user_schemas import User
from api.utils.jwt import verify_token, get_password_hash, create_access_token, verify_password

logger = logging.getLogger(__name__)


def _to_user(user: DbUser) -> User:
    return User(id=int(user.id), email=user.email, preferences=user.preferences)


def get_current_user(access_token: Optional[str] = Cookie(None), db: Session = Depends(get_db)) -> User:
    """Authenticated caller, or 401."""
    if not access_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not authenticated",
        )

    payload = verify_token(access_token)
    user = get_user_by_email(payload.sub, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )
    return _to_user(user)


def get_optional_user(access_token: Optional[str] = Cookie(None), db: Session = Depends(get_db)) -> User | None:
    """Authenticated caller, or None for anonymous/invalid credentials (preview mode)."""
    if not access_token:
        return None
    try:
        return get_current_user(access_token, db)
    except HTTPException:
        return None


def set_auth_cookie(response: Response, user: DbUser) -> None:
    expires = timedelta(minutes=settings.access_token_expire_minutes)
    token = create_access_token(AuthTokenPayload(sub=user.email, exp=datetime.now(timezone.utc) + expires))
    response.set_cookie(
        key="access_token",
        value=token,
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=int(expires.total_seconds()),
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key="access_token",
        httponly=True,
        secure=False,
        samesite="lax"
    )


def get_user_by_email(email: str, db: Session) -> DbUser | None:
    return db.query(DbUser).filter(DbUser.email == email.strip().lower()).first()


def create_user(email: str, password: str, db: Session) -> DbUser:
    user = DbUser(email=email.strip().lower(), hashed_password=get_password_hash(password), preferences={})
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("created user id=%s", user.id)
    return user


def authenticate_user(email: str, password: str, db: Session) -> DbUser | None:
    user = get_user_by_email(email, db)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user
