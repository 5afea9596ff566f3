# === backend/app/core/security.py ===
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from fastapi import Depends, HTTPException, Request
from jose import jwt, JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from werkzeug.security import generate_password_hash, check_password_hash
from app.core.config import settings
from app.db.database import get_db
from app.models.user import User, UserRole
import logging

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
COOKIE_NAME = "access_token"

def hash_password(password: str) -> str:
    return generate_password_hash(password)

def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)

def create_access_token(data: dict, expires_delta: timedelta = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)

def token_for_user(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "email": user.email})

def _token_from_request(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1]
    return request.cookies.get(COOKIE_NAME)

async def get_user_roles(db: AsyncSession, user_id: int) -> List[str]:
    result = await db.execute(
        select(UserRole.role).where(UserRole.user_id == user_id).order_by(UserRole.id)
    )
    return list(result.scalars().all())

async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    token = _token_from_request(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user

async def require_admin(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> User:
    roles = await get_user_roles(db, user.id)
    if "admin" not in roles:
        logger.warning(f"Admin access denied for user {user.id}")
        raise HTTPException(status_code=403, detail="You don't have permission to access this page")
    return user
