# === backend/app/api/v1/endpoints/authentication.py ===
from fastapi import APIRouter, Request, HTTPException, Depends
from fastapi.responses import JSONResponse, RedirectResponse
from authlib.integrations.starlette_client import OAuth
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.core.security import (
    COOKIE_NAME,
    get_current_user,
    token_for_user,
    verify_password,
)
from app.db.database import get_db
from app.models.user import User
from app.schemas.auth import SignupRequest, LoginRequest, LoginResponse, UserResponse
from app.services.users import create_user, get_user_by_email, build_user_response
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

# OAuth setup
oauth = OAuth()
oauth.register(
    name='google',
    server_metadata_url='https://accounts.google.com/.well-known/openid-configuration',
    client_id=settings.GOOGLE_CLIENT_ID,
    client_secret=settings.GOOGLE_CLIENT_SECRET,
    client_kwargs={
        'scope': 'openid email profile',
    }
)

FRONTEND_URL = settings.FRONTEND_URL

def _set_token_cookie(response, access_token: str):
    response.set_cookie(
        key=COOKIE_NAME,
        value=access_token,
        httponly=True,
        secure=True,
        samesite="none",
        max_age=settings.ACCESS_TOKEN_EXPIRE_HOURS * 3600,
        path="/"
    )

async def _login_response(db: AsyncSession, user: User, status_code: int = 200) -> JSONResponse:
    access_token = token_for_user(user)
    payload = LoginResponse(user=await build_user_response(db, user), access_token=access_token)
    response = JSONResponse(content=payload.model_dump(mode="json"), status_code=status_code)
    _set_token_cookie(response, access_token)
    return response

@router.post("/signup", response_model=LoginResponse, status_code=201)
async def signup(payload: SignupRequest, db: AsyncSession = Depends(get_db)):
    user = await create_user(db, email=payload.email, full_name=payload.full_name, password=payload.password)
    logger.info(f"New signup: user {user.id}")
    return await _login_response(db, user, status_code=201)

@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await get_user_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("Failed login attempt")
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account is disabled")
    return await _login_response(db, user)

@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Current user with roles"""
    return await build_user_response(db, user)

@router.post("/logout")
async def logout():
    response = JSONResponse({"message": "Logged out"})
    response.delete_cookie(COOKIE_NAME, path="/", samesite="none", secure=True)
    return response

@router.get("/google/login")
async def google_login(request: Request):
    if not settings.google_configured:
        raise HTTPException(status_code=503, detail="Google sign-in is not configured")
    redirect_uri = request.url_for('google_callback')
    return await oauth.google.authorize_redirect(request, redirect_uri)

@router.get("/google/callback")
async def google_callback(request: Request, db: AsyncSession = Depends(get_db)):
    try:
        token = await oauth.google.authorize_access_token(request)
        user_info = token.get('userinfo')

        if not user_info or not user_info.get('email'):
            raise HTTPException(status_code=400, detail="No user info from Google")

        user_email = user_info['email']
        user_name = user_info.get('name')
        google_id = user_info.get('sub')
        picture = user_info.get('picture')

        db_user = await get_user_by_email(db, user_email)
        if not db_user:
            db_user = await create_user(
                db,
                email=user_email,
                full_name=user_name or user_email.split("@")[0],
                google_id=google_id,
                picture=picture or "",
            )
        else:
            if user_name:
                db_user.full_name = user_name
            if picture:
                db_user.picture = picture
            db_user.google_id = google_id
            await db.commit()

        access_token = token_for_user(db_user)
        response = RedirectResponse(url=f"{FRONTEND_URL}/?auth=success&token={access_token}")
        _set_token_cookie(response, access_token)
        logger.info(f"Google sign-in for user {db_user.id}")
        return response

    except Exception as e:
        logger.error(f"Google sign-in failed: {e}")
        return RedirectResponse(url=f"{FRONTEND_URL}/?auth=error&message=auth_failed")
