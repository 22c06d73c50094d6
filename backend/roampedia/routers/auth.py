import logging
import uuid
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, status
from jose import jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.config import settings
from roampedia.database import get_db
from roampedia.dependencies import decode_token, get_current_user
from roampedia.models.user import User
from roampedia.schemas.auth import (
    AuthResponse,
    DeleteAccountRequest,
    LoginRequest,
    LogoutRequest,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPairResponse,
    UserResponse,
)
from roampedia.services.rate_limiter import RateLimitExceeded, SlidingWindowRateLimiter

logger = logging.getLogger(__name__)

router = APIRouter()
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
login_limiter = SlidingWindowRateLimiter(
    settings.login_rate_limit_attempts, settings.login_rate_limit_window_seconds
)

DEFAULT_PREFERENCES = {"email_notifications": True, "newsletter": False, "theme": "auto"}


def create_access_token(user_id: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {"sub": user_id, "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def create_refresh_token(user_id: str) -> tuple[str, datetime]:
    expire = datetime.now(timezone.utc) + timedelta(days=settings.refresh_token_expire_days)
    payload = {"sub": user_id, "exp": expire, "type": "refresh", "jti": uuid.uuid4().hex}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm), expire


def _issue_tokens(user: User, request: Request, replace_existing: bool = False) -> tuple[str, str]:
    """Create an access/refresh pair and remember the refresh token on the user."""
    access_token = create_access_token(str(user.id))
    refresh_token, expires_at = create_refresh_token(str(user.id))
    now = datetime.now(timezone.utc)
    existing = [] if replace_existing else [
        t for t in (user.refresh_tokens or []) if t.get("expires_at", "") > now.isoformat()
    ]
    user.refresh_tokens = existing + [{
        "token": refresh_token,
        "created_at": now.isoformat(),
        "expires_at": expires_at.isoformat(),
        "device": request.headers.get("user-agent", "Unknown"),
    }]
    return access_token, refresh_token


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


@router.post("/register", status_code=201, response_model=AuthResponse)
async def register(req: RegisterRequest, request: Request, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.email == req.email))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="User with this email already exists")

    user = User(
        email=req.email,
        password_hash=pwd_context.hash(req.password),
        first_name=req.first_name,
        last_name=req.last_name,
        display_name=req.first_name or req.email.split("@")[0],
        role="user",
        is_active=True,
        preferences=dict(DEFAULT_PREFERENCES),
        refresh_tokens=[],
    )
    db.add(user)
    await db.flush()

    access_token, refresh_token = _issue_tokens(user, request)
    user.last_login = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(user)
    logger.info(f"New user registered: {user.email}")

    return AuthResponse(
        message="Registration successful",
        user=UserResponse.model_validate(user),
        access_token=access_token,
        refresh_token=refresh_token,
    )


@router.post("/login", response_model=AuthResponse)
async def login(req: LoginRequest, request: Request, db: AsyncSession = Depends(get_db)):
    try:
        login_limiter.hit(_client_key(request))
    except RateLimitExceeded as e:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={"error": "Too many attempts, please try again later", "retry_after": e.retry_after},
            headers={"Retry-After": str(e.retry_after)},
        )

    result = await db.execute(select(User).where(User.email == req.email))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account is deactivated")
    if not pwd_context.verify(req.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    access_token, refresh_token = _issue_tokens(user, request)
    user.last_login = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(user)

    return AuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(user),
        access_token=access_token,
        refresh_token=refresh_token,
    )


@router.post("/refresh", response_model=TokenPairResponse)
async def refresh(req: RefreshRequest, db: AsyncSession = Depends(get_db)):
    """Issue a new access token; the refresh token itself is kept."""
    try:
        user_id = decode_token(req.refresh_token, expected_type="refresh")
    except HTTPException as e:
        if e.detail == "Invalid token type":
            raise
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    now = datetime.now(timezone.utc).isoformat()
    known = any(
        t.get("token") == req.refresh_token and t.get("expires_at", "") > now
        for t in (user.refresh_tokens or [])
    )
    if not known:
        raise HTTPException(status_code=401, detail="Refresh token expired or invalid")

    return TokenPairResponse(
        access_token=create_access_token(str(user.id)),
        refresh_token=req.refresh_token,
    )


@router.post("/logout")
async def logout(
    req: LogoutRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if req.refresh_token:
        user.refresh_tokens = [
            t for t in (user.refresh_tokens or []) if t.get("token") != req.refresh_token
        ]
        await db.commit()
    return {"success": True, "message": "Logged out successfully"}


@router.post("/logout-all")
async def logout_all(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    user.refresh_tokens = []
    await db.commit()
    return {"success": True, "message": "Logged out from all devices"}


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    return {"success": True, "user": UserResponse.model_validate(user)}


@router.put("/profile")
async def update_profile(
    req: ProfileUpdateRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if req.first_name is not None:
        user.first_name = req.first_name.strip()
    if req.last_name is not None:
        user.last_name = req.last_name.strip()
    if req.display_name is not None:
        user.display_name = req.display_name.strip()
    if req.avatar is not None:
        user.avatar = str(req.avatar)

    prefs = dict(DEFAULT_PREFERENCES) | dict(user.preferences or {})
    if req.theme is not None:
        prefs["theme"] = req.theme
    if req.email_notifications is not None:
        prefs["email_notifications"] = req.email_notifications
    if req.newsletter is not None:
        prefs["newsletter"] = req.newsletter
    user.preferences = prefs

    await db.commit()
    await db.refresh(user)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": UserResponse.model_validate(user),
    }


@router.put("/password", response_model=TokenPairResponse)
async def change_password(
    req: PasswordChangeRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Change password, sign out every other session and hand back a fresh token pair."""
    if not pwd_context.verify(req.current_password, user.password_hash):
        raise HTTPException(status_code=401, detail="Current password is incorrect")

    user.password_hash = pwd_context.hash(req.new_password)
    access_token, refresh_token = _issue_tokens(user, request, replace_existing=True)
    await db.commit()
    logger.info(f"Password changed for {user.email}")

    return TokenPairResponse(
        message="Password changed successfully",
        access_token=access_token,
        refresh_token=refresh_token,
    )


@router.delete("/account")
async def delete_account(
    req: DeleteAccountRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Soft-delete: deactivate the account and drop its sessions."""
    if not pwd_context.verify(req.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Incorrect password")

    user.is_active = False
    user.refresh_tokens = []
    await db.commit()
    logger.info(f"Account deactivated: {user.email}")
    return {"success": True, "message": "Account deleted successfully"}
