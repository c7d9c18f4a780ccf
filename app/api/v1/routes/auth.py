from fastapi import APIRouter, Depends, Response, Cookie
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.core.config import settings
from app.core.exceptions import AccountBlocked, NotAuthenticated, Unauthorized
from app.schemas.user import UserCreate, UserOut, UserLogin, TokenOut
from app.models.user import User
from app.services.user_service import create_user, get_user_by_id, set_refresh_token
from app.core.dependencies import authenticate_user, get_current_user
from app.core.jwt_config import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    create_access_token,
    create_refresh_token,
    decode_token,
)

router = APIRouter()

async def issue_tokens(response: Response, db: AsyncSession, user: User) -> TokenOut:
    access = create_access_token({"sub": str(user.id), "role": user.role})
    refresh = create_refresh_token({"sub": str(user.id)})

    await set_refresh_token(db, user, refresh)

    for key, value in ((REFRESH_COOKIE, refresh), (ACCESS_COOKIE, access)):
        response.set_cookie(
            key=key,
            value=value,
            httponly=True,
            secure=settings.COOKIE_SECURE,
            samesite="lax"
        )

    return TokenOut(token=access, user=UserOut.model_validate(user))

async def _login(data: UserLogin, db: AsyncSession):
    user = await authenticate_user(db, data.email, data.password)

    if not user:
        raise NotAuthenticated("Invalid email or password")

    if user.is_blocked:
        raise AccountBlocked()

    return user

@router.post("/register", response_model=TokenOut, status_code=201)
async def register_user(data:UserCreate, response: Response, db:AsyncSession = Depends(get_db)):
    user = await create_user(db, data)
    return await issue_tokens(response, db, user)

@router.post("/login", response_model=TokenOut)
async def login_user(data:UserLogin, response : Response, db:AsyncSession = Depends(get_db)):
    user = await _login(data, db)
    return await issue_tokens(response, db, user)

@router.post("/admin/login", response_model=TokenOut)
async def login_admin(data:UserLogin, response : Response, db:AsyncSession = Depends(get_db)):
    user = await _login(data, db)

    if not user.is_admin:
        raise Unauthorized("Access denied. Admin privileges required.")

    return await issue_tokens(response, db, user)

@router.get("/me", response_model=UserOut)
async def read_users_me(current_user: User = Depends(get_current_user)):
    return UserOut.model_validate(current_user)

@router.post("/refresh", response_model=TokenOut)
async def refresh_token(
    response: Response,
    db: AsyncSession = Depends(get_db),
    refresh_cookie: str | None = Cookie(None, alias=REFRESH_COOKIE)
):
    if refresh_cookie is None:
        raise NotAuthenticated("Refresh token missing")

    payload = decode_token(refresh_cookie, token_type="refresh")

    try:
        user = await get_user_by_id(db, int(payload.get("sub")))
    except (TypeError, ValueError):
        raise NotAuthenticated("Invalid refresh token")

    if not user:
        raise NotAuthenticated("User not found")

    if user.refresh_token != refresh_cookie:
        raise NotAuthenticated("Refresh token revoked or rotated")

    if user.is_blocked:
        raise AccountBlocked()

    return await issue_tokens(response, db, user)

@router.post("/logout")
async def logout_user(response: Response, db: AsyncSession = Depends(get_db), current_user : User = Depends(get_current_user)):
    await set_refresh_token(db, current_user, None)

    response.delete_cookie(REFRESH_COOKIE)
    response.delete_cookie(ACCESS_COOKIE)
    return {"message": "Logged out"}
