from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.core.jwt_config import decode_token, get_token_from_request
from app.core.exceptions import AccountBlocked, NotAuthenticated
from app.core.permissions import AuthContext, Permission, authorize
from app.services.user_service import get_user_by_id, get_user_by_email
from app.services.notification_service import EmailNotifier
from app.core.security import verify_password

async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)):
    token = get_token_from_request(request=request)
    payload = decode_token(token)
    user_id = payload.get("sub")

    if user_id is None:
        raise NotAuthenticated("Invalid authentication credentials")

    try:
        user = await get_user_by_id(db, int(user_id))
    except ValueError:
        raise NotAuthenticated("Invalid authentication credentials")

    if user is None:
        raise NotAuthenticated("User not found")

    if user.is_blocked:
        raise AccountBlocked()

    return user

async def get_auth_context(user = Depends(get_current_user)) -> AuthContext:
    return AuthContext.for_user(user)

def require_permission(permission: Permission):
    async def dep(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
        authorize(ctx, permission)
        return ctx
    return dep

async def authenticate_user(db:AsyncSession, email:str, password:str):
    user = await get_user_by_email(db, email)
    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user

_notifier = EmailNotifier()

def get_notifier() -> EmailNotifier:
    return _notifier
