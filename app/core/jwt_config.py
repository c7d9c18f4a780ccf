import uuid
import jwt
from jwt import ExpiredSignatureError, InvalidTokenError
from datetime import datetime, timedelta, timezone
from fastapi import Request
from app.core.config import settings
from app.core.exceptions import NotAuthenticated

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"

def _encode(data: dict, token_type: str, expires: timedelta) -> str:
    to_encode = data.copy()
    to_encode.update({
        "exp": datetime.now(timezone.utc) + expires,
        "type": token_type,
        "jti": uuid.uuid4().hex,
    })
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm = settings.JWT_ALGO)

def create_access_token(data: dict, expires_min: int | None = None):
    minutes = expires_min if expires_min is not None else settings.ACCESS_TOKEN_MINUTES
    return _encode(data, "access", timedelta(minutes=minutes))

def create_refresh_token(data: dict, expires_days: int | None = None):
    days = expires_days if expires_days is not None else settings.REFRESH_TOKEN_DAYS
    return _encode(data, "refresh", timedelta(days=days))

def decode_token(token : str, token_type: str = "access"):
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms = [settings.JWT_ALGO]
        )
    except ExpiredSignatureError:
        raise NotAuthenticated("Token has expired")
    except InvalidTokenError:
        raise NotAuthenticated("Invalid token")

    if payload.get("type") != token_type:
        raise NotAuthenticated("Invalid token")

    return payload

def get_token_from_request(request : Request) -> str:
    token = None
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header.split(" ", 1)[1]

    if not token:
        token = request.cookies.get(ACCESS_COOKIE)

    if not token:
        raise NotAuthenticated("Not authenticated")

    return token.strip()
