"""Password hashing and the admin dashboard's bearer tokens.

Tokens identify a user by username (``sub``) and carry the role the
``require_admin`` dependency checks; there are no refresh tokens.
"""
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from typing import Tuple
import jwt
from storefront.core.config import settings

pwd_ctx = CryptContext(schemes=['bcrypt'], deprecated='auto')

TOKEN_TYPE = 'access'

def hash_password(p: str) -> str: return pwd_ctx.hash(p)

def verify_password(p: str, h: str) -> bool: return pwd_ctx.verify(p, h)

def create_access_token(username: str, role: str) -> Tuple[str, datetime]:
    issued = datetime.now(timezone.utc)
    exp = issued + timedelta(seconds=settings.ACCESS_TOKEN_EXPIRES_SECONDS)
    claims = {'sub': username, 'role': role, 'type': TOKEN_TYPE, 'iat': issued, 'exp': exp}
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM), exp

def decode_token(token: str) -> dict:
    """Return the claims of a valid token; raises ``jwt.PyJWTError`` otherwise."""
    return jwt.decode(
        token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM],
        options={'require': ['sub', 'exp']},
    )
