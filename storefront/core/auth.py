from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from storefront.security.utils import TOKEN_TYPE, decode_token
import jwt

security = HTTPBearer(auto_error=False)

def get_current_identity(creds: HTTPAuthorizationCredentials = Depends(security)) -> dict:
    if not creds:
        raise HTTPException(status_code=401, detail="Access token required")
    try:
        payload = decode_token(creds.credentials)
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    if payload.get("type") != TOKEN_TYPE:
        raise HTTPException(status_code=401, detail="Invalid access token")
    return payload

def require_admin(identity: dict = Depends(get_current_identity)):
    if identity.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return identity
