from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from typing import Any, Dict, Optional
from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.security import decode_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/admin/login", auto_error=False)


async def get_current_admin(token: Optional[str] = Depends(oauth2_scheme)) -> Dict[str, Any]:
    """Resolve the admin identity carried by the bearer token"""
    if not token:
        raise AuthenticationError("Not authenticated")

    payload = decode_token(token)
    username = payload.get("sub")
    token_type = payload.get("type")
    role = payload.get("role")

    if username is None or token_type != "access" or role != "admin":
        raise AuthenticationError("Could not validate credentials")

    return {"username": username, "admin_id": payload.get("admin_id")}


async def get_decision_admin(token: Optional[str] = Depends(oauth2_scheme)) -> Optional[Dict[str, Any]]:
    """Admin identity for loan decisions; None while the guard is switched off"""
    if not settings.REQUIRE_ADMIN_FOR_DECISIONS:
        return None
    return await get_current_admin(token)
