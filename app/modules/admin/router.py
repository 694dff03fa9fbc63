"""
Admin authentication endpoints.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.modules.admin.schemas import AdminLoginRequest, AdminLoginResponse
from app.modules.admin.services import AdminAuthenticator, AdminService, get_authenticator

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post(
    "/login",
    response_model=AdminLoginResponse,
    responses={401: {"description": "Invalid credentials"}}
)
async def admin_login(
    request: AdminLoginRequest,
    authenticator: AdminAuthenticator = Depends(get_authenticator)
):
    """Admin login; the returned bearer token authorizes loan decisions"""
    response = await AdminService(authenticator).login(request.username, request.password)
    if response is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"success": False, "error": "Invalid credentials"}
        )
    return response
