from typing import Optional, Protocol
import logging

from app.core.config import settings
from app.core.security import constant_time_equals, create_access_token
from app.modules.admin.schemas import AdminIdentity, AdminLoginResponse

logger = logging.getLogger(__name__)


class AdminAuthenticator(Protocol):
    """Checks admin credentials; swap in a directory-backed one via dependency override"""

    async def authenticate(self, username: str, password: str) -> Optional[AdminIdentity]:
        ...


class SettingsAdminAuthenticator:
    """Single administrator whose credentials come from settings"""

    def __init__(self, username: str, password: str, display_name: str):
        self.username = username
        self.password = password
        self.display_name = display_name

    async def authenticate(self, username: str, password: str) -> Optional[AdminIdentity]:
        username_ok = constant_time_equals(username, self.username)
        password_ok = constant_time_equals(password, self.password)
        if not (username_ok and password_ok):
            return None
        return AdminIdentity(id=1, username=self.username, name=self.display_name)


def get_authenticator() -> AdminAuthenticator:
    return SettingsAdminAuthenticator(
        username=settings.ADMIN_USERNAME,
        password=settings.ADMIN_PASSWORD,
        display_name=settings.ADMIN_DISPLAY_NAME
    )


class AdminService:
    def __init__(self, authenticator: AdminAuthenticator):
        self.authenticator = authenticator

    async def login(self, username: str, password: str) -> Optional[AdminLoginResponse]:
        admin = await self.authenticator.authenticate(username, password)
        if admin is None:
            logger.warning(f"Rejected admin login for '{username}'")
            return None

        token = create_access_token(
            data={"sub": admin.username, "role": "admin", "admin_id": admin.id}
        )
        logger.info(f"Admin '{admin.username}' logged in")
        return AdminLoginResponse(admin=admin, access_token=token)
