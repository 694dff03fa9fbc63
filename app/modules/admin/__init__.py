# Admin module
from app.modules.admin.services import AdminAuthenticator, SettingsAdminAuthenticator, get_authenticator

__all__ = ["AdminAuthenticator", "SettingsAdminAuthenticator", "get_authenticator"]
