# Organization module
from app.modules.organization.models import Region, Branch, Staff

__all__ = ["Region", "Branch", "Staff"]
