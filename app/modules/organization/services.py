from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import List, Dict, Any
import logging

from app.core.exceptions import NotFoundError
from app.modules.organization.models import Region, Branch, Staff
from app.modules.organization.schemas import RegionCreate, StaffCreate
from app.modules.loans.models import LoanApproval

logger = logging.getLogger(__name__)


class OrganizationService:
    """Regions, branches and staff"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_regions(self) -> List[Dict[str, Any]]:
        result = await self.db.execute(
            select(Region.id.label("region_id"), Region.name).order_by(Region.id)
        )
        return [dict(row) for row in result.mappings().all()]

    async def create_region(self, data: RegionCreate) -> Region:
        region = Region(name=data.name)
        self.db.add(region)
        await self.db.commit()
        await self.db.refresh(region)
        logger.info(f"Region {region.id} created: {region.name}")
        return region

    async def list_branches(self) -> List[Dict[str, Any]]:
        """Branches with region name, staff headcount and approvals booked"""
        query = (
            select(
                Branch.id.label("branch_id"),
                Branch.location,
                Region.name.label("region_name"),
                func.count(func.distinct(Staff.id)).label("total_staff"),
                func.count(func.distinct(LoanApproval.id)).label("total_loans_approved"),
            )
            .select_from(Branch)
            .outerjoin(Region, Branch.region_id == Region.id)
            .outerjoin(Staff, Staff.branch_id == Branch.id)
            .outerjoin(LoanApproval, LoanApproval.branch_id == Branch.id)
            .group_by(Branch.id, Branch.location, Region.name)
            .order_by(Branch.id)
        )
        result = await self.db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def list_staff(self) -> List[Dict[str, Any]]:
        """Staff with branch location and number of loans approved"""
        query = (
            select(
                Staff.id.label("staff_id"),
                Staff.name,
                Staff.role,
                Branch.location.label("branch_location"),
                func.count(LoanApproval.id).label("loans_approved"),
            )
            .select_from(Staff)
            .outerjoin(Branch, Staff.branch_id == Branch.id)
            .outerjoin(LoanApproval, LoanApproval.staff_id == Staff.id)
            .group_by(Staff.id, Staff.name, Staff.role, Branch.location)
            .order_by(Staff.id)
        )
        result = await self.db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def create_staff(self, data: StaffCreate) -> Staff:
        if data.branch_id is not None:
            branch = await self.db.get(Branch, data.branch_id)
            if branch is None:
                raise NotFoundError("Branch not found")

        staff = Staff(name=data.name, role=data.role, branch_id=data.branch_id)
        self.db.add(staff)
        await self.db.commit()
        await self.db.refresh(staff)
        logger.info(f"Staff member {staff.id} added ({staff.role})")
        return staff
