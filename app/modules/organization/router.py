from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.modules.organization.schemas import (
    RegionCreate, RegionResponse, RegionCreated,
    StaffCreate, StaffResponse, StaffCreated, BranchResponse
)
from app.modules.organization.services import OrganizationService

router = APIRouter(prefix="/api", tags=["organization"])


@router.get("/regions", response_model=List[RegionResponse])
async def list_regions(db: AsyncSession = Depends(get_db)):
    return await OrganizationService(db).list_regions()


@router.post("/regions", response_model=RegionCreated)
async def create_region(data: RegionCreate, db: AsyncSession = Depends(get_db)):
    region = await OrganizationService(db).create_region(data)
    return RegionCreated(message="Region added successfully", region_id=region.id)


@router.get("/branches", response_model=List[BranchResponse])
async def list_branches(db: AsyncSession = Depends(get_db)):
    """Branches with staff and approval counts"""
    return await OrganizationService(db).list_branches()


@router.get("/staff", response_model=List[StaffResponse])
async def list_staff(db: AsyncSession = Depends(get_db)):
    """Staff with the number of loans each has approved"""
    return await OrganizationService(db).list_staff()


@router.post("/staff", response_model=StaffCreated)
async def create_staff(data: StaffCreate, db: AsyncSession = Depends(get_db)):
    staff = await OrganizationService(db).create_staff(data)
    return StaffCreated(message="Staff member added successfully", staff_id=staff.id)
