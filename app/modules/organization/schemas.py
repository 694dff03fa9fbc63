from pydantic import BaseModel, Field
from typing import Optional


class RegionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class RegionResponse(BaseModel):
    region_id: int
    name: str


class RegionCreated(BaseModel):
    message: str
    region_id: int


class StaffCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    role: str = Field(..., min_length=1, max_length=50)
    branch_id: Optional[int] = None


class StaffResponse(BaseModel):
    staff_id: int
    name: str
    role: str
    branch_location: Optional[str] = None
    loans_approved: int = 0


class StaffCreated(BaseModel):
    message: str
    staff_id: int


class BranchResponse(BaseModel):
    branch_id: int
    location: str
    region_name: Optional[str] = None
    total_staff: int = 0
    total_loans_approved: int = 0
