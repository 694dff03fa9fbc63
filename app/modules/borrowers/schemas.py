from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Optional


class BorrowerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    contact: str = Field(..., min_length=1, max_length=50)
    income: Decimal = Field(..., gt=0)
    region_id: Optional[int] = None


class BorrowerResponse(BaseModel):
    borrower_id: int = Field(validation_alias="id")
    name: str
    contact: str
    income: float
    region_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BorrowerCreated(BaseModel):
    message: str
    borrower_id: int


class GuarantorBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    contact: str = Field(..., min_length=1, max_length=50)
    relation: Optional[str] = None
    borrower_id: int


class GuarantorCreate(GuarantorBase):
    pass


class GuarantorUpdate(GuarantorBase):
    pass


class GuarantorResponse(BaseModel):
    guarantor_id: int
    name: str
    contact: str
    relation: str
    borrower_id: int
    borrower_name: Optional[str] = None
    borrower_contact: Optional[str] = None


class GuarantorMessage(BaseModel):
    message: str
    guarantor_id: int
