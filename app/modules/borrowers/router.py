from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.modules.borrowers.schemas import (
    BorrowerCreate, BorrowerResponse, BorrowerCreated,
    GuarantorCreate, GuarantorUpdate, GuarantorResponse, GuarantorMessage
)
from app.modules.borrowers.services import BorrowerService, GuarantorService

router = APIRouter(prefix="/api", tags=["borrowers"])


# ============ Borrowers ============

@router.get("/borrowers", response_model=List[BorrowerResponse])
async def list_borrowers(db: AsyncSession = Depends(get_db)):
    """List borrowers, newest first"""
    return await BorrowerService(db).list_borrowers()


@router.post("/borrowers", response_model=BorrowerCreated)
async def create_borrower(data: BorrowerCreate, db: AsyncSession = Depends(get_db)):
    borrower = await BorrowerService(db).create_borrower(data)
    return BorrowerCreated(message="Borrower registered successfully", borrower_id=borrower.id)


# ============ Guarantors ============

@router.get("/guarantors", response_model=List[GuarantorResponse])
async def list_guarantors(db: AsyncSession = Depends(get_db)):
    return await GuarantorService(db).list_guarantors()


@router.post("/guarantors", response_model=GuarantorMessage)
async def create_guarantor(data: GuarantorCreate, db: AsyncSession = Depends(get_db)):
    guarantor = await GuarantorService(db).create_guarantor(data)
    return GuarantorMessage(message="Guarantor added successfully", guarantor_id=guarantor.id)


@router.put("/guarantors/{guarantor_id}", response_model=GuarantorMessage)
async def update_guarantor(
    guarantor_id: int,
    data: GuarantorUpdate,
    db: AsyncSession = Depends(get_db)
):
    guarantor = await GuarantorService(db).update_guarantor(guarantor_id, data)
    return GuarantorMessage(message="Guarantor updated successfully", guarantor_id=guarantor.id)


@router.delete("/guarantors/{guarantor_id}", response_model=GuarantorMessage)
async def delete_guarantor(guarantor_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a guarantor and detach it from any loans"""
    deleted_id = await GuarantorService(db).delete_guarantor(guarantor_id)
    return GuarantorMessage(message="Guarantor deleted successfully", guarantor_id=deleted_id)
