from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from typing import List, Dict, Any
import logging

from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.modules.borrowers.models import Borrower, Guarantor, LoanGuarantor
from app.modules.borrowers.schemas import BorrowerCreate, GuarantorCreate, GuarantorUpdate
from app.modules.organization.models import Region

logger = logging.getLogger(__name__)

DEFAULT_RELATION = "Friend"


class BorrowerService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_borrower(self, borrower_id: int) -> Borrower:
        borrower = await self.db.get(Borrower, borrower_id)
        if borrower is None:
            raise NotFoundError("Borrower not found", {"borrower_id": borrower_id})
        return borrower

    async def list_borrowers(self) -> List[Borrower]:
        result = await self.db.execute(select(Borrower).order_by(Borrower.id.desc()))
        return list(result.scalars().all())

    async def create_borrower(self, data: BorrowerCreate) -> Borrower:
        region_id = data.region_id or settings.DEFAULT_REGION_ID
        if await self.db.get(Region, region_id) is None:
            raise NotFoundError("Region not found", {"region_id": region_id})

        borrower = Borrower(
            name=data.name,
            contact=data.contact,
            income=data.income,
            region_id=region_id
        )
        self.db.add(borrower)
        await self.db.commit()
        await self.db.refresh(borrower)
        logger.info(f"Borrower {borrower.id} registered in region {region_id}")
        return borrower


class GuarantorService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _require_borrower(self, borrower_id: int) -> None:
        if await self.db.get(Borrower, borrower_id) is None:
            raise NotFoundError("Borrower not found", {"borrower_id": borrower_id})

    async def get_guarantor(self, guarantor_id: int) -> Guarantor:
        guarantor = await self.db.get(Guarantor, guarantor_id)
        if guarantor is None:
            raise NotFoundError("Guarantor not found", {"guarantor_id": guarantor_id})
        return guarantor

    async def list_guarantors(self) -> List[Dict[str, Any]]:
        """Guarantors with the name and contact of the borrower they back"""
        query = (
            select(
                Guarantor.id.label("guarantor_id"),
                Guarantor.name,
                Guarantor.contact,
                Guarantor.relation,
                Guarantor.borrower_id,
                Borrower.name.label("borrower_name"),
                Borrower.contact.label("borrower_contact"),
            )
            .select_from(Guarantor)
            .outerjoin(Borrower, Guarantor.borrower_id == Borrower.id)
            .order_by(Guarantor.id.desc())
        )
        result = await self.db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def create_guarantor(self, data: GuarantorCreate) -> Guarantor:
        await self._require_borrower(data.borrower_id)

        guarantor = Guarantor(
            name=data.name,
            contact=data.contact,
            relation=data.relation or DEFAULT_RELATION,
            borrower_id=data.borrower_id
        )
        self.db.add(guarantor)
        await self.db.commit()
        await self.db.refresh(guarantor)
        logger.info(f"Guarantor {guarantor.id} added for borrower {guarantor.borrower_id}")
        return guarantor

    async def update_guarantor(self, guarantor_id: int, data: GuarantorUpdate) -> Guarantor:
        guarantor = await self.get_guarantor(guarantor_id)
        await self._require_borrower(data.borrower_id)

        guarantor.name = data.name
        guarantor.contact = data.contact
        guarantor.relation = data.relation or guarantor.relation
        guarantor.borrower_id = data.borrower_id

        await self.db.commit()
        await self.db.refresh(guarantor)
        return guarantor

    async def delete_guarantor(self, guarantor_id: int) -> int:
        """Delete a guarantor together with its loan links"""
        guarantor = await self.get_guarantor(guarantor_id)

        await self.db.execute(delete(LoanGuarantor).where(LoanGuarantor.guarantor_id == guarantor_id))
        await self.db.delete(guarantor)
        await self.db.commit()
        logger.info(f"Guarantor {guarantor_id} deleted")
        return guarantor_id
