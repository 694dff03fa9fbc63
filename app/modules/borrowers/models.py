from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from app.core.database import Base


class Borrower(Base):
    __tablename__ = "borrowers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    contact = Column(String(50), nullable=False)
    income = Column(Numeric(12, 2), nullable=False)
    region_id = Column(Integer, ForeignKey("regions.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Borrower(id={self.id}, name={self.name})>"


class Guarantor(Base):
    """Person vouching for a borrower; may back several of their loans"""
    __tablename__ = "guarantors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    contact = Column(String(50), nullable=False)
    relation = Column(String(50), nullable=False, default="Friend")
    borrower_id = Column(Integer, ForeignKey("borrowers.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class LoanGuarantor(Base):
    """Link between a loan and a guarantor backing it"""
    __tablename__ = "loan_guarantors"
    __table_args__ = (
        UniqueConstraint("loan_id", "guarantor_id", name="uq_loan_guarantor"),
    )

    id = Column(Integer, primary_key=True, index=True)
    loan_id = Column(Integer, ForeignKey("loans.id"), nullable=False, index=True)
    guarantor_id = Column(Integer, ForeignKey("guarantors.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
