from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.sql import func
from app.core.database import Base


class Region(Base):
    """Geographic region that groups borrowers and branches"""
    __tablename__ = "regions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Region(id={self.id}, name={self.name})>"


class Branch(Base):
    """Branch office; approvals are booked against a branch"""
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, index=True)
    location = Column(String(150), nullable=False)
    region_id = Column(Integer, ForeignKey("regions.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Branch(id={self.id}, location={self.location})>"


class Staff(Base):
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    role = Column(String(50), nullable=False)  # Loan Officer, Manager, ...
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Staff(id={self.id}, name={self.name}, role={self.role})>"
