"""SQLAlchemy ORM models for savings goals and allocation proposals"""

import uuid
from sqlalchemy import Column, BigInteger, Date, DateTime, Float, ForeignKey, Integer, JSON, Text, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class SavingsGoalRecord(Base):
    """Savings goal owned by a user"""

    __tablename__ = "savings_goal"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    target_amount_cents = Column(BigInteger, nullable=False)
    current_amount_cents = Column(BigInteger, nullable=False, default=0)
    allocation_percentage = Column(Float, nullable=False, default=0.0)
    sequence = Column(Integer, nullable=False)  # per-user creation order, drives strategic line order
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class AllocationRecord(Base):
    """Income allocation proposal and its confirmation state"""

    __tablename__ = "allocation"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    income_cents = Column(BigInteger, nullable=False)
    income_date = Column(Date, nullable=False)
    status = Column(Text, nullable=False, default="proposed")
    living_reserve_cents = Column(BigInteger, nullable=False)
    free_cash_cents = Column(BigInteger, nullable=False)
    survival = Column(JSON, nullable=False)  # [{"label", "amount_cents"}] - fixed once proposed
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    strategic_lines = relationship(
        "StrategicLineRecord",
        back_populates="allocation",
        cascade="all, delete-orphan",
        order_by="StrategicLineRecord.position",
    )


class StrategicLineRecord(Base):
    """Per-goal disbursement within an allocation"""

    __tablename__ = "allocation_strategic_line"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    allocation_id = Column(Uuid(as_uuid=True), ForeignKey("allocation.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    goal_name = Column(Text, nullable=False)
    amount_cents = Column(BigInteger, nullable=False)

    allocation = relationship("AllocationRecord", back_populates="strategic_lines")
