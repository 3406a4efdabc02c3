from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clausewise.models.base import Base, TimestampMixin, UUIDPrimaryKey


class ContractStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    EXPIRED = "expired"


class ContractType(str, enum.Enum):
    NDA = "nda"
    TRIAL_AGREEMENT = "trial_agreement"


# Operator-driven order; expired sits outside it and is terminal.
STATUS_ORDER = (ContractStatus.PENDING, ContractStatus.PROCESSING, ContractStatus.COMPLETED)


class Contract(Base, UUIDPrimaryKey, TimestampMixin):
    __tablename__ = "contracts"
    __table_args__ = (
        Index("ix_contracts_status_expires_at", "status", "expires_at"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str] = mapped_column(String(500), nullable=False)
    contract_type: Mapped[str] = mapped_column(String(30), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ContractStatus.PENDING.value
    )
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    file_deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    report: Mapped[ReviewReport | None] = relationship(
        "ReviewReport", back_populates="contract", cascade="all, delete-orphan", uselist=False
    )
