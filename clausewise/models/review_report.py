from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clausewise.models.base import Base, JSONType, TimestampMixin, UUIDPrimaryKey


class ReviewReport(Base, UUIDPrimaryKey, TimestampMixin):
    __tablename__ = "review_reports"

    contract_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("contracts.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    operator_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    overall_risk_level: Mapped[str] = mapped_column(String(10), nullable=False, default="medium")
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    contract_overview: Mapped[dict] = mapped_column(JSONType, default=dict, nullable=False)
    risk_clauses: Mapped[list] = mapped_column(JSONType, default=list, nullable=False)
    suggestions: Mapped[list] = mapped_column(JSONType, default=list, nullable=False)

    contract: Mapped[Contract] = relationship("Contract", back_populates="report")
