import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from clausewise.models.base import Base, UUIDPrimaryKey


class ReportFeedback(Base, UUIDPrimaryKey):
    __tablename__ = "report_feedback"
    __table_args__ = (
        UniqueConstraint("report_id", "user_id", name="uq_report_feedback_user"),
        CheckConstraint("satisfaction_rating BETWEEN 1 AND 5", name="ck_feedback_satisfaction"),
    )

    report_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("review_reports.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    satisfaction_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    efficiency_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    willingness_to_pay: Mapped[str | None] = mapped_column(String(30), nullable=True)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    interview_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
