import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from clausewise.models.base import Base, UUIDPrimaryKey


class SuggestionResponse(Base, UUIDPrimaryKey):
    __tablename__ = "suggestion_responses"
    __table_args__ = (
        UniqueConstraint(
            "report_id", "suggestion_index", "user_id", name="uq_suggestion_response_key"
        ),
    )

    report_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("review_reports.id", ondelete="CASCADE"), nullable=False
    )
    suggestion_index: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
