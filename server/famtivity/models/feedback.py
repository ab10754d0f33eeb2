"""Activity feedback model definition."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base


class ActivityFeedback(Base):
    """Ratings and comments a family leaves for a booking."""

    __tablename__ = "activity_feedback"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4())
    )

    booking_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("bookings.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    family_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("family_profiles.id", ondelete="CASCADE"),
        nullable=False
    )
    child_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("children.id", ondelete="CASCADE"),
        nullable=False
    )
    activity_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("activities.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Ratings (1-5)
    overall_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    child_enjoyment: Mapped[int] = mapped_column(Integer, nullable=False)
    value_for_money: Mapped[int] = mapped_column(Integer, nullable=False)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("overall_rating BETWEEN 1 AND 5", name="ck_feedback_overall_rating_range"),
        CheckConstraint("child_enjoyment BETWEEN 1 AND 5", name="ck_feedback_child_enjoyment_range"),
        CheckConstraint("value_for_money BETWEEN 1 AND 5", name="ck_feedback_value_for_money_range"),
    )

    def __repr__(self) -> str:
        return f"<ActivityFeedback(id={self.id}, booking_id={self.booking_id})>"
