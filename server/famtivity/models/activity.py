"""Activity and recommendation model definitions."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, Float, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base


class Activity(Base):
    """A bookable activity offered to families."""

    __tablename__ = "activities"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4())
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    # Age range (inclusive)
    min_age: Mapped[int] = mapped_column(Integer, nullable=False)
    max_age: Mapped[int] = mapped_column(Integer, nullable=False)

    price_per_month: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)

    # Location
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<Activity(id={self.id}, name='{self.name}', category='{self.category}')>"


class ActivityRecommendation(Base):
    """A ranked activity suggestion for a child. Read-only to this service."""

    __tablename__ = "activity_recommendations"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4())
    )

    child_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("children.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    activity_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("activities.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    match_score: Mapped[float] = mapped_column(Float, nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now()
    )

    def __repr__(self) -> str:
        return (
            f"<ActivityRecommendation(child_id={self.child_id}, "
            f"activity_id={self.activity_id}, match_score={self.match_score})>"
        )
