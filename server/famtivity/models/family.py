"""Family profile and child model definitions."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base


class FamilyProfile(Base):
    """An onboarded family account, created from a waitlist entry."""

    __tablename__ = "family_profiles"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4())
    )

    waitlist_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("waitlist.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Preferences
    monthly_budget: Mapped[str | None] = mapped_column(String(50), nullable=True)
    max_travel_distance: Mapped[int] = mapped_column(Integer, nullable=False)
    preferred_times: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("max_travel_distance >= 0", name="ck_family_max_travel_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<FamilyProfile(id={self.id}, waitlist_id={self.waitlist_id})>"


class Child(Base):
    """A child belonging to a family profile."""

    __tablename__ = "children"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4())
    )

    family_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("family_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    interests: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    energy_level: Mapped[str | None] = mapped_column(String(20), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("age >= 0", name="ck_children_age_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Child(id={self.id}, family_id={self.family_id}, age={self.age})>"
