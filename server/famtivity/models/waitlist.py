"""Waitlist model definition."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, CheckConstraint, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base


class WaitlistEntry(Base):
    """A prospective user's signup record prior to onboarding."""

    __tablename__ = "waitlist"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4())
    )

    # Signup details
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(10), nullable=False)
    family_size: Mapped[int] = mapped_column(Integer, nullable=False)
    source: Mapped[str] = mapped_column(String(50), nullable=False, default="website")

    # Onboarding state
    user_role: Mapped[str] = mapped_column(String(20), nullable=False, default="waitlist")
    completed_onboarding: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now(),
        index=True
    )

    __table_args__ = (
        CheckConstraint("family_size > 0", name="ck_waitlist_family_size_positive"),
        UniqueConstraint("email", name="uq_waitlist_email"),
    )

    def __repr__(self) -> str:
        return (
            f"<WaitlistEntry(id={self.id}, email='{self.email}', "
            f"completed_onboarding={self.completed_onboarding})>"
        )
