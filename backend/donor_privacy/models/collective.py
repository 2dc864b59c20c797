"""Collective ORM — accounts that send or receive funds.

Invariants:
    - type is one of STANDARD, ANONYMOUS_PROXY, HOST
    - For ANONYMOUS_PROXY, created_by_user_id is the owner and is non-null
    - host_collective_id points at the fiscal sponsor, if any

Design Decisions:
    - Single table for all variants: the repository maps `type` to the
      matching core variant, so nothing above infrastructure/ sees the string
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from donor_privacy.db.base import Base


class Collective(Base):
    __tablename__ = "collectives"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="STANDARD",
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    host_collective_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("collectives.id"), nullable=True,
    )
    created_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
