"""
Page model - one generated couple/friends/pet page
"""

from sqlalchemy import Column, String, DateTime, Boolean, Date, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from prasempre.utils.database import Base
import uuid
import enum


class PageType(str, enum.Enum):
    COUPLE = "couple"
    FRIENDS = "friends"
    PET = "pet"


class PageStatus(str, enum.Enum):
    PENDING_PAYMENT = "pending_payment"
    ACTIVE = "active"


class Page(Base):
    __tablename__ = "pages"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    slug = Column(String(120), unique=True, index=True, nullable=False)  # never changes once set
    type = Column(String(20), nullable=False)  # PageType enum

    # Content
    name1 = Column(String(50), nullable=False)
    name2 = Column(String(50))  # absent for pets
    occasion = Column(String(100))
    message = Column(Text, nullable=False)
    start_date = Column(Date, nullable=False)
    photo_urls = Column(JSON, nullable=False, default=list)

    # Plan and payment
    plan = Column(String(10), nullable=False, index=True)
    status = Column(String(30), nullable=False, default=PageStatus.PENDING_PAYMENT.value, index=True)
    billing_id = Column(String(100), unique=True, index=True)
    is_active = Column(Boolean, nullable=False, default=False)
    activated_at = Column(DateTime(timezone=True))

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def title(self) -> str:
        """Display title, e.g. "Ana & João" """
        if self.occasion:
            return self.occasion
        return f"{self.name1} & {self.name2}" if self.name2 else self.name1

    def __repr__(self):
        return f"<Page(slug='{self.slug}', plan='{self.plan}', status='{self.status}')>"
