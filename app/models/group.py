from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.session import Base

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"

DEFAULT_MAX_MEMBERS = 50

def utcnow():
    return datetime.now(timezone.utc)

class Group(Base):
    __tablename__ = 'groups'

    id = Column(Integer, primary_key=True, index = True)
    title = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String, nullable=True)
    creator_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String, nullable=False, default=STATUS_PENDING, server_default=STATUS_PENDING, index=True)
    max_members = Column(Integer, nullable=False, default=DEFAULT_MAX_MEMBERS)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    creator = relationship("User", lazy="selectin")
    memberships = relationship(
        "GroupMember",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="GroupMember.id",
        lazy="selectin",
    )
    messages = relationship(
        "GroupMessage",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="GroupMessage.id",
        lazy="selectin",
    )
    materials = relationship(
        "Material",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="Material.id",
        lazy="selectin",
    )

    @property
    def members(self):
        return [m.user for m in self.memberships]

    @property
    def member_ids(self):
        return [m.user_id for m in self.memberships]

    @property
    def member_count(self) -> int:
        return len(self.memberships)
