from sqlalchemy import Column, Integer, String, DateTime, Boolean, false
from sqlalchemy.sql import func
from app.db.session import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    contact_number = Column(String, nullable=True)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default=ROLE_USER, server_default=ROLE_USER)
    is_blocked = Column(Boolean, nullable=False, default=False, server_default=false())
    refresh_token = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
