from datetime import datetime
from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator
from app.models.group import DEFAULT_MAX_MEMBERS
from app.schemas.user import UserBrief

class GroupCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    subject: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1)
    image: str | None = None
    max_members: int = Field(default=DEFAULT_MAX_MEMBERS, ge=1)

    @field_validator("title", "subject", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

class GroupUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    subject: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=1)
    image: str | None = None
    max_members: int | None = Field(default=None, ge=1)

    @field_validator("title", "subject", "description")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

class MessageCreate(BaseModel):
    content: str = Field(min_length=1, max_length=5000)

    @field_validator("content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

class MaterialCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    url: str = Field(min_length=1, max_length=2000)

    @field_validator("title", "url")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

class MessageOut(BaseModel):
    id: int
    user: UserBrief | None = None
    content: str
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)

class MaterialOut(BaseModel):
    id: int
    title: str
    url: str
    uploader: UserBrief | None = None
    uploaded_at: datetime

    model_config = ConfigDict(from_attributes=True)

class GroupOut(BaseModel):
    id: int
    title: str
    subject: str
    description: str
    image: str | None = None
    status: str
    max_members: int
    member_count: int
    creator: UserBrief
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

class GroupDetailOut(GroupOut):
    members: List[UserBrief]
    messages: List[MessageOut]
    materials: List[MaterialOut]

class ProfileOut(BaseModel):
    id: int
    name: str
    email: str
    contact_number: str | None = None
    role: str
    is_blocked: bool
    created_at: datetime | None = None
    joined_groups: List[GroupOut]
    created_groups: List[GroupOut]
