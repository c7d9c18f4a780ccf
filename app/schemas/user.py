from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    contact_number: str = Field(min_length=1, max_length=30)
    password: str = Field(min_length=6)
    terms_accepted: bool = False

    @field_validator("name", "contact_number")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    contact_number: str | None = Field(default=None, min_length=1, max_length=30)

    @field_validator("name", "contact_number")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

class UserBrief(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)

class UserOut(BaseModel):
    id: int
    name: str
    email: str
    contact_number: str | None = None
    role: str
    is_blocked: bool
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

class TokenOut(BaseModel):
    token: str
    user: UserOut

class ProfileUpdateOut(BaseModel):
    message: str
    user: UserOut
