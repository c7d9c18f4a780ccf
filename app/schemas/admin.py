from typing import List, Literal
from pydantic import BaseModel, Field, model_validator
from app.schemas.group import GroupOut

class GroupNotification(BaseModel):
    user_email: str
    user_name: str
    group_title: str
    group_subject: str = ""
    group_description: str = ""
    status: str

class ModerationOut(BaseModel):
    message: str
    group: GroupOut
    notification_data: GroupNotification
    notification_sent: bool

class BroadcastCreate(BaseModel):
    recipient_type: Literal["all", "group", "selected"]
    subject: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)
    group_id: int | None = None
    user_ids: List[int] = []

    @model_validator(mode="after")
    def check_recipients(self):
        if self.recipient_type == "group" and self.group_id is None:
            raise ValueError("group_id is required when recipient_type is 'group'")
        if self.recipient_type == "selected" and not self.user_ids:
            raise ValueError("user_ids is required when recipient_type is 'selected'")
        return self

class BroadcastOut(BaseModel):
    sent: int
    failed: int
    total: int
